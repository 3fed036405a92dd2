from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='SurveyResponse',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('submission_id', models.CharField(
                    blank=True,
                    help_text='Client-generated identifier used to drop duplicate deliveries.',
                    max_length=64,
                    null=True,
                    unique=True,
                )),
                ('timestamp', models.DateTimeField()),
                ('answers', models.JSONField(default=dict)),
                ('feedback', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['id'],
            },
        ),
    ]
