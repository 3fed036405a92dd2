from django.urls import path

from . import views

urlpatterns = [
    path('', views.survey_view, name='survey'),
    path('api/questions/', views.questions_api, name='survey_questions'),
    path('api/exec/', views.collector_api, name='collector'),
]
