from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('results/', include('results.urls')),
    path('', include('survey.urls')),
]
