from django.urls import path

from . import views

urlpatterns = [
    path('', views.dashboard_view, name='results_dashboard'),
    path('api/', views.results_api, name='results_api'),
]
