from django.urls import path

from . import views

urlpatterns = [
    path('getByCity', views.get_by_city, name='get_by_city'),
    path('blood-banks', views.blood_bank_directory, name='blood_bank_directory'),
    path('stats', views.dashboard_stats, name='dashboard_stats'),
]
