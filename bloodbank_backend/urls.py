from django.contrib import admin
from django.urls import path, include

from . import views

urlpatterns = [
    # Health
    path('', views.health_check, name='home'),
    path('health', views.health_check, name='health_check'),

    # Admin
    path('admin/', admin.site.urls),

    # Apps
    path('', include('accounts.urls')),
    path('', include('donations.urls')),
    path('', include('patients.urls')),
    path('', include('api.urls')),
]
