from django.urls import path

from . import views

urlpatterns = [
    # ========================================
    # BLOOD BANK
    # ========================================
    path('donations/accept', views.accept_donation, name='accept_donation'),
    path('donations/units', views.blood_units, name='blood_units'),
    path('donations/requests', views.donation_requests, name='donation_requests'),
    path('donations/<str:donation_request_id>/reject', views.reject_donation, name='reject_donation'),

    # ========================================
    # DONOR
    # ========================================
    path('donate', views.donate, name='donate'),
    path('donations/<str:donation_request_id>/certificate', views.download_certificate, name='download_certificate'),
]
