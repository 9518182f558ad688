from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from . import views

urlpatterns = [
    # ========================================
    # REGISTRATION
    # ========================================
    path('register-donor', views.register_donor, name='register_donor'),
    path('register-patient', views.register_patient, name='register_patient'),
    path('register-blood-bank', views.register_blood_bank, name='register_blood_bank'),

    # ========================================
    # LOGIN (one endpoint per account type)
    # ========================================
    path('donor-login', views.donor_login, name='donor_login'),
    path('patient-login', views.patient_login, name='patient_login'),
    path('admin-login', views.admin_login, name='admin_login'),

    # ========================================
    # SESSION
    # ========================================
    path('auth/me', views.verify_auth, name='verify_auth'),
    path('logout', views.logout, name='logout'),
    path('token/refresh', TokenRefreshView.as_view(), name='token_refresh'),
]
