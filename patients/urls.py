from django.urls import path

from . import views

urlpatterns = [
    path('patientDetail', views.patient_detail, name='patient_detail'),
]
