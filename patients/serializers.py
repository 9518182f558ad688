# patients/serializers.py
from rest_framework import serializers
from .models import Patient


class PatientSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(source='user.email', read_only=True)
    bloodType = serializers.CharField(source='blood_type', read_only=True)
    bloodBank = serializers.CharField(source='blood_bank', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Patient
        fields = ['id', 'name', 'email', 'phone', 'age', 'bloodType', 'city', 'state', 'bloodBank', 'createdAt']
