# donors/serializers.py
from rest_framework import serializers
from .models import Donor


class DonorSerializer(serializers.ModelSerializer):
    # camelCase names for the frontend
    email = serializers.EmailField(source='user.email', read_only=True)
    bloodType = serializers.CharField(source='blood_type', read_only=True)
    bloodBank = serializers.CharField(source='blood_bank', read_only=True)
    isAvailable = serializers.BooleanField(source='is_available', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Donor
        fields = [
            'id', 'name', 'email', 'phone', 'age', 'bloodType',
            'city', 'state', 'bloodBank', 'isAvailable', 'createdAt',
        ]
