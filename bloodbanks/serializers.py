# bloodbanks/serializers.py
from rest_framework import serializers
from .models import BloodBank


class BloodBankSerializer(serializers.ModelSerializer):
    email = serializers.SerializerMethodField()
    adminName = serializers.CharField(source='admin_name', read_only=True)
    bloodBankName = serializers.CharField(source='name', read_only=True)
    licenseNumber = serializers.CharField(source='license_number', read_only=True)
    totalBloodBags = serializers.IntegerField(source='total_blood_bags', read_only=True)
    isVerified = serializers.BooleanField(source='is_verified', read_only=True)

    class Meta:
        model = BloodBank
        fields = [
            'id', 'name', 'bloodBankName', 'adminName', 'email', 'phone', 'licenseNumber',
            'address', 'city', 'state', 'totalBloodBags', 'isVerified',
        ]

    def get_email(self, obj):
        return obj.user.email if obj.user_id else "N/A"


class BloodBankDirectorySerializer(serializers.ModelSerializer):
    """Public listing used by donors when choosing where to donate"""

    class Meta:
        model = BloodBank
        fields = ['id', 'name', 'phone', 'address', 'city', 'state']
