# accounts/serializers.py
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import serializers

from accounts.models import BLOOD_TYPE_CHOICES, CustomUser
from bloodbanks.models import BloodBank
from donors.models import Donor
from patients.models import Patient

User = get_user_model()
logger = logging.getLogger(__name__)


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField(error_messages={'invalid': 'Invalid email format'})
    password = serializers.CharField(
        min_length=8,
        trim_whitespace=False,
        error_messages={'min_length': 'Password must be at least 8 characters'},
    )


class RegistrationSerializer(serializers.Serializer):
    """
    Shared fields for every account type. Subclasses set `user_type`
    and build the matching profile in `create_profile`.
    """
    user_type = None

    name = serializers.CharField(max_length=200)
    email = serializers.EmailField(error_messages={'invalid': 'Invalid email format'})
    password = serializers.CharField(
        min_length=8,
        write_only=True,
        trim_whitespace=False,
        error_messages={'min_length': 'Password must be at least 8 characters'},
    )
    phone = serializers.CharField(max_length=15)
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already registered")
        return value.lower()

    def create_profile(self, user, data):
        raise NotImplementedError

    def create(self, validated_data):
        password = validated_data.pop('password')
        email = validated_data.pop('email')

        with transaction.atomic():
            user = User.objects.create_user(
                username=email[:150],
                email=email,
                password=password,
                user_type=self.user_type,
            )
            profile = self.create_profile(user, validated_data)

        logger.info(f"Registered {self.user_type} account {user.pk} ({email})")
        return profile


class DonorRegistrationSerializer(RegistrationSerializer):
    user_type = CustomUser.DONOR

    age = serializers.IntegerField(min_value=18, max_value=65)
    bloodType = serializers.ChoiceField(source='blood_type', choices=BLOOD_TYPE_CHOICES)
    bloodBank = serializers.CharField(source='blood_bank', max_length=200, required=False, allow_blank=True, default='')

    def create_profile(self, user, data):
        return Donor.objects.create(user=user, **data)


class PatientRegistrationSerializer(RegistrationSerializer):
    user_type = CustomUser.PATIENT

    age = serializers.IntegerField(min_value=0, max_value=130, required=False, allow_null=True)
    bloodType = serializers.ChoiceField(source='blood_type', choices=BLOOD_TYPE_CHOICES)
    bloodBank = serializers.CharField(source='blood_bank', max_length=200, required=False, allow_blank=True, default='')

    def create_profile(self, user, data):
        return Patient.objects.create(user=user, **data)


class BloodBankRegistrationSerializer(RegistrationSerializer):
    user_type = CustomUser.BLOOD_BANK

    adminName = serializers.CharField(source='admin_name', max_length=200)
    licenseNumber = serializers.CharField(source='license_number', max_length=100)
    address = serializers.CharField(required=False, allow_blank=True, default='')
    totalBloodBags = serializers.IntegerField(source='total_blood_bags', min_value=0, required=False, default=0)

    def validate_licenseNumber(self, value):
        if BloodBank.objects.filter(license_number=value).exists():
            raise serializers.ValidationError("License number already registered")
        return value

    def create_profile(self, user, data):
        return BloodBank.objects.create(user=user, **data)
