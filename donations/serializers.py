# donations/serializers.py
from django.conf import settings
from rest_framework import serializers

from bloodbanks.models import BloodBank
from patients.models import Patient
from .models import (
    MAX_EXPIRY_DAYS,
    MAX_NOTES_LENGTH,
    MAX_UNITS_PER_DONATION,
    BloodUnit,
    DonationRequest,
)


def default_expiry_days():
    return settings.BLOOD_UNIT_SHELF_LIFE_DAYS


class StrictIntegerField(serializers.IntegerField):
    """IntegerField that only takes JSON numbers, not numeric strings or booleans"""
    default_error_messages = {
        'invalid': 'Expected a number.',
    }

    def to_internal_value(self, data):
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            self.fail('invalid')
        return super().to_internal_value(data)


# ============================================
# INPUT
# ============================================
class AcceptDonationSerializer(serializers.Serializer):
    donationRequestId = serializers.UUIDField(
        error_messages={'invalid': 'Invalid donation request ID format'},
    )
    numberOfUnits = StrictIntegerField(
        min_value=1,
        max_value=MAX_UNITS_PER_DONATION,
        default=1,
        error_messages={
            'min_value': 'At least 1 unit must be donated',
            'max_value': f'Maximum {MAX_UNITS_PER_DONATION} units per donation',
        },
    )
    notes = serializers.CharField(
        max_length=MAX_NOTES_LENGTH,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    expiryDays = StrictIntegerField(
        min_value=1,
        max_value=MAX_EXPIRY_DAYS,
        default=default_expiry_days,
        error_messages={
            'min_value': 'Expiry must be at least 1 day',
            'max_value': f'Expiry cannot exceed {MAX_EXPIRY_DAYS} days',
        },
    )


class RejectDonationSerializer(serializers.Serializer):
    reason = serializers.CharField(
        max_length=MAX_NOTES_LENGTH,
        required=False,
        allow_blank=True,
        allow_null=True,
    )


class CreateDonationRequestSerializer(serializers.Serializer):
    """Body of POST /donate"""
    bloodBankId = serializers.PrimaryKeyRelatedField(
        queryset=BloodBank.objects.all(),
        source='blood_bank',
        error_messages={'does_not_exist': 'Blood bank not found'},
    )
    patientId = serializers.PrimaryKeyRelatedField(
        queryset=Patient.objects.all(),
        source='patient',
        required=False,
        allow_null=True,
        error_messages={'does_not_exist': 'Patient not found'},
    )
    urgencyLevel = serializers.ChoiceField(
        choices=DonationRequest.URGENCY_CHOICES,
        source='urgency_level',
        default='medium',
    )


# ============================================
# OUTPUT
# ============================================
class DonationRequestSerializer(serializers.ModelSerializer):
    donorId = serializers.IntegerField(source='donor_id', read_only=True)
    donorName = serializers.CharField(source='donor.name', read_only=True)
    patientId = serializers.IntegerField(source='patient_id', read_only=True, allow_null=True)
    bloodBankId = serializers.IntegerField(source='blood_bank_id', read_only=True)
    donorBloodType = serializers.CharField(source='donor_blood_type', read_only=True)
    urgencyLevel = serializers.CharField(source='urgency_level', read_only=True)
    certificateUrl = serializers.CharField(source='certificate_url', read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = DonationRequest
        fields = [
            'id', 'donorId', 'donorName', 'patientId', 'bloodBankId', 'donorBloodType',
            'urgencyLevel', 'status', 'certificateUrl', 'createdAt', 'updatedAt',
        ]


class BloodUnitSerializer(serializers.ModelSerializer):
    unitNumber = serializers.CharField(source='unit_number', read_only=True)
    donationRequestId = serializers.UUIDField(source='donation_request_id', read_only=True)
    donorId = serializers.IntegerField(source='donor_id', read_only=True, allow_null=True)
    donorName = serializers.CharField(source='donor_name', read_only=True)
    donorBloodType = serializers.CharField(source='donor_blood_type', read_only=True)
    bloodBankId = serializers.IntegerField(source='blood_bank_id', read_only=True)
    bloodBankName = serializers.CharField(source='blood_bank_name', read_only=True)
    donationDate = serializers.DateTimeField(source='donation_date', read_only=True)
    expiryDate = serializers.DateTimeField(source='expiry_date', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = BloodUnit
        fields = [
            'id', 'unitNumber', 'donationRequestId', 'donorId', 'donorName', 'donorBloodType',
            'bloodBankId', 'bloodBankName', 'donationDate', 'expiryDate', 'volume', 'status',
            'barcode', 'notes', 'createdAt', 'updatedAt',
        ]


class DonationRequestBriefSerializer(serializers.ModelSerializer):
    patientId = serializers.IntegerField(source='patient_id', read_only=True, allow_null=True)
    urgencyLevel = serializers.CharField(source='urgency_level', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = DonationRequest
        fields = ['patientId', 'urgencyLevel', 'createdAt']


class BloodUnitInventorySerializer(BloodUnitSerializer):
    """Inventory row joined with the request that produced it"""
    donationRequest = DonationRequestBriefSerializer(source='donation_request', read_only=True)

    class Meta(BloodUnitSerializer.Meta):
        fields = BloodUnitSerializer.Meta.fields + ['donationRequest']
