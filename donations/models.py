# donations/models.py
import uuid

from django.db import models

from accounts.models import BLOOD_TYPE_CHOICES

BLOOD_UNIT_VOLUME_ML = 450
MAX_UNITS_PER_DONATION = 10
MAX_EXPIRY_DAYS = 42
MAX_NOTES_LENGTH = 500


class DonationRequest(models.Model):
    """A donor's offer to donate at a blood bank, optionally for a specific patient"""
    PENDING = 'pending'
    SUCCESS = 'success'
    REJECTED = 'rejected'

    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (SUCCESS, 'Success'),
        (REJECTED, 'Rejected'),
    ]

    URGENCY_CHOICES = [
        ('low', 'Low'),
        ('medium', 'Medium'),
        ('high', 'High'),
        ('critical', 'Critical'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    donor = models.ForeignKey('donors.Donor', on_delete=models.CASCADE, related_name='donation_requests')
    patient = models.ForeignKey(
        'patients.Patient',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='donation_requests'
    )
    blood_bank = models.ForeignKey('bloodbanks.BloodBank', on_delete=models.CASCADE, related_name='donation_requests')

    donor_blood_type = models.CharField(max_length=3, choices=BLOOD_TYPE_CHOICES)
    urgency_level = models.CharField(max_length=10, choices=URGENCY_CHOICES, default='medium')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING)
    certificate_url = models.URLField(max_length=500, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def is_pending(self):
        return self.status == self.PENDING

    def barcode_for(self, blood_bank_name, unit_number):
        return f"{blood_bank_name}-{str(self.id)[-8:]}-{unit_number}"

    def __str__(self):
        return f"{self.donor.name} → {self.blood_bank.name} ({self.status})"

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['blood_bank', 'status'], name='donreq_bank_status_idx'),
            models.Index(fields=['donor', '-created_at'], name='donreq_donor_created_idx'),
        ]


class BloodUnit(models.Model):
    """One physical unit of donated blood, created when a DonationRequest succeeds"""
    AVAILABLE = 'available'
    USED = 'used'
    EXPIRED = 'expired'
    DISCARDED = 'discarded'

    STATUS_CHOICES = [
        (AVAILABLE, 'Available'),
        (USED, 'Used'),
        (EXPIRED, 'Expired'),
        (DISCARDED, 'Discarded'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    unit_number = models.CharField(max_length=10)

    donation_request = models.ForeignKey(DonationRequest, on_delete=models.CASCADE, related_name='blood_units')
    donor = models.ForeignKey('donors.Donor', on_delete=models.SET_NULL, null=True, related_name='blood_units')
    donor_name = models.CharField(max_length=200)
    donor_blood_type = models.CharField(max_length=3, choices=BLOOD_TYPE_CHOICES)

    blood_bank = models.ForeignKey('bloodbanks.BloodBank', on_delete=models.CASCADE, related_name='blood_units')
    blood_bank_name = models.CharField(max_length=200)

    donation_date = models.DateTimeField()
    expiry_date = models.DateTimeField()
    volume = models.PositiveIntegerField(default=BLOOD_UNIT_VOLUME_ML, help_text="Volume in ml")
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=AVAILABLE)
    barcode = models.CharField(max_length=255, unique=True)
    notes = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.barcode

    class Meta:
        ordering = ['-donation_date']
        indexes = [
            models.Index(fields=['blood_bank', 'status'], name='unit_bank_status_idx'),
            models.Index(fields=['blood_bank', '-donation_date'], name='unit_bank_date_idx'),
        ]
