from django.db import models
from django.conf import settings

from accounts.models import BLOOD_TYPE_CHOICES


class Patient(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='patient_profile'
    )

    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=15)
    age = models.PositiveIntegerField(null=True, blank=True)
    blood_type = models.CharField(max_length=3, choices=BLOOD_TYPE_CHOICES)

    city = models.CharField(max_length=100, db_index=True)
    state = models.CharField(max_length=100, blank=True)
    blood_bank = models.CharField(max_length=200, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def email(self):
        return self.user.email

    def __str__(self):
        return f"{self.name} ({self.blood_type})"

    class Meta:
        ordering = ['-created_at']
