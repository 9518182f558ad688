from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator

from accounts.models import BLOOD_TYPE_CHOICES


# ---------------------------
# Donor Profile
# ---------------------------
class Donor(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='donor_profile'
    )

    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=15, db_index=True)
    age = models.PositiveIntegerField(
        validators=[MinValueValidator(18), MaxValueValidator(65)]
    )
    blood_type = models.CharField(max_length=3, choices=BLOOD_TYPE_CHOICES)

    city = models.CharField(max_length=100, db_index=True)
    state = models.CharField(max_length=100, blank=True)
    # Preferred blood bank, free text as entered at registration
    blood_bank = models.CharField(max_length=200, blank=True)

    is_available = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def email(self):
        return self.user.email

    def __str__(self):
        return f"{self.name} ({self.blood_type})"

    class Meta:
        verbose_name = "Donor"
        verbose_name_plural = "Donors"
        ordering = ['-created_at']
