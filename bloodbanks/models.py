# bloodbanks/models.py
from django.db import models
from django.conf import settings


class BloodBank(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='blood_bank_profile'
    )
    name = models.CharField(max_length=200)
    admin_name = models.CharField(max_length=200)
    phone = models.CharField(max_length=15)
    license_number = models.CharField(max_length=100, unique=True)

    address = models.TextField(blank=True)
    city = models.CharField(max_length=100, db_index=True)
    state = models.CharField(max_length=100, blank=True)

    total_blood_bags = models.PositiveIntegerField(default=0)
    is_verified = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def email(self):
        return self.user.email

    @property
    def display_address(self):
        return self.address or f"{self.name} Blood Bank"

    def __str__(self):
        return self.name

    class Meta:
        verbose_name = 'Blood Bank'
        verbose_name_plural = 'Blood Banks'
        ordering = ['name']
