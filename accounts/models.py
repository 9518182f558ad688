from django.contrib.auth.models import AbstractUser
from django.db import models

BLOOD_TYPE_CHOICES = [
    ('A+', 'A+'), ('A-', 'A-'),
    ('B+', 'B+'), ('B-', 'B-'),
    ('O+', 'O+'), ('O-', 'O-'),
    ('AB+', 'AB+'), ('AB-', 'AB-'),
]

MAX_FAILED_LOGINS = 5


class CustomUser(AbstractUser):
    DONOR = 'donor'
    PATIENT = 'patient'
    BLOOD_BANK = 'blood_bank'
    SUPER_ADMIN = 'super_admin'

    USER_TYPE_CHOICES = (
        (DONOR, 'Donor'),
        (PATIENT, 'Patient'),
        (BLOOD_BANK, 'Blood Bank'),
        (SUPER_ADMIN, 'Super Admin'),
    )

    user_type = models.CharField(
        max_length=15,
        choices=USER_TYPE_CHOICES,
        default=DONOR
    )
    email = models.EmailField(unique=True)

    failed_attempts = models.PositiveIntegerField(default=0)
    is_locked = models.BooleanField(default=False)

    def __str__(self):
        return f"{self.username} ({self.user_type})"

    @property
    def role(self):
        """Role name exposed to the frontend; blood bank admins log in as 'admin'"""
        return 'admin' if self.user_type == self.BLOOD_BANK else self.user_type

    def register_failed_login(self):
        self.failed_attempts += 1
        if self.failed_attempts >= MAX_FAILED_LOGINS:
            self.is_locked = True
        self.save(update_fields=['failed_attempts', 'is_locked'])

    def reset_failed_logins(self):
        if self.failed_attempts:
            self.failed_attempts = 0
            self.save(update_fields=['failed_attempts'])
