# donors/management/commands/import_donors.py
"""
Django management command to import donor accounts from Excel or CSV
Usage: python manage.py import_donors path/to/donors.xlsx
"""
from pathlib import Path

import pandas as pd
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import IntegrityError, transaction

from accounts.models import BLOOD_TYPE_CHOICES, CustomUser
from donors.models import Donor

User = get_user_model()

DEFAULT_PASSWORD = 'ChangeMe123!'
VALID_BLOOD_TYPES = {code for code, _ in BLOOD_TYPE_CHOICES}


def read_table(path):
    if path.suffix.lower() == '.csv':
        return pd.read_csv(path)
    return pd.read_excel(path)


def cell(row, *names, default=''):
    """First non-empty value among the candidate column names"""
    for name in names:
        value = row.get(name)
        if value is not None and pd.notna(value) and str(value).strip():
            return str(value).strip()
    return default


class Command(BaseCommand):
    help = 'Import donors (with login accounts) from an Excel or CSV file'

    def add_arguments(self, parser):
        parser.add_argument('file', type=str, help='Path to the .xlsx or .csv file')
        parser.add_argument('--password', default=DEFAULT_PASSWORD, help='Password for newly created accounts')

    def handle(self, *args, **options):
        path = Path(options['file'])
        if not path.exists():
            raise CommandError(f'File not found: {path}')

        self.stdout.write(self.style.WARNING(f'Starting import from {path}...'))
        df = read_table(path)
        self.stdout.write(f'Found {len(df)} rows')

        created_count = 0
        updated_count = 0
        skipped_count = 0

        with transaction.atomic():
            for index, row in df.iterrows():
                line = index + 2
                name = cell(row, 'name', 'full_name')
                email = cell(row, 'email').lower()
                blood_type = cell(row, 'blood_type', 'blood_group').upper()

                if not name or not email:
                    self.stdout.write(self.style.WARNING(f'Skipping row {line}: missing name or email'))
                    skipped_count += 1
                    continue

                if blood_type not in VALID_BLOOD_TYPES:
                    self.stdout.write(self.style.WARNING(f'Skipping row {line}: invalid blood type {blood_type!r}'))
                    skipped_count += 1
                    continue

                try:
                    age = int(float(cell(row, 'age', default='0')))
                except ValueError:
                    age = 0
                if age < 18 or age > 65:
                    self.stdout.write(self.style.WARNING(f'Skipping row {line}: age {age} out of range (18-65)'))
                    skipped_count += 1
                    continue

                try:
                    with transaction.atomic():
                        user, user_created = User.objects.get_or_create(
                            email=email,
                            defaults={'username': email[:150], 'user_type': CustomUser.DONOR},
                        )
                        if user_created:
                            user.set_password(options['password'])
                            user.save(update_fields=['password'])
                        elif user.user_type != CustomUser.DONOR:
                            self.stdout.write(self.style.WARNING(f'Skipping row {line}: {email} is not a donor account'))
                            skipped_count += 1
                            continue

                        donor, created = Donor.objects.update_or_create(
                            user=user,
                            defaults={
                                'name': name,
                                'age': age,
                                'phone': cell(row, 'phone', 'phone_number'),
                                'blood_type': blood_type,
                                'city': cell(row, 'city'),
                                'state': cell(row, 'state'),
                                'blood_bank': cell(row, 'blood_bank'),
                            },
                        )
                except IntegrityError as exc:
                    self.stdout.write(self.style.ERROR(f'Error at row {line}: {exc}'))
                    skipped_count += 1
                    continue

                if created:
                    created_count += 1
                    self.stdout.write(f'Created: {donor.name} ({donor.blood_type}) - {email}')
                else:
                    updated_count += 1
                    self.stdout.write(f'Updated: {donor.name} ({donor.blood_type})')

        self.stdout.write(
            self.style.SUCCESS(
                f'Import complete! Created: {created_count}, Updated: {updated_count}, Skipped: {skipped_count}'
            )
        )
        if created_count:
            self.stdout.write(self.style.WARNING('New donor accounts use the default password and should change it.'))
