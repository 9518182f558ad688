import uuid

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from bloodbanks.models import BloodBank
from donations.models import DonationRequest
from donors.models import Donor
from patients.models import Patient

User = get_user_model()

PASSWORD = 'SecurePass123'


@pytest.fixture(autouse=True)
def fast_password_hasher(settings):
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']


@pytest.fixture(autouse=True)
def certificate_tmp_dir(settings, tmp_path):
    path = tmp_path / 'certificates'
    path.mkdir()
    settings.CERTIFICATE_TMP_DIR = str(path)
    return path


@pytest.fixture
def api_client():
    return APIClient()


def make_user(email, user_type, **extra):
    return User.objects.create_user(
        username=email,
        email=email,
        password=PASSWORD,
        user_type=user_type,
        **extra
    )


@pytest.fixture
def blood_bank(db):
    user = make_user('bank@example.com', User.BLOOD_BANK)
    return BloodBank.objects.create(
        user=user,
        name='CityBank',
        admin_name='Asha Rao',
        phone='9800000001',
        license_number='LIC-001',
        address='12 Main Road',
        city='Pune',
        state='MH',
    )


@pytest.fixture
def other_blood_bank(db):
    user = make_user('other-bank@example.com', User.BLOOD_BANK)
    return BloodBank.objects.create(
        user=user,
        name='OtherBank',
        admin_name='Ravi Kumar',
        phone='9800000002',
        license_number='LIC-002',
        city='Mumbai',
    )


@pytest.fixture
def donor(db):
    user = make_user('donor@example.com', User.DONOR)
    return Donor.objects.create(
        user=user,
        name='Dev Donor',
        phone='9811111111',
        age=30,
        blood_type='O+',
        city='Pune',
        state='MH',
    )


@pytest.fixture
def patient(db):
    user = make_user('patient@example.com', User.PATIENT)
    return Patient.objects.create(
        user=user,
        name='Pia Patient',
        phone='9822222222',
        age=45,
        blood_type='A+',
        city='Pune',
    )


@pytest.fixture
def pending_request(donor, patient, blood_bank):
    return DonationRequest.objects.create(
        id=uuid.UUID('11111111-1111-1111-1111-111111111111'),
        donor=donor,
        patient=patient,
        blood_bank=blood_bank,
        donor_blood_type=donor.blood_type,
        urgency_level='high',
    )


@pytest.fixture
def bank_client(api_client, blood_bank):
    api_client.force_authenticate(user=blood_bank.user)
    return api_client


class FakeUploader:
    """Records what would have been uploaded"""

    def __init__(self, base_url='https://files.example.com'):
        self.base_url = base_url
        self.uploads = []

    def upload(self, file_path, key):
        with open(file_path, 'rb') as fh:
            self.uploads.append({'path': file_path, 'key': key, 'content': fh.read()})
        return f"{self.base_url}/{key}"


@pytest.fixture
def fake_uploader():
    return FakeUploader()
