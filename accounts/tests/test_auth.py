import pytest
from django.contrib.auth import get_user_model

from accounts.models import MAX_FAILED_LOGINS, CustomUser
from bloodbanks.models import BloodBank
from donors.models import Donor

User = get_user_model()

PASSWORD = 'SecurePass123'

pytestmark = pytest.mark.django_db


def donor_payload(**overrides):
    payload = {
        'name': 'Neha Donor',
        'email': 'Neha@Example.com',
        'password': 'StrongPass1',
        'phone': '9876543210',
        'age': 28,
        'bloodType': 'B+',
        'city': 'Pune',
        'state': 'MH',
    }
    payload.update(overrides)
    return payload


# ============================================
# REGISTRATION
# ============================================
def test_register_donor_creates_account_and_profile(api_client):
    response = api_client.post('/register-donor', donor_payload(), format='json')

    assert response.status_code == 201
    body = response.json()
    assert body['success'] is True
    assert body['user']['role'] == 'donor'
    assert body['user']['email'] == 'neha@example.com'
    assert 'access' in body['tokens']
    assert 'password' not in body['user']
    assert response.cookies['authToken']['httponly']

    donor = Donor.objects.get(user__email='neha@example.com')
    assert donor.blood_type == 'B+'
    assert donor.user.user_type == CustomUser.DONOR


@pytest.mark.parametrize('overrides, field', [
    ({'email': 'not-an-email'}, 'email'),
    ({'password': 'short'}, 'password'),
    ({'bloodType': 'C+'}, 'bloodType'),
    ({'age': 17}, 'age'),
])
def test_register_donor_invalid_input(api_client, overrides, field):
    response = api_client.post('/register-donor', donor_payload(**overrides), format='json')

    assert response.status_code == 400
    assert field in [detail['field'] for detail in response.json()['details']]


def test_register_duplicate_email(api_client, donor):
    response = api_client.post('/register-donor', donor_payload(email='donor@example.com'), format='json')

    assert response.status_code == 400
    assert response.json()['details'] == [{'field': 'email', 'message': 'Email already registered'}]


def test_register_blood_bank(api_client):
    response = api_client.post('/register-blood-bank', {
        'name': 'Lifeline Blood Centre',
        'email': 'lifeline@example.com',
        'password': 'StrongPass1',
        'phone': '9000000000',
        'city': 'Nagpur',
        'adminName': 'Meera Shah',
        'licenseNumber': 'BB-77',
        'address': '4 Ring Road',
    }, format='json')

    assert response.status_code == 201
    assert response.json()['user']['role'] == 'admin'
    assert BloodBank.objects.get(license_number='BB-77').admin_name == 'Meera Shah'


def test_register_patient(api_client):
    response = api_client.post('/register-patient', {
        'name': 'Kiran Patient',
        'email': 'kiran@example.com',
        'password': 'StrongPass1',
        'phone': '9111111111',
        'city': 'Pune',
        'bloodType': 'AB-',
    }, format='json')

    assert response.status_code == 201
    assert response.json()['user']['bloodType'] == 'AB-'


# ============================================
# LOGIN
# ============================================
def test_donor_login_success(api_client, donor):
    response = api_client.post('/donor-login', {'email': 'donor@example.com', 'password': PASSWORD}, format='json')

    assert response.status_code == 200
    body = response.json()
    assert body['user']['role'] == 'donor'
    assert body['user']['name'] == 'Dev Donor'
    assert 'authToken' in response.cookies


def test_admin_login_returns_admin_role(api_client, blood_bank):
    response = api_client.post('/admin-login', {'email': 'bank@example.com', 'password': PASSWORD}, format='json')

    assert response.status_code == 200
    assert response.json()['user']['role'] == 'admin'


def test_login_wrong_role_is_401(api_client, donor):
    response = api_client.post('/patient-login', {'email': 'donor@example.com', 'password': PASSWORD}, format='json')

    assert response.status_code == 401
    assert response.json() == {'success': False, 'error': 'Invalid email or password'}


def test_login_invalid_shape_is_400(api_client):
    response = api_client.post('/donor-login', {'email': 'nope', 'password': 'x'}, format='json')

    assert response.status_code == 400
    fields = {detail['field'] for detail in response.json()['details']}
    assert fields == {'email', 'password'}


def test_account_locks_after_repeated_failures(api_client, donor):
    for _ in range(MAX_FAILED_LOGINS):
        response = api_client.post('/donor-login', {'email': 'donor@example.com', 'password': 'WrongPass1'}, format='json')
        assert response.status_code == 401

    donor.user.refresh_from_db()
    assert donor.user.is_locked

    response = api_client.post('/donor-login', {'email': 'donor@example.com', 'password': PASSWORD}, format='json')
    assert response.status_code == 401
    assert response.json()['error'] == 'Account locked due to multiple failed attempts'


def test_successful_login_resets_failed_attempts(api_client, donor):
    api_client.post('/donor-login', {'email': 'donor@example.com', 'password': 'WrongPass1'}, format='json')
    api_client.post('/donor-login', {'email': 'donor@example.com', 'password': PASSWORD}, format='json')

    donor.user.refresh_from_db()
    assert donor.user.failed_attempts == 0


# ============================================
# SESSION
# ============================================
def test_auth_me_with_bearer_token(api_client, donor):
    login = api_client.post('/donor-login', {'email': 'donor@example.com', 'password': PASSWORD}, format='json')
    api_client.cookies.clear()
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.json()['tokens']['access']}")

    response = api_client.get('/auth/me')

    assert response.status_code == 200
    assert response.json()['user']['email'] == 'donor@example.com'


def test_auth_me_with_cookie(api_client, blood_bank):
    api_client.post('/admin-login', {'email': 'bank@example.com', 'password': PASSWORD}, format='json')

    response = api_client.get('/auth/me')

    assert response.status_code == 200
    assert response.json()['user']['role'] == 'admin'


def test_auth_me_without_token_is_401(api_client):
    assert api_client.get('/auth/me').status_code == 401


def test_auth_me_with_bad_bearer_token_is_401(api_client):
    api_client.credentials(HTTP_AUTHORIZATION='Bearer not.a.token')

    assert api_client.get('/auth/me').status_code == 401


def test_logout_clears_cookie(api_client, donor):
    api_client.post('/donor-login', {'email': 'donor@example.com', 'password': PASSWORD}, format='json')

    response = api_client.post('/logout')

    assert response.status_code == 200
    assert response.cookies['authToken'].value == ''


def test_email_backend_authenticates_case_insensitively(donor):
    from django.contrib.auth import authenticate

    assert authenticate(username='DONOR@example.com', password=PASSWORD) == donor.user
    assert authenticate(username='donor@example.com', password='wrong-password') is None
