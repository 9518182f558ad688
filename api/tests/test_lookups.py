import pytest
from django.contrib.auth import get_user_model

from donations.models import DonationRequest
from donors.models import Donor

User = get_user_model()

pytestmark = pytest.mark.django_db


# ============================================
# GET /getByCity
# ============================================
@pytest.mark.parametrize('query', [
    {'city': 'Pune'},
    {'field': '1'},
    {'field': '1', 'city': ''},
    {'field': '3', 'city': 'Pune'},
    {'field': '1', 'city': 'Pune', 'match': 'fuzzy'},
])
def test_get_by_city_validation(api_client, query):
    response = api_client.get('/getByCity', query)

    assert response.status_code == 400
    assert response.json()['success'] is False


def test_get_by_city_donors(api_client, donor, patient):
    response = api_client.get('/getByCity', {'field': '1', 'city': 'pune'})

    assert response.status_code == 200
    rows = response.json()['data']
    assert [row['name'] for row in rows] == ['Dev Donor']


def test_get_by_city_patients(api_client, donor, patient):
    response = api_client.get('/getByCity', {'field': '2', 'city': 'Pune'})

    assert response.status_code == 200
    assert [row['name'] for row in response.json()['data']] == ['Pia Patient']


def test_get_by_city_prefix_match(api_client, donor):
    assert api_client.get('/getByCity', {'field': '1', 'city': 'Pu'}).status_code == 404
    response = api_client.get('/getByCity', {'field': '1', 'city': 'Pu', 'match': 'startsWith'})

    assert response.status_code == 200
    assert len(response.json()['data']) == 1


def test_get_by_city_nothing_found(api_client, donor):
    response = api_client.get('/getByCity', {'field': '1', 'city': 'Atlantis'})

    assert response.status_code == 404
    assert response.json() == {'success': False, 'error': 'No donors found in Atlantis.'}


# ============================================
# GET /blood-banks
# ============================================
def test_blood_bank_directory_filters_by_city(api_client, blood_bank, other_blood_bank):
    everything = api_client.get('/blood-banks')
    in_mumbai = api_client.get('/blood-banks', {'city': 'mumbai'})

    assert everything.status_code == 200
    assert {row['name'] for row in everything.json()['data']} == {'CityBank', 'OtherBank'}
    assert [row['name'] for row in in_mumbai.json()['data']] == ['OtherBank']
    assert 'licenseNumber' not in in_mumbai.json()['data'][0]


# ============================================
# GET /patientDetail
# ============================================
def test_patient_detail(api_client, patient, pending_request):
    api_client.force_authenticate(user=patient.user)

    response = api_client.get('/patientDetail')

    assert response.status_code == 200
    data = response.json()['data']
    assert data['patient']['name'] == 'Pia Patient'
    assert [row['id'] for row in data['donations']] == [str(pending_request.id)]


def test_patient_detail_forbidden_for_donor(api_client, donor):
    api_client.force_authenticate(user=donor.user)

    assert api_client.get('/patientDetail').status_code == 403


def test_patient_detail_requires_authentication(api_client):
    assert api_client.get('/patientDetail').status_code == 401


# ============================================
# GET /stats
# ============================================
def test_stats_for_super_admin(api_client, pending_request):
    admin = User.objects.create_superuser(
        username='root@example.com',
        email='root@example.com',
        password='SecurePass123',
        user_type=User.SUPER_ADMIN,
    )
    Donor.objects.filter(pk=pending_request.donor_id).update(is_available=False)
    api_client.force_authenticate(user=admin)

    response = api_client.get('/stats')

    assert response.status_code == 200
    assert response.json()['data'] == {
        'totalDonors': 1,
        'availableDonors': 0,
        'totalPatients': 1,
        'totalBloodBanks': 1,
        'pendingRequests': 1,
        'successfulDonations': 0,
        'availableUnits': 0,
    }
    assert DonationRequest.objects.count() == 1


def test_stats_forbidden_for_blood_bank(bank_client):
    assert bank_client.get('/stats').status_code == 403
