import os
from unittest import mock

import pytest
from django.db import OperationalError
from django.db.models.fields.related_descriptors import ForwardManyToOneDescriptor

from donations.models import BloodUnit, DonationRequest
from donations.services import DonationWorkflow

pytestmark = pytest.mark.django_db

REQUEST_ID = '11111111-1111-1111-1111-111111111111'


@pytest.fixture
def workflow(fake_uploader):
    workflow = DonationWorkflow(uploader=fake_uploader)
    with mock.patch('donations.views.get_workflow', return_value=workflow):
        yield workflow


# ============================================
# POST /donations/accept
# ============================================
def test_accept_returns_units_and_certificate(bank_client, pending_request, workflow):
    response = bank_client.post(
        '/donations/accept',
        {'donationRequestId': REQUEST_ID, 'numberOfUnits': 3, 'notes': 'ok', 'expiryDays': 42},
        format='json',
    )

    assert response.status_code == 200
    body = response.json()
    assert body['success'] is True
    assert body['message'].startswith('Donation accepted successfully and 3 blood units created.')
    data = body['data']
    assert data['totalUnitsCreated'] == 3
    assert len(data['bloodUnits']) == 3
    assert data['donationRequest']['status'] == 'success'
    assert data['certificateUrl'].endswith(f'donation_certificates/certificate_{REQUEST_ID}')
    assert {unit['unitNumber'] for unit in data['bloodUnits']} == {'1', '2', '3'}


def test_accept_defaults_to_one_unit(bank_client, pending_request, workflow):
    response = bank_client.post('/donations/accept', {'donationRequestId': REQUEST_ID}, format='json')

    assert response.status_code == 200
    assert response.json()['data']['totalUnitsCreated'] == 1


@pytest.mark.parametrize('payload, field', [
    ({'donationRequestId': 'not-a-uuid'}, 'donationRequestId'),
    ({'donationRequestId': REQUEST_ID, 'numberOfUnits': 0}, 'numberOfUnits'),
    ({'donationRequestId': REQUEST_ID, 'numberOfUnits': 11}, 'numberOfUnits'),
    ({'donationRequestId': REQUEST_ID, 'expiryDays': 43}, 'expiryDays'),
    ({'donationRequestId': REQUEST_ID, 'numberOfUnits': '3'}, 'numberOfUnits'),
    ({'donationRequestId': REQUEST_ID, 'numberOfUnits': 2.5}, 'numberOfUnits'),
    ({'donationRequestId': REQUEST_ID, 'numberOfUnits': True}, 'numberOfUnits'),
    ({'donationRequestId': REQUEST_ID, 'expiryDays': '10'}, 'expiryDays'),
    ({'donationRequestId': REQUEST_ID, 'notes': 'x' * 501}, 'notes'),
    ({}, 'donationRequestId'),
])
def test_accept_rejects_invalid_input(bank_client, pending_request, workflow, payload, field):
    response = bank_client.post('/donations/accept', payload, format='json')

    assert response.status_code == 400
    body = response.json()
    assert body['success'] is False
    assert body['error'] == 'Invalid input data.'
    assert field in [detail['field'] for detail in body['details']]
    assert not BloodUnit.objects.exists()


def test_accept_invalid_uuid_message(bank_client, workflow):
    response = bank_client.post('/donations/accept', {'donationRequestId': 'abc'}, format='json')

    assert response.json()['details'] == [
        {'field': 'donationRequestId', 'message': 'Invalid donation request ID format'},
    ]


def test_accept_requires_authentication(api_client, pending_request, workflow):
    response = api_client.post('/donations/accept', {'donationRequestId': REQUEST_ID}, format='json')

    assert response.status_code == 401
    assert response.json()['success'] is False
    pending_request.refresh_from_db()
    assert pending_request.status == DonationRequest.PENDING


def test_accept_forbidden_for_donor(api_client, donor, pending_request, workflow):
    api_client.force_authenticate(user=donor.user)

    response = api_client.post('/donations/accept', {'donationRequestId': REQUEST_ID}, format='json')

    assert response.status_code == 403


def test_accept_non_pending_is_404(bank_client, pending_request, workflow):
    DonationRequest.objects.filter(pk=pending_request.pk).update(status=DonationRequest.REJECTED)

    response = bank_client.post('/donations/accept', {'donationRequestId': REQUEST_ID}, format='json')

    assert response.status_code == 404
    assert response.json() == {'success': False, 'error': 'Donation request not found or not pending.'}


def test_accept_database_failure_is_500_and_rolls_back(bank_client, pending_request, donor, blood_bank, workflow):
    # A unit from an earlier donation already holds the barcode of unit 2
    earlier = DonationRequest.objects.create(
        donor=donor, blood_bank=blood_bank, donor_blood_type='O+', status=DonationRequest.SUCCESS,
    )
    BloodUnit.objects.create(
        unit_number='1',
        donation_request=earlier,
        donor=donor,
        donor_name=donor.name,
        donor_blood_type='O+',
        blood_bank=blood_bank,
        blood_bank_name=blood_bank.name,
        donation_date=earlier.created_at,
        expiry_date=earlier.created_at,
        barcode='CityBank-11111111-2',
    )

    response = bank_client.post(
        '/donations/accept', {'donationRequestId': REQUEST_ID, 'numberOfUnits': 3}, format='json',
    )

    assert response.status_code == 500
    assert response.json() == {'success': False, 'error': 'Internal Server Error'}
    pending_request.refresh_from_db()
    assert pending_request.status == DonationRequest.PENDING
    assert BloodUnit.objects.filter(donation_request=pending_request).count() == 0


def test_accept_certificate_failure_still_succeeds(bank_client, pending_request, certificate_tmp_dir):
    class FailingUploader:
        def upload(self, file_path, key):
            raise RuntimeError("connection reset")

    with mock.patch('donations.views.get_workflow', return_value=DonationWorkflow(uploader=FailingUploader())):
        response = bank_client.post('/donations/accept', {'donationRequestId': REQUEST_ID}, format='json')

    assert response.status_code == 200
    body = response.json()
    assert body['data']['certificateUrl'] is None
    assert body['message'].endswith('Certificate generation failed, but the donation was processed.')
    assert os.listdir(certificate_tmp_dir) == []


def test_accept_succeeds_when_patient_lookup_fails_after_commit(monkeypatch, bank_client, pending_request, workflow):
    real_get_object = ForwardManyToOneDescriptor.get_object

    def get_object(descriptor, instance):
        if descriptor.field.name == 'patient':
            raise OperationalError("database went away")
        return real_get_object(descriptor, instance)

    monkeypatch.setattr(ForwardManyToOneDescriptor, 'get_object', get_object)

    response = bank_client.post('/donations/accept', {'donationRequestId': REQUEST_ID, 'numberOfUnits': 2}, format='json')

    assert response.status_code == 200
    body = response.json()
    assert body['data']['certificateUrl'] is None
    assert body['data']['totalUnitsCreated'] == 2
    assert body['message'].endswith('Certificate generation failed, but the donation was processed.')

    monkeypatch.undo()
    pending_request.refresh_from_db()
    assert pending_request.status == DonationRequest.SUCCESS


# ============================================
# POST /donations/<id>/reject
# ============================================
def test_reject_then_reject_again(bank_client, pending_request, workflow):
    response = bank_client.post(f'/donations/{REQUEST_ID}/reject', {'reason': 'Recent illness'}, format='json')

    assert response.status_code == 200
    assert response.json()['message'] == 'Donation request rejected.'
    assert response.json()['data']['status'] == 'rejected'

    again = bank_client.post(f'/donations/{REQUEST_ID}/reject', {}, format='json')
    assert again.status_code == 404


def test_reject_malformed_id_is_404(bank_client, workflow):
    response = bank_client.post('/donations/nope/reject', {}, format='json')

    assert response.status_code == 404


def test_reject_requires_authentication(api_client, pending_request, workflow):
    response = api_client.post(f'/donations/{REQUEST_ID}/reject', {}, format='json')

    assert response.status_code == 401


# ============================================
# GET /donations/units
# ============================================
def test_units_listing_with_status_filter(bank_client, pending_request, workflow):
    bank_client.post('/donations/accept', {'donationRequestId': REQUEST_ID, 'numberOfUnits': 3}, format='json')
    BloodUnit.objects.filter(unit_number='1').update(status=BloodUnit.USED)

    response = bank_client.get('/donations/units', {'status': 'available'})

    assert response.status_code == 200
    body = response.json()
    assert len(body['data']) == 2
    assert body['summary']['available'] == 2
    assert body['summary']['total'] == 2
    row = body['data'][0]
    assert row['donationRequest']['urgencyLevel'] == 'high'
    assert row['donationRequest']['patientId'] == pending_request.patient_id


def test_units_listing_newest_first(bank_client, pending_request, workflow):
    bank_client.post('/donations/accept', {'donationRequestId': REQUEST_ID, 'numberOfUnits': 2}, format='json')

    response = bank_client.get('/donations/units')

    dates = [row['donationDate'] for row in response.json()['data']]
    assert dates == sorted(dates, reverse=True)
    assert response.json()['summary']['byBloodType'] == {'O+': 2}


def test_units_requires_authentication(api_client):
    assert api_client.get('/donations/units').status_code == 401


# ============================================
# DONOR FLOW
# ============================================
def test_donor_creates_pending_request(api_client, donor, patient, blood_bank):
    api_client.force_authenticate(user=donor.user)

    response = api_client.post(
        '/donate', {'bloodBankId': blood_bank.pk, 'patientId': patient.pk}, format='json',
    )

    assert response.status_code == 201
    data = response.json()['data']
    assert data['status'] == 'pending'
    assert data['urgencyLevel'] == 'medium'
    assert data['donorBloodType'] == 'O+'
    assert DonationRequest.objects.filter(donor=donor, blood_bank=blood_bank).count() == 1


def test_donate_unknown_blood_bank_is_400(api_client, donor):
    api_client.force_authenticate(user=donor.user)

    response = api_client.post('/donate', {'bloodBankId': 9999}, format='json')

    assert response.status_code == 400
    assert response.json()['details'][0]['field'] == 'bloodBankId'


def test_bank_lists_incoming_requests(bank_client, pending_request, other_blood_bank, donor):
    DonationRequest.objects.create(donor=donor, blood_bank=other_blood_bank, donor_blood_type='O+')

    response = bank_client.get('/donations/requests')

    assert response.status_code == 200
    assert [row['id'] for row in response.json()['data']] == [REQUEST_ID]


def test_certificate_download_for_donor(api_client, donor, pending_request, blood_bank, workflow):
    workflow.accept_donation(blood_bank.user, pending_request.id, number_of_units=2)
    api_client.force_authenticate(user=donor.user)

    response = api_client.get(f'/donations/{REQUEST_ID}/certificate')

    assert response.status_code == 200
    assert response['Content-Type'] == 'application/pdf'
    assert f'donation-certificate-{REQUEST_ID}.pdf' in response['Content-Disposition']
    assert response.content.startswith(b'%PDF')


def test_certificate_download_pending_request_is_404(api_client, donor, pending_request):
    api_client.force_authenticate(user=donor.user)

    response = api_client.get(f'/donations/{REQUEST_ID}/certificate')

    assert response.status_code == 404


def test_certificate_download_other_bank_is_404(api_client, other_blood_bank, pending_request, blood_bank, workflow):
    workflow.accept_donation(blood_bank.user, pending_request.id)
    api_client.force_authenticate(user=other_blood_bank.user)

    response = api_client.get(f'/donations/{REQUEST_ID}/certificate')

    assert response.status_code == 404
