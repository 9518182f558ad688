# donations/views.py
import logging
import uuid

from django.db.models import Q
from django.http import HttpResponse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotAuthenticated, NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from accounts.decorators import require_role, role_required
from accounts.models import CustomUser
from bloodbank_backend.exceptions import invalid_input_response
from donors.models import Donor
from .certificates import CertificateGenerator, build_certificate_record
from .models import DonationRequest
from .serializers import (
    AcceptDonationSerializer,
    BloodUnitInventorySerializer,
    BloodUnitSerializer,
    CreateDonationRequestSerializer,
    DonationRequestSerializer,
    RejectDonationSerializer,
)
from .services import NOT_PENDING_MESSAGE, DonationWorkflow

logger = logging.getLogger(__name__)


def get_workflow():
    return DonationWorkflow()


def parse_request_id(value, message=NOT_PENDING_MESSAGE):
    """A malformed id can't match any request"""
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise NotFound(message)


# ============================================
# BLOOD BANK: ACCEPT / REJECT
# ============================================
@api_view(['POST'])
@permission_classes([AllowAny])
def accept_donation(request):
    """
    Accept a pending donation request: mark it successful, create the blood
    units and issue the donor's certificate.
    """
    serializer = AcceptDonationSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_input_response(serializer.errors)

    user = require_role(request, CustomUser.BLOOD_BANK)
    data = serializer.validated_data

    result = get_workflow().accept_donation(
        user,
        data['donationRequestId'],
        number_of_units=data['numberOfUnits'],
        notes=data.get('notes') or None,
        expiry_days=data['expiryDays'],
    )

    return Response({
        "success": True,
        "message": result.message,
        "data": {
            "donationRequest": DonationRequestSerializer(result.donation_request).data,
            "bloodUnits": BloodUnitSerializer(result.blood_units, many=True).data,
            "totalUnitsCreated": result.total_units_created,
            "certificateUrl": result.certificate_url,
        },
    })


@api_view(['POST'])
@permission_classes([AllowAny])
@role_required(CustomUser.BLOOD_BANK)
def reject_donation(request, donation_request_id):
    serializer = RejectDonationSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_input_response(serializer.errors)

    donation_request = get_workflow().reject_donation(
        request.user,
        parse_request_id(donation_request_id),
        reason=serializer.validated_data.get('reason'),
    )

    return Response({
        "success": True,
        "message": "Donation request rejected.",
        "data": DonationRequestSerializer(donation_request).data,
    })


# ============================================
# BLOOD BANK: INVENTORY & INCOMING REQUESTS
# ============================================
@api_view(['GET'])
@permission_classes([AllowAny])
@role_required(CustomUser.BLOOD_BANK)
def blood_units(request):
    units, summary = get_workflow().list_blood_units(
        request.user,
        status=request.query_params.get('status') or None,
    )

    return Response({
        "success": True,
        "message": "Blood units retrieved successfully.",
        "data": BloodUnitInventorySerializer(units, many=True).data,
        "summary": summary,
    })


@api_view(['GET'])
@permission_classes([AllowAny])
@role_required(CustomUser.BLOOD_BANK)
def donation_requests(request):
    """Requests addressed to the caller's blood bank, pending ones by default"""
    request_status = request.query_params.get('status') or DonationRequest.PENDING

    queryset = (
        DonationRequest.objects
        .filter(blood_bank__user=request.user, status=request_status)
        .select_related('donor')
        .order_by('-created_at')
    )

    return Response({
        "success": True,
        "message": "Donation requests retrieved successfully.",
        "data": DonationRequestSerializer(queryset, many=True).data,
    })


# ============================================
# DONOR: OFFER A DONATION
# ============================================
@api_view(['POST'])
@permission_classes([AllowAny])
@role_required(CustomUser.DONOR)
def donate(request):
    donor = Donor.objects.filter(user=request.user).first()
    if donor is None:
        raise NotFound("Donor profile not found.")

    serializer = CreateDonationRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_input_response(serializer.errors)

    donation_request = DonationRequest.objects.create(
        donor=donor,
        donor_blood_type=donor.blood_type,
        status=DonationRequest.PENDING,
        **serializer.validated_data,
    )
    logger.info(f"Donor {donor.pk} offered a donation to blood bank {donation_request.blood_bank_id}")

    return Response(
        {
            "success": True,
            "message": "Donation request submitted.",
            "data": DonationRequestSerializer(donation_request).data,
        },
        status=status.HTTP_201_CREATED,
    )


# ============================================
# CERTIFICATE DOWNLOAD
# ============================================
@api_view(['GET'])
@permission_classes([AllowAny])
def download_certificate(request, donation_request_id):
    """Regenerate the certificate of a successful donation and stream it"""
    if not request.user or not request.user.is_authenticated:
        raise NotAuthenticated("Authentication required")

    not_available = "Certificate not available for this donation request."
    request_id = parse_request_id(donation_request_id, not_available)

    donation_request = (
        DonationRequest.objects
        .filter(id=request_id, status=DonationRequest.SUCCESS)
        .filter(Q(donor__user=request.user) | Q(blood_bank__user=request.user))
        .select_related('donor__user', 'patient', 'blood_bank')
        .first()
    )
    if donation_request is None or donation_request.patient_id is None:
        raise NotFound(not_available)

    blood_units = list(donation_request.blood_units.all())
    donation_date = blood_units[0].donation_date if blood_units else donation_request.updated_at
    record = build_certificate_record(
        donation_request,
        donation_request.blood_bank,
        donation_request.donor,
        donation_request.patient,
        blood_units,
        donation_date,
    )
    pdf_bytes = CertificateGenerator().render(record)

    response = HttpResponse(pdf_bytes, content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="donation-certificate-{request_id}.pdf"'
    return response
