# api/views.py
import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from accounts.decorators import role_required
from accounts.models import CustomUser
from bloodbank_backend.exceptions import invalid_input_response
from bloodbanks.models import BloodBank
from bloodbanks.serializers import BloodBankDirectorySerializer
from donations.models import BloodUnit, DonationRequest
from donors.models import Donor
from donors.serializers import DonorSerializer
from patients.models import Patient
from patients.serializers import PatientSerializer

from .serializers import DONORS, CityLookupSerializer

logger = logging.getLogger(__name__)


# ============================================
# LOOKUPS
# ============================================
@api_view(['GET'])
@permission_classes([AllowAny])
def get_by_city(request):
    """
    Donors (field=1) or patients (field=2) in a city.
    ?match=exact|startsWith|contains, case-insensitive.
    """
    serializer = CityLookupSerializer(data=request.query_params)
    if not serializer.is_valid():
        return invalid_input_response(serializer.errors)

    if serializer.validated_data['field'] == DONORS:
        queryset = Donor.objects.filter(**serializer.city_filter).select_related('user')
        rows = DonorSerializer(queryset, many=True).data
        label = 'donors'
    else:
        queryset = Patient.objects.filter(**serializer.city_filter).select_related('user')
        rows = PatientSerializer(queryset, many=True).data
        label = 'patients'

    if not rows:
        raise NotFound(f"No {label} found in {serializer.validated_data['city']}.")

    return Response({
        "success": True,
        "message": f"{len(rows)} {label} found.",
        "data": rows,
    })


@api_view(['GET'])
@permission_classes([AllowAny])
def blood_bank_directory(request):
    queryset = BloodBank.objects.all()
    city = request.query_params.get('city')
    if city:
        queryset = queryset.filter(city__iexact=city)

    return Response({
        "success": True,
        "data": BloodBankDirectorySerializer(queryset, many=True).data,
    })


# ============================================
# STATS
# ============================================
@api_view(['GET'])
@permission_classes([AllowAny])
@role_required(CustomUser.SUPER_ADMIN)
def dashboard_stats(request):
    """Counts for the super admin dashboard"""
    return Response({
        "success": True,
        "data": {
            'totalDonors': Donor.objects.count(),
            'availableDonors': Donor.objects.filter(is_available=True).count(),
            'totalPatients': Patient.objects.count(),
            'totalBloodBanks': BloodBank.objects.count(),
            'pendingRequests': DonationRequest.objects.filter(status=DonationRequest.PENDING).count(),
            'successfulDonations': DonationRequest.objects.filter(status=DonationRequest.SUCCESS).count(),
            'availableUnits': BloodUnit.objects.filter(status=BloodUnit.AVAILABLE).count(),
        },
    })
