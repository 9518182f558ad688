# patients/views.py
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from accounts.decorators import role_required
from accounts.models import CustomUser
from donations.models import DonationRequest
from donations.serializers import DonationRequestSerializer
from .models import Patient
from .serializers import PatientSerializer


@api_view(['GET'])
@permission_classes([AllowAny])
@role_required(CustomUser.PATIENT)
def patient_detail(request):
    """The caller's patient profile and the donations made for them"""
    patient = Patient.objects.filter(user=request.user).first()
    if patient is None:
        raise NotFound("Patient profile not found.")

    donations = DonationRequest.objects.filter(patient=patient).select_related('donor')

    return Response({
        "success": True,
        "data": {
            "patient": PatientSerializer(patient).data,
            "donations": DonationRequestSerializer(donations, many=True).data,
        },
    })
