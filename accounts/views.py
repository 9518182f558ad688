import logging

from django.conf import settings
from django.contrib.auth import authenticate, get_user_model
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.models import CustomUser
from accounts.serializers import (
    BloodBankRegistrationSerializer,
    DonorRegistrationSerializer,
    LoginSerializer,
    PatientRegistrationSerializer,
)
from bloodbank_backend.exceptions import invalid_input_response
from bloodbanks.serializers import BloodBankSerializer
from donors.serializers import DonorSerializer
from patients.serializers import PatientSerializer

User = get_user_model()
logger = logging.getLogger(__name__)


# -----------------------------
# HELPERS
# -----------------------------
def get_tokens_for_user(user):
    """
    Generate JWT tokens and embed role in payload
    """
    refresh = RefreshToken.for_user(user)
    refresh['user_type'] = user.user_type
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


def profile_payload(user):
    """User data returned by login, registration and /auth/me (never the password)"""
    if user.user_type == CustomUser.DONOR and hasattr(user, 'donor_profile'):
        data = DonorSerializer(user.donor_profile).data
    elif user.user_type == CustomUser.PATIENT and hasattr(user, 'patient_profile'):
        data = PatientSerializer(user.patient_profile).data
    elif user.user_type == CustomUser.BLOOD_BANK and hasattr(user, 'blood_bank_profile'):
        data = BloodBankSerializer(user.blood_bank_profile).data
    else:
        data = {
            'id': user.pk,
            'name': user.get_full_name() or user.username,
            'email': user.email,
        }
    data['userId'] = user.pk
    data['role'] = user.role
    return data


def set_auth_cookie(response, access_token):
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        access_token,
        max_age=settings.AUTH_COOKIE_MAX_AGE,
        httponly=True,
        secure=True,
        samesite='None',
    )
    return response


# -----------------------------
# REGISTER API
# -----------------------------
def _register(request, serializer_class):
    serializer = serializer_class(data=request.data)
    if not serializer.is_valid():
        return invalid_input_response(serializer.errors)

    profile = serializer.save()
    tokens = get_tokens_for_user(profile.user)

    response = Response(
        {
            "success": True,
            "message": "Registration successful",
            "tokens": tokens,
            "user": profile_payload(profile.user),
        },
        status=status.HTTP_201_CREATED
    )
    return set_auth_cookie(response, tokens['access'])


@api_view(['POST'])
@permission_classes([AllowAny])
def register_donor(request):
    return _register(request, DonorRegistrationSerializer)


@api_view(['POST'])
@permission_classes([AllowAny])
def register_patient(request):
    return _register(request, PatientRegistrationSerializer)


@api_view(['POST'])
@permission_classes([AllowAny])
def register_blood_bank(request):
    return _register(request, BloodBankRegistrationSerializer)


# -----------------------------
# LOGIN API
# -----------------------------
def _login(request, user_type):
    """
    JWT login scoped to one account type, with account lock after 5 failed attempts
    """
    serializer = LoginSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_input_response(serializer.errors)

    email = serializer.validated_data['email']
    password = serializer.validated_data['password']

    user = User.objects.filter(email__iexact=email, user_type=user_type).first()
    if not user:
        raise AuthenticationFailed("Invalid email or password")

    if user.is_locked:
        raise AuthenticationFailed("Account locked due to multiple failed attempts")

    user_auth = authenticate(request, username=email, password=password)
    if user_auth is None or user_auth.pk != user.pk:
        user.register_failed_login()
        logger.warning(f"Failed {user_type} login for {email} ({user.failed_attempts} attempts)")
        raise AuthenticationFailed("Invalid email or password")

    user.reset_failed_logins()
    tokens = get_tokens_for_user(user)

    response = Response({
        "success": True,
        "message": "Login successful",
        "tokens": tokens,
        "user": profile_payload(user),
    })
    return set_auth_cookie(response, tokens['access'])


@api_view(['POST'])
@permission_classes([AllowAny])
def donor_login(request):
    return _login(request, CustomUser.DONOR)


@api_view(['POST'])
@permission_classes([AllowAny])
def patient_login(request):
    return _login(request, CustomUser.PATIENT)


@api_view(['POST'])
@permission_classes([AllowAny])
def admin_login(request):
    """Blood bank admin login"""
    return _login(request, CustomUser.BLOOD_BANK)


# -----------------------------
# SESSION STATE
# -----------------------------
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def verify_auth(request):
    return Response({
        "success": True,
        "user": profile_payload(request.user),
    })


@api_view(['POST'])
@permission_classes([AllowAny])
def logout(request):
    response = Response({"success": True, "message": "Logout successful"})
    response.delete_cookie(settings.AUTH_COOKIE_NAME, samesite='None')
    return response
