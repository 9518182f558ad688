# bloodbank_backend/views.py
import logging
import time

from django.conf import settings
from django.db import DatabaseError, connection
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()

ENDPOINTS = {
    'auth': {
        'donorLogin': '/donor-login',
        'patientLogin': '/patient-login',
        'adminLogin': '/admin-login',
        'authStatus': '/auth/me',
    },
    'donations': {
        'donate': '/donate',
        'requests': '/donations/requests',
        'accept': '/donations/accept',
        'reject': '/donations/{donationRequestId}/reject',
        'units': '/donations/units',
    },
    'data': {
        'byCity': '/getByCity',
        'bloodBanks': '/blood-banks',
        'patientDetail': '/patientDetail',
    },
}


def database_status():
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
            cursor.fetchone()
    except DatabaseError as exc:
        logger.error(f"Health check database probe failed: {exc}")
        return 'unavailable'
    return 'connected'


@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    return Response({
        'success': True,
        'data': {
            'status': 'healthy',
            'timestamp': timezone.now().isoformat(),
            'server': settings.SERVER_NAME,
            'version': settings.SERVER_VERSION,
            'environment': settings.ENVIRONMENT,
            'uptime': round(time.monotonic() - STARTED_AT, 2),
            'database': database_status(),
            'endpoints': ENDPOINTS,
        },
    })
