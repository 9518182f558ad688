# bloodbank_backend/exceptions.py
"""
Uniform JSON error bodies for every API view.

    {"success": false, "error": "...", "details": [{"field": ..., "message": ...}]}
"""
import logging

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)


def flatten_errors(errors, prefix=''):
    """Turn DRF's nested error structure into a flat [{field, message}] list"""
    details = []
    if isinstance(errors, dict):
        for field, value in errors.items():
            path = f"{prefix}.{field}" if prefix else str(field)
            details.extend(flatten_errors(value, path))
    elif isinstance(errors, (list, tuple)):
        for value in errors:
            details.extend(flatten_errors(value, prefix))
    else:
        details.append({'field': prefix or 'non_field_errors', 'message': str(errors)})
    return details


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        # Anything DRF doesn't know about (DatabaseError, bugs) is a 500
        view = context.get('view')
        logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'view'}: {exc}")
        set_rollback()
        return Response(
            {'success': False, 'error': 'Internal Server Error'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ValidationError):
        response.data = {
            'success': False,
            'error': 'Invalid input data.',
            'details': flatten_errors(exc.detail),
        }
    else:
        detail = response.data.get('detail') if isinstance(response.data, dict) else response.data
        response.data = {'success': False, 'error': str(detail)}

    return response


def invalid_input_response(errors):
    """400 body for a serializer that failed `is_valid()`"""
    return Response(
        {
            'success': False,
            'error': 'Invalid input data.',
            'details': flatten_errors(errors),
        },
        status=status.HTTP_400_BAD_REQUEST,
    )
