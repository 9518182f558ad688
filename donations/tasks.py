# donations/tasks.py
"""
Periodic Celery tasks for blood unit inventory and certificates
"""
import logging

from celery import shared_task
from django.utils import timezone

from .models import BloodUnit, DonationRequest
from .services import DonationWorkflow

logger = logging.getLogger(__name__)


@shared_task
def expire_blood_units():
    """
    Mark available units past their expiry date as expired.
    Runs hourly from the beat schedule.
    """
    expired = BloodUnit.objects.filter(
        status=BloodUnit.AVAILABLE,
        expiry_date__lte=timezone.now(),
    ).update(status=BloodUnit.EXPIRED, updated_at=timezone.now())

    if expired:
        logger.info(f"Marked {expired} blood units as expired")
    return f"{expired} blood units expired"


@shared_task
def retry_missing_certificates(limit=50):
    """
    Issue certificates for successful donations whose certificate step
    failed at acceptance time.
    """
    pending = (
        DonationRequest.objects
        .filter(status=DonationRequest.SUCCESS, certificate_url__isnull=True, patient__isnull=False)
        .select_related('donor', 'patient', 'blood_bank')
        .order_by('updated_at')[:limit]
    )

    workflow = DonationWorkflow()
    issued = 0
    for donation_request in pending:
        outcome = workflow.issue_certificate(donation_request)
        if outcome.url:
            issued += 1

    if issued:
        logger.info(f"Issued {issued} missing certificates")
    return f"{issued} certificates issued"
