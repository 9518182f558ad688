# donations/services.py
"""
Donation workflow used by the blood bank endpoints.

Accepting a donation is split in two phases:

1. A single database transaction flips the request from ``pending`` to
   ``success`` and creates the blood units. Either everything is written or
   nothing is.
2. After the commit, a best-effort certificate step renders a PDF, uploads
   it and stores the URL on the request. Its failures are logged and
   reported back as a ``CertificateOutcome``; they never undo phase 1.
"""
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from bloodbanks.models import BloodBank
from .certificates import (
    CertificateGenerator,
    CertificateOutcome,
    build_certificate_record,
    certificate_key,
)
from .models import BloodUnit, DonationRequest
from .storage import S3CertificateUploader

logger = logging.getLogger(__name__)

NOT_PENDING_MESSAGE = "Donation request not found or not pending."


@dataclass
class AcceptanceResult:
    donation_request: DonationRequest
    blood_units: List[BloodUnit] = field(default_factory=list)
    certificate: Optional[CertificateOutcome] = None

    @property
    def total_units_created(self):
        return len(self.blood_units)

    @property
    def certificate_url(self):
        if self.certificate and self.certificate.status == CertificateOutcome.ISSUED:
            return self.certificate.url
        return None

    @property
    def message(self):
        message = f"Donation accepted successfully and {self.total_units_created} blood units created."
        if self.certificate:
            message = f"{message} {self.certificate.message}"
        return message


def summarize_units(blood_units):
    """Counts by status and by blood type; every unit counts as 1"""
    by_status = Counter(unit.status for unit in blood_units)
    return {
        'total': len(blood_units),
        'available': by_status[BloodUnit.AVAILABLE],
        'used': by_status[BloodUnit.USED],
        'expired': by_status[BloodUnit.EXPIRED],
        'discarded': by_status[BloodUnit.DISCARDED],
        'byBloodType': dict(Counter(unit.donor_blood_type for unit in blood_units)),
    }


class DonationWorkflow:
    """
    Accept, reject and list donations for a blood bank user.

    `uploader` needs an ``upload(file_path, key) -> url`` method. When none
    is given the S3 uploader is built from settings on first use.
    """

    def __init__(self, uploader=None, generator=None):
        self._uploader = uploader
        self.generator = generator or CertificateGenerator()

    @property
    def uploader(self):
        if self._uploader is None:
            self._uploader = S3CertificateUploader.from_settings()
        return self._uploader

    # ============================================
    # ACCEPT
    # ============================================
    def accept_donation(self, user, donation_request_id, number_of_units=1, notes=None, expiry_days=None):
        if expiry_days is None:
            expiry_days = settings.BLOOD_UNIT_SHELF_LIFE_DAYS

        donation_request = DonationRequest.objects.filter(
            id=donation_request_id,
            blood_bank__user=user,
            status=DonationRequest.PENDING,
        ).first()
        if donation_request is None:
            raise NotFound(NOT_PENDING_MESSAGE)

        blood_bank = BloodBank.objects.filter(pk=donation_request.blood_bank_id).first()
        if blood_bank is None:
            raise NotFound("Blood bank not found.")

        donation_date = timezone.now()
        blood_units = self._commit_acceptance(
            donation_request, blood_bank, number_of_units, notes, donation_date, expiry_days
        )
        logger.info(
            f"Donation request {donation_request.id} accepted by {blood_bank.name}: "
            f"{len(blood_units)} blood units created"
        )

        donation_request.refresh_from_db()
        outcome = self.issue_certificate(donation_request, blood_bank, blood_units, donation_date)

        return AcceptanceResult(donation_request, blood_units, outcome)

    def _commit_acceptance(self, donation_request, blood_bank, number_of_units, notes, donation_date, expiry_days):
        """
        Flip the request to success and create its units in one transaction.
        The status flip only matches a row that is still pending, so a
        concurrent acceptance that committed first leaves nothing to update.
        """
        expiry_date = donation_date + timedelta(days=expiry_days)

        with transaction.atomic():
            updated = DonationRequest.objects.filter(
                pk=donation_request.pk,
                status=DonationRequest.PENDING,
            ).update(status=DonationRequest.SUCCESS, updated_at=timezone.now())

            if updated != 1:
                raise NotFound(NOT_PENDING_MESSAGE)

            blood_units = []
            for unit_number in range(1, number_of_units + 1):
                blood_units.append(BloodUnit.objects.create(
                    unit_number=str(unit_number),
                    donation_request=donation_request,
                    donor_id=donation_request.donor_id,
                    donor_name=donation_request.donor.name,
                    donor_blood_type=donation_request.donor_blood_type,
                    blood_bank=blood_bank,
                    blood_bank_name=blood_bank.name,
                    donation_date=donation_date,
                    expiry_date=expiry_date,
                    status=BloodUnit.AVAILABLE,
                    barcode=donation_request.barcode_for(blood_bank.name, unit_number),
                    notes=notes,
                ))

        return blood_units

    # ============================================
    # CERTIFICATE
    # ============================================
    def issue_certificate(self, donation_request, blood_bank=None, blood_units=None, donation_date=None):
        """
        Render, upload and record the certificate of a successful request.
        Never raises; the outcome says what happened.
        """
        try:
            # Related rows are fetched here, after the acceptance has committed
            blood_bank = blood_bank or donation_request.blood_bank
            if blood_units is None:
                blood_units = list(donation_request.blood_units.all())
            if donation_date is None:
                donation_date = blood_units[0].donation_date if blood_units else donation_request.updated_at

            donor = donation_request.donor if donation_request.donor_id else None
            patient = donation_request.patient if donation_request.patient_id else None
            if donor is None or patient is None:
                logger.warning(
                    f"Skipping certificate for donation request {donation_request.id}: donor or patient details missing"
                )
                return CertificateOutcome.skipped("Donor or patient details missing")

            record = build_certificate_record(
                donation_request, blood_bank, donor, patient, blood_units, donation_date
            )
            with self.generator.temporary_pdf(record) as pdf_path:
                url = self.uploader.upload(pdf_path, certificate_key(donation_request.id))

            DonationRequest.objects.filter(pk=donation_request.pk).update(certificate_url=url)
            donation_request.certificate_url = url
        except Exception as exc:
            logger.exception(f"Certificate generation failed for donation request {donation_request.id}")
            return CertificateOutcome.failed(exc)

        logger.info(f"Certificate issued for donation request {donation_request.id}")
        return CertificateOutcome.issued(url)

    # ============================================
    # REJECT
    # ============================================
    def reject_donation(self, user, donation_request_id, reason=None):
        updated = DonationRequest.objects.filter(
            id=donation_request_id,
            blood_bank__user=user,
            status=DonationRequest.PENDING,
        ).update(status=DonationRequest.REJECTED, updated_at=timezone.now())

        if updated != 1:
            raise NotFound(NOT_PENDING_MESSAGE)

        logger.info(f"Donation request {donation_request_id} rejected by {user.email}. Reason: {reason or 'none given'}")
        return DonationRequest.objects.get(id=donation_request_id)

    # ============================================
    # INVENTORY
    # ============================================
    def list_blood_units(self, user, status=None):
        queryset = (
            BloodUnit.objects
            .filter(blood_bank__user=user)
            .select_related('donation_request')
            .order_by('-donation_date')
        )
        if status:
            queryset = queryset.filter(status=status)

        blood_units = list(queryset)
        return blood_units, summarize_units(blood_units)
