# donations/certificates.py
"""
Donation certificate PDFs.

The acceptance workflow renders a certificate into a temporary file, hands
the path to the uploader and relies on `temporary_pdf` to remove the file
on every exit path. The download endpoint renders the same document
straight to bytes.
"""
import logging
import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from django.conf import settings
from fpdf import FPDF
from fpdf.errors import FPDFException
from fpdf.enums import XPos, YPos

logger = logging.getLogger(__name__)

BRAND_RED = (178, 34, 34)
DARK_RED = (139, 0, 0)
TEXT_GREY = (80, 80, 80)

CORE_FONT = 'Helvetica'
UNICODE_FONT = 'CertificateSans'


class CertificateError(Exception):
    """Certificate could not be rendered or stored"""


@dataclass
class CertificateUnit:
    id: str
    unit_number: str
    barcode: str
    volume: int
    expiry_date: datetime


@dataclass
class CertificateRecord:
    donation_request_id: str
    donor_id: int
    donor_name: str
    donor_email: str
    donor_phone: str
    donor_age: Optional[int]
    donor_blood_type: str
    blood_bank_name: str
    blood_bank_address: str
    donation_date: datetime
    urgency_level: str
    patient_blood_type: str
    units: List[CertificateUnit] = field(default_factory=list)

    @property
    def number_of_units(self):
        return len(self.units)


@dataclass
class CertificateOutcome:
    """What happened to the certificate after the donation was committed"""
    ISSUED = 'issued'
    SKIPPED = 'skipped'
    FAILED = 'failed'

    status: str
    url: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def issued(cls, url):
        return cls(cls.ISSUED, url=url)

    @classmethod
    def skipped(cls, reason):
        return cls(cls.SKIPPED, error=reason)

    @classmethod
    def failed(cls, error):
        return cls(cls.FAILED, error=str(error))

    @property
    def message(self):
        if self.status == self.ISSUED:
            return "Certificate is available for download."
        if self.status == self.SKIPPED:
            return "Certificate could not be generated due to missing details."
        return "Certificate generation failed, but the donation was processed."


def certificate_key(donation_request_id):
    """Object storage key for a request's certificate"""
    return f"{settings.CERTIFICATE_FOLDER}/certificate_{donation_request_id}"


def build_certificate_record(donation_request, blood_bank, donor, patient, blood_units, donation_date):
    units = sorted(blood_units, key=lambda unit: int(unit.unit_number))
    return CertificateRecord(
        donation_request_id=str(donation_request.id),
        donor_id=donor.pk,
        donor_name=donor.name,
        donor_email=donor.email,
        donor_phone=donor.phone,
        donor_age=donor.age,
        donor_blood_type=donation_request.donor_blood_type,
        blood_bank_name=blood_bank.name,
        blood_bank_address=blood_bank.display_address,
        donation_date=donation_date,
        urgency_level=donation_request.urgency_level or 'medium',
        patient_blood_type=patient.blood_type,
        units=[
            CertificateUnit(
                id=str(unit.id),
                unit_number=unit.unit_number,
                barcode=unit.barcode or 'N/A',
                volume=unit.volume,
                expiry_date=unit.expiry_date,
            )
            for unit in units
        ],
    )


class DonationCertificatePDF(FPDF):
    """
    Certificate layout.

    With `font_path` set, a TrueType font is registered and names in any
    script it covers are drawn as-is. Without it the built-in Helvetica is
    used, which only knows Latin-1, so other characters print as '?'.
    """
    def __init__(self, *args, font_path=None, bold_font_path=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.certificate_font = CORE_FONT
        self.uses_ttf_font = False
        if font_path:
            self.add_font(UNICODE_FONT, '', font_path)
            self.add_font(UNICODE_FONT, 'B', bold_font_path or font_path)
            self.add_font(UNICODE_FONT, 'I', font_path)
            self.certificate_font = UNICODE_FONT
            self.uses_ttf_font = True

    def printable(self, value):
        text = str(value)
        if self.uses_ttf_font:
            return text
        return text.encode('latin-1', 'replace').decode('latin-1')

    def header(self):
        self.set_fill_color(*BRAND_RED)
        self.rect(0, 0, 210, 15, 'F')
        self.set_font(self.certificate_font, 'B', 14)
        self.set_text_color(255, 255, 255)
        self.set_y(4)
        self.cell(0, 8, 'BLOOD DONATION CERTIFICATE', align='C', new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_y(22)

    def footer(self):
        self.set_y(-15)
        self.set_font(self.certificate_font, 'I', 8)
        self.set_text_color(128, 128, 128)
        self.cell(0, 10, f'Donation certificate - Page {self.page_no()}', align='C')

    def section_title(self, title):
        self.set_font(self.certificate_font, 'B', 12)
        self.set_text_color(*DARK_RED)
        self.cell(0, 8, title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_draw_color(*DARK_RED)
        self.line(10, self.get_y(), 200, self.get_y())
        self.ln(3)

    def key_value(self, key, value):
        self.set_font(self.certificate_font, 'B', 10)
        self.set_text_color(33, 37, 41)
        self.cell(50, 6, f'{key}:')
        self.set_font(self.certificate_font, '', 10)
        self.cell(0, 6, self.printable(value), new_x=XPos.LMARGIN, new_y=YPos.NEXT)


class CertificateGenerator:
    def __init__(self, tmp_dir=None, font_path=None, bold_font_path=None):
        self.tmp_dir = tmp_dir
        self.font_path = font_path or settings.CERTIFICATE_FONT_PATH
        self.bold_font_path = bold_font_path or settings.CERTIFICATE_BOLD_FONT_PATH

    def render(self, record: CertificateRecord) -> bytes:
        try:
            pdf = DonationCertificatePDF(
                'P', 'mm', 'A4',
                font_path=self.font_path,
                bold_font_path=self.bold_font_path,
            )
            pdf.add_page()
            family = pdf.certificate_font

            pdf.set_font(family, '', 12)
            pdf.set_text_color(*TEXT_GREY)
            pdf.cell(0, 8, 'This certificate is awarded to', align='C', new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            pdf.set_font(family, 'B', 24)
            pdf.set_text_color(0, 0, 0)
            pdf.cell(0, 14, pdf.printable(record.donor_name), align='C', new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            pdf.set_font(family, '', 11)
            pdf.set_text_color(*TEXT_GREY)
            pdf.multi_cell(
                0, 6,
                f"for the voluntary donation of {record.number_of_units} unit(s) of "
                f"{record.donor_blood_type} blood. Your contribution brings hope and saves lives.",
                align='C',
            )
            pdf.ln(4)

            pdf.section_title('Donor')
            pdf.key_value('Name', record.donor_name)
            pdf.key_value('Donor ID', record.donor_id)
            pdf.key_value('Email', record.donor_email)
            pdf.key_value('Phone', record.donor_phone)
            pdf.key_value('Age', record.donor_age if record.donor_age is not None else 'N/A')
            pdf.key_value('Blood Type', record.donor_blood_type)
            pdf.ln(2)

            pdf.section_title('Donation')
            pdf.key_value('Blood Bank', record.blood_bank_name)
            pdf.key_value('Address', record.blood_bank_address)
            pdf.key_value('Donation Date', record.donation_date.strftime('%Y-%m-%d'))
            pdf.key_value('Request ID', record.donation_request_id)
            pdf.key_value('Urgency', record.urgency_level.upper())
            pdf.key_value('Patient Blood Type', record.patient_blood_type)
            pdf.ln(2)

            pdf.section_title('Blood Units')
            self._units_table(pdf, record.units)

            return bytes(pdf.output())
        except (FPDFException, OSError) as exc:
            raise CertificateError(f"Could not render certificate: {exc}") from exc

    def _units_table(self, pdf, units):
        widths = (15, 75, 25, 30, 45)
        headers = ('#', 'Barcode', 'Volume', 'Expiry', 'Unit ID')

        pdf.set_font(pdf.certificate_font, 'B', 9)
        pdf.set_fill_color(240, 240, 240)
        for width, title in zip(widths, headers):
            pdf.cell(width, 7, title, border=1, fill=True)
        pdf.ln()

        pdf.set_font(pdf.certificate_font, '', 8)
        for unit in units:
            row = (
                unit.unit_number,
                unit.barcode,
                f'{unit.volume} ml',
                unit.expiry_date.strftime('%Y-%m-%d'),
                unit.id[:18],
            )
            for width, value in zip(widths, row):
                pdf.cell(width, 6, pdf.printable(value), border=1)
            pdf.ln()

    @contextmanager
    def temporary_pdf(self, record: CertificateRecord):
        """
        Render the certificate into a temp file and yield its path.
        The file is removed when the block exits, however it exits.
        """
        tmp_dir = self.tmp_dir or settings.CERTIFICATE_TMP_DIR
        fd, path = tempfile.mkstemp(
            prefix=f"certificate_{record.donation_request_id}_",
            suffix='.pdf',
            dir=tmp_dir,
        )
        try:
            with os.fdopen(fd, 'wb') as fh:
                fh.write(self.render(record))
            yield path
        finally:
            try:
                os.remove(path)
            except FileNotFoundError:
                logger.warning(f"Temporary certificate {path} was already removed")
