# donations/storage.py
"""
Object storage for donation certificates (Amazon S3).

The uploader is handed to DonationWorkflow explicitly, so tests and tasks
can swap in a different implementation.
"""
import logging

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings

from .certificates import CertificateError

logger = logging.getLogger(__name__)


class S3CertificateUploader:
    # Stored byte-for-byte; browsers get a PDF, nothing is transcoded
    CONTENT_TYPE = 'application/pdf'

    def __init__(self, client, bucket, public_base_url):
        self.client = client
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip('/')

    @classmethod
    def from_settings(cls):
        client = boto3.client('s3', region_name=settings.AWS_REGION)
        return cls(client, settings.CERTIFICATE_BUCKET, settings.CERTIFICATE_PUBLIC_BASE_URL)

    def upload(self, file_path, key):
        """Upload a local file under `key` and return its public URL"""
        try:
            self.client.upload_file(
                file_path,
                self.bucket,
                key,
                ExtraArgs={
                    'ContentType': self.CONTENT_TYPE,
                    'ContentDisposition': 'inline',
                },
            )
        except (BotoCoreError, ClientError, S3UploadFailedError) as exc:
            raise CertificateError(f"Upload of {key} to bucket {self.bucket} failed: {exc}") from exc

        url = f"{self.public_base_url}/{key}"
        logger.info(f"Uploaded certificate to {url}")
        return url
