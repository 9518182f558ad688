# bloodbank_backend/celery.py
"""
Worker and beat entry point: `celery -A bloodbank_backend worker -B`.

Beat runs two jobs from CELERY_BEAT_SCHEDULE in settings: hourly expiry of
available blood units past their expiry date, and a 15 minute sweep that
re-issues certificates which failed to render or upload during acceptance.
"""
import os
from logging.config import dictConfig

from celery import Celery
from celery.signals import setup_logging

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'bloodbank_backend.settings')

app = Celery('bloodbank_backend')

# CELERY_BROKER_URL, CELERY_BEAT_SCHEDULE etc. (redis broker by default)
app.config_from_object('django.conf:settings', namespace='CELERY')

# Picks up donations.tasks
app.autodiscover_tasks()


@setup_logging.connect
def configure_worker_logging(**kwargs):
    """Workers log through the same LOGGING dict as the web process"""
    from django.conf import settings

    dictConfig(settings.LOGGING)
