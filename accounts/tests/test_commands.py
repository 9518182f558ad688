from io import StringIO
from unittest import mock

import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError

User = get_user_model()

pytestmark = pytest.mark.django_db


def test_createsuperuser_secure_requires_configured_secret(settings):
    settings.SUPERUSER_SECRET_KEY = None

    with pytest.raises(CommandError):
        call_command('createsuperuser_secure', email='root@example.com')


def test_createsuperuser_secure_creates_super_admin(settings):
    settings.SUPERUSER_SECRET_KEY = 'let-me-in'
    out = StringIO()

    with mock.patch('getpass.getpass', side_effect=['let-me-in', 'SecurePass123']):
        call_command('createsuperuser_secure', email='root@example.com', stdout=out)

    admin = User.objects.get(email='root@example.com')
    assert admin.is_superuser
    assert admin.user_type == User.SUPER_ADMIN
    assert 'created successfully' in out.getvalue()


def test_createsuperuser_secure_wrong_secret(settings):
    settings.SUPERUSER_SECRET_KEY = 'let-me-in'
    out = StringIO()

    with mock.patch('getpass.getpass', return_value='guess'):
        call_command('createsuperuser_secure', email='root@example.com', stdout=out)

    assert not User.objects.filter(email='root@example.com').exists()
    assert 'Invalid secret key' in out.getvalue()
