import getpass

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from accounts.models import CustomUser

User = get_user_model()


class Command(BaseCommand):
    help = 'Create a super admin account; requires SUPERUSER_SECRET_KEY'

    def add_arguments(self, parser):
        parser.add_argument('--email', help='Email of the new super admin')

    def handle(self, *args, **options):
        expected_secret = getattr(settings, 'SUPERUSER_SECRET_KEY', None)
        if not expected_secret:
            raise CommandError('SUPERUSER_SECRET_KEY is not configured.')

        secret = getpass.getpass('Enter SUPERUSER SECRET KEY: ')
        if secret != expected_secret:
            self.stdout.write(self.style.ERROR('Invalid secret key. Cannot create superuser.'))
            return

        email = options.get('email') or input('Email: ')
        password = getpass.getpass('Password: ')

        if User.objects.filter(email__iexact=email).exists():
            self.stdout.write(self.style.ERROR('User with this email already exists.'))
            return

        User.objects.create_superuser(
            username=email[:150],
            email=email,
            password=password,
            user_type=CustomUser.SUPER_ADMIN,
        )

        self.stdout.write(self.style.SUCCESS(f'Super admin {email} created successfully!'))
