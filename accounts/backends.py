# accounts/backends.py
from django.contrib.auth.backends import ModelBackend
from django.contrib.auth import get_user_model
from django.db.models import Q

User = get_user_model()


class EmailBackend(ModelBackend):
    """
    Lets donors, patients and blood bank admins sign in with their email
    (the login forms only ask for email). Username still works for Django admin.
    """
    def authenticate(self, request, username=None, password=None, **kwargs):
        username = username or kwargs.get('email')
        if username is None or password is None:
            return None

        user = User.objects.filter(Q(email__iexact=username) | Q(username=username)).order_by('id').first()
        if user is None:
            # Run the default password hasher once to reduce timing attack
            User().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None

    def user_can_authenticate(self, user):
        """Locked accounts are rejected the same way as inactive ones"""
        if getattr(user, 'is_locked', False):
            return False
        return super().user_can_authenticate(user)
