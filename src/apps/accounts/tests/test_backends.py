"""
Tests for the email/password authentication backend.
"""

from django.contrib.auth import authenticate

from apps.accounts.backends import EmailCredentialsBackend

USER_PASSWORD = "testpass123"


class TestEmailCredentialsBackend:
    backend = EmailCredentialsBackend()

    def test_authenticates_by_email(self, user):
        assert self.backend.authenticate(None, email=user.email, password=USER_PASSWORD) == user

    def test_accepts_email_as_username(self, user):
        """The admin login form posts the email in the username field."""
        assert self.backend.authenticate(None, username=user.email, password=USER_PASSWORD) == user

    def test_bad_credentials_return_none(self, user):
        assert self.backend.authenticate(None, email=user.email, password="wrong") is None
        assert self.backend.authenticate(None, email="ghost@example.com", password="x") is None
        assert self.backend.authenticate(None) is None

    def test_get_user_skips_inactive_accounts(self, user, make_user):
        inactive = make_user(is_active=False)

        assert self.backend.get_user(user.pk) == user
        assert self.backend.get_user(inactive.pk) is None
        assert self.backend.get_user(999999) is None

    def test_is_wired_into_django_authenticate(self, user):
        assert authenticate(email=user.email, password=USER_PASSWORD) == user
