"""
Unit tests for the account services.
"""

import pytest
from django.db import DatabaseError

from apps.accounts import repositories, services
from apps.accounts.models import OAuthAccount, User
from apps.core.exceptions import (
    AuthenticationFailedError,
    DuplicateEmailError,
    StorageError,
    ValidationError,
)

USER_PASSWORD = "testpass123"


class TestVerifyCredentials:
    def test_returns_principal_for_matching_password(self, user):
        principal = services.verify_credentials(email=user.email, password=USER_PASSWORD)

        assert principal == services.Principal(
            id=str(user.pk), email="test@example.com", name="Test User", image=None
        )

    def test_email_domain_case_is_ignored(self, user):
        principal = services.verify_credentials(email="test@EXAMPLE.com ", password=USER_PASSWORD)

        assert principal.id == str(user.pk)

    def test_unknown_email_and_wrong_password_fail_identically(self, user, mocker):
        make_password = mocker.patch(
            "apps.accounts.services.make_password", wraps=services.make_password
        )

        with pytest.raises(AuthenticationFailedError) as unknown:
            services.verify_credentials(email="nobody@example.com", password=USER_PASSWORD)
        with pytest.raises(AuthenticationFailedError) as wrong:
            services.verify_credentials(email=user.email, password="not-the-password")

        assert str(unknown.value) == str(wrong.value)
        make_password.assert_called_once_with(USER_PASSWORD)

    @pytest.mark.parametrize(
        "email,password",
        [
            ("nobody@example.com", USER_PASSWORD),
            ("test@example.com", "not-the-password"),
            ("inactive@example.com", USER_PASSWORD),
            ("oauth@example.com", USER_PASSWORD),
        ],
    )
    def test_every_failure_costs_one_hash(self, user, make_user, mocker, email, password):
        make_user(email="inactive@example.com", is_active=False)
        make_user(email="oauth@example.com", password=None)
        make_password = mocker.patch(
            "apps.accounts.services.make_password", wraps=services.make_password
        )
        check_password = mocker.patch(
            "apps.accounts.services.check_password", wraps=services.check_password
        )

        with pytest.raises(AuthenticationFailedError):
            services.verify_credentials(email=email, password=password)

        assert make_password.call_count + check_password.call_count == 1

    @pytest.mark.parametrize("email,password", [("", USER_PASSWORD), ("test@example.com", "")])
    def test_blank_input_fails(self, user, email, password):
        with pytest.raises(AuthenticationFailedError):
            services.verify_credentials(email=email, password=password)

    def test_account_without_password_fails(self, make_user):
        oauth_only = make_user(email="oauth@example.com", password=None)

        with pytest.raises(AuthenticationFailedError):
            services.verify_credentials(email=oauth_only.email, password="")
        with pytest.raises(AuthenticationFailedError):
            services.verify_credentials(email=oauth_only.email, password="anything")

    def test_inactive_account_fails(self, make_user):
        inactive = make_user(is_active=False)

        with pytest.raises(AuthenticationFailedError):
            services.verify_credentials(email=inactive.email, password=USER_PASSWORD)

    def test_does_not_modify_stored_hash(self, user):
        stored = user.password

        services.verify_credentials(email=user.email, password=USER_PASSWORD)

        user.refresh_from_db()
        assert user.password == stored

    def test_storage_failure_is_not_reported_as_bad_credentials(self, mocker):
        mocker.patch(
            "apps.accounts.repositories.get_user_by_email",
            side_effect=DatabaseError("server closed the connection"),
        )

        with pytest.raises(StorageError):
            services.verify_credentials(email="a@example.com", password="secret")


class TestSignup:
    def test_creates_account_that_can_sign_in(self):
        result = services.signup(name="Ada", email="ada@example.com", password="s3cret!")

        assert result == services.SignupResult(success=True, message="Signup completed.")
        assert services.verify_credentials(email="ada@example.com", password="s3cret!").name == "Ada"

    def test_password_is_stored_hashed(self):
        services.signup(name="Ada", email="ada@example.com", password="s3cret!")

        stored = User.objects.get(email="ada@example.com").password
        assert stored != "s3cret!"
        assert "s3cret!" not in stored

    def test_duplicate_email(self, user):
        with pytest.raises(DuplicateEmailError):
            services.signup(name="Again", email=user.email, password="s3cret!")

        assert User.objects.filter(email=user.email).count() == 1

    def test_duplicate_email_with_different_domain_case(self, user):
        with pytest.raises(DuplicateEmailError):
            services.signup(name="Again", email="test@Example.COM", password="s3cret!")

    def test_lost_race_reports_duplicate(self, user, mocker):
        mocker.patch("apps.accounts.repositories.email_exists", return_value=False)

        with pytest.raises(DuplicateEmailError):
            services.signup(name="Again", email=user.email, password="s3cret!")

    @pytest.mark.parametrize(
        "name,email,password,message",
        [
            ("", "ada@example.com", "s3cret!", "Name is required."),
            ("   ", "ada@example.com", "s3cret!", "Name is required."),
            ("Ada", "not-an-email", "s3cret!", "Enter a valid email address."),
            ("Ada", "", "s3cret!", "Enter a valid email address."),
            ("Ada", "ada@example.com", "12345", "Password must be at least 6 characters."),
        ],
    )
    def test_rejects_malformed_input(self, name, email, password, message):
        with pytest.raises(ValidationError) as excinfo:
            services.signup(name=name, email=email, password=password)

        assert excinfo.value.message == message
        assert User.objects.count() == 0


class TestResolveOAuthUser:
    def test_creates_user_on_first_login(self):
        user = services.resolve_oauth_user(
            provider="github",
            provider_account_id="123",
            email="octo@example.com",
            name="Octo",
            image="https://example.com/octo.png",
        )

        assert user.email == "octo@example.com"
        assert user.image == "https://example.com/octo.png"
        assert not user.has_usable_password()
        assert OAuthAccount.objects.filter(user=user, provider="github").exists()

    def test_returns_linked_user_on_later_logins(self):
        first = services.resolve_oauth_user(
            provider="github", provider_account_id="123", email="octo@example.com"
        )

        again = services.resolve_oauth_user(
            provider="github", provider_account_id="123", email="changed@example.com"
        )

        assert again == first
        assert OAuthAccount.objects.count() == 1

    def test_concurrent_first_login_returns_winning_user(self, make_user, mocker):
        """
        Another request created the user and the link after our lookups
        ran; our insert hits the unique email and the retry finds theirs.
        """
        winner = make_user(email="octo@example.com", password=None)
        OAuthAccount.objects.create(user=winner, provider="github", provider_account_id="123")
        real_get_account = repositories.get_oauth_account
        real_get_user = repositories.get_user_by_email
        mocker.patch(
            "apps.accounts.repositories.get_oauth_account",
            side_effect=[None, real_get_account("github", "123")],
        )
        mocker.patch(
            "apps.accounts.repositories.get_user_by_email",
            side_effect=[None, real_get_user("octo@example.com")],
        )

        resolved = services.resolve_oauth_user(
            provider="github", provider_account_id="123", email="octo@example.com"
        )

        assert resolved == winner
        assert User.objects.filter(email="octo@example.com").count() == 1
        assert OAuthAccount.objects.count() == 1

    def test_refuses_to_link_existing_email_by_default(self, user):
        with pytest.raises(AuthenticationFailedError):
            services.resolve_oauth_user(
                provider="github",
                provider_account_id="123",
                email=user.email,
                email_verified=True,
            )

        assert OAuthAccount.objects.count() == 0

    def test_links_existing_email_when_enabled_and_verified(self, user, settings):
        settings.ACCOUNTS_OAUTH_LINK_BY_EMAIL = True

        resolved = services.resolve_oauth_user(
            provider="github",
            provider_account_id="123",
            email=user.email,
            email_verified=True,
        )

        assert resolved == user
        assert OAuthAccount.objects.get().user == user

    def test_unverified_email_is_never_linked(self, user, settings):
        settings.ACCOUNTS_OAUTH_LINK_BY_EMAIL = True

        with pytest.raises(AuthenticationFailedError):
            services.resolve_oauth_user(
                provider="github", provider_account_id="123", email=user.email
            )

    def test_requires_provider_identity(self):
        with pytest.raises(AuthenticationFailedError):
            services.resolve_oauth_user(
                provider="github", provider_account_id="", email="a@example.com"
            )
