"""
Account services: signup, credential verification and OAuth account
resolution.

Every failure of `verify_credentials` raises the same
`AuthenticationFailedError`, whatever the cause, so callers cannot tell a
missing account from a wrong password.
"""

import functools
import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction

from apps.core.exceptions import (
    AuthenticationFailedError,
    DuplicateEmailError,
    ValidationError,
)
from apps.core.services import translate_storage_errors

from . import repositories
from .models import User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class Principal:
    """Minimal identity stored in the session and returned to clients."""

    id: str
    email: str
    name: str
    image: Optional[str] = None


@dataclass(frozen=True)
class SignupResult:
    success: bool
    message: str


def to_principal(user: User) -> Principal:
    return Principal(id=str(user.pk), email=user.email, name=user.name, image=user.image)


def verify_credentials(*, email: str, password: str) -> Principal:
    """
    Checks an email/password pair against the stored hash.

    Read-only: a successful check does not rehash or otherwise touch the
    user row.

    Args:
        email: The email the user signed up with.
        password: The plaintext password.

    Returns:
        The matching Principal.

    Raises:
        AuthenticationFailedError: For any mismatch, with one fixed message.
    """
    return to_principal(authenticate_user(email=email, password=password))


def authenticate_user(*, email: str, password: str) -> User:
    """Same check as `verify_credentials`, returning the User for session login."""
    if not email or not password:
        raise AuthenticationFailedError()

    with translate_storage_errors("verify_credentials"):
        user = repositories.get_user_by_email(email)

    # Every failure pays exactly one hash, like a wrong password does.
    if user is None:
        make_password(password)
        logger.warning("Credential check failed.")
        raise AuthenticationFailedError()

    if not user.is_active or not user.has_usable_password():
        make_password(password)
        logger.warning("Credential check failed.", extra={"user_id": user.pk})
        raise AuthenticationFailedError()

    if not check_password(password, user.password):
        logger.warning("Credential check failed.", extra={"user_id": user.pk})
        raise AuthenticationFailedError()

    return user


def _validate_signup(name: str, email: str, password: str) -> None:
    if not name:
        raise ValidationError("Name is required.")
    try:
        validate_email(email)
    except DjangoValidationError:
        raise ValidationError("Enter a valid email address.") from None
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
        )


def signup(*, name: str, email: str, password: str) -> SignupResult:
    """
    Registers a new password account.

    Raises:
        ValidationError: When name, email or password is malformed.
        DuplicateEmailError: When the email is already registered, including
            when a concurrent signup wins the race for the same email.
    """
    name = (name or "").strip()
    email = (email or "").strip()
    password = password or ""
    _validate_signup(name, email, password)

    with translate_storage_errors("signup"):
        if repositories.email_exists(email):
            raise DuplicateEmailError()
        try:
            with transaction.atomic():
                user = repositories.create_user(name=name, email=email, password=password)
        except IntegrityError:
            raise DuplicateEmailError() from None

    logger.info("User signed up.", extra={"user_id": user.pk})
    return SignupResult(success=True, message="Signup completed.")


def _link_provider_account(
    *,
    provider: str,
    provider_account_id: str,
    email: str,
    name: str,
    image: Optional[str],
    email_verified: bool,
) -> tuple[User, bool]:
    """One attempt at resolving a provider login; True when a link was made."""
    account = repositories.get_oauth_account(provider, provider_account_id)
    if account is not None:
        return account.user, False

    user = repositories.get_user_by_email(email)
    if user is not None:
        if not (settings.ACCOUNTS_OAUTH_LINK_BY_EMAIL and email_verified):
            logger.warning(
                "Refused to link provider account to existing user.",
                extra={"provider": provider, "user_id": user.pk},
            )
            raise AuthenticationFailedError()
    else:
        user = repositories.create_user(name=name, email=email, image=image)

    repositories.link_oauth_account(
        user=user, provider=provider, provider_account_id=provider_account_id
    )
    return user, True


def resolve_oauth_user(
    *,
    provider: str,
    provider_account_id: str,
    email: str,
    name: str = "",
    image: Optional[str] = None,
    email_verified: bool = False,
) -> User:
    """
    Finds or creates the user behind an external provider login.

    An existing link for the provider account wins. Otherwise a password
    account with the same email is only linked when
    `ACCOUNTS_OAUTH_LINK_BY_EMAIL` is on and the provider vouches for the
    email; a new user is created when the email is unknown.

    When a concurrent first login for the same account or email commits
    first, the unique constraints reject ours and the lookup runs once
    more against the winner's rows.

    Raises:
        AuthenticationFailedError: When the email belongs to an account that
            may not be linked automatically.
    """
    if not provider or not provider_account_id or not email:
        raise AuthenticationFailedError()

    attempt = functools.partial(
        _link_provider_account,
        provider=provider,
        provider_account_id=provider_account_id,
        email=email,
        name=name,
        image=image,
        email_verified=email_verified,
    )
    with translate_storage_errors("resolve_oauth_user"):
        try:
            with transaction.atomic():
                user, linked = attempt()
        except IntegrityError:
            logger.info(
                "Concurrent provider login detected; retrying lookup.",
                extra={"provider": provider},
            )
            with transaction.atomic():
                user, linked = attempt()

    if linked:
        logger.info(
            "Provider account linked.", extra={"provider": provider, "user_id": user.pk}
        )
    return user
