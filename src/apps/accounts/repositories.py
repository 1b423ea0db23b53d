"""
Data access for users and their linked OAuth accounts.
"""

from typing import Optional

from .models import OAuthAccount, User


def normalize_email(email: str) -> str:
    """Canonical form used both when storing and when looking up an email."""
    return User.objects.normalize_email(email.strip())


def get_user_by_email(email: str) -> Optional[User]:
    return User.objects.filter(email=normalize_email(email)).first()


def email_exists(email: str) -> bool:
    return User.objects.filter(email=normalize_email(email)).exists()


def create_user(
    *, name: str, email: str, password: Optional[str] = None, image: Optional[str] = None
) -> User:
    """
    Creates and returns a new User.

    A `None` password stores an unusable hash, so the account can only
    sign in through a linked provider.
    """
    return User.objects.create_user(
        email=normalize_email(email), name=name, password=password, image=image
    )


def get_oauth_account(provider: str, provider_account_id: str) -> Optional[OAuthAccount]:
    return (
        OAuthAccount.objects.select_related("user")
        .filter(provider=provider, provider_account_id=provider_account_id)
        .first()
    )


def link_oauth_account(*, user: User, provider: str, provider_account_id: str) -> OAuthAccount:
    return OAuthAccount.objects.create(
        user=user, provider=provider, provider_account_id=provider_account_id
    )
