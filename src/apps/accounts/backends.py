"""Django authentication backend backed by the credential verifier."""

from typing import Any, Optional

from django.contrib.auth.backends import BaseBackend

from apps.core.exceptions import AuthenticationFailedError

from . import services
from .models import User


class EmailCredentialsBackend(BaseBackend):
    """
    Authenticates by email and password through `services.authenticate_user`.

    The admin login form passes the email as `username`; both spellings are
    accepted.
    """

    def authenticate(
        self,
        request: Any,
        email: Optional[str] = None,
        password: Optional[str] = None,
        username: Optional[str] = None,
        **kwargs: Any,
    ) -> Optional[User]:
        try:
            return services.authenticate_user(
                email=email or username or "", password=password or ""
            )
        except AuthenticationFailedError:
            return None

    def get_user(self, user_id: Any) -> Optional[User]:
        user = User.objects.filter(pk=user_id).first()
        if user is None or not user.is_active:
            return None
        return user
