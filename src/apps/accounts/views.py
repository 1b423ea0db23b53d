"""API views for signup and session authentication."""

from typing import Any

from django.contrib.auth import authenticate, login, logout
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_protect, ensure_csrf_cookie
from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.exceptions import AuthenticationFailedError

from . import services
from .serializers import (
    LoginSerializer,
    PrincipalSerializer,
    SignupResultSerializer,
    SignupSerializer,
)


@method_decorator(csrf_protect, name="dispatch")
@extend_schema(tags=["Auth"])
class SignupView(APIView):  # type: ignore[misc]
    """Register a password account."""

    permission_classes = [AllowAny]
    throttle_scope = "signup"

    @extend_schema(
        request=SignupSerializer,
        responses={201: SignupResultSerializer},
        examples=[
            OpenApiExample(
                "Sign up",
                value={"name": "Ada", "email": "ada@example.com", "password": "s3cret!"},
                request_only=True,
            ),
        ],
    )
    def post(self, request: Any, *args: Any, **kwargs: Any) -> Response:
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.signup(**serializer.validated_data)
        return Response(
            SignupResultSerializer(result).data, status=status.HTTP_201_CREATED
        )


@method_decorator(csrf_protect, name="dispatch")
@extend_schema(tags=["Auth"])
class LoginView(APIView):  # type: ignore[misc]
    """Verify email and password, then start a session."""

    permission_classes = [AllowAny]
    throttle_scope = "login"

    @extend_schema(request=LoginSerializer, responses={200: PrincipalSerializer})
    def post(self, request: Any, *args: Any, **kwargs: Any) -> Response:
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = authenticate(
            request,
            email=serializer.validated_data["email"],
            password=serializer.validated_data["password"],
        )
        if user is None:
            raise AuthenticationFailedError()

        login(request, user)
        return Response(PrincipalSerializer(services.to_principal(user)).data)


@extend_schema(tags=["Auth"])
class LogoutView(APIView):  # type: ignore[misc]
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={204: None})
    def post(self, request: Any, *args: Any, **kwargs: Any) -> Response:
        logout(request)
        return Response(status=status.HTTP_204_NO_CONTENT)


@method_decorator(ensure_csrf_cookie, name="dispatch")
@extend_schema(tags=["Auth"])
class SessionView(APIView):  # type: ignore[misc]
    """
    Return the principal attached to the current session.

    Also sets the CSRF cookie, which clients echo in `X-CSRFToken` when they
    sign up or log in.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: PrincipalSerializer})
    def get(self, request: Any, *args: Any, **kwargs: Any) -> Response:
        return Response(PrincipalSerializer(services.to_principal(request.user)).data)
