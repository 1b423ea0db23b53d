"""
Serializers for the accounts API.

Input serializers only check shape; the signup rules themselves live in
`services.signup` so every caller gets the same messages.
"""

from rest_framework import serializers


class SignupSerializer(serializers.Serializer):  # type: ignore[misc]
    name = serializers.CharField(max_length=150, allow_blank=True)
    email = serializers.CharField(max_length=254, allow_blank=True)
    password = serializers.CharField(
        max_length=128, allow_blank=True, trim_whitespace=False, write_only=True
    )


class SignupResultSerializer(serializers.Serializer):  # type: ignore[misc]
    success = serializers.BooleanField(read_only=True)
    message = serializers.CharField(read_only=True)


class LoginSerializer(serializers.Serializer):  # type: ignore[misc]
    email = serializers.CharField(max_length=254)
    password = serializers.CharField(max_length=128, trim_whitespace=False, write_only=True)


class PrincipalSerializer(serializers.Serializer):  # type: ignore[misc]
    """The identity exposed to clients once a session exists."""

    id = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)
    name = serializers.CharField(read_only=True)
    image = serializers.CharField(read_only=True, allow_null=True)
