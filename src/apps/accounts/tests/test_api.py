import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from apps.accounts.models import User

USER_PASSWORD = "testpass123"


class TestSignupAPI:
    url = reverse("accounts:signup")

    def test_signup(self, api_client):
        payload = {"name": "Ada", "email": "ada@example.com", "password": "s3cret!"}

        response = api_client.post(self.url, payload, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data == {"success": True, "message": "Signup completed."}
        assert User.objects.filter(email="ada@example.com").exists()

    def test_password_is_never_echoed(self, api_client):
        payload = {"name": "Ada", "email": "ada@example.com", "password": "s3cret!"}

        response = api_client.post(self.url, payload, format="json")

        assert "password" not in response.data

    def test_duplicate_email(self, api_client, user):
        payload = {"name": "Twin", "email": user.email, "password": "s3cret!"}

        response = api_client.post(self.url, payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {"error": "This email is already in use."}

    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "", "email": "ada@example.com", "password": "s3cret!"},
            {"name": "Ada", "email": "nope", "password": "s3cret!"},
            {"name": "Ada", "email": "ada@example.com", "password": "123"},
        ],
    )
    def test_invalid_signup(self, api_client, payload):
        response = api_client.post(self.url, payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "error" in response.data
        assert User.objects.count() == 0


class TestSessionAPI:
    def login(self, client, email, password):
        return client.post(
            reverse("accounts:login"), {"email": email, "password": password}, format="json"
        )

    def test_login_starts_session(self, api_client, user):
        response = self.login(api_client, user.email, USER_PASSWORD)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {
            "id": str(user.pk),
            "email": user.email,
            "name": user.name,
            "image": None,
        }

        session = api_client.get(reverse("accounts:session"))
        assert session.status_code == status.HTTP_200_OK
        assert session.data["id"] == str(user.pk)

    def test_wrong_password_and_unknown_email_look_the_same(self, api_client, user):
        wrong = self.login(api_client, user.email, "wrong-password")
        unknown = self.login(api_client, "ghost@example.com", USER_PASSWORD)

        assert wrong.status_code == unknown.status_code == status.HTTP_401_UNAUTHORIZED
        assert wrong.data == unknown.data == {"error": "Invalid credentials."}

    def test_session_requires_login(self, api_client):
        response = api_client.get(reverse("accounts:session"))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_logout_ends_session(self, api_client, user):
        self.login(api_client, user.email, USER_PASSWORD)

        response = api_client.post(reverse("accounts:logout"))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert api_client.get(reverse("accounts:session")).status_code == status.HTTP_403_FORBIDDEN

    def test_session_user_can_write_posts(self, api_client, user):
        self.login(api_client, user.email, USER_PASSWORD)

        response = api_client.post(
            reverse("posts:post-list"), {"title": "T", "content": "C"}, format="json"
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["author"]["id"] == user.pk


class TestCsrfOnAnonymousEndpoints:
    """Login and signup need a CSRF token even though nobody is signed in yet."""

    @pytest.fixture
    def csrf_client(self):
        return APIClient(enforce_csrf_checks=True)

    def csrf_token(self, client):
        client.get(reverse("accounts:session"))
        return client.cookies["csrftoken"].value

    def test_session_endpoint_hands_out_the_cookie(self, csrf_client):
        response = csrf_client.get(reverse("accounts:session"))

        assert "csrftoken" in response.cookies

    def test_login_without_token_is_rejected(self, csrf_client, user):
        response = csrf_client.post(
            reverse("accounts:login"),
            {"email": user.email, "password": USER_PASSWORD},
            format="json",
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert "_auth_user_id" not in csrf_client.session

    def test_login_with_token(self, csrf_client, user):
        token = self.csrf_token(csrf_client)

        response = csrf_client.post(
            reverse("accounts:login"),
            {"email": user.email, "password": USER_PASSWORD},
            format="json",
            HTTP_X_CSRFTOKEN=token,
        )

        assert response.status_code == status.HTTP_200_OK

    def test_signup_without_token_is_rejected(self, csrf_client):
        response = csrf_client.post(
            reverse("accounts:signup"),
            {"name": "Ada", "email": "ada@example.com", "password": "s3cret!"},
            format="json",
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not User.objects.filter(email="ada@example.com").exists()
