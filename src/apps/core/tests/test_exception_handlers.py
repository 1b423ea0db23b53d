import pytest
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated

from apps.core.exception_handlers import service_exception_handler
from apps.core.exceptions import (
    AuthenticationFailedError,
    DuplicateEmailError,
    ForbiddenError,
    NotFoundError,
    ServiceError,
    StorageError,
    ValidationError,
)


@pytest.mark.parametrize(
    "exc,expected_status,expected_body",
    [
        (ValidationError("Title is required."), 400, {"error": "Title is required."}),
        (DuplicateEmailError(), 400, {"error": "This email is already in use."}),
        (NotFoundError("Post not found."), 404, {"error": "Not found."}),
        (ForbiddenError(), 404, {"error": "Not found."}),
        (AuthenticationFailedError(), 401, {"error": "Invalid credentials."}),
        (
            StorageError(),
            500,
            {"error": "An unexpected error occurred. Please try again later."},
        ),
    ],
)
def test_service_errors_map_to_responses(exc, expected_status, expected_body):
    response = service_exception_handler(exc, {})

    assert response.status_code == expected_status
    assert response.data == expected_body


def test_forbidden_is_indistinguishable_from_missing():
    forbidden = service_exception_handler(ForbiddenError(), {})
    missing = service_exception_handler(NotFoundError(), {})

    assert (forbidden.status_code, forbidden.data) == (missing.status_code, missing.data)


def test_unknown_service_error_is_logged_and_hidden(caplog):
    class SurpriseError(ServiceError):
        pass

    response = service_exception_handler(SurpriseError("internal detail"), {})

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert "internal detail" not in str(response.data)
    assert "internal detail" in caplog.text


def test_drf_exceptions_use_the_stock_handler():
    response = service_exception_handler(NotAuthenticated(), {})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert "detail" in response.data


def test_other_exceptions_are_left_to_django():
    assert service_exception_handler(RuntimeError("boom"), {}) is None
