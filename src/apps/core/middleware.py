"""Custom middleware for the application."""

import logging
import time
import uuid

from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)

SENSITIVE_QUERY_PARAMS = {"password", "token", "secret", "key"}
SKIP_LOG_PREFIXES = ("/static/", "/media/", "/favicon.ico")


class RequestLoggingMiddleware(MiddlewareMixin):
    """Log one line per request with timing, status and a request id.

    The request id is echoed back in the `X-Request-ID` header so a client
    report can be matched to the server log.
    """

    def process_request(self, request):
        request.start_time = time.monotonic()
        request.request_id = request.META.get("HTTP_X_REQUEST_ID") or uuid.uuid4().hex[:8]
        return None

    def process_response(self, request, response):
        if not hasattr(request, "start_time"):
            return response

        response["X-Request-ID"] = request.request_id
        if request.path.startswith(SKIP_LOG_PREFIXES) or getattr(
            request, "_is_health_check", False
        ):
            return response

        duration_ms = round((time.monotonic() - request.start_time) * 1000, 2)
        log_data = {
            "request_id": request.request_id,
            "method": request.method,
            "path": request.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
            "ip_address": self._get_client_ip(request),
        }

        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            log_data["user_id"] = user.pk

        if request.method == "GET" and request.GET:
            safe_params = {
                k: v for k, v in request.GET.items() if k not in SENSITIVE_QUERY_PARAMS
            }
            if safe_params:
                log_data["query_params"] = safe_params

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(level, "%s %s -> %s", request.method, request.path, response.status_code, extra=log_data)

        return response

    def _get_client_ip(self, request):
        x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
        if x_forwarded_for:
            return x_forwarded_for.split(",")[0].strip()
        return request.META.get("REMOTE_ADDR", "unknown")


class SecurityHeadersMiddleware(MiddlewareMixin):
    """Add security headers to all responses."""

    def process_response(self, request, response):
        response.setdefault("X-Frame-Options", "DENY")
        response.setdefault("X-Content-Type-Options", "nosniff")
        response.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        response.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
        return response


class HealthCheckMiddleware(MiddlewareMixin):
    """Mark health probe requests so request logging can skip them."""

    HEALTH_PATHS = {"/health/", "/healthz/", "/readyz/", "/livez/"}

    def process_request(self, request):
        if request.path in self.HEALTH_PATHS or request.path.startswith("/health/"):
            request._is_health_check = True
        return None
