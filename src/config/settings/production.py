# mypy: ignore-errors
import logging

import sentry_sdk
from decouple import Csv, config
from sentry_sdk.integrations.django import DjangoIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.redis import RedisIntegration

from .base import *  # noqa: F403, F401

# Import specific symbols to avoid F405 errors
from .base import (
    CACHES,
    DATABASES,
    LOGGING,
    REST_FRAMEWORK,
    VERSION,
)

# GENERAL
# ------------------------------------------------------------------------------
DEBUG = False
ALLOWED_HOSTS = config("ALLOWED_HOSTS", cast=Csv())

# SECURITY
# ------------------------------------------------------------------------------
# SSL/TLS Settings
SECURE_SSL_REDIRECT = config("SECURE_SSL_REDIRECT", default=True, cast=bool)
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = "strict-origin-when-cross-origin"

# HSTS Settings
SECURE_HSTS_SECONDS = 31536000  # 1 year
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True

# Database Performance
# ------------------------------------------------------------------------------
DATABASES["default"]["CONN_MAX_AGE"] = 600  # 10 minutes
DATABASES["default"]["CONN_HEALTH_CHECKS"] = True

# Static Files
# ------------------------------------------------------------------------------
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {
        "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"
    },
}
WHITENOISE_AUTOREFRESH = False

# Cache optimization for production
# ------------------------------------------------------------------------------
CACHES["default"]["TIMEOUT"] = 3600
connection_pool_kwargs = CACHES["default"]["OPTIONS"]["CONNECTION_POOL_KWARGS"]
connection_pool_kwargs.update(
    {
        "max_connections": 100,
        "retry_on_timeout": True,
    }
)
# Disable IGNORE_EXCEPTIONS in production for better error visibility
CACHES["default"]["OPTIONS"]["IGNORE_EXCEPTIONS"] = False

# Logging for Production
# ------------------------------------------------------------------------------
LOGGING["handlers"]["file"] = {
    "level": "INFO",
    "class": "logging.handlers.RotatingFileHandler",
    "filename": config("LOG_FILE", default="logs/production.log"),
    "maxBytes": 1024 * 1024 * 15,  # 15MB
    "backupCount": 10,
    "formatter": "json",
}
LOGGING["root"]["handlers"].append("file")
LOGGING["loggers"]["apps"]["handlers"].append("file")

# Error Monitoring with Sentry
# ------------------------------------------------------------------------------
SENTRY_DSN = config("SENTRY_DSN", default="")
if SENTRY_DSN:
    sentry_logging = LoggingIntegration(
        level=logging.INFO,  # Capture info and above as breadcrumbs
        event_level=logging.ERROR,  # Send errors as events
    )

    sentry_sdk.init(
        dsn=SENTRY_DSN,
        integrations=[
            DjangoIntegration(
                transaction_style="url",
                middleware_spans=True,
                signals_spans=False,
            ),
            RedisIntegration(),
            sentry_logging,
        ],
        traces_sample_rate=config("SENTRY_TRACES_SAMPLE_RATE", default=0.1, cast=float),
        # Credentials and emails never leave the process
        send_default_pii=False,
        environment=config("ENVIRONMENT", default="production"),
        release=VERSION,
        max_breadcrumbs=50,
        attach_stacktrace=True,
    )

# API Rate Limiting (more restrictive in production)
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {
    "anon": "50/hour",
    "user": "500/hour",
    "login": "5/min",
    "signup": "3/min",
}
REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"].append(
    "rest_framework.throttling.ScopedRateThrottle"
)

# Session Security
SESSION_COOKIE_AGE = 60 * 60 * 24 * 7  # 1 week
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = "Lax"

# CSRF Protection
CSRF_COOKIE_SAMESITE = "Lax"
CSRF_TRUSTED_ORIGINS = config("CSRF_TRUSTED_ORIGINS", cast=Csv(), default="")

# Proxy headers
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
USE_X_FORWARDED_HOST = True

# CORS Security for production
CORS_ALLOW_ALL_ORIGINS = False
CORS_ALLOWED_ORIGINS = config("CORS_ALLOWED_ORIGINS", cast=Csv())
CORS_ALLOW_CREDENTIALS = True

# Health Check Configuration
HEALTH_CHECK = {
    "DISK_USAGE_MAX": 90,  # percent
    "MEMORY_MIN": 100,  # MB
}

