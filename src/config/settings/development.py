# mypy: ignore-errors
"""
Development settings.

Local PostgreSQL and Redis, verbose logging and the browsable API.
"""

from .base import *  # noqa: F401,F403
from .base import LOGGING, REST_FRAMEWORK

DEBUG = True
ALLOWED_HOSTS = ["*"]

CORS_ALLOW_ALL_ORIGINS = True

REST_FRAMEWORK["DEFAULT_RENDERER_CLASSES"] = [
    "rest_framework.renderers.JSONRenderer",
    "rest_framework.renderers.BrowsableAPIRenderer",
]

LOGGING["handlers"]["console"]["level"] = "DEBUG"
LOGGING["loggers"]["apps"]["level"] = "DEBUG"
