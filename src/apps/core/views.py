"""Core API views."""

from typing import Any

from django.conf import settings
from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import HealthCheckSerializer


class HealthCheckAPIView(APIView):  # type: ignore[misc]
    """
    Lightweight API health check.

    The component-level report lives at `/health/`; this endpoint only
    confirms that the API stack (routing, DRF, renderers) is serving.
    """

    permission_classes = [AllowAny]
    serializer_class = HealthCheckSerializer

    @extend_schema(tags=["Health"], responses={200: HealthCheckSerializer})
    def get(self, request: Any, *args: Any, **kwargs: Any) -> Response:
        data = {
            "status": "ok",
            "version": getattr(settings, "VERSION", "1.0.0"),
            "timestamp": timezone.now(),
        }
        serializer = self.serializer_class(instance=data)
        return Response(serializer.data)
