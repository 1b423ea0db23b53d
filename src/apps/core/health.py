"""
Health check endpoints for load balancers and orchestrators.

`/health/` runs every check; `/health/ready/` only needs the database;
`/health/live/` only proves the process answers.
"""

import logging
import time
from typing import Any, Callable

import psutil
from django.conf import settings
from django.core.cache import cache
from django.db import connection
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_http_methods

logger = logging.getLogger(__name__)


class HealthCheckStatus:
    """Health check status constants."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


def _result(status: str, message: str, **details: Any) -> dict[str, Any]:
    return {
        "status": status,
        "message": message,
        **details,
        "timestamp": timezone.now().isoformat(),
    }


def _timed(func: Callable[[], Any]) -> float:
    """Run `func` and return how long it took in milliseconds."""
    start = time.monotonic()
    func()
    return round((time.monotonic() - start) * 1000, 2)


class HealthChecker:
    """Runs named component checks and folds them into one status."""

    # Failures of these components only degrade the service.
    NON_CRITICAL = {"cache"}

    def __init__(self) -> None:
        self.checks: dict[str, Callable[[], dict[str, Any]]] = {
            "database": self.check_database,
            "cache": self.check_cache,
            "disk_space": self.check_disk_space,
            "memory": self.check_memory,
        }

    def run_all_checks(self) -> dict[str, Any]:
        results: dict[str, Any] = {}
        overall = HealthCheckStatus.HEALTHY

        for name, check in self.checks.items():
            try:
                result = check()
            except Exception as exc:
                logger.error("Health check '%s' failed: %s", name, exc)
                failed = (
                    HealthCheckStatus.DEGRADED
                    if name in self.NON_CRITICAL
                    else HealthCheckStatus.UNHEALTHY
                )
                result = _result(failed, f"{name} check failed: {exc}")
            results[name] = result

            if result["status"] == HealthCheckStatus.UNHEALTHY:
                overall = HealthCheckStatus.UNHEALTHY
            elif (
                result["status"] == HealthCheckStatus.DEGRADED
                and overall == HealthCheckStatus.HEALTHY
            ):
                overall = HealthCheckStatus.DEGRADED

        return {
            "status": overall,
            "timestamp": timezone.now().isoformat(),
            "version": getattr(settings, "VERSION", "1.0.0"),
            "environment": getattr(settings, "ENVIRONMENT", "unknown"),
            "checks": results,
        }

    def check_database(self) -> dict[str, Any]:
        def ping() -> None:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
                cursor.fetchone()

        elapsed = _timed(ping)
        if elapsed > 1000:
            return _result(
                HealthCheckStatus.DEGRADED,
                f"Slow database response: {elapsed}ms",
                response_time_ms=elapsed,
            )
        return _result(
            HealthCheckStatus.HEALTHY,
            f"Database responsive: {elapsed}ms",
            response_time_ms=elapsed,
        )

    def check_cache(self) -> dict[str, Any]:
        key = "health_check_probe"
        seen: list[Any] = []

        def roundtrip() -> None:
            cache.set(key, "ok", timeout=30)
            seen.append(cache.get(key))
            cache.delete(key)

        elapsed = _timed(roundtrip)
        if seen != ["ok"]:
            return _result(HealthCheckStatus.DEGRADED, "Cache read/write test failed")
        return _result(
            HealthCheckStatus.HEALTHY,
            f"Cache responsive: {elapsed}ms",
            response_time_ms=elapsed,
        )

    def check_disk_space(self) -> dict[str, Any]:
        usage = psutil.disk_usage("/")
        used_percent = round(usage.used / usage.total * 100, 1)
        limit = getattr(settings, "HEALTH_CHECK", {}).get("DISK_USAGE_MAX", 90)

        if used_percent >= limit:
            status = HealthCheckStatus.UNHEALTHY
        elif used_percent >= limit - 10:
            status = HealthCheckStatus.DEGRADED
        else:
            status = HealthCheckStatus.HEALTHY
        return _result(
            status,
            f"Disk usage {used_percent}%",
            disk_usage_percent=used_percent,
            disk_free_gb=round(usage.free / 1024**3, 2),
        )

    def check_memory(self) -> dict[str, Any]:
        memory = psutil.virtual_memory()
        available_mb = round(memory.available / 1024**2)
        minimum = getattr(settings, "HEALTH_CHECK", {}).get("MEMORY_MIN", 100)

        if available_mb < minimum:
            status = HealthCheckStatus.UNHEALTHY
        elif available_mb < minimum * 2:
            status = HealthCheckStatus.DEGRADED
        else:
            status = HealthCheckStatus.HEALTHY
        return _result(
            status,
            f"{available_mb}MB available",
            memory_available_mb=available_mb,
            memory_usage_percent=round(memory.percent, 1),
        )


health_checker = HealthChecker()


@never_cache
@require_http_methods(["GET", "HEAD"])
def health_check_view(request: Any) -> JsonResponse:
    """Full health report; 503 only when a critical component is down."""
    report = health_checker.run_all_checks()
    status_code = 503 if report["status"] == HealthCheckStatus.UNHEALTHY else 200
    return JsonResponse(report, status=status_code)


@never_cache
@require_http_methods(["GET"])
def readiness_check_view(request: Any) -> JsonResponse:
    try:
        health_checker.check_database()
    except Exception as exc:
        logger.error("Readiness check failed: %s", exc)
        return JsonResponse(
            {"status": "not_ready", "message": "Database not available"}, status=503
        )
    return JsonResponse({"status": "ready", "timestamp": timezone.now().isoformat()})


@never_cache
@require_http_methods(["GET"])
def liveness_check_view(request: Any) -> JsonResponse:
    return JsonResponse(
        {
            "status": "alive",
            "timestamp": timezone.now().isoformat(),
            "version": getattr(settings, "VERSION", "1.0.0"),
        }
    )
