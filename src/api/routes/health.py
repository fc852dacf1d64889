"""Health check endpoints for monitoring and deployment verification."""

import time

from fastapi import APIRouter, Response, status

from src.api.middleware.latency_logging import get_latency_stats
from src.core.catalog_client import get_catalog_client
from src.core.config import get_settings
from src.schemas.common import CheckResult, HealthResponse, HealthStatus, ReadinessResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness check",
    description="Basic health check to verify the service is running. Used for liveness probes.",
)
async def health_check() -> HealthResponse:
    """Return basic health status.

    This endpoint should always return 200 if the service is running.
    It does not check the remote catalog store.
    """
    return HealthResponse(status=HealthStatus.HEALTHY, service=get_settings().app_name)


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={
        200: {"description": "Remote catalog store reachable"},
        503: {"description": "Remote catalog store unreachable"},
    },
    summary="Readiness check",
)
async def readiness_check(response: Response) -> ReadinessResponse:
    """Check that the remote catalog store answers.

    Returns 503 if it does not.
    """
    start_time = time.perf_counter()
    result = await get_catalog_client().check_connection()
    latency_ms = (time.perf_counter() - start_time) * 1000

    checks = [
        CheckResult(
            name="catalog_store",
            healthy=result["healthy"],
            latency_ms=round(latency_ms, 2),
            error=result.get("error"),
        )
    ]

    all_healthy = all(check.healthy for check in checks)
    if not all_healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(
        status=HealthStatus.HEALTHY if all_healthy else HealthStatus.UNHEALTHY,
        checks=checks,
    )


@router.get(
    "/health/latency",
    summary="Request latency statistics",
)
async def latency_stats() -> dict:
    """Aggregated request latencies overall and per path."""
    stats = get_latency_stats()
    return {
        "overall": stats.get_stats(),
        "by_path": stats.get_stats_by_path(),
    }
