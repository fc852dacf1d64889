"""Shared schemas: camelCase base model, health probes and error envelopes."""

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys for the UI."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Liveness probe payload."""

    status: HealthStatus = Field(description="Current health status")
    service: str = Field(default="storefront-admin", description="Service name")
    version: str = Field(default="0.1.0", description="API version")
    timestamp: datetime = Field(default_factory=utc_now, description="Check timestamp")


class CheckResult(BaseModel):
    """Outcome of probing one upstream dependency."""

    name: str = Field(description="Dependency name")
    healthy: bool = Field(description="Whether the dependency answered")
    latency_ms: float | None = Field(default=None, description="Probe round trip in milliseconds")
    error: str | None = Field(default=None, description="Failure reason when unhealthy")


class ReadinessResponse(BaseModel):
    """Readiness probe payload; unhealthy while the remote catalog store is unreachable."""

    status: HealthStatus = Field(description="Overall readiness status")
    checks: list[CheckResult] = Field(default_factory=list, description="Per-dependency results")
    timestamp: datetime = Field(default_factory=utc_now, description="Check timestamp")


class ErrorDetail(BaseModel):
    """One field-level problem, e.g. a missing draft field."""

    loc: list[str] | None = Field(default=None, description="Field path")
    msg: str = Field(description="Human-readable problem")
    type: str = Field(description="Problem identifier")

    @classmethod
    def from_mapping(cls, detail: Mapping[str, Any]) -> "ErrorDetail":
        return cls(
            loc=detail.get("loc"),
            msg=detail.get("msg", str(detail)),
            type=detail.get("type", "error"),
        )


class ErrorResponse(BaseModel):
    """Envelope for every error the API returns."""

    error: str = Field(description="Error category: not_found, validation_error, busy, network_failure...")
    message: str = Field(description="Human-readable error description")
    details: list[ErrorDetail] | None = Field(default=None, description="Field-level problems")
    request_id: str | None = Field(default=None, description="Echo of the X-Request-ID header")
    upstream_status: int | None = Field(default=None, description="HTTP status answered by the remote catalog store")
    timestamp: datetime = Field(default_factory=utc_now, description="Error timestamp")

    @classmethod
    def from_exception(
        cls,
        error_type: str,
        message: str,
        details: Iterable[Mapping[str, Any]] | None = None,
        request_id: str | None = None,
        upstream_status: int | None = None,
    ) -> "ErrorResponse":
        """Build the envelope from an application error's attributes.

        Args:
            error_type: Error category.
            message: Human-readable error description.
            details: Optional field-level problems as plain mappings.
            request_id: Optional request ID for tracing.
            upstream_status: Optional remote store status for gateway errors.
        """
        return cls(
            error=error_type,
            message=message,
            details=[ErrorDetail.from_mapping(d) for d in details] if details else None,
            request_id=request_id,
            upstream_status=upstream_status,
        )
