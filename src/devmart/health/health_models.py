"""Pydantic models for system health status."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

HealthState = Literal["healthy", "degraded", "unhealthy"]


class HealthChecks(BaseModel):
    """Pass/fail result for each checked subsystem."""

    database: bool
    auth: bool
    storage: bool
    functions: bool


class HealthPerformance(BaseModel):
    db_latency_ms: float = Field(..., ge=0)


class HealthStatus(BaseModel):
    """Aggregated health snapshot."""

    status: HealthState
    timestamp: datetime
    checks: HealthChecks
    performance: HealthPerformance
