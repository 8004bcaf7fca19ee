# ============================================================================
# HEALTH API SCHEMAS
# ============================================================================
# STATUS: Infrastructure - Response schemas
# PURPOSE: Pydantic models documenting the health endpoints
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health API Schemas

Response models for the OpenAPI description of the health endpoints.
Bodies are produced by AggregateReport.to_dict() / CheckResult.to_dict().
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

from health.core import CheckStatus, OverallStatus


class CheckResultResponse(BaseModel):
    """Outcome of one check."""
    status: CheckStatus
    timestamp: str = Field(..., description="RFC3339 completion time")
    duration_ms: float = Field(..., ge=0)
    error: Optional[str] = Field(None, description="Failure message, only when down")
    error_kind: Optional[str] = Field(None, description="Exception type or 'timeout'")


class ComponentResponse(BaseModel):
    """Component identity."""
    name: str
    version: Optional[str] = None


class HealthReportResponse(BaseModel):
    """Aggregate health report."""
    status: OverallStatus
    timestamp: str
    details: Dict[str, CheckResultResponse] = Field(default_factory=dict)
    component: Optional[ComponentResponse] = None
    system: Optional[Dict[str, Any]] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "partiallyUnhealthy",
                    "timestamp": "2026-10-12T08:30:00.000000Z",
                    "details": {
                        "postgres": {
                            "status": "up",
                            "timestamp": "2026-10-12T08:30:00.000000Z",
                            "duration_ms": 3.2,
                        },
                        "broker": {
                            "status": "down",
                            "timestamp": "2026-10-12T08:30:00.000000Z",
                            "duration_ms": 5000.4,
                            "error": "check timed out after 5s",
                            "error_kind": "timeout",
                        },
                    },
                }
            ]
        }
    }


class LivenessResponse(BaseModel):
    """Liveness probe response."""
    status: str = "alive"
    version: str
    build_date: str


class ErrorResponse(BaseModel):
    """Error response."""
    error: str
    detail: Optional[str] = None


__all__ = [
    "CheckResultResponse",
    "ComponentResponse",
    "HealthReportResponse",
    "LivenessResponse",
    "ErrorResponse",
]
