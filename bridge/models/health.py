"""
Pydantic models for the health-check response.
"""

from typing import Literal

from pydantic import BaseModel, Field


class ServiceStatus(BaseModel):
    """Reachability of a single upstream API."""

    status: Literal["reachable", "unreachable"] = Field(..., description="Probe outcome.")
    url: str = Field(..., description="Endpoint that was probed.")
    status_code: int | None = Field(default=None, description="HTTP status returned, if any.")
    detail: str | None = Field(default=None, description="Transport error, if any.")


class ServicesStatus(BaseModel):
    """Reachability of every upstream API."""

    monday: ServiceStatus
    claude: ServiceStatus


class HealthResponse(BaseModel):
    """Health-check body returned when all probes ran."""

    status: str = Field(default="ok", description="Overall status.")
    region: str = Field(..., description="Region whose endpoints are in use.")
    environment: str = Field(..., description="Deployment environment.")
    services: ServicesStatus
    uptime: float = Field(..., description="Seconds since the service started.")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "ok",
                    "region": "EU",
                    "environment": "production",
                    "services": {
                        "monday": {
                            "status": "reachable",
                            "url": "https://api.eu1.monday.com/v2",
                            "status_code": 200,
                        },
                        "claude": {
                            "status": "reachable",
                            "url": "https://api.anthropic.com/v1/messages",
                            "status_code": 405,
                        },
                    },
                    "uptime": 42.5,
                }
            ]
        }
    }


class HealthErrorResponse(BaseModel):
    """Body returned when the health check itself failed."""

    status: str = Field(default="error")
    message: str = Field(..., description="Human-readable error description.")
