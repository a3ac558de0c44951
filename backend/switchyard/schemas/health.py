"""
Switchyard — Pydantic Response Schemas
=======================================

What:  Response models for the service's own endpoints.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    What:  Liveness report returned by GET /health.
    Who:   Docker health checks and load balancer probes.
    """
    status: str = Field(description="Overall service status: ok")
    version: str = Field(description="Application version")
    emitters: int = Field(description="Number of response emitters wired into the stack")
    uptime_seconds: float = Field(description="Seconds since service started")
