"""Probe payloads for /health and /health/ready."""

from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"


class ReadinessResponse(BaseModel):
    status: Literal["ok"] = "ok"


class ReadinessErrorResponse(BaseModel):
    """Body of the 503 returned while the database cannot be reached."""

    status: Literal["not_ready"] = "not_ready"
    message: str
