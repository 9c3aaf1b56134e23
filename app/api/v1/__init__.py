"""API v1: routers under /api/v1."""

from app.api.v1.router import api_router

__all__ = ["api_router"]
