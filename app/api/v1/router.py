"""Mounts the v1 endpoint modules: health, definitions, transitions, content items."""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    content_items,
    health,
    workflow_transitions,
    workflows,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(
    workflows.router, prefix="/workflow-definitions", tags=["workflow-definitions"]
)
api_router.include_router(
    workflow_transitions.router,
    prefix="/workflow-transitions",
    tags=["workflow-transitions"],
)
api_router.include_router(
    content_items.router, prefix="/content-items", tags=["content-items"]
)
