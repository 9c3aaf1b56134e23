"""Application use cases: one entry point per workflow."""

from app.application.use_cases.workflows import ContentItemService, TransitionExecutor

__all__ = [
    "ContentItemService",
    "TransitionExecutor",
]
