"""Workflow use cases: execute transition, content item lifecycle."""

from app.application.use_cases.workflows.content_items import ContentItemService
from app.application.use_cases.workflows.execute_transition import TransitionExecutor

__all__ = [
    "ContentItemService",
    "TransitionExecutor",
]
