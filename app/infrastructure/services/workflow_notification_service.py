"""Workflow notification: log-only dispatcher (implements INotificationDispatcher)."""

from __future__ import annotations

import logging
from typing import Any

from app.infrastructure.services.workflow_template_renderer import WorkflowTemplateRenderer
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import utc_now

logger = get_logger(__name__)


class LogOnlyNotificationDispatcher:
    """INotificationDispatcher implementation that logs instead of sending email.

    Use when no mail transport is configured. Production can swap in an SMTP
    or queue-based implementation behind the same protocol.
    """

    def __init__(self, renderer: WorkflowTemplateRenderer | None = None) -> None:
        self._renderer = renderer or WorkflowTemplateRenderer()

    async def notify(self, template_key: str, context: dict[str, Any]) -> None:
        """Render the template and log it; no message leaves the process."""
        subject, body = self._renderer.render(template_key, context)
        logger.info(
            "Workflow notify: content %s %r (subject=%r)",
            context.get("content_id"),
            context.get("transition_name"),
            subject[:80],
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Workflow notify body (first 500 chars, at %s): %s",
                utc_now().isoformat(),
                body[:500],
            )
