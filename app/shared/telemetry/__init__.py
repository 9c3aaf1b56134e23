"""Shared telemetry: logging setup and logger access."""

from app.shared.telemetry.logging import ActorContextFilter, get_logger, setup_logging

__all__ = [
    "ActorContextFilter",
    "setup_logging",
    "get_logger",
]
