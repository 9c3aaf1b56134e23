"""Shared utilities: datetime, generators, sanitization."""

from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import generate_cuid
from app.shared.utils.sanitization import (
    InputSanitizer,
    sanitize_text,
    split_identifiers,
)

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "InputSanitizer",
    "sanitize_text",
    "split_identifiers",
]
