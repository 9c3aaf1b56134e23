"""Free-text sanitization for values shown back in editorial UIs.

Review comments, content titles and notification context end up in HTML
pages and e-mails; strip markup with nh3 before they are stored.
"""

import re
from typing import ClassVar

import nh3


class InputSanitizer:
    """Strip HTML from user-supplied text and validate header-borne identifiers."""

    ALLOWED_TAGS: ClassVar[set[str]] = set()
    # Actor ids and role keys arrive via headers; keep them log-safe.
    IDENTIFIER_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9_.@:-]{1,128}$")

    @classmethod
    def sanitize_html(cls, value: str) -> str:
        """Remove all HTML tags (nh3, strict).

        Args:
            value: Raw string that may contain HTML.

        Returns:
            Sanitized string safe for HTML display.
        """
        if not value:
            return value
        return nh3.clean(value, tags=cls.ALLOWED_TAGS, attributes={})

    @classmethod
    def is_identifier(cls, value: str) -> bool:
        """Return True if value is a safe identifier (ids, role keys)."""
        return bool(value) and bool(cls.IDENTIFIER_PATTERN.match(value))


def sanitize_text(value: str | None) -> str | None:
    """Strip markup and surrounding whitespace; blank input becomes None."""
    if value is None:
        return None
    cleaned = InputSanitizer.sanitize_html(value).strip()
    return cleaned or None


def split_identifiers(raw: str | None) -> frozenset[str]:
    """Parse a comma-separated identifier list, dropping blanks and unsafe entries."""
    if not raw:
        return frozenset()
    parts = (p.strip() for p in raw.split(","))
    return frozenset(p for p in parts if InputSanitizer.is_identifier(p))
