"""Timezone helpers. Every timestamp the engine stores or compares is aware UTC."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Normalize a datetime read back from the database or a query string.

    SQLite hands back naive values; those are taken to already be UTC.
    Aware values in another zone are converted.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
