"""Domain value objects for the workflow engine.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass

# State keys: lowercase alphanumeric words joined by underscores (e.g. in_review).
_STATE_KEY_RE = re.compile(r"^[a-z0-9_]+$")
STATE_KEY_MAX_LENGTH = 64

ROLE_PRIORITY_MIN = 1
ROLE_PRIORITY_MAX = 100


@dataclass(frozen=True)
class StateKey:
    """Value object for a workflow state key.

    Keys are 1-64 characters of lowercase letters, digits and underscores
    (e.g. 'draft', 'in_review'). Unique within one workflow definition.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("State key must be a non-empty string")
        if len(self.value) > STATE_KEY_MAX_LENGTH:
            raise ValueError(
                f"State key must not exceed {STATE_KEY_MAX_LENGTH} characters"
            )
        if not _STATE_KEY_RE.match(self.value):
            raise ValueError(
                "State key must be lowercase alphanumeric with underscores (e.g., 'draft', 'in_review')"
            )

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RolePriority:
    """Value object for workflow role seniority (1-100, higher = more senior)."""

    value: int

    def __post_init__(self) -> None:
        if not ROLE_PRIORITY_MIN <= self.value <= ROLE_PRIORITY_MAX:
            raise ValueError(
                f"Role priority must be between {ROLE_PRIORITY_MIN} and {ROLE_PRIORITY_MAX}"
            )


def parse_state_list(raw: str | None) -> list[str]:
    """Split a comma-separated state list, trimming blanks. Empty input means unrestricted ([])."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def join_state_list(states: list[str] | None) -> str:
    """Inverse of parse_state_list."""
    return ",".join(states or [])
