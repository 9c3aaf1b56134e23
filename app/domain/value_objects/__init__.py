"""Domain value objects and shared value types."""

from app.domain.value_objects.core import (
    RolePriority,
    StateKey,
    join_state_list,
    parse_state_list,
)

__all__ = [
    "RolePriority",
    "StateKey",
    "join_state_list",
    "parse_state_list",
]
