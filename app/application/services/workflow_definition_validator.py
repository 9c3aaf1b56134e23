"""Workflow definition validation: structural errors and advisory warnings.

Errors make a definition unsavable; warnings are reported but do not block.
Messages are user-facing and returned verbatim to callers.
"""

from __future__ import annotations

from collections import Counter

from app.application.dtos.workflow import DefinitionValidationResult
from app.domain.entities import WorkflowDefinitionEntity
from app.domain.value_objects.core import RolePriority, StateKey

NAME_MAX_LENGTH = 128
DESCRIPTION_MAX_LENGTH = 512


def _duplicates(values: list[str]) -> list[str]:
    """Values occurring more than once, in first-seen order."""
    counts = Counter(values)
    seen: list[str] = []
    for value in values:
        if counts[value] > 1 and value not in seen:
            seen.append(value)
    return seen


def validate_definition(definition: WorkflowDefinitionEntity) -> DefinitionValidationResult:
    """Validate a workflow definition.

    Errors: missing name/content types/initial state/states, initial state not
    defined, duplicate or malformed state keys, not exactly one is_initial
    state, transitions to unknown states, duplicate role keys, role priority
    out of range, grants naming unknown roles, duplicate grants, a child id
    used twice in one collection.

    Warnings: the is_initial state differs from initial_state_key, a role's
    allowed states name unknown keys, a required role has no workflow role.
    """
    errors: list[str] = []
    warnings: list[str] = []

    name = (definition.name or "").strip()
    if not name:
        errors.append("Workflow name is required")
    elif len(name) > NAME_MAX_LENGTH:
        errors.append(f"Workflow name must be at most {NAME_MAX_LENGTH} characters")
    if definition.description and len(definition.description) > DESCRIPTION_MAX_LENGTH:
        errors.append(
            f"Workflow description must be at most {DESCRIPTION_MAX_LENGTH} characters"
        )

    if not [c for c in definition.content_types if c and c.strip()]:
        errors.append("At least one content type must be specified")

    if not (definition.initial_state_key or "").strip():
        errors.append("Initial state is required")

    state_keys = [s.key for s in definition.states]
    known_states = set(state_keys)
    if not definition.states:
        errors.append("At least one state must be defined")
    else:
        if definition.initial_state_key and definition.initial_state_key not in known_states:
            errors.append("Initial state must be one of the defined states")
        duplicates = _duplicates(state_keys)
        if duplicates:
            errors.append(f"Duplicate state keys found: {', '.join(duplicates)}")
        for key in dict.fromkeys(state_keys):
            try:
                StateKey(key)
            except ValueError as e:
                errors.append(f"Invalid state key '{key}': {e}")
        initial_flagged = [s for s in definition.states if s.is_initial]
        if len(initial_flagged) != 1:
            errors.append(
                f"Exactly one state must be marked as initial (found {len(initial_flagged)})"
            )
        elif initial_flagged[0].key != definition.initial_state_key:
            warnings.append(
                f"State '{initial_flagged[0].key}' is marked initial but the workflow's "
                f"initial state is '{definition.initial_state_key}'"
            )

    for transition in definition.transitions:
        if transition.from_state_key not in known_states:
            errors.append(
                f"Transition '{transition.name}' references unknown from state: "
                f"{transition.from_state_key}"
            )
        if transition.to_state_key not in known_states:
            errors.append(
                f"Transition '{transition.name}' references unknown to state: "
                f"{transition.to_state_key}"
            )

    role_keys = [r.role_key for r in definition.roles]
    for key in _duplicates(role_keys):
        errors.append(f"Duplicate role key: {key}")
    for role in definition.roles:
        try:
            RolePriority(role.priority)
        except ValueError as e:
            errors.append(f"Role '{role.role_key}': {e}")
        unknown = [
            s
            for s in role.get_allowed_from_states() + role.get_allowed_to_states()
            if s not in known_states
        ]
        for state in dict.fromkeys(unknown):
            warnings.append(
                f"Role '{role.role_key}' allowed states reference unknown state: {state}"
            )

    known_roles = set(role_keys)
    for transition in definition.transitions:
        grant_keys = [g.role_key for g in transition.role_permissions]
        for key in dict.fromkeys(grant_keys):
            if key not in known_roles:
                errors.append(
                    f"Transition '{transition.name}' grants unknown role: {key}"
                )
        for key in _duplicates(grant_keys):
            errors.append(
                f"Transition '{transition.name}' has more than one permission for role: {key}"
            )
        if (
            transition.required_role_key
            and not transition.role_permissions
            and transition.required_role_key not in known_roles
        ):
            warnings.append(
                f"Transition '{transition.name}' requires role '{transition.required_role_key}' "
                "which is not defined in this workflow"
            )

    id_groups = (
        ("state", [s.id for s in definition.states]),
        ("transition", [t.id for t in definition.transitions]),
        ("role", [r.id for r in definition.roles]),
        ("permission", [g.id for t in definition.transitions for g in t.role_permissions]),
    )
    for kind, ids in id_groups:
        for child_id in _duplicates(ids):
            errors.append(f"Duplicate {kind} id: {child_id}")

    return DefinitionValidationResult(errors=errors, warnings=warnings)
