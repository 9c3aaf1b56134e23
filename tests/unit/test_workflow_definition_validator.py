"""validate_definition unit tests: errors block, warnings advise."""

from app.application.services.workflow_definition_validator import validate_definition
from app.domain.entities import (
    WorkflowDefinitionEntity,
    WorkflowRoleEntity,
    WorkflowRolePermissionEntity,
    WorkflowStateEntity,
    WorkflowTransitionEntity,
)


def _definition(**overrides) -> WorkflowDefinitionEntity:
    data = dict(
        name="Review",
        content_types=["article"],
        initial_state_key="draft",
        states=[
            WorkflowStateEntity(key="draft", name="Draft", is_initial=True),
            WorkflowStateEntity(key="published", name="Published", is_published=True),
        ],
        transitions=[
            WorkflowTransitionEntity(
                from_state_key="draft", to_state_key="published", name="Publish"
            )
        ],
        roles=[WorkflowRoleEntity(role_key="Editor", name="Editor", priority=2)],
    )
    data.update(overrides)
    return WorkflowDefinitionEntity(**data)


def test_valid_definition_has_no_errors() -> None:
    result = validate_definition(_definition())
    assert result.is_valid
    assert result.errors == []
    assert result.warnings == []


def test_empty_definition_reports_every_error() -> None:
    result = validate_definition(
        WorkflowDefinitionEntity(name="", content_types=[], initial_state_key="")
    )
    assert not result.is_valid
    assert "Workflow name is required" in result.errors
    assert "At least one content type must be specified" in result.errors
    assert "Initial state is required" in result.errors
    assert "At least one state must be defined" in result.errors


def test_initial_state_must_be_defined() -> None:
    result = validate_definition(_definition(initial_state_key="review"))
    assert "Initial state must be one of the defined states" in result.errors


def test_duplicate_state_keys() -> None:
    states = [
        WorkflowStateEntity(key="draft", name="Draft", is_initial=True),
        WorkflowStateEntity(key="draft", name="Draft again"),
        WorkflowStateEntity(key="published", name="Published"),
    ]
    result = validate_definition(_definition(states=states))
    assert "Duplicate state keys found: draft" in result.errors


def test_malformed_state_key() -> None:
    states = [
        WorkflowStateEntity(key="draft", name="Draft", is_initial=True),
        WorkflowStateEntity(key="In Review", name="In Review"),
    ]
    result = validate_definition(_definition(states=states, transitions=[]))
    assert any(e.startswith("Invalid state key 'In Review'") for e in result.errors)


def test_exactly_one_initial_state() -> None:
    none_initial = [
        WorkflowStateEntity(key="draft", name="Draft"),
        WorkflowStateEntity(key="published", name="Published"),
    ]
    result = validate_definition(_definition(states=none_initial))
    assert "Exactly one state must be marked as initial (found 0)" in result.errors

    two_initial = [
        WorkflowStateEntity(key="draft", name="Draft", is_initial=True),
        WorkflowStateEntity(key="published", name="Published", is_initial=True),
    ]
    result = validate_definition(_definition(states=two_initial))
    assert "Exactly one state must be marked as initial (found 2)" in result.errors


def test_initial_flag_on_other_state_is_a_warning() -> None:
    states = [
        WorkflowStateEntity(key="draft", name="Draft"),
        WorkflowStateEntity(key="published", name="Published", is_initial=True),
    ]
    result = validate_definition(_definition(states=states))
    assert result.is_valid
    assert any("marked initial" in w for w in result.warnings)


def test_transition_to_unknown_state() -> None:
    transitions = [
        WorkflowTransitionEntity(from_state_key="draft", to_state_key="archived", name="Archive")
    ]
    result = validate_definition(_definition(transitions=transitions))
    assert "Transition 'Archive' references unknown to state: archived" in result.errors


def test_transition_from_unknown_state() -> None:
    transitions = [
        WorkflowTransitionEntity(from_state_key="limbo", to_state_key="draft", name="Rescue")
    ]
    result = validate_definition(_definition(transitions=transitions))
    assert "Transition 'Rescue' references unknown from state: limbo" in result.errors


def test_duplicate_role_key_and_priority_range() -> None:
    roles = [
        WorkflowRoleEntity(role_key="Editor", name="Editor", priority=2),
        WorkflowRoleEntity(role_key="Editor", name="Editor 2", priority=101),
    ]
    result = validate_definition(_definition(roles=roles))
    assert "Duplicate role key: Editor" in result.errors
    assert any("between 1 and 100" in e for e in result.errors)


def test_grant_for_unknown_role_and_duplicate_grant() -> None:
    transitions = [
        WorkflowTransitionEntity(
            from_state_key="draft",
            to_state_key="published",
            name="Publish",
            role_permissions=[
                WorkflowRolePermissionEntity(role_key="Ghost"),
                WorkflowRolePermissionEntity(role_key="Editor"),
                WorkflowRolePermissionEntity(role_key="Editor"),
            ],
        )
    ]
    result = validate_definition(_definition(transitions=transitions))
    assert "Transition 'Publish' grants unknown role: Ghost" in result.errors
    assert "Transition 'Publish' has more than one permission for role: Editor" in result.errors


def test_role_allowed_states_reference_unknown_state_is_warning() -> None:
    roles = [
        WorkflowRoleEntity(
            role_key="Editor", name="Editor", allowed_from_states="draft,archived"
        )
    ]
    result = validate_definition(_definition(roles=roles))
    assert result.is_valid
    assert "Role 'Editor' allowed states reference unknown state: archived" in result.warnings


def test_required_role_missing_from_workflow_is_warning() -> None:
    transitions = [
        WorkflowTransitionEntity(
            from_state_key="draft",
            to_state_key="published",
            name="Publish",
            required_role_key="Approver",
        )
    ]
    result = validate_definition(_definition(transitions=transitions))
    assert result.is_valid
    assert any("requires role 'Approver'" in w for w in result.warnings)


def test_name_too_long() -> None:
    result = validate_definition(_definition(name="x" * 129))
    assert "Workflow name must be at most 128 characters" in result.errors


def test_child_id_used_twice_is_an_error() -> None:
    draft = WorkflowStateEntity(key="draft", name="Draft", is_initial=True)
    copy_of_draft = WorkflowStateEntity(key="published", name="Published", id=draft.id)
    result = validate_definition(_definition(states=[draft, copy_of_draft]))
    assert f"Duplicate state id: {draft.id}" in result.errors
