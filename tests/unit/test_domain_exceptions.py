"""Tests for domain exceptions (error_code, message, details)."""

from app.domain.exceptions import (
    AuthorizationException,
    CommentRequiredException,
    ConcurrencyConflictException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    ValidationException,
    WorkflowEngineException,
    WorkflowNotFoundException,
    WorkflowValidationException,
)


def test_base_exception_default_error_code() -> None:
    """Base WorkflowEngineException uses class name as error_code when not provided."""
    exc = WorkflowEngineException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "WorkflowEngineException"
    assert exc.details == {}


def test_to_dict() -> None:
    exc = WorkflowEngineException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("Invalid format", field="title")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "title"}
    assert ValidationException("Invalid").details == {}


def test_workflow_validation_exception_carries_all_messages() -> None:
    exc = WorkflowValidationException(
        ["Workflow name is required", "At least one state must be defined"],
        ["minor"],
    )
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.message == "Workflow name is required; At least one state must be defined"
    assert exc.details == {
        "errors": ["Workflow name is required", "At least one state must be defined"],
        "warnings": ["minor"],
    }


def test_comment_required_is_a_validation_failure() -> None:
    exc = CommentRequiredException("Reject")
    assert isinstance(exc, WorkflowValidationException)
    assert exc.error_code == "COMMENT_REQUIRED"
    assert exc.message == "A comment is required for transition 'Reject'"
    assert exc.details["transition"] == "Reject"


def test_authorization_exception() -> None:
    exc = AuthorizationException(resource="workflow_transition", action="execute")
    assert exc.error_code == "PERMISSION_DENIED"
    assert exc.message == "Permission denied: execute on workflow_transition"
    assert exc.details == {"resource": "workflow_transition", "action": "execute"}
    assert AuthorizationException().message == "Permission denied"


def test_resource_not_found() -> None:
    exc = ResourceNotFoundException("content_item", "c1")
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.message == "content_item not found: c1"
    assert exc.details == {"resource_type": "content_item", "resource_id": "c1"}


def test_workflow_not_found_by_id_and_content_type() -> None:
    by_id = WorkflowNotFoundException(definition_id="d1")
    assert by_id.error_code == "WORKFLOW_NOT_FOUND"
    assert by_id.details == {"definition_id": "d1"}
    by_type = WorkflowNotFoundException(content_type="article")
    assert by_type.message == "No default workflow for content type: article"
    assert by_type.details == {"content_type": "article"}


def test_concurrency_conflict() -> None:
    exc = ConcurrencyConflictException("c1", "draft", "in_review")
    assert exc.error_code == "CONCURRENCY_CONFLICT"
    assert exc.details == {
        "content_id": "c1",
        "expected_state": "draft",
        "actual_state": "in_review",
    }
    assert "actual_state" not in ConcurrencyConflictException("c1", "draft").details


def test_sql_not_configured() -> None:
    exc = SqlNotConfiguredException()
    assert exc.error_code == "SQL_NOT_CONFIGURED"
    assert "DATABASE_URL" in exc.message
