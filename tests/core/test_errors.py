"""Error hierarchy — status codes and REST/SSE envelopes."""

from ruby_tutor.core.errors import (
    ConcurrencyError,
    ErrorContext,
    LLMAPIError,
    PlanStateError,
    ResourceNotFoundError,
    StructuredOutputError,
)


def test_not_found_envelope():
    err = ResourceNotFoundError("Project", "abc")
    body = err.to_response()["error"]

    assert err.http_status == 404
    assert body["code"] == "RESOURCE_NOT_FOUND"
    assert body["message"] == "Project 'abc' not found"
    assert body["category"] == "resource_not_found"


def test_plan_state_error_carries_step_and_context():
    err = PlanStateError("nope", "complete", ErrorContext(project_id="p-1"))

    assert err.http_status == 409
    assert err.step == "complete"
    assert err.to_response()["error"]["context"]["project_id"] == "p-1"


def test_llm_error_records_retry_after():
    err = LLMAPIError("slow down", "rate_limit", retry_after_ms=1500)

    assert err.http_status == 503
    assert err.to_response()["error"]["context"]["retry_after_ms"] == 1500


def test_sse_event_recoverability():
    assert ConcurrencyError("busy").to_sse_event()["data"]["recoverable"] is True
    assert StructuredOutputError("ProjectOverview", "bad").to_sse_event()["data"]["recoverable"] is False


def test_sse_event_prefers_user_message():
    err = LLMAPIError("internal", "timeout", context=ErrorContext(user_message="Ruby is resting"))
    assert err.to_sse_event()["data"]["message"] == "Ruby is resting"
