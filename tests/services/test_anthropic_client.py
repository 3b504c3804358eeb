"""Resilient Anthropic client — retry, backoff and error mapping.

Invariants:
    - 429 and 5xx are retried up to max_retries, then mapped to LLMAPIError
    - 4xx (other than 429) fail immediately without retry
    - Retry-After header surfaces as retry_after_ms
"""

import httpx
import pytest
from anthropic import (
    APIConnectionError, BadRequestError, InternalServerError, RateLimitError,
)

from ruby_tutor.core.errors import LLMAPIError
from ruby_tutor.infrastructure.anthropic_client import ResilientAnthropicClient

from tests.services.mock_anthropic import tool_message

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _response(status: int, headers: dict | None = None) -> httpx.Response:
    return httpx.Response(status, request=_REQUEST, headers=headers or {})


def _rate_limited(retry_after: str | None = None) -> RateLimitError:
    headers = {"retry-after": retry_after} if retry_after else None
    return RateLimitError("rate limited", response=_response(429, headers), body=None)


class _FakeMessages:

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class _FakeSdk:

    def __init__(self, outcomes):
        self.messages = _FakeMessages(outcomes)


def _client(outcomes, max_retries=2) -> ResilientAnthropicClient:
    client = ResilientAnthropicClient(
        api_key="sk-ant-test-fake-key", max_retries=max_retries, base_delay_ms=0,
    )
    client.client = _FakeSdk(outcomes)
    return client


_KWARGS = dict(
    model="claude-test", max_tokens=100, system="s", tools=[],
    messages=[{"role": "user", "content": "hi"}],
)


async def test_success_passes_tool_choice_and_temperature():
    client = _client([tool_message("t", {})])

    await client.create_message(
        **_KWARGS, tool_choice={"type": "tool", "name": "t"}, temperature=0.7,
    )

    sent = client.client.messages.calls[0]
    assert sent["tool_choice"] == {"type": "tool", "name": "t"}
    assert sent["temperature"] == 0.7


async def test_omitted_options_are_not_sent():
    client = _client([tool_message("t", {})])

    await client.create_message(**_KWARGS)

    sent = client.client.messages.calls[0]
    assert "tool_choice" not in sent
    assert "temperature" not in sent


async def test_rate_limit_retried_then_succeeds():
    client = _client([_rate_limited(), tool_message("t", {})])

    response = await client.create_message(**_KWARGS)

    assert response.stop_reason == "tool_use"
    assert len(client.client.messages.calls) == 2


async def test_rate_limit_exhausted_maps_retry_after():
    client = _client([_rate_limited("0.002")] * 3, max_retries=2)

    with pytest.raises(LLMAPIError) as exc:
        await client.create_message(**_KWARGS)

    assert exc.value.api_error_type == "rate_limit"
    assert exc.value.context.retry_after_ms == 2
    assert exc.value.http_status == 503


async def test_server_errors_retried():
    client = _client([
        InternalServerError("boom", response=_response(500), body=None),
        APIConnectionError(request=_REQUEST),
        tool_message("t", {}),
    ])

    await client.create_message(**_KWARGS)

    assert len(client.client.messages.calls) == 3


async def test_client_error_not_retried():
    client = _client([BadRequestError("bad", response=_response(400), body=None)])

    with pytest.raises(LLMAPIError) as exc:
        await client.create_message(**_KWARGS)

    assert exc.value.api_error_type == "client_error"
    assert len(client.client.messages.calls) == 1


async def test_overloaded_is_retried():
    from anthropic import APIStatusError

    overloaded = APIStatusError("overloaded", response=_response(529), body=None)
    client = _client([overloaded, tool_message("t", {})])

    await client.create_message(**_KWARGS)

    assert len(client.client.messages.calls) == 2
