"""Mock Anthropic Client — simulates the forced-tool API for generator and route tests.

Invariants:
    - MockAnthropicClient sequences responses across create_message AND stream_message calls
    - A configured Exception instance is raised instead of returned
    - _Stream supports both `async for event` and `await get_final_message()`
    - Every call's kwargs recorded in `calls`

Design Decisions:
    - Flat mock classes (no inheritance): simple, explicit, easy to debug
    - tool_stream splits the tool input JSON into input_json_delta chunks like the real API
"""

import json
from contextlib import asynccontextmanager


# -- Mock Anthropic SDK objects ------------------------------------------------


class _Block:
    """Mock content block (text or tool_use)."""

    def __init__(self, **kwargs):
        self._data = kwargs
        for k, v in kwargs.items():
            setattr(self, k, v)

    def model_dump(self, exclude_none=False):
        d = dict(self._data)
        if exclude_none:
            d = {k: v for k, v in d.items() if v is not None}
        return d

    def __repr__(self):
        return f"_Block({self._data})"


class _Usage:

    def __init__(self, input_tokens=100, output_tokens=50):
        self.input_tokens = input_tokens
        self.output_tokens = output_tokens


class _Message:
    """Mock Message returned by create() and stream.get_final_message()."""

    def __init__(self, content, stop_reason="tool_use", input_tokens=100, output_tokens=50):
        self.content = content
        self.stop_reason = stop_reason
        self.usage = _Usage(input_tokens, output_tokens)


class _StreamEvent:

    def __init__(self, type, content_block=None, delta=None):
        self.type = type
        self.content_block = content_block
        self.delta = delta


class _Delta:

    def __init__(self, type, text=None, partial_json=None):
        self.type = type
        self.text = text
        self.partial_json = partial_json


class _Stream:
    """Mock async iterable stream with get_final_message()."""

    def __init__(self, events, message, fail_after: Exception | None = None):
        self._events = events
        self._message = message
        self._fail_after = fail_after
        self._idx = 0

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self._idx >= len(self._events):
            if self._fail_after is not None:
                raise self._fail_after
            raise StopAsyncIteration
        ev = self._events[self._idx]
        self._idx += 1
        return ev

    async def get_final_message(self):
        return self._message


class MockAnthropicClient:
    """Replaces ResilientAnthropicClient. Sequences pre-configured responses."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self._idx = 0
        self.calls = []

    def _next(self):
        if self._idx >= len(self.responses):
            raise RuntimeError(
                f"MockAnthropicClient: no response at index {self._idx} "
                f"(configured {len(self.responses)})",
            )
        response = self.responses[self._idx]
        self._idx += 1
        if isinstance(response, Exception):
            raise response
        return response

    async def create_message(self, **kwargs):
        self.calls.append(kwargs)
        return self._next()

    @asynccontextmanager
    async def stream_message(self, **kwargs):
        self.calls.append(kwargs)
        yield self._next()


# -- Builder helpers -----------------------------------------------------------


def tool_message(name, tool_input, tokens=(150, 80)):
    """Single forced tool_use response, as returned by messages.create()."""
    block = _Block(type="tool_use", id=f"toolu_{name}_test", name=name, input=tool_input)
    return _Message([block], "tool_use", tokens[0], tokens[1])


def text_message(text):
    """A response that ignored the forced tool (only text)."""
    return _Message([_Block(type="text", text=text)], "end_turn")


def tool_stream(name, tool_input, chunks=3, fail_after: Exception | None = None):
    """Streamed tool_use: input JSON split into `chunks` input_json_delta events."""
    raw = json.dumps(tool_input)
    size = max(1, len(raw) // chunks + 1)
    parts = [raw[i:i + size] for i in range(0, len(raw), size)]
    tool_id = f"toolu_{name}_test"
    events = [
        _StreamEvent(
            "content_block_start",
            content_block=_Block(type="tool_use", id=tool_id, name=name, input={}),
        ),
    ]
    events.extend(
        _StreamEvent(
            "content_block_delta",
            delta=_Delta("input_json_delta", partial_json=part),
        )
        for part in parts
    )
    events.append(_StreamEvent("content_block_stop"))
    message = tool_message(name, tool_input)
    return _Stream(events, message, fail_after=fail_after)
