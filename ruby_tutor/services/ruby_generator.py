"""Ruby Generator — the three structured model calls behind planning and scoping.

Invariants:
    - Every call forces a single tool whose input_schema is the Pydantic output schema
    - Tool input is validated with Pydantic; a mismatch raises StructuredOutputError (502)
    - Defaults: user_age and experience_level from settings (8, "beginner")
    - Scoping history replayed as user/assistant turns; empty sides skipped, same-role
      neighbours merged so roles always alternate

Design Decisions:
    - Forced tool use over free-text JSON: the API guarantees a tool_use block, Pydantic
      guarantees the shape
    - stream_scoping yields event dicts (not SSE text): routes own the wire format
    - Partial events carry raw input_json_delta fragments; the client concatenates them
"""

import logging
from typing import AsyncIterator, TypeVar

from pydantic import BaseModel, ValidationError

from ruby_tutor.config import Settings
from ruby_tutor.core.errors import ErrorContext, StructuredOutputError
from ruby_tutor.infrastructure.anthropic_client import ResilientAnthropicClient
from ruby_tutor.schemas.llm import ProjectOverview, ProjectScoping, WeeklyBreakdown
from ruby_tutor.services.prompts import (
    BREAKDOWN_SYSTEM_PROMPT,
    OVERVIEW_SYSTEM_PROMPT,
    SCOPING_SYSTEM_PROMPT,
    breakdown_user_message,
    overview_user_message,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_OVERVIEW_TOOL = "submit_project_overview"
_BREAKDOWN_TOOL = "submit_weekly_breakdown"
_SCOPING_TOOL = "reply_to_child"


def output_tool(name: str, description: str, schema: type[BaseModel]) -> dict:
    return {
        "name": name,
        "description": description,
        "input_schema": schema.model_json_schema(),
    }


def forced_choice(name: str) -> dict:
    return {"type": "tool", "name": name}


def parse_tool_output(response, tool_name: str, schema: type[T]) -> T:
    """Extract and validate the forced tool's input from a model response."""
    for block in response.content:
        if getattr(block, "type", None) == "tool_use" and block.name == tool_name:
            try:
                return schema.model_validate(block.input)
            except ValidationError as e:
                logger.warning(
                    f"Tool output failed validation: {e.error_count()} errors",
                    extra={"schema_name": schema.__name__},
                )
                raise StructuredOutputError(schema.__name__, str(e))
    raise StructuredOutputError(schema.__name__, f"no {tool_name} tool_use block")


def scoping_messages(history: list[dict], message: str) -> list[dict]:
    """History [{user, ruby}] + current message -> alternating chat messages."""
    turns: list[tuple[str, str]] = []
    for entry in history:
        turns.append(("user", entry.get("user") or ""))
        turns.append(("assistant", entry.get("ruby") or ""))
    turns.append(("user", message))

    messages: list[dict] = []
    for role, content in turns:
        if not content.strip():
            continue
        if messages and messages[-1]["role"] == role:
            messages[-1]["content"] += "\n\n" + content
        else:
            messages.append({"role": role, "content": content})
    # The API requires the conversation to open with a user turn
    while messages and messages[0]["role"] != "user":
        messages.pop(0)
    return messages


class RubyGenerator:
    """Ruby's structured model calls, parameterised by settings."""

    def __init__(self, client: ResilientAnthropicClient, settings: Settings):
        self.client = client
        self.settings = settings

    async def generate_overview(
        self,
        project_name: str,
        project_description: str,
        user_age: int | None = None,
        experience_level: str | None = None,
        context: ErrorContext | None = None,
    ) -> ProjectOverview:
        user_message = overview_user_message(
            project_name, project_description,
            user_age or self.settings.default_user_age,
            experience_level or self.settings.default_experience_level,
        )
        return await self._structured_call(
            system=OVERVIEW_SYSTEM_PROMPT,
            messages=[{"role": "user", "content": user_message}],
            tool_name=_OVERVIEW_TOOL,
            tool_description="Submit the project overview for the child.",
            schema=ProjectOverview,
            context=context,
        )

    async def generate_breakdown(
        self,
        project_name: str,
        project_description: str,
        overview: dict,
        user_age: int | None = None,
        experience_level: str | None = None,
        context: ErrorContext | None = None,
    ) -> WeeklyBreakdown:
        user_message = breakdown_user_message(
            project_name, project_description, overview,
            user_age or self.settings.default_user_age,
            experience_level or self.settings.default_experience_level,
        )
        return await self._structured_call(
            system=BREAKDOWN_SYSTEM_PROMPT,
            messages=[{"role": "user", "content": user_message}],
            tool_name=_BREAKDOWN_TOOL,
            tool_description="Submit the week-by-week learning plan.",
            schema=WeeklyBreakdown,
            context=context,
        )

    async def stream_scoping(
        self,
        message: str,
        history: list[dict],
        context: ErrorContext | None = None,
    ) -> AsyncIterator[dict]:
        """Stream one scoping turn.

        Yields {"type": "partial", "data": {"json": fragment}} per input_json_delta,
        then exactly one {"type": "object", "data": ProjectScoping}.
        """
        async with self.client.stream_message(
            model=self.settings.ruby_model,
            max_tokens=self.settings.ruby_max_tokens,
            system=SCOPING_SYSTEM_PROMPT,
            tools=[output_tool(
                _SCOPING_TOOL, "Reply to the child and report whether the goal is set.",
                ProjectScoping,
            )],
            tool_choice=forced_choice(_SCOPING_TOOL),
            temperature=self.settings.ruby_temperature,
            messages=scoping_messages(history, message),
            context=context,
        ) as stream:
            async for event in stream:
                if (event.type == "content_block_delta"
                        and event.delta.type == "input_json_delta"
                        and event.delta.partial_json):
                    yield {"type": "partial", "data": {"json": event.delta.partial_json}}
            final = await stream.get_final_message()

        scoping = parse_tool_output(final, _SCOPING_TOOL, ProjectScoping)
        yield {"type": "object", "data": scoping.model_dump()}

    async def _structured_call(
        self,
        *,
        system: str,
        messages: list[dict],
        tool_name: str,
        tool_description: str,
        schema: type[T],
        context: ErrorContext | None,
    ) -> T:
        response = await self.client.create_message(
            model=self.settings.ruby_model,
            max_tokens=self.settings.ruby_max_tokens,
            system=system,
            tools=[output_tool(tool_name, tool_description, schema)],
            tool_choice=forced_choice(tool_name),
            temperature=self.settings.ruby_temperature,
            messages=messages,
            context=context,
        )
        return parse_tool_output(response, tool_name, schema)
