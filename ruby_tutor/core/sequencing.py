"""Sequencing — ordering, counters and chat-history shaping for stored conversations.

Invariants:
    - Orders (display_order, message_order) are 1-based and strictly increasing per parent
    - Artifact version_number = existing artifact count + 1
    - Any non-user role ('ruby', 'assistant') counts as a Ruby turn
    - History entries carry exactly one non-empty side; fully empty entries are dropped

Design Decisions:
    - Store passes in the current max (or None): core never queries, stays pure
    - Randomness and clock injected for goal-setting session ids (deterministic tests)
"""

import random
import string
from datetime import date, datetime

from ruby_tutor.core.domain_types import MessageRole

_SESSION_ALPHABET = string.ascii_lowercase + string.digits


def next_order(current_max: int | None) -> int:
    return (current_max or 0) + 1


def next_version(existing_count: int) -> int:
    return existing_count + 1


def message_counter_updates(
    total: int, user_count: int, ruby_count: int, role: str, now: datetime,
) -> dict:
    """Conversation counter columns after one more message with `role`."""
    updates: dict = {
        "total_messages": total + 1,
        "last_activity_at": now,
    }
    if role == MessageRole.USER.value:
        updates["user_messages"] = user_count + 1
    else:
        updates["ruby_messages"] = ruby_count + 1
    return updates


def goal_session_id(now: datetime, rng: random.Random | None = None) -> str:
    """`goal-setting-{epoch_ms}-{13 random base36 chars}`."""
    rng = rng or random.Random()
    suffix = "".join(rng.choice(_SESSION_ALPHABET) for _ in range(13))  # nosec B311
    return f"goal-setting-{int(now.timestamp() * 1000)}-{suffix}"


def history_for_model(messages: list[dict]) -> list[dict]:
    """Stored goal-setting messages -> [{user, ruby}] entries for the scoping prompt."""
    entries = [
        {
            "user": m["content"] if m["role"] == "user" else "",
            "ruby": m["content"] if m["role"] == "assistant" else "",
        }
        for m in messages
    ]
    return [e for e in entries if e["user"] or e["ruby"]]


def paired_turns(messages: list[dict]) -> list[dict]:
    """Pair consecutive (user, assistant) messages into chat turns for display.

    Walks in steps of two; a pair whose roles are not exactly user then
    assistant is skipped, as is a trailing unanswered user message.
    """
    turns = []
    for i in range(0, len(messages), 2):
        user_msg = messages[i]
        ruby_msg = messages[i + 1] if i + 1 < len(messages) else None
        if (ruby_msg and user_msg["role"] == "user"
                and ruby_msg["role"] == "assistant"):
            turns.append({"user": user_msg["content"], "ruby": ruby_msg["content"]})
    return turns


def profile_username(
    first_name: str, last_name: str, rng: random.Random | None = None,
) -> str:
    rng = rng or random.Random()
    suffix = "".join(rng.choice(_SESSION_ALPHABET) for _ in range(4))  # nosec B311
    first = first_name.lower().replace(" ", "")
    last = last_name.lower().replace(" ", "")
    return f"{first}_{last}_{suffix}"


def age_from_birth_date(date_of_birth: date | None, today: date) -> int | None:
    """Year difference only (birthday within the year is ignored)."""
    if date_of_birth is None:
        return None
    return today.year - date_of_birth.year
