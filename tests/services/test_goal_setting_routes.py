"""Goal-setting routes — persisted scoping conversations and the streamed chat turn.

Invariants:
    - Session ids follow goal-setting-{ms}-{13 chars}
    - Messages ordered 1..n; total_messages tracks the count
    - Chat stores the user turn, streams Ruby, stores the reply
    - A set goal finalises the conversation and opens a fresh one
    - Another user's conversation behaves as not found
"""

import re
from uuid import uuid4

from ruby_tutor.api.routes.goal_setting import _conversation_payload
from ruby_tutor.core.errors import StructuredOutputError
from ruby_tutor.infrastructure.auth import CurrentUser
from ruby_tutor.services.goal_setting_store import GoalSettingStore

from tests.services.conftest import OTHER_USER_ID, USER_ID
from tests.services.mock_anthropic import tool_stream
from tests.services.sse_helpers import events_of_type, parse_sse

_BASE = "/api/v1/goal-setting/conversations"


async def _start(client) -> dict:
    res = await client.post(_BASE)
    assert res.status_code == 201
    return res.json()


async def test_start_conversation(client):
    conv = await _start(client)

    assert re.fullmatch(r"goal-setting-\d+-[a-z0-9]{13}", conv["session_id"])
    assert conv["final_goal_decided"] is False
    assert conv["total_messages"] == 0
    assert conv["messages"] == []


async def test_messages_load_by_session_id_with_turns(client):
    conv = await _start(client)
    url = f"{_BASE}/{conv['id']}/messages"
    await client.post(url, json={"role": "user", "content": "a game"})
    await client.post(url, json={"role": "assistant", "content": "What kind?"})
    last = await client.post(url, json={"role": "user", "content": "a maze"})

    assert last.json()["message_order"] == 3
    res = await client.get(f"{_BASE}/{conv['session_id']}")

    body = res.json()
    assert [m["message_order"] for m in body["messages"]] == [1, 2, 3]
    assert body["turns"] == [{"user": "a game", "ruby": "What kind?"}]
    assert body["total_messages"] == 3


async def test_invalid_role_is_400(client):
    conv = await _start(client)

    res = await client.post(
        f"{_BASE}/{conv['id']}/messages", json={"role": "ruby", "content": "hi"},
    )

    assert res.status_code == 400


async def test_history_shapes_model_turns(client):
    conv = await _start(client)
    url = f"{_BASE}/{conv['id']}/messages"
    await client.post(url, json={"role": "user", "content": "robots"})
    await client.post(url, json={"role": "assistant", "content": "Cool!"})

    res = await client.get(f"{_BASE}/{conv['id']}/history")

    assert res.json() == {"history": [
        {"user": "robots", "ruby": ""},
        {"user": "", "ruby": "Cool!"},
    ]}


async def test_finalize_and_latest(client):
    first = await _start(client)
    second = await _start(client)

    res = await client.post(f"{_BASE}/{second['id']}/finalize", json={
        "project_name": "Robot Maze", "project_description": "Guide a robot out of a maze",
    })

    assert res.json()["final_goal_decided"] is True
    assert res.json()["ended_at"] is not None
    latest = (await client.get(f"{_BASE}/latest")).json()
    assert latest["conversation"]["id"] == first["id"]


async def test_latest_is_null_when_all_finalised(client):
    conv = await _start(client)
    await client.post(f"{_BASE}/{conv['id']}/finalize", json={
        "project_name": "Quiz", "project_description": "Space trivia",
    })

    res = await client.get(f"{_BASE}/latest")

    assert res.json() == {"conversation": None}


async def test_finalize_blank_name_is_400(client):
    conv = await _start(client)

    res = await client.post(f"{_BASE}/{conv['id']}/finalize", json={
        "project_name": " ", "project_description": "Something",
    })

    assert res.status_code == 400


async def test_other_users_conversation_is_404(client, current_user):
    conv = await _start(client)
    current_user["user"] = CurrentUser(id=OTHER_USER_ID)

    assert (await client.get(f"{_BASE}/{conv['session_id']}")).status_code == 404
    assert (await client.get(f"{_BASE}/{conv['id']}/history")).status_code == 404


# -- chat ----------------------------------------------------------------------

async def test_chat_stores_turns_without_goal(client, mock_llm):
    conv = await _start(client)
    mock_llm.responses.append(tool_stream("reply_to_child", {
        "response": "What should the robot do?", "goal_set": False,
    }))

    res = await client.post(f"{_BASE}/{conv['id']}/chat", json={"message": "robots"})

    events = parse_sse(res.text)
    complete = events_of_type(events, "chat_complete")[0]["data"]
    assert complete == {
        "session_id": conv["session_id"],
        "goal_set": False,
        "project_name": None,
        "project_description": None,
        "next_session_id": None,
    }
    assert events[-1] == {"type": "done", "data": {"error": False}}
    loaded = (await client.get(f"{_BASE}/{conv['session_id']}")).json()
    assert loaded["turns"] == [{"user": "robots", "ruby": "What should the robot do?"}]


async def test_chat_sends_prior_history(client, mock_llm):
    conv = await _start(client)
    url = f"{_BASE}/{conv['id']}/messages"
    await client.post(url, json={"role": "user", "content": "a game"})
    await client.post(url, json={"role": "assistant", "content": "What kind?"})
    mock_llm.responses.append(tool_stream("reply_to_child", {
        "response": "A maze!", "goal_set": False,
    }))

    await client.post(f"{_BASE}/{conv['id']}/chat", json={"message": "a maze"})

    assert mock_llm.calls[0]["messages"] == [
        {"role": "user", "content": "a game"},
        {"role": "assistant", "content": "What kind?"},
        {"role": "user", "content": "a maze"},
    ]


async def test_chat_goal_set_finalises_and_opens_new_session(client, mock_llm):
    conv = await _start(client)
    mock_llm.responses.append(tool_stream("reply_to_child", {
        "response": "Let's build Robot Maze!",
        "goal_set": True,
        "project_name": "Robot Maze",
        "project_description": "Guide a robot through a maze with arrow keys",
    }))

    res = await client.post(f"{_BASE}/{conv['id']}/chat", json={"message": "arrow keys"})

    complete = events_of_type(parse_sse(res.text), "chat_complete")[0]["data"]
    assert complete["goal_set"] is True
    assert complete["project_name"] == "Robot Maze"
    assert complete["next_session_id"] != conv["session_id"]
    finalised = (await client.get(f"{_BASE}/{conv['session_id']}")).json()
    assert finalised["final_goal_decided"] is True
    latest = (await client.get(f"{_BASE}/latest")).json()["conversation"]
    assert latest["session_id"] == complete["next_session_id"]


async def test_chat_goal_set_without_name_is_not_finalised(client, mock_llm):
    conv = await _start(client)
    mock_llm.responses.append(tool_stream("reply_to_child", {
        "response": "Great!", "goal_set": True, "project_name": "", "project_description": "",
    }))

    res = await client.post(f"{_BASE}/{conv['id']}/chat", json={"message": "ok"})

    complete = events_of_type(parse_sse(res.text), "chat_complete")[0]["data"]
    assert complete["goal_set"] is False
    loaded = (await client.get(f"{_BASE}/{conv['session_id']}")).json()
    assert loaded["final_goal_decided"] is False


async def test_chat_failure_keeps_user_turn_only(client, mock_llm):
    conv = await _start(client)
    mock_llm.responses.append(StructuredOutputError("ProjectScoping", "bad"))

    res = await client.post(f"{_BASE}/{conv['id']}/chat", json={"message": "robots"})

    events = parse_sse(res.text)
    assert events_of_type(events, "error")[0]["data"]["code"] == "STRUCTURED_OUTPUT_INVALID"
    assert events_of_type(events, "chat_complete") == []
    loaded = (await client.get(f"{_BASE}/{conv['session_id']}")).json()
    assert [m["role"] for m in loaded["messages"]] == ["user"]


async def test_chat_unknown_conversation_is_404(client):
    res = await client.post(f"{_BASE}/{uuid4()}/chat", json={"message": "hi"})

    assert res.status_code == 404
    assert res.headers["content-type"].startswith("application/json")


async def test_fresh_session_payload_uses_stored_messages(client, test_session_factory):
    conv = await _start(client)
    url = f"{_BASE}/{conv['id']}/messages"
    await client.post(url, json={"role": "user", "content": "a quiz"})
    await client.post(url, json={"role": "assistant", "content": "About what?"})

    async with test_session_factory() as session:
        store = GoalSettingStore(session, USER_ID)
        conversation, messages = await store.load_conversation(conv["session_id"])
        payload = _conversation_payload(conversation, messages)

    assert [m["content"] for m in payload["messages"]] == ["a quiz", "About what?"]
    assert payload["turns"] == [{"user": "a quiz", "ruby": "About what?"}]
