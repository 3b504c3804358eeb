"""Planning routes — the wizard over HTTP, always answering {project, plan}.

Invariants:
    - GET resolves the step from stored data (reload-safe), malformed sections as missing
    - Generation conflicts answer 409 with PLAN_STATE_CONFLICT
    - A model failure leaves the stored plan untouched
    - Approval materialises weekly plans and activates the project
"""

from ruby_tutor.core.errors import LLMAPIError

from tests.plan_samples import breakdown_input, complete_master_plan, overview_input
from tests.services.conftest import OTHER_USER_ID
from tests.services.mock_anthropic import tool_message


def _url(project, suffix=""):
    return f"/api/v1/projects/{project.id}/plan{suffix}"


async def test_fresh_project_state(client, make_project):
    project = await make_project()

    res = await client.get(_url(project))

    assert res.status_code == 200
    plan = res.json()["plan"]
    assert plan["step"] == "overview"
    assert plan["auto_generate_allowed"] is True
    assert plan["can_approve"] is False
    assert plan["approval_blockers"] == ["overview_missing"]
    assert res.json()["project"]["id"] == str(project.id)


async def test_full_wizard_flow(client, make_project, mock_llm):
    project = await make_project()
    mock_llm.responses.extend([
        tool_message("submit_project_overview", overview_input(recommended_duration=2)),
        tool_message("submit_weekly_breakdown", breakdown_input(3)),
    ])

    res = await client.post(_url(project, "/overview"))
    assert res.json()["plan"]["step"] == "overview_review"
    assert res.json()["plan"]["duration_weeks"] == 2

    res = await client.put(_url(project, "/duration"), json={"weeks": 3})
    assert res.json()["plan"]["duration_weeks"] == 3
    assert res.json()["project"]["duration_weeks"] == 3

    res = await client.post(_url(project, "/breakdown"))
    assert res.json()["plan"]["step"] == "complete"
    assert res.json()["plan"]["can_approve"] is True

    res = await client.post(_url(project, "/approve"))
    assert res.status_code == 200
    body = res.json()
    assert body["project"]["status"] == "active"
    assert body["project"]["plan_approved"] is True
    assert body["plan"]["plan_approved"] is True

    plans = (await client.get(f"/api/v1/projects/{project.id}/weekly-plans")).json()
    assert [p["week_number"] for p in plans] == [1, 2, 3]


async def test_overview_over_existing_plan_is_409(client, make_project, mock_llm):
    project = await make_project(master_plan=complete_master_plan())

    res = await client.post(_url(project, "/overview"))

    assert res.status_code == 409
    assert res.json()["error"]["code"] == "PLAN_STATE_CONFLICT"
    assert mock_llm.calls == []


async def test_overview_replay_regenerates(client, make_project, mock_llm):
    project = await make_project(master_plan=complete_master_plan())
    mock_llm.responses.append(
        tool_message("submit_project_overview", overview_input(project_type="quiz")),
    )

    res = await client.post(_url(project, "/overview"), json={"replay": True})

    assert res.status_code == 200
    assert res.json()["plan"]["overview"]["project_type"] == "quiz"
    assert res.json()["plan"]["breakdown"] is None


async def test_breakdown_before_overview_is_409(client, make_project):
    project = await make_project()

    res = await client.post(_url(project, "/breakdown"))

    assert res.status_code == 409


async def test_model_failure_keeps_plan(client, make_project, mock_llm):
    project = await make_project(master_plan={"overview": overview_input()})
    mock_llm.responses.append(LLMAPIError("overloaded", "overloaded"))

    res = await client.post(_url(project, "/breakdown"))

    assert res.status_code == 503
    state = (await client.get(_url(project))).json()["plan"]
    assert state["step"] == "overview_review"
    assert state["generation_in_progress"] is False


async def test_partial_plan_blocks_auto_generation(client, make_project):
    project = await make_project(master_plan={"breakdown": breakdown_input(), "complete": True})

    plan = (await client.get(_url(project))).json()["plan"]

    assert plan["step"] == "overview"
    assert plan["auto_generate_allowed"] is False


async def test_start_over_resets(client, make_project):
    project = await make_project(master_plan=complete_master_plan())

    res = await client.post(_url(project, "/start-over"))

    assert res.json()["project"]["master_plan"] == {}
    assert res.json()["plan"]["step"] == "overview"
    assert res.json()["plan"]["auto_generate_allowed"] is True


async def test_approve_incomplete_is_409(client, make_project):
    project = await make_project(master_plan={"overview": overview_input()})

    res = await client.post(_url(project, "/approve"))

    assert res.status_code == 409


async def test_malformed_stored_plan_reads_as_missing(client, make_project):
    project = await make_project()
    res = await client.patch(
        f"/api/v1/projects/{project.id}",
        json={"master_plan": {"overview": "oops", "breakdown": {"weekly_breakdown": [1]}}},
    )
    assert res.status_code == 200

    res = await client.get(_url(project))

    assert res.status_code == 200
    plan = res.json()["plan"]
    assert plan["step"] == "overview"
    assert plan["overview"] is None
    assert plan["auto_generate_allowed"] is False
    assert plan["approval_blockers"] == ["overview_missing"]
    assert (await client.post(_url(project, "/approve"))).status_code == 409
    assert (await client.put(_url(project, "/duration"), json={"weeks": 2})).status_code == 200


async def test_other_users_plan_is_404(client, make_project):
    project = await make_project(user_id=OTHER_USER_ID)

    assert (await client.get(_url(project))).status_code == 404
    assert (await client.post(_url(project, "/start-over"))).status_code == 404
