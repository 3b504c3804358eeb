"""Weekly plan routes — materialisation from a master plan and progress updates.

Invariants:
    - One row per breakdown week; week 1 current, the rest locked
    - Nested ({overview, breakdown}) and flat master plans both accepted, and validated
    - A plan with no weeks is rejected (400)
    - Updates bump updated_at and only touch sent fields
"""

from tests.plan_samples import (
    breakdown_input, complete_master_plan, overview_input, week_input,
)
from tests.services.conftest import OTHER_USER_ID


async def test_create_from_projects_own_plan(client, make_project):
    project = await make_project(master_plan=complete_master_plan(3))

    res = await client.post(f"/api/v1/projects/{project.id}/weekly-plans")

    assert res.status_code == 201
    plans = res.json()
    assert [p["week_number"] for p in plans] == [1, 2, 3]
    assert [p["status"] for p in plans] == ["current", "locked", "locked"]
    assert plans[0]["goals"]["deliverables"] == ["Deliverable 1a", "Deliverable 1b"]
    assert plans[0]["difficulty_level"] == "beginner"


async def test_create_from_flat_plan_body(client, make_project):
    project = await make_project()
    flat = {
        **overview_input(project_type="quiz", difficulty_assessment="intermediate"),
        "weekly_breakdown": [week_input(1), week_input(2)],
    }

    res = await client.post(
        f"/api/v1/projects/{project.id}/weekly-plans", json={"master_plan": flat},
    )

    assert res.status_code == 201
    assert [p["difficulty_level"] for p in res.json()] == ["intermediate"] * 2


async def test_create_from_nested_plan_body(client, make_project):
    project = await make_project()

    res = await client.post(
        f"/api/v1/projects/{project.id}/weekly-plans",
        json={"master_plan": {
            "overview": overview_input(), "breakdown": breakdown_input(3),
        }},
    )

    assert res.status_code == 201
    assert [p["week_number"] for p in res.json()] == [1, 2, 3]


async def test_create_rejects_week_without_number(client, make_project):
    project = await make_project()
    week = week_input(1)
    del week["week"]

    res = await client.post(
        f"/api/v1/projects/{project.id}/weekly-plans",
        json={"master_plan": {"weekly_breakdown": [week]}},
    )

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    res = await client.get(f"/api/v1/projects/{project.id}/weekly-plans")
    assert res.json() == []


async def test_create_without_weeks_is_400(client, make_project):
    project = await make_project(master_plan={"overview": overview_input()})

    res = await client.post(f"/api/v1/projects/{project.id}/weekly-plans")

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_list_is_ordered_by_week(client, make_project):
    project = await make_project(master_plan=complete_master_plan(2))
    await client.post(f"/api/v1/projects/{project.id}/weekly-plans")

    res = await client.get(f"/api/v1/projects/{project.id}/weekly-plans")

    assert res.status_code == 200
    assert [p["week_number"] for p in res.json()] == [1, 2]


async def test_list_for_other_users_project_is_404(client, make_project):
    project = await make_project(user_id=OTHER_USER_ID)

    res = await client.get(f"/api/v1/projects/{project.id}/weekly-plans")

    assert res.status_code == 404


async def test_update_weekly_plan_progress(client, make_project):
    project = await make_project(master_plan=complete_master_plan(2))
    created = (await client.post(f"/api/v1/projects/{project.id}/weekly-plans")).json()
    first = created[0]

    res = await client.patch(f"/api/v1/weekly-plans/{first['id']}", json={
        "status": "completed", "progress_percentage": 100,
    })

    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "completed"
    assert body["progress_percentage"] == 100
    assert body["week_title"] == first["week_title"]


async def test_update_rejects_out_of_range_progress(client, make_project):
    project = await make_project(master_plan=complete_master_plan(1))
    created = (await client.post(f"/api/v1/projects/{project.id}/weekly-plans")).json()

    res = await client.patch(
        f"/api/v1/weekly-plans/{created[0]['id']}", json={"progress_percentage": 140},
    )

    assert res.status_code == 400


async def test_create_from_malformed_stored_plan_is_400(client, make_project):
    project = await make_project(master_plan={
        "overview": overview_input(), "breakdown": {"weekly_breakdown": ["oops"]},
    })

    res = await client.post(f"/api/v1/projects/{project.id}/weekly-plans")

    assert res.status_code == 400
