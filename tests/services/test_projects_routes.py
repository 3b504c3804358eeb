"""Project routes — CRUD, ownership scoping and dashboard metrics.

Invariants:
    - New project without a master plan starts planning at week 0, with one starts active at week 1
    - Another user's project answers 404 (never 403)
    - PATCH writes only the fields sent
    - DELETE removes the project and its dependent rows
"""

from uuid import uuid4

from sqlalchemy import func, select

from ruby_tutor.infrastructure.auth import CurrentUser
from ruby_tutor.models.conversation import Conversation
from ruby_tutor.models.message import Message
from ruby_tutor.models.weekly_plan import WeeklyPlan

from tests.plan_samples import complete_master_plan
from tests.services.conftest import OTHER_USER_ID, USER_ID


async def test_create_project_starts_in_planning(client):
    res = await client.post("/api/v1/projects", json={
        "title": "  Space Quiz ", "description": "Planets trivia", "project_type": "quiz",
    })

    assert res.status_code == 201
    body = res.json()
    assert body["title"] == "Space Quiz"
    assert body["user_id"] == USER_ID
    assert body["status"] == "planning"
    assert body["current_week"] == 0
    assert body["master_plan"] == {}
    assert body["total_time_spent"] == "00:00:00"


async def test_create_project_with_plan_starts_active(client):
    res = await client.post("/api/v1/projects", json={
        "title": "Tic Tac Toe", "master_plan": complete_master_plan(),
    })

    assert res.status_code == 201
    assert res.json()["status"] == "active"
    assert res.json()["current_week"] == 1


async def test_create_project_blank_title_is_400(client):
    res = await client.post("/api/v1/projects", json={"title": "   "})

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_list_projects_only_returns_own(client, make_project):
    await make_project(title="Mine")
    await make_project(user_id=OTHER_USER_ID, title="Theirs")

    res = await client.get("/api/v1/projects")

    assert res.status_code == 200
    assert [p["title"] for p in res.json()] == ["Mine"]


async def test_other_users_project_is_not_found(client, make_project):
    project = await make_project(user_id=OTHER_USER_ID)

    res = await client.get(f"/api/v1/projects/{project.id}")

    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_unknown_project_is_not_found(client):
    res = await client.get(f"/api/v1/projects/{uuid4()}")
    assert res.status_code == 404


async def test_switching_user_hides_project(client, make_project, current_user):
    project = await make_project()
    current_user["user"] = CurrentUser(id=OTHER_USER_ID)

    res = await client.get(f"/api/v1/projects/{project.id}")

    assert res.status_code == 404


async def test_patch_updates_only_sent_fields(client, make_project):
    project = await make_project(description="Keep me")

    res = await client.patch(f"/api/v1/projects/{project.id}", json={
        "status": "active", "current_week": 2, "total_time_spent": "01:15:00",
    })

    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "active"
    assert body["current_week"] == 2
    assert body["description"] == "Keep me"
    assert body["total_time_spent"] == "01:15:00"


async def test_patch_rejects_bad_status(client, make_project):
    project = await make_project()

    res = await client.patch(f"/api/v1/projects/{project.id}", json={"status": "done"})

    assert res.status_code == 400


async def test_delete_removes_project_and_dependents(client, make_project, test_db):
    project = await make_project(master_plan=complete_master_plan())
    await client.post(f"/api/v1/projects/{project.id}/weekly-plans")
    conv = await client.post(f"/api/v1/projects/{project.id}/conversations", json={})
    await client.post(
        f"/api/v1/conversations/{conv.json()['id']}/messages",
        json={"role": "user", "content": "hi"},
    )

    res = await client.delete(f"/api/v1/projects/{project.id}")

    assert res.status_code == 204
    assert (await client.get(f"/api/v1/projects/{project.id}")).status_code == 404
    for model in (WeeklyPlan, Conversation, Message):
        count = await test_db.scalar(select(func.count()).select_from(model))
        assert count == 0


async def test_dashboard_metrics(client, make_project):
    await make_project(status="completed", total_time_spent="01:00:00",
                       concepts_mastered=["loops", "events"])
    await make_project(status="active", total_time_spent="00:30:00",
                       concepts_mastered=["loops"])
    await make_project(user_id=OTHER_USER_ID, status="completed")

    res = await client.get("/api/v1/projects/metrics")

    assert res.status_code == 200
    assert res.json() == {
        "completed": 1,
        "active": 1,
        "total": 2,
        "total_time_minutes": 90,
        "formatted_time": "1h 30min",
        "concepts": 2,
    }
