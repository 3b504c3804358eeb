"""Code artifact routes — versioned snapshots, execution results and views."""

from uuid import uuid4

from tests.services.conftest import OTHER_USER_ID


async def _artifact(client, project_id, **body):
    payload = {"code": "console.log('hi')", "language": "javascript", **body}
    res = await client.post(f"/api/v1/projects/{project_id}/artifacts", json=payload)
    assert res.status_code == 201
    return res.json()


async def test_versions_increment_per_project(client, make_project):
    project = await make_project()
    other = await make_project(title="Other")

    first = await _artifact(client, project.id, title="Board")
    second = await _artifact(client, project.id, is_milestone=True,
                             milestone_description="Board renders")
    elsewhere = await _artifact(client, other.id)

    assert first["version_number"] == 1
    assert first["title"] == "Board"
    assert first["execution_status"] == "pending"
    assert first["has_been_executed"] is False
    assert second["version_number"] == 2
    assert second["is_milestone"] is True
    assert elsewhere["version_number"] == 1


async def test_unknown_language_is_400(client, make_project):
    project = await make_project()

    res = await client.post(
        f"/api/v1/projects/{project.id}/artifacts",
        json={"code": "puts 1", "language": "ruby"},
    )

    assert res.status_code == 400


async def test_record_successful_execution(client, make_project):
    project = await make_project()
    artifact = await _artifact(client, project.id)

    res = await client.post(
        f"/api/v1/artifacts/{artifact['id']}/executions",
        json={"successful": True, "output": "hi"},
    )

    body = res.json()
    assert res.status_code == 200
    assert body["has_been_executed"] is True
    assert body["execution_successful"] is True
    assert body["execution_status"] == "success"
    assert body["execution_output"] == "hi"
    assert body["last_executed_at"] is not None


async def test_record_failed_execution(client, make_project):
    project = await make_project()
    artifact = await _artifact(client, project.id)

    res = await client.post(
        f"/api/v1/artifacts/{artifact['id']}/executions",
        json={"successful": False, "error": "ReferenceError: x is not defined"},
    )

    assert res.json()["execution_status"] == "error"
    assert res.json()["execution_error"].startswith("ReferenceError")


async def test_views_are_counted(client, make_project):
    project = await make_project()
    artifact = await _artifact(client, project.id)

    await client.post(f"/api/v1/artifacts/{artifact['id']}/views")
    res = await client.post(f"/api/v1/artifacts/{artifact['id']}/views")

    assert res.json()["times_viewed"] == 2
    assert res.json()["last_viewed_at"] is not None


async def test_list_artifacts_newest_first(client, make_project):
    project = await make_project()
    await _artifact(client, project.id)
    await _artifact(client, project.id)

    res = await client.get(f"/api/v1/projects/{project.id}/artifacts")

    assert [a["version_number"] for a in res.json()] == [2, 1]


async def test_other_users_artifacts_are_hidden(client, make_project):
    project = await make_project(user_id=OTHER_USER_ID)

    res = await client.get(f"/api/v1/projects/{project.id}/artifacts")
    assert res.status_code == 404

    res = await client.post(f"/api/v1/artifacts/{uuid4()}/views")
    assert res.status_code == 404
