"""Planning Routes — the project detail wizard (overview, breakdown, duration, approval).

Invariants:
    - Every response carries the updated project AND the resolved wizard state
    - Conflicts (existing data, missing overview, generation running) -> 409
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from ruby_tutor.api.dependencies import get_planning_orchestrator
from ruby_tutor.models.project import Project
from ruby_tutor.schemas.planning import (
    DurationUpdate, GenerateStepRequest, PlanStateResponse,
)
from ruby_tutor.schemas.project import ProjectResponse
from ruby_tutor.services.planning_orchestrator import PlanningOrchestrator

router = APIRouter(prefix="/api/v1/projects/{project_id}/plan", tags=["planning"])


def _plan_response(orchestrator: PlanningOrchestrator, project: Project) -> dict:
    return {
        "project": ProjectResponse.model_validate(project).model_dump(mode="json"),
        "plan": PlanStateResponse(
            **orchestrator.get_state(project),
        ).model_dump(mode="json"),
    }


@router.get("")
async def get_plan_state(
    project_id: UUID,
    orchestrator: PlanningOrchestrator = Depends(get_planning_orchestrator),
):
    project = await orchestrator.projects.get_project(project_id)
    return _plan_response(orchestrator, project)


@router.post("/overview")
async def generate_overview(
    project_id: UUID,
    body: GenerateStepRequest | None = None,
    orchestrator: PlanningOrchestrator = Depends(get_planning_orchestrator),
):
    replay = bool(body and body.replay)
    project = await orchestrator.generate_overview(project_id, replay=replay)
    return _plan_response(orchestrator, project)


@router.post("/breakdown")
async def generate_breakdown(
    project_id: UUID,
    body: GenerateStepRequest | None = None,
    orchestrator: PlanningOrchestrator = Depends(get_planning_orchestrator),
):
    replay = bool(body and body.replay)
    project = await orchestrator.generate_breakdown(project_id, replay=replay)
    return _plan_response(orchestrator, project)


@router.put("/duration")
async def update_duration(
    project_id: UUID,
    body: DurationUpdate,
    orchestrator: PlanningOrchestrator = Depends(get_planning_orchestrator),
):
    project = await orchestrator.update_duration(project_id, body.weeks)
    return _plan_response(orchestrator, project)


@router.post("/start-over")
async def start_over(
    project_id: UUID,
    orchestrator: PlanningOrchestrator = Depends(get_planning_orchestrator),
):
    project = await orchestrator.start_over(project_id)
    return _plan_response(orchestrator, project)


@router.post("/approve")
async def approve_plan(
    project_id: UUID,
    orchestrator: PlanningOrchestrator = Depends(get_planning_orchestrator),
):
    project = await orchestrator.approve_plan(project_id)
    return _plan_response(orchestrator, project)
