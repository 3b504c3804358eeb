"""Project Routes — list, create, read, update, delete and dashboard metrics.

Invariants:
    - All routes scoped to the authenticated user (ProjectStore filters by user_id)
    - PATCH writes only fields present in the body
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from ruby_tutor.api.dependencies import get_project_store
from ruby_tutor.schemas.project import (
    DashboardMetricsResponse, ProjectCreate, ProjectResponse, ProjectUpdate,
)
from ruby_tutor.services.project_store import ProjectStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


@router.get("", response_model=list[ProjectResponse])
async def list_projects(store: ProjectStore = Depends(get_project_store)):
    return await store.list_projects()


@router.post(
    "", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED,
)
async def create_project(
    body: ProjectCreate, store: ProjectStore = Depends(get_project_store),
):
    return await store.create_project(body.model_dump(mode="json"))


@router.get("/metrics", response_model=DashboardMetricsResponse)
async def dashboard_metrics(store: ProjectStore = Depends(get_project_store)):
    """Dashboard counters across all of the user's projects."""
    metrics = await store.dashboard_metrics()
    return metrics.to_dict()


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: UUID, store: ProjectStore = Depends(get_project_store),
):
    return await store.get_project(project_id)


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: UUID,
    body: ProjectUpdate,
    store: ProjectStore = Depends(get_project_store),
):
    return await store.update_project(
        project_id, body.model_dump(mode="json", exclude_unset=True),
    )


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: UUID, store: ProjectStore = Depends(get_project_store),
):
    await store.delete_project(project_id)
