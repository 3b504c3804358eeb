"""Code Artifact Routes — snapshots, execution results and view tracking."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from ruby_tutor.api.dependencies import get_code_artifact_store
from ruby_tutor.schemas.code_artifact import (
    ArtifactCreate, ArtifactResponse, ExecutionResult,
)
from ruby_tutor.services.code_artifact_store import CodeArtifactStore

router = APIRouter(prefix="/api/v1", tags=["code-artifacts"])


@router.get(
    "/projects/{project_id}/artifacts", response_model=list[ArtifactResponse],
)
async def list_artifacts(
    project_id: UUID, store: CodeArtifactStore = Depends(get_code_artifact_store),
):
    return await store.list_artifacts(project_id)


@router.post(
    "/projects/{project_id}/artifacts",
    response_model=ArtifactResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_artifact(
    project_id: UUID,
    body: ArtifactCreate,
    store: CodeArtifactStore = Depends(get_code_artifact_store),
):
    options = body.model_dump(exclude={"code", "language"})
    return await store.create_artifact(project_id, body.code, body.language, **options)


@router.post("/artifacts/{artifact_id}/executions", response_model=ArtifactResponse)
async def record_execution(
    artifact_id: UUID,
    body: ExecutionResult,
    store: CodeArtifactStore = Depends(get_code_artifact_store),
):
    return await store.record_execution(
        artifact_id, body.successful, body.output, body.error,
    )


@router.post("/artifacts/{artifact_id}/views", response_model=ArtifactResponse)
async def view_artifact(
    artifact_id: UUID, store: CodeArtifactStore = Depends(get_code_artifact_store),
):
    return await store.view_artifact(artifact_id)
