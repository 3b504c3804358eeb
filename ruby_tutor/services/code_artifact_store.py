"""Code Artifact Store — versioned code snapshots with execution metadata.

Invariants:
    - Artifacts reachable only through a project the user owns
    - version_number = artifacts already stored for the project + 1
    - record_execution sets status success|error and last_executed_at
    - view_artifact increments times_viewed and stamps last_viewed_at
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ruby_tutor.core.domain_types import CodeLanguage, ExecutionStatus, UserId
from ruby_tutor.core.errors import ResourceNotFoundError
from ruby_tutor.core.sequencing import next_version
from ruby_tutor.models.code_artifact import CodeArtifact
from ruby_tutor.models.project import Project
from ruby_tutor.services.project_store import ProjectStore

logger = logging.getLogger(__name__)

_CREATE_OPTIONS = (
    "title", "description", "message_id", "parent_artifact_id",
    "is_milestone", "milestone_description", "educational_notes",
)


class CodeArtifactStore:

    def __init__(self, db: AsyncSession, user_id: UserId):
        self.db = db
        self.user_id = user_id
        self.projects = ProjectStore(db, user_id)

    async def list_artifacts(self, project_id: uuid.UUID) -> list[CodeArtifact]:
        await self.projects.get_project(project_id)
        result = await self.db.execute(
            select(CodeArtifact)
            .where(CodeArtifact.project_id == project_id)
            .order_by(CodeArtifact.created_at.desc(), CodeArtifact.version_number.desc()),
        )
        return list(result.scalars().all())

    async def create_artifact(
        self,
        project_id: uuid.UUID,
        code: str,
        language: CodeLanguage,
        **options,
    ) -> CodeArtifact:
        await self.projects.get_project(project_id)
        existing = (await self.db.execute(
            select(func.count()).select_from(CodeArtifact)
            .where(CodeArtifact.project_id == project_id),
        )).scalar_one()

        artifact = CodeArtifact(
            project_id=project_id,
            code=code,
            language=CodeLanguage(language).value,
            version_number=next_version(existing),
            has_been_executed=False,
            execution_status=ExecutionStatus.PENDING.value,
            concepts_demonstrated=[],
            modifications_made=[],
            complexity_score=0,
            times_viewed=0,
            times_modified=0,
            is_milestone=False,
        )
        for key in _CREATE_OPTIONS:
            if options.get(key) is not None:
                setattr(artifact, key, options[key])
        self.db.add(artifact)
        await self.db.commit()
        logger.info(
            f"Code artifact v{artifact.version_number} saved",
            extra={"project_id": str(project_id), "user_id": self.user_id},
        )
        return artifact

    async def get_artifact(self, artifact_id: uuid.UUID) -> CodeArtifact:
        result = await self.db.execute(
            select(CodeArtifact)
            .join(Project, Project.id == CodeArtifact.project_id)
            .where(CodeArtifact.id == artifact_id, Project.user_id == self.user_id),
        )
        artifact = result.scalar_one_or_none()
        if not artifact:
            raise ResourceNotFoundError("CodeArtifact", str(artifact_id))
        return artifact

    async def record_execution(
        self,
        artifact_id: uuid.UUID,
        successful: bool,
        output: str | None = None,
        error: str | None = None,
    ) -> CodeArtifact:
        artifact = await self.get_artifact(artifact_id)
        artifact.has_been_executed = True
        artifact.execution_successful = successful
        artifact.execution_output = output
        artifact.execution_error = error
        artifact.execution_status = (
            ExecutionStatus.SUCCESS if successful else ExecutionStatus.ERROR
        ).value
        artifact.last_executed_at = datetime.now(timezone.utc)
        await self.db.commit()
        return artifact

    async def view_artifact(self, artifact_id: uuid.UUID) -> CodeArtifact:
        artifact = await self.get_artifact(artifact_id)
        artifact.times_viewed = (artifact.times_viewed or 0) + 1
        artifact.last_viewed_at = datetime.now(timezone.utc)
        await self.db.commit()
        return artifact
