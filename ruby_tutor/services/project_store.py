"""Project Store — user-scoped CRUD over projects plus dashboard metrics.

Invariants:
    - Every query filters by user_id: another user's project behaves as not found (404)
    - updated_at bumped on every update
    - New projects with a non-empty master plan start active at week 1, otherwise planning at week 0
    - Deleting a project deletes its artifacts, messages, conversations and weekly plans first

Design Decisions:
    - Store owns commits: each public method is one unit of work (commit=False lets the
      orchestrator batch several writes into one transaction)
    - Updates are dicts of column -> value already validated at the API boundary
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ruby_tutor.core.domain_types import ProjectStatus, UserId
from ruby_tutor.core.errors import ResourceNotFoundError
from ruby_tutor.core.metrics import DashboardMetrics, compute_metrics
from ruby_tutor.models.code_artifact import CodeArtifact
from ruby_tutor.models.conversation import Conversation
from ruby_tutor.models.message import Message
from ruby_tutor.models.project import Project
from ruby_tutor.models.weekly_plan import WeeklyPlan

logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = frozenset({"id", "user_id", "created_at"})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProjectStore:
    """Projects owned by one authenticated user."""

    def __init__(self, db: AsyncSession, user_id: UserId):
        self.db = db
        self.user_id = user_id

    async def list_projects(self) -> list[Project]:
        result = await self.db.execute(
            select(Project)
            .where(Project.user_id == self.user_id)
            .order_by(Project.updated_at.desc()),
        )
        return list(result.scalars().all())

    async def create_project(self, data: dict) -> Project:
        master_plan = data.get("master_plan") or {}
        has_plan = bool(master_plan)
        project = Project(
            user_id=self.user_id,
            title=data["title"],
            description=data.get("description"),
            project_type=data.get("project_type") or "experiment",
            initial_request=data.get("initial_request") or "",
            scoped_goal=data.get("scoped_goal") or "",
            duration_weeks=data.get("duration_weeks") or 3,
            master_plan=master_plan,
            learning_goal=data.get("learning_goal") or "",
            target_concepts=data.get("target_concepts") or [],
            difficulty_level=data.get("difficulty_level") or "beginner",
            status=(ProjectStatus.ACTIVE if has_plan else ProjectStatus.PLANNING).value,
            current_week=1 if has_plan else 0,
            progress_percentage=0,
        )
        self.db.add(project)
        await self.db.commit()
        logger.info(
            f"Project created: {project.title}",
            extra={"project_id": str(project.id), "user_id": self.user_id},
        )
        return project

    async def get_project(self, project_id: uuid.UUID) -> Project:
        result = await self.db.execute(
            select(Project).where(
                Project.id == project_id, Project.user_id == self.user_id,
            ),
        )
        project = result.scalar_one_or_none()
        if not project:
            raise ResourceNotFoundError("Project", str(project_id))
        return project

    async def refresh(self, project: Project) -> Project:
        """Re-read the row (another request may have written the master plan)."""
        await self.db.refresh(project)
        return project

    async def update_project(
        self, project_id: uuid.UUID, updates: dict, *, commit: bool = True,
    ) -> Project:
        project = await self.get_project(project_id)
        for key, value in updates.items():
            if key in _IMMUTABLE_FIELDS:
                continue
            setattr(project, key, value)
        project.updated_at = _utcnow()
        if commit:
            await self.db.commit()
        return project

    async def delete_project(self, project_id: uuid.UUID) -> None:
        project = await self.get_project(project_id)
        conversation_ids = select(Conversation.id).where(
            Conversation.project_id == project.id,
        )
        await self.db.execute(
            delete(CodeArtifact).where(CodeArtifact.project_id == project.id),
        )
        await self.db.execute(
            delete(Message).where(Message.conversation_id.in_(conversation_ids)),
        )
        await self.db.execute(
            delete(Conversation).where(Conversation.project_id == project.id),
        )
        await self.db.execute(
            delete(WeeklyPlan).where(WeeklyPlan.project_id == project.id),
        )
        await self.db.delete(project)
        await self.db.commit()
        logger.info(
            "Project deleted",
            extra={"project_id": str(project_id), "user_id": self.user_id},
        )

    async def dashboard_metrics(self) -> DashboardMetrics:
        return compute_metrics(await self.list_projects())
