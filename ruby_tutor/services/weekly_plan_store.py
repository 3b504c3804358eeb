"""Weekly Plan Store — weekly plan rows derived from an approved master plan.

Invariants:
    - Access goes through the owning project (ProjectStore ownership check)
    - create_from_master_plan writes one row per breakdown week, week 1 current
    - updated_at bumped on every update
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ruby_tutor.core.domain_types import UserId
from ruby_tutor.core.errors import InputValidationError, ResourceNotFoundError
from ruby_tutor.core.master_plan import weekly_plan_rows
from ruby_tutor.models.project import Project
from ruby_tutor.models.weekly_plan import WeeklyPlan
from ruby_tutor.services.project_store import ProjectStore

logger = logging.getLogger(__name__)


class WeeklyPlanStore:

    def __init__(self, db: AsyncSession, user_id: UserId):
        self.db = db
        self.user_id = user_id
        self.projects = ProjectStore(db, user_id)

    async def list_weekly_plans(self, project_id: uuid.UUID) -> list[WeeklyPlan]:
        await self.projects.get_project(project_id)
        result = await self.db.execute(
            select(WeeklyPlan)
            .where(WeeklyPlan.project_id == project_id)
            .order_by(WeeklyPlan.week_number, WeeklyPlan.attempt_number),
        )
        return list(result.scalars().all())

    async def count_for_project(self, project_id: uuid.UUID) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(WeeklyPlan)
            .where(WeeklyPlan.project_id == project_id),
        )
        return result.scalar_one()

    async def create_from_master_plan(
        self, project_id: uuid.UUID, master_plan: dict,
    ) -> list[WeeklyPlan]:
        await self.projects.get_project(project_id)
        rows = weekly_plan_rows(master_plan)
        if not rows:
            raise InputValidationError(
                "Master plan has no weekly breakdown", "master_plan",
            )
        plans = [WeeklyPlan(project_id=project_id, **row) for row in rows]
        self.db.add_all(plans)
        await self.db.commit()
        logger.info(
            f"Created {len(plans)} weekly plans",
            extra={"project_id": str(project_id), "user_id": self.user_id},
        )
        return plans

    async def get_weekly_plan(self, weekly_plan_id: uuid.UUID) -> WeeklyPlan:
        result = await self.db.execute(
            select(WeeklyPlan)
            .join(Project, Project.id == WeeklyPlan.project_id)
            .where(
                WeeklyPlan.id == weekly_plan_id, Project.user_id == self.user_id,
            ),
        )
        plan = result.scalar_one_or_none()
        if not plan:
            raise ResourceNotFoundError("WeeklyPlan", str(weekly_plan_id))
        return plan

    async def update_weekly_plan(
        self, weekly_plan_id: uuid.UUID, updates: dict,
    ) -> WeeklyPlan:
        plan = await self.get_weekly_plan(weekly_plan_id)
        for key, value in updates.items():
            if key in ("id", "project_id", "created_at"):
                continue
            setattr(plan, key, value)
        plan.updated_at = datetime.now(timezone.utc)
        await self.db.commit()
        return plan
