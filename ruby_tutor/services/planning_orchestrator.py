"""Planning Orchestrator — overview -> review -> breakdown -> approval over project.master_plan.

Invariants:
    - State is only ever read from / written to project.master_plan (resumable on reload)
    - One generation per project at a time (in-process set), held until the plan write
      commits; a second caller gets 409
    - Nothing is written when a model call fails: the stored step is unchanged, retry is safe
    - generate_overview refuses to overwrite existing plan data unless replay=True
    - Breakdown merges into the RE-READ master plan and uses the editable duration
    - Approval requires overview + every week with title, main goal, concepts, deliverables

Design Decisions:
    - _generating as module-level set: single-process uvicorn, state lost on restart is
      harmless (a crashed generation simply left nothing behind)
    - Pure transitions in core/master_plan.py; this class only sequences I/O around them
"""

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable

from ruby_tutor.core.domain_types import PlanningStep, ProjectStatus
from ruby_tutor.core.errors import ConcurrencyError, ErrorContext, PlanStateError
from ruby_tutor.core.master_plan import (
    approval_blockers,
    clamp_duration,
    editable_duration,
    has_valid_plan_data,
    overview_project_fields,
    resolve_planning_step,
    with_breakdown,
    with_duration,
    with_overview,
)
from ruby_tutor.models.project import Project
from ruby_tutor.services.project_store import ProjectStore
from ruby_tutor.services.ruby_generator import RubyGenerator
from ruby_tutor.services.weekly_plan_store import WeeklyPlanStore

logger = logging.getLogger(__name__)

_generating: set[uuid.UUID] = set()


def is_generating(project_id: uuid.UUID) -> bool:
    return project_id in _generating


@contextmanager
def _generation_slot(project_id: uuid.UUID):
    if project_id in _generating:
        raise ConcurrencyError(
            "A plan generation is already running for this project",
            ErrorContext(project_id=str(project_id)),
        )
    _generating.add(project_id)
    try:
        yield
    finally:
        _generating.discard(project_id)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlanningOrchestrator:
    """Drives the planning wizard for one user's projects."""

    def __init__(
        self,
        projects: ProjectStore,
        weekly_plans: WeeklyPlanStore,
        generator: RubyGenerator,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.projects = projects
        self.weekly_plans = weekly_plans
        self.generator = generator
        self.clock = clock

    # -- Reading ---------------------------------------------------------------

    def get_state(self, project: Project) -> dict:
        resumption = resolve_planning_step(project.master_plan)
        blockers = approval_blockers(project.master_plan)
        return {
            "step": resumption.step,
            "overview": resumption.overview,
            "breakdown": resumption.breakdown,
            "duration_weeks": editable_duration(
                project.master_plan, project.duration_weeks,
            ),
            "auto_generate_allowed": resumption.auto_generate_allowed,
            "can_approve": not blockers,
            "approval_blockers": blockers,
            "generation_in_progress": is_generating(project.id),
            "plan_approved": project.plan_approved,
        }

    # -- Generation ------------------------------------------------------------

    async def generate_overview(
        self, project_id: uuid.UUID, replay: bool = False,
    ) -> Project:
        project = await self.projects.get_project(project_id)
        context = self._context(project, "generate_overview")
        if is_generating(project.id):
            raise ConcurrencyError(
                "A plan generation is already running for this project", context,
            )
        if not replay and has_valid_plan_data(project.master_plan):
            step = resolve_planning_step(project.master_plan).step
            raise PlanStateError(
                "Plan data already exists; regenerate with replay", step.value, context,
            )

        with _generation_slot(project.id):
            overview = await self.generator.generate_overview(
                project.title,
                project.description or project.scoped_goal,
                context=context,
            )
            overview_data = overview.model_dump(mode="json")
            project = await self.projects.update_project(project.id, {
                "master_plan": with_overview(overview_data, self.clock()),
                **overview_project_fields(overview_data),
                "target_concepts": overview_data["target_concepts"],
                "status": ProjectStatus.PLANNING.value,
            })
        logger.info(
            "Overview generated",
            extra={"project_id": str(project.id), "operation": "generate_overview"},
        )
        return project

    async def generate_breakdown(
        self, project_id: uuid.UUID, replay: bool = False,
    ) -> Project:
        project = await self.projects.get_project(project_id)
        context = self._context(project, "generate_breakdown")
        if is_generating(project.id):
            raise ConcurrencyError(
                "A plan generation is already running for this project", context,
            )
        resumption = resolve_planning_step(project.master_plan)
        if not resumption.overview:
            raise PlanStateError(
                "Generate the overview before the weekly breakdown",
                resumption.step.value, context,
            )
        if not replay and resumption.step == PlanningStep.COMPLETE:
            raise PlanStateError(
                "Weekly breakdown already exists; regenerate with replay",
                resumption.step.value, context,
            )

        duration = editable_duration(project.master_plan, project.duration_weeks)
        overview = {**resumption.overview, "recommended_duration": duration}
        with _generation_slot(project.id):
            breakdown = await self.generator.generate_breakdown(
                project.title,
                project.description or project.scoped_goal,
                overview,
                context=context,
            )
            project = await self.projects.refresh(project)
            project = await self.projects.update_project(project.id, {
                "master_plan": with_breakdown(
                    project.master_plan, breakdown.model_dump(mode="json"), self.clock(),
                ),
                "duration_weeks": duration,
                "status": ProjectStatus.PLANNING.value,
            })
        logger.info(
            f"Weekly breakdown generated ({len(breakdown.weekly_breakdown)} weeks)",
            extra={"project_id": str(project.id), "operation": "generate_breakdown"},
        )
        return project

    # -- Editing ---------------------------------------------------------------

    async def update_duration(self, project_id: uuid.UUID, weeks: int) -> Project:
        project = await self.projects.get_project(project_id)
        weeks = clamp_duration(weeks)
        master_plan = project.master_plan
        if not resolve_planning_step(master_plan).overview:
            return project
        if editable_duration(master_plan, project.duration_weeks) == weeks:
            return project
        return await self.projects.update_project(project.id, {
            "master_plan": with_duration(master_plan, weeks, self.clock()),
            "duration_weeks": weeks,
        })

    async def start_over(self, project_id: uuid.UUID) -> Project:
        project = await self.projects.get_project(project_id)
        if is_generating(project.id):
            raise ConcurrencyError(
                "A plan generation is already running for this project",
                self._context(project, "start_over"),
            )
        logger.info(
            "Planning restarted",
            extra={"project_id": str(project.id), "operation": "start_over"},
        )
        return await self.projects.update_project(project.id, {
            "master_plan": {},
            "status": ProjectStatus.PLANNING.value,
            "plan_approved": False,
            "plan_approved_at": None,
            "current_week": 0,
        })

    async def approve_plan(self, project_id: uuid.UUID) -> Project:
        project = await self.projects.get_project(project_id)
        blockers = approval_blockers(project.master_plan)
        if blockers:
            step = resolve_planning_step(project.master_plan).step
            raise PlanStateError(
                f"Plan cannot be approved yet: {', '.join(blockers)}",
                step.value, self._context(project, "approve_plan"),
            )

        project = await self.projects.update_project(project.id, {
            "plan_approved": True,
            "plan_approved_at": self.clock(),
            "status": ProjectStatus.ACTIVE.value,
            "current_week": 1,
        }, commit=False)
        if await self.weekly_plans.count_for_project(project.id) == 0:
            await self.weekly_plans.create_from_master_plan(
                project.id, project.master_plan,
            )
        else:
            await self.projects.db.commit()
        logger.info(
            "Plan approved",
            extra={"project_id": str(project.id), "operation": "approve_plan"},
        )
        return project

    def _context(self, project: Project, operation: str) -> ErrorContext:
        return ErrorContext(
            project_id=str(project.id),
            user_id=project.user_id,
            operation=operation,
        )
