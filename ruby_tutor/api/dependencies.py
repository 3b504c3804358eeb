"""Route Dependencies — per-request stores and the shared model client.

Invariants:
    - Stores are built per request from the request's AsyncSession and the current user
    - One ResilientAnthropicClient per process, created lazily on first use

Design Decisions:
    - Module-level client singleton: AsyncAnthropic is stateless and connection-pool-safe
    - Tests override get_ruby_generator / get_current_user / get_db via dependency_overrides
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ruby_tutor.config import get_settings
from ruby_tutor.infrastructure.anthropic_client import ResilientAnthropicClient
from ruby_tutor.infrastructure.auth import CurrentUser, get_current_user
from ruby_tutor.infrastructure.database import get_db
from ruby_tutor.services.code_artifact_store import CodeArtifactStore
from ruby_tutor.services.conversation_store import ConversationStore
from ruby_tutor.services.goal_setting_store import GoalSettingStore
from ruby_tutor.services.planning_orchestrator import PlanningOrchestrator
from ruby_tutor.services.project_store import ProjectStore
from ruby_tutor.services.ruby_generator import RubyGenerator
from ruby_tutor.services.user_store import UserStore
from ruby_tutor.services.weekly_plan_store import WeeklyPlanStore

_anthropic_client: ResilientAnthropicClient | None = None


def get_anthropic_client() -> ResilientAnthropicClient:
    global _anthropic_client
    if _anthropic_client is None:
        settings = get_settings()
        _anthropic_client = ResilientAnthropicClient(
            api_key=settings.anthropic_api_key,
            max_retries=settings.anthropic_max_retries,
            base_delay_ms=settings.anthropic_base_delay_ms,
            max_delay_ms=settings.anthropic_max_delay_ms,
            timeout_seconds=settings.anthropic_timeout_seconds,
        )
    return _anthropic_client


def get_ruby_generator() -> RubyGenerator:
    return RubyGenerator(get_anthropic_client(), get_settings())


def get_project_store(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ProjectStore:
    return ProjectStore(db, user.id)


def get_weekly_plan_store(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> WeeklyPlanStore:
    return WeeklyPlanStore(db, user.id)


def get_conversation_store(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ConversationStore:
    return ConversationStore(db, user.id)


def get_code_artifact_store(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> CodeArtifactStore:
    return CodeArtifactStore(db, user.id)


def get_goal_setting_store(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> GoalSettingStore:
    return GoalSettingStore(db, user.id)


def get_user_store(db: AsyncSession = Depends(get_db)) -> UserStore:
    return UserStore(db)


def get_planning_orchestrator(
    projects: ProjectStore = Depends(get_project_store),
    weekly_plans: WeeklyPlanStore = Depends(get_weekly_plan_store),
    generator: RubyGenerator = Depends(get_ruby_generator),
) -> PlanningOrchestrator:
    return PlanningOrchestrator(projects, weekly_plans, generator)
