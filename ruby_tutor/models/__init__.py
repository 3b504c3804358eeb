"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Project is the aggregate root for weekly plans, conversations and artifacts
    - Every project-scoped query filters by the owning user's id

Design Decisions:
    - One file per entity (goal-setting conversation + its messages share one)
    - All models imported here so Base.metadata knows every table (create_all, Alembic)
"""

from ruby_tutor.models.user import UserProfile  # noqa: F401
from ruby_tutor.models.project import Project  # noqa: F401
from ruby_tutor.models.weekly_plan import WeeklyPlan  # noqa: F401
from ruby_tutor.models.conversation import Conversation  # noqa: F401
from ruby_tutor.models.message import Message  # noqa: F401
from ruby_tutor.models.code_artifact import CodeArtifact  # noqa: F401
from ruby_tutor.models.goal_setting import (  # noqa: F401
    GoalSettingConversation, GoalSettingMessage,
)
