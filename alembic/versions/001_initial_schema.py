"""Initial schema — users, projects, weekly plans, conversations, messages, artifacts, goal setting.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-16

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str, nullable: bool = False) -> sa.Column:
    if nullable:
        return sa.Column(name, sa.DateTime(timezone=True), nullable=True)
    return sa.Column(
        name, sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(),
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("username", sa.String(100), nullable=False, unique=True),
        sa.Column("display_name", sa.String(200), nullable=False),
        sa.Column("parent_email", sa.String(320), nullable=False),
        sa.Column("date_of_birth", sa.Date, nullable=True),
        sa.Column("age", sa.Integer, nullable=True),
        sa.Column("parental_consent", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("account_verified_by_parent", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("supervised_mode", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("content_filter_level", sa.String(20), nullable=False, server_default="strict"),
        sa.Column("learning_style", sa.String(20), nullable=False, server_default="visual"),
        sa.Column("attention_span_minutes", sa.Integer, nullable=False, server_default="15"),
        sa.Column("profile_visibility", sa.String(20), nullable=False, server_default="private"),
        sa.Column("allow_data_for_research", sa.Boolean, nullable=False, server_default="false"),
        _timestamp("created_at"),
    )

    op.create_table(
        "projects",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False, index=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("project_type", sa.String(30), nullable=False, server_default="experiment"),
        sa.Column("initial_request", sa.Text, nullable=False, server_default=""),
        sa.Column("scoped_goal", sa.Text, nullable=False, server_default=""),
        sa.Column("duration_weeks", sa.Integer, nullable=False, server_default="3"),
        sa.Column("master_plan", sa.JSON, nullable=False, server_default="{}"),
        sa.Column("plan_approved", sa.Boolean, nullable=False, server_default="false"),
        _timestamp("plan_approved_at", nullable=True),
        sa.Column("learning_goal", sa.Text, nullable=False, server_default=""),
        sa.Column("target_concepts", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("difficulty_level", sa.String(20), nullable=False, server_default="beginner"),
        sa.Column("status", sa.String(20), nullable=False, server_default="planning"),
        sa.Column("current_week", sa.Integer, nullable=False, server_default="0"),
        sa.Column("progress_percentage", sa.Integer, nullable=False, server_default="0"),
        sa.Column("concepts_mastered", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("total_sessions", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_time_spent", sa.String(32), nullable=False, server_default="00:00:00"),
        sa.Column("milestones_reached", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("is_public", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("is_template", sa.Boolean, nullable=False, server_default="false"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        _timestamp("completed_at", nullable=True),
    )

    op.create_table(
        "weekly_plans",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "project_id", UUID(as_uuid=True),
            sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True,
        ),
        sa.Column("week_number", sa.Integer, nullable=False),
        sa.Column("week_title", sa.String(200), nullable=False),
        sa.Column("week_description", sa.Text, nullable=True),
        sa.Column("learning_objectives", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("target_concepts", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("attempt_number", sa.Integer, nullable=False, server_default="1"),
        sa.Column("difficulty_level", sa.String(20), nullable=False, server_default="normal"),
        sa.Column("status", sa.String(20), nullable=False, server_default="locked"),
        sa.Column("progress_percentage", sa.Integer, nullable=False, server_default="0"),
        sa.Column("daily_goals", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("estimated_sessions", sa.Integer, nullable=False, server_default="3"),
        sa.Column("goals", sa.JSON, nullable=False, server_default="{}"),
        sa.Column("deliverables", sa.JSON, nullable=False, server_default="[]"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        _timestamp("started_at", nullable=True),
        _timestamp("completed_at", nullable=True),
        sa.UniqueConstraint(
            "project_id", "week_number", "attempt_number",
            name="uq_weekly_plans_project_week_attempt",
        ),
    )

    op.create_table(
        "conversations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "project_id", UUID(as_uuid=True),
            sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True,
        ),
        sa.Column(
            "weekly_plan_id", UUID(as_uuid=True),
            sa.ForeignKey("weekly_plans.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("display_order", sa.Integer, nullable=False, server_default="1"),
        sa.Column("conversation_type", sa.String(20), nullable=False, server_default="learning"),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("concepts_covered", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("learning_objectives", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("total_messages", sa.Integer, nullable=False, server_default="0"),
        sa.Column("user_messages", sa.Integer, nullable=False, server_default="0"),
        sa.Column("ruby_messages", sa.Integer, nullable=False, server_default="0"),
        sa.Column("code_generated_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("engagement_score", sa.Float, nullable=True),
        sa.Column("confusion_indicators", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("success_moments", sa.JSON, nullable=False, server_default="[]"),
        _timestamp("started_at"),
        _timestamp("ended_at", nullable=True),
        _timestamp("last_activity_at"),
        sa.Column("goals_achieved", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("next_session_plan", sa.Text, nullable=True),
        sa.Column("parent_summary", sa.Text, nullable=True),
        sa.Column("session_number", sa.Integer, nullable=False, server_default="1"),
    )

    op.create_table(
        "messages",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "conversation_id", UUID(as_uuid=True),
            sa.ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True,
        ),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("message_order", sa.Integer, nullable=False),
        sa.Column("thought", sa.Text, nullable=True),
        sa.Column("action", sa.Text, nullable=True),
        sa.Column("code", sa.Text, nullable=True),
        sa.Column("code_language", sa.String(20), nullable=True),
        sa.Column("concept_taught", sa.String(200), nullable=True),
        sa.Column("difficulty_level", sa.String(20), nullable=True),
        sa.Column("learning_objective", sa.Text, nullable=True),
        sa.Column("ruby_response_tone", sa.String(50), nullable=True),
        sa.Column("user_understood", sa.Boolean, nullable=True),
        sa.Column("needs_retry", sa.Boolean, nullable=False, server_default="false"),
        _timestamp("timestamp"),
        sa.Column("execution_status", sa.String(20), nullable=True),
    )

    op.create_table(
        "code_artifacts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "project_id", UUID(as_uuid=True),
            sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True,
        ),
        sa.Column(
            "message_id", UUID(as_uuid=True),
            sa.ForeignKey("messages.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column(
            "parent_artifact_id", UUID(as_uuid=True),
            sa.ForeignKey("code_artifacts.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("title", sa.String(200), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("code", sa.Text, nullable=False),
        sa.Column("language", sa.String(20), nullable=False),
        sa.Column("version_number", sa.Integer, nullable=False, server_default="1"),
        sa.Column("has_been_executed", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("execution_successful", sa.Boolean, nullable=True),
        sa.Column("execution_output", sa.Text, nullable=True),
        sa.Column("execution_error", sa.Text, nullable=True),
        sa.Column("execution_status", sa.String(20), nullable=False, server_default="pending"),
        _timestamp("last_executed_at", nullable=True),
        sa.Column("concepts_demonstrated", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("complexity_score", sa.Integer, nullable=False, server_default="0"),
        sa.Column("educational_notes", sa.Text, nullable=True),
        sa.Column("is_milestone", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("milestone_description", sa.Text, nullable=True),
        sa.Column("modifications_made", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("times_viewed", sa.Integer, nullable=False, server_default="0"),
        sa.Column("times_modified", sa.Integer, nullable=False, server_default="0"),
        _timestamp("last_viewed_at", nullable=True),
        _timestamp("created_at"),
    )

    op.create_table(
        "goal_setting_conversations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False, index=True),
        sa.Column("session_id", sa.String(80), nullable=False, unique=True),
        sa.Column("project_name", sa.String(200), nullable=True),
        sa.Column("project_description", sa.Text, nullable=True),
        sa.Column("final_goal_decided", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("total_messages", sa.Integer, nullable=False, server_default="0"),
        _timestamp("started_at"),
        _timestamp("ended_at", nullable=True),
        _timestamp("created_at"),
    )

    op.create_table(
        "goal_setting_messages",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "conversation_id", UUID(as_uuid=True),
            sa.ForeignKey("goal_setting_conversations.id", ondelete="CASCADE"),
            nullable=False, index=True,
        ),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("message_order", sa.Integer, nullable=False),
        _timestamp("timestamp"),
    )


def downgrade() -> None:
    op.drop_table("goal_setting_messages")
    op.drop_table("goal_setting_conversations")
    op.drop_table("code_artifacts")
    op.drop_table("messages")
    op.drop_table("conversations")
    op.drop_table("weekly_plans")
    op.drop_table("projects")
    op.drop_table("users")
