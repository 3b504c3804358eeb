"""User profile ORM — the child's account settings, keyed by the identity provider's id.

Invariants:
    - id equals the identity provider's user id (string); one profile per user
    - Children's profiles default to supervised mode, strict content filter, private visibility

Design Decisions:
    - Credentials never stored here: the identity provider owns authentication
"""

from datetime import date, datetime, timezone

from sqlalchemy import String, Integer, Boolean, Date, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from ruby_tutor.db.base import Base


class UserProfile(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    display_name: Mapped[str] = mapped_column(String(200), nullable=False)
    parent_email: Mapped[str] = mapped_column(String(320), nullable=False)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    parental_consent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    account_verified_by_parent: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    supervised_mode: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    content_filter_level: Mapped[str] = mapped_column(
        String(20), nullable=False, default="strict",
    )
    learning_style: Mapped[str] = mapped_column(String(20), nullable=False, default="visual")
    attention_span_minutes: Mapped[int] = mapped_column(
        Integer, nullable=False, default=15,
    )
    profile_visibility: Mapped[str] = mapped_column(
        String(20), nullable=False, default="private",
    )
    allow_data_for_research: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
