"""User Store — child profiles keyed by the identity provider's user id.

Invariants:
    - At most one profile per user id (ConflictError on a second create)
    - Username "first_last_xxxx"; age from birth year only
    - Child defaults: supervised, strict filter, visual style, 15-minute attention span,
      private profile, no research data sharing
"""

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ruby_tutor.core.errors import ConflictError
from ruby_tutor.core.sequencing import age_from_birth_date, profile_username
from ruby_tutor.infrastructure.auth import CurrentUser
from ruby_tutor.models.user import UserProfile

logger = logging.getLogger(__name__)


class UserStore:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_profile(self, user_id: str) -> UserProfile | None:
        result = await self.db.execute(
            select(UserProfile).where(UserProfile.id == user_id),
        )
        return result.scalar_one_or_none()

    async def create_profile(
        self, user: CurrentUser, data: dict, today: date | None = None,
    ) -> UserProfile:
        if await self.get_profile(user.id):
            raise ConflictError("Profile already exists")
        first, last = data["first_name"], data["last_name"]
        date_of_birth = data.get("date_of_birth")
        profile = UserProfile(
            id=user.id,
            email=user.email,
            username=profile_username(first, last),
            display_name=f"{first} {last}",
            parent_email=data["parent_email"],
            date_of_birth=date_of_birth,
            age=age_from_birth_date(date_of_birth, today or date.today()),
            parental_consent=False,
            account_verified_by_parent=False,
            supervised_mode=True,
            content_filter_level="strict",
            learning_style="visual",
            attention_span_minutes=15,
            profile_visibility="private",
            allow_data_for_research=False,
        )
        self.db.add(profile)
        await self.db.commit()
        logger.info("Child profile created", extra={"user_id": user.id})
        return profile
