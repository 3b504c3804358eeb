"""User Routes — who am I, and child profile creation at sign-up."""

from fastapi import APIRouter, Depends, status

from ruby_tutor.api.dependencies import get_user_store
from ruby_tutor.infrastructure.auth import CurrentUser, get_current_user
from ruby_tutor.schemas.user import MeResponse, ProfileCreate, ProfileResponse
from ruby_tutor.services.user_store import UserStore

router = APIRouter(prefix="/api/v1/me", tags=["users"])


@router.get("", response_model=MeResponse)
async def me(
    user: CurrentUser = Depends(get_current_user),
    store: UserStore = Depends(get_user_store),
):
    profile = await store.get_profile(user.id)
    return {
        "id": user.id,
        "email": user.email,
        "profile": ProfileResponse.model_validate(profile) if profile else None,
    }


@router.post(
    "/profile", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED,
)
async def create_profile(
    body: ProfileCreate,
    user: CurrentUser = Depends(get_current_user),
    store: UserStore = Depends(get_user_store),
):
    return await store.create_profile(user, body.model_dump())
