from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_cache, get_current_user, get_profile_events
from app.cache import QueryCache
from app.database import get_db
from app.events import ProfileEvents
from app.models.user import User
from app.schemas.user import PasswordChange, ProfileUpdate, UserResponse
from app.services.auth_service import change_password, verify_password
from app.services.error_messages import auth_error_detail
from app.services.profile_service import ProfileStoreError, get_profile, update_profile

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=dict)
async def read_profile(
    cache: QueryCache = Depends(get_cache),
    current_user: User = Depends(get_current_user),
) -> dict:
    return {"data": get_profile(current_user, cache)}


@router.patch("", response_model=dict)
async def edit_profile(
    body: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    events: ProfileEvents = Depends(get_profile_events),
    current_user: User = Depends(get_current_user),
) -> dict:
    try:
        user = await update_profile(db, current_user, body, events)
    except ProfileStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not save the profile, please try again",
        ) from exc
    return {"data": UserResponse.model_validate(user)}


@router.put("/password", status_code=status.HTTP_204_NO_CONTENT)
async def update_password(
    body: PasswordChange,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    if not verify_password(body.current_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=auth_error_detail("Current password is incorrect"),
        )
    if body.new_password == body.current_password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=auth_error_detail("New password should be different from the old password"),
        )
    await change_password(db, current_user, body.new_password)
