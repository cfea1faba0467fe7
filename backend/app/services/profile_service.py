from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.cache import QueryCache, profile_key
from app.events import ProfileEvents
from app.models.user import User
from app.schemas.user import ProfileUpdate, UserResponse

logger = logging.getLogger(__name__)


class ProfileStoreError(Exception):
    """The profile could not be saved."""


def get_profile(user: User, cache: QueryCache) -> UserResponse:
    key = profile_key(user.id)
    cached = cache.get(key)
    if cached is None:
        cached = UserResponse.model_validate(user)
        cache.set(key, cached)
    return cached


async def update_profile(
    db: AsyncSession, user: User, body: ProfileUpdate, events: ProfileEvents
) -> User:
    """Apply ``body`` to ``user`` and notify subscribers once it is committed."""
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Failed to update profile of user %s", user.id)
        raise ProfileStoreError("Could not update profile") from exc
    await db.refresh(user)
    events.publish(user.id)
    return user
