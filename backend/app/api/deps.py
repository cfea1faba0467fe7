from __future__ import annotations

from datetime import date

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.cache import QueryCache
from app.database import get_db
from app.events import ProfileEvents
from app.models.user import User
from app.services.aggregation import DateRange, parse_month
from app.services.auth_service import decode_access_token, get_user_by_id
from app.services.error_messages import auth_error_detail

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=auth_error_detail(message),
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    if credentials is None:
        raise _unauthorized("Not authenticated")

    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise _unauthorized("Token has expired or is invalid")

    user = await get_user_by_id(db, user_id)
    if user is None or not user.is_active:
        raise _unauthorized("User not allowed")
    return user


def get_cache(request: Request) -> QueryCache:
    return request.app.state.cache


def get_profile_events(request: Request) -> ProfileEvents:
    return request.app.state.profile_events


def get_date_range(
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    month: str | None = Query(None, description="Calendar month as YYYY-MM"),
) -> DateRange:
    if month is not None:
        try:
            return parse_month(month)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc

    if date_from is not None and date_to is not None and date_from > date_to:
        raise HTTPException(
            status_code=422,
            detail="date_from must not be after date_to",
        )
    return DateRange(start=date_from, end=date_to)
