from __future__ import annotations

import uuid

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import auth, charts, dashboard, profile, transactions
from app.cache import QueryCache, profile_key
from app.config import settings
from app.events import ProfileEvents
from app.logging_config import configure_logging

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Personal Finance API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.cache = QueryCache(ttl_seconds=settings.QUERY_CACHE_TTL_SECONDS)
app.state.profile_events = ProfileEvents()


def _drop_cached_profile(user_id: uuid.UUID) -> None:
    app.state.cache.invalidate(profile_key(user_id))


app.state.profile_events.subscribe(_drop_cached_profile)

api_prefix = "/api/v1"
app.include_router(auth.router, prefix=api_prefix)
app.include_router(profile.router, prefix=api_prefix)
app.include_router(transactions.router, prefix=api_prefix)
app.include_router(dashboard.router, prefix=api_prefix)
app.include_router(charts.router, prefix=api_prefix)


@app.get("/api/v1/health")
async def health() -> dict:
    return {"status": "ok"}
