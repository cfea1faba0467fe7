"""In-process query cache shared by the API routers.

One :class:`QueryCache` lives on ``app.state`` and is handed to routers via
``app.api.deps.get_cache``. Readers populate it, and every mutation calls
:meth:`QueryCache.invalidate` for the keys it affects once its commit has
succeeded.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable, Hashable
from typing import Any

logger = logging.getLogger(__name__)


def transactions_key(user_id: uuid.UUID) -> tuple[str, uuid.UUID]:
    return ("transactions", user_id)


def profile_key(user_id: uuid.UUID) -> tuple[str, uuid.UUID]:
    return ("profile", user_id)


class QueryCache:
    """Keyed result cache with optional expiry.

    ``ttl_seconds`` of ``None`` or ``0`` keeps entries until they are
    invalidated.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds or None
        self._clock = clock
        self._entries: dict[Hashable, tuple[float | None, Any]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def get(self, key: Hashable) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: Hashable, value: Any) -> None:
        now = self._clock()
        if self._ttl:
            self._prune(now)
        expires_at = now + self._ttl if self._ttl else None
        self._entries[key] = (expires_at, value)

    def _prune(self, now: float) -> None:
        # Expired entries are dropped on write as well as on read
        expired = [
            key
            for key, (expires_at, _) in self._entries.items()
            if expires_at is not None and now >= expires_at
        ]
        for key in expired:
            del self._entries[key]

    def invalidate(self, key: Hashable) -> None:
        if self._entries.pop(key, None) is not None:
            logger.debug("Invalidated cache entry %s", key)

    def clear(self) -> None:
        self._entries.clear()
