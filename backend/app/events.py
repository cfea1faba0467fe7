"""Profile change notifications.

The profile router publishes the id of a user whose profile changed;
subscribers (registered in ``app.main``) react, for instance by dropping the
cached profile so the next read sees the new values.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable

logger = logging.getLogger(__name__)

ProfileListener = Callable[[uuid.UUID], None]


class ProfileEvents:
    def __init__(self) -> None:
        self._listeners: list[ProfileListener] = []

    def subscribe(self, listener: ProfileListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ProfileListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def publish(self, user_id: uuid.UUID) -> None:
        for listener in list(self._listeners):
            try:
                listener(user_id)
            except Exception:
                logger.exception("Profile listener %r failed for user %s", listener, user_id)
