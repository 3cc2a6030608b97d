"""
TASKFLOW API - Rate Limiting

Fixed-window request counter per user, kept in the session store under
the "rate_limit" namespace. Applied to the endpoints that call an LLM.
"""

import logging
import math
import time
from typing import Annotated, Callable, Optional

from fastapi import Depends

from app.config import settings
from app.errors import RateLimitError
from app.session_store import SessionStore, get_session_store
from app.auth.dependencies import CurrentUser

logger = logging.getLogger(__name__)

RATE_LIMIT_NAMESPACE = "rate_limit"


class RateLimiter:

    def __init__(
        self,
        store: SessionStore,
        limit: int,
        window_seconds: int,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.store = store
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock or time.monotonic

    def hit(self, user_id: str) -> int:
        """
        Count one request for the user and return the running total.

        Raises RateLimitError once the total passes the limit for the
        current window. A limit of 0 or less turns counting off.
        """
        if self.limit <= 0:
            return 0

        now = self._clock()
        window = self.store.get(RATE_LIMIT_NAMESPACE, user_id)
        if window is None or now - window["started_at"] >= self.window_seconds:
            window = {"started_at": now, "count": 0}

        window["count"] += 1
        self.store.set(RATE_LIMIT_NAMESPACE, user_id, window)

        if window["count"] > self.limit:
            retry_after = max(1, math.ceil(window["started_at"] + self.window_seconds - now))
            logger.warning(f"Rate limit exceeded for user {user_id}")
            raise RateLimitError(f"Rate limit exceeded. Retry in {retry_after}s.", retry_after=retry_after)
        return window["count"]


def get_rate_limiter(
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> RateLimiter:
    return RateLimiter(store, settings.RATE_LIMIT_PER_MINUTE, settings.RATE_LIMIT_WINDOW_SECONDS)


async def enforce_rate_limit(
    current_user: CurrentUser,
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> None:
    """Dependency counting the request against the caller's window."""
    limiter.hit(current_user.id)
