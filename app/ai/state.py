"""
TASKFLOW API - Conversation State

Per-user conversation state on top of the session store: the parked
pending flow (add-task or general question, never both) and the last
search results.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Union

from app.config import settings
from app.session_store import SessionStore
from app.ai.pending import PendingAdd, PendingGeneral

logger = logging.getLogger(__name__)

PENDING = "pending"
LAST_SEARCH = "last_search"


class ConversationState:

    def __init__(
        self,
        store: SessionStore,
        ttl_seconds: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        ttl = settings.PENDING_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self.ttl = timedelta(seconds=ttl) if ttl > 0 else None
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _pending(self, user_id: str) -> Optional[Union[PendingAdd, PendingGeneral]]:
        entry = self.store.get(PENDING, user_id)
        if entry is None:
            return None
        if self.ttl is not None and self._clock() - entry.created_at > self.ttl:
            logger.info(f"Expired pending {type(entry).__name__} for user {user_id}")
            self.store.delete(PENDING, user_id)
            return None
        return entry

    def get_pending_add(self, user_id: str) -> Optional[PendingAdd]:
        entry = self._pending(user_id)
        return entry if isinstance(entry, PendingAdd) else None

    def get_pending_general(self, user_id: str) -> Optional[PendingGeneral]:
        entry = self._pending(user_id)
        return entry if isinstance(entry, PendingGeneral) else None

    def set_pending(self, user_id: str, entry: Union[PendingAdd, PendingGeneral]) -> None:
        """Park a flow. Replaces whatever flow was parked before."""
        self.store.set(PENDING, user_id, entry)

    def clear_pending(self, user_id: str) -> None:
        self.store.delete(PENDING, user_id)

    def get_last_search(self, user_id: str) -> List[str]:
        return list(self.store.get(LAST_SEARCH, user_id) or [])

    def set_last_search(self, user_id: str, task_ids: List[str]) -> None:
        self.store.set(LAST_SEARCH, user_id, list(task_ids))
