"""
TASKFLOW API - Session Store

Process-wide per-user state (parked conversation flows, last search
results, decrypted key cache, OAuth states) behind one injectable
interface. Lifetime is the process; nothing is replicated.
"""

import asyncio
import weakref
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, Dict, Optional


class SessionStore(ABC):
    """Namespaced key-value store plus per-key locks."""

    @abstractmethod
    def get(self, namespace: str, key: str) -> Optional[Any]:
        pass

    @abstractmethod
    def set(self, namespace: str, key: str, value: Any) -> None:
        pass

    @abstractmethod
    def delete(self, namespace: str, key: str) -> None:
        pass

    @abstractmethod
    def lock(self, key: str) -> asyncio.Lock:
        """Lock serializing work for one key (a user id)."""
        pass

    def pop(self, namespace: str, key: str) -> Optional[Any]:
        value = self.get(namespace, key)
        if value is not None:
            self.delete(namespace, key)
        return value


class InMemorySessionStore(SessionStore):

    def __init__(self):
        self._data: Dict[str, Dict[str, Any]] = defaultdict(dict)
        # Entries vanish once no caller holds the lock
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def clear(self) -> None:
        self._data.clear()
        self._locks.clear()

    def get(self, namespace: str, key: str) -> Optional[Any]:
        return self._data[namespace].get(key)

    def set(self, namespace: str, key: str, value: Any) -> None:
        self._data[namespace][key] = value

    def delete(self, namespace: str, key: str) -> None:
        self._data[namespace].pop(key, None)

    def lock(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock


session_store = InMemorySessionStore()


def get_session_store() -> SessionStore:
    """Dependency returning the process-wide session store."""
    return session_store
