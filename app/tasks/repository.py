"""
TASKFLOW API - Local Task Repository

Ephemeral per-user task store used while a user has no Google connection.
Every user starts with a single "Inbox" list.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional

from app.tasks.models import Task, TaskList, TaskPatch

INBOX_LIST_ID = "inbox"


class TaskRepositoryInterface(ABC):
    """
    Abstract interface for the local task store.

    All operations are scoped by owner_id to enforce ownership isolation.
    """

    @abstractmethod
    async def list_task_lists(self, owner_id: str) -> List[TaskList]:
        pass

    @abstractmethod
    async def list_tasks(self, owner_id: str, list_id: Optional[str] = None) -> List[Task]:
        pass

    @abstractmethod
    async def get_by_id(self, task_id: str, owner_id: str) -> Optional[Task]:
        pass

    @abstractmethod
    async def create(self, owner_id: str, task: Task) -> Task:
        pass

    @abstractmethod
    async def update(self, task_id: str, owner_id: str, patch: TaskPatch) -> Optional[Task]:
        pass

    @abstractmethod
    async def delete(self, task_id: str, owner_id: str) -> bool:
        pass


class InMemoryTaskRepository(TaskRepositoryInterface):

    def __init__(self):
        self._lists: Dict[str, List[TaskList]] = {}
        self._tasks: Dict[str, List[Task]] = {}

    def clear(self) -> None:
        self._lists.clear()
        self._tasks.clear()

    def _ensure_seed(self, owner_id: str) -> None:
        if owner_id not in self._lists:
            self._lists[owner_id] = [
                TaskList(
                    id=INBOX_LIST_ID,
                    title="Inbox",
                    updated_at=datetime.now(timezone.utc).isoformat(),
                )
            ]
        self._tasks.setdefault(owner_id, [])

    async def list_task_lists(self, owner_id: str) -> List[TaskList]:
        self._ensure_seed(owner_id)
        return list(self._lists[owner_id])

    async def list_tasks(self, owner_id: str, list_id: Optional[str] = None) -> List[Task]:
        self._ensure_seed(owner_id)
        return [t for t in self._tasks[owner_id] if list_id is None or t.list_id == list_id]

    async def get_by_id(self, task_id: str, owner_id: str) -> Optional[Task]:
        self._ensure_seed(owner_id)
        for task in self._tasks[owner_id]:
            if task.id == task_id:
                return task
        return None

    async def create(self, owner_id: str, task: Task) -> Task:
        self._ensure_seed(owner_id)
        self._tasks[owner_id].append(task)
        return task

    async def update(self, task_id: str, owner_id: str, patch: TaskPatch) -> Optional[Task]:
        task = await self.get_by_id(task_id, owner_id)
        if task is None:
            return None

        for key in ("title", "notes", "due", "completed"):
            value = getattr(patch, key)
            if value is not None:
                setattr(task, key, value)

        task.updated_at = datetime.now(timezone.utc).isoformat()
        return task

    async def delete(self, task_id: str, owner_id: str) -> bool:
        self._ensure_seed(owner_id)
        before = len(self._tasks[owner_id])
        self._tasks[owner_id] = [t for t in self._tasks[owner_id] if t.id != task_id]
        return len(self._tasks[owner_id]) < before


# Process-wide local store
task_repository = InMemoryTaskRepository()
