"""
TASKFLOW API - Task Service

One task API over two owners: Google Tasks when the user has a live access
token, the local in-memory store otherwise. Once a Google session exists,
Google failures propagate; they never fall back to the local store.
"""

import logging
from typing import Callable, List, Optional

from app.credentials.service import CredentialService
from app.errors import NotFoundError
from app.google.tasks_client import GoogleTasksClient
from app.tasks.models import Task, TaskList, TaskPatch
from app.tasks.repository import TaskRepositoryInterface

logger = logging.getLogger(__name__)

GoogleClientFactory = Callable[[str], GoogleTasksClient]


class TaskService:
    """Service layer for task reads and mutations."""

    def __init__(
        self,
        owner_id: str,
        repository: TaskRepositoryInterface,
        google: Optional[GoogleTasksClient] = None,
    ):
        self.owner_id = owner_id
        self.repository = repository
        self.google = google

    @property
    def connected(self) -> bool:
        """Whether tasks are served by Google Tasks."""
        return self.google is not None

    async def list_task_lists(self) -> List[TaskList]:
        if self.google:
            return await self.google.list_task_lists()
        return await self.repository.list_task_lists(self.owner_id)

    async def list_tasks(self, list_id: Optional[str] = None) -> List[Task]:
        """Tasks of one list, or the full task set across all lists."""
        if self.google:
            if list_id is None:
                return await self.google.list_all_tasks()
            return await self.google.list_tasks(list_id)
        return await self.repository.list_tasks(self.owner_id, list_id)

    async def get_task(self, task_id: str) -> Optional[Task]:
        if not self.google:
            return await self.repository.get_by_id(task_id, self.owner_id)
        for task in await self.google.list_all_tasks():
            if task.id == task_id:
                return task
        return None

    async def create_task(
        self,
        list_id: str,
        title: str,
        notes: Optional[str] = None,
        due: Optional[str] = None,
    ) -> Task:
        if self.google:
            task = await self.google.create_task(list_id, title, notes=notes, due=due)
        else:
            task = await self.repository.create(self.owner_id, Task.create(list_id, title, notes=notes, due=due))
        logger.info(f"Created task {task.id} in list {list_id} for user {self.owner_id}")
        return task

    async def _resolve_list_id(self, task_id: str, list_id: Optional[str]) -> str:
        if list_id:
            return list_id
        task = await self.get_task(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task.list_id

    async def update_task(self, task_id: str, patch: TaskPatch, list_id: Optional[str] = None) -> Task:
        if self.google:
            resolved_list = await self._resolve_list_id(task_id, list_id)
            return await self.google.patch_task(resolved_list, task_id, patch)

        task = await self.repository.update(task_id, self.owner_id, patch)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    async def delete_task(self, task_id: str, list_id: Optional[str] = None) -> None:
        if self.google:
            resolved_list = await self._resolve_list_id(task_id, list_id)
            await self.google.delete_task(resolved_list, task_id)
        elif not await self.repository.delete(task_id, self.owner_id):
            raise NotFoundError("Task not found")
        logger.info(f"Deleted task {task_id} for user {self.owner_id}")


async def build_task_service(
    owner_id: str,
    credentials: CredentialService,
    repository: TaskRepositoryInterface,
    google_factory: GoogleClientFactory = GoogleTasksClient,
) -> TaskService:
    """Prefer Google Tasks whenever a live access token is available."""
    token = await credentials.get_access_token(owner_id)
    google = google_factory(token) if token else None
    return TaskService(owner_id, repository, google)
