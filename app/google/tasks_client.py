"""
TASKFLOW API - Google Tasks Client

Thin async wrapper over Google Tasks REST v1. Non-2xx answers raise
UpstreamError with the Google status; nothing is retried.
"""

import logging
from typing import List, Optional

import httpx

from app.config import settings
from app.errors import UpstreamError
from app.tasks.models import Task, TaskList, TaskPatch

logger = logging.getLogger(__name__)


class GoogleTasksClient:

    def __init__(self, access_token: str, base_url: Optional[str] = None):
        self.access_token = access_token
        self.base_url = (base_url or settings.GOOGLE_TASKS_BASE_URL).rstrip("/")

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> Optional[dict]:
        url = f"{self.base_url}/{path}"
        headers = {"Authorization": f"Bearer {self.access_token}"}

        async with httpx.AsyncClient() as client:
            try:
                response = await client.request(
                    method,
                    url,
                    json=json,
                    params=params,
                    headers=headers,
                    timeout=settings.GOOGLE_TIMEOUT,
                )
            except httpx.HTTPError as e:
                logger.error(f"Google Tasks {method} {path} unreachable: {e}")
                raise UpstreamError("Google Tasks unreachable") from e

        if response.status_code >= 400:
            logger.warning(f"Google Tasks {method} {path} failed: {response.status_code}")
            raise UpstreamError(
                f"Google Tasks error: {response.status_code}",
                upstream_status=response.status_code,
            )
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def _paginate(self, path: str, params: dict) -> List[dict]:
        """Every item across pages, following nextPageToken."""
        items: List[dict] = []
        page_token: Optional[str] = None
        while True:
            page_params = dict(params)
            if page_token:
                page_params["pageToken"] = page_token
            data = await self._request("GET", path, params=page_params) or {}
            items.extend(data.get("items", []))
            page_token = data.get("nextPageToken")
            if not page_token:
                return items

    async def list_task_lists(self) -> List[TaskList]:
        items = await self._paginate("users/@me/lists", {"maxResults": 100})
        return [TaskList.from_google(item) for item in items]

    async def list_tasks(self, list_id: str) -> List[Task]:
        items = await self._paginate(
            f"lists/{list_id}/tasks",
            {"showCompleted": "true", "showHidden": "true", "maxResults": 100},
        )
        return [Task.from_google(item, list_id) for item in items]

    async def list_all_tasks(self) -> List[Task]:
        """Tasks across every list, in list order."""
        tasks: List[Task] = []
        for task_list in await self.list_task_lists():
            tasks.extend(await self.list_tasks(task_list.id))
        return tasks

    async def create_task(
        self,
        list_id: str,
        title: str,
        notes: Optional[str] = None,
        due: Optional[str] = None,
    ) -> Task:
        body = {"title": title}
        if notes:
            body["notes"] = notes
        if due:
            body["due"] = due
        data = await self._request("POST", f"lists/{list_id}/tasks", json=body)
        return Task.from_google(data or {"id": "", **body}, list_id)

    async def patch_task(self, list_id: str, task_id: str, patch: TaskPatch) -> Task:
        data = await self._request("PATCH", f"lists/{list_id}/tasks/{task_id}", json=patch.to_google())
        return Task.from_google(data or {"id": task_id}, list_id)

    async def delete_task(self, list_id: str, task_id: str) -> None:
        await self._request("DELETE", f"lists/{list_id}/tasks/{task_id}")
