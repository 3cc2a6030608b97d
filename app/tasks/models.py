"""
TASKFLOW API - Task Models

Internal task and task-list models shared by the Google Tasks client and
the local in-memory store. They mirror the Google Tasks resource shape.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
import uuid


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class TaskList:
    """A named list of tasks."""

    id: str
    title: str
    updated_at: Optional[str] = None

    @classmethod
    def from_google(cls, item: dict) -> "TaskList":
        return cls(id=item["id"], title=item.get("title", ""), updated_at=item.get("updated"))


@dataclass
class Task:
    """Task entity, owned by Google Tasks or by the local fallback store."""

    id: str
    list_id: str
    title: str
    notes: Optional[str] = None
    due: Optional[str] = None
    completed: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def create(
        cls,
        list_id: str,
        title: str,
        notes: Optional[str] = None,
        due: Optional[str] = None,
    ) -> "Task":
        """Create a new local task with generated ID."""
        now = _utcnow_iso()
        return cls(
            id=str(uuid.uuid4()),
            list_id=list_id,
            title=title,
            notes=notes,
            due=due,
            completed=False,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def from_google(cls, item: dict, list_id: str) -> "Task":
        """Create task from a Google Tasks resource."""
        return cls(
            id=item["id"],
            list_id=list_id,
            title=item.get("title", ""),
            notes=item.get("notes"),
            due=item.get("due"),
            completed=item.get("status") == "completed",
            updated_at=item.get("updated"),
        )


@dataclass
class TaskPatch:
    """Fields to change on a task. None means leave unchanged."""

    title: Optional[str] = None
    notes: Optional[str] = None
    due: Optional[str] = None
    completed: Optional[bool] = None

    def is_empty(self) -> bool:
        return all(v is None for v in (self.title, self.notes, self.due, self.completed))

    def to_google(self) -> dict:
        body: dict = {}
        if self.title is not None:
            body["title"] = self.title
        if self.notes is not None:
            body["notes"] = self.notes
        if self.due is not None:
            body["due"] = self.due
        if self.completed is not None:
            body["status"] = "completed" if self.completed else "needsAction"
            if not self.completed:
                body["completed"] = None
        return body
