"""
TASKFLOW API - Task Schemas

Pydantic models for task API requests and responses. Wire names are
camelCase to match the TaskFlow clients.
"""

from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field

from app.tasks.models import Task, TaskList


class TaskResponse(BaseModel):
    """Response model for a single task."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Task ID")
    list_id: str = Field(alias="listId", description="Owning list ID")
    title: str = Field(description="Task title")
    notes: Optional[str] = Field(default=None, description="Task notes")
    due: Optional[str] = Field(default=None, description="Due date (RFC 3339)")
    completed: bool = Field(default=False, description="Whether the task is completed")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            list_id=task.list_id,
            title=task.title,
            notes=task.notes,
            due=task.due,
            completed=task.completed,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class TaskListResponse(BaseModel):
    """Response model for a task list."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="List ID")
    title: str = Field(description="List title")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    @classmethod
    def from_list(cls, task_list: TaskList) -> "TaskListResponse":
        return cls(id=task_list.id, title=task_list.title, updated_at=task_list.updated_at)


class TaskCreateRequest(BaseModel):
    """Request model for creating a task."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1, max_length=1024, description="Task title")
    list_id: str = Field(alias="listId", min_length=1, description="Target list ID")
    notes: Optional[str] = Field(default=None, max_length=8192)
    due: Optional[str] = Field(default=None, description="Due date (RFC 3339)")


class TaskUpdateRequest(BaseModel):
    """Request model for updating a task."""

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=1024)
    notes: Optional[str] = Field(default=None, max_length=8192)
    due: Optional[str] = Field(default=None)
    completed: Optional[bool] = Field(default=None)
    list_id: Optional[str] = Field(default=None, alias="listId", description="List hint for Google Tasks")


class AvailabilityResponse(BaseModel):
    minutes: int
    available: bool
    message: str


class OkResponse(BaseModel):
    ok: bool = True


def to_task_responses(tasks: List[Task]) -> List[TaskResponse]:
    return [TaskResponse.from_task(t) for t in tasks]
