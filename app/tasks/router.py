"""
TASKFLOW API - Task Router

REST endpoints over the user's task lists and tasks.
Served from Google Tasks when connected, from the local store otherwise.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.auth.dependencies import CurrentUser
from app.tasks.dependencies import get_task_service
from app.tasks.models import TaskPatch
from app.tasks.service import TaskService
from app.tasks.schemas import (
    AvailabilityResponse,
    OkResponse,
    TaskCreateRequest,
    TaskListResponse,
    TaskResponse,
    TaskUpdateRequest,
    to_task_responses,
)


router = APIRouter(tags=["Tasks"])


@router.get("/tasklists", response_model=List[TaskListResponse], summary="List task lists")
async def list_task_lists(
    service: Annotated[TaskService, Depends(get_task_service)],
) -> List[TaskListResponse]:
    task_lists = await service.list_task_lists()
    return [TaskListResponse.from_list(tl) for tl in task_lists]


@router.get(
    "/tasklists/{list_id}/tasks",
    response_model=List[TaskResponse],
    summary="List tasks of one list",
)
async def list_tasks(
    list_id: str,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> List[TaskResponse]:
    return to_task_responses(await service.list_tasks(list_id))


@router.post(
    "/tasks",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
)
async def create_task(
    request: TaskCreateRequest,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    task = await service.create_task(
        request.list_id,
        request.title,
        notes=request.notes,
        due=request.due,
    )
    return TaskResponse.from_task(task)


@router.patch("/tasks/{task_id}", response_model=TaskResponse, summary="Update a task")
async def update_task(
    task_id: str,
    request: TaskUpdateRequest,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    """
    Update a task by ID.

    Only provided fields are changed. Returns 404 if the task is unknown.
    """
    patch = TaskPatch(
        title=request.title,
        notes=request.notes,
        due=request.due,
        completed=request.completed,
    )
    task = await service.update_task(task_id, patch, list_id=request.list_id)
    return TaskResponse.from_task(task)


@router.delete("/tasks/{task_id}", response_model=OkResponse, summary="Delete a task")
async def delete_task(
    task_id: str,
    service: Annotated[TaskService, Depends(get_task_service)],
    list_id: Annotated[Optional[str], Query(alias="listId")] = None,
) -> OkResponse:
    await service.delete_task(task_id, list_id=list_id)
    return OkResponse()


@router.get("/availability/now", response_model=AvailabilityResponse, summary="Check availability")
async def availability_now(
    current_user: CurrentUser,
    minutes: Annotated[int, Query(gt=0)] = 45,
) -> AvailabilityResponse:
    """No calendar integration yet; the user is always reported as available."""
    return AvailabilityResponse(
        minutes=minutes,
        available=True,
        message="Calendar not connected. Assuming available.",
    )
