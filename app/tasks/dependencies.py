from typing import Annotated

from fastapi import Depends

from app.auth.dependencies import CurrentUser
from app.credentials.dependencies import get_credential_service
from app.credentials.service import CredentialService
from app.google.tasks_client import GoogleTasksClient
from app.tasks.repository import TaskRepositoryInterface, task_repository
from app.tasks.service import GoogleClientFactory, TaskService, build_task_service


def get_task_repository() -> TaskRepositoryInterface:
    """Dependency to get the local task store."""
    return task_repository


def get_google_client_factory() -> GoogleClientFactory:
    """Dependency returning a constructor for Google Tasks clients."""
    return GoogleTasksClient


async def get_task_service(
    current_user: CurrentUser,
    credentials: Annotated[CredentialService, Depends(get_credential_service)],
    repository: Annotated[TaskRepositoryInterface, Depends(get_task_repository)],
    google_factory: Annotated[GoogleClientFactory, Depends(get_google_client_factory)],
) -> TaskService:
    """Dependency to get a task service bound to the current user."""
    return await build_task_service(current_user.id, credentials, repository, google_factory)
