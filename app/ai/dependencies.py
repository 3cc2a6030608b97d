from typing import Annotated

from fastapi import Depends

from app.session_store import SessionStore, get_session_store
from app.credentials.dependencies import get_credential_service
from app.credentials.service import CredentialService
from app.tasks.dependencies import get_google_client_factory, get_task_repository
from app.tasks.repository import TaskRepositoryInterface
from app.tasks.service import GoogleClientFactory
from app.ai.providers.registry import ProviderRegistry, get_provider_registry
from app.ai.service import CommandService
from app.ai.state import ConversationState


def get_conversation_state(
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> ConversationState:
    return ConversationState(store)


def get_command_service(
    credentials: Annotated[CredentialService, Depends(get_credential_service)],
    state: Annotated[ConversationState, Depends(get_conversation_state)],
    registry: Annotated[ProviderRegistry, Depends(get_provider_registry)],
    repository: Annotated[TaskRepositoryInterface, Depends(get_task_repository)],
    google_factory: Annotated[GoogleClientFactory, Depends(get_google_client_factory)],
) -> CommandService:
    """Dependency to get the command service."""
    return CommandService(credentials, state, registry, repository, google_factory)
