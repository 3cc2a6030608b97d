from typing import Annotated, Optional

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import get_database
from app.session_store import SessionStore, get_session_store
from app.google.oauth import GoogleOAuthClient
from app.credentials.repository import (
    CredentialRepositoryInterface,
    MongoCredentialRepository,
    credential_repository,
)
from app.credentials.service import CredentialService


def get_credential_repository(
    db: Annotated[Optional[AsyncIOMotorDatabase], Depends(get_database)]
) -> CredentialRepositoryInterface:
    """Dependency to get the credential repository (MongoDB when connected)."""
    if db is None:
        return credential_repository
    return MongoCredentialRepository(db)


def get_oauth_client() -> GoogleOAuthClient:
    """Dependency to get the Google OAuth client."""
    return GoogleOAuthClient()


def get_credential_service(
    repository: Annotated[CredentialRepositoryInterface, Depends(get_credential_repository)],
    store: Annotated[SessionStore, Depends(get_session_store)],
    oauth_client: Annotated[GoogleOAuthClient, Depends(get_oauth_client)],
) -> CredentialService:
    """Dependency to get the credential service."""
    return CredentialService(repository, store, oauth_client=oauth_client)
