from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import get_database
from app.errors import AuthError
from app.auth.models import User
from app.auth.service import AuthService
from app.auth.repository import (
    MongoUserRepository,
    UserRepositoryInterface,
    user_repository,
)


# HTTP Bearer token scheme - auto_error=False to handle missing tokens ourselves
bearer_scheme = HTTPBearer(auto_error=False)


def get_user_repository(
    db: Annotated[Optional[AsyncIOMotorDatabase], Depends(get_database)]
) -> UserRepositoryInterface:
    """Dependency to get the user repository (MongoDB when connected)."""
    if db is None:
        return user_repository
    return MongoUserRepository(db)


def get_auth_service(
    repository: Annotated[UserRepositoryInterface, Depends(get_user_repository)]
) -> AuthService:
    """Dependency to get AuthService instance."""
    return AuthService(repository)


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> User:
    if credentials is None or not credentials.credentials.strip():
        raise AuthError("Unauthorized")

    user = await auth_service.resolve_user(credentials.credentials.strip())
    if user is None:
        raise AuthError("Unauthorized")

    return user


# Type alias for cleaner dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
