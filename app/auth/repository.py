from abc import ABC, abstractmethod
from typing import Dict, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.auth.models import User


class UserRepositoryInterface(ABC):
    """Abstract interface for user repository.

    This interface allows swapping implementations (in-memory -> MongoDB).
    """

    @abstractmethod
    async def upsert(self, user: User) -> User:
        """Create the user or refresh its profile fields."""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        pass


class MongoUserRepository(UserRepositoryInterface):
    """MongoDB implementation of the user repository."""

    COLLECTION_NAME = "users"

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[self.COLLECTION_NAME]

    async def upsert(self, user: User) -> User:
        doc = user.to_dict()
        created_at = doc.pop("created_at")
        await self.collection.update_one(
            {"_id": user.id},
            {"$set": doc, "$setOnInsert": {"created_at": created_at}},
            upsert=True,
        )
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        doc = await self.collection.find_one({"_id": user_id})
        if doc is None:
            return None
        return User.from_dict(doc)


class InMemoryUserRepository(UserRepositoryInterface):
    """In-memory user repository (default store and tests)."""

    def __init__(self):
        self._users: Dict[str, User] = {}

    def clear(self) -> None:
        self._users.clear()

    async def upsert(self, user: User) -> User:
        existing = self._users.get(user.id)
        if existing is not None:
            user.created_at = existing.created_at
        self._users[user.id] = user
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)


# Process-wide store used when MongoDB is not configured
user_repository = InMemoryUserRepository()
