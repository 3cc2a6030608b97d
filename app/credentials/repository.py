"""
TASKFLOW API - Credential Repository

Repository pattern for encrypted credential storage.
Includes MongoDB implementation for runtime and an in-memory one for
deployments without a database and for tests.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.credentials.models import ApiKeyRecord, GoogleCredential


class CredentialRepositoryInterface(ABC):
    """
    Abstract interface for credential storage.

    Implementations never see plaintext secrets.
    """

    @abstractmethod
    async def get_google(self, user_id: str) -> Optional[GoogleCredential]:
        pass

    @abstractmethod
    async def save_google(self, credential: GoogleCredential) -> GoogleCredential:
        pass

    @abstractmethod
    async def delete_google(self, user_id: str) -> bool:
        pass

    @abstractmethod
    async def get_api_key(self, user_id: str, provider_id: str) -> Optional[ApiKeyRecord]:
        pass

    @abstractmethod
    async def save_api_key(self, record: ApiKeyRecord) -> ApiKeyRecord:
        pass

    @abstractmethod
    async def delete_api_key(self, user_id: str, provider_id: str) -> bool:
        pass

    @abstractmethod
    async def list_api_key_providers(self, user_id: str) -> List[str]:
        """Provider ids that have a stored key for this user."""
        pass


class MongoCredentialRepository(CredentialRepositoryInterface):
    """MongoDB implementation of the credential repository."""

    GOOGLE_COLLECTION = "google_credentials"
    API_KEY_COLLECTION = "ai_api_keys"

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.google = db[self.GOOGLE_COLLECTION]
        self.api_keys = db[self.API_KEY_COLLECTION]

    async def get_google(self, user_id: str) -> Optional[GoogleCredential]:
        doc = await self.google.find_one({"_id": user_id})
        if doc is None:
            return None
        return GoogleCredential.from_dict(doc)

    async def save_google(self, credential: GoogleCredential) -> GoogleCredential:
        await self.google.replace_one({"_id": credential.user_id}, credential.to_dict(), upsert=True)
        return credential

    async def delete_google(self, user_id: str) -> bool:
        result = await self.google.delete_one({"_id": user_id})
        return result.deleted_count > 0

    async def get_api_key(self, user_id: str, provider_id: str) -> Optional[ApiKeyRecord]:
        doc = await self.api_keys.find_one({"_id": f"{user_id}:{provider_id}"})
        if doc is None:
            return None
        return ApiKeyRecord.from_dict(doc)

    async def save_api_key(self, record: ApiKeyRecord) -> ApiKeyRecord:
        await self.api_keys.replace_one({"_id": record.record_id}, record.to_dict(), upsert=True)
        return record

    async def delete_api_key(self, user_id: str, provider_id: str) -> bool:
        result = await self.api_keys.delete_one({"_id": f"{user_id}:{provider_id}"})
        return result.deleted_count > 0

    async def list_api_key_providers(self, user_id: str) -> List[str]:
        cursor = self.api_keys.find({"user_id": user_id}, {"provider_id": 1})
        providers: List[str] = []
        async for doc in cursor:
            providers.append(doc["provider_id"])
        return providers


class InMemoryCredentialRepository(CredentialRepositoryInterface):
    """
    In-memory implementation, lost on restart.
    """

    def __init__(self):
        self._google: Dict[str, GoogleCredential] = {}
        self._api_keys: Dict[str, ApiKeyRecord] = {}

    def clear(self) -> None:
        self._google.clear()
        self._api_keys.clear()

    async def get_google(self, user_id: str) -> Optional[GoogleCredential]:
        return self._google.get(user_id)

    async def save_google(self, credential: GoogleCredential) -> GoogleCredential:
        self._google[credential.user_id] = credential
        return credential

    async def delete_google(self, user_id: str) -> bool:
        return self._google.pop(user_id, None) is not None

    async def get_api_key(self, user_id: str, provider_id: str) -> Optional[ApiKeyRecord]:
        return self._api_keys.get(f"{user_id}:{provider_id}")

    async def save_api_key(self, record: ApiKeyRecord) -> ApiKeyRecord:
        self._api_keys[record.record_id] = record
        return record

    async def delete_api_key(self, user_id: str, provider_id: str) -> bool:
        return self._api_keys.pop(f"{user_id}:{provider_id}", None) is not None

    async def list_api_key_providers(self, user_id: str) -> List[str]:
        return [r.provider_id for r in self._api_keys.values() if r.user_id == user_id]


# Process-wide store used when MongoDB is not configured
credential_repository = InMemoryCredentialRepository()
