"""
TASKFLOW API - Credential Service

Read/refresh/write access to per-user Google tokens and AI provider keys.
Secrets are encrypted before they reach the repository; decrypted AI keys
are cached in the session store for the process lifetime.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from app.credentials.crypto import DecryptionError, TokenCipher
from app.credentials.models import ApiKeyRecord, GoogleCredential
from app.credentials.repository import CredentialRepositoryInterface
from app.errors import UpstreamError
from app.google.oauth import GoogleOAuthClient
from app.session_store import SessionStore

logger = logging.getLogger(__name__)

API_KEY_CACHE = "api_keys"

# A token this close to expiry is refreshed before use
REFRESH_SKEW = timedelta(seconds=30)


class CredentialService:

    def __init__(
        self,
        repository: CredentialRepositoryInterface,
        store: SessionStore,
        cipher: Optional[TokenCipher] = None,
        oauth_client: Optional[GoogleOAuthClient] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.repository = repository
        self.store = store
        self.cipher = cipher or TokenCipher()
        self.oauth_client = oauth_client or GoogleOAuthClient()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # Google OAuth tokens

    async def get_access_token(self, user_id: str) -> Optional[str]:
        """
        Return a live Google access token for the user.

        Stale tokens are refreshed with the stored refresh token and the new
        token is written back. Returns None when the user never connected
        Google or the token can no longer be refreshed.
        """
        credential = await self.repository.get_google(user_id)
        if credential is None:
            return None

        try:
            if credential.expires_at is None or credential.expires_at > self._clock() + REFRESH_SKEW:
                return self.cipher.decrypt(credential.access_token)

            if not credential.refresh_token:
                logger.info(f"Google token expired for user {user_id} and no refresh token stored")
                return None

            refresh_token = self.cipher.decrypt(credential.refresh_token)
        except DecryptionError:
            logger.warning(f"Stored Google token for user {user_id} could not be decrypted")
            return None

        try:
            tokens = await self.oauth_client.refresh(refresh_token)
        except UpstreamError as e:
            logger.warning(f"Google token refresh failed for user {user_id}: {e.message}")
            return None

        await self.save_google_tokens(
            user_id,
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            expires_in=tokens.expires_in,
        )
        logger.info(f"Refreshed Google access token for user {user_id}")
        return tokens.access_token

    async def save_google_tokens(
        self,
        user_id: str,
        access_token: str,
        refresh_token: Optional[str] = None,
        expires_in: Optional[int] = None,
    ) -> None:
        encrypted_refresh = self.cipher.encrypt(refresh_token) if refresh_token else None
        if encrypted_refresh is None:
            existing = await self.repository.get_google(user_id)
            if existing is not None:
                encrypted_refresh = existing.refresh_token

        now = self._clock()
        expires_at = now + timedelta(seconds=expires_in) if expires_in else None
        await self.repository.save_google(
            GoogleCredential(
                user_id=user_id,
                access_token=self.cipher.encrypt(access_token),
                refresh_token=encrypted_refresh,
                expires_at=expires_at,
                updated_at=now,
            )
        )
        self.store.delete(API_KEY_CACHE, user_id)

    async def is_google_connected(self, user_id: str) -> bool:
        return await self.repository.get_google(user_id) is not None

    async def disconnect_google(self, user_id: str) -> bool:
        return await self.repository.delete_google(user_id)

    # AI provider keys

    def _key_cache(self, user_id: str) -> Dict[str, str]:
        cache = self.store.get(API_KEY_CACHE, user_id)
        if cache is None:
            cache = {}
            self.store.set(API_KEY_CACHE, user_id, cache)
        return cache

    async def get_api_key(self, user_id: str, provider_id: str) -> Optional[str]:
        cache = self._key_cache(user_id)
        if provider_id in cache:
            return cache[provider_id]

        record = await self.repository.get_api_key(user_id, provider_id)
        if record is None:
            return None
        try:
            api_key = self.cipher.decrypt(record.encrypted_key)
        except DecryptionError:
            logger.warning(f"Stored {provider_id} key for user {user_id} could not be decrypted")
            return None

        cache[provider_id] = api_key
        return api_key

    async def save_api_key(self, user_id: str, provider_id: str, api_key: str) -> None:
        await self.repository.save_api_key(
            ApiKeyRecord(
                user_id=user_id,
                provider_id=provider_id,
                encrypted_key=self.cipher.encrypt(api_key),
                updated_at=self._clock(),
            )
        )
        self._key_cache(user_id).pop(provider_id, None)
        logger.info(f"Saved {provider_id} key for user {user_id}")

    async def delete_api_key(self, user_id: str, provider_id: str) -> bool:
        deleted = await self.repository.delete_api_key(user_id, provider_id)
        self._key_cache(user_id).pop(provider_id, None)
        return deleted

    async def list_configured_providers(self, user_id: str) -> List[str]:
        return await self.repository.list_api_key_providers(user_id)
