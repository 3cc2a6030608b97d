"""
TASKFLOW API - Credential Models

Stored credential records. Secret fields always hold ciphertext.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def _utcnow() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


@dataclass
class GoogleCredential:
    """Encrypted Google OAuth tokens for one user."""

    user_id: str
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None
    updated_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict:
        """Convert to dictionary for MongoDB storage."""
        return {
            "_id": self.user_id,
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GoogleCredential":
        expires_at = data.get("expires_at")
        # Mongo hands back naive UTC datetimes
        if expires_at is not None and expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return cls(
            user_id=data["_id"],
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_at=expires_at,
            updated_at=data.get("updated_at") or _utcnow(),
        )


@dataclass
class ApiKeyRecord:
    """Encrypted API key for one (user, AI provider) pair."""

    user_id: str
    provider_id: str
    encrypted_key: str
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def record_id(self) -> str:
        return f"{self.user_id}:{self.provider_id}"

    def to_dict(self) -> dict:
        return {
            "_id": self.record_id,
            "user_id": self.user_id,
            "provider_id": self.provider_id,
            "encrypted_key": self.encrypted_key,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ApiKeyRecord":
        return cls(
            user_id=data["user_id"],
            provider_id=data["provider_id"],
            encrypted_key=data["encrypted_key"],
            updated_at=data.get("updated_at") or _utcnow(),
        )
