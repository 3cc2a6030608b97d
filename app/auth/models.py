from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def _utcnow() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


@dataclass
class User:
    """Signed-in user, identified by the session (or Supabase) subject."""

    id: str
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict:
        """Convert user to dictionary for MongoDB storage."""
        return {
            "_id": self.id,
            "email": self.email,
            "name": self.name,
            "picture": self.picture,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        """Create user from MongoDB document."""
        return cls(
            id=data["_id"],
            email=data["email"],
            name=data.get("name"),
            picture=data.get("picture"),
            created_at=data.get("created_at") or _utcnow(),
        )

    @classmethod
    def from_claims(cls, claims: dict) -> "User":
        """Build a user from verified Supabase JWT claims."""
        metadata = claims.get("user_metadata") or {}
        return cls(
            id=claims["sub"],
            email=claims["email"],
            name=metadata.get("full_name") or metadata.get("name"),
            picture=metadata.get("avatar_url"),
        )


DEMO_USER_ID = "demo-user"


def demo_user() -> User:
    return User(id=DEMO_USER_ID, email="demo@taskflow.local", name="Demo User")
