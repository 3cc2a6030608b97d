from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError

from app.config import settings
from app.auth.models import User, demo_user
from app.auth.repository import UserRepositoryInterface


class AuthService:
    """Session token issuing and bearer token resolution."""

    def __init__(self, repository: UserRepositoryInterface):
        self.repository = repository

    def create_session_token(self, user_id: str, expires_delta: Optional[timedelta] = None) -> str:
        """Create a signed session token for mock sign-in."""
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)

        now = datetime.now(timezone.utc)
        to_encode = {
            "sub": user_id,
            "exp": now + expires_delta,
            "iat": now,
        }
        return jwt.encode(
            to_encode,
            settings.SESSION_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )

    def decode_session_token(self, token: str) -> Optional[str]:
        """Decode and validate a session token. Returns user_id if valid."""
        try:
            payload = jwt.decode(
                token,
                settings.SESSION_SECRET,
                algorithms=[settings.JWT_ALGORITHM],
            )
        except JWTError:
            return None
        return payload.get("sub")

    def decode_supabase_token(self, token: str) -> Optional[dict]:
        """Verify a Supabase access token. Returns its claims if valid."""
        try:
            payload = jwt.decode(
                token,
                settings.SUPABASE_JWT_SECRET,
                algorithms=["HS256"],
                options={"verify_aud": False},
            )
        except JWTError:
            return None
        if not payload.get("sub") or not payload.get("email"):
            return None
        return payload

    async def sign_in_demo(self) -> tuple[User, str]:
        """Mock sign-in: ensure the demo user exists and issue a session."""
        user = await self.repository.upsert(demo_user())
        return user, self.create_session_token(user.id)

    async def resolve_user(self, token: str) -> Optional[User]:
        """Map a bearer token to a user, or None when it is not valid."""
        if settings.USE_MOCK_AUTH:
            user_id = self.decode_session_token(token)
            if user_id is None:
                return None
            return await self.repository.get_by_id(user_id)

        claims = self.decode_supabase_token(token)
        if claims is None:
            return None
        existing = await self.repository.get_by_id(claims["sub"])
        if existing is not None:
            return existing
        return await self.repository.upsert(User.from_claims(claims))
