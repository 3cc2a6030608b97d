"""
TASKFLOW API - Google OAuth Client

Authorization-code flow with PKCE plus refresh-token exchange against the
Google OAuth2 token endpoint.
"""

import base64
import hashlib
import logging
import secrets
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

import httpx

from app.config import settings
from app.errors import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

GOOGLE_SCOPES = [
    "https://www.googleapis.com/auth/tasks",
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
]


@dataclass(frozen=True)
class OAuthTokens:
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None


def generate_pkce_pair() -> tuple[str, str]:
    """Return (code_verifier, S256 code_challenge)."""
    verifier = secrets.token_urlsafe(32)
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    challenge = base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")
    return verifier, challenge


class GoogleOAuthClient:

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
    ):
        self.client_id = client_id or settings.GOOGLE_CLIENT_ID
        self.client_secret = client_secret or settings.GOOGLE_CLIENT_SECRET
        self.redirect_uri = redirect_uri or settings.GOOGLE_REDIRECT_URI

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.redirect_uri)

    def build_authorization_url(self, state: str, code_challenge: str) -> str:
        if not self.configured:
            raise ValidationError(
                "Google OAuth not configured. Set GOOGLE_CLIENT_ID and GOOGLE_REDIRECT_URI."
            )
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(GOOGLE_SCOPES),
            "access_type": "offline",
            "prompt": "consent",
            "state": state,
            "code_challenge": code_challenge,
            "code_challenge_method": "S256",
        }
        return f"{settings.GOOGLE_AUTH_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str, code_verifier: str) -> OAuthTokens:
        data = {
            "client_id": self.client_id,
            "code": code,
            "code_verifier": code_verifier,
            "grant_type": "authorization_code",
            "redirect_uri": self.redirect_uri,
        }
        return await self._token_request(data)

    async def refresh(self, refresh_token: str) -> OAuthTokens:
        data = {
            "client_id": self.client_id,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        }
        tokens = await self._token_request(data)
        # Google omits the refresh token on refresh responses
        if tokens.refresh_token is None:
            tokens = OAuthTokens(tokens.access_token, refresh_token, tokens.expires_in)
        return tokens

    async def _token_request(self, data: dict) -> OAuthTokens:
        if self.client_secret:
            data["client_secret"] = self.client_secret

        async with httpx.AsyncClient() as client:
            try:
                response = await client.post(
                    settings.GOOGLE_TOKEN_URL,
                    data=data,
                    timeout=settings.GOOGLE_TIMEOUT,
                )
            except httpx.HTTPError as e:
                logger.error(f"Google token endpoint unreachable: {e}")
                raise UpstreamError("Google token endpoint unreachable") from e

        if response.status_code >= 400:
            logger.warning(f"Google token request ({data['grant_type']}) failed: {response.status_code}")
            raise UpstreamError(
                f"Google token exchange failed: {response.status_code}",
                upstream_status=response.status_code,
            )

        payload = response.json()
        return OAuthTokens(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token"),
            expires_in=payload.get("expires_in"),
        )
