"""
TASKFLOW API - Google Connection Router

Endpoints for connecting a Google account (OAuth2 + PKCE), mock sign-in,
and inspecting or removing the stored connection.
"""

import logging
import time
import uuid
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from app.config import settings
from app.errors import TaskFlowError, ValidationError
from app.session_store import SessionStore, get_session_store
from app.auth.dependencies import CurrentUser, get_auth_service
from app.auth.schemas import SessionResponse, UserResponse
from app.auth.service import AuthService
from app.credentials.dependencies import get_credential_service, get_oauth_client
from app.credentials.service import CredentialService
from app.google.oauth import GoogleOAuthClient, generate_pkce_pair
from app.google.schemas import AuthUrlResponse, GoogleStatusResponse

logger = logging.getLogger(__name__)

OAUTH_STATES = "oauth_states"
OAUTH_STATE_TTL_SECONDS = 600

MOCK_AUTH_URL = "mock://auth?state=demo"


router = APIRouter(tags=["Google"])


class CallbackRequest(BaseModel):
    code: Optional[str] = None


@router.post("/auth/google/start", response_model=AuthUrlResponse, summary="Start Google OAuth")
async def start_google_auth(
    current_user: CurrentUser,
    store: Annotated[SessionStore, Depends(get_session_store)],
    oauth_client: Annotated[GoogleOAuthClient, Depends(get_oauth_client)],
) -> AuthUrlResponse:
    """
    Build the Google consent URL for the current user.

    The PKCE verifier is parked under a random single-use state value until
    Google redirects back to the callback.
    """
    if settings.USE_MOCK_AUTH:
        return AuthUrlResponse(auth_url=MOCK_AUTH_URL)

    state = str(uuid.uuid4())
    verifier, challenge = generate_pkce_pair()
    auth_url = oauth_client.build_authorization_url(state, challenge)
    store.set(
        OAUTH_STATES,
        state,
        {"user_id": current_user.id, "code_verifier": verifier, "created_at": time.time()},
    )
    return AuthUrlResponse(auth_url=auth_url)


@router.get("/auth/google/callback", summary="Google OAuth redirect target")
async def google_auth_callback(
    store: Annotated[SessionStore, Depends(get_session_store)],
    oauth_client: Annotated[GoogleOAuthClient, Depends(get_oauth_client)],
    credentials: Annotated[CredentialService, Depends(get_credential_service)],
    code: Annotated[Optional[str], Query()] = None,
    state: Annotated[Optional[str], Query()] = None,
) -> RedirectResponse:
    if not code or not state:
        raise ValidationError("Missing code or state")

    record = store.pop(OAUTH_STATES, state)
    if record is None or time.time() - record["created_at"] > OAUTH_STATE_TTL_SECONDS:
        raise ValidationError("Invalid or expired state")

    if not oauth_client.configured:
        raise TaskFlowError("Google OAuth not configured")

    tokens = await oauth_client.exchange_code(code, record["code_verifier"])
    await credentials.save_google_tokens(
        record["user_id"],
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=tokens.expires_in,
    )
    logger.info(f"Google account connected for user {record['user_id']}")

    return RedirectResponse(
        url=f"{settings.WEB_APP_URL}/settings?google=connected",
        status_code=status.HTTP_302_FOUND,
    )


@router.post("/auth/google/callback", response_model=SessionResponse, summary="Mock sign-in")
async def mock_sign_in(
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    request: Optional[CallbackRequest] = None,
) -> SessionResponse:
    """Sign in as the demo user while mock auth is enabled."""
    if not settings.USE_MOCK_AUTH:
        if request is None or not request.code:
            raise ValidationError("Missing code")
        raise ValidationError("OAuth exchange not configured")

    user, token = await auth_service.sign_in_demo()
    return SessionResponse(
        token=token,
        user=UserResponse(id=user.id, email=user.email, name=user.name, picture=user.picture),
    )


@router.get("/google/status", response_model=GoogleStatusResponse, summary="Google connection status")
async def google_status(
    current_user: CurrentUser,
    credentials: Annotated[CredentialService, Depends(get_credential_service)],
) -> GoogleStatusResponse:
    return GoogleStatusResponse(connected=await credentials.is_google_connected(current_user.id))


@router.delete("/google/connection", summary="Disconnect Google")
async def disconnect_google(
    current_user: CurrentUser,
    credentials: Annotated[CredentialService, Depends(get_credential_service)],
) -> dict:
    await credentials.disconnect_google(current_user.id)
    logger.info(f"Google account disconnected for user {current_user.id}")
    return {"ok": True}
