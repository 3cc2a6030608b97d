"""
TASKFLOW API - Authentication Router

Current user info for bearer sessions.
"""

from fastapi import APIRouter

from app.auth.dependencies import CurrentUser
from app.auth.schemas import UserResponse


router = APIRouter(tags=["Authentication"])


@router.get("/me", response_model=UserResponse, response_model_exclude_none=True)
async def get_me(current_user: CurrentUser) -> UserResponse:
    """Get the authenticated user's profile."""
    return UserResponse(
        id=current_user.id,
        email=current_user.email,
        name=current_user.name,
        picture=current_user.picture,
    )
