"""
TASKFLOW API - Auth Schemas

Pydantic models for authentication API responses.
"""

from typing import Optional

from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    """Response model for the current user."""

    id: str = Field(description="User ID")
    email: str = Field(description="User email")
    name: Optional[str] = Field(default=None, description="Display name")
    picture: Optional[str] = Field(default=None, description="Avatar URL")


class SessionResponse(BaseModel):
    """Session issued by mock sign-in."""

    token: str = Field(description="Bearer session token")
    user: UserResponse
