"""
TASKFLOW API - Authentication Module

Bearer sessions: mock sign-in tokens or verified Supabase JWTs.
"""

from app.auth.router import router as auth_router
from app.auth.dependencies import get_current_user

__all__ = ["auth_router", "get_current_user"]
