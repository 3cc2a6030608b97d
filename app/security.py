"""
TASKFLOW API - Security Validation

Startup checks for secrets and CORS configuration.
"""

import warnings
from app.config import settings


def validate_security_config() -> None:
    """
    Validate security configuration on startup.

    Issues warnings for insecure configurations but does not crash the application
    (to allow tests and development to run).
    """
    if settings.is_production:
        if settings.TOKEN_ENCRYPTION_KEY == "dev_insecure_key":
            warnings.warn(
                "SECURITY WARNING: Using default TOKEN_ENCRYPTION_KEY in production. "
                "Stored OAuth tokens and AI keys are effectively unprotected.",
                UserWarning,
            )
        if settings.SESSION_SECRET == "dev_session_secret":
            warnings.warn(
                "SECURITY WARNING: Using default SESSION_SECRET in production. "
                "Set SESSION_SECRET environment variable to a strong secret.",
                UserWarning,
            )
        if settings.USE_MOCK_AUTH:
            warnings.warn(
                "SECURITY WARNING: Mock authentication is enabled in production. "
                "Set SUPABASE_JWT_SECRET to verify real sessions.",
                UserWarning,
            )

    # CORS validation
    if "*" in str(settings.CORS_ORIGINS):
        warnings.warn(
            "SECURITY WARNING: CORS wildcard (*) detected. "
            "Set specific origins via CORS_ORIGINS.",
            UserWarning,
        )

    if len(settings.SESSION_SECRET) < 32 and settings.is_production:
        warnings.warn(
            "SECURITY WARNING: SESSION_SECRET is too short for production. "
            "Use at least 32 characters.",
            UserWarning,
        )
