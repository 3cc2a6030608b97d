"""
TASKFLOW API - Error Types

Every error raised on purpose by the API carries the HTTP status it maps to.
They are rendered as {"error": message} by the handler registered in main.
"""

from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse


class TaskFlowError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(TaskFlowError):
    """Missing or malformed request fields. The user must resend."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(TaskFlowError):
    """Missing or invalid bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(TaskFlowError):
    status_code = status.HTTP_404_NOT_FOUND


class UpstreamError(TaskFlowError):
    """Google Tasks or an OAuth endpoint answered with a non-2xx status."""

    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class RateLimitError(TaskFlowError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, message: str, retry_after: int):
        super().__init__(message)
        self.retry_after = retry_after


async def taskflow_error_handler(request: Request, exc: TaskFlowError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthError):
        headers = {"WWW-Authenticate": "Bearer"}
    elif isinstance(exc, RateLimitError):
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=headers,
    )
