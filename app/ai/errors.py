"""
TASKFLOW API - Command Errors

Typed failures of the command pipeline. The router dispatches on `kind`
rather than on message text.
"""

from enum import Enum
from typing import Optional

from app.errors import TaskFlowError, ValidationError


class CommandErrorKind(str, Enum):
    KEY_MISSING = "key_missing"
    PROVIDER_FAILURE = "provider_failure"
    SCHEMA_INVALID = "schema_invalid"


class CommandError(TaskFlowError):
    """Base class for failures while turning text into a command."""

    kind: CommandErrorKind


class KeyMissingError(CommandError, ValidationError):
    """No API key could be resolved for the selected tool. Always surfaced as 400."""

    kind = CommandErrorKind.KEY_MISSING

    def __init__(self, tool_id: str):
        super().__init__(f"API key missing for {tool_id}")
        self.tool_id = tool_id


class ProviderError(CommandError):
    """The vendor answered non-2xx or could not be reached."""

    kind = CommandErrorKind.PROVIDER_FAILURE
    status_code = 502

    def __init__(self, tool_id: str, upstream_status: Optional[int] = None, detail: str = ""):
        message = f"{tool_id} error: {upstream_status}" if upstream_status else f"{tool_id} unreachable"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.tool_id = tool_id
        self.upstream_status = upstream_status


class SchemaInvalidError(CommandError):
    """The vendor answered, but not with a valid command object."""

    kind = CommandErrorKind.SCHEMA_INVALID
    status_code = 502
