"""
TASKFLOW API - AI Router

Natural-language task commands and per-user LLM key management.
"""

import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, Query

from app.auth.dependencies import CurrentUser
from app.rate_limit import enforce_rate_limit
from app.credentials.dependencies import get_credential_service
from app.credentials.service import CredentialService
from app.tasks.schemas import OkResponse, to_task_responses
from app.ai.constants import TOOL_CATALOG
from app.ai.dependencies import get_command_service
from app.ai.normalizer import parse_command_with_tool
from app.ai.providers.registry import ProviderRegistry, get_provider_registry
from app.ai.schemas import (
    ApiKeyRequest,
    ApiKeyStatus,
    CommandRequest,
    CommandResponse,
    KeyTestRequest,
    KeyTestResponse,
    ToolInfo,
)
from app.ai.service import CommandService

logger = logging.getLogger(__name__)

TEST_PROMPT = "what is due today"


router = APIRouter(prefix="/ai", tags=["AI"])


@router.post(
    "/command",
    response_model=CommandResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(enforce_rate_limit)],
)
async def run_command(
    request: CommandRequest,
    current_user: CurrentUser,
    service: Annotated[CommandService, Depends(get_command_service)],
) -> CommandResponse:
    """
    Interpret a free-text message and act on the user's tasks.

    Replies may be clarifying questions; the follow-up answer is sent to
    this same endpoint.
    """
    result = await service.handle(current_user.id, request.text, request.tool_id)
    return CommandResponse(
        command=result.command.to_wire() if result.command else None,
        message=result.message,
        tasks=to_task_responses(result.tasks) if result.tasks is not None else None,
    )


@router.get("/tools", response_model=List[ToolInfo])
async def list_tools() -> List[ToolInfo]:
    return [ToolInfo(**tool) for tool in TOOL_CATALOG]


@router.get("/keys", response_model=List[ApiKeyStatus])
async def list_keys(
    current_user: CurrentUser,
    credentials: Annotated[CredentialService, Depends(get_credential_service)],
) -> List[ApiKeyStatus]:
    """Which tools have a stored key. Keys themselves are never returned."""
    configured = set(await credentials.list_configured_providers(current_user.id))
    return [
        ApiKeyStatus(id=tool["id"], name=tool["name"], configured=tool["id"] in configured)
        for tool in TOOL_CATALOG
    ]


@router.post("/keys", response_model=OkResponse)
async def save_key(
    request: ApiKeyRequest,
    current_user: CurrentUser,
    credentials: Annotated[CredentialService, Depends(get_credential_service)],
    registry: Annotated[ProviderRegistry, Depends(get_provider_registry)],
) -> OkResponse:
    tool_id = registry.get(request.tool_id).tool_id
    await credentials.save_api_key(current_user.id, tool_id, request.api_key.strip())
    return OkResponse()


@router.delete("/keys", response_model=OkResponse)
async def delete_key(
    current_user: CurrentUser,
    credentials: Annotated[CredentialService, Depends(get_credential_service)],
    registry: Annotated[ProviderRegistry, Depends(get_provider_registry)],
    tool_id: Annotated[str, Query(alias="toolId", min_length=1)],
) -> OkResponse:
    tool_id = registry.get(tool_id).tool_id
    await credentials.delete_api_key(current_user.id, tool_id)
    return OkResponse()


@router.post("/test", response_model=KeyTestResponse, dependencies=[Depends(enforce_rate_limit)])
async def check_key(
    request: KeyTestRequest,
    current_user: CurrentUser,
    service: Annotated[CommandService, Depends(get_command_service)],
    registry: Annotated[ProviderRegistry, Depends(get_provider_registry)],
) -> KeyTestResponse:
    """
    Validate a key with one canned command.

    Uses the key in the body when given, the stored key otherwise. Provider
    failures surface as 502.
    """
    tool_id = registry.get(request.tool_id).tool_id
    api_key = (request.api_key or "").strip() or await service.resolve_api_key(current_user.id, tool_id)

    command = await parse_command_with_tool(TEST_PROMPT, tool_id, api_key, registry)
    logger.info(f"Key test for {tool_id} succeeded for user {current_user.id}")
    return KeyTestResponse(ok=True, command=command.to_wire())
