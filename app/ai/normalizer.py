"""
TASKFLOW API - Command Normalizer

Turns raw provider output, or the rule-based fallback, into a validated
ChatCommand and fills in what the text implies (temporal keywords, a
missing title, due date or notes).
"""

import json
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from app.errors import ValidationError
from app.ai.constants import (
    DEFAULT_FREE_MINUTES,
    ISO_DATE_PATTERN,
    NOTES_PATTERN,
    TITLE_FILLER_PATTERN,
    TODAY_PATTERN,
    TOMORROW_PATTERN,
)
from app.ai.dates import to_rfc3339, utcnow
from app.ai.errors import SchemaInvalidError
from app.ai.providers.registry import ProviderRegistry
from app.ai.schemas import ChatCommand, CommandAction

logger = logging.getLogger(__name__)

TOMORROW_QUERY = "tomorrow"

_FENCE_START = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"\s*```$")


def mentions_tomorrow(text: str) -> bool:
    return re.search(TOMORROW_PATTERN, text or "", re.IGNORECASE) is not None


def mentions_today(text: str) -> bool:
    return re.search(TODAY_PATTERN, text or "", re.IGNORECASE) is not None


def strip_code_fences(raw: str) -> str:
    cleaned = (raw or "").strip()
    cleaned = _FENCE_START.sub("", cleaned)
    cleaned = _FENCE_END.sub("", cleaned)
    return cleaned.strip()


def validate_command(data: dict) -> ChatCommand:
    """Validate a decoded provider object as a ChatCommand."""
    if isinstance(data.get("action"), str):
        data = {**data, "action": data["action"].strip().lower()}
    try:
        return ChatCommand.model_validate(data)
    except PydanticValidationError as e:
        raise SchemaInvalidError(f"Invalid command from provider: {e.error_count()} error(s)") from e


def build_parse_prompt(text: str, now: datetime) -> str:
    return (
        f"Today is {now.date().isoformat()}. "
        f"Convert the user's message into a ChatCommand.\n\nUser message: {text}"
    )


async def parse_command_with_tool(
    text: str,
    tool_id: str,
    api_key: str,
    registry: ProviderRegistry,
    now: Optional[datetime] = None,
) -> ChatCommand:
    """
    Ask the selected provider to translate text into a ChatCommand.

    Raises ProviderError when the vendor call fails and SchemaInvalidError
    when the answer is not a valid command.
    """
    adapter = registry.get(tool_id)
    raw = await adapter.parse_command(build_parse_prompt(text, now or utcnow()), api_key)

    cleaned = strip_code_fences(raw)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning(f"{tool_id} returned non-JSON command output")
        raise SchemaInvalidError("Provider returned non-JSON output") from e
    if not isinstance(data, dict):
        raise SchemaInvalidError("Provider returned a non-object command")

    return validate_command(data)


def naive_parse(text: str) -> ChatCommand:
    """Keyword fallback used when no provider answer is available."""
    lower = text.lower()
    if lower.startswith("add ") or "add task" in lower:
        return ChatCommand(action=CommandAction.ADD_TASK, title=derive_title(text))
    if "complete" in lower:
        return ChatCommand(action=CommandAction.COMPLETE_TASK, query=text)
    if "delete" in lower:
        return ChatCommand(action=CommandAction.DELETE_TASK, query=text)
    if "today" in lower:
        return ChatCommand(action=CommandAction.LIST_TODAY)
    if "tomorrow" in lower:
        return ChatCommand(action=CommandAction.SEARCH_TASKS, query=TOMORROW_QUERY)
    if "free" in lower:
        return ChatCommand(action=CommandAction.CHECK_AVAILABILITY_NOW, minutes=DEFAULT_FREE_MINUTES)
    return ChatCommand(action=CommandAction.SEARCH_TASKS, query=text)


def apply_temporal_overrides(command: ChatCommand, text: str) -> ChatCommand:
    """Correct list/search commands whose day the provider got wrong."""
    if mentions_tomorrow(text):
        if command.action == CommandAction.LIST_TODAY:
            return command.model_copy(update={"action": CommandAction.SEARCH_TASKS, "query": TOMORROW_QUERY})
        if command.action == CommandAction.SEARCH_TASKS and not command.query:
            return command.model_copy(update={"query": TOMORROW_QUERY})
    elif mentions_today(text):
        if command.action == CommandAction.SEARCH_TASKS and not command.query:
            return command.model_copy(update={"action": CommandAction.LIST_TODAY})
    return command


def infer_due_from_text(text: str, now: Optional[datetime] = None) -> Optional[str]:
    """Due timestamp implied by the text, or None if it names no day."""
    now = now or utcnow()
    if mentions_tomorrow(text):
        return to_rfc3339(now + timedelta(days=1))
    if mentions_today(text):
        return to_rfc3339(now)

    match = re.search(ISO_DATE_PATTERN, text or "")
    if match:
        year, month, day = (int(part) for part in match.groups())
        try:
            return to_rfc3339(datetime(year, month, day, tzinfo=timezone.utc))
        except ValueError:
            return None
    return None


def extract_notes(text: str) -> Optional[str]:
    match = re.search(NOTES_PATTERN, text or "", re.IGNORECASE)
    if not match:
        return None
    return match.group(1).strip() or None


def _strip_notes_segment(text: str) -> str:
    return re.sub(NOTES_PATTERN, "", text or "", flags=re.IGNORECASE).strip()


def derive_title(text: str) -> Optional[str]:
    title = _strip_notes_segment(text)
    title = re.sub(TITLE_FILLER_PATTERN, " ", title, flags=re.IGNORECASE)
    title = re.sub(r"\s+", " ", title).strip(" .,!?:;-")
    return title or None


def finalize_add_task(command: ChatCommand, text: str, now: Optional[datetime] = None) -> ChatCommand:
    """Fill title, due and notes of an add_task from the original text."""
    notes = command.notes or extract_notes(text)

    title = command.title
    if title:
        title = _strip_notes_segment(title) or None
    if not title:
        title = derive_title(text)
    if not title:
        raise ValidationError("Task title required")

    due = command.due or infer_due_from_text(text, now)
    return command.model_copy(update={"title": title, "due": due, "notes": notes})


def normalize_command(command: ChatCommand, text: str, now: Optional[datetime] = None) -> ChatCommand:
    command = apply_temporal_overrides(command, text)
    if command.action == CommandAction.ADD_TASK:
        command = finalize_add_task(command, text, now)
    return command
