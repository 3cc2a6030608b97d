"""
TASKFLOW API - Pending Flow Types

State parked between requests while the assistant collects the fields of
an add_task command, and the transition table that drives it.

    need_due --due_found--> need_notes --notes_*--> need_list --list_matched--> committed

Every stage loops on its own "missing/unmatched" input. No transition
leads back to an earlier stage.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional, Tuple


class PendingStage(str, Enum):
    NEED_DUE = "need_due"
    NEED_NOTES = "need_notes"
    NEED_LIST = "need_list"


class FlowInput(str, Enum):
    DUE_MISSING = "due_missing"
    DUE_FOUND = "due_found"
    NOTES_SKIPPED = "notes_skipped"
    NOTES_GIVEN = "notes_given"
    LIST_UNMATCHED = "list_unmatched"
    LIST_MATCHED = "list_matched"


# None marks the terminal transition (task committed)
TRANSITIONS: Dict[Tuple[PendingStage, FlowInput], Optional[PendingStage]] = {
    (PendingStage.NEED_DUE, FlowInput.DUE_MISSING): PendingStage.NEED_DUE,
    (PendingStage.NEED_DUE, FlowInput.DUE_FOUND): PendingStage.NEED_NOTES,
    (PendingStage.NEED_NOTES, FlowInput.NOTES_SKIPPED): PendingStage.NEED_LIST,
    (PendingStage.NEED_NOTES, FlowInput.NOTES_GIVEN): PendingStage.NEED_LIST,
    (PendingStage.NEED_LIST, FlowInput.LIST_UNMATCHED): PendingStage.NEED_LIST,
    (PendingStage.NEED_LIST, FlowInput.LIST_MATCHED): None,
}


class InvalidTransition(Exception):
    pass


def advance(stage: PendingStage, flow_input: FlowInput) -> Optional[PendingStage]:
    """Next stage for this input, or None once the task is committed."""
    try:
        return TRANSITIONS[(stage, flow_input)]
    except KeyError:
        raise InvalidTransition(f"{flow_input.value} is not accepted in {stage.value}") from None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PendingAdd:
    """An add_task waiting for its due date, notes or target list."""

    title: str
    stage: PendingStage
    due: Optional[str] = None
    notes: Optional[str] = None
    list_id: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)


@dataclass
class PendingGeneral:
    """A general question waiting for a detail, e.g. the location for a weather question."""

    question: str
    kind: str = "weather"
    created_at: datetime = field(default_factory=_utcnow)
