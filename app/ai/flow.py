"""
TASKFLOW API - Pending Add-Task Flow

Collects the due date, notes and target list of an add_task across
several /ai/command requests, then creates the task in Google Tasks.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from app.tasks.models import Task, TaskList
from app.tasks.service import TaskService
from app.ai.constants import SKIP_TOKENS
from app.ai.dates import utcnow
from app.ai.normalizer import infer_due_from_text
from app.ai.pending import FlowInput, PendingAdd, PendingStage, advance
from app.ai.schemas import ChatCommand
from app.ai.state import ConversationState

logger = logging.getLogger(__name__)

# Google Tasks alias for the user's default list
DEFAULT_LIST_ID = "@default"


@dataclass
class FlowReply:
    message: str
    task: Optional[Task] = None


def format_list_choices(task_lists: List[TaskList]) -> str:
    return ", ".join(f"{i}) {tl.title}" for i, tl in enumerate(task_lists, start=1))


def match_list(reply: str, task_lists: List[TaskList]) -> Optional[TaskList]:
    """
    Pick a list from the user's reply.

    Tried in order: a 1-based position, an exact title (any case), then a
    title contained in the reply. The longest contained title wins.
    """
    answer = reply.strip()
    if re.fullmatch(r"\d+", answer, re.ASCII):
        position = int(answer)
        if 1 <= position <= len(task_lists):
            return task_lists[position - 1]

    lowered = answer.lower()
    for task_list in task_lists:
        if task_list.title.lower() == lowered:
            return task_list

    contained = [tl for tl in task_lists if tl.title and tl.title.lower() in lowered]
    if contained:
        return max(contained, key=lambda tl: len(tl.title))
    return None


class PendingAddFlow:

    def __init__(self, state: ConversationState, clock: Optional[Callable[[], datetime]] = None):
        self.state = state
        self._clock = clock or utcnow

    async def start(self, user_id: str, command: ChatCommand, tasks: TaskService) -> FlowReply:
        """Enter the flow with a normalized add_task command."""
        pending = PendingAdd(
            title=command.title,
            due=command.due,
            notes=command.notes,
            list_id=command.list_id,
            stage=PendingStage.NEED_DUE,
            created_at=self._clock(),
        )

        if not pending.due:
            self._park(user_id, pending)
            return FlowReply(self._ask_due(pending))

        if not pending.notes:
            pending.stage = PendingStage.NEED_NOTES
            self._park(user_id, pending)
            return FlowReply(self._ask_notes(pending))

        pending.stage = PendingStage.NEED_LIST
        return await self._enter_list_stage(user_id, pending, tasks)

    async def resume(
        self,
        user_id: str,
        pending: PendingAdd,
        text: str,
        tasks: Optional[TaskService],
    ) -> Optional[FlowReply]:
        """
        Feed the user's reply into the parked flow.

        Returns None when Google is no longer reachable for the user; the
        flow is dropped and the message is handled as a fresh command.
        """
        if tasks is None or not tasks.connected:
            logger.info(f"Dropping pending add for user {user_id}: Google Tasks not connected")
            self.state.clear_pending(user_id)
            return None

        if pending.stage == PendingStage.NEED_DUE:
            due = infer_due_from_text(text, self._clock())
            if due is None:
                pending.stage = advance(pending.stage, FlowInput.DUE_MISSING)
                self._park(user_id, pending)
                return FlowReply(f"I couldn't find a date in that. {self._ask_due(pending)}")

            pending.due = due
            pending.stage = advance(pending.stage, FlowInput.DUE_FOUND)
            if not pending.notes:
                self._park(user_id, pending)
                return FlowReply(self._ask_notes(pending))
            pending.stage = advance(pending.stage, FlowInput.NOTES_GIVEN)
            return await self._enter_list_stage(user_id, pending, tasks)

        if pending.stage == PendingStage.NEED_NOTES:
            answer = text.strip()
            if answer.lower() in SKIP_TOKENS:
                pending.notes = None
                pending.stage = advance(pending.stage, FlowInput.NOTES_SKIPPED)
            else:
                pending.notes = answer
                pending.stage = advance(pending.stage, FlowInput.NOTES_GIVEN)
            return await self._enter_list_stage(user_id, pending, tasks)

        task_lists = await tasks.list_task_lists()
        chosen = match_list(text, task_lists)
        if chosen is None:
            pending.stage = advance(pending.stage, FlowInput.LIST_UNMATCHED)
            self._park(user_id, pending)
            return FlowReply(f"I couldn't match that to a list. {self._ask_list(task_lists)}")

        advance(pending.stage, FlowInput.LIST_MATCHED)
        return await self._commit(user_id, pending, chosen.id, tasks)

    async def _enter_list_stage(self, user_id: str, pending: PendingAdd, tasks: TaskService) -> FlowReply:
        if pending.list_id:
            return await self._commit(user_id, pending, pending.list_id, tasks)

        task_lists = await tasks.list_task_lists()
        if len(task_lists) > 1:
            self._park(user_id, pending)
            return FlowReply(self._ask_list(task_lists))

        list_id = task_lists[0].id if task_lists else DEFAULT_LIST_ID
        return await self._commit(user_id, pending, list_id, tasks)

    async def _commit(self, user_id: str, pending: PendingAdd, list_id: str, tasks: TaskService) -> FlowReply:
        task = await tasks.create_task(list_id, pending.title, notes=pending.notes, due=pending.due)
        self.state.clear_pending(user_id)
        logger.info(f"Pending add committed for user {user_id} to list {list_id}")
        return FlowReply(f"Added task: {pending.title}", task)

    def _park(self, user_id: str, pending: PendingAdd) -> None:
        logger.debug(f"Pending add for user {user_id} at stage {pending.stage.value}")
        self.state.set_pending(user_id, pending)

    @staticmethod
    def _ask_due(pending: PendingAdd) -> str:
        return f'When is "{pending.title}" due? You can say today, tomorrow or a date like 2025-01-31.'

    @staticmethod
    def _ask_notes(pending: PendingAdd) -> str:
        return f'Any notes for "{pending.title}"? Reply "skip" or "no" to leave them empty.'

    @staticmethod
    def _ask_list(task_lists: List[TaskList]) -> str:
        return f"Which list should I use? {format_list_choices(task_lists)}"
