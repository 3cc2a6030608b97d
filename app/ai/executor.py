"""
TASKFLOW API - Task Command Executor

Applies a normalized ChatCommand to the user's tasks: Google Tasks when
connected, the local store otherwise.
"""

import logging
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Awaitable, Callable, List, Optional, Tuple

from app.errors import NotFoundError, ValidationError
from app.tasks.models import Task, TaskPatch
from app.tasks.service import TaskService
from app.ai.dates import due_date, local_date, utcnow
from app.ai.errors import CommandError
from app.ai.flow import PendingAddFlow
from app.ai.normalizer import mentions_tomorrow
from app.ai.schemas import ChatCommand, CommandAction
from app.ai.state import ConversationState

logger = logging.getLogger(__name__)

NOT_CONNECTED_MESSAGE = "Google Tasks not connected."
AVAILABILITY_MESSAGE = "Calendar not connected. Enable Google Calendar to check availability."
NO_MATCH_MESSAGE = "No matching tasks found."

# The whole reply must be the pick; numbers inside longer messages never select
ORDINAL_REPLY_PATTERN = r"\s*(?:(?:delete|complete|update|reschedule)\s+)?#?(\d{1,3})\s*[.!]?\s*"

ChatFn = Callable[[str], Awaitable[str]]


@dataclass
class ExecutionResult:
    message: str
    command: Optional[ChatCommand] = None


def _format_tasks(tasks: List[Task]) -> str:
    return ", ".join(f"{i}) {t.title}" for i, t in enumerate(tasks, start=1))


def _ordinal(text: str) -> Optional[int]:
    """Position picked by a reply that is only a number, e.g. "2" or "delete 2"."""
    match = re.fullmatch(ORDINAL_REPLY_PATTERN, text or "", re.IGNORECASE | re.ASCII)
    return int(match.group(1)) if match else None


class TaskCommandExecutor:

    def __init__(self, state: ConversationState, flow: PendingAddFlow):
        self.state = state
        self.flow = flow

    async def execute(
        self,
        user_id: str,
        command: ChatCommand,
        text: str,
        tasks: TaskService,
        chat: Optional[ChatFn] = None,
    ) -> ExecutionResult:
        action = command.action
        logger.info(f"Executing {action.value} for user {user_id} (google={tasks.connected})")

        if action == CommandAction.ADD_TASK:
            if not tasks.connected:
                raise ValidationError(NOT_CONNECTED_MESSAGE)
            reply = await self.flow.start(user_id, command, tasks)
            return ExecutionResult(reply.message, command)

        if action in (CommandAction.COMPLETE_TASK, CommandAction.UPDATE_TASK, CommandAction.RESCHEDULE_TASK):
            return await self._update(user_id, command, text, tasks)

        if action == CommandAction.DELETE_TASK:
            return await self._delete(user_id, command, text, tasks)

        if action == CommandAction.LIST_TODAY:
            return await self._list_today(user_id, command, tasks)

        if action == CommandAction.SEARCH_TASKS:
            return await self._search(user_id, command, text, tasks, chat)

        return ExecutionResult(AVAILABILITY_MESSAGE, command)

    async def _resolve_target(
        self,
        user_id: str,
        command: ChatCommand,
        text: str,
        all_tasks: List[Task],
        verb: str,
    ) -> Tuple[Optional[Task], Optional[str]]:
        """
        Find the task a command refers to.

        Returns (task, None) when resolved, or (None, question) when the
        user has to pick from several recent results.
        """
        by_id = {t.id: t for t in all_tasks}

        if command.task_id:
            task = by_id.get(command.task_id)
            if task is None:
                raise NotFoundError("Task not found")
            return task, None

        candidates = [by_id[task_id] for task_id in self.state.get_last_search(user_id) if task_id in by_id]
        if not candidates:
            raise ValidationError("taskId required")
        if len(candidates) == 1:
            return candidates[0], None

        position = _ordinal(text)
        if position is not None and 1 <= position <= len(candidates):
            return candidates[position - 1], None

        question = (
            f"I found {len(candidates)} matching tasks. Which one should I {verb}? "
            f'Reply "{verb} <number>": {_format_tasks(candidates)}'
        )
        return None, question

    async def _update(self, user_id: str, command: ChatCommand, text: str, tasks: TaskService) -> ExecutionResult:
        all_tasks = await tasks.list_tasks()
        verb = "complete" if command.action == CommandAction.COMPLETE_TASK else "update"
        task, question = await self._resolve_target(user_id, command, text, all_tasks, verb)
        if task is None:
            return ExecutionResult(question, command)

        if command.action == CommandAction.COMPLETE_TASK:
            patch = TaskPatch(completed=True)
        else:
            patch = TaskPatch(
                title=command.title,
                notes=command.notes,
                due=command.due,
                completed=command.completed,
            )
            if patch.is_empty():
                patch = TaskPatch(completed=True)

        updated = await tasks.update_task(task.id, patch, list_id=command.list_id or task.list_id)

        if patch.completed and patch.title is None and patch.due is None:
            message = f"Completed task: {updated.title or task.title}"
        elif command.action == CommandAction.RESCHEDULE_TASK:
            message = f"Rescheduled task: {updated.title or task.title}"
        else:
            message = f"Updated task: {updated.title or task.title}"
        return ExecutionResult(message, command)

    async def _delete(self, user_id: str, command: ChatCommand, text: str, tasks: TaskService) -> ExecutionResult:
        all_tasks = await tasks.list_tasks()

        if not command.task_id and (mentions_tomorrow(command.query or "") or mentions_tomorrow(text)):
            tomorrow = local_date(utcnow()) + timedelta(days=1)
            doomed = [t for t in all_tasks if due_date(t.due) == tomorrow]
            for task in doomed:
                await tasks.delete_task(task.id, list_id=task.list_id)
            logger.info(f"Bulk-deleted {len(doomed)} task(s) due tomorrow for user {user_id}")
            if not doomed:
                return ExecutionResult("No tasks due tomorrow.", command)
            return ExecutionResult(f"Deleted {len(doomed)} task(s) due tomorrow.", command)

        task, question = await self._resolve_target(user_id, command, text, all_tasks, "delete")
        if task is None:
            return ExecutionResult(question, command)

        await tasks.delete_task(task.id, list_id=command.list_id or task.list_id)
        remaining = [task_id for task_id in self.state.get_last_search(user_id) if task_id != task.id]
        self.state.set_last_search(user_id, remaining)
        return ExecutionResult(f"Deleted task: {task.title}", command)

    async def _list_today(self, user_id: str, command: ChatCommand, tasks: TaskService) -> ExecutionResult:
        today = local_date(utcnow())
        matched = [t for t in await tasks.list_tasks() if due_date(t.due) == today]
        self.state.set_last_search(user_id, [t.id for t in matched])

        if not matched:
            return ExecutionResult("No tasks due today.", command)
        return ExecutionResult(f"Tasks due today: {_format_tasks(matched)}", command)

    async def _search(
        self,
        user_id: str,
        command: ChatCommand,
        text: str,
        tasks: TaskService,
        chat: Optional[ChatFn],
    ) -> ExecutionResult:
        query = (command.query or "").strip()
        all_tasks = await tasks.list_tasks()

        if mentions_tomorrow(query):
            tomorrow = local_date(utcnow()) + timedelta(days=1)
            matched = [t for t in all_tasks if due_date(t.due) == tomorrow]
            self.state.set_last_search(user_id, [t.id for t in matched])
            if not matched:
                return ExecutionResult("No tasks due tomorrow.", command)
            return ExecutionResult(f"Tasks due tomorrow: {_format_tasks(matched)}", command)

        lowered = query.lower()
        matched = [t for t in all_tasks if lowered in t.title.lower()]
        self.state.set_last_search(user_id, [t.id for t in matched])

        if matched:
            return ExecutionResult(f"Found {len(matched)} task(s): {_format_tasks(matched)}", command)
        if not query or chat is None:
            return ExecutionResult(NO_MATCH_MESSAGE, command)

        try:
            answer = await chat(text)
        except CommandError as e:
            logger.info(f"Courtesy chat for empty search skipped: {e.kind.value}")
            return ExecutionResult(NO_MATCH_MESSAGE, command)
        return ExecutionResult(answer.strip() or NO_MATCH_MESSAGE, command)
