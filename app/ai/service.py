"""
TASKFLOW API - Command Service

Entry point of /ai/command. For each message, in order:
1. weather question without task intent (ask for a location, or chat)
2. open general follow-up (finish the parked question, then chat)
3. open add-task flow (feed the reply into it)
4. translate the text to a ChatCommand with the selected provider and
   execute it, falling back to the keyword parser or plain chat when the
   provider fails
Requests of one user are serialized.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from app.config import settings
from app.credentials.service import CredentialService
from app.tasks.models import Task
from app.tasks.repository import TaskRepositoryInterface
from app.tasks.service import GoogleClientFactory, TaskService, build_task_service
from app.ai.dates import utcnow
from app.ai.errors import CommandError, CommandErrorKind, KeyMissingError
from app.ai.executor import TaskCommandExecutor
from app.ai.flow import PendingAddFlow
from app.ai.intent import has_location, is_weather_question, looks_like_task_query
from app.ai.normalizer import naive_parse, normalize_command, parse_command_with_tool
from app.ai.pending import PendingGeneral
from app.ai.providers.registry import ProviderRegistry
from app.ai.schemas import ChatCommand
from app.ai.state import ConversationState

logger = logging.getLogger(__name__)

LOCATION_QUESTION = "Which location?"


@dataclass
class CommandResult:
    message: str
    command: Optional[ChatCommand] = None
    tasks: Optional[List[Task]] = None


class CommandService:

    def __init__(
        self,
        credentials: CredentialService,
        state: ConversationState,
        registry: ProviderRegistry,
        task_repository: TaskRepositoryInterface,
        google_factory: GoogleClientFactory,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.credentials = credentials
        self.state = state
        self.registry = registry
        self.task_repository = task_repository
        self.google_factory = google_factory
        self._clock = clock or utcnow
        self.flow = PendingAddFlow(state, clock=self._clock)
        self.executor = TaskCommandExecutor(state, self.flow)

    async def resolve_api_key(self, user_id: str, tool_id: str) -> str:
        """Stored key for the tool, or the server key for openai. Raises KeyMissingError."""
        api_key = await self.credentials.get_api_key(user_id, tool_id)
        if not api_key and tool_id == "openai":
            api_key = settings.OPENAI_API_KEY
        if not api_key:
            raise KeyMissingError(tool_id)
        return api_key

    async def general_chat(self, user_id: str, tool_id: str, prompt: str) -> str:
        api_key = await self.resolve_api_key(user_id, tool_id)
        return await self.registry.get(tool_id).general_chat(prompt, api_key)

    async def _task_service(self, user_id: str) -> TaskService:
        return await build_task_service(user_id, self.credentials, self.task_repository, self.google_factory)

    async def handle(self, user_id: str, text: str, tool_id: str) -> CommandResult:
        async with self.state.store.lock(user_id):
            return await self._handle(user_id, text.strip(), tool_id.lower())

    async def _handle(self, user_id: str, text: str, tool_id: str) -> CommandResult:
        self.registry.get(tool_id)

        if is_weather_question(text):
            if not has_location(text):
                self.state.set_pending(user_id, PendingGeneral(question=text.rstrip(" ?"), created_at=self._clock()))
                return CommandResult(LOCATION_QUESTION)
            return await self._chat_reply(user_id, tool_id, text)

        pending_general = self.state.get_pending_general(user_id)
        if pending_general is not None:
            self.state.clear_pending(user_id)
            return await self._chat_reply(user_id, tool_id, f"{pending_general.question} in {text}")

        pending_add = self.state.get_pending_add(user_id)
        if pending_add is not None:
            tasks = await self._task_service(user_id)
            reply = await self.flow.resume(user_id, pending_add, text, tasks)
            if reply is not None:
                return CommandResult(reply.message, tasks=await tasks.list_tasks())

        return await self._run_command(user_id, tool_id, text)

    async def _chat_reply(self, user_id: str, tool_id: str, prompt: str) -> CommandResult:
        try:
            return CommandResult(await self.general_chat(user_id, tool_id, prompt))
        except CommandError as e:
            if e.kind == CommandErrorKind.KEY_MISSING:
                raise
            logger.warning(f"General chat via {tool_id} failed: {e.message}")
            return CommandResult(f"I couldn't reach {self.registry.get(tool_id).name} right now. Please try again.")

    async def _run_command(self, user_id: str, tool_id: str, text: str) -> CommandResult:
        now = self._clock()
        api_key = await self.resolve_api_key(user_id, tool_id)
        adapter = self.registry.get(tool_id)

        try:
            command = await parse_command_with_tool(text, tool_id, api_key, self.registry, now)
        except CommandError as e:
            if e.kind == CommandErrorKind.KEY_MISSING:
                raise
            logger.warning(f"Command parsing via {tool_id} failed ({e.kind.value}): {e.message}")
            if looks_like_task_query(text):
                command = naive_parse(text)
            else:
                try:
                    return CommandResult(await adapter.general_chat(text, api_key))
                except CommandError as chat_error:
                    logger.warning(f"General chat via {tool_id} failed: {chat_error.message}")
                    command = naive_parse(text)

        command = normalize_command(command, text, now)
        tasks = await self._task_service(user_id)

        async def courtesy_chat(prompt: str) -> str:
            return await adapter.general_chat(prompt, api_key)

        result = await self.executor.execute(user_id, command, text, tasks, chat=courtesy_chat)
        return CommandResult(result.message, result.command, await tasks.list_tasks())
