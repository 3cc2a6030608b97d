"""
TASKFLOW API - Test Configuration

Shared fixtures for CI-safe testing without MongoDB, Google or any LLM
vendor. Stores are the in-memory singletons, cleared around every test.
"""

import asyncio
from typing import Dict, List, Optional, Union

import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.main import app
from app.session_store import session_store
from app.auth.repository import user_repository
from app.credentials.repository import credential_repository
from app.credentials.service import CredentialService
from app.tasks.dependencies import get_google_client_factory
from app.tasks.models import Task, TaskList, TaskPatch
from app.tasks.repository import task_repository
from app.ai.errors import ProviderError
from app.ai.providers.base import ProviderAdapter
from app.ai.providers.registry import ProviderRegistry, get_provider_registry


class FakeAdapter(ProviderAdapter):
    """Provider adapter that records prompts and replays scripted answers."""

    def __init__(self, tool_id: str, name: Optional[str] = None):
        self.tool_id = tool_id
        self.name = name or tool_id.title()
        self.model = "fake-model"
        self.timeout = 1.0
        self.parse_replies: List[Union[str, Exception]] = []
        self.chat_replies: List[Union[str, Exception]] = []
        self.calls: List[tuple] = []

    @property
    def chat_calls(self) -> List[tuple]:
        return [c for c in self.calls if c[0] == "chat"]

    @property
    def parse_calls(self) -> List[tuple]:
        return [c for c in self.calls if c[0] == "parse"]

    @staticmethod
    def _next(replies: List[Union[str, Exception]], tool_id: str) -> str:
        if not replies:
            raise ProviderError(tool_id, 503)
        reply = replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def parse_command(self, prompt: str, api_key: str) -> str:
        self.calls.append(("parse", prompt, api_key))
        return self._next(self.parse_replies, self.tool_id)

    async def general_chat(self, prompt: str, api_key: str) -> str:
        self.calls.append(("chat", prompt, api_key))
        return self._next(self.chat_replies, self.tool_id)

    async def _complete(self, system: str, prompt: str, api_key: str, temperature: float) -> str:
        raise NotImplementedError


class FakeGoogleTasks:
    """In-process stand-in for GoogleTasksClient with a fixed set of lists."""

    def __init__(self, lists: Optional[List[TaskList]] = None):
        self.lists = lists if lists is not None else [
            TaskList(id="inbox-list", title="Inbox"),
            TaskList(id="work-list", title="Work"),
        ]
        self.tasks: Dict[str, Task] = {}
        self.created: List[Task] = []
        self.deleted: List[str] = []
        self.tokens: List[str] = []

    def add(self, list_id: str, title: str, due: Optional[str] = None) -> Task:
        task = Task.create(list_id, title, due=due)
        self.tasks[task.id] = task
        return task

    async def list_task_lists(self) -> List[TaskList]:
        return list(self.lists)

    async def list_tasks(self, list_id: str) -> List[Task]:
        return [t for t in self.tasks.values() if t.list_id == list_id]

    async def list_all_tasks(self) -> List[Task]:
        return list(self.tasks.values())

    async def create_task(self, list_id, title, notes=None, due=None) -> Task:
        task = Task.create(list_id, title, notes=notes, due=due)
        self.tasks[task.id] = task
        self.created.append(task)
        return task

    async def patch_task(self, list_id: str, task_id: str, patch: TaskPatch) -> Task:
        task = self.tasks[task_id]
        for key in ("title", "notes", "due", "completed"):
            value = getattr(patch, key)
            if value is not None:
                setattr(task, key, value)
        return task

    async def delete_task(self, list_id: str, task_id: str) -> None:
        self.tasks.pop(task_id, None)
        self.deleted.append(task_id)


@pytest.fixture(autouse=True)
def reset_state(monkeypatch):
    """Fresh in-memory stores and deterministic auth/key settings per test."""
    monkeypatch.setattr(settings, "USE_MOCK_AUTH", True)
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    monkeypatch.setattr(settings, "TIMEZONE", "UTC")
    user_repository.clear()
    credential_repository.clear()
    task_repository.clear()
    session_store.clear()
    yield
    session_store.clear()


@pytest.fixture
def providers():
    """Fake adapters for every tool id, keyed by id."""
    return {tool_id: FakeAdapter(tool_id) for tool_id in ("openai", "anthropic", "google", "mistral", "cohere")}


@pytest.fixture
def google():
    return FakeGoogleTasks()


@pytest.fixture
def client(providers, google):
    """Test client with fake providers and a fake Google Tasks backend."""
    registry = ProviderRegistry(providers.values())

    def google_factory(access_token: str) -> FakeGoogleTasks:
        google.tokens.append(access_token)
        return google

    app.dependency_overrides[get_provider_registry] = lambda: registry
    app.dependency_overrides[get_google_client_factory] = lambda: google_factory

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def auth_token(client):
    """Mock sign-in as the demo user."""
    response = client.post("/auth/google/callback")
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
def auth_headers(auth_token):
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def user_id(auth_token):
    return "demo-user"


@pytest.fixture
def credentials():
    return CredentialService(credential_repository, session_store)


@pytest.fixture
def connect_google(credentials, user_id):
    """Store a non-expiring Google access token for the demo user."""
    asyncio.run(credentials.save_google_tokens(user_id, access_token="google-access-token"))


@pytest.fixture
def save_key(credentials, user_id):
    def _save(tool_id: str, api_key: str = "sk-test") -> None:
        asyncio.run(credentials.save_api_key(user_id, tool_id, api_key))
    return _save
