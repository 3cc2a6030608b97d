"""
TASKFLOW API - AI Schemas

The ChatCommand wire shape shared with every LLM provider, plus request
and response models for the /ai endpoints.
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.ai.constants import DEFAULT_TOOL_ID
from app.tasks.schemas import TaskResponse


class CommandAction(str, Enum):
    ADD_TASK = "add_task"
    UPDATE_TASK = "update_task"
    RESCHEDULE_TASK = "reschedule_task"
    COMPLETE_TASK = "complete_task"
    DELETE_TASK = "delete_task"
    LIST_TODAY = "list_today"
    SEARCH_TASKS = "search_tasks"
    CHECK_AVAILABILITY_NOW = "check_availability_now"


class ChatCommand(BaseModel):
    """
    One task-management intent.

    Field names on the wire are camelCase (taskId, listId). Unknown fields
    are ignored and blank strings are treated as absent.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    action: CommandAction
    task_id: Optional[str] = Field(default=None, alias="taskId")
    list_id: Optional[str] = Field(default=None, alias="listId")
    title: Optional[str] = None
    notes: Optional[str] = None
    due: Optional[str] = Field(default=None, description="ISO-8601 date or date-time")
    completed: Optional[bool] = None
    query: Optional[str] = None
    minutes: Optional[int] = Field(default=None, gt=0)

    @field_validator("task_id", "list_id", "title", "notes", "due", "query", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CommandRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(min_length=1, max_length=2000, description="Free-text command")
    tool_id: str = Field(default=DEFAULT_TOOL_ID, alias="toolId", description="LLM provider id")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Missing text")
        return v.strip()


class CommandResponse(BaseModel):
    command: Optional[dict] = Field(default=None, description="Executed ChatCommand")
    message: str
    tasks: Optional[List[TaskResponse]] = None


class ToolInfo(BaseModel):
    id: str
    name: str


class ApiKeyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tool_id: str = Field(alias="toolId", min_length=1)
    api_key: str = Field(alias="apiKey", min_length=1)


class ApiKeyStatus(BaseModel):
    id: str
    name: str
    configured: bool


class KeyTestRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tool_id: str = Field(alias="toolId", min_length=1)
    api_key: Optional[str] = Field(default=None, alias="apiKey")


class KeyTestResponse(BaseModel):
    ok: bool
    command: dict
