"""
TASKFLOW API - Command Normalizer Tests
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.errors import ValidationError
from app.ai.errors import CommandErrorKind, ProviderError, SchemaInvalidError
from app.ai.normalizer import (
    apply_temporal_overrides,
    derive_title,
    finalize_add_task,
    infer_due_from_text,
    naive_parse,
    normalize_command,
    parse_command_with_tool,
    strip_code_fences,
)
from app.ai.providers.registry import ProviderRegistry
from app.ai.schemas import ChatCommand, CommandAction

NOW = datetime(2025, 3, 10, 15, 30, tzinfo=timezone.utc)


class TestNaiveParse:
    """Tests for the keyword fallback parser."""

    def test_plain_text_is_a_search(self):
        command = naive_parse("buy milk")
        assert command.action == CommandAction.SEARCH_TASKS
        assert command.query == "buy milk"

    def test_add_prefix(self):
        command = naive_parse("Add buy milk")
        assert command.action == CommandAction.ADD_TASK
        assert command.title == "buy milk"

    def test_add_task_phrase(self):
        assert naive_parse("please add task water plants").action == CommandAction.ADD_TASK

    def test_add_title_drops_day_and_notes(self):
        command = naive_parse("add call mom tomorrow notes: be nice")
        assert command.title == "call mom"

    def test_add_then_normalize_keeps_day_and_notes(self):
        text = "add call mom tomorrow notes: be nice"
        command = normalize_command(naive_parse(text), text, NOW)

        assert command.title == "call mom"
        assert command.notes == "be nice"
        assert command.due.startswith("2025-03-11")

    def test_complete(self):
        command = naive_parse("complete the report")
        assert command.action == CommandAction.COMPLETE_TASK
        assert command.query == "complete the report"

    def test_delete(self):
        command = naive_parse("delete 2")
        assert command.action == CommandAction.DELETE_TASK
        assert command.query == "delete 2"

    def test_today(self):
        assert naive_parse("what's on today").action == CommandAction.LIST_TODAY

    def test_tomorrow(self):
        command = naive_parse("what about tomorrow")
        assert command.action == CommandAction.SEARCH_TASKS
        assert command.query == "tomorrow"

    def test_free(self):
        command = naive_parse("am I free now")
        assert command.action == CommandAction.CHECK_AVAILABILITY_NOW
        assert command.minutes == 45

    def test_priority_add_before_delete(self):
        assert naive_parse("add delete old files").action == CommandAction.ADD_TASK

    @pytest.mark.parametrize(
        "text",
        ["buy milk", "add x", "complete", "delete all", "today", "tomorrow", "free", "?", "add task"],
    )
    def test_output_always_validates(self, text):
        command = naive_parse(text)
        assert ChatCommand.model_validate(command.to_wire()).to_wire() == command.to_wire()


class TestStripCodeFences:

    def test_json_fence(self):
        assert strip_code_fences('```json\n{"action": "list_today"}\n```') == '{"action": "list_today"}'

    def test_bare_fence(self):
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_no_fence(self):
        assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'


class TestParseCommandWithTool:
    """Tests for provider-backed parsing."""

    async def test_fenced_uppercase_action(self, providers):
        providers["openai"].parse_replies.append('```json\n{"action": "LIST_TODAY", "extra": 1}\n```')
        registry = ProviderRegistry(providers.values())

        command = await parse_command_with_tool("what's due", "openai", "sk", registry, NOW)

        assert command.action == CommandAction.LIST_TODAY
        prompt = providers["openai"].parse_calls[0][1]
        assert "2025-03-10" in prompt
        assert "what's due" in prompt

    async def test_camel_case_fields(self, providers):
        providers["cohere"].parse_replies.append(
            '{"action": "complete_task", "taskId": "t1", "listId": "l1", "title": ""}'
        )
        registry = ProviderRegistry(providers.values())

        command = await parse_command_with_tool("done", "cohere", "key", registry, NOW)

        assert command.task_id == "t1"
        assert command.list_id == "l1"
        assert command.title is None

    async def test_non_json_is_schema_invalid(self, providers):
        providers["openai"].parse_replies.append("Sure! Here is your command.")
        registry = ProviderRegistry(providers.values())

        with pytest.raises(SchemaInvalidError) as exc_info:
            await parse_command_with_tool("x", "openai", "sk", registry, NOW)
        assert exc_info.value.kind == CommandErrorKind.SCHEMA_INVALID

    async def test_unknown_action_is_schema_invalid(self, providers):
        providers["openai"].parse_replies.append('{"action": "launch_rocket"}')
        registry = ProviderRegistry(providers.values())

        with pytest.raises(SchemaInvalidError):
            await parse_command_with_tool("x", "openai", "sk", registry, NOW)

    async def test_non_positive_minutes_is_schema_invalid(self, providers):
        providers["openai"].parse_replies.append('{"action": "check_availability_now", "minutes": 0}')
        registry = ProviderRegistry(providers.values())

        with pytest.raises(SchemaInvalidError):
            await parse_command_with_tool("x", "openai", "sk", registry, NOW)

    async def test_provider_failure_propagates(self, providers):
        registry = ProviderRegistry(providers.values())
        with pytest.raises(ProviderError) as exc_info:
            await parse_command_with_tool("x", "anthropic", "key", registry, NOW)
        assert exc_info.value.kind == CommandErrorKind.PROVIDER_FAILURE

    async def test_unknown_tool_rejected_before_call(self, providers):
        registry = ProviderRegistry(providers.values())
        with pytest.raises(ValidationError):
            await parse_command_with_tool("x", "llama", "key", registry, NOW)
        assert all(not adapter.calls for adapter in providers.values())


class TestInferDue:

    def test_tomorrow_is_one_day_after_today(self):
        today = datetime.fromisoformat(infer_due_from_text("today", NOW).replace("Z", "+00:00"))
        tomorrow = datetime.fromisoformat(infer_due_from_text("remind me tomorrow", NOW).replace("Z", "+00:00"))
        assert tomorrow.date() - today.date() == timedelta(days=1)

    @pytest.mark.parametrize("text", ["tmrw", "tomorow", "tommorow", "Tomorrow please"])
    def test_tomorrow_misspellings(self, text):
        assert infer_due_from_text(text, NOW).startswith("2025-03-11")

    def test_explicit_date(self):
        assert infer_due_from_text("by 2025-04-01", NOW) == "2025-04-01T00:00:00.000Z"

    def test_invalid_explicit_date(self):
        assert infer_due_from_text("by 2025-13-45", NOW) is None

    def test_no_date_info(self):
        assert infer_due_from_text("no date info", NOW) is None

    def test_full_utc_timestamp(self):
        assert infer_due_from_text("today", NOW) == "2025-03-10T15:30:00.000Z"


class TestTemporalOverrides:

    def test_list_today_with_tomorrow_becomes_search(self):
        command = apply_temporal_overrides(ChatCommand(action="list_today"), "what's due tmrw")
        assert command.action == CommandAction.SEARCH_TASKS
        assert command.query == "tomorrow"

    def test_empty_search_with_tomorrow(self):
        command = apply_temporal_overrides(ChatCommand(action="search_tasks"), "tasks for tomorrow")
        assert command.query == "tomorrow"

    def test_empty_search_with_today_becomes_list_today(self):
        command = apply_temporal_overrides(ChatCommand(action="search_tasks", query=""), "what's due today")
        assert command.action == CommandAction.LIST_TODAY

    def test_search_with_query_is_kept(self):
        command = apply_temporal_overrides(ChatCommand(action="search_tasks", query="milk"), "milk today")
        assert command.action == CommandAction.SEARCH_TASKS
        assert command.query == "milk"


class TestFinalizeAddTask:

    def test_derives_title(self):
        assert derive_title("Please add task to do   buy  eggs tomorrow") == "buy eggs"

    def test_fills_missing_fields_from_text(self):
        command = finalize_add_task(
            ChatCommand(action="add_task"),
            "add call mom tomorrow notes: be nice",
            NOW,
        )
        assert command.title == "call mom"
        assert command.notes == "be nice"
        assert command.due.startswith("2025-03-11")

    def test_keeps_provider_fields(self):
        command = finalize_add_task(
            ChatCommand(action="add_task", title="Pay rent", due="2025-04-01T00:00:00.000Z"),
            "rent tomorrow",
            NOW,
        )
        assert command.title == "Pay rent"
        assert command.due == "2025-04-01T00:00:00.000Z"

    def test_missing_title_is_an_error(self):
        with pytest.raises(ValidationError):
            finalize_add_task(ChatCommand(action="add_task"), "please add task tomorrow", NOW)

    def test_normalize_only_finalizes_add(self):
        command = normalize_command(ChatCommand(action="list_today"), "today", NOW)
        assert command.action == CommandAction.LIST_TODAY
        assert command.title is None
