"""Shared fixtures: a scripted brain, a fake client cache and sample contexts."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from agentg.agent.brain import BrainResponse, StopReason, TokenUsage
from agentg.agent.models import AgentContext
from agentg.agent.transcript import ToolUse
from agentg.tools import Tool, ToolDefinition, ToolRegistry

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def make_context(**overrides: Any) -> AgentContext:
    fields: dict[str, Any] = {
        "owner": "acme",
        "repo": "api",
        "installation_id": 42,
        "event_type": "issues",
        "event_action": "opened",
        "event_payload": {
            "issue_number": 7,
            "title": "Crash on startup",
            "body": "It crashes.",
            "author": "alice",
            "labels": [],
        },
        "triggered_by": "alice",
        "triggered_at": NOW,
    }
    fields.update(overrides)
    return AgentContext(**fields)


def tool_turn(*uses: tuple[str, str, dict], text: str = "", stop: StopReason = StopReason.TOOL_USE,
              usage: tuple[int, int] = (10, 5)) -> BrainResponse:
    return BrainResponse(
        text=text,
        tool_uses=tuple(ToolUse(id=i, name=n, input=inp) for i, n, inp in uses),
        stop_reason=stop,
        usage=TokenUsage(*usage),
    )


def text_turn(text: str, usage: tuple[int, int] = (10, 5)) -> BrainResponse:
    return BrainResponse(text=text, stop_reason=StopReason.END_TURN, usage=TokenUsage(*usage))


class ScriptedBrain:
    """Returns queued responses in order; an Exception in the queue is raised."""

    def __init__(self, *responses: BrainResponse | Exception):
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    async def converse(self, system_prompt, transcript, tools, *, temperature=None, max_output_tokens=None):
        self.calls.append({
            "system_prompt": system_prompt,
            "turns": transcript.snapshot(),
            "tools": [t.name for t in tools],
        })
        if not self.responses:
            raise AssertionError("ScriptedBrain ran out of responses")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def recording_tool(name: str, calls: list, output: Any = None, error: Exception | None = None) -> Tool:
    """A tool that records the input it was called with."""

    async def execute(client, params):
        calls.append((name, dict(params)))
        if error is not None:
            raise error
        return {"ok": True} if output is None else output

    return Tool(
        definition=ToolDefinition(
            name=name,
            description=f"Test tool {name}",
            input_schema={"type": "object", "properties": {}, "required": []},
        ),
        execute=execute,
    )


@pytest.fixture
def fake_client() -> MagicMock:
    client = MagicMock(name="GitHubClient")
    client.create_comment = AsyncMock(return_value={"id": 1, "html_url": "https://x"})
    return client


@pytest.fixture
def fake_clients(fake_client) -> MagicMock:
    clients = MagicMock(name="InstallationClientCache")
    clients.get = AsyncMock(return_value=fake_client)
    return clients


@pytest.fixture
def tool_calls() -> list:
    return []


@pytest.fixture
def registry(tool_calls) -> ToolRegistry:
    return ToolRegistry([
        recording_tool("add_label", tool_calls, {"labels": ["bug"]}),
        recording_tool("create_comment", tool_calls, {"comment_id": 1, "url": "https://x"}),
        recording_tool("flaky", tool_calls, error=RuntimeError("upstream exploded")),
    ]).freeze()
