"""
Agent Data Model
================

Values that flow into and out of an agent run:

    AgentContext         what triggered the run (input, read-only)
    AgentConfig          per-variant policy: budget and allowed tools
    ToolExecutionResult  the outcome of one tool invocation
    ActionRecord         a tool invocation as reported to the caller
    AgentResult          the terminal artifact of a run
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from agentg.agent.transcript import Turn

DEFAULT_MAX_ITERATIONS = 10


@dataclass(frozen=True)
class AgentContext:
    """
    Immutable input to a run, built by an inbound-event translator.

    Attributes:
        owner: Repository owner (user or organization login)
        repo: Repository name
        installation_id: GitHub App installation that authenticates the run
        event_type: e.g. "issues", "pull_request", "push"
        event_action: e.g. "opened"; "push" for push events
        event_payload: Event-specific fields (issue_number, title, ...)
        triggered_by: Login of the actor behind the event
        triggered_at: When the event was received
    """
    owner: str
    repo: str
    installation_id: int
    event_type: str
    event_action: str
    event_payload: Mapping[str, Any] = field(default_factory=dict)
    triggered_by: str = ""
    triggered_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        # Freeze the payload too; the dataclass alone only freezes the attribute.
        object.__setattr__(
            self, "event_payload", MappingProxyType(dict(self.event_payload))
        )

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def event(self) -> str:
        return f"{self.event_type}.{self.event_action}"

    def ambient_tool_input(self) -> dict[str, Any]:
        """Fields injected into every tool call; they pin the target repository."""
        return {"owner": self.owner, "repo": self.repo}


@dataclass(frozen=True)
class AgentConfig:
    """
    Policy for one agent variant.

    Attributes:
        name: Variant name used in logs and results
        description: Human readable summary
        tools: Names of the tools this variant may invoke
        max_iterations: Think/act cycles allowed; None or 0 means the default (10)
    """
    name: str
    description: str
    tools: tuple[str, ...] = ()
    max_iterations: int | None = None

    def __post_init__(self):
        object.__setattr__(self, "tools", tuple(self.tools))
        if self.max_iterations is not None and self.max_iterations < 0:
            raise ValueError("max_iterations cannot be negative")

    @property
    def iteration_budget(self) -> int:
        return self.max_iterations or DEFAULT_MAX_ITERATIONS


@dataclass(frozen=True)
class ToolExecutionResult:
    """
    Outcome of one tool invocation.

    Either output is set and error is None (success), or output is None and
    error is set (failure). Use succeeded() / failed() to build one.
    """
    tool_use_id: str
    tool_name: str
    input: Mapping[str, Any]
    output: Any
    success: bool
    error: str | None
    execution_time_ms: int

    def __post_init__(self):
        if self.success and (self.output is None or self.error is not None):
            raise ValueError("A successful result needs output and no error")
        if not self.success and (self.output is not None or not self.error):
            raise ValueError("A failed result needs an error and no output")

    @classmethod
    def succeeded(
        cls,
        tool_use_id: str,
        tool_name: str,
        input: Mapping[str, Any],
        output: Any,
        execution_time_ms: int,
    ) -> "ToolExecutionResult":
        return cls(tool_use_id, tool_name, input, output, True, None, execution_time_ms)

    @classmethod
    def failed(
        cls,
        tool_use_id: str,
        tool_name: str,
        input: Mapping[str, Any],
        error: str,
        execution_time_ms: int,
    ) -> "ToolExecutionResult":
        return cls(tool_use_id, tool_name, input, None, False, error, execution_time_ms)


@dataclass(frozen=True)
class ActionRecord:
    """A tool invocation as reported in AgentResult.actions."""
    tool: str
    input: Mapping[str, Any]
    output: Any
    success: bool
    error: str | None = None

    @classmethod
    def from_result(cls, result: ToolExecutionResult) -> "ActionRecord":
        return cls(
            tool=result.tool_name,
            input=result.input,
            output=result.output,
            success=result.success,
            error=result.error,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "tool": self.tool,
            "input": dict(self.input),
            "output": self.output,
            "success": self.success,
            "error": self.error,
        }


class AgentStopReason(str, Enum):
    NO_TOOL_CALLS = "no_tool_calls"        # model answered without requesting tools
    END_TURN = "end_turn"                  # model acted and signalled it was done
    BUDGET_EXHAUSTED = "budget_exhausted"  # iteration budget reached; still a success
    FAILED = "failed"                      # provider or unexpected failure


@dataclass(frozen=True)
class AgentResult:
    """
    Terminal artifact of a run.

    Callers branch on `success` only; every other field is populated on both
    paths, so a failed run still shows what it did before failing.
    """
    success: bool
    agent_name: str
    actions: tuple[ActionRecord, ...] = ()
    thinking: str = ""
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    iterations: int = 0
    stop_reason: AgentStopReason = AgentStopReason.NO_TOOL_CALLS
    duration_ms: int = 0
    transcript: tuple[Turn, ...] = ()
    error: str | None = None

    @property
    def action_names(self) -> list[str]:
        return [a.tool for a in self.actions]

    def summary(self) -> dict[str, Any]:
        """Flat dict for logging."""
        return {
            "agent": self.agent_name,
            "success": self.success,
            "stop_reason": self.stop_reason.value,
            "iterations": self.iterations,
            "actions": len(self.actions),
            "input_tokens": self.total_input_tokens,
            "output_tokens": self.total_output_tokens,
            "duration_ms": self.duration_ms,
        }
