"""
Agent System
============

The think/act loop that drives every agent:

- AgentRunner: runs one variant's loop for an AgentContext
- Brain: one language-model call per turn
- ToolExecutor: runs requested tools and formats their results
- Transcript: the append-only conversation
"""

from agentg.agent.brain import Brain, BrainResponse, ProviderError, StopReason, TokenUsage
from agentg.agent.core import AgentRunner, AgentVariant
from agentg.agent.models import (
    ActionRecord,
    AgentConfig,
    AgentContext,
    AgentResult,
    AgentStopReason,
    ToolExecutionResult,
)
from agentg.agent.tools_executor import ToolExecutor
from agentg.agent.transcript import Role, TextBlock, ToolResultBlock, ToolUse, Transcript, Turn

__all__ = [
    "ActionRecord",
    "AgentConfig",
    "AgentContext",
    "AgentResult",
    "AgentRunner",
    "AgentStopReason",
    "AgentVariant",
    "Brain",
    "BrainResponse",
    "ProviderError",
    "Role",
    "StopReason",
    "TextBlock",
    "TokenUsage",
    "ToolExecutionResult",
    "ToolExecutor",
    "ToolResultBlock",
    "ToolUse",
    "Transcript",
    "Turn",
]
