"""
Tool Executor
=============

Runs the tool invocations the model requests and turns their outcomes
back into transcript entries.

The executor:
1. Merges the ambient context (owner, repo) into each invocation's input
2. Looks the tool up by name and runs it against the platform client
3. Captures success or failure, and the elapsed time
4. Formats a batch of results as tool-result blocks for the next turn

Ambient fields always win over fields of the same name supplied by the
model: a run can only ever act on the repository that triggered it.

Nothing raised by a tool escapes execute(). An unknown tool, a validation
error and a platform error all come back as a failed
ToolExecutionResult, which the model sees on its next turn and can react
to.
"""

import json
import time
from typing import Any, Mapping, Sequence

from agentg.agent.models import ToolExecutionResult
from agentg.agent.transcript import ToolResultBlock, ToolUse
from agentg.github.client import GitHubClient
from agentg.tools import ToolRegistry
from agentg.utils.logger import Logger

logger = Logger("ToolExecutor")


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class ToolExecutor:
    """
    Executes tool invocations for one run.

    Example:
        executor = ToolExecutor(registry, client, {"owner": "acme", "repo": "api"})

        results = await executor.execute_batch(response.tool_uses)
        transcript.append(Turn.tool_results(executor.format_for_transcript(results)))
    """

    def __init__(
        self,
        registry: ToolRegistry,
        client: GitHubClient,
        ambient: Mapping[str, Any],
    ):
        """
        Args:
            registry: Tools this run may invoke
            client: Installation-scoped platform client
            ambient: Fields forced into every tool input
        """
        self.registry = registry
        self.client = client
        self.ambient = dict(ambient)

    def enrich(self, tool_input: Mapping[str, Any]) -> dict[str, Any]:
        """Model-supplied input with the ambient fields laid on top."""
        return {**tool_input, **self.ambient}

    async def execute(self, tool_use: ToolUse) -> ToolExecutionResult:
        """
        Execute a single tool invocation.

        Args:
            tool_use: The invocation requested by the model

        Returns:
            A success with the tool's output, or a failure with its error
        """
        started = time.monotonic()
        enriched = self.enrich(tool_use.input)

        if tool_use.input_error:
            logger.warning(tool_use.input_error, {"id": tool_use.id})
            return ToolExecutionResult.failed(
                tool_use.id, tool_use.name, enriched, tool_use.input_error, _elapsed_ms(started)
            )

        tool = self.registry.get(tool_use.name)
        if tool is None:
            available = ", ".join(self.registry.list_names()) or "none"
            error = f"Unknown tool '{tool_use.name}'. Available tools: {available}"
            logger.warning(error)
            return ToolExecutionResult.failed(
                tool_use.id, tool_use.name, enriched, error, _elapsed_ms(started)
            )

        logger.info(f"Executing tool: {tool_use.name}", {"id": tool_use.id})

        try:
            output = await tool.execute(self.client, enriched)
        except Exception as e:
            error = str(e) or type(e).__name__
            elapsed = _elapsed_ms(started)
            logger.warning(
                f"Tool {tool_use.name} failed",
                {"error_type": type(e).__name__, "error": error, "ms": elapsed}
            )
            return ToolExecutionResult.failed(
                tool_use.id, tool_use.name, enriched, error, elapsed
            )

        elapsed = _elapsed_ms(started)
        logger.debug(f"Tool {tool_use.name} succeeded", {"ms": elapsed})
        return ToolExecutionResult.succeeded(
            tool_use.id,
            tool_use.name,
            enriched,
            {} if output is None else output,
            elapsed,
        )

    async def execute_batch(self, tool_uses: Sequence[ToolUse]) -> list[ToolExecutionResult]:
        """
        Execute invocations one after another, in the order requested.

        A later invocation may depend on an earlier one's side effect, so
        they are never run concurrently. A failure does not stop the rest.

        Returns:
            One result per invocation, in the same order
        """
        results = []

        for tool_use in tool_uses:
            result = await self.execute(tool_use)
            if not result.success:
                logger.warning(f"Tool {tool_use.name} failed, continuing with next tool")
            results.append(result)

        return results

    @staticmethod
    def format_for_transcript(results: Sequence[ToolExecutionResult]) -> list[ToolResultBlock]:
        """
        Format results as tool-result blocks for the next model turn.

        Successful outputs are serialized as {"result": ...}; failures as
        {"error": "..."} with is_error set. The chat completions API drops
        is_error, so the envelope alone must tell the two apart.
        """
        blocks = []
        for result in results:
            if result.success:
                content = json.dumps({"result": result.output}, default=str)
            else:
                content = json.dumps({"error": result.error})
            blocks.append(ToolResultBlock(
                tool_use_id=result.tool_use_id,
                content=content,
                is_error=not result.success,
            ))
        return blocks
