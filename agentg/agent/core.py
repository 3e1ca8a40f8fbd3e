"""
Agent Core
==========

The shared think/act loop every agent variant runs on.

A variant contributes only two prompt builders and an AgentConfig (see
AgentVariant). Everything else lives in AgentRunner:

    AgentContext
         │
         ▼
    Init: system prompt + initial message
         │
         ▼
    Thinking: Brain.converse(...) ◄──────────────┐
         │                                       │
    ┌─── Tool invocations? ───┐                  │
    │                         │                  │
    No                        Yes                │
    │                         │                  │
    ▼                         ▼                  │
    Done            Acting: run them in order,   │
                    append assistant turn and    │
                    tool-result turn ────────────┘
                    (unless end_turn or budget spent)

Termination:
- a turn with no tool invocations ends the run in that turn
- end_turn after acting ends the run
- reaching the iteration budget ends the run; this is still a success

Failures:
- a failing tool is not fatal; the model sees the failure next turn
- a failing provider call is fatal; the run returns success=False with
  everything accumulated so far
- run() never raises
"""

import time
from dataclasses import dataclass
from typing import Callable

from agentg.agent.brain import Brain, StopReason
from agentg.agent.models import (
    ActionRecord,
    AgentConfig,
    AgentContext,
    AgentResult,
    AgentStopReason,
)
from agentg.agent.tools_executor import ToolExecutor
from agentg.agent.transcript import Transcript, Turn
from agentg.github.installations import InstallationClientCache
from agentg.tools import ToolRegistry
from agentg.utils.logger import Logger

logger = Logger("Agent")

PromptBuilder = Callable[[AgentContext], str]


@dataclass(frozen=True)
class AgentVariant:
    """
    What makes one agent different from another.

    Attributes:
        config: Name, budget and allowed tools
        build_system_prompt: context -> system prompt
        build_initial_message: context -> first user message
    """
    config: AgentConfig
    build_system_prompt: PromptBuilder
    build_initial_message: PromptBuilder

    @property
    def name(self) -> str:
        return self.config.name


class AgentRunner:
    """
    Runs one agent variant against incoming contexts.

    Runners hold no per-run state, so one runner can serve any number of
    concurrent runs.

    Example:
        runner = AgentRunner(ISSUE_ORGANIZER, brain, registry, clients)
        result = await runner.run(context)

        if not result.success:
            ...  # post a fallback comment
    """

    def __init__(
        self,
        variant: AgentVariant,
        brain: Brain,
        registry: ToolRegistry,
        clients: InstallationClientCache,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
    ):
        """
        Args:
            variant: The agent to run
            brain: Provider-invocation contract
            registry: Every registered tool; narrowed to the variant's tools
            clients: Source of installation-scoped platform clients
            temperature: Per-agent override of the brain's default
            max_output_tokens: Per-agent override of the brain's default

        Raises:
            ValueError: If the variant names a tool that is not registered
        """
        try:
            self.tools = registry.subset(variant.config.tools)
        except KeyError as e:
            raise ValueError(f"{variant.name}: {e.args[0]}") from None

        self.variant = variant
        self.brain = brain
        self.clients = clients
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.definitions = self.tools.definitions()
        self.logger = logger.child(variant.name)

    @property
    def name(self) -> str:
        return self.variant.name

    async def run(self, context: AgentContext) -> AgentResult:
        """
        Run the think/act loop for one event.

        Args:
            context: What triggered the run

        Returns:
            AgentResult; success=False only if the provider (or something
            unexpected) failed. Never raises.
        """
        started = time.monotonic()
        budget = self.variant.config.iteration_budget
        log = self.logger

        log.info(
            "Starting agent",
            {"repo": context.full_name, "event": context.event, "budget": budget}
        )

        transcript = Transcript()
        actions: list[ActionRecord] = []
        thinking: list[str] = []
        input_tokens = 0
        output_tokens = 0
        iterations = 0
        stop_reason = AgentStopReason.BUDGET_EXHAUSTED

        try:
            system_prompt = self.variant.build_system_prompt(context)
            transcript.append(Turn.user(self.variant.build_initial_message(context)))

            client = await self.clients.get(context.installation_id)
            executor = ToolExecutor(self.tools, client, context.ambient_tool_input())

            while iterations < budget:
                iterations += 1
                log.info(f"Iteration {iterations}", {"budget": budget})

                response = await self.brain.converse(
                    system_prompt,
                    transcript,
                    self.definitions,
                    temperature=self.temperature,
                    max_output_tokens=self.max_output_tokens,
                )
                input_tokens += response.usage.input_tokens
                output_tokens += response.usage.output_tokens
                if response.text:
                    thinking.append(response.text)

                log.debug(
                    "LLM response",
                    {
                        "preview": response.text[:200],
                        "tool_uses": len(response.tool_uses),
                        "stop_reason": response.stop_reason.value,
                    }
                )

                if not response.tool_uses:
                    if response.text:
                        transcript.append(Turn.assistant(response.text))
                    log.info("No more tools to use, finishing")
                    stop_reason = AgentStopReason.NO_TOOL_CALLS
                    break

                results = await executor.execute_batch(response.tool_uses)
                actions.extend(ActionRecord.from_result(r) for r in results)

                transcript.append(Turn.assistant(response.text, response.tool_uses))
                transcript.append(Turn.tool_results(executor.format_for_transcript(results)))

                if response.stop_reason is StopReason.END_TURN:
                    log.info("Stop reason: end_turn")
                    stop_reason = AgentStopReason.END_TURN
                    break
            else:
                log.warning(f"Reached iteration budget ({budget}), returning partial progress")

        except Exception as e:
            result = AgentResult(
                success=False,
                agent_name=self.name,
                actions=tuple(actions),
                thinking="\n".join(thinking),
                total_input_tokens=input_tokens,
                total_output_tokens=output_tokens,
                iterations=iterations,
                stop_reason=AgentStopReason.FAILED,
                duration_ms=int((time.monotonic() - started) * 1000),
                transcript=transcript.snapshot(),
                error=str(e) or type(e).__name__,
            )
            log.error("Agent run failed", e, result.summary())
            return result

        result = AgentResult(
            success=True,
            agent_name=self.name,
            actions=tuple(actions),
            thinking="\n".join(thinking),
            total_input_tokens=input_tokens,
            total_output_tokens=output_tokens,
            iterations=iterations,
            stop_reason=stop_reason,
            duration_ms=int((time.monotonic() - started) * 1000),
            transcript=transcript.snapshot(),
        )
        log.info("Completed", result.summary())
        return result
