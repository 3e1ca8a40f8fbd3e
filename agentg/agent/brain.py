"""
Brain
=====

One call to the language model per turn.

Brain.converse() takes the system prompt, the transcript so far and the
tool definitions the agent may use, and returns what the model produced:

    text          its prose (possibly empty)
    tool_uses     the tool invocations it requested, in response order
    stop_reason   why it stopped generating
    usage         input/output tokens billed for the call

Translation to the chat completions format keeps the transcript order
exactly:

    system prompt                -> {"role": "system"}
    user text turn               -> {"role": "user"}
    assistant turn               -> {"role": "assistant", "tool_calls": [...]}
    user turn with tool results  -> one {"role": "tool"} per result, in order

Any failure to get a complete answer from the provider is raised as
ProviderError. Nothing is retried here.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from openai import AsyncOpenAI, OpenAIError

from agentg.agent.transcript import Role, TextBlock, ToolResultBlock, ToolUse, Transcript
from agentg.tools import ToolDefinition
from agentg.utils.logger import Logger

logger = Logger("Brain")

DEFAULT_MODEL = "gpt-4o"
DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_OUTPUT_TOKENS = 4096


class ProviderError(Exception):
    """The language model call could not be completed."""


class StopReason(str, Enum):
    END_TURN = "end_turn"
    TOOL_USE = "tool_use"
    MAX_TOKENS = "max_tokens"
    OTHER = "other"

    @classmethod
    def from_finish_reason(cls, finish_reason: str | None) -> "StopReason":
        return _FINISH_REASONS.get(finish_reason or "", cls.OTHER)


_FINISH_REASONS = {
    "stop": StopReason.END_TURN,
    "tool_calls": StopReason.TOOL_USE,
    "function_call": StopReason.TOOL_USE,
    "length": StopReason.MAX_TOKENS,
}


@dataclass(frozen=True)
class TokenUsage:
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass(frozen=True)
class BrainResponse:
    text: str
    tool_uses: tuple[ToolUse, ...] = ()
    stop_reason: StopReason = StopReason.END_TURN
    usage: TokenUsage = field(default_factory=TokenUsage)

    @property
    def has_tool_uses(self) -> bool:
        return bool(self.tool_uses)


def to_openai_messages(system_prompt: str, transcript: Transcript) -> list[dict[str, Any]]:
    """
    Translate a transcript into chat completion messages.

    Args:
        system_prompt: Sent as the leading system message
        transcript: Turns in causal order

    Returns:
        Messages in the same order as the transcript
    """
    messages: list[dict[str, Any]] = [{"role": "system", "content": system_prompt}]

    for turn in transcript:
        if turn.role is Role.ASSISTANT:
            message: dict[str, Any] = {"role": "assistant", "content": turn.text or None}
            if turn.tool_uses:
                message["tool_calls"] = [
                    {
                        "id": use.id,
                        "type": "function",
                        "function": {"name": use.name, "arguments": json.dumps(use.input)},
                    }
                    for use in turn.tool_uses
                ]
            messages.append(message)
            continue

        for block in turn.blocks:
            if isinstance(block, ToolResultBlock):
                messages.append({
                    "role": "tool",
                    "tool_call_id": block.tool_use_id,
                    "content": block.content,
                })
            elif isinstance(block, TextBlock):
                messages.append({"role": "user", "content": block.text})

    return messages


def _parse_arguments(raw: str | None, tool_name: str) -> tuple[dict[str, Any], str | None]:
    """Decode tool-call arguments into (input, error); error is None on success."""
    try:
        arguments = json.loads(raw or "{}")
    except json.JSONDecodeError as e:
        logger.warning(f"Unparseable arguments for {tool_name}: {e}")
        return {}, f"Invalid JSON arguments for tool '{tool_name}': {e}"
    if not isinstance(arguments, dict):
        logger.warning(f"Arguments for {tool_name} are not an object")
        return {}, f"Arguments for tool '{tool_name}' must be a JSON object"
    return arguments, None


class Brain:
    """
    Provider-invocation contract over the OpenAI chat completions API.

    Example:
        brain = Brain(AsyncOpenAI(api_key=...), model="gpt-4o")
        response = await brain.converse(system_prompt, transcript, definitions)
        for use in response.tool_uses:
            ...
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

    async def converse(
        self,
        system_prompt: str,
        transcript: Transcript,
        tools: Sequence[ToolDefinition],
        *,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
    ) -> BrainResponse:
        """
        Ask the model for its next turn.

        Raises:
            ProviderError: On any provider failure or an empty response
        """
        messages = to_openai_messages(system_prompt, transcript)
        request: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": max_output_tokens or self.max_output_tokens,
        }
        if tools:
            request["tools"] = [tool.to_openai_function() for tool in tools]
            request["tool_choice"] = "auto"

        logger.debug(
            "Calling provider",
            {"model": self.model, "messages": len(messages), "tools": len(tools)}
        )

        try:
            response = await self.client.chat.completions.create(**request)
        except OpenAIError as e:
            raise ProviderError(f"Provider call failed: {e}") from e

        if not response.choices:
            raise ProviderError("Provider returned no choices")

        try:
            return self._parse_response(response)
        except ValueError as e:
            raise ProviderError(f"Malformed provider response: {e}") from e

    def _parse_response(self, response: Any) -> BrainResponse:
        choice = response.choices[0]
        message = choice.message

        tool_uses = []
        for call in message.tool_calls or []:
            arguments, error = _parse_arguments(call.function.arguments, call.function.name)
            tool_uses.append(ToolUse(
                id=call.id,
                name=call.function.name,
                input=arguments,
                input_error=error,
            ))

        usage = response.usage
        result = BrainResponse(
            text=message.content or "",
            tool_uses=tuple(tool_uses),
            stop_reason=StopReason.from_finish_reason(choice.finish_reason),
            usage=TokenUsage(
                input_tokens=(usage.prompt_tokens or 0) if usage else 0,
                output_tokens=(usage.completion_tokens or 0) if usage else 0,
            ),
        )

        logger.debug(
            "Provider response",
            {
                "tool_uses": len(result.tool_uses),
                "stop_reason": result.stop_reason.value,
                "input_tokens": result.usage.input_tokens,
                "output_tokens": result.usage.output_tokens,
            }
        )
        return result
