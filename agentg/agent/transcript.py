"""
Transcript
==========

The ordered conversation exchanged with the language model.

A transcript is a list of turns. Each turn has a role and a tuple of
content blocks. There are exactly three kinds of block:

    TextBlock        text written by the user or the model
    ToolUse          a tool invocation requested by the model
    ToolResultBlock  the outcome of one tool invocation, keyed by its id

Which blocks may appear where:

    user turn       TextBlock* | ToolResultBlock+
    assistant turn  TextBlock? ToolUse*

Turns are only ever appended. The provider continues the conversation from
exactly this order, so nothing here reorders or edits a turn once written.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Iterator, Literal, Sequence, Union


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class TextBlock:
    text: str
    type: ClassVar[Literal["text"]] = "text"


@dataclass(frozen=True)
class ToolUse:
    """
    A single tool invocation requested by the model.

    Attributes:
        id: Correlation id chosen by the provider
        name: Tool name
        input: Arguments supplied by the model
        input_error: Why the raw arguments could not be decoded, if they
            could not; input is then empty and the tool must not run
    """
    id: str
    name: str
    input: dict[str, Any] = field(default_factory=dict)
    input_error: str | None = None
    type: ClassVar[Literal["tool_use"]] = "tool_use"

    def __post_init__(self):
        if not self.id:
            raise ValueError("ToolUse requires a correlation id")


@dataclass(frozen=True)
class ToolResultBlock:
    """
    The outcome of one tool invocation.

    Attributes:
        tool_use_id: Id of the ToolUse this answers
        content: JSON text; failures are {"error": "..."}
        is_error: True when the invocation failed
    """
    tool_use_id: str
    content: str
    is_error: bool = False
    type: ClassVar[Literal["tool_result"]] = "tool_result"

    def __post_init__(self):
        if not self.tool_use_id:
            raise ValueError("ToolResultBlock requires the id of the tool use it answers")


ContentBlock = Union[TextBlock, ToolUse, ToolResultBlock]


@dataclass(frozen=True)
class Turn:
    role: Role
    blocks: tuple[ContentBlock, ...]

    def __post_init__(self):
        if not self.blocks:
            raise ValueError("A turn needs at least one content block")
        if self.role is Role.USER:
            if any(isinstance(b, ToolUse) for b in self.blocks):
                raise ValueError("User turns cannot contain tool uses")
            kinds = {type(b) for b in self.blocks}
            if kinds == {TextBlock, ToolResultBlock}:
                raise ValueError("User turns hold either text or tool results, not both")
        elif any(isinstance(b, ToolResultBlock) for b in self.blocks):
            raise ValueError("Assistant turns cannot contain tool results")

    @classmethod
    def user(cls, text: str) -> "Turn":
        return cls(Role.USER, (TextBlock(text),))

    @classmethod
    def assistant(cls, text: str, tool_uses: Sequence[ToolUse] = ()) -> "Turn":
        blocks: list[ContentBlock] = []
        if text:
            blocks.append(TextBlock(text))
        blocks.extend(tool_uses)
        return cls(Role.ASSISTANT, tuple(blocks))

    @classmethod
    def tool_results(cls, results: Sequence[ToolResultBlock]) -> "Turn":
        return cls(Role.USER, tuple(results))

    @property
    def text(self) -> str:
        return "".join(b.text for b in self.blocks if isinstance(b, TextBlock))

    @property
    def tool_uses(self) -> tuple[ToolUse, ...]:
        return tuple(b for b in self.blocks if isinstance(b, ToolUse))

    @property
    def tool_result_blocks(self) -> tuple[ToolResultBlock, ...]:
        return tuple(b for b in self.blocks if isinstance(b, ToolResultBlock))


class Transcript:
    """
    Append-only sequence of turns.

    Example:
        transcript = Transcript()
        transcript.append(Turn.user("Please triage issue #7"))
        transcript.append(Turn.assistant("Labeling it.", [tool_use]))
        transcript.append(Turn.tool_results([result_block]))
    """

    def __init__(self, turns: Sequence[Turn] = ()):
        self._turns: list[Turn] = list(turns)

    def append(self, turn: Turn) -> None:
        self._turns.append(turn)

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    def snapshot(self) -> tuple[Turn, ...]:
        """Immutable copy of the turns so far."""
        return tuple(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))

    def __len__(self) -> int:
        return len(self._turns)

    def __getitem__(self, index: int) -> Turn:
        return self._turns[index]
