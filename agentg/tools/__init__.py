"""
Tools System
============

Tools are the side-effecting actions the language model may request:
labeling an issue, commenting, reading a diff, writing a file.

Each tool has two halves:
- a ToolDefinition (name, description, input schema) that is shown to
  the model, and
- an async execute function that performs the action against the
  platform client.

How Tools Work:
1. The agent sends the definitions of its allowed tools with every turn
2. The model answers with zero or more tool invocations
3. ToolExecutor looks each one up here by name and runs it
4. The outcome is fed back to the model on the next turn

The registry is a plain name -> Tool table. It is filled once at startup
by build_default_registry() and frozen; adding a tool means registering
one more entry, never editing a dispatch branch.

Validation of a tool's input happens inside the tool itself
(validate_input), so a bad call fails with a message that names the
offending fields rather than a generic runtime error.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterable, TypeVar

from pydantic import BaseModel, ValidationError

from agentg.utils.logger import Logger

if TYPE_CHECKING:
    from agentg.github.client import GitHubClient

logger = Logger("Tools")

ModelT = TypeVar("ModelT", bound=BaseModel)


class ToolValidationError(ValueError):
    """Raised by a tool when its input does not match the declared shape."""


@dataclass(frozen=True)
class ToolDefinition:
    """
    What the model sees of a tool.

    Attributes:
        name: Unique identifier for the tool
        description: What the tool does (shown to the model)
        input_schema: JSON Schema of the arguments the model supplies

    Example:
        ToolDefinition(
            name="add_label",
            description="Add labels to an issue or pull request.",
            input_schema={
                "type": "object",
                "properties": {
                    "issue_number": {"type": "integer"},
                    "labels": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["issue_number", "labels"],
            },
        )
    """
    name: str
    description: str
    input_schema: dict

    @property
    def required(self) -> list[str]:
        return list(self.input_schema.get("required", []))

    def to_openai_function(self) -> dict:
        """
        Convert to OpenAI function calling format.

        Returns:
            Dict in the format expected by the chat completions API
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_schema
            }
        }


ToolFunction = Callable[["GitHubClient", dict[str, Any]], Awaitable[Any]]


@dataclass(frozen=True)
class Tool:
    """A ToolDefinition paired with the function that performs it."""
    definition: ToolDefinition
    execute: ToolFunction

    @property
    def name(self) -> str:
        return self.definition.name


def validate_input(model: type[ModelT], params: dict[str, Any]) -> ModelT:
    """
    Validate tool arguments against a pydantic model.

    Raises:
        ToolValidationError: Listing every invalid or missing field
    """
    try:
        return model.model_validate(params)
    except ValidationError as e:
        problems = []
        for err in e.errors():
            location = ".".join(str(part) for part in err["loc"]) or "input"
            problems.append(f"{location}: {err['msg']}")
        raise ToolValidationError(
            f"Invalid input for {model.__name__}: " + "; ".join(problems)
        ) from None


class ToolRegistry:
    """
    Name -> Tool lookup table.

    Example:
        registry = ToolRegistry()
        registry.register(add_label_tool)
        registry.freeze()

        tool = registry.get("add_label")
        schemas = registry.definitions(["add_label"])
    """

    def __init__(self, tools: Iterable[Tool] = ()):
        self._tools: dict[str, Tool] = {}
        self._frozen = False
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        """
        Register a tool.

        Raises:
            ValueError: If a tool with this name already exists
            RuntimeError: If the registry has been frozen
        """
        if self._frozen:
            raise RuntimeError(f"Cannot register '{tool.name}': registry is frozen")
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def freeze(self) -> "ToolRegistry":
        """Reject any further registration."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def list_names(self) -> list[str]:
        return list(self._tools.keys())

    def definitions(self, names: Iterable[str] | None = None) -> list[ToolDefinition]:
        """
        Definitions for the given tool names, in the order given.

        Args:
            names: Tool names; None means every registered tool

        Raises:
            KeyError: If a name is not registered
        """
        if names is None:
            return [tool.definition for tool in self._tools.values()]
        missing = [name for name in names if name not in self._tools]
        if missing:
            raise KeyError(f"Unknown tools: {', '.join(missing)}")
        return [self._tools[name].definition for name in names]

    def subset(self, names: Iterable[str]) -> "ToolRegistry":
        """
        A frozen registry holding only the named tools.

        Used to give each agent variant its closed set of tools.

        Raises:
            KeyError: If a name is not registered
        """
        names = list(names)
        self.definitions(names)
        return ToolRegistry(self._tools[name] for name in names).freeze()


def build_default_registry() -> ToolRegistry:
    """Create the frozen registry holding every platform tool."""
    # Imported here because github_tools imports this module
    from agentg.tools.github_tools import GITHUB_TOOLS

    registry = ToolRegistry(GITHUB_TOOLS).freeze()
    logger.info(f"Registered {len(registry)} tools", {"tools": ",".join(registry.list_names())})
    return registry


__all__ = [
    "Tool",
    "ToolDefinition",
    "ToolFunction",
    "ToolRegistry",
    "ToolValidationError",
    "build_default_registry",
    "validate_input",
]
