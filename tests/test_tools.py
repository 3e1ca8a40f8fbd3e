"""Tests for the tool registry and input validation."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, Field

from agentg.tools import (
    ToolDefinition,
    ToolRegistry,
    ToolValidationError,
    build_default_registry,
    validate_input,
)

from tests.conftest import recording_tool


class TestToolDefinition:
    def test_openai_format(self):
        definition = ToolDefinition(
            name="add_label",
            description="Add labels",
            input_schema={"type": "object", "properties": {}, "required": ["labels"]},
        )

        assert definition.required == ["labels"]
        assert definition.to_openai_function() == {
            "type": "function",
            "function": {
                "name": "add_label",
                "description": "Add labels",
                "parameters": {"type": "object", "properties": {}, "required": ["labels"]},
            },
        }


class TestToolRegistry:
    def test_register_and_lookup(self):
        registry = ToolRegistry([recording_tool("a", []), recording_tool("b", [])])

        assert "a" in registry
        assert "zzz" not in registry
        assert len(registry) == 2
        assert registry.get("a").name == "a"
        assert registry.get("zzz") is None
        assert registry.list_names() == ["a", "b"]

    def test_duplicate_rejected(self):
        registry = ToolRegistry([recording_tool("a", [])])
        with pytest.raises(ValueError, match="already registered"):
            registry.register(recording_tool("a", []))

    def test_frozen_rejects_registration(self):
        registry = ToolRegistry().freeze()
        assert registry.frozen
        with pytest.raises(RuntimeError):
            registry.register(recording_tool("a", []))

    def test_definitions_in_requested_order(self):
        registry = ToolRegistry([recording_tool("a", []), recording_tool("b", [])])

        assert [d.name for d in registry.definitions(["b", "a"])] == ["b", "a"]
        assert [d.name for d in registry.definitions()] == ["a", "b"]

    def test_definitions_unknown_name(self):
        with pytest.raises(KeyError, match="nope"):
            ToolRegistry().definitions(["nope"])

    def test_subset(self):
        registry = ToolRegistry([recording_tool("a", []), recording_tool("b", [])])
        subset = registry.subset(["b"])

        assert subset.list_names() == ["b"]
        assert subset.frozen
        assert len(registry) == 2

    def test_subset_unknown_name(self):
        with pytest.raises(KeyError):
            ToolRegistry([recording_tool("a", [])]).subset(["a", "b"])


class TestDefaultRegistry:
    def test_contains_every_github_tool(self):
        registry = build_default_registry()

        assert registry.frozen
        assert set(registry.list_names()) == {
            "add_label",
            "create_comment",
            "assign_user",
            "get_pr_diff",
            "get_repo_contents",
            "create_or_update_file",
        }

    def test_schemas_hide_ambient_fields(self):
        for definition in build_default_registry().definitions():
            assert "owner" not in definition.input_schema["properties"]
            assert "repo" not in definition.input_schema["properties"]


class _Sample(BaseModel):
    issue_number: int = Field(gt=0)
    labels: list[str]


class TestValidateInput:
    def test_valid(self):
        args = validate_input(_Sample, {"issue_number": 3, "labels": ["bug"], "extra": 1})
        assert args.issue_number == 3

    def test_lists_every_problem(self):
        with pytest.raises(ToolValidationError) as exc:
            validate_input(_Sample, {"issue_number": 0})

        message = str(exc.value)
        assert message.startswith("Invalid input for _Sample:")
        assert "issue_number" in message
        assert "labels" in message

    def test_is_a_value_error(self):
        assert issubclass(ToolValidationError, ValueError)
