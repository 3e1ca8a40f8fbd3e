"""README generator: explores the repository and writes README.md."""

from agentg.agent.core import AgentVariant
from agentg.agent.models import AgentConfig, AgentContext
from agentg.prompts import (
    README_GENERATOR_SYSTEM_PROMPT,
    build_readme_generation_message,
    repository_context_section,
)

# Exploring the tree takes several listing calls before the write
CONFIG = AgentConfig(
    name="ReadmeGeneratorAgent",
    description="Automatically generates and updates README.md",
    max_iterations=10,
    tools=("get_repo_contents", "create_or_update_file"),
)


def build_system_prompt(context: AgentContext) -> str:
    return README_GENERATOR_SYSTEM_PROMPT + repository_context_section(
        context.full_name, context.event_type, context.triggered_by
    )


def build_initial_message(context: AgentContext) -> str:
    changed_files = list(context.event_payload.get("changed_files") or [])
    branch = context.event_payload.get("default_branch") or context.event_payload.get("branch") or "main"
    return build_readme_generation_message(context.owner, context.repo, changed_files, branch)


README_GENERATOR = AgentVariant(
    config=CONFIG,
    build_system_prompt=build_system_prompt,
    build_initial_message=build_initial_message,
)
