"""Issue organizer: labels a newly opened issue and explains why."""

from agentg.agent.core import AgentVariant
from agentg.agent.models import AgentConfig, AgentContext
from agentg.prompts import (
    ISSUE_ORGANIZER_SYSTEM_PROMPT,
    build_issue_analysis_message,
    repository_context_section,
)

CONFIG = AgentConfig(
    name="IssueOrganizerAgent",
    description="Automatically analyzes and labels GitHub issues",
    max_iterations=5,
    tools=("add_label", "create_comment"),
)


def build_system_prompt(context: AgentContext) -> str:
    return ISSUE_ORGANIZER_SYSTEM_PROMPT + repository_context_section(
        context.full_name, context.event, context.triggered_by
    )


def build_initial_message(context: AgentContext) -> str:
    payload = context.event_payload
    return build_issue_analysis_message(
        issue_number=payload["issue_number"],
        title=payload.get("title", ""),
        body=payload.get("body"),
        author=payload.get("author", ""),
        existing_labels=list(payload.get("labels") or []),
    )


ISSUE_ORGANIZER = AgentVariant(
    config=CONFIG,
    build_system_prompt=build_system_prompt,
    build_initial_message=build_initial_message,
)
