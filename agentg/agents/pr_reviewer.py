"""Pull request reviewer: reads the diff, labels the PR and leaves a review."""

from agentg.agent.core import AgentVariant
from agentg.agent.models import AgentConfig, AgentContext
from agentg.prompts import (
    PR_REVIEWER_SYSTEM_PROMPT,
    build_pr_review_message,
    repository_context_section,
)

# diff + analysis + labels + comment, with room for one correction
CONFIG = AgentConfig(
    name="PRReviewerAgent",
    description="Automatically reviews GitHub pull requests",
    max_iterations=7,
    tools=("get_pr_diff", "add_label", "create_comment"),
)


def build_system_prompt(context: AgentContext) -> str:
    return PR_REVIEWER_SYSTEM_PROMPT + repository_context_section(
        context.full_name, context.event, context.triggered_by
    )


def build_initial_message(context: AgentContext) -> str:
    payload = context.event_payload
    return build_pr_review_message(
        pr_number=payload["pr_number"],
        title=payload.get("title", ""),
        body=payload.get("body"),
        author=payload.get("author", ""),
        head_branch=payload.get("head_branch", ""),
        base_branch=payload.get("base_branch", ""),
        is_draft=bool(payload.get("is_draft")),
    )


PR_REVIEWER = AgentVariant(
    config=CONFIG,
    build_system_prompt=build_system_prompt,
    build_initial_message=build_initial_message,
)
