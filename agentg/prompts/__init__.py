"""Prompt text and initial-message builders for each agent variant."""

from agentg.prompts.issue_analysis import (
    ISSUE_ORGANIZER_SYSTEM_PROMPT,
    build_issue_analysis_message,
)
from agentg.prompts.pr_review import PR_REVIEWER_SYSTEM_PROMPT, build_pr_review_message
from agentg.prompts.readme_generation import (
    README_GENERATOR_SYSTEM_PROMPT,
    build_readme_generation_message,
)


def repository_context_section(
    full_name: str, event: str, triggered_by: str
) -> str:
    """The section every system prompt ends with."""
    return (
        "\n\n## Repository Context\n"
        f"- Repository: {full_name}\n"
        f"- Event: {event}\n"
        f"- Triggered by: @{triggered_by}\n"
    )


__all__ = [
    "ISSUE_ORGANIZER_SYSTEM_PROMPT",
    "PR_REVIEWER_SYSTEM_PROMPT",
    "README_GENERATOR_SYSTEM_PROMPT",
    "build_issue_analysis_message",
    "build_pr_review_message",
    "build_readme_generation_message",
    "repository_context_section",
]
