"""
Agent Variants
==============

Each variant is an AgentVariant value: an AgentConfig plus the two prompt
builders. They all run on the same AgentRunner loop.

- ISSUE_ORGANIZER: labels and comments on new issues
- PR_REVIEWER: reviews new pull requests
- README_GENERATOR: keeps README.md in step with the code
"""

from agentg.agents.issue_organizer import ISSUE_ORGANIZER
from agentg.agents.pr_reviewer import PR_REVIEWER
from agentg.agents.readme_generator import README_GENERATOR

ALL_VARIANTS = (ISSUE_ORGANIZER, PR_REVIEWER, README_GENERATOR)

__all__ = ["ALL_VARIANTS", "ISSUE_ORGANIZER", "PR_REVIEWER", "README_GENERATOR"]
