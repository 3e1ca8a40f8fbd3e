"""
Webhook Event Handlers
======================

Route GitHub events to the agent that handles them.

Event Types:
- issues.opened: IssueOrganizerAgent labels and comments
- pull_request.opened: PRReviewerAgent reviews the change
- push to the default branch: ReadmeGeneratorAgent refreshes README.md
- ping: logged; GitHub sends it when the webhook is created

Handler Pattern:
    1. Translate the payload into an AgentContext
    2. Decide whether this event needs an agent at all
    3. Run the agent
    4. If an issue/PR agent failed, leave a comment saying a human will
       take over

Error Handling:
    - Handlers run after the delivery has been acknowledged
    - A malformed payload is logged and dropped
    - A failure while posting the fallback comment is logged, never raised
"""

from typing import Any

from agentg.agent.core import AgentRunner
from agentg.agent.models import AgentContext, AgentResult
from agentg.github.installations import InstallationClientCache
from agentg.utils.logger import Logger
from agentg.webhooks.translators import (
    PayloadError,
    has_code_changes,
    translate_issue_event,
    translate_pull_request_event,
    translate_push_event,
)

logger = Logger("Handlers")

ISSUE_FALLBACK_COMMENT = (
    "Sorry, I encountered an error while analyzing this issue. "
    "A maintainer will review it manually.\n\n_Error: {error}_"
)
PR_FALLBACK_COMMENT = (
    "Sorry, I encountered an error while reviewing this pull request. "
    "A maintainer will review it manually.\n\n_Error: {error}_"
)
README_PATH = "README.md"


class EventRouter:
    """
    Dispatches webhook deliveries to agent runners.

    Example:
        router = EventRouter(clients, issue_runner, pr_runner, readme_runner)
        result = await router.route("issues", payload)
    """

    def __init__(
        self,
        clients: InstallationClientCache,
        issue_organizer: AgentRunner,
        pr_reviewer: AgentRunner,
        readme_generator: AgentRunner,
    ):
        self.clients = clients
        self.issue_organizer = issue_organizer
        self.pr_reviewer = pr_reviewer
        self.readme_generator = readme_generator

    async def route(self, event: str, payload: dict[str, Any]) -> AgentResult | None:
        """
        Handle one delivery.

        Returns:
            The agent's result, or None if no agent ran
        """
        action = payload.get("action") or "N/A"
        logger.debug(f"Routing event: {event}.{action}")

        try:
            if event == "issues":
                return await self.handle_issue_event(payload)
            if event == "pull_request":
                return await self.handle_pull_request_event(payload)
            if event == "push":
                return await self.handle_push_event(payload)
        except PayloadError as e:
            logger.error(f"Dropping {event} event", e)
            return None

        if event == "ping":
            logger.info("Ping event - webhook is connected!")
        else:
            logger.debug(f"Unhandled event type: {event}")
        return None

    # ==========================================================================
    # Issues
    # ==========================================================================

    async def handle_issue_event(self, payload: dict[str, Any]) -> AgentResult | None:
        context = translate_issue_event(payload)
        number = context.event_payload["issue_number"]
        logger.info(f"Processing issue #{number}: {context.event_action}")

        if context.event_action == "opened":
            logger.info(f"New issue opened: #{number}", {"title": context.event_payload["title"]})
            result = await self.issue_organizer.run(context)
            if not result.success:
                await self._post_fallback_comment(context, number, ISSUE_FALLBACK_COMMENT, result)
            return result

        if context.event_action in ("edited", "labeled"):
            logger.info(f"Issue {context.event_action} - no agent run")
        else:
            logger.debug(f"Unhandled issue action: {context.event_action}")
        return None

    # ==========================================================================
    # Pull requests
    # ==========================================================================

    async def handle_pull_request_event(self, payload: dict[str, Any]) -> AgentResult | None:
        context = translate_pull_request_event(payload)
        number = context.event_payload["pr_number"]
        logger.info(f"Processing PR #{number}: {context.event_action}")

        if context.event_action == "opened":
            logger.info(f"New PR opened: #{number}", {"title": context.event_payload["title"]})
            result = await self.pr_reviewer.run(context)
            if not result.success:
                await self._post_fallback_comment(context, number, PR_FALLBACK_COMMENT, result)
            return result

        if context.event_action == "synchronize":
            logger.info("PR updated with new commits")
        elif context.event_action == "ready_for_review":
            logger.info("PR marked ready for review")
        else:
            logger.debug(f"Unhandled PR action: {context.event_action}")
        return None

    # ==========================================================================
    # Push
    # ==========================================================================

    async def handle_push_event(self, payload: dict[str, Any]) -> AgentResult | None:
        context = translate_push_event(payload)
        branch = context.event_payload["branch"]
        default_branch = context.event_payload["default_branch"]
        files = list(context.event_payload["changed_files"])

        logger.info(
            f"Push to {context.full_name}:{branch}",
            {"commits": len(context.event_payload["commits"]), "by": context.triggered_by}
        )

        if branch != default_branch:
            logger.debug(f"Not default branch ({default_branch}), skipping")
            return None

        if not has_code_changes(files):
            logger.debug("No code file changes, skipping README generation")
            return None

        # The agent's own README commit triggers another push
        if README_PATH in files:
            logger.debug("README.md was changed in this push, skipping")
            return None

        logger.info(f"Generating README for {context.full_name}")
        result = await self.readme_generator.run(context)
        if not result.success:
            logger.error("README generation failed", data={"error": result.error})
        return result

    # ==========================================================================
    # Fallback
    # ==========================================================================

    async def _post_fallback_comment(
        self,
        context: AgentContext,
        number: int,
        template: str,
        result: AgentResult,
    ) -> None:
        """Tell the humans on the thread that the agent gave up."""
        logger.error(f"{result.agent_name} failed", data={"error": result.error})
        try:
            client = await self.clients.get(context.installation_id)
            await client.create_comment(
                context.owner,
                context.repo,
                number,
                template.format(error=result.error),
            )
        except Exception as e:
            logger.error(f"Could not post fallback comment on #{number}", e)
