"""
Agent-G - Main Entry Point
==========================

This is the main entry point for the webhook server. It:
1. Loads configuration
2. Initializes all components (brain, tools, GitHub App, agents)
3. Wires the event router into the FastAPI app
4. Serves it with uvicorn

Run with:
    python -m agentg.main

Or after installing:
    agentg
"""

import sys

import uvicorn
from fastapi import FastAPI
from openai import AsyncOpenAI

from agentg.utils.config import Config, ConfigError, get_config
from agentg.utils.logger import Logger, configure_logging, parse_log_level

main_logger = Logger("Main")


def build_app(config: Config) -> FastAPI:
    """
    Build every component and return the ready-to-serve app.

    This is the only place that reads configuration; everything below
    receives plain values.
    """
    from agentg.agent import AgentRunner, Brain
    from agentg.agents import ISSUE_ORGANIZER, PR_REVIEWER, README_GENERATOR
    from agentg.github import GitHubApp, InstallationClientCache
    from agentg.tools import build_default_registry
    from agentg.webhooks import EventRouter, create_app

    # 1. Language model
    main_logger.info("Creating brain...", {"model": config.openai.model})
    brain = Brain(
        AsyncOpenAI(api_key=config.openai.api_key),
        model=config.openai.model,
        temperature=config.openai.temperature,
        max_output_tokens=config.openai.max_output_tokens,
    )

    # 2. Tools
    registry = build_default_registry()
    main_logger.info("Registered tools", {"tools": ",".join(registry.list_names())})

    # 3. GitHub App authentication
    main_logger.info("Setting up GitHub App...", {"app_id": config.github.app_id})
    github_app = GitHubApp(
        config.github.app_id,
        config.github.private_key,
        base_url=config.github.api_url,
    )
    clients = InstallationClientCache(github_app)

    # 4. Agents
    main_logger.info("Creating agents...")
    router = EventRouter(
        clients,
        issue_organizer=AgentRunner(ISSUE_ORGANIZER, brain, registry, clients),
        pr_reviewer=AgentRunner(PR_REVIEWER, brain, registry, clients),
        readme_generator=AgentRunner(README_GENERATOR, brain, registry, clients),
    )

    # 5. HTTP surface
    return create_app(
        router,
        webhook_secret=config.github.webhook_secret,
        environment=config.server.environment,
        on_shutdown=clients.aclose,
    )


def main() -> None:
    """
    Load configuration and serve the webhook endpoint until interrupted.
    """
    main_logger.info("Starting Agent-G...")

    try:
        config = get_config()
    except ConfigError as e:
        main_logger.error("Invalid configuration", e)
        sys.exit(1)

    configure_logging(config.log_level)
    app = build_app(config)

    main_logger.info(
        f"Listening on http://{config.server.host}:{config.server.port}",
        {"environment": config.server.environment}
    )
    main_logger.info("Webhook endpoint: /webhooks/github")
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=parse_log_level(config.log_level).name.lower(),
    )


def run():
    """
    Synchronous entry point.

    This is called when running with `agentg` command.
    """
    try:
        main()
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
