"""
GitHub Webhooks
===============

The thin inbound edge in front of the agents:
- signature: X-Hub-Signature-256 verification
- translators: webhook payload -> AgentContext
- handlers: EventRouter, which picks and runs the right agent
- app: FastAPI application serving the webhook endpoint
"""

from agentg.webhooks.app import create_app
from agentg.webhooks.handlers import EventRouter
from agentg.webhooks.signature import verify_signature
from agentg.webhooks.translators import PayloadError

__all__ = ["EventRouter", "PayloadError", "create_app", "verify_signature"]
