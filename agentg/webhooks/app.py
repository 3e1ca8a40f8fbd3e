"""
Webhook Server
==============

FastAPI application that receives GitHub webhook deliveries.

GitHub expects an answer within ten seconds, while an agent run can take
much longer. So every delivery is:
1. Verified (signature, production only) and parsed
2. Acknowledged immediately with 200
3. Processed as a background task after the response has been sent

Endpoints:
    GET  /health            liveness check
    POST /webhooks/github   webhook deliveries
"""

import json
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.responses import JSONResponse

from agentg import __version__
from agentg.utils.logger import Logger
from agentg.webhooks.handlers import EventRouter
from agentg.webhooks.signature import verify_signature

logger = Logger("Webhooks")


async def process_event(router: EventRouter, event: str, delivery_id: str, payload: dict[str, Any]) -> None:
    """Background task body; nothing may escape it."""
    try:
        await router.route(event, payload)
    except Exception as e:
        logger.error(f"Error processing webhook {delivery_id}", e)


def create_app(
    router: EventRouter,
    *,
    webhook_secret: str,
    environment: str = "development",
    on_shutdown: Callable[[], Awaitable[None]] | None = None,
) -> FastAPI:
    """
    Build the webhook application.

    Args:
        router: Dispatches verified deliveries to agents
        webhook_secret: Shared secret for X-Hub-Signature-256
        environment: Signatures are enforced only in "production"
        on_shutdown: Awaited when the server stops (e.g. close clients)
    """

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Agent-G webhook server started", {"environment": environment})
        yield
        if on_shutdown is not None:
            await on_shutdown()
        logger.info("Shutdown complete")

    app = FastAPI(title="Agent-G", version=__version__, lifespan=_lifespan)

    @app.get("/health")
    async def health() -> JSONResponse:
        return JSONResponse({
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
            "environment": environment,
        })

    @app.post("/webhooks/github")
    async def github_webhook(request: Request, background_tasks: BackgroundTasks) -> JSONResponse:
        body = await request.body()
        signature = request.headers.get("x-hub-signature-256")
        event = request.headers.get("x-github-event", "")
        delivery_id = request.headers.get("x-github-delivery", "")

        logger.info(f"Webhook received: {event} ({delivery_id})")

        if environment == "production" and not verify_signature(body, signature, webhook_secret):
            logger.error("Invalid webhook signature", data={"delivery": delivery_id})
            return JSONResponse({"error": "Invalid signature"}, status_code=401)

        try:
            payload = json.loads(body)
        except ValueError:
            logger.error("Invalid JSON payload", data={"delivery": delivery_id})
            return JSONResponse({"error": "Invalid JSON"}, status_code=400)
        if not isinstance(payload, dict):
            return JSONResponse({"error": "Invalid JSON"}, status_code=400)

        background_tasks.add_task(process_event, router, event, delivery_id, payload)
        return JSONResponse({"received": True, "event": event, "delivery_id": delivery_id})

    return app
