"""Webhook HTTP server using aiohttp."""

from __future__ import annotations

import json
from typing import Any

import structlog
from aiohttp import web

from linda.config import WebhookConfig
from linda.core.pipeline import DispatchError, WebhookPipeline
from linda.utils.logging import get_logger
from linda.webhooks.handlers import validate_github_signature
from linda.webhooks.models import WebhookEnvelope

log = get_logger(__name__)

SIGNATURE_HEADER = "X-Hub-Signature-256"
EVENT_HEADER = "X-GitHub-Event"
DELIVERY_HEADER = "X-GitHub-Delivery"


def _reply(status: int, message: str) -> web.Response:
    return web.json_response({"message": message}, status=status)


class WebhookServer:
    """Receives GitHub webhooks and answers with the pipeline's result."""

    def __init__(self, config: WebhookConfig, pipeline: WebhookPipeline) -> None:
        self._config = config
        self._pipeline = pipeline
        self._runner: web.AppRunner | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        if not self._config.secret:
            log.warning(
                "webhook_no_secret",
                msg="No webhook secret configured; every request will be answered with 500.",
            )
        app = self.build_app()
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._config.bind, self._config.port)
        await site.start()
        log.info(
            "webhook_server_started",
            bind=self._config.bind,
            port=self._config.port,
            path=self._config.path,
        )

    async def stop(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
        log.info("webhook_server_stopped")

    def build_app(self) -> web.Application:
        app = web.Application()
        # All methods, so non-POST requests get a 405 JSON body from us
        app.router.add_route("*", self._config.path, self._handle_webhook)
        return app

    # ------------------------------------------------------------------
    # Request handling
    # ------------------------------------------------------------------

    async def _handle_webhook(self, request: web.Request) -> web.Response:
        if request.method != "POST":
            return _reply(405, "Method Not Allowed")

        if not self._config.secret:
            log.error("webhook_rejected", reason="missing_secret")
            return _reply(500, "Missing webhook secret")

        # Signature is computed over these exact bytes, never a re-serialization
        body = await request.read()
        signature = request.headers.get(SIGNATURE_HEADER)
        event_type = request.headers.get(EVENT_HEADER)
        delivery = request.headers.get(DELIVERY_HEADER, "")

        if not signature or not event_type:
            log.info("webhook_rejected", reason="missing_headers", delivery=delivery)
            return _reply(400, "Missing GitHub webhook headers")

        if not validate_github_signature(body, signature, self._config.secret):
            log.warning("webhook_rejected", reason="invalid_signature", delivery=delivery)
            return _reply(401, "Invalid signature")

        try:
            payload: Any = json.loads(body)
        except ValueError:
            log.info("webhook_rejected", reason="invalid_json", delivery=delivery)
            return _reply(400, "Invalid JSON payload")

        envelope = WebhookEnvelope(
            event_type=event_type,
            payload=payload if isinstance(payload, dict) else {},
        )
        with structlog.contextvars.bound_contextvars(delivery=delivery, event_type=event_type):
            log.info("webhook_received")
            try:
                outcome = await self._pipeline.handle(envelope)
            except DispatchError as e:
                return _reply(502, str(e))

        return web.json_response({"status": "ok", "result": outcome.result})
