"""Webhook transport for the bot.

Provides a FastAPI application that feeds each posted update to
:func:`bot.dispatcher.process_update`.  Both endpoints answer HTTP 200 no
matter what happened while handling the update, so the platform never
retries a delivery; failures are only logged.  The payload is not
authenticated.
"""

import contextlib
from typing import AsyncIterator

from fastapi import FastAPI, Request, Response

from config import WEBHOOK_URL
from core.logger import BotLogger
from sdk.client import BotClient
from bot.dispatcher import process_update
from bot.errors import log_error

logger = BotLogger.get_logger()


def create_app(client: BotClient, webhook_url: str | None = WEBHOOK_URL) -> FastAPI:
    """Create the webhook application bound to *client*.

    When *webhook_url* is set, it is registered with the platform on startup
    and removed again on shutdown.

    Usage::

        import uvicorn
        from sdk import get_default_client
        from bot.webhook import create_app

        uvicorn.run(create_app(get_default_client()), host="0.0.0.0", port=8443)
    """

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if webhook_url:
            await client.set_webhook(webhook_url)
            logger.info("Webhook registered", extra={"webhook_url": webhook_url})
        try:
            yield
        finally:
            if webhook_url:
                try:
                    await client.delete_webhook()
                    logger.info("Webhook removed", extra={"webhook_url": webhook_url})
                except Exception as exc:
                    log_error(exc)

    app = FastAPI(title="shiftbot webhook", lifespan=lifespan)

    async def _handle(request: Request) -> Response:
        try:
            payload = await request.json()
            await process_update(client, payload)
        except Exception as exc:
            log_error(exc)
        return Response(status_code=200)

    @app.post("/")
    async def post_update(request: Request) -> Response:
        """Receive an update pushed by the platform."""
        return await _handle(request)

    @app.get("/bot")
    async def get_update(request: Request) -> Response:
        """Receive an update sent as the body of a GET request."""
        return await _handle(request)

    return app
