"""Entry point for the bot.

Usage::

    python main.py            # long polling (default)
    python main.py polling
    python main.py webhook    # FastAPI app served by uvicorn
"""

import argparse
import asyncio

from config import BOT_TOKEN, WEBHOOK_HOST, WEBHOOK_PORT
from core.logger import BotLogger
from sdk import get_default_client

logger = BotLogger.get_logger()


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Shift bot")
    parser.add_argument("mode", nargs="?", choices=("polling", "webhook"), default="polling")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    if not BOT_TOKEN:
        raise EnvironmentError("BOT_TOKEN environment variable is not set or is empty.")

    client = get_default_client()
    if args.mode == "webhook":
        import uvicorn

        from bot.webhook import create_app

        logger.info("Starting webhook server", extra={"host": WEBHOOK_HOST, "port": WEBHOOK_PORT})
        uvicorn.run(create_app(client), host=WEBHOOK_HOST, port=WEBHOOK_PORT)
        return

    from bot.dispatcher import run

    try:
        asyncio.run(run(client))
    except KeyboardInterrupt:
        logger.info("Polling stopped by user")


if __name__ == "__main__":
    main()
