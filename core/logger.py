"""BotLogger — project-wide JSON logger for the bot.

Every record is written as one JSON line to stdout and to the rotating file
``logs/shiftbot.log``.  The Bot API base URL embeds the bot token, so request
failures and tracebacks routinely carry it; registered secrets are masked in
the rendered output before it reaches any sink.

Usage::

    from core.logger import BotLogger

    logger = BotLogger.get_logger()
    logger.info("The message was sent", extra={"sent_message_id": 17, "chat_id": 42})

    BotLogger.add_secret(BOT_TOKEN)
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Optional

_MASK = "***"


class _JsonFormatter(logging.Formatter):
    """Render a record as a single JSON object.

    The fixed fields are ``timestamp``, ``level``, ``logger``, ``message``,
    ``module`` and ``func_name``.  Routing context passed through ``extra``
    (``update_id``, ``message_type``, ``callback_query_id``, ``error_message``
    and so on) is added as top-level keys; tracebacks go under ``exc_info``.
    """

    # Attributes present on every LogRecord; anything else came from ``extra``.
    _RECORD_ATTRS: frozenset[str] = frozenset(vars(logging.LogRecord(
        name="", level=0, pathname="", lineno=0, msg="", args=(), exc_info=None,
    ))) | {"message", "asctime"}

    def __init__(self, secrets: set[str]) -> None:
        super().__init__()
        self._secrets = secrets

    def _mask(self, text: str) -> str:
        for secret in self._secrets:
            text = text.replace(secret, _MASK)
        return text

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "func_name": record.funcName,
        }
        entry.update(
            (key, value) for key, value in vars(record).items()
            if key not in self._RECORD_ATTRS and key not in entry
        )
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return self._mask(json.dumps(entry, ensure_ascii=False, default=str))


class BotLogger:
    """Owner of the shared ``shiftbot`` logger and its two handlers.

    Child loggers such as ``shiftbot.sdk`` propagate into the same handlers.
    """

    NAME: str = "shiftbot"
    LOG_DIR: str = "logs"
    LOG_FILE: str = "shiftbot.log"
    MAX_BYTES: int = 5 * 1024 * 1024
    BACKUP_COUNT: int = 5

    _logger: Optional[logging.Logger] = None
    _secrets: set[str] = set()

    @classmethod
    def _build(cls, level: int) -> logging.Logger:
        logger = logging.getLogger(cls.NAME)
        logger.setLevel(level)
        if logger.handlers:
            return logger

        formatter = _JsonFormatter(cls._secrets)
        os.makedirs(cls.LOG_DIR, exist_ok=True)
        handlers: list[logging.Handler] = [
            logging.StreamHandler(),
            RotatingFileHandler(
                os.path.join(cls.LOG_DIR, cls.LOG_FILE),
                maxBytes=cls.MAX_BYTES,
                backupCount=cls.BACKUP_COUNT,
                encoding="utf-8",
            ),
        ]
        for handler in handlers:
            handler.setFormatter(formatter)
            logger.addHandler(handler)
        return logger

    @classmethod
    def get_logger(cls, level: int = logging.INFO) -> logging.Logger:
        """Return the shared logger, creating it on first use.

        *level* only applies to that first call; use :meth:`set_level` later.
        """
        if cls._logger is None:
            cls._logger = cls._build(level)
        return cls._logger

    @classmethod
    def set_level(cls, level: int | str) -> None:
        """Change the level of the shared logger.

        Raises:
            ValueError: If *level* is not a known level name.
        """
        cls.get_logger().setLevel(level)

    @classmethod
    def add_secret(cls, secret: Optional[str]) -> None:
        """Mask *secret* in every record rendered from now on.  Empty values are ignored."""
        if secret:
            cls._secrets.add(secret)
