"""Static reply texts and the shift-report loader."""

import functools

from config import OPEN_DAY_REPORT_PATH
from core.logger import BotLogger

logger = BotLogger.get_logger()

# Sender-chat usernames that get the short greeting from /open_day.
OPEN_DAY_GREETED_USERNAMES: frozenset[str] = frozenset({"@lesenokkk7", "@UtkirHawk"})

OPEN_DAY_GREETING: str = "Ле красотка, салам алейкум. Че работать начинаем? "
CLOSE_DAY_TEXT: str = "Пора домой! "

CHOOSE_PROMPT: str = "Choose"
REMOVE_KEYBOARD_TEXT: str = "Removing keyboard"
REQUEST_PROMPT: str = "Who or Where are you?"
INLINE_MODE_PROMPT: str = "Press the button to start Inline Query"

INLINE_RESULT_TITLE: str = "TgBots"
INLINE_RESULT_TEXT: str = "hello"


@functools.lru_cache(maxsize=1)
def load_open_day_report() -> str:
    """Read the shift-opening report from ``OPEN_DAY_REPORT_PATH`` once.

    Raises:
        OSError: If the report file is missing or unreadable.
    """
    with open(OPEN_DAY_REPORT_PATH, encoding="utf-8") as fh:
        report = fh.read()
    logger.info("Open-day report loaded", extra={"path": OPEN_DAY_REPORT_PATH, "length": len(report)})
    return report
