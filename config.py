"""Application configuration — environment variables and derived constants.

Loads ``BOT_TOKEN``, static-content locations, timing knobs, and webhook
settings from the environment via ``python-dotenv``.  All values are resolved
at import time so other modules can ``from config import …`` without
repeated lookups.
"""

# ── stdlib ───────────────────────────────────────────────────────────────────
import logging
import os

# ── third-party ──────────────────────────────────────────────────────────────
from dotenv import load_dotenv

# ── core ─────────────────────────────────────────────────────────────────────
from core.logger import BotLogger

# ── Environment bootstrap ────────────────────────────────────────────────────
load_dotenv()

# ── Logger (used for startup diagnostics at the bottom of this module) ───────
logger = BotLogger.get_logger()

_PROJECT_ROOT: str = os.path.dirname(os.path.abspath(__file__))


# ── Helper functions (private) ───────────────────────────────────────────────


def _parse_float(name: str, default: float) -> float:
    """Read a non-negative float from the environment variable *name*.

    Missing, non-numeric, or negative values fall back to *default*.
    """
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid numeric setting, using default", extra={"setting": name, "value": raw, "default": default})
        return default
    if value < 0:
        logger.warning("Negative numeric setting, using default", extra={"setting": name, "value": raw, "default": default})
        return default
    return value


def _parse_int(name: str, default: int) -> int:
    """Integer counterpart of :func:`_parse_float`."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid integer setting, using default", extra={"setting": name, "value": raw, "default": default})
        return default


def _parse_log_level(name: str, default: str) -> str:
    """Read a logging level name such as ``DEBUG`` from *name*.

    Unknown level names fall back to *default*.
    """
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    level = raw.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        logger.warning("Invalid log level, using default", extra={"setting": name, "value": raw, "default": default})
        return default
    return level


def _resolve_path(raw: str) -> str:
    """Resolve *raw* relative to the project root unless it is absolute."""
    if os.path.isabs(raw):
        return raw
    return os.path.join(_PROJECT_ROOT, raw)


# ── Public constants ─────────────────────────────────────────────────────────

BOT_TOKEN: str | None = os.environ.get("BOT_TOKEN")
BotLogger.add_secret(BOT_TOKEN)
BASE_URL: str = os.environ.get("BASE_URL") or f"https://api.telegram.org/bot{BOT_TOKEN or ''}"

PHOTO_PATH: str = _resolve_path(os.environ.get("PHOTO_PATH", os.path.join("Files", "tux.png")))
PHOTO_CAPTION: str = os.environ.get("PHOTO_CAPTION", "Nice Picture")
OPEN_DAY_REPORT_PATH: str = _resolve_path(
    os.environ.get("OPEN_DAY_REPORT_PATH", os.path.join("resources", "open_day_report.txt"))
)

TYPING_DELAY: float = _parse_float("TYPING_DELAY", 0.5)
POLLING_COOLDOWN: float = _parse_float("POLLING_COOLDOWN", 2.0)
POLLING_TIMEOUT: int = _parse_int("POLLING_TIMEOUT", 30)

WEBHOOK_URL: str | None = os.environ.get("WEBHOOK_URL") or None
WEBHOOK_HOST: str = os.environ.get("WEBHOOK_HOST", "0.0.0.0")
WEBHOOK_PORT: int = _parse_int("WEBHOOK_PORT", 8443)

LOG_LEVEL: str = _parse_log_level("LOG_LEVEL", "INFO")


# ── Startup diagnostics ─────────────────────────────────────────────────────

BotLogger.set_level(LOG_LEVEL)

if BOT_TOKEN:
    logger.info("Config loaded — BOT_TOKEN is set, BASE_URL ready")
else:
    logger.warning("Config loaded — BOT_TOKEN is NOT set")

if not os.path.isfile(PHOTO_PATH):
    logger.warning("PHOTO_PATH does not exist, /photo will fail", extra={"photo_path": PHOTO_PATH})

logger.info(
    "Timing settings resolved",
    extra={"typing_delay": TYPING_DELAY, "polling_cooldown": POLLING_COOLDOWN, "polling_timeout": POLLING_TIMEOUT},
)
