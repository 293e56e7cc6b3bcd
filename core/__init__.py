"""Framework-agnostic helpers — structured logging.

This package must NEVER import from ``bot/`` or ``sdk/``.
"""

from core.logger import BotLogger

__all__ = [
    "BotLogger",
]
