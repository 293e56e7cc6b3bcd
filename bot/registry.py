"""Command registry — single source of truth for command token → handler mapping.

Handlers bind themselves to a slash-command with the ``@registry.register``
decorator in :mod:`bot.handlers`; the dispatcher resolves the command token
of every text message through :meth:`CommandRegistry.resolve`, and the usage
handler renders its help text from :meth:`CommandRegistry.entries`.

Design:
- ``CommandHandler`` is a :class:`Protocol` describing the one handler
  signature in use: ``(client, message) -> sent message``.
- Tokens are matched exactly (case-sensitive, leading ``/`` included).
- Tokens that match nothing resolve to the *default* handler.
- Registration happens at import time; after that the registry is only
  read, so concurrent updates never contend on it.
"""

from __future__ import annotations

import dataclasses
from types import MappingProxyType
from typing import Callable, Mapping, Protocol, runtime_checkable

from sdk.client import BotClient
from sdk.models import Message


@runtime_checkable
class CommandHandler(Protocol):
    """Handler that performs zero or more client calls and returns the final sent message."""
    async def __call__(self, client: BotClient, message: Message) -> Message: ...  # noqa: E704


@dataclasses.dataclass(frozen=True, slots=True)
class CommandEntry:
    """Metadata for a single registered slash-command."""
    command: str              # e.g. "/keyboard"
    description: str          # shown by the usage handler
    handler: CommandHandler   # the async callable
    hidden: bool = False      # left out of the usage text


class CommandRegistry:
    """Ordered mapping of command tokens to handlers, with a default fallback.

    Usage::

        registry = CommandRegistry()

        @registry.register("/ping", description="Ping")
        async def handle_ping(client, message): ...

        @registry.register_default
        async def handle_usage(client, message): ...

        handler = registry.resolve("/ping")
        sent = await handler(client, message)
    """

    def __init__(self) -> None:
        self._entries: dict[str, CommandEntry] = {}
        self._default: CommandHandler | None = None

    # ── decorators ───────────────────────────────────────────────────────

    def register(
        self,
        command: str,
        *,
        description: str,
        hidden: bool = False,
    ) -> Callable[[CommandHandler], CommandHandler]:
        """Decorator that registers *handler* for *command*.

        Raises:
            ValueError: If *command* is empty, contains whitespace, or is
                already registered.
        """
        if not command or command != command.strip() or len(command.split()) != 1:
            raise ValueError(f"Invalid command token: {command!r}")
        if command in self._entries:
            raise ValueError(f"Command already registered: {command}")

        def decorator(func: CommandHandler) -> CommandHandler:
            self._entries[command] = CommandEntry(
                command=command,
                description=description,
                handler=func,
                hidden=hidden,
            )
            return func
        return decorator

    def register_default(self, func: CommandHandler) -> CommandHandler:
        """Decorator that sets the handler used for unknown tokens."""
        if self._default is not None:
            raise ValueError("Default handler already registered")
        self._default = func
        return func

    # ── lookup helpers ───────────────────────────────────────────────────

    def get(self, command: str) -> CommandEntry | None:
        """Return the entry for *command*, or ``None``."""
        return self._entries.get(command)

    def entries(self) -> Mapping[str, CommandEntry]:
        """Return a read-only view of all registered commands, in registration order."""
        return MappingProxyType(self._entries)

    def resolve(self, command: str) -> CommandHandler:
        """Return the handler for *command*, falling back to the default handler.

        Raises:
            LookupError: If *command* is unknown and no default is registered.
        """
        entry = self._entries.get(command)
        if entry is not None:
            return entry.handler
        if self._default is None:
            raise LookupError(f"No handler for {command!r} and no default registered")
        return self._default

    async def dispatch(self, command: str, client: BotClient, message: Message) -> Message:
        """Resolve *command* and invoke its handler, returning the sent message."""
        return await self.resolve(command)(client, message)


# Module-level instance — import this everywhere.
registry = CommandRegistry()
