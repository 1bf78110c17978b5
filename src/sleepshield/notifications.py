"""Sources of sleep/wake signals and operator commands."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from typing import Final, Protocol, TextIO, runtime_checkable

from sleepshield.common.enums import ShieldEvent

logger: Final = logging.getLogger(__name__)

EventHandler = Callable[[ShieldEvent], None]

_COMMANDS: Final[dict[str, ShieldEvent]] = {
    "sleep": ShieldEvent.SLEEP,
    "wake": ShieldEvent.WAKE,
    "enable": ShieldEvent.ENABLE,
    "disable": ShieldEvent.DISABLE,
    "guard on": ShieldEvent.GUARD_ON,
    "guard off": ShieldEvent.GUARD_OFF,
    "status": ShieldEvent.STATUS,
    "quit": ShieldEvent.QUIT,
    "exit": ShieldEvent.QUIT,
}


def parse_command(line: str) -> ShieldEvent | None:
    """Map one input line to an event.

    Args:
        line: Raw line, case and surrounding whitespace ignored

    Returns:
        The event, or None for blank, comment or unknown lines
    """
    text = " ".join(line.strip().lower().split())
    if not text or text.startswith("#"):
        return None
    event = _COMMANDS.get(text)
    if event is None:
        logger.warning("Unknown command: %r", line.strip())
    return event


@runtime_checkable
class NotificationSource(Protocol):
    """Protocol for anything that delivers shield events."""

    def start(self, handler: EventHandler) -> None:
        """Begin delivering events to ``handler`` in the background."""
        ...


class LineNotificationSource:
    """Reads one command per line, e.g. from stdin fed by a sleep hook tool.

    Runs on its own thread and only hands events to ``handler``; the
    handler is expected to post them onto the engine's loop. End of input
    is delivered as QUIT.
    """

    def __init__(self, stream: TextIO | Iterable[str]) -> None:
        self.stream = stream
        self._thread: threading.Thread | None = None

    def start(self, handler: EventHandler) -> None:
        self._thread = threading.Thread(
            target=self._pump, args=(handler,), name="sleepshield-input", daemon=True
        )
        self._thread.start()

    def _pump(self, handler: EventHandler) -> None:
        for line in self.stream:
            event = parse_command(line)
            if event is None:
                continue
            handler(event)
            if event is ShieldEvent.QUIT:
                return
        handler(ShieldEvent.QUIT)


def create_notification_source(stream: TextIO | Iterable[str]) -> NotificationSource:
    """Factory function to create a notification source for a text stream."""
    return LineNotificationSource(stream)
