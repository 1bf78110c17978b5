"""Status surface the presentation layer reads. Last write wins."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Final

from sleepshield.models.session import SleepSession, StatusMessage

logger: Final = logging.getLogger(__name__)

StatusListener = Callable[[StatusMessage], None]


class StatusBoard:
    """Holds the latest status message and notifies subscribers of new ones."""

    def __init__(self, initial: str = "Ready") -> None:
        self._lock = threading.Lock()
        self._current = StatusMessage(initial)
        self._listeners: list[StatusListener] = []

    @property
    def current(self) -> StatusMessage:
        with self._lock:
            return self._current

    def publish(self, text: str, session: SleepSession | None = None) -> StatusMessage:
        """Replace the current status and notify listeners.

        Args:
            text: User-facing message
            session: Session to show alongside it

        Returns:
            The published message
        """
        message = StatusMessage(text, session)
        with self._lock:
            self._current = message
            listeners = list(self._listeners)
        logger.info("%s", text)
        for listener in listeners:
            try:
                listener(message)
            except Exception:
                logger.exception("Status listener %r failed", listener)
        return message

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """Call ``listener`` after every publish.

        Returns:
            A function that removes the listener again
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe
