"""Serialized event loop for the reconciliation engine.

Every engine callback runs on the thread that calls :meth:`EventLoop.run`.
Timers never touch engine state themselves; they only post work into the
loop's queue, so a tick and a sleep event can never interleave.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from typing import Final

from sleepshield.scheduling.models import TimingSettings

logger: Final = logging.getLogger(__name__)

Callback = Callable[[], None]

__all__ = ["EventLoop", "TimingSettings"]


class EventLoop:
    """Single-worker queue that runs callbacks strictly one at a time.

    Implements the ``DelayScheduler`` protocol, so it can be handed to the
    engine directly.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[Callback | None] = queue.Queue()
        self._timers: set[threading.Timer] = set()
        self._lock = threading.Lock()
        self._stopped = threading.Event()

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def post(self, callback: Callback) -> None:
        """Queue a callback for the worker. Ignored once stopped."""
        if self._stopped.is_set():
            logger.debug("Loop stopped, dropping %r", callback)
            return
        self._queue.put(callback)

    def call_later(self, delay: float, callback: Callback) -> None:
        """Post ``callback`` after ``delay`` seconds."""
        if self._stopped.is_set():
            return
        timer: threading.Timer

        def fire() -> None:
            with self._lock:
                self._timers.discard(timer)
            self.post(callback)

        timer = threading.Timer(delay, fire)
        timer.daemon = True
        with self._lock:
            self._timers.add(timer)
        timer.start()

    def every(self, interval: float, callback: Callback) -> None:
        """Post ``callback`` every ``interval`` seconds until the loop stops.

        The next timer is armed when the previous one fires, so a slow
        callback never stacks up several queued runs of itself.
        """

        def repeat() -> None:
            try:
                callback()
            finally:
                self.call_later(interval, repeat)

        self.call_later(interval, repeat)

    def stop(self) -> None:
        """Stop the worker after the callback it is currently running."""
        self._stopped.set()
        with self._lock:
            timers = list(self._timers)
            self._timers.clear()
        for timer in timers:
            timer.cancel()
        self._queue.put(None)

    def run(self) -> None:
        """Run queued callbacks on the calling thread until :meth:`stop`."""
        logger.debug("Event loop started")
        while True:
            callback = self._queue.get()
            if callback is None or self._stopped.is_set():
                break
            try:
                callback()
            except Exception:
                logger.exception("Event loop callback failed")
        logger.debug("Event loop stopped")

    def run_pending(self) -> int:
        """Run whatever is queued right now without blocking.

        Returns:
            Number of callbacks run
        """
        ran = 0
        while True:
            try:
                callback = self._queue.get_nowait()
            except queue.Empty:
                return ran
            if callback is None:
                return ran
            callback()
            ran += 1
