"""Wi-Fi power reconciliation across sleep and wake.

The engine turns the radio off on every sleep and turns it back on at
wake only if it believes the radio was on before. That belief
(``BeliefState.should_restore``) is written from three places: the
startup query, the periodic tick, and the re-check shortly after a
restore. None of them may write it while the machine is asleep, and
each checks that when it runs, not when it was scheduled.

All handlers must be called from one control thread (see
:class:`sleepshield.scheduling.EventLoop`).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Final

from sleepshield.common.enums import ShieldMode
from sleepshield.models.session import SleepSession
from sleepshield.models.state import BeliefState, ShieldConfig
from sleepshield.status import StatusBoard
from sleepshield.system.battery import BatterySampler
from sleepshield.system.wifi import DriverResult, InterfacePowerDriver
from sleepshield.types.system import DelayScheduler
from sleepshield.utils.formatting import format_drain, format_percentage
from sleepshield.utils.time import TimeUtils

logger: Final = logging.getLogger(__name__)

FAILURE_MESSAGE: Final = "Failed to control Wi-Fi - check System Settings permissions"


class ReconciliationEngine:
    """Decides, at each sleep and wake, whether Wi-Fi goes off or comes back."""

    def __init__(
        self,
        driver: InterfacePowerDriver,
        sampler: BatterySampler,
        config: ShieldConfig,
        scheduler: DelayScheduler,
        status: StatusBoard | None = None,
        reverify_delay: timedelta = timedelta(seconds=5),
        clock: Callable[[], datetime] = TimeUtils.now_localized,
    ) -> None:
        """Initialize the engine and seed the belief from the radio's state.

        Args:
            driver: Wi-Fi power driver
            sampler: Battery sampler for session telemetry
            config: Operator toggles, re-read by every handler
            scheduler: Runs the post-wake re-check on the control thread
            status: Status surface to publish to
            reverify_delay: Delay between restoring Wi-Fi and re-reading it
            clock: Source of session timestamps
        """
        self.driver = driver
        self.sampler = sampler
        self.config = config
        self.scheduler = scheduler
        self.status = status or StatusBoard()
        self.reverify_delay = reverify_delay
        self.clock = clock

        self.belief = BeliefState(should_restore=self.driver.query_power())
        self.session: SleepSession | None = None
        logger.info("Initial Wi-Fi state: %s", "ON" if self.belief.should_restore else "OFF")

    @property
    def mode(self) -> ShieldMode:
        return self.belief.mode

    # ── belief refresh ────────────────────────────────────────────────────
    def _refresh_belief(self, reason: str) -> None:
        if self.belief.is_asleep:
            logger.debug("Asleep, ignoring %s", reason)
            return
        self.belief.should_restore = self.driver.query_power()
        logger.debug("Updated Wi-Fi state (%s): %s", reason, "ON" if self.belief.should_restore else "OFF")

    def on_tick(self) -> None:
        """Periodic poll: remember the radio's current state while awake."""
        self._refresh_belief("tick")

    def _reverify(self) -> None:
        self._refresh_belief("post-wake check")

    # ── sleep / wake ──────────────────────────────────────────────────────
    def on_sleep(self) -> None:
        """Handle the system going to sleep."""
        if not self.config.active:
            logger.debug("Shield inactive, ignoring sleep")
            return

        repeated = self.belief.is_asleep
        self.belief.mode = ShieldMode.ASLEEP
        level = self.sampler.sample()
        self.session = SleepSession.begin(self.clock(), level)

        if repeated:
            logger.info("Repeated sleep signal, restarting session capture")
            self.status.publish(self._sleep_message(level), self.session)
            return

        logger.info(
            "System going to sleep, remembered Wi-Fi state: %s",
            "was ON" if self.belief.should_restore else "was OFF",
        )
        # Always off, whatever the radio says now: only should_restore matters at wake.
        if self._apply(False):
            self.status.publish(self._sleep_message(level), self.session)

    def on_wake(self) -> None:
        """Handle the system waking up."""
        if not self.config.active:
            if self.belief.is_asleep:
                # Let the poller run again; the operator turned the shield off mid-sleep.
                self.belief.mode = ShieldMode.AWAKE
            logger.debug("Shield inactive, ignoring wake")
            return

        if not self.belief.is_asleep:
            logger.info("Wake signal while already awake, nothing to do")
            current = self.status.current
            self.status.publish(current.text, current.session)
            return

        self.belief.mode = ShieldMode.AWAKE
        session = self.session or SleepSession()
        session.complete(self.clock(), self.sampler.sample())
        self.session = session
        logger.info("System waking up, restore Wi-Fi: %s", "YES" if self.belief.should_restore else "NO")

        if not self.belief.should_restore:
            self.status.publish(self._wake_message("Wi-Fi was off before sleep, left off", session), session)
            return

        if self._apply(True):
            # Give the radio time to reconnect before trusting what it reports.
            self.scheduler.call_later(self.reverify_delay.total_seconds(), self._reverify)
            self.status.publish(self._wake_message("Wi-Fi restored", session), session)

    # ── helpers ───────────────────────────────────────────────────────────
    def _apply(self, on: bool) -> bool:
        result: DriverResult = self.driver.set_power(on)
        if not result.ok:
            self.status.publish(FAILURE_MESSAGE, self.session)
        return result.ok

    @staticmethod
    def _sleep_message(level: int | None) -> str:
        if level is None:
            return "Wi-Fi off for sleep"
        return f"Wi-Fi off - sleep at {format_percentage(level)}"

    @staticmethod
    def _wake_message(prefix: str, session: SleepSession) -> str:
        details = []
        if session.drain_percent is not None:
            details.append(f"drained {format_drain(session.drain_percent)}")
        if session.formatted_duration is not None:
            details.append(f"asleep {session.formatted_duration}")
        if not details:
            return prefix
        return f"{prefix} - {', '.join(details)}"
