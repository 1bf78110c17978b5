# filepath: src/sleepshield/controller.py
"""Core controller for SleepShield."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Final

from sleepshield.common.enums import ShieldEvent
from sleepshield.engine import ReconciliationEngine
from sleepshield.models.session import StatusMessage
from sleepshield.models.state import ShieldConfig
from sleepshield.notifications import NotificationSource
from sleepshield.scheduling import EventLoop
from sleepshield.settings.application import ApplicationSettings
from sleepshield.settings.user import UserSettings
from sleepshield.status import StatusBoard
from sleepshield.system.battery import BatterySampler, PmsetBatterySource, SysfsBatterySource
from sleepshield.system.shell import SubprocessRunner
from sleepshield.system.wifi import InterfacePowerDriver
from sleepshield.types.system import CommandRunner

logger: Final = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeResult:
    """One-shot reading of the radio and battery."""

    interface: str
    wifi_on: bool
    battery: int | None


def load_settings(config_path: Path | None) -> UserSettings:
    """Load settings, falling back to defaults when no config file exists.

    Raises:
        RuntimeError: If a config file exists but is invalid
    """
    try:
        return UserSettings.load(config_path)
    except FileNotFoundError as exc:
        if config_path is not None:
            raise
        logger.info("%s Using defaults.", exc)
        return UserSettings()


class SleepShield:
    """Main controller class for the shield.

    Wires the configured pieces together:
    - Loading configuration and building the OS-facing components
    - Owning the serialized event loop and the status surface
    - Routing sleep/wake signals and operator commands to the engine

    Everything the engine does happens on the thread running :meth:`run`.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        settings: UserSettings | None = None,
        runner: CommandRunner | None = None,
        driver: InterfacePowerDriver | None = None,
        sampler: BatterySampler | None = None,
        loop: EventLoop | None = None,
        debug: bool = False,
    ):
        """Initialize the controller.

        Args:
            config_path: Path to config.yaml (searched for if None)
            settings: Already-loaded settings; skips loading if given
            runner: Optional custom command runner
            driver: Optional custom Wi-Fi driver
            sampler: Optional custom battery sampler
            loop: Optional custom event loop
            debug: Enable debug logging
        """
        # Configure logging
        logging.basicConfig(
            level=logging.DEBUG if debug else logging.INFO,
            format="%(asctime)s [%(levelname)s] %(message)s",
        )

        self.config: UserSettings = settings or load_settings(config_path)
        self.settings = ApplicationSettings(self.config)
        self.shield_config: ShieldConfig = self.config.shield_config()

        # Allow dependency injection or create defaults
        commands = self.settings.commands
        self.runner = runner or SubprocessRunner(timeout=commands.timeout)
        self.driver = driver or InterfacePowerDriver(self.runner, commands)
        self.sampler = sampler or BatterySampler(
            [PmsetBatterySource(self.runner, commands.pmset), SysfsBatterySource()]
        )
        self.loop = loop or EventLoop()
        self.status = StatusBoard()

        self.engine = ReconciliationEngine(
            self.driver,
            self.sampler,
            self.shield_config,
            self.loop,
            status=self.status,
            reverify_delay=self.settings.timing.reverify_delay,
        )

    def dispatch(self, event: ShieldEvent) -> None:
        """Apply one event. Must run on the loop thread."""
        if event is ShieldEvent.SLEEP:
            self.engine.on_sleep()
        elif event is ShieldEvent.WAKE:
            self.engine.on_wake()
        elif event is ShieldEvent.ENABLE:
            self.shield_config.enabled = True
            logger.info("Shield enabled")
        elif event is ShieldEvent.DISABLE:
            self.shield_config.enabled = False
            logger.info("Shield disabled")
        elif event is ShieldEvent.GUARD_ON:
            self.shield_config.guard_wifi_on_sleep = True
            logger.info("Wi-Fi guard on")
        elif event is ShieldEvent.GUARD_OFF:
            self.shield_config.guard_wifi_on_sleep = False
            logger.info("Wi-Fi guard off")
        elif event is ShieldEvent.STATUS:
            current = self.status.current
            self.status.publish(current.text, current.session)
        elif event is ShieldEvent.QUIT:
            self.loop.stop()

    def run(self, source: NotificationSource) -> None:
        """Process events from ``source`` until it sends QUIT."""
        interval = self.settings.timing.poll_interval.total_seconds()
        self.loop.every(interval, self.engine.on_tick)
        source.start(lambda event: self.loop.post(partial(self.dispatch, event)))
        logger.info(
            "SleepShield running on %s (poll every %.0fs)", self.driver.interface, interval
        )
        try:
            self.loop.run()
        finally:
            self.loop.stop()

    def simulate(self, pause: float = 0.0) -> StatusMessage:
        """Run one sleep and wake through the engine, as if the lid closed.

        Args:
            pause: Seconds to stay "asleep"

        Returns:
            The status after the wake
        """
        self.dispatch(ShieldEvent.SLEEP)
        if pause > 0:
            time.sleep(pause)
        self.dispatch(ShieldEvent.WAKE)
        return self.status.current

    def probe(self) -> ProbeResult:
        """Read the current radio and battery state without changing anything."""
        return ProbeResult(
            interface=self.driver.interface,
            wifi_on=self.driver.query_power(),
            battery=self.sampler.sample(),
        )
