"""Sleep session telemetry and the published status message."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from sleepshield.common.enums import DrainSeverity
from sleepshield.utils.time import TimeUtils


@dataclass
class SleepSession:
    """Battery and timing record spanning one sleep-to-wake interval.

    Created at a sleep event with the ``sleep_*``/``slept_at`` fields and
    completed at the following wake. Any field may be None: battery levels
    are missing on machines without a battery, and the wake-side fields
    stay empty until the wake arrives.
    """

    sleep_battery_level: int | None = None
    wake_battery_level: int | None = None
    drain_percent: int | None = None
    slept_at: datetime | None = None
    woke_at: datetime | None = None
    duration: timedelta | None = None

    @classmethod
    def begin(cls, slept_at: datetime, battery_level: int | None) -> SleepSession:
        """Start a session at a sleep event."""
        return cls(sleep_battery_level=battery_level, slept_at=slept_at)

    def complete(self, woke_at: datetime, battery_level: int | None) -> None:
        """Fill in the wake-side fields and derive drain and duration."""
        self.woke_at = woke_at
        self.wake_battery_level = battery_level
        if self.sleep_battery_level is not None and battery_level is not None:
            self.drain_percent = self.sleep_battery_level - battery_level
        else:
            self.drain_percent = None
        self.duration = woke_at - self.slept_at if self.slept_at is not None else None

    @property
    def is_complete(self) -> bool:
        return self.woke_at is not None

    @property
    def formatted_duration(self) -> str | None:
        """Return the duration as "1h 30m" / "2m", or None if unknown."""
        if self.duration is None:
            return None
        return TimeUtils.format_duration(self.duration)

    @property
    def drain_severity(self) -> DrainSeverity | None:
        if self.drain_percent is None:
            return None
        return DrainSeverity.classify(self.drain_percent)


@dataclass(frozen=True)
class StatusMessage:
    """User-facing status text plus the current session, if any."""

    text: str
    session: SleepSession | None = None
