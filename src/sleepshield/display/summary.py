"""Turns a status message and its session into labelled lines."""

from __future__ import annotations

from dataclasses import dataclass

from sleepshield.common.enums import DrainSeverity
from sleepshield.models.session import SleepSession, StatusMessage
from sleepshield.settings.user import UserSettings
from sleepshield.utils.formatting import format_drain, format_percentage
from sleepshield.utils.time import TimeUtils


@dataclass(frozen=True)
class SummaryLine:
    """One ``label: value`` row. ``tone`` hints at colour: ok, warn, bad or None."""

    label: str
    value: str
    tone: str | None = None


_DRAIN_TONES = {
    DrainSeverity.LOW: "ok",
    DrainSeverity.MODERATE: "warn",
    DrainSeverity.HIGH: "bad",
}


class StatusRenderer:
    """Renders the last sleep session and the status text.

    The session block is only shown once a session has both battery
    readings and both timestamps.
    """

    def __init__(self, settings: UserSettings) -> None:
        self.settings = settings

    def session_lines(self, session: SleepSession | None) -> list[SummaryLine]:
        if (
            session is None
            or session.slept_at is None
            or session.woke_at is None
            or session.sleep_battery_level is None
            or session.wake_battery_level is None
            or session.drain_percent is None
        ):
            return []

        fmt = self.settings.timestamp_format
        wake_level = session.wake_battery_level
        lines = [
            SummaryLine("Slept", TimeUtils.format_datetime(session.slept_at, fmt)),
            SummaryLine("Woke", TimeUtils.format_datetime(session.woke_at, fmt)),
            SummaryLine("Sleep", format_percentage(session.sleep_battery_level), "ok"),
            SummaryLine(
                "Wake",
                format_percentage(wake_level),
                "bad" if self.settings.is_low_battery(wake_level) else None,
            ),
            SummaryLine(
                "Drain",
                format_drain(session.drain_percent),
                _DRAIN_TONES[DrainSeverity.classify(session.drain_percent)],
            ),
        ]
        if session.formatted_duration is not None:
            lines.append(SummaryLine("Duration", session.formatted_duration))
        return lines

    def render(self, message: StatusMessage) -> list[SummaryLine]:
        """Return the session rows (if complete) followed by the status row."""
        return [*self.session_lines(message.session), SummaryLine("Status", message.text)]
