# src/sleepshield/utils/time.py
"""Time and date handling utilities."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta


class TimeUtils:
    """Time-related utility functions.

    Centralized utilities for working with dates and times:
    - Current time retrieval with proper timezone handling
    - Datetime formatting with user preferences
    - Human-readable durations for sleep sessions
    """

    @staticmethod
    def now_localized() -> datetime:
        """Get current datetime with local timezone.

        Returns:
            Current datetime with local timezone
        """
        return datetime.now(UTC).astimezone()

    @staticmethod
    def format_datetime(dt: datetime, format_string: str) -> str:
        """Format datetime with specified format string.

        Args:
            dt: Datetime to format
            format_string: strftime format string

        Returns:
            Formatted datetime string
        """
        return dt.strftime(format_string)

    @staticmethod
    def format_duration(duration: timedelta) -> str:
        """Get a compact human-readable duration.

        Hours are only shown when non-zero, so 5400s is "1h 30m" and
        120s is "2m". Negative durations (clock set backwards) read as "0m".

        Args:
            duration: Elapsed time

        Returns:
            Formatted duration (e.g., "2h 30m")
        """
        seconds = max(int(duration.total_seconds()), 0)
        hours = seconds // 3600
        minutes = (seconds % 3600) // 60
        if hours:
            return f"{hours}h {minutes}m"
        return f"{minutes}m"
