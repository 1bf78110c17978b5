"""Text and number formatting utilities."""

from __future__ import annotations


def format_percentage(value: int | None, missing: str = "?") -> str:
    """Format a battery level as a percentage.

    Args:
        value: Whole-number percentage, or None when unknown
        missing: Text to show for an unknown value

    Returns:
        Formatted percentage string
    """
    if value is None:
        return missing
    return f"{value}%"


def format_drain(drain: int) -> str:
    """Format a drain value; a negative drain means the battery charged."""
    if drain < 0:
        return f"+{-drain}%"
    return f"{drain}%"
