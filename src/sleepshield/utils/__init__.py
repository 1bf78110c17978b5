"""Common utility functions and helpers for the sleepshield package."""

from sleepshield.utils.formatting import format_drain, format_percentage
from sleepshield.utils.time import TimeUtils

__all__ = [
    "TimeUtils",
    "format_drain",
    "format_percentage",
]
