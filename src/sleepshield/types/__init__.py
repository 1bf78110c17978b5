"""Type definitions for sleepshield."""

from .system import BatterySource, CommandResult, CommandRunner, DelayScheduler

__all__ = [
    "BatterySource",
    "CommandResult",
    "CommandRunner",
    "DelayScheduler",
]
