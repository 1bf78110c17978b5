"""Protocols for the OS-facing collaborators, so tests can swap them out."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class CommandResult:
    """Combined stdout/stderr text of a finished command plus its exit code."""

    output: str
    returncode: int

    @property
    def text(self) -> str:
        """Lower-cased, stripped output for substring matching."""
        return self.output.strip().lower()


@runtime_checkable
class CommandRunner(Protocol):
    """Protocol for synchronous process execution."""

    def run(self, args: Sequence[str]) -> CommandResult:
        """Run a command and wait for it.

        Args:
            args: Executable followed by its arguments

        Returns:
            The captured output. Implementations never raise.
        """
        ...


@runtime_checkable
class BatterySource(Protocol):
    """Protocol for a single place a battery percentage can be read from."""

    def read_percentage(self) -> int | None: ...


@runtime_checkable
class DelayScheduler(Protocol):
    """Protocol for deferring a callback onto the engine's control thread."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> None: ...
