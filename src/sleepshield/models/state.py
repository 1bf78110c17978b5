"""Operator configuration and the engine's belief about the radio."""

from __future__ import annotations

from dataclasses import dataclass

from sleepshield.common.enums import ShieldMode


@dataclass
class ShieldConfig:
    """Operator toggles, read by the engine at the top of every handler.

    The engine never caches these; flipping either one takes effect on
    the next sleep or wake event.
    """

    enabled: bool = True
    guard_wifi_on_sleep: bool = True

    @property
    def active(self) -> bool:
        """Return True if the shield should act on sleep/wake events."""
        return self.enabled and self.guard_wifi_on_sleep


@dataclass
class BeliefState:
    """What the engine thinks should happen on the next wake.

    ``should_restore`` may only be written while ``mode`` is AWAKE.
    """

    should_restore: bool = False
    mode: ShieldMode = ShieldMode.AWAKE

    @property
    def is_asleep(self) -> bool:
        return self.mode is ShieldMode.ASLEEP
