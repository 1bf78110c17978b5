"""Battery charge sampling."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Final

from sleepshield.types.system import BatterySource, CommandRunner

logger: Final = logging.getLogger(__name__)

_PERCENT: Final = re.compile(r"(\d{1,3})%")


def parse_pmset_battery(output: str) -> int | None:
    """Read the charge from ``pmset -g batt`` output.

    Only the ``InternalBattery`` line counts; desktops print just the
    "Now drawing from 'AC Power'" header.

    Args:
        output: Raw command output

    Returns:
        Percentage 0-100, or None if there is no internal battery
    """
    for line in output.splitlines():
        if "internalbattery" not in line.lower():
            continue
        match = _PERCENT.search(line)
        if match:
            return min(int(match.group(1)), 100)
    return None


class PmsetBatterySource:
    """Battery level from macOS ``pmset``."""

    def __init__(self, runner: CommandRunner, pmset: str = "/usr/bin/pmset") -> None:
        self.runner = runner
        self.pmset = pmset

    def read_percentage(self) -> int | None:
        try:
            result = self.runner.run([self.pmset, "-g", "batt"])
        except Exception as exc:
            logger.debug("pmset unavailable: %s", exc)
            return None
        return parse_pmset_battery(result.output)


class SysfsBatterySource:
    """Battery level from Linux ``/sys/class/power_supply``."""

    def __init__(self, root: Path = Path("/sys/class/power_supply")) -> None:
        self.root = root

    def read_percentage(self) -> int | None:
        for capacity in sorted(self.root.glob("BAT*/capacity")):
            try:
                return min(int(capacity.read_text(encoding="utf-8").strip()), 100)
            except (OSError, ValueError) as exc:
                logger.debug("sysfs battery %s unreadable: %s", capacity.parent.name, exc)
        return None


class BatterySampler:
    """Returns the charge of the first power source that reports one."""

    def __init__(self, sources: list[BatterySource]) -> None:
        """Initialize with battery sources.

        Args:
            sources: Sources to try in order
        """
        self.sources = sources

    def sample(self) -> int | None:
        """Return the current battery percentage.

        Returns:
            Percentage from the first source that has one, or None on
            machines without a battery
        """
        for source in self.sources:
            level = source.read_percentage()
            if level is not None:
                return level

        logger.debug("No battery-backed power source found")
        return None
