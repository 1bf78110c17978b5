from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, timezone

import pytest

from sleepshield.settings.application import NetworkCommands
from sleepshield.types.system import CommandResult

NETWORKSETUP = "/usr/sbin/networksetup"

HARDWARE_PORTS = """\
Hardware Port: Ethernet
Device: en1
Ethernet Address: aa:bb:cc:dd:ee:01

Hardware Port: Wi-Fi
Device: en0
Ethernet Address: aa:bb:cc:dd:ee:00

VLAN Configurations
===================
"""


class FakeRunner:
    """Scripted CommandRunner: the first matching prefix decides the output."""

    def __init__(self, responses: dict[tuple[str, ...], str] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[list[str]] = []

    def run(self, args: Sequence[str]) -> CommandResult:
        args = list(args)
        self.calls.append(args)
        tail = tuple(args[1:])
        for prefix, output in self.responses.items():
            if tail[: len(prefix)] == prefix:
                return CommandResult(output=output, returncode=0)
        return CommandResult(output="", returncode=0)

    def calls_with(self, flag: str) -> list[list[str]]:
        return [c for c in self.calls if len(c) > 1 and c[1] == flag]


class FakeWifi:
    """Runner that behaves like networksetup on a machine with one radio."""

    def __init__(self, on: bool = True, interface: str = "en0") -> None:
        self.on = on
        self.interface = interface
        self.calls: list[list[str]] = []
        self.fail_set = False

    def run(self, args: Sequence[str]) -> CommandResult:
        args = list(args)
        self.calls.append(args)
        flag = args[1] if len(args) > 1 else ""
        if flag == "-listallhardwareports":
            return CommandResult(HARDWARE_PORTS, 0)
        if flag == "-getairportpower":
            return CommandResult(f"Wi-Fi Power ({args[2]}): {'On' if self.on else 'Off'}\n", 0)
        if flag == "-setairportpower":
            if self.fail_set:
                return CommandResult(f"Error: {args[2]} is not a Wi-Fi interface.\n", 0)
            self.on = args[3] == "on"
            return CommandResult("", 0)
        if flag == "-setnetworkserviceenabled" and self.fail_set:
            return CommandResult("Error: permission denied\n", 0)
        return CommandResult("", 0)

    def set_calls(self) -> list[str]:
        return [c[3] for c in self.calls if c[1] == "-setairportpower"]


class FakeBattery:
    """BatterySource returning queued readings, then the last one forever."""

    def __init__(self, *levels: int | None) -> None:
        self.levels = list(levels) or [None]

    def read_percentage(self) -> int | None:
        if len(self.levels) > 1:
            return self.levels.pop(0)
        return self.levels[0]


class ManualScheduler:
    """DelayScheduler that only runs callbacks when the test says so."""

    def __init__(self) -> None:
        self.pending: list[tuple[float, Callable[[], None]]] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        self.pending.append((delay, callback))

    def fire_all(self) -> None:
        pending, self.pending = self.pending, []
        for _, callback in pending:
            callback()


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def commands() -> NetworkCommands:
    return NetworkCommands()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 11, 29, 22, 0, tzinfo=timezone.utc))


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()
