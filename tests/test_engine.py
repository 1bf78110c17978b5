"""Tests for sleepshield.engine.ReconciliationEngine."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta

import pytest

from conftest import FakeBattery, FakeClock, FakeRunner, FakeWifi, ManualScheduler
from sleepshield.common.enums import ShieldMode
from sleepshield.engine import FAILURE_MESSAGE, ReconciliationEngine
from sleepshield.models.state import ShieldConfig
from sleepshield.status import StatusBoard
from sleepshield.system.battery import BatterySampler
from sleepshield.system.wifi import InterfacePowerDriver
from sleepshield.types.system import CommandResult


def make_engine(
    wifi: FakeWifi | FakeRunner,
    scheduler: ManualScheduler,
    clock: FakeClock,
    battery: FakeBattery | None = None,
    config: ShieldConfig | None = None,
) -> ReconciliationEngine:
    driver = InterfacePowerDriver(wifi, interface="en0")
    return ReconciliationEngine(
        driver,
        BatterySampler([battery or FakeBattery(80, 72)]),
        config or ShieldConfig(),
        scheduler,
        status=StatusBoard(),
        reverify_delay=timedelta(seconds=5),
        clock=clock,
    )


def test_startup_seeds_belief_from_driver(scheduler: ManualScheduler, clock: FakeClock) -> None:
    assert make_engine(FakeWifi(on=True), scheduler, clock).belief.should_restore is True
    assert make_engine(FakeWifi(on=False), scheduler, clock).belief.should_restore is False


def test_sleep_then_wake_turns_off_then_on(scheduler: ManualScheduler, clock: FakeClock) -> None:
    wifi = FakeWifi(on=True)
    engine = make_engine(wifi, scheduler, clock)

    engine.on_sleep()
    assert engine.mode is ShieldMode.ASLEEP
    assert wifi.on is False
    assert engine.status.current.text == "Wi-Fi off - sleep at 80%"

    clock.advance(seconds=5400)
    engine.on_wake()

    assert wifi.set_calls() == ["off", "on"]
    assert wifi.on is True
    assert engine.mode is ShieldMode.AWAKE
    assert engine.status.current.text == "Wi-Fi restored - drained 8%, asleep 1h 30m"
    assert engine.status.current.session is engine.session


def test_wake_completes_session(scheduler: ManualScheduler, clock: FakeClock) -> None:
    engine = make_engine(FakeWifi(on=True), scheduler, clock)
    slept_at = clock.now

    engine.on_sleep()
    clock.advance(seconds=120)
    engine.on_wake()

    session = engine.session
    assert session is not None
    assert session.sleep_battery_level == 80
    assert session.wake_battery_level == 72
    assert session.drain_percent == 8
    assert session.slept_at == slept_at
    assert session.woke_at == slept_at + timedelta(seconds=120)
    assert session.formatted_duration == "2m"


def test_wake_without_restore_leaves_wifi_off(scheduler: ManualScheduler, clock: FakeClock) -> None:
    wifi = FakeWifi(on=False)
    engine = make_engine(wifi, scheduler, clock)

    engine.on_sleep()
    clock.advance(minutes=10)
    engine.on_wake()

    assert wifi.set_calls() == ["off"]
    assert scheduler.pending == []
    assert engine.status.current.text.startswith("Wi-Fi was off before sleep, left off")


def test_missing_battery_degrades_telemetry(scheduler: ManualScheduler, clock: FakeClock) -> None:
    engine = make_engine(FakeWifi(on=True), scheduler, clock, battery=FakeBattery(None))

    engine.on_sleep()
    assert engine.status.current.text == "Wi-Fi off for sleep"
    clock.advance(minutes=45)
    engine.on_wake()

    session = engine.session
    assert session is not None
    assert session.sleep_battery_level is None
    assert session.drain_percent is None
    assert engine.status.current.text == "Wi-Fi restored - asleep 45m"


def test_ticks_refresh_belief_while_awake(scheduler: ManualScheduler, clock: FakeClock) -> None:
    wifi = FakeWifi(on=True)
    engine = make_engine(wifi, scheduler, clock)

    wifi.on = False  # operator turned Wi-Fi off by hand
    engine.on_tick()
    assert engine.belief.should_restore is False

    wifi.on = True
    engine.on_tick()
    assert engine.belief.should_restore is True


def test_ticks_never_write_belief_while_asleep(scheduler: ManualScheduler, clock: FakeClock) -> None:
    wifi = FakeWifi(on=True)
    engine = make_engine(wifi, scheduler, clock)

    engine.on_sleep()
    # The radio is off now; a tick that slipped through would forget to restore it.
    for _ in range(3):
        engine.on_tick()
    assert engine.belief.should_restore is True

    engine.on_wake()
    assert wifi.on is True


def test_reverify_updates_belief_after_restore(scheduler: ManualScheduler, clock: FakeClock) -> None:
    wifi = FakeWifi(on=True)
    engine = make_engine(wifi, scheduler, clock)

    engine.on_sleep()
    engine.on_wake()
    assert [delay for delay, _ in scheduler.pending] == [5.0]

    wifi.on = False  # radio dropped while reconnecting
    scheduler.fire_all()
    assert engine.belief.should_restore is False


def test_reverify_skipped_if_asleep_again(scheduler: ManualScheduler, clock: FakeClock) -> None:
    engine = make_engine(FakeWifi(on=True), scheduler, clock)

    engine.on_sleep()
    engine.on_wake()
    engine.on_sleep()  # lid closed again within the re-check delay
    scheduler.fire_all()

    assert engine.belief.should_restore is True
    assert engine.mode is ShieldMode.ASLEEP


def test_repeated_wake_is_noop(scheduler: ManualScheduler, clock: FakeClock) -> None:
    wifi = FakeWifi(on=True)
    engine = make_engine(wifi, scheduler, clock)
    published: list[str] = []
    engine.status.subscribe(lambda message: published.append(message.text))

    engine.on_sleep()
    clock.advance(hours=1)
    engine.on_wake()
    session = engine.session
    assert session is not None
    snapshot = (session.woke_at, session.wake_battery_level, session.drain_percent, session.duration)

    clock.advance(hours=1)
    engine.on_wake()
    engine.on_wake()

    assert wifi.set_calls() == ["off", "on"]
    assert engine.session is session
    assert (session.woke_at, session.wake_battery_level, session.drain_percent, session.duration) == snapshot
    assert published[-1] == published[-2] == published[-3]
    assert len(scheduler.pending) == 1


def test_repeated_sleep_restarts_session(scheduler: ManualScheduler, clock: FakeClock) -> None:
    wifi = FakeWifi(on=True)
    engine = make_engine(wifi, scheduler, clock, battery=FakeBattery(90, 85, 80))

    engine.on_sleep()
    first = engine.session
    clock.advance(minutes=3)
    engine.on_sleep()

    assert engine.session is not first
    assert engine.session is not None
    assert engine.session.sleep_battery_level == 85
    assert engine.session.slept_at == clock.now
    assert wifi.set_calls() == ["off"]
    assert engine.belief.should_restore is True

    engine.on_wake()
    assert engine.session.drain_percent == 5
    assert wifi.set_calls() == ["off", "on"]


@pytest.mark.parametrize(
    "config",
    [
        ShieldConfig(enabled=False),
        ShieldConfig(guard_wifi_on_sleep=False),
        ShieldConfig(enabled=False, guard_wifi_on_sleep=False),
    ],
)
def test_inactive_shield_does_nothing(
    config: ShieldConfig, scheduler: ManualScheduler, clock: FakeClock
) -> None:
    wifi = FakeWifi(on=True)
    engine = make_engine(wifi, scheduler, clock, config=config)
    before = engine.status.current

    engine.on_sleep()
    engine.on_wake()

    assert wifi.set_calls() == []
    assert engine.status.current is before
    assert engine.session is None
    assert engine.mode is ShieldMode.AWAKE


def test_config_is_read_per_event(scheduler: ManualScheduler, clock: FakeClock) -> None:
    config = ShieldConfig()
    wifi = FakeWifi(on=True)
    engine = make_engine(wifi, scheduler, clock, config=config)

    engine.on_sleep()
    config.enabled = False
    engine.on_wake()

    # Wi-Fi stays off, but polling resumes
    assert wifi.set_calls() == ["off"]
    assert engine.mode is ShieldMode.AWAKE


def test_driver_failure_is_reported(scheduler: ManualScheduler, clock: FakeClock) -> None:
    wifi = FakeWifi(on=True)
    engine = make_engine(wifi, scheduler, clock)
    wifi.fail_set = True

    engine.on_sleep()
    assert engine.status.current.text == FAILURE_MESSAGE
    assert engine.belief.should_restore is True
    assert engine.mode is ShieldMode.ASLEEP

    engine.on_wake()
    assert engine.status.current.text == FAILURE_MESSAGE
    assert engine.belief.should_restore is True
    assert scheduler.pending == []


def test_unresolvable_query_defaults_off_and_cycle_completes(
    scheduler: ManualScheduler, clock: FakeClock
) -> None:
    class Unclear:
        def __init__(self) -> None:
            self.calls: list[list[str]] = []

        def run(self, args: Sequence[str]) -> CommandResult:
            self.calls.append(list(args))
            if args[1].startswith("-get"):
                return CommandResult("** Error: unknown\n", 1)
            return CommandResult("", 0)

    runner = Unclear()
    engine = make_engine(runner, scheduler, clock)  # type: ignore[arg-type]
    assert engine.belief.should_restore is False

    engine.on_sleep()
    engine.on_wake()

    sets = [c[3] for c in runner.calls if c[1] == "-setairportpower"]
    assert sets == ["off"]
    assert engine.mode is ShieldMode.AWAKE
    assert engine.session is not None and engine.session.is_complete


def test_broken_status_listener_keeps_wake_check(scheduler: ManualScheduler, clock: FakeClock) -> None:
    wifi = FakeWifi(on=True)
    engine = make_engine(wifi, scheduler, clock)

    def broken(message: object) -> None:
        raise BrokenPipeError("stdout closed")

    engine.status.subscribe(broken)

    engine.on_sleep()
    engine.on_wake()

    assert engine.mode is ShieldMode.AWAKE
    assert wifi.on is True
    assert [delay for delay, _ in scheduler.pending] == [5.0]
    assert engine.status.current.text.startswith("Wi-Fi restored")
