"""SleepShield CLI application.

This module provides the command-line interface: the long-running
shield, a one-shot sleep/wake simulation, a status probe and
configuration helpers.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Final

import typer
import yaml
from pydantic import ValidationError

from sleepshield.controller import SleepShield
from sleepshield.display.summary import StatusRenderer, SummaryLine
from sleepshield.models.session import StatusMessage
from sleepshield.notifications import create_notification_source
from sleepshield.settings.user import UserSettings
from sleepshield.utils.formatting import format_percentage

# ── CLI setup ────────────────────────────────────────────────────────────────
app = typer.Typer(help="SleepShield: Wi-Fi off while asleep", add_completion=False)
config_app = typer.Typer(help="Config helpers")
app.add_typer(config_app, name="config")

logger: Final = logging.getLogger(__name__)  # Will be "sleepshield.cli"

CONFIG_OPTION = typer.Option(None, "--config", "-c", exists=True, dir_okay=False)
DEBUG_OPTION = typer.Option(False, "--debug", help="Enable debug logging")
DST_ARGUMENT = typer.Argument(..., help="Output config.yaml")
PAUSE_OPTION = typer.Option(0.0, "--pause", min=0.0, help="Seconds to stay asleep")

_TONE_COLORS: Final = {
    "ok": typer.colors.GREEN,
    "warn": typer.colors.YELLOW,
    "bad": typer.colors.RED,
}


def _echo_lines(lines: list[SummaryLine]) -> None:
    for line in lines:
        typer.secho(f"{line.label + ':':<10} {line.value}", fg=_TONE_COLORS.get(line.tone or ""))


def _create_shield(config: Path | None, debug: bool) -> SleepShield:
    try:
        return SleepShield(config, debug=debug)
    except RuntimeError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def run(
    config: Path | None = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Run the shield, reading sleep/wake commands from stdin."""
    shield = _create_shield(config, debug)
    renderer = StatusRenderer(shield.config)

    def show(message: StatusMessage) -> None:
        _echo_lines(renderer.render(message))

    shield.status.subscribe(show)
    shield.run(create_notification_source(sys.stdin))


@app.command()
def simulate(
    config: Path | None = CONFIG_OPTION,
    pause: float = PAUSE_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Simulate one sleep followed by a wake."""
    shield = _create_shield(config, debug)
    message = shield.simulate(pause)
    _echo_lines(StatusRenderer(shield.config).render(message))


@app.command()
def status(
    config: Path | None = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Show the Wi-Fi interface, its power state and the battery level."""
    shield = _create_shield(config, debug)
    probe = shield.probe()
    _echo_lines(
        [
            SummaryLine("Interface", probe.interface),
            SummaryLine("Wi-Fi", "on" if probe.wifi_on else "off", "ok" if probe.wifi_on else None),
            SummaryLine("Battery", format_percentage(probe.battery, missing="none")),
            SummaryLine(
                "Shield",
                "active" if shield.shield_config.active else "inactive",
                None if shield.shield_config.active else "warn",
            ),
        ]
    )


# ───────────────────────── config sub-commands ───────────────────────────────
@config_app.command("validate")
def validate_config(file: Path):
    """Validate a YAML config file against the schema."""
    try:
        UserSettings.load(file)
        typer.echo("✅ Config valid")
    except (RuntimeError, FileNotFoundError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@config_app.command("wizard")
def wizard(dst: Path = DST_ARGUMENT):
    """Interactive prompt to create a config file."""
    typer.echo("Interactive config builder - press Enter for defaults.")

    while True:
        data: dict[str, Any] = {
            "enabled": typer.confirm("Enable SleepShield", default=True),
            "guard_wifi_on_sleep": typer.confirm("Turn off Wi-Fi on sleep", default=True),
            "poll_interval_seconds": typer.prompt("Poll interval (seconds)", default="30"),
            "wifi_service_name": typer.prompt("Wi-Fi service name", default="Wi-Fi"),
        }
        try:
            cfg = UserSettings(**data)
            break  # valid → exit loop
        except ValidationError as err:
            typer.secho("\nConfig error(s):", fg=typer.colors.RED, err=True)
            for e in err.errors():
                typer.secho(f"  • {e['loc'][0]} - {e['msg']}", fg=typer.colors.RED, err=True)
            typer.echo("Please re-enter the values.\n")

    dst.write_text(yaml.safe_dump(cfg.model_dump(), sort_keys=False), encoding="utf-8")
    typer.secho(f"Config written to {dst}", fg=typer.colors.GREEN)


# ───────────────────────── module entrypoint ────────────────────────────────
if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(0)
