"""User-configurable settings loaded from config.yaml."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import ClassVar

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from sleepshield.models.state import ShieldConfig

# Load environment variables from .env file(s)
load_dotenv()

CONFIG_ENV_VAR = "SLEEPSHIELD_CONFIG"


def _interpolate_env(content: str) -> str:
    return re.sub(r"\$\{(\w+)\}", lambda m: os.getenv(m.group(1), ""), content)


class UserSettings(BaseModel):
    """User settings for the shield and for the macOS tools it drives.

    Every field has a default, so an empty config file is valid. Values
    can be overridden in config.yaml.
    """

    # Default search paths for configuration
    DEFAULT_CONFIG_PATHS: ClassVar[list[Path]] = [
        Path("config.yaml"),
        Path("~/.config/sleepshield/config.yaml").expanduser(),
        Path("/etc/sleepshield/config.yaml"),
    ]

    # Shield toggles
    enabled: bool = Field(True, description="Master switch for the shield")
    guard_wifi_on_sleep: bool = Field(True, description="Turn Wi-Fi off while asleep")

    # Timing
    poll_interval_seconds: float = Field(
        30.0, gt=0, description="How often to re-read the Wi-Fi state while awake"
    )
    reverify_delay_seconds: float = Field(
        5.0, ge=0, description="Delay before re-reading Wi-Fi state after restoring it"
    )

    # Interface and commands
    default_interface: str = Field(
        "en0", min_length=1, description="Interface used when port detection fails"
    )
    fallback_interfaces: list[str] = Field(
        default_factory=lambda: ["en0", "en1", "en2", "en3"],
        min_length=1,
        description="Interfaces tried in turn when every other method fails",
    )
    wifi_service_name: str = Field(
        "Wi-Fi", min_length=1, description="Network service name used by networksetup"
    )
    networksetup_path: str = Field("/usr/sbin/networksetup", min_length=1)
    pmset_path: str = Field("/usr/bin/pmset", min_length=1)
    command_timeout_seconds: float = Field(10.0, gt=0)

    # Presentation
    timestamp_format: str = Field(
        "%b %-d, %-I:%M %p", description="Session timestamp format (e.g. Nov 29, 6:04 PM)"
    )
    low_battery_percent: int = Field(
        20, ge=0, le=100, description="Wake battery level shown as low"
    )

    # ---- validators ----
    @field_validator("fallback_interfaces")
    @classmethod
    def validate_interfaces(cls, v: list[str]) -> list[str]:
        cleaned = [iface.strip() for iface in v]
        if any(not iface for iface in cleaned):
            raise ValueError("fallback_interfaces cannot contain blank names")
        return cleaned

    # ---- convenience methods ----
    def shield_config(self) -> ShieldConfig:
        """Build the runtime toggles the operator can flip while running."""
        return ShieldConfig(enabled=self.enabled, guard_wifi_on_sleep=self.guard_wifi_on_sleep)

    def is_low_battery(self, level: int) -> bool:
        """Check if a battery level should be flagged as low.

        Args:
            level: Battery percentage

        Returns:
            True if the level is below the configured threshold
        """
        return level < self.low_battery_percent

    @classmethod
    def load(cls, path: Path | None = None) -> UserSettings:
        """Load configuration from a YAML file.

        Args:
            path: Path to config file (optional, searches default locations if None)

        Returns:
            Validated UserSettings object

        Raises:
            FileNotFoundError: If no config file is found
            RuntimeError: If the config file cannot be parsed or is invalid
        """
        # Try to find config file
        if path is None:
            # Check environment variable first
            env_path = os.environ.get(CONFIG_ENV_VAR)
            if env_path:
                path = Path(env_path)
                if not path.exists():
                    raise FileNotFoundError(f"Config file from {CONFIG_ENV_VAR} not found: {path}")
            else:
                # Try default paths
                for default_path in cls.DEFAULT_CONFIG_PATHS:
                    if default_path.exists():
                        path = default_path
                        break
                else:
                    raise FileNotFoundError(
                        f"No configuration file found. Create config.yaml or set {CONFIG_ENV_VAR}."
                    )

        # Load and parse config
        import yaml  # local import to avoid hard dep for callers

        try:
            raw = _interpolate_env(path.read_text())
            data = yaml.safe_load(raw)
        except Exception as exc:
            raise RuntimeError(f"Unable to read config YAML: {exc}") from exc

        try:
            return cls.model_validate(data or {})
        except ValidationError as err:
            raise RuntimeError(f"Invalid configuration:\n{err}") from err
