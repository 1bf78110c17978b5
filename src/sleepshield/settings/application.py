"""Internal application settings derived from user settings."""

from __future__ import annotations

from dataclasses import dataclass, field

from sleepshield.scheduling.models import TimingSettings
from sleepshield.settings.user import UserSettings


@dataclass
class NetworkCommands:
    """Executable paths and names the Wi-Fi driver and battery sampler use.

    Keeping these together lets the driver build argument lists without
    knowing where the settings came from.
    """

    networksetup: str = "/usr/sbin/networksetup"
    pmset: str = "/usr/bin/pmset"
    service_name: str = "Wi-Fi"
    default_interface: str = "en0"
    fallback_interfaces: list[str] = field(default_factory=lambda: ["en0", "en1", "en2", "en3"])
    timeout: float = 10.0

    @classmethod
    def from_user(cls, user: UserSettings) -> NetworkCommands:
        return cls(
            networksetup=user.networksetup_path,
            pmset=user.pmset_path,
            service_name=user.wifi_service_name,
            default_interface=user.default_interface,
            fallback_interfaces=list(user.fallback_interfaces),
            timeout=user.command_timeout_seconds,
        )


class ApplicationSettings:
    """Application settings container.

    Combines user-provided configuration with application defaults:

    - Timing for the background poll and the post-wake re-check
    - Command paths and interface names for the OS tools

    Examples:
        user_settings = UserSettings.load()
        app_settings = ApplicationSettings(user_settings)
        interval = app_settings.timing.poll_interval
    """

    def __init__(
        self,
        user_settings: UserSettings,
        timing: TimingSettings | None = None,
        commands: NetworkCommands | None = None,
    ):
        """Initialize application settings with configuration sources."""
        self.user = user_settings
        self.timing = timing or TimingSettings.from_seconds(
            user_settings.poll_interval_seconds, user_settings.reverify_delay_seconds
        )
        self.commands = commands or NetworkCommands.from_user(user_settings)
