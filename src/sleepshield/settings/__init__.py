"""Application settings management.

This package provides:
- UserSettings: User-configurable settings loaded from config.yaml
- ApplicationSettings: Internal application settings and defaults
"""

from sleepshield.settings.application import ApplicationSettings, NetworkCommands
from sleepshield.settings.user import UserSettings

__all__ = ["ApplicationSettings", "NetworkCommands", "UserSettings"]
