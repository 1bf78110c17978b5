"""Data models shared by the engine, the status surface and the CLI."""

from sleepshield.models.session import SleepSession, StatusMessage
from sleepshield.models.state import BeliefState, ShieldConfig

__all__ = ["BeliefState", "ShieldConfig", "SleepSession", "StatusMessage"]
