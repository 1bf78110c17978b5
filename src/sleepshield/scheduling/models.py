"""Data models for scheduling settings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta


@dataclass
class TimingSettings:
    """Background poll and post-wake re-check timing."""

    poll_interval: timedelta = timedelta(seconds=30)
    reverify_delay: timedelta = timedelta(seconds=5)

    @classmethod
    def from_seconds(cls, poll: float, reverify: float) -> TimingSettings:
        return cls(poll_interval=timedelta(seconds=poll), reverify_delay=timedelta(seconds=reverify))
