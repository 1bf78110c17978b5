"""Sleep/wake Wi-Fi guard with per-session battery telemetry."""

__version__ = "0.1.0"
