# src/sleepshield/system/__init__.py
"""System module for OS tools: commands, Wi-Fi power and battery."""

from sleepshield.system.battery import BatterySampler, PmsetBatterySource, SysfsBatterySource
from sleepshield.system.shell import SubprocessRunner
from sleepshield.system.wifi import (
    DriverFailure,
    DriverResult,
    DriverSuccess,
    InterfacePowerDriver,
)

__all__ = [
    "BatterySampler",
    "DriverFailure",
    "DriverResult",
    "DriverSuccess",
    "InterfacePowerDriver",
    "PmsetBatterySource",
    "SubprocessRunner",
    "SysfsBatterySource",
]
