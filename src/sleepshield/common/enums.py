from enum import Enum


class ShieldMode(Enum):
    """Engine-level mode. Background polling only runs while AWAKE."""

    AWAKE = "awake"
    ASLEEP = "asleep"


class PowerMethod(Enum):
    """Ways the driver can change the radio's power state, in the order tried."""

    DIRECT = "direct"  # networksetup -setairportpower <iface>
    SERVICE = "service"  # networksetup -setnetworkserviceenabled <service>
    FALLBACK_INTERFACE = "fallback_interface"  # direct, against en0..en3


class DrainSeverity(Enum):
    """How bad the battery drain over one sleep session was."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"

    @classmethod
    def classify(cls, drain: int) -> "DrainSeverity":
        if drain > 10:
            return cls.HIGH
        if drain > 5:
            return cls.MODERATE
        return cls.LOW


class ShieldEvent(Enum):
    """Signals and operator commands delivered to a running shield."""

    SLEEP = "sleep"
    WAKE = "wake"
    ENABLE = "enable"
    DISABLE = "disable"
    GUARD_ON = "guard_on"
    GUARD_OFF = "guard_off"
    STATUS = "status"
    QUIT = "quit"
