"""Wi-Fi power control through macOS ``networksetup``.

Power toggling is unreliable across OS versions and port naming schemes,
so every operation here is an ordered list of fallbacks and every outcome
is a value, never an exception. Command output is unstructured text and
is read by substring matching.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Final

from sleepshield.common.enums import PowerMethod
from sleepshield.settings.application import NetworkCommands
from sleepshield.types.system import CommandResult, CommandRunner

logger: Final = logging.getLogger(__name__)

# "Wi-Fi", "WiFi", "wi-fi" port names, or the older "AirPort" alias
_WIRELESS_PORT: Final = re.compile(r"wi-?fi|airport", re.IGNORECASE)


@dataclass(frozen=True)
class DriverSuccess:
    """A power change that one of the methods reported as done."""

    method: PowerMethod
    interface: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class DriverFailure:
    """Every method failed. ``attempts`` holds the last output of each one."""

    interface: str
    attempts: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return False


DriverResult = DriverSuccess | DriverFailure


def command_succeeded(result: CommandResult) -> bool:
    """A networksetup change worked if it printed nothing or no error."""
    return "error" not in result.text


def parse_hardware_ports(output: str) -> str | None:
    """Find the device of the first wireless hardware port.

    ``networksetup -listallhardwareports`` prints blocks such as::

        Hardware Port: Wi-Fi
        Device: en0
        Ethernet Address: ...

    Args:
        output: Raw command output

    Returns:
        Device name (e.g. "en0"), or None if no wireless port is listed
    """
    lines = output.splitlines()
    for i, line in enumerate(lines):
        key, _, port = line.partition(":")
        if key.strip().lower() != "hardware port" or not _WIRELESS_PORT.search(port):
            continue
        if i + 1 >= len(lines):
            continue
        dev_key, _, device = lines[i + 1].partition(":")
        if "device" in dev_key.lower() and device.strip():
            return device.strip()
    return None


class InterfacePowerDriver:
    """Queries and changes the wireless adapter's power state.

    The driver remembers one interface name. It is resolved from the
    hardware port list at construction and replaced whenever a fallback
    interface turns out to be the one that works.
    """

    def __init__(
        self,
        runner: CommandRunner,
        commands: NetworkCommands | None = None,
        interface: str | None = None,
    ) -> None:
        """Initialize the driver.

        Args:
            runner: Command runner used for every networksetup call
            commands: Tool paths and interface names
            interface: Known interface; skips hardware port detection if given
        """
        self.runner = runner
        self.commands = commands or NetworkCommands()
        self.interface = interface or self.resolve_identity()

    def _networksetup(self, *args: str) -> CommandResult:
        try:
            return self.runner.run([self.commands.networksetup, *args])
        except Exception as exc:
            logger.warning("networksetup %s failed: %s", args[0], exc)
            return CommandResult(output=f"Error running command: {exc}", returncode=-1)

    def resolve_identity(self) -> str:
        """Detect the Wi-Fi device from the hardware port list.

        Returns:
            The wireless device name, or the configured default if none is found
        """
        result = self._networksetup("-listallhardwareports")
        device = parse_hardware_ports(result.output)
        if device:
            logger.info("Found Wi-Fi interface: %s", device)
            return device

        logger.warning(
            "Could not detect Wi-Fi interface, using default: %s",
            self.commands.default_interface,
        )
        return self.commands.default_interface

    def query_power(self, interface: str | None = None) -> bool:
        """Return True if the radio is on.

        Asks the port directly first. If the answer is neither on nor off,
        asks whether the Wi-Fi service is enabled instead. Anything else
        counts as off.

        Args:
            interface: Interface to ask about (default: the remembered one)
        """
        iface = interface or self.interface
        result = self._networksetup("-getairportpower", iface)
        if ": on" in result.text:
            logger.debug("Wi-Fi is ON (%s)", iface)
            return True
        if ": off" in result.text:
            logger.debug("Wi-Fi is OFF (%s)", iface)
            return False

        logger.debug("Port power for %s unclear (%r), checking service", iface, result.output)
        service = self._networksetup("-getnetworkserviceenabled", self.commands.service_name)
        enabled = service.text == "enabled"
        logger.debug("Wi-Fi service is %s", "enabled" if enabled else "not enabled")
        return enabled

    def set_power(self, on: bool, interface: str | None = None) -> DriverResult:
        """Turn the radio on or off, trying each method until one works.

        Order: the port itself, then the network service, then each of the
        fallback interfaces. A fallback interface that works becomes the
        remembered interface.

        Args:
            on: Desired power state
            interface: Interface to change (default: the remembered one)

        Returns:
            DriverSuccess naming the method that worked, or DriverFailure
        """
        iface = interface or self.interface
        state = "on" if on else "off"
        attempts: list[str] = []

        result = self._networksetup("-setairportpower", iface, state)
        if command_succeeded(result):
            logger.info("Wi-Fi %s via %s", state, iface)
            return DriverSuccess(PowerMethod.DIRECT, iface)
        attempts.append(result.output.strip())
        logger.warning("Setting %s power failed: %s", iface, result.output.strip())

        result = self._networksetup("-setnetworkserviceenabled", self.commands.service_name, state)
        if command_succeeded(result):
            logger.info("Wi-Fi %s via service %r", state, self.commands.service_name)
            return DriverSuccess(PowerMethod.SERVICE, iface)
        attempts.append(result.output.strip())
        logger.warning("Setting service %r failed: %s", self.commands.service_name, result.output.strip())

        for candidate in self.commands.fallback_interfaces:
            result = self._networksetup("-setairportpower", candidate, state)
            if command_succeeded(result):
                if candidate != self.interface:
                    logger.info("Switching Wi-Fi interface %s -> %s", self.interface, candidate)
                self.interface = candidate
                return DriverSuccess(PowerMethod.FALLBACK_INTERFACE, candidate)
            attempts.append(result.output.strip())

        logger.error("All methods failed to turn Wi-Fi %s", state)
        return DriverFailure(iface, attempts)
