"""Connection status of VPN networks managed by the nordvpn or mullvad tools."""

from __future__ import annotations

import enum
import re
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from statusblocks.errors import BlockError
from statusblocks.formatting import State

_NORDVPN_COUNTRY_CODE = re.compile(r"^.*Hostname:\s+([a-z]{2}).*$")
_MULLVAD_COUNTRY_CODE = re.compile(r"Connected to ([a-z]{2}).*, ([A-Z][a-z]*).*\n")

_REGIONAL_INDICATOR_A = 0x1F1E6

Output = Callable[[Sequence[str]], bytes]
Call = Callable[[Sequence[str]], int]


class StatusKind(enum.Enum):
    """Whether the VPN is connected, disconnected or in an unknown state."""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERROR = "error"


_ICONS = {
    StatusKind.CONNECTED: "net_vpn",
    StatusKind.DISCONNECTED: "net_wired",
    StatusKind.ERROR: "net_down",
}


@dataclass(frozen=True)
class Status:
    """The VPN status; country fields are only meaningful when connected."""

    kind: StatusKind
    country: str = ""
    country_flag: str = ""

    def icon(self) -> str:
        return _ICONS[self.kind]


def widget_state(status: Status, connected: State, disconnected: State) -> State:
    """Pick the widget state configured for the given status."""
    if status.kind is StatusKind.CONNECTED:
        return connected
    if status.kind is StatusKind.DISCONNECTED:
        return disconnected
    return State.CRITICAL


def _country_flag(code: str) -> str:
    """Turn a two letter ISO country code into a flag made of regional indicators."""
    if len(code) != 2 or not all("A" <= c <= "Z" for c in code):
        return ""
    return "".join(chr(_REGIONAL_INDICATOR_A + ord(c) - ord("A")) for c in code)


def _find_line(text: str, needle: str) -> str | None:
    return next((line for line in text.splitlines() if needle in line), None)


def parse_nordvpn_status(text: str) -> Status:
    """Interpret the output of `nordvpn status`."""
    line_status = _find_line(text, "Status:")
    if line_status is None:
        return Status(StatusKind.ERROR)
    if line_status.endswith("Disconnected"):
        return Status(StatusKind.DISCONNECTED)
    if not line_status.endswith("Connected"):
        return Status(StatusKind.ERROR)

    line_country = _find_line(text, "Country:")
    country = line_country.rsplit(": ", 1)[-1] if line_country is not None else ""

    flag = ""
    line_host = _find_line(text, "Hostname:")
    if line_host is not None:
        match = _NORDVPN_COUNTRY_CODE.match(line_host)
        if match is not None:
            flag = _country_flag(match.group(1).upper())
    return Status(StatusKind.CONNECTED, country, flag)


def parse_mullvad_status(text: str) -> Status:
    """Interpret the output of `mullvad status`."""
    if "Disconnected" in text:
        return Status(StatusKind.DISCONNECTED)
    if "Connected" in text:
        match = _MULLVAD_COUNTRY_CODE.search(text)
        if match is None:
            return Status(StatusKind.CONNECTED)
        return Status(
            StatusKind.CONNECTED,
            country=match.group(2),
            country_flag=_country_flag(match.group(1).upper()),
        )
    return Status(StatusKind.ERROR)


def _default_output(args: Sequence[str]) -> bytes:
    return subprocess.run(
        list(args), stdin=subprocess.DEVNULL, stdout=subprocess.PIPE, check=False
    ).stdout


def _default_call(args: Sequence[str]) -> int:
    return subprocess.run(
        list(args), stdin=subprocess.DEVNULL, stdout=subprocess.DEVNULL, check=False
    ).returncode


class _CommandDriver:
    program = ""
    check_exit_status = False

    def __init__(self, output: Output | None = None, call: Call | None = None) -> None:
        self._output = output if output is not None else _default_output
        self._call = call if call is not None else _default_call

    def _parse(self, text: str) -> Status:
        raise NotImplementedError

    def get_status(self) -> Status:
        try:
            raw = self._output([self.program, "status"])
        except OSError as exc:
            raise BlockError(f"Problem running {self.program} command", exc) from exc
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise BlockError(f"{self.program} produced non-UTF8 output", exc) from exc
        return self._parse(text)

    def _run_network_command(self, arg: str) -> None:
        try:
            code = self._call([self.program, arg])
        except OSError as exc:
            raise BlockError(f"Problem running {self.program} command: {arg}", exc) from exc
        if self.check_exit_status and code != 0:
            raise BlockError(
                f"{self.program} command failed with nonzero status: exit status: {code}"
            )

    def toggle_connection(self, status: Status) -> None:
        if status.kind is StatusKind.CONNECTED:
            self._run_network_command("disconnect")
        elif status.kind is StatusKind.DISCONNECTED:
            self._run_network_command("connect")


class NordVpnDriver(_CommandDriver):
    """Driver using the `nordvpn` command line tool."""

    program = "nordvpn"
    check_exit_status = False

    def _parse(self, text: str) -> Status:
        return parse_nordvpn_status(text)

    def get_status(self) -> Status:
        return super().get_status()

    def toggle_connection(self, status: Status) -> None:
        super().toggle_connection(status)


class MullvadDriver(_CommandDriver):
    """Driver using the `mullvad` command line tool."""

    program = "mullvad"
    check_exit_status = True

    def _parse(self, text: str) -> Status:
        return parse_mullvad_status(text)

    def get_status(self) -> Status:
        return super().get_status()

    def toggle_connection(self, status: Status) -> None:
        super().toggle_connection(status)


def make_driver(name: str = "nordvpn") -> NordVpnDriver | MullvadDriver:
    """Create the driver configured by name."""
    if name == "nordvpn":
        return NordVpnDriver()
    if name == "mullvad":
        return MullvadDriver()
    raise ValueError(f"unknown variant `{name}`, expected `nordvpn` or `mullvad`")