"""Ping, download and upload speeds measured by speedtest-cli."""

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass

from statusblocks.errors import BlockError

DEFAULT_FORMAT = " ^icon_ping $ping ^icon_net_down $speed_down ^icon_net_up $speed_up "
DEFAULT_INTERVAL = 1800


def _number(data: dict, key: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise BlockError(
            "'speedtest-cli' produced wrong JSON", ValueError(f"missing or invalid `{key}`")
        )
    return float(value)


@dataclass(frozen=True)
class SpeedtestResult:
    """Ping in seconds and speeds in bits per second."""

    ping: float
    speed_down: float
    speed_up: float

    @classmethod
    def from_json(cls, text: str | bytes) -> SpeedtestResult:
        """Parse `speedtest-cli --json` output, whose ping is in milliseconds."""
        if isinstance(text, bytes):
            try:
                text = text.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise BlockError("'speedtest-cli' produced non-UTF8 output", exc) from exc
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise BlockError("'speedtest-cli' produced wrong JSON", exc) from exc
        if not isinstance(data, dict):
            raise BlockError("'speedtest-cli' produced wrong JSON")
        return cls(
            ping=_number(data, "ping") * 1e-3,
            speed_down=_number(data, "download"),
            speed_up=_number(data, "upload"),
        )


def run_speedtest() -> SpeedtestResult:
    """Run speedtest-cli and parse its result."""
    try:
        result = subprocess.run(
            ["speedtest-cli", "--json"],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            check=False,
        )
    except OSError as exc:
        raise BlockError("failed to run 'speedtest-cli'", exc) from exc
    return SpeedtestResult.from_json(result.stdout)