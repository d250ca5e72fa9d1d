"""X11 screen name, brightness and resolution from xrandr."""

from __future__ import annotations

import math
import re
import subprocess
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from statusblocks.click import spawn_shell
from statusblocks.errors import BlockError

_U32_MAX = 2**32 - 1


def _float_text(value: float) -> str:
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


@dataclass
class Monitor:
    """An active output with its gamma brightness in percent."""

    name: str
    brightness: int
    resolution: str
    spawn: Callable[[str], Any] = field(default=spawn_shell, repr=False, compare=False)

    def set_brightness(self, brightness: int) -> None:
        """Ask xrandr to change the brightness; failures to start it are ignored."""
        try:
            self.spawn(
                f"xrandr --output {self.name} --brightness  {_float_text(brightness / 100.0)}"
            )
        except OSError:
            pass
        self.brightness = brightness

    def brightness_up(self, step: int) -> None:
        self.set_brightness(min(self.brightness + step, 100))

    def brightness_down(self, step: int) -> None:
        self.set_brightness(max(self.brightness - step, 0))


def _to_percent(value: float) -> int:
    scaled = value * 100.0
    if math.isnan(scaled):
        return 0
    if scaled >= _U32_MAX:
        return _U32_MAX
    return max(0, int(scaled))


def _parse_error(cause: BaseException | None = None) -> BlockError:
    return BlockError("Failed to parse xrandr output", cause)


def parse_monitors(active_monitors: str, monitors_info: str) -> list[Monitor]:
    """Combine `xrandr --listactivemonitors` and `xrandr --verbose` output into monitors."""
    patterns = [f"{line.split()[-1]} connected" for line in active_monitors.splitlines() if line.split()]
    patterns.append("Brightness:")
    try:
        regexes = [re.compile(p) for p in patterns]
    except re.error as exc:
        raise BlockError("Failed to create RegexSet", exc) from exc

    lines = iter(
        line for line in monitors_info.splitlines() if any(r.search(line) for r in regexes)
    )
    monitors = []
    for line1, line2 in zip(lines, lines):
        tokens = line1.split()
        if not tokens:
            raise _parse_error()
        name = tokens[0]
        rest = tokens[2:]
        # The line is "<name> connected [primary] <resolution>".
        if rest and rest[0] == "primary":
            rest = rest[1:]
        if not rest:
            raise _parse_error()
        resolution = rest[0].split("+", 1)[0]

        parts = line2.split(":")
        if len(parts) < 2:
            raise _parse_error()
        try:
            value = float(parts[1].strip())
        except ValueError as exc:
            raise _parse_error(exc) from exc
        monitors.append(Monitor(name, _to_percent(value), resolution))
    return monitors


def _xrandr(arg: str, message: str) -> str:
    try:
        raw = subprocess.run(
            ["xrandr", arg], stdin=subprocess.DEVNULL, stdout=subprocess.PIPE, check=False
        ).stdout
    except OSError as exc:
        raise BlockError(message, exc) from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BlockError("xrandr produced non-UTF8 output", exc) from exc


def get_monitors() -> list[Monitor]:
    """Query xrandr for the active monitors."""
    active = _xrandr("--listactivemonitors", "Failed to collect active xrandr monitors")
    info = _xrandr("--verbose", "Failed to collect xrandr monitors info")
    return parse_monitors(active, info)