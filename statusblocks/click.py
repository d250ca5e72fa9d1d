"""Mouse buttons and user configured click handlers."""

from __future__ import annotations

import enum
import subprocess
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields
from typing import Any

from statusblocks.errors import BlockError


class MouseButton(enum.Enum):
    """A mouse button as reported by the bar."""

    LEFT = "left"
    MIDDLE = "middle"
    RIGHT = "right"
    WHEEL_UP = "up"
    WHEEL_DOWN = "down"
    FORWARD = "forward"
    BACK = "back"
    DOUBLE_LEFT = "double_left"


_BUTTON_NUMBERS = {
    1: MouseButton.LEFT,
    2: MouseButton.MIDDLE,
    3: MouseButton.RIGHT,
    4: MouseButton.WHEEL_UP,
    5: MouseButton.WHEEL_DOWN,
    8: MouseButton.BACK,
    9: MouseButton.FORWARD,
}


def parse_mouse_button(value: Any) -> MouseButton:
    """Parse a button given by name or by X11 button number."""
    if isinstance(value, MouseButton):
        return value
    if isinstance(value, str):
        try:
            return MouseButton(value)
        except ValueError:
            raise ValueError(f"unknown button '{value}'") from None
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return _BUTTON_NUMBERS[value]
        except KeyError:
            raise ValueError(f"unknown button '{value}'") from None
    raise ValueError(f"invalid type {type(value).__name__}, expected button as int or string")


def spawn_shell(cmd: str) -> subprocess.Popen:
    """Start a shell command in the background without waiting for it."""
    return subprocess.Popen(
        ["sh", "-c", cmd],
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )


def spawn_shell_sync(cmd: str) -> int:
    """Run a shell command, wait for it and return its exit status."""
    return subprocess.run(
        ["sh", "-c", cmd],
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        check=False,
    ).returncode


@dataclass(frozen=True)
class PostActions:
    """What the block should do after a click was handled."""

    action: str | None
    update: bool


@dataclass(frozen=True)
class ClickConfigEntry:
    """One user configured reaction to a button press."""

    button: MouseButton
    widget: str | None = None
    cmd: str | None = None
    action: str | None = None
    sync: bool = False
    update: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ClickConfigEntry:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown field `{unknown[0]}`")
        if "button" not in data:
            raise ValueError("missing field `button`")
        options = dict(data)
        options["button"] = parse_mouse_button(options["button"])
        for flag in ("sync", "update"):
            if flag in options and not isinstance(options[flag], bool):
                raise ValueError(f"`{flag}` must be a boolean")
        return cls(**options)


@dataclass(frozen=True)
class ClickHandler:
    """An ordered list of click entries; the first match wins."""

    entries: tuple[ClickConfigEntry, ...] = ()

    @classmethod
    def from_config(cls, entries: Iterable[Mapping[str, Any]]) -> ClickHandler:
        return cls(tuple(ClickConfigEntry.from_mapping(entry) for entry in entries))

    def find(self, button: MouseButton, widget: str | None) -> ClickConfigEntry | None:
        return next(
            (e for e in self.entries if e.button == button and e.widget == widget),
            None,
        )

    def handle(self, button: MouseButton, instance: str | None) -> PostActions | None:
        """Run the matching entry's command, if any, and return its post actions."""
        entry = self.find(button, instance)
        if entry is None:
            return None
        if entry.cmd is not None:
            try:
                if entry.sync:
                    spawn_shell_sync(entry.cmd)
                else:
                    spawn_shell(entry.cmd)
            except OSError as exc:
                raise BlockError(
                    f"'{button.name}' button handler: Failed to run '{entry.cmd}", exc
                ) from exc
        return PostActions(action=entry.action, update=entry.update)