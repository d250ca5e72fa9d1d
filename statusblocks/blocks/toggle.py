"""A toggle driven by shell commands."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass

from statusblocks.errors import BlockError
from statusblocks.formatting import State


@dataclass(frozen=True)
class ToggleConfig:
    """Commands that query and switch the toggle."""

    command_on: str
    command_off: str
    command_state: str
    format: str = " $icon "
    icon_on: str | None = None
    icon_off: str | None = None
    interval: int | None = None


def is_toggled(output: bytes | str) -> bool:
    """Empty output of the state command means off, anything else on."""
    if isinstance(output, bytes):
        try:
            output = output.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise BlockError("The output of command_state is invalid UTF-8", exc) from exc
    return bool(output.strip())


class Toggle:
    """Runs the configured commands in the user's shell."""

    def __init__(self, config: ToggleConfig, shell: str | None = None) -> None:
        self.config = config
        self.shell = shell if shell is not None else os.environ.get("SHELL", "sh")
        self.state = State.IDLE

    def _run(self, command: str, message: str) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                [self.shell, "-c", command],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                check=False,
            )
        except OSError as exc:
            raise BlockError(message, exc) from exc

    def check_state(self) -> bool:
        """Whether the toggle is currently on."""
        result = self._run(self.config.command_state, "Failed to run command_state")
        return is_toggled(result.stdout)

    def toggle(self, toggled: bool) -> bool:
        """Switch away from the given state; return whether the command succeeded."""
        command = self.config.command_off if toggled else self.config.command_on
        result = self._run(command, "Failed to run command")
        success = result.returncode == 0
        self.state = State.IDLE if success else State.CRITICAL
        return success

    def icon(self, toggled: bool) -> str:
        if toggled:
            return self.config.icon_on if self.config.icon_on is not None else "toggle_on"
        return self.config.icon_off if self.config.icon_off is not None else "toggle_off"