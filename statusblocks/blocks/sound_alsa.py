"""Volume control of an ALSA mixer through the amixer and alsactl tools."""

from __future__ import annotations

import re
import subprocess
from collections.abc import Callable, Sequence
from typing import BinaryIO

from statusblocks.errors import BlockError

_U32_MAX = 2**32 - 1
_UNSIGNED = re.compile(r"\+?[0-9]+")

Run = Callable[[Sequence[str]], bytes]


def _parse_u32(text: str) -> int:
    if not _UNSIGNED.fullmatch(text):
        raise ValueError(f"invalid digit found in '{text}'")
    value = int(text)
    if value > _U32_MAX:
        raise ValueError("number too large to fit in target type")
    return value


def parse_amixer_output(output: str) -> tuple[int, bool]:
    """Read the volume in percent and the mute flag from `amixer get` output."""
    lines = output.strip().splitlines()
    if not lines:
        raise BlockError("could not get sound info")
    fields = iter(
        token.strip("[]%")
        for token in lines[-1].split()
        if token.startswith("[") and "dB" not in token
    )
    volume_text = next(fields, None)
    if volume_text is None:
        raise BlockError("could not get volume")
    try:
        volume = _parse_u32(volume_text)
    except ValueError as exc:
        raise BlockError("could not parse volume to u32", exc) from exc
    muted = next(fields, None) == "off"
    return volume, muted


def _default_run(args: Sequence[str]) -> bytes:
    return subprocess.run(
        list(args), stdin=subprocess.DEVNULL, stdout=subprocess.PIPE, check=False
    ).stdout


class AlsaDevice:
    """A named ALSA mixer control on a given device.

    ALSA has no description, active port or form factor for a control, so
    those attributes stay None.
    """

    def __init__(
        self,
        name: str,
        device: str,
        natural_mapping: bool = False,
        run: Run | None = None,
        monitor: BinaryIO | None = None,
    ) -> None:
        self.name = name
        self.device = device
        self.natural_mapping = natural_mapping
        self.volume = 0
        self.muted = False
        self.output_description: str | None = None
        self.active_port: str | None = None
        self.form_factor: str | None = None
        self._run = run if run is not None else _default_run
        self._process: subprocess.Popen | None = None
        if monitor is None:
            try:
                self._process = subprocess.Popen(
                    ["alsactl", "monitor"],
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                )
            except OSError as exc:
                raise BlockError("Failed to start alsactl monitor", exc) from exc
            if self._process.stdout is None:
                raise BlockError("Failed to pipe alsactl monitor output")
            monitor = self._process.stdout
        self._monitor = monitor

    @property
    def output_name(self) -> str:
        return self.name

    def _amixer(self, *args: str) -> list[str]:
        command = ["amixer"]
        if self.natural_mapping:
            command.append("-M")
        command.extend(["-D", self.device, *args])
        return command

    def get_info(self) -> None:
        """Refresh the volume and mute state from amixer."""
        try:
            raw = self._run(self._amixer("get", self.name))
        except OSError as exc:
            raise BlockError("could not run amixer to get sound info", exc) from exc
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise BlockError("amixer produced non-UTF8 output", exc) from exc
        self.volume, self.muted = parse_amixer_output(text)

    def set_volume(self, step: int, max_vol: int | None = None) -> None:
        """Change the volume by `step` percent, never below 0 nor above `max_vol`."""
        new_volume = max(0, self.volume + step)
        if max_vol is not None:
            new_volume = min(new_volume, max_vol)
        try:
            self._run(self._amixer("set", self.name, f"{new_volume}%"))
        except OSError as exc:
            raise BlockError("failed to set volume", exc) from exc
        self.volume = new_volume

    def toggle(self) -> None:
        """Toggle the mute switch."""
        try:
            self._run(self._amixer("set", self.name, "toggle"))
        except OSError as exc:
            raise BlockError("failed to toggle mute", exc) from exc
        self.muted = not self.muted

    def wait_for_update(self) -> None:
        """Block until alsactl reports a mixer event."""
        try:
            reader = getattr(self._monitor, "read1", self._monitor.read)
            reader(1024)
        except OSError as exc:
            raise BlockError("Failed to read stdbuf output", exc) from exc

    def close(self) -> None:
        """Stop the alsactl monitor if this device started it."""
        if self._process is not None:
            self._process.terminate()
            self._process.wait()
            if self._process.stdout is not None:
                self._process.stdout.close()
            self._process = None

    def __enter__(self) -> AlsaDevice:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()