"""Status of the Watson time tracker."""

from __future__ import annotations

import json
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path

from statusblocks.formatting import State, Values

_SECONDS_PER = {"week": 604_800, "day": 86_400, "hour": 3_600, "minute": 60, "second": 1}


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return quotient if value >= 0 else -quotient


def _spans(delta: timedelta, labels: tuple[str, ...]) -> list[tuple[str, int]]:
    seconds = _trunc_div(delta // timedelta(microseconds=1), 1_000_000)
    return [(label, _trunc_div(seconds, _SECONDS_PER[label])) for label in labels]


def format_delta_past(delta: timedelta) -> str:
    """Describe how long ago something started, in its largest unit."""
    for label, n in _spans(delta, ("week", "day", "hour", "minute")):
        if n != 0:
            suffix = "s" if n > 1 else ""
            return f"{n} {label}{suffix} ago"
    return "now"


def format_delta_after(delta: timedelta) -> str:
    """Describe how long something lasted, in its largest unit."""
    for label, n in _spans(delta, ("week", "day", "hour", "minute", "second")):
        if n != 0:
            suffix = "s" if n > 1 else ""
            return f"after {n} {label}{suffix}"
    return "now"


def _local_now() -> datetime:
    return datetime.now().astimezone()


@dataclass(frozen=True)
class ActiveState:
    """A running Watson frame."""

    project: str
    start: datetime
    tags: list[str] = field(default_factory=list)

    def describe(
        self,
        show_time: bool,
        verb: str,
        formatter: Callable[[timedelta], str],
        now: datetime | None = None,
    ) -> str:
        text = self.project
        if self.tags:
            text += f" [{' '.join(self.tags)}]"
        if show_time:
            current = now if now is not None else _local_now()
            text += f" {verb} {formatter(current - self.start)}"
        return text


def parse_state(text: str) -> ActiveState | None:
    """Parse the Watson state file; anything that is not a running frame is idle (None)."""
    try:
        raw = json.loads(text)
    except ValueError:
        return None
    if not isinstance(raw, dict):
        return None
    project, start, tags = raw.get("project"), raw.get("start"), raw.get("tags")
    if (
        not isinstance(project, str)
        or not isinstance(start, int)
        or isinstance(start, bool)
        or not isinstance(tags, list)
        or not all(isinstance(tag, str) for tag in tags)
    ):
        return None
    try:
        started = datetime.fromtimestamp(start).astimezone()
    except (OverflowError, OSError, ValueError):
        return None
    return ActiveState(project, started, list(tags))


def default_state_path() -> Path:
    """The state file in the user's configuration directory."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    config_dir = Path(xdg) if xdg and os.path.isabs(xdg) else Path.home() / ".config"
    return config_dir / "watson" / "state"


class WatsonView:
    """Turns successive Watson states into a widget state and values."""

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock if clock is not None else _local_now
        self.prev_state: ActiveState | None = None

    def update(self, state: ActiveState | None, show_time: bool) -> tuple[State, Values]:
        now = self._clock()
        if state is not None:
            self.prev_state = state
            return State.GOOD, {
                "text": state.describe(show_time, "started", format_delta_past, now)
            }
        previous, self.prev_state = self.prev_state, None
        if previous is not None:
            # Tracking just stopped: show how long the last frame ran.
            return State.IDLE, {
                "text": previous.describe(True, "stopped", format_delta_after, now)
            }
        return State.IDLE, {}