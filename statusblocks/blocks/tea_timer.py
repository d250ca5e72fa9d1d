"""A countdown timer that can be extended with clicks."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from statusblocks.click import spawn_shell
from statusblocks.errors import BlockError

DEFAULT_INCREMENT = 30


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TeaTimer:
    """Timer state: when it ends and whether it was running at the last tick."""

    def __init__(
        self,
        increment: int | None = None,
        done_cmd: str | None = None,
        now: datetime | None = None,
        spawn: Callable[[str], Any] = spawn_shell,
    ) -> None:
        self.increment = timedelta(
            seconds=increment if increment is not None else DEFAULT_INCREMENT
        )
        self.done_cmd = done_cmd
        self.timer_end = now if now is not None else _now()
        self.timer_was_active = False
        self._spawn = spawn

    def remaining(self, now: datetime | None = None) -> timedelta:
        return self.timer_end - (now if now is not None else _now())

    def _is_active(self, now: datetime) -> bool:
        return self.remaining(now) > timedelta(0)

    def apply(self, action: str, now: datetime | None = None) -> None:
        """Handle the `increment`, `decrement` or `reset` action; others are ignored."""
        now = now if now is not None else _now()
        active = self._is_active(now)
        if action == "increment":
            self.timer_end = self.timer_end + self.increment if active else now + self.increment
        elif action == "decrement" and active:
            self.timer_end -= self.increment
        elif action == "reset":
            self.timer_end = now

    def values(self, now: datetime | None = None) -> dict[str, str]:
        """Placeholder values; hours, minutes and seconds only while running."""
        now = now if now is not None else _now()
        values = {"icon": "tea"}
        if self._is_active(now):
            total = int(self.remaining(now).total_seconds())
            values["hours"] = f"{total // 3600:02}"
            values["minutes"] = f"{total // 60 % 60:02}"
            values["seconds"] = f"{total % 60:02}"
        return values

    def tick(self, now: datetime | None = None) -> dict[str, str]:
        """Advance the timer, running `done_cmd` when it has just run out."""
        now = now if now is not None else _now()
        active = self._is_active(now)
        if not active and self.timer_was_active and self.done_cmd is not None:
            try:
                self._spawn(self.done_cmd)
            except OSError as exc:
                raise BlockError("done_cmd error", exc) from exc
        self.timer_was_active = active
        return self.values(now)