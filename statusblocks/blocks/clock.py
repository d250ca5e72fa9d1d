"""The current time, optionally cycling through several time zones."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone as dt_timezone
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_FORMAT = " $icon $timestamp.datetime() "
DEFAULT_INTERVAL = 10


def _zone(name: Any) -> ZoneInfo:
    if not isinstance(name, str):
        raise ValueError(f"invalid time zone {name!r}")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"'{name}' is not a valid timezone") from None


def parse_timezones(value: Any) -> list[ZoneInfo]:
    """Accept no time zone, a single name, or a list of names."""
    if value is None:
        return []
    if isinstance(value, str):
        return [_zone(value)]
    if isinstance(value, (list, tuple)):
        return [_zone(name) for name in value]
    raise ValueError(f"invalid time zone configuration {value!r}")


class TimezoneCycle:
    """Cycles forwards and backwards through time zones; `current` is None if there are none."""

    def __init__(self, timezones: Sequence[ZoneInfo]) -> None:
        self._zones = list(timezones)
        self._next = 0
        self.current: ZoneInfo | None = self._advance()

    def _advance(self) -> ZoneInfo | None:
        if not self._zones:
            return None
        zone = self._zones[self._next % len(self._zones)]
        self._next = (self._next + 1) % len(self._zones)
        return zone

    def next_timezone(self) -> ZoneInfo | None:
        self.current = self._advance()
        return self.current

    def prev_timezone(self) -> ZoneInfo | None:
        if self._zones:
            self._next = (self._next + max(len(self._zones) - 2, 0)) % len(self._zones)
        self.current = self._advance()
        return self.current


def current_time(timezone: ZoneInfo | None = None) -> datetime:
    """The current time in the given zone, or in the local zone."""
    now = datetime.now(dt_timezone.utc)
    return now.astimezone(timezone) if timezone is not None else now.astimezone()