"""Number of tasks matching taskwarrior filters."""

from __future__ import annotations

import itertools
import re
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field

from statusblocks.errors import BlockError
from statusblocks.formatting import State

DEFAULT_FORMAT = " $icon $count.eng(w:1) "

_UNSIGNED = re.compile(r"\+?[0-9]+")
_U32_MAX = 2**32 - 1


@dataclass(frozen=True)
class Filter:
    """A named taskwarrior filter expression."""

    name: str
    filter: str


def _default_filters() -> list[Filter]:
    return [Filter(name="pending", filter="-COMPLETED -DELETED")]


@dataclass
class TaskwarriorConfig:
    """Configuration of the taskwarrior block."""

    interval: int = 600
    warning_threshold: int = 10
    critical_threshold: int = 20
    filters: list[Filter] = field(default_factory=_default_filters)
    format: str = DEFAULT_FORMAT
    format_singular: str = DEFAULT_FORMAT
    format_everything_done: str = DEFAULT_FORMAT
    data_location: str = "~/.task"


def parse_task_count(output: bytes | str) -> int:
    """Parse the output of `task count`."""
    if isinstance(output, bytes):
        try:
            output = output.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise BlockError(
                "failed to get the number of tasks from taskwarrior (invalid UTF-8)", exc
            ) from exc
    text = output.strip()
    if not _UNSIGNED.fullmatch(text) or int(text) > _U32_MAX:
        raise BlockError(
            "could not parse the result of taskwarrior",
            ValueError(f"invalid number '{text}'"),
        )
    return int(text)


def get_number_of_tasks(filter: str) -> int:
    """Ask taskwarrior how many tasks match the filter."""
    try:
        result = subprocess.run(
            ["task", "rc.gc=off", filter, "count"],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            check=False,
        )
    except OSError as exc:
        raise BlockError(
            "failed to run taskwarrior for getting the number of tasks", exc
        ) from exc
    return parse_task_count(result.stdout)


def task_state(count: int, warning: int, critical: int) -> State:
    """Widget state for the given number of tasks."""
    if count >= critical:
        return State.CRITICAL
    if count >= warning:
        return State.WARNING
    return State.IDLE


def format_kind(count: int) -> str:
    """Name of the configuration field whose format is used for `count` tasks."""
    if count == 0:
        return "format_everything_done"
    if count == 1:
        return "format_singular"
    return "format"


class FilterCycle:
    """Cycles endlessly through the configured filters."""

    def __init__(self, filters: Sequence[Filter]) -> None:
        if not filters:
            raise BlockError("`filters` is empty")
        self._filters = itertools.cycle(list(filters))
        self.current: Filter = next(self._filters)

    def next_filter(self) -> Filter:
        self.current = next(self._filters)
        return self.current