"""System uptime shown in its two largest units."""

from __future__ import annotations

import re
from pathlib import Path

from statusblocks.errors import BlockError

UPTIME_PATH = "/proc/uptime"

_UNSIGNED = re.compile(r"\+?[0-9]+")
_U64_MAX = 2**64 - 1


def parse_uptime(text: str) -> int:
    """Whole seconds from the contents of /proc/uptime."""
    head = text.split(".", 1)[0]
    if not _UNSIGNED.fullmatch(head) or int(head) > _U64_MAX:
        raise BlockError("/proc/uptime has invalid content")
    return int(head)


def format_uptime(seconds: int) -> str:
    """Describe a duration in seconds using its two largest units."""
    weeks, seconds = divmod(seconds, 604_800)
    days, seconds = divmod(seconds, 86_400)
    hours, seconds = divmod(seconds, 3_600)
    minutes, seconds = divmod(seconds, 60)
    if weeks > 0:
        return f"{weeks}w {days}d"
    if days > 0:
        return f"{days}d {hours}h"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m {seconds}s"


def read_uptime(path: str | Path = UPTIME_PATH) -> int:
    """Read the system uptime in whole seconds."""
    try:
        text = Path(path).read_text()
    except (OSError, UnicodeDecodeError) as exc:
        raise BlockError("Failed to read /proc/uptime", exc) from exc
    return parse_uptime(text)