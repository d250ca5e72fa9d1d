"""Rendered fragments, widget states and formatting errors."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict

Values = Dict[str, Any]


class State(enum.Enum):
    """Visual state of a widget."""

    IDLE = "idle"
    INFO = "info"
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class Metadata:
    """Extra attributes attached to a rendered fragment."""

    instance: str | None = None
    underline: bool = False
    italic: bool = False

    def is_default(self) -> bool:
        return self == Metadata()


@dataclass
class Fragment:
    """A piece of rendered text together with its metadata."""

    text: str = ""
    metadata: Metadata = field(default_factory=Metadata)

    def formatted_text(self) -> str:
        text = self.text
        if self.metadata.underline:
            text = f"<u>{text}</u>"
        if self.metadata.italic:
            text = f"<i>{text}</i>"
        return text


class FormatError(Exception):
    """Base class for errors raised while rendering a format."""


class PlaceholderNotFound(FormatError):
    """A format refers to a placeholder that has no value."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Placeholder '{name}' not found")
        self.name = name


class IncompatibleFormatter(FormatError):
    """A value was given to a formatter that cannot handle its type."""

    def __init__(self, ty: str, fmt: str) -> None:
        super().__init__(f"{ty} cannot be formatted with '{fmt}' formatter")
        self.ty = ty
        self.fmt = fmt