"""Temperature scales, thresholds and summaries of sensor readings."""

from __future__ import annotations

import enum
import math
from collections.abc import Sequence
from dataclasses import dataclass

from statusblocks.formatting import State

DEFAULT_GOOD = 20.0
DEFAULT_IDLE = 45.0
DEFAULT_INFO = 60.0
DEFAULT_WARN = 80.0

MIN_VALID = -100.0
MAX_VALID = 150.0


class TemperatureScale(enum.Enum):
    """The scale temperatures are shown in."""

    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"

    def from_celsius(self, value: float) -> float:
        if self is TemperatureScale.FAHRENHEIT:
            return value * 1.8 + 32.0
        return value


@dataclass(frozen=True)
class Thresholds:
    """Upper bounds of the good, idle, info and warning states."""

    good: float
    idle: float
    info: float
    warning: float

    @classmethod
    def for_scale(
        cls,
        scale: TemperatureScale = TemperatureScale.CELSIUS,
        good: float | None = None,
        idle: float | None = None,
        info: float | None = None,
        warning: float | None = None,
    ) -> Thresholds:
        """Use the given bounds, converting the defaults to `scale` where one is missing."""
        return cls(
            good=good if good is not None else scale.from_celsius(DEFAULT_GOOD),
            idle=idle if idle is not None else scale.from_celsius(DEFAULT_IDLE),
            info=info if info is not None else scale.from_celsius(DEFAULT_INFO),
            warning=warning if warning is not None else scale.from_celsius(DEFAULT_WARN),
        )

    def state(self, max_temp: float) -> State:
        if max_temp <= self.good:
            return State.GOOD
        if max_temp <= self.idle:
            return State.IDLE
        if max_temp <= self.info:
            return State.INFO
        if max_temp <= self.warning:
            return State.WARNING
        return State.CRITICAL


def in_valid_range(value: float) -> bool:
    """Whether a reading in degrees Celsius is plausible."""
    return MIN_VALID <= value <= MAX_VALID


def summarize(temps: Sequence[float]) -> tuple[float, float, float]:
    """Return minimum, average and maximum; min and max are 0 and the average NaN when empty."""
    if not temps:
        return 0.0, math.nan, 0.0
    return min(temps), sum(temps) / len(temps), max(temps)