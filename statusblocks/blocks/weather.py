"""Weather data model, wind helpers and IP based autolocation."""

from __future__ import annotations

import enum
import json
import math
import time
import urllib.error
import urllib.request
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, NamedTuple

from statusblocks.errors import BlockError
from statusblocks.formatting import Values

IP_API_URL = "https://ipapi.co/json"

_FORECAST_SUFFIXES = ("avg", "min", "max", "fin")
_FORECAST_FIELDS = ("temp", "apparent", "humidity", "wind", "wind_kmh", "direction")
_FORECAST_EXTRA_KEYS = ("icon_ffin", "weather_ffin", "weather_verbose_ffin")


class _Value(NamedTuple):
    """A placeholder value tagged with how it should be displayed."""

    kind: str
    value: Any


def _text(value: str) -> _Value:
    return _Value("text", value)


def _icon(name: str) -> _Value:
    return _Value("icon", name)


def _degrees(value: float) -> _Value:
    return _Value("degrees", value)


def _percents(value: float) -> _Value:
    return _Value("percents", value)


def _number(value: float) -> _Value:
    return _Value("number", value)


@dataclass(frozen=True)
class WeatherIcon:
    """The kind of weather shown as an icon, with a day/night variant."""

    kind: str = "default"
    is_night: bool = False

    _DAY_NIGHT = {
        "clear": ("weather_sun", "weather_moon"),
        "clouds": ("weather_clouds", "weather_clouds_night"),
        "fog": ("weather_fog", "weather_fog_night"),
        "rain": ("weather_rain", "weather_rain_night"),
        "thunder": ("weather_thunder", "weather_thunder_night"),
    }
    _PLAIN = {"snow": "weather_snow", "default": "weather_default"}

    def __post_init__(self) -> None:
        if self.kind not in self._DAY_NIGHT and self.kind not in self._PLAIN:
            raise ValueError(f"unknown weather kind '{self.kind}'")

    def icon_name(self) -> str:
        if self.kind in self._PLAIN:
            return self._PLAIN[self.kind]
        day, night = self._DAY_NIGHT[self.kind]
        return night if self.is_night else day


@dataclass(eq=False)
class Wind:
    """Wind speed and the direction it blows from, in azimuth degrees."""

    speed: float
    degrees: float | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Wind):
            return NotImplemented
        if abs(self.speed - other.speed) >= 0.001:
            return False
        if self.degrees is None or other.degrees is None:
            return self.degrees is None and other.degrees is None
        return abs(self.degrees - other.degrees) < 0.001


@dataclass
class WeatherMoment:
    """The weather at one point in time."""

    icon: WeatherIcon
    weather: str
    weather_verbose: str
    temp: float
    apparent: float
    humidity: float
    wind: float
    wind_kmh: float
    wind_direction: float | None


@dataclass
class ForecastAggregate:
    """An aggregate (average, minimum or maximum) over a forecast period."""

    temp: float
    apparent: float
    humidity: float
    wind: float
    wind_kmh: float
    wind_direction: float | None


@dataclass
class Forecast:
    """Aggregated forecast values plus the final forecast moment."""

    avg: ForecastAggregate
    min: ForecastAggregate
    max: ForecastAggregate
    fin: WeatherMoment


@dataclass
class WeatherResult:
    """Current weather, location name and an optional forecast."""

    location: str
    current_weather: WeatherMoment
    forecast: Forecast | None = None

    def to_values(self) -> Values:
        """Build the placeholder values for rendering."""
        current = self.current_weather
        values: Values = {
            "location": _text(self.location),
            "icon": _icon(current.icon.icon_name()),
            "temp": _degrees(current.temp),
            "apparent": _degrees(current.apparent),
            "humidity": _percents(current.humidity),
            "weather": _text(current.weather),
            "weather_verbose": _text(current.weather_verbose),
            "wind": _number(current.wind),
            "wind_kmh": _number(current.wind_kmh),
            "direction": _text(convert_wind_direction(current.wind_direction)),
        }
        forecast = self.forecast
        if forecast is None:
            return values
        for suffix, source in (
            ("avg", forecast.avg),
            ("min", forecast.min),
            ("max", forecast.max),
            ("fin", forecast.fin),
        ):
            values.update(
                {
                    f"temp_f{suffix}": _degrees(source.temp),
                    f"apparent_f{suffix}": _degrees(source.apparent),
                    f"humidity_f{suffix}": _percents(source.humidity),
                    f"wind_f{suffix}": _number(source.wind),
                    f"wind_kmh_f{suffix}": _number(source.wind_kmh),
                    f"direction_f{suffix}": _text(
                        convert_wind_direction(source.wind_direction)
                    ),
                }
            )
        values.update(
            {
                "icon_ffin": _icon(forecast.fin.icon.icon_name()),
                "weather_ffin": _text(forecast.fin.weather),
                "weather_verbose_ffin": _text(forecast.fin.weather_verbose),
            }
        )
        return values


class UnitSystem(enum.Enum):
    """Units used when requesting weather data."""

    METRIC = "metric"
    IMPERIAL = "imperial"


@dataclass(frozen=True)
class Coordinates:
    """A geographic position with the name of the nearest city."""

    latitude: float
    longitude: float
    city: str


class _ApiError(Exception):
    def __init__(self, reason: str | None) -> None:
        super().__init__(reason if reason is not None else "Unknown Error")


def _fetch_ip_location(url: str = IP_API_URL) -> Any:
    try:
        with urllib.request.urlopen(url, timeout=30) as response:
            body = response.read()
    except (urllib.error.URLError, OSError) as exc:
        raise BlockError("Failed during request for current location", exc) from exc
    try:
        return json.loads(body)
    except ValueError as exc:
        raise BlockError("Failed while parsing location API result", exc) from exc


def _coordinates_from_response(response: Any) -> Coordinates:
    if not isinstance(response, Mapping):
        raise BlockError("Failed while parsing location API result")
    if response.get("error", False):
        reason = response.get("reason")
        raise BlockError("ipapi.co error", _ApiError(reason if isinstance(reason, str) else None))
    latitude = response.get("latitude")
    longitude = response.get("longitude")
    city = response.get("city")
    numbers_ok = all(
        isinstance(v, (int, float)) and not isinstance(v, bool) for v in (latitude, longitude)
    )
    if not numbers_ok or not isinstance(city, str):
        raise BlockError("Failed while parsing location API result")
    return Coordinates(float(latitude), float(longitude), city)


class IpLocator:
    """Finds the current location from the public IP, caching it for `interval` seconds."""

    def __init__(
        self,
        interval: float,
        fetch: Callable[[], Any] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.interval = interval
        self._fetch = fetch if fetch is not None else _fetch_ip_location
        self._clock = clock
        self._cached: tuple[Coordinates, float] | None = None

    def locate(self) -> Coordinates:
        if self._cached is not None:
            location, stamp = self._cached
            if self._clock() - stamp < self.interval:
                return location
        location = _coordinates_from_response(self._fetch())
        self._cached = (location, self._clock())
        return location


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def convert_wind_direction(direction: float | None) -> str:
    """Convert a wind direction in azimuth degrees to a compass abbreviation."""
    if direction is None:
        return "-"
    degrees = _round_half_away(direction)
    for upper, name in (
        (68, "NE"),
        (113, "E"),
        (158, "SE"),
        (203, "S"),
        (248, "SW"),
        (293, "W"),
        (338, "NW"),
    ):
        if upper - 44 <= degrees <= upper:
            return name
    return "N"


def average_wind(winds: Sequence[Wind]) -> Wind:
    """Average wind speed and direction as vectors; winds without direction are skipped."""
    north = east = 0.0
    count = 0
    for wind in winds:
        if wind.degrees is None:
            continue
        radians = math.radians(wind.degrees)
        north += wind.speed * math.cos(radians)
        east += wind.speed * math.sin(radians)
        count += 1
    if count == 0:
        return Wind(0.0, None)
    return Wind(
        speed=math.hypot(east, north) / count,
        degrees=math.degrees(math.atan2(east, north)) % 360.0,
    )


def australian_apparent_temp(temp: float, humidity: float, wind_speed: float) -> float:
    """Compute the Australian Apparent Temperature from metric units."""
    exponent = 17.27 * temp / (237.7 + temp)
    water_vapor_pressure = humidity * 0.06105 * math.exp(exponent)
    return temp + 0.33 * water_vapor_pressure - 0.7 * wind_speed - 4.0


def has_forecast_key(keys: Iterable[str]) -> bool:
    """Whether any of the placeholder names needs forecast data."""
    wanted = {f"{name}_f{suffix}" for suffix in _FORECAST_SUFFIXES for name in _FORECAST_FIELDS}
    wanted.update(_FORECAST_EXTRA_KEYS)
    return any(key in wanted for key in keys)


def need_forecast(format_keys: Iterable[str], alt_keys: Iterable[str] | None) -> bool:
    """Whether the main or alternative format uses forecast placeholders."""
    return has_forecast_key(format_keys) or (alt_keys is not None and has_forecast_key(alt_keys))