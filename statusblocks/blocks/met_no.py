"""Weather provider backed by the met.no location forecast API."""

from __future__ import annotations

import enum
import json
import math
import sys
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from statusblocks.blocks.weather import (
    Coordinates,
    Forecast,
    ForecastAggregate,
    WeatherIcon,
    WeatherMoment,
    WeatherResult,
    Wind,
    australian_apparent_temp,
    average_wind,
)
from statusblocks.errors import BlockError

FORECAST_URL = "https://api.met.no/weatherapi/locationforecast/2.0/compact"

_DETAIL_KEYS = ("air_temperature", "wind_from_direction", "wind_speed", "relative_humidity")

_CLOUDS = {"cloudy", "partlycloudy", "fair"}
_RAIN = {
    "heavyrain",
    "heavyrainshowers",
    "lightrain",
    "lightrainshowers",
    "rain",
    "rainshowers",
}
_THUNDER = {
    "rainandthunder",
    "heavyrainandthunder",
    "rainshowersandthunder",
    "sleetandthunder",
    "sleetshowersandthunder",
    "snowandthunder",
    "snowshowersandthunder",
    "heavyrainshowersandthunder",
    "heavysleetandthunder",
    "heavysleetshowersandthunder",
    "heavysnowandthunder",
    "heavysnowshowersandthunder",
    "lightsleetandthunder",
    "lightrainandthunder",
    "lightsnowandthunder",
    # The API has misspelled variants of the next two entries.
    "lightssleetshowersandthunder",
    "lightsleetshowersandthunder",
    "lightssnowshowersandthunder",
    "lightsnowshowersandthunder",
    "lightrainshowersandthunder",
}
_SNOW = {
    "heavysleet",
    "heavysleetshowers",
    "heavysnow",
    "heavysnowshowers",
    "lightsleet",
    "lightsleetshowers",
    "lightsnow",
    "lightsnowshowers",
    "sleet",
    "sleetshowers",
    "snow",
    "snowshowers",
}


class ApiLanguage(enum.Enum):
    """Languages that met.no weather descriptions are available in."""

    ENGLISH = "en"
    NORWEGIAN_NYNORSK = "nn"
    NORWEGIAN_BOKMAAL = "nb"

    @property
    def legend_field(self) -> str:
        return f"desc_{self.value}"


_LEGEND_FIELDS = tuple(lang.legend_field for lang in ApiLanguage)


@dataclass(frozen=True)
class MetNoConfig:
    """Configuration of the met.no service."""

    coordinates: tuple[str, str] | None = None
    altitude: str | None = None
    lang: ApiLanguage = ApiLanguage.ENGLISH
    forecast_hours: int = 12

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> MetNoConfig:
        allowed = {"name", "coordinates", "altitude", "lang", "forecast_hours"}
        unknown = sorted(set(data) - allowed)
        if unknown:
            raise ValueError(f"unknown field `{unknown[0]}`")
        if data.get("name", "metno") != "metno":
            raise ValueError(f"unknown service `{data['name']}`")

        coordinates = data.get("coordinates")
        if coordinates is not None:
            if (
                isinstance(coordinates, (str, bytes))
                or not isinstance(coordinates, Sequence)
                or len(coordinates) != 2
                or not all(isinstance(c, str) for c in coordinates)
            ):
                raise ValueError("`coordinates` must be a pair of strings")
            coordinates = (coordinates[0], coordinates[1])

        altitude = data.get("altitude")
        if altitude is not None and not isinstance(altitude, str):
            raise ValueError("`altitude` must be a string")

        lang_value = data.get("lang", ApiLanguage.ENGLISH.value)
        try:
            lang = ApiLanguage(lang_value)
        except ValueError:
            raise ValueError(f"unknown variant `{lang_value}`") from None

        hours = data.get("forecast_hours", 12)
        if not isinstance(hours, int) or isinstance(hours, bool) or hours < 0:
            raise ValueError("`forecast_hours` must be a non-negative integer")

        return cls(coordinates=coordinates, altitude=altitude, lang=lang, forecast_hours=hours)


def translate(legend: Mapping[str, Mapping[str, str]], summary: str, lang: ApiLanguage) -> str:
    """Look up the description of a weather symbol, falling back to the symbol itself."""
    entry = legend.get(summary)
    if entry is None:
        return summary
    return entry[lang.legend_field]


def weather_to_icon(summary: str, is_night: bool) -> WeatherIcon:
    """Map a met.no weather symbol to a weather icon."""
    if summary in _CLOUDS:
        return WeatherIcon("clouds", is_night)
    if summary == "fog":
        return WeatherIcon("fog", is_night)
    if summary == "clearsky":
        return WeatherIcon("clear", is_night)
    if summary in _RAIN:
        return WeatherIcon("rain", is_night)
    if summary in _THUNDER:
        return WeatherIcon("thunder", is_night)
    if summary in _SNOW:
        return WeatherIcon("snow")
    return WeatherIcon("default")


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise BlockError("Forecast request failed", TypeError(f"expected a number, got {value!r}"))
    return float(value)


def _instant(forecast_data: Mapping[str, Any]) -> dict[str, float | None]:
    try:
        details = forecast_data["instant"]["details"]
        return {key: _optional_float(details.get(key)) for key in _DETAIL_KEYS}
    except (KeyError, TypeError, AttributeError) as exc:
        raise BlockError("Forecast request failed", exc) from exc


def _timeseries(response: Any) -> list[Mapping[str, Any]]:
    try:
        return [step["data"] for step in response["properties"]["timeseries"]]
    except (KeyError, TypeError) as exc:
        raise BlockError("Forecast request failed", exc) from exc


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else math.nan


def _aggregate(temp: float, apparent: float, humidity: float, wind: Wind) -> ForecastAggregate:
    return ForecastAggregate(
        temp=temp,
        apparent=apparent,
        humidity=humidity,
        wind=wind.speed,
        wind_kmh=wind.speed * 3.6,
        wind_direction=wind.degrees,
    )


def _float_text(value: float) -> str:
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def _http_get_json(url: str, params: Mapping[str, str]) -> Any:
    request = urllib.request.Request(
        f"{url}?{urllib.parse.urlencode(params)}",
        headers={"Content-Type": "application/json", "User-Agent": "statusblocks"},
    )
    try:
        with urllib.request.urlopen(request, timeout=30) as response:
            body = response.read()
        return json.loads(body)
    except (urllib.error.URLError, OSError, ValueError) as exc:
        raise BlockError("Forecast request failed", exc) from exc


def _validate_legend(legend: Any) -> Mapping[str, Mapping[str, str]]:
    if not isinstance(legend, Mapping):
        raise BlockError("Invalid legends file")
    for entry in legend.values():
        if not isinstance(entry, Mapping) or not all(
            isinstance(entry.get(name), str) for name in _LEGEND_FIELDS
        ):
            raise BlockError("Invalid legends file")
    return legend


class MetNoService:
    """Fetches and interprets met.no forecasts."""

    def __init__(
        self,
        config: MetNoConfig,
        legend: Mapping[str, Mapping[str, str]] | None = None,
        fetch: Callable[[str, Mapping[str, str]], Any] | None = None,
    ) -> None:
        self.config = config
        self.legend = _validate_legend(legend if legend is not None else {})
        self._fetch = fetch if fetch is not None else _http_get_json

    def weather_instant(self, forecast_data: Mapping[str, Any]) -> WeatherMoment:
        """Describe the weather of one forecast time step."""
        details = _instant(forecast_data)
        try:
            symbol_code = forecast_data["next_1_hours"]["summary"]["symbol_code"]
        except (KeyError, TypeError) as exc:
            raise BlockError("Forecast step has no next hour summary", exc) from exc
        if not isinstance(symbol_code, str):
            raise BlockError("Forecast step has no next hour summary")

        parts = symbol_code.split("_")
        summary = parts[0]
        # Times of day can be day, night and polartwilight.
        is_night = len(parts) > 1 and parts[1] == "night"

        translated = translate(self.legend, summary, self.config.lang)
        temp = details["air_temperature"] if details["air_temperature"] is not None else 0.0
        humidity = (
            details["relative_humidity"] if details["relative_humidity"] is not None else 0.0
        )
        wind_speed = details["wind_speed"] if details["wind_speed"] is not None else 0.0

        return WeatherMoment(
            icon=weather_to_icon(summary, is_night),
            weather=translated,
            weather_verbose=translated,
            temp=temp,
            apparent=australian_apparent_temp(temp, humidity, wind_speed),
            humidity=humidity,
            wind=wind_speed,
            wind_kmh=wind_speed * 3.6,
            wind_direction=details["wind_from_direction"],
        )

    def _forecast(self, steps: list[Mapping[str, Any]], hours: int) -> Forecast:
        if len(steps) < hours:
            raise BlockError(
                "Unable to fetch the specified number of forecast_hours specified "
                f"{hours}, only {len(steps)} hours available"
            )
        temps: list[float] = []
        humidities: list[float] = []
        apparents: list[float] = []
        winds: list[Wind] = []
        for step in steps[:hours]:
            details = _instant(step)
            temp = details["air_temperature"]
            humidity = details["relative_humidity"]
            speed = details["wind_speed"]
            if temp is not None:
                temps.append(temp)
            if humidity is not None:
                humidities.append(humidity)
            if speed is not None:
                winds.append(Wind(speed, details["wind_from_direction"]))
            if temp is not None and humidity is not None and speed is not None:
                apparents.append(australian_apparent_temp(temp, humidity, speed))

        wind_avg = average_wind(winds)
        if not winds:
            raise BlockError("No min wind")
        # Both bounds use the slowest forecast wind.
        slowest = min(winds, key=lambda wind: wind.speed)

        low, high = sys.float_info.max, -sys.float_info.max
        return Forecast(
            avg=_aggregate(_mean(temps), _mean(apparents), _mean(humidities), wind_avg),
            min=_aggregate(
                min(temps, default=low),
                min(apparents, default=low),
                min(humidities, default=low),
                slowest,
            ),
            max=_aggregate(
                max(temps, default=high),
                max(apparents, default=high),
                max(humidities, default=high),
                slowest,
            ),
            fin=self.weather_instant(steps[hours - 1]),
        )

    def build_result(
        self, data: Any, location: Coordinates | None, need_forecast: bool
    ) -> WeatherResult:
        """Turn a decoded forecast response into a weather result."""
        steps = _timeseries(data)
        hours = self.config.forecast_hours
        forecast = self._forecast(steps, hours) if need_forecast and hours > 0 else None
        if not steps:
            raise BlockError("Forecast response has no time series")
        return WeatherResult(
            location=location.city if location is not None else "Unknown",
            current_weather=self.weather_instant(steps[0]),
            forecast=forecast,
        )

    def get_weather(self, location: Coordinates | None, need_forecast: bool) -> WeatherResult:
        """Fetch the forecast for the given or configured location."""
        if location is not None:
            lat, lon = _float_text(location.latitude), _float_text(location.longitude)
        elif self.config.coordinates is not None:
            lat, lon = self.config.coordinates
        else:
            raise BlockError("No location given")
        params = {"lat": lat, "lon": lon}
        if self.config.altitude is not None:
            params["altitude"] = self.config.altitude
        data = self._fetch(FORECAST_URL, params)
        return self.build_result(data, location, need_forecast)