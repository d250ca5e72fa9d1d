import pytest

from statusblocks.blocks.met_no import (
    FORECAST_URL,
    ApiLanguage,
    MetNoConfig,
    MetNoService,
    translate,
    weather_to_icon,
)
from statusblocks.blocks.weather import Coordinates, australian_apparent_temp
from statusblocks.errors import BlockError

LEGEND = {
    "clearsky": {"desc_en": "Clear sky", "desc_nb": "Klarvaer nb", "desc_nn": "Klarvaer nn"},
}


def step(temp=10.0, humidity=50.0, wind=2.0, direction=90.0, symbol="clearsky_day"):
    details = {
        key: value
        for key, value in (
            ("air_temperature", temp),
            ("relative_humidity", humidity),
            ("wind_speed", wind),
            ("wind_from_direction", direction),
        )
        if value is not None
    }
    data = {"instant": {"details": details}}
    if symbol is not None:
        data["next_1_hours"] = {"summary": {"symbol_code": symbol}}
    return {"data": data}


def response(*steps):
    return {"properties": {"timeseries": list(steps)}}


def service(**config):
    return MetNoService(MetNoConfig(**config), legend=LEGEND)


@pytest.mark.parametrize(
    "summary, night, expected",
    [
        ("clearsky", False, "weather_sun"),
        ("clearsky", True, "weather_moon"),
        ("fog", True, "weather_fog_night"),
        ("partlycloudy", False, "weather_clouds"),
        ("lightrain", True, "weather_rain_night"),
        ("heavysnow", True, "weather_snow"),
        ("lightssleetshowersandthunder", False, "weather_thunder"),
        ("something", False, "weather_default"),
    ],
)
def test_weather_to_icon(summary, night, expected):
    assert weather_to_icon(summary, night).icon_name() == expected


def test_translate_uses_language_and_falls_back():
    assert translate(LEGEND, "clearsky", ApiLanguage.NORWEGIAN_BOKMAAL) == "Klarvaer nb"
    assert translate(LEGEND, "clearsky", ApiLanguage.NORWEGIAN_NYNORSK) == "Klarvaer nn"
    assert translate(LEGEND, "rain", ApiLanguage.ENGLISH) == "rain"


def test_config_defaults_and_parsing():
    config = MetNoConfig.from_mapping({"name": "metno"})
    assert config.forecast_hours == 12
    assert config.lang is ApiLanguage.ENGLISH
    assert config.coordinates is None
    parsed = MetNoConfig.from_mapping(
        {"coordinates": ["39.2362", "9.3317"], "lang": "nn", "altitude": "100"}
    )
    assert parsed.coordinates == ("39.2362", "9.3317")
    assert parsed.lang is ApiLanguage.NORWEGIAN_NYNORSK
    assert parsed.altitude == "100"


@pytest.mark.parametrize(
    "data",
    [{"unknown": 1}, {"lang": "de"}, {"forecast_hours": -1}, {"coordinates": ["1"]}],
)
def test_config_rejects_bad_values(data):
    with pytest.raises(ValueError):
        MetNoConfig.from_mapping(data)


def test_no_forecast_when_not_needed():
    result = service(forecast_hours=1).build_result(
        response(step()), Coordinates(1.0, 2.0, "Somewhere"), need_forecast=False
    )
    assert result.forecast is None
    assert result.location == "Somewhere"


def test_no_forecast_when_zero_hours():
    result = service(forecast_hours=0).build_result(response(step()), None, True)
    assert result.forecast is None


def test_forecast_aggregates():
    data = response(
        step(temp=10.0, wind=3.0, direction=0.0),
        step(temp=20.0, wind=1.0, direction=180.0, symbol="partlycloudy_night"),
        step(temp=30.0, wind=9.0),
    )
    forecast = service(forecast_hours=2).build_result(data, None, True).forecast
    assert forecast.avg.temp == pytest.approx(15.0)
    assert forecast.min.temp == 10.0
    assert forecast.max.temp == 20.0
    assert forecast.min.wind == 1.0
    assert forecast.max.wind == 1.0
    assert forecast.max.wind_direction == 180.0
    assert forecast.fin.temp == 20.0
    assert forecast.fin.icon.icon_name() == "weather_clouds_night"
    assert forecast.min.temp <= forecast.avg.temp <= forecast.max.temp


def test_forecast_needs_enough_hours():
    with pytest.raises(BlockError, match="only 1 hours available"):
        service(forecast_hours=3).build_result(response(step()), None, True)


def test_forecast_without_wind_fails():
    with pytest.raises(BlockError, match="No min wind"):
        service(forecast_hours=1).build_result(response(step(wind=None)), None, True)


def test_missing_next_hour_summary_fails():
    with pytest.raises(BlockError):
        service().build_result(response(step(symbol=None)), None, False)


def test_empty_timeseries_fails():
    with pytest.raises(BlockError):
        service().build_result(response(), None, False)


def test_invalid_legend_rejected():
    with pytest.raises(BlockError, match="Invalid legends file"):
        MetNoService(MetNoConfig(), legend={"clearsky": {"desc_en": "x"}})


def test_get_weather_uses_location():
    calls = []

    def fetch(url, params):
        calls.append((url, dict(params)))
        return response(step())

    svc = MetNoService(MetNoConfig(coordinates=("1", "2")), fetch=fetch)
    result = svc.get_weather(Coordinates(59.9, 10.75, "Oslo"), False)
    assert calls == [(FORECAST_URL, {"lat": "59.9", "lon": "10.75"})]
    assert result.location == "Oslo"


def test_get_weather_uses_configured_coordinates_and_altitude():
    calls = []

    def fetch(url, params):
        calls.append(dict(params))
        return response(step(temp=7.5))

    svc = MetNoService(MetNoConfig(coordinates=("39.2362", "9.3317"), altitude="120"), fetch=fetch)
    result = svc.get_weather(None, False)
    assert calls == [{"lat": "39.2362", "lon": "9.3317", "altitude": "120"}]
    assert result.location == "Unknown"
    assert result.current_weather.temp == 7.5
    assert result.forecast is None


def test_get_weather_without_location_fails():
    svc = MetNoService(MetNoConfig(), fetch=lambda url, params: response(step()))
    with pytest.raises(BlockError, match="No location given"):
        svc.get_weather(None, False)