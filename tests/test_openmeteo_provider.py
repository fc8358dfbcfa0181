"""Tests for the Open-Meteo current-conditions provider."""

from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import Any
from urllib.parse import parse_qs, urlsplit

import pytest

from saytime_weather.exceptions import FetchError, WeatherProviderError
from saytime_weather.weather.models import DisplayFields
from saytime_weather.weather.openmeteo import OPEN_METEO_FORECAST_URL, OpenMeteoWeatherProvider


def _make_provider(payload: Any = None) -> tuple[OpenMeteoWeatherProvider, list[str]]:
    provider = OpenMeteoWeatherProvider(
        fetcher=None,  # type: ignore[arg-type]
        settings=SimpleNamespace(weather_timeout_seconds=5.0),
        logger=logging.getLogger("test_openmeteo_provider"),
    )
    requested: list[str] = []

    def fake_request_json(url: str) -> dict[str, Any]:
        requested.append(url)
        return payload

    provider._request_json = fake_request_json  # type: ignore[assignment]
    return provider, requested


def _query(url: str) -> dict[str, list[str]]:
    return parse_qs(urlsplit(url).query)


def test_build_url_requests_core_variables_in_imperial_temperature() -> None:
    provider, _ = _make_provider()

    url = provider.build_url(lat=51.5074, lon=-0.1278, fields=DisplayFields())
    query = _query(url)

    assert url.startswith(OPEN_METEO_FORECAST_URL + "?")
    assert query["current"] == ["temperature_2m,weather_code,is_day"]
    assert query["temperature_unit"] == ["fahrenheit"]
    assert query["wind_speed_unit"] == ["ms"]
    assert query["precipitation_unit"] == ["mm"]
    assert query["timezone"] == ["auto"]
    assert query["latitude"] == ["51.5074"]


def test_build_url_adds_optional_variables_per_flag() -> None:
    provider, _ = _make_provider()

    url = provider.build_url(
        lat=51.5, lon=-0.13, fields=DisplayFields(wind=True, humidity=True)
    )
    current = _query(url)["current"][0].split(",")

    assert "wind_speed_10m" in current
    assert "wind_direction_10m" in current
    assert "wind_gusts_10m" in current
    assert "relative_humidity_2m" in current
    assert "pressure_msl" not in current
    assert "precipitation" not in current


def test_fetch_current_maps_weather_code_with_day_flag() -> None:
    provider, requested = _make_provider(
        {
            "timezone": "Europe/London",
            "current": {"temperature_2m": 59.4, "weather_code": 2, "is_day": 0},
        }
    )

    snapshot = provider.fetch_current(lat=51.5074, lon=-0.1278, fields=DisplayFields())

    assert snapshot.provider == "openmeteo"
    assert snapshot.temperature_f == 59.4
    assert snapshot.condition == "Partly Cloudy"
    assert snapshot.timezone == "Europe/London"
    assert snapshot.source_url == requested[0]


def test_fetch_current_treats_missing_is_day_as_day() -> None:
    provider, _ = _make_provider({"current": {"temperature_2m": 80.0, "weather_code": 1}})

    snapshot = provider.fetch_current(lat=0.0, lon=0.0, fields=DisplayFields())

    assert snapshot.condition == "Sunny"
    assert snapshot.timezone is None


def test_fetch_current_unmapped_code_is_unknown() -> None:
    provider, _ = _make_provider({"current": {"temperature_2m": 50.0, "weather_code": 42}})

    snapshot = provider.fetch_current(lat=0.0, lon=0.0, fields=DisplayFields())

    assert snapshot.condition == "Unknown"


def test_fetch_current_fills_requested_optional_fields() -> None:
    provider, _ = _make_provider(
        {
            "current": {
                "temperature_2m": 50.0,
                "weather_code": 61,
                "precipitation": 0.4,
                "wind_speed_10m": 4.2,
                "wind_direction_10m": 200,
                "wind_gusts_10m": 9.1,
                "pressure_msl": 1002.3,
                "relative_humidity_2m": 88,
            }
        }
    )
    fields = DisplayFields(precipitation=True, wind=True, pressure=False, humidity=True)

    snapshot = provider.fetch_current(lat=0.0, lon=0.0, fields=fields)

    assert snapshot.condition == "Light Rain"
    assert snapshot.precipitation_mm == 0.4
    assert snapshot.wind_speed_ms == 4.2
    assert snapshot.wind_direction_deg == 200.0
    assert snapshot.wind_gust_ms == 9.1
    assert snapshot.relative_humidity_pct == 88.0
    assert snapshot.pressure_hpa is None


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"current": {"weather_code": 3}},
        {"current": {"temperature_2m": 50.0}},
        {"current": {"temperature_2m": 50.0, "weather_code": "3"}},
        {"current": {"temperature_2m": True, "weather_code": 3}},
    ],
)
def test_fetch_current_incomplete_payload_raises(payload: dict[str, Any]) -> None:
    provider, _ = _make_provider(payload)

    with pytest.raises(WeatherProviderError):
        provider.fetch_current(lat=0.0, lon=0.0, fields=DisplayFields())


def test_request_json_wraps_fetch_errors() -> None:
    class FailingFetcher:
        def fetch_json(self, url: str, **_: Any) -> Any:
            raise FetchError("Malformed JSON", status_code=None)

    provider = OpenMeteoWeatherProvider(
        FailingFetcher(),  # type: ignore[arg-type]
        SimpleNamespace(weather_timeout_seconds=5.0),
        logging.getLogger("test_openmeteo_provider"),
    )

    with pytest.raises(WeatherProviderError, match="Open-Meteo request failed"):
        provider._request_json("https://api.open-meteo.com/v1/forecast?latitude=0")
