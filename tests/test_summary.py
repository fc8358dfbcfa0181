"""Tests for the summary line and announced temperature."""

from __future__ import annotations

from typing import Any

import pytest

from saytime_weather.summary import announced_temperature, format_summary
from saytime_weather.weather.models import DisplayFields, WeatherSnapshot


def _snapshot(**overrides: Any) -> WeatherSnapshot:
    values: dict[str, Any] = {"provider": "nws", "temperature_f": 72.0, "condition": "Sunny"}
    values.update(overrides)
    return WeatherSnapshot(**values)


def test_minimal_summary() -> None:
    assert format_summary(_snapshot()) == "72°F, 22°C / Sunny"


def test_full_summary_in_metric_and_imperial_units() -> None:
    snapshot = _snapshot(
        relative_humidity_pct=40.0,
        precipitation_mm=1.26,
        wind_speed_ms=2.2352,
        wind_direction_deg=315,
        wind_gust_ms=4.4704,
        pressure_hpa=1013.25,
    )
    fields = DisplayFields(precipitation=True, wind=True, pressure=True, humidity=True)

    assert format_summary(snapshot, fields) == (
        "72°F, 22°C / 40% RH / Sunny / Precip 1.3 mm / Wind 5 mph NW (gust 10) / 29.92 inHg"
    )


def test_alternate_display_units() -> None:
    snapshot = _snapshot(precipitation_mm=25.4, wind_speed_ms=10.0, pressure_hpa=1002.6)
    fields = DisplayFields(
        precipitation=True,
        wind=True,
        pressure=True,
        precip_unit="in",
        wind_unit="kmh",
        pressure_unit="hPa",
    )

    assert format_summary(snapshot, fields) == (
        "72°F, 22°C / Sunny / Precip 1.00 in / Wind 36 km/h / 1003 hPa"
    )


def test_fields_without_flags_or_values_are_omitted() -> None:
    snapshot = _snapshot(wind_speed_ms=3.0)
    fields = DisplayFields(humidity=True, pressure=True)

    assert format_summary(snapshot, fields) == "72°F, 22°C / Sunny"


@pytest.mark.parametrize(
    ("temperature_f", "mode", "expected"),
    [
        (72.4, "F", 72),
        (72.5, "F", 73),
        (-0.5, "F", -1),
        (72.0, "C", 22),
        (150.0, "F", 150),
        (150.6, "F", None),
        (-100.4, "F", -100),
        (-101.0, "F", None),
        (140.0, "C", 60),
        (141.0, "C", None),
        (-76.0, "C", -60),
        (-77.0, "C", None),
    ],
)
def test_announced_temperature(temperature_f: float, mode: str, expected: int | None) -> None:
    assert announced_temperature(_snapshot(temperature_f=temperature_f), mode) == expected  # type: ignore[arg-type]
