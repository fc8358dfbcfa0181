"""Textual summary line and announced temperature value for a snapshot."""

from __future__ import annotations

from typing import Literal

from .weather.models import DisplayFields, WeatherSnapshot
from .weather.units import (
    degrees_to_compass,
    fahrenheit_to_celsius,
    hpa_to_inhg,
    mm_to_inches,
    ms_to_display,
    round_half_away,
)

# Announceable range per temperature mode; values outside are not written.
TEMPERATURE_LIMITS = {"F": (-100, 150), "C": (-60, 60)}

_WIND_UNIT_LABELS = {"mph": "mph", "kmh": "km/h", "ms": "m/s", "kts": "kts"}


def _format_number(value: float, decimals: int) -> str:
    if decimals == 0:
        return str(round_half_away(value))
    return f"{value:.{decimals}f}"


def format_summary(snapshot: WeatherSnapshot, fields: DisplayFields | None = None) -> str:
    """Render the one-line summary, e.g. ``72°F, 22°C / 40% RH / Sunny / Wind 5 mph NW``."""
    fields = fields or DisplayFields()
    temp_f = round_half_away(snapshot.temperature_f)
    temp_c = round_half_away(fahrenheit_to_celsius(snapshot.temperature_f))

    parts = [f"{temp_f}°F, {temp_c}°C"]
    if fields.humidity and snapshot.relative_humidity_pct is not None:
        parts.append(f"{round_half_away(snapshot.relative_humidity_pct)}% RH")
    parts.append(snapshot.condition)

    if fields.precipitation and snapshot.precipitation_mm is not None:
        if fields.precip_unit == "in":
            parts.append(f"Precip {mm_to_inches(snapshot.precipitation_mm):.2f} in")
        else:
            parts.append(f"Precip {_format_number(snapshot.precipitation_mm, 1)} mm")

    if fields.wind and snapshot.wind_speed_ms is not None:
        label = _WIND_UNIT_LABELS[fields.wind_unit]
        speed = round_half_away(ms_to_display(snapshot.wind_speed_ms, fields.wind_unit))
        wind = f"Wind {speed} {label}"
        if snapshot.wind_direction_deg is not None:
            wind += f" {degrees_to_compass(snapshot.wind_direction_deg)}"
        if snapshot.wind_gust_ms is not None:
            gust = round_half_away(ms_to_display(snapshot.wind_gust_ms, fields.wind_unit))
            wind += f" (gust {gust})"
        parts.append(wind)

    if fields.pressure and snapshot.pressure_hpa is not None:
        if fields.pressure_unit == "inHg":
            parts.append(f"{hpa_to_inhg(snapshot.pressure_hpa):.2f} inHg")
        else:
            parts.append(f"{round_half_away(snapshot.pressure_hpa)} hPa")

    return " / ".join(parts)


def announced_temperature(
    snapshot: WeatherSnapshot, mode: Literal["F", "C"]
) -> int | None:
    """Whole-degree temperature for the announcement file, or None when out of range."""
    if mode == "C":
        value = round_half_away(fahrenheit_to_celsius(snapshot.temperature_f))
    else:
        value = round_half_away(snapshot.temperature_f)
    low, high = TEMPERATURE_LIMITS[mode]
    if low <= value <= high:
        return value
    return None
