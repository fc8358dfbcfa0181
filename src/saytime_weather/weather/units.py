"""Pure unit conversions used by providers and the summary formatter."""

from __future__ import annotations

import logging
import re

MPH_PER_MS = 2.23694
KMH_PER_MS = 3.6
MS_PER_KNOT = 0.514444
KNOTS_PER_MS = 1 / MS_PER_KNOT
INHG_PER_HPA = 0.0295299830714
INCHES_PER_MM = 1 / 25.4

COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)

_UNIT_PREFIX_RE = re.compile(r"^(?:wmoUnit|unit|wmo):", re.IGNORECASE)

# Provider wind unit tags (NWS WMO codes and their plain spellings) -> canonical.
_WIND_UNIT_ALIASES = {
    "m/s": "m/s",
    "m_s-1": "m/s",
    "mi/h": "mi/h",
    "mi_h-1": "mi/h",
    "mph": "mi/h",
    "km/h": "km/h",
    "km_h-1": "km/h",
    "kmh": "km/h",
    "knot": "knot",
    "knots": "knot",
    "kt": "knot",
    "kn": "knot",
    "[kn_i]": "knot",
}


def celsius_to_fahrenheit(value: float) -> float:
    return value * 9.0 / 5.0 + 32.0


def fahrenheit_to_celsius(value: float) -> float:
    return (value - 32.0) * 5.0 / 9.0


def round_half_away(value: float) -> int:
    """Round to the nearest integer with halves away from zero (not banker's rounding)."""
    if value >= 0:
        return int(value + 0.5)
    return -int(-value + 0.5)


def canonical_wind_unit(unit_code: str | None) -> str | None:
    """Map a provider unit tag onto `m/s`, `mi/h`, `km/h` or `knot`.

    Returns None for unrecognized non-empty codes so callers can warn; an
    absent code is treated as `m/s`.
    """
    if unit_code is None or not unit_code.strip():
        return "m/s"
    stripped = _UNIT_PREFIX_RE.sub("", unit_code.strip())
    return _WIND_UNIT_ALIASES.get(stripped.lower())


def wind_to_ms(value: float, unit_code: str | None) -> float:
    """Convert a wind speed to m/s; unknown units pass through unchanged."""
    unit = canonical_wind_unit(unit_code)
    if unit == "mi/h":
        return value / MPH_PER_MS
    if unit == "km/h":
        return value / KMH_PER_MS
    if unit == "knot":
        return value * MS_PER_KNOT
    return value


def ms_to_display(value: float, unit: str) -> float:
    """Convert m/s into one of the display units `mph`, `kmh`, `ms`, `kts`."""
    if unit == "mph":
        return value * MPH_PER_MS
    if unit == "kmh":
        return value * KMH_PER_MS
    if unit == "kts":
        return value * KNOTS_PER_MS
    return value


def pascal_to_hpa(value: float) -> float:
    return value / 100.0


def hpa_to_inhg(value: float) -> float:
    return value * INHG_PER_HPA


def mm_to_inches(value: float) -> float:
    return value * INCHES_PER_MM


def degrees_to_compass(degrees: float) -> str:
    """Convert a bearing in degrees to a 16-point compass label."""
    index = int((degrees % 360) / 22.5 + 0.5) % len(COMPASS_POINTS)
    return COMPASS_POINTS[index]


def log_unknown_wind_unit(logger: logging.Logger, unit_code: str | None, source: str) -> None:
    """Log a non-empty wind unit tag that is not recognized (shown with -v)."""
    if unit_code and canonical_wind_unit(unit_code) is None:
        logger.info(
            "Unrecognized wind unit %r from %s; treating value as m/s",
            unit_code,
            source,
        )
