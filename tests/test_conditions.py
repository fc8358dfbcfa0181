"""Tests for the condition vocabulary and text/icon/code rule tables."""

from __future__ import annotations

import pytest

from saytime_weather.weather.conditions import (
    CANONICAL_CONDITIONS,
    DAY_NIGHT_CODE_TABLE,
    NWS_TEXT_RULES,
    WEATHER_CODE_TABLE,
    condition_from_icon,
    first_match,
    normalize_text,
    weather_code_to_condition,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Thunderstorms and Rain", "Thunderstorm"),
        ("Heavy Rain and Fog", "Heavy Rain"),
        ("Rain, heavy at times", "Heavy Rain"),
        ("Heavy Snow", "Heavy Snow"),
        ("Light Rain", "Light Rain"),
        ("Drizzle", "Light Rain"),
        ("Snow Flurries", "Light Snow"),
        ("Rain", "Rain"),
        ("Snow", "Snow"),
        ("Sleet", "Sleet"),
        ("Freezing Rain", "Rain"),
        ("Ice Pellets", "Sleet"),
        ("Hail", "Hail"),
        ("Fog", "Foggy"),
        ("Fog/Mist", "Foggy"),
        ("Overcast", "Overcast"),
        ("Cloudy", "Cloudy"),
        ("Partly Cloudy", "Partly Cloudy"),
        ("Mostly Cloudy", "Partly Cloudy"),
        ("Partly Sunny", "Partly Cloudy"),
        ("Mostly Sunny", "Mostly Sunny"),
        ("Mostly Clear", "Mostly Sunny"),
        ("Sunny", "Sunny"),
        ("Clear and Sunny", "Sunny"),
        ("Clear", "Clear"),
        ("Windy", "Clear"),
        ("", "Clear"),
    ],
)
def test_normalize_text(text: str, expected: str) -> None:
    assert normalize_text(text) == expected


def test_qualified_cloudy_is_not_plain_cloudy() -> None:
    assert normalize_text("Partly cloudy with sunny breaks") == "Partly Cloudy"
    assert normalize_text("Becoming cloudy") == "Cloudy"


def test_text_rules_are_evaluated_in_order() -> None:
    # Thunderstorm outranks everything listed after it.
    assert normalize_text("Light rain with thunder") == "Thunderstorm"
    assert first_match(NWS_TEXT_RULES, "nothing known", default="Unknown") == "Unknown"


@pytest.mark.parametrize(
    ("icon", "expected"),
    [
        ("https://api.weather.gov/icons/land/day/skc?size=medium", "Clear"),
        ("https://api.weather.gov/icons/land/day/few?size=medium", "Clear"),
        ("https://api.weather.gov/icons/land/day/sct?size=medium", "Partly Cloudy"),
        ("https://api.weather.gov/icons/land/night/bkn?size=medium", "Cloudy"),
        ("https://api.weather.gov/icons/land/day/ovc?size=medium", "Cloudy"),
        ("https://api.weather.gov/icons/land/day/tsra?size=medium", None),
    ],
)
def test_condition_from_icon(icon: str, expected: str | None) -> None:
    assert condition_from_icon(icon) == expected


def test_weather_codes_depend_on_day_for_one_and_two() -> None:
    assert weather_code_to_condition(1, is_day=True) == "Sunny"
    assert weather_code_to_condition(1, is_day=False) == "Mainly Clear"
    assert weather_code_to_condition(2, is_day=True) == "Mostly Sunny"
    assert weather_code_to_condition(2, is_day=False) == "Partly Cloudy"


@pytest.mark.parametrize(
    ("code", "expected"),
    [(0, "Clear"), (3, "Overcast"), (45, "Foggy"), (63, "Rain"), (75, "Heavy Snow"), (99, "Thunderstorm with Hail")],
)
def test_weather_code_table(code: int, expected: str) -> None:
    assert weather_code_to_condition(code) == expected
    assert weather_code_to_condition(code, is_day=False) == expected


def test_unmapped_weather_code_is_unknown() -> None:
    assert weather_code_to_condition(42) == "Unknown"


def test_every_table_value_is_canonical() -> None:
    values = set(WEATHER_CODE_TABLE.values()) | set(DAY_NIGHT_CODE_TABLE.values())
    values |= {condition for _, condition in NWS_TEXT_RULES}
    assert values <= set(CANONICAL_CONDITIONS)
