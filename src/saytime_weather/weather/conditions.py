"""Canonical condition vocabulary and the rule tables that map provider signals onto it.

Every mapping here is an ordered tuple of ``(pattern, condition)`` pairs
evaluated first-match-wins, so precedence is visible in one place and can be
tested without any network code.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Literal, get_args

Condition = Literal[
    "Clear",
    "Sunny",
    "Mainly Clear",
    "Mostly Sunny",
    "Partly Cloudy",
    "Cloudy",
    "Overcast",
    "Foggy",
    "Mist",
    "Light Drizzle",
    "Drizzle",
    "Heavy Drizzle",
    "Light Freezing Drizzle",
    "Freezing Drizzle",
    "Light Rain",
    "Rain",
    "Heavy Rain",
    "Light Freezing Rain",
    "Freezing Rain",
    "Light Snow",
    "Snow",
    "Heavy Snow",
    "Snow Grains",
    "Light Showers",
    "Showers",
    "Heavy Showers",
    "Light Snow Showers",
    "Snow Showers",
    "Sleet",
    "Hail",
    "Thunderstorm",
    "Thunderstorm with Light Hail",
    "Thunderstorm with Hail",
    "Unknown",
]

CANONICAL_CONDITIONS: tuple[str, ...] = get_args(Condition)
DEFAULT_CONDITION: Condition = "Clear"

ConditionRule = tuple[re.Pattern[str], Condition]


def _rules(*pairs: tuple[str, Condition]) -> tuple[ConditionRule, ...]:
    return tuple((re.compile(pattern), condition) for pattern, condition in pairs)


def first_match(
    rules: Iterable[ConditionRule],
    text: str,
    default: Condition = DEFAULT_CONDITION,
) -> Condition:
    """Return the condition of the first rule whose pattern matches ``text``."""
    for pattern, condition in rules:
        if pattern.search(text):
            return condition
    return default


# Free-text descriptions (NWS textDescription / shortForecast), matched lower-cased.
NWS_TEXT_RULES = _rules(
    (r"thunderstorm|thunder|t-storm", "Thunderstorm"),
    (r"heavy.*rain|rain.*heavy|torrential", "Heavy Rain"),
    (r"heavy.*snow|snow.*heavy", "Heavy Snow"),
    (r"light.*rain|rain.*light|drizzle", "Light Rain"),
    (r"light.*snow|snow.*light|flurries", "Light Snow"),
    (r"\brain\b", "Rain"),
    (r"\bsnow\b", "Snow"),
    (r"sleet|freezing.*rain|ice.*pellets", "Sleet"),
    (r"\bhail\b", "Hail"),
    (r"\bfog\b|\bmist\b", "Foggy"),
    (r"overcast|cloudy.*cloudy", "Overcast"),
    # Plain "cloudy"; qualified forms fall through to the partly/mostly rule.
    (r"(?<!partly )(?<!mostly )\bcloudy\b", "Cloudy"),
    (r"partly.*cloud|partly.*sun|mostly.*cloud", "Partly Cloudy"),
    (r"mostly.*sun|mostly.*clear", "Mostly Sunny"),
    (r"\bsunny\b|clear.*sun|sun.*clear", "Sunny"),
    (r"\bclear\b", "Clear"),
)

# NWS observation icon URLs, used only when the text description is empty.
NWS_ICON_RULES = _rules(
    (r"skc|clear", "Clear"),
    (r"few", "Clear"),
    (r"sct", "Partly Cloudy"),
    (r"bkn|ovc", "Cloudy"),
)

# Open-Meteo WMO weather codes whose label does not depend on day/night.
WEATHER_CODE_TABLE: dict[int, Condition] = {
    0: "Clear",
    3: "Overcast",
    45: "Foggy",
    48: "Foggy",
    51: "Light Drizzle",
    53: "Drizzle",
    55: "Heavy Drizzle",
    56: "Light Freezing Drizzle",
    57: "Freezing Drizzle",
    61: "Light Rain",
    63: "Rain",
    65: "Heavy Rain",
    66: "Light Freezing Rain",
    67: "Freezing Rain",
    71: "Light Snow",
    73: "Snow",
    75: "Heavy Snow",
    77: "Snow Grains",
    80: "Light Showers",
    81: "Showers",
    82: "Heavy Showers",
    85: "Light Snow Showers",
    86: "Snow Showers",
    95: "Thunderstorm",
    96: "Thunderstorm with Light Hail",
    99: "Thunderstorm with Hail",
}

# (code, is_day) -> condition for the codes that differ between day and night.
DAY_NIGHT_CODE_TABLE: dict[tuple[int, bool], Condition] = {
    (1, True): "Sunny",
    (1, False): "Mainly Clear",
    (2, True): "Mostly Sunny",
    (2, False): "Partly Cloudy",
}


def normalize_text(text: str) -> Condition:
    """Normalize a free-text weather description."""
    return first_match(NWS_TEXT_RULES, text.lower())


def condition_from_icon(icon_url: str) -> Condition | None:
    """Infer a coarse sky condition from an NWS icon URL, or None when unknown."""
    lowered = icon_url.lower()
    for pattern, condition in NWS_ICON_RULES:
        if pattern.search(lowered):
            return condition
    return None


def weather_code_to_condition(code: int, is_day: bool = True) -> Condition:
    """Map an Open-Meteo WMO weather code; unmapped codes become ``Unknown``."""
    by_time = DAY_NIGHT_CODE_TABLE.get((code, is_day))
    if by_time is not None:
        return by_time
    return WEATHER_CODE_TABLE.get(code, "Unknown")
