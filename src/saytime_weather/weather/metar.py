"""METAR acquisition and decoding for airport station codes."""

from __future__ import annotations

import logging
import re
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel

from ..exceptions import FetchError, WeatherProviderError
from ..http import HttpFetcher
from .conditions import Condition, first_match
from .models import WeatherSnapshot
from .units import celsius_to_fahrenheit, round_half_away

AVIATION_WEATHER_URL = (
    "https://aviationweather.gov/api/data/metar?ids={station}&format=raw&hours=0&taf=false"
)
NWS_OBSERVATION_TXT_URL = "https://tgftp.nws.noaa.gov/data/observations/metar/stations/{station}.TXT"

_TEMPERATURE_RE = re.compile(r"\s(M?\d{2})/(M?\d{2})\s")

# Ordered group-code rules. "-RA" sits after the general RA rule, which already
# matches it, so "Light Rain" is never produced from a METAR; kept as observed.
METAR_CONDITION_RULES: tuple[tuple[re.Pattern[str], Condition], ...] = tuple(
    (re.compile(pattern), condition)
    for pattern, condition in (
        (r"\bTS\b", "Thunderstorm"),
        (r"\+RA\b", "Heavy Rain"),
        (r"(-|VC)?RA\b", "Rain"),
        (r"-RA\b", "Light Rain"),
        (r"DZ\b", "Drizzle"),
        (r"SN\b", "Snow"),
        (r"PL\b", "Sleet"),
        (r"GR\b", "Hail"),
        (r"\bFG\b", "Foggy"),
        (r"BR\b", "Mist"),
        (r"\bOVC\d{3}\b", "Overcast"),
        (r"\bBKN\d{3}\b", "Cloudy"),
        (r"\bSCT\d{3}\b", "Partly Cloudy"),
        (r"\b(FEW\d{3}|CLR|SKC)\b", "Clear"),
    )
)


class MetarDecodeResult(BaseModel):
    """Temperature and condition decoded from one raw METAR report."""

    temperature_f: int | None = None
    condition: Condition = "Clear"


def parse_metar_temperature(report: str) -> int | None:
    """Return the air temperature in whole °F, or None without a `TT/DD` group."""
    match = _TEMPERATURE_RE.search(f" {report} ")
    if match is None:
        return None
    raw = match.group(1)
    celsius = -int(raw[1:]) if raw.startswith("M") else int(raw)
    return round_half_away(celsius_to_fahrenheit(celsius))


def parse_metar_condition(report: str) -> Condition:
    """Return the canonical condition for a METAR report; no match means Clear."""
    return first_match(METAR_CONDITION_RULES, report)


def decode(report: str) -> MetarDecodeResult:
    """Decode temperature and condition from a raw METAR report."""
    return MetarDecodeResult(
        temperature_f=parse_metar_temperature(report),
        condition=parse_metar_condition(report),
    )


class MetarProvider:
    """Fetches the latest METAR for a station, with a plain-text NWS fallback."""

    provider_name = "metar"

    def __init__(self, fetcher: HttpFetcher, settings: Any, logger: logging.Logger) -> None:
        self.fetcher = fetcher
        self.settings = settings
        self.logger = logger

    def fetch_station(self, station: str) -> WeatherSnapshot:
        """Fetch and decode the latest report for ``station``."""
        station = station.upper()
        report, source_url = self._fetch_report(station)
        if not report:
            raise WeatherProviderError(f"No METAR report available for station {station}.")

        self.logger.debug("METAR %s: %s", station, report)
        decoded = decode(report)
        if decoded.temperature_f is None:
            raise WeatherProviderError(
                f"METAR report for {station} has no temperature group: {report!r}"
            )
        return WeatherSnapshot(
            provider=self.provider_name,
            temperature_f=decoded.temperature_f,
            condition=decoded.condition,
            source_url=source_url,
        )

    def _fetch_report(self, station: str) -> tuple[str | None, str]:
        encoded = quote(station, safe="")
        primary_url = AVIATION_WEATHER_URL.format(station=encoded)
        try:
            report = self.fetcher.fetch_text(
                primary_url,
                timeout=self.settings.weather_timeout_seconds,
            ).strip()
        except FetchError as exc:
            self.logger.info("Aviation weather METAR fetch failed for %s: %s", station, exc)
            report = ""
        if report:
            return report, primary_url

        fallback_url = NWS_OBSERVATION_TXT_URL.format(station=encoded)
        try:
            body = self.fetcher.fetch_text(
                fallback_url,
                timeout=self.settings.weather_timeout_seconds,
            )
        except FetchError as exc:
            self.logger.info("NWS observation text fetch failed for %s: %s", station, exc)
            return None, fallback_url

        # First line is the observation timestamp.
        lines = body.split("\n")
        if len(lines) > 1 and lines[1].strip():
            return lines[1].strip(), fallback_url
        return None, fallback_url
