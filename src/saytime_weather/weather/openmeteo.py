"""Open-Meteo (api.open-meteo.com) current-conditions provider."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

from ..exceptions import FetchError, WeatherProviderError
from ..http import HttpFetcher
from .base import WeatherProvider
from .conditions import weather_code_to_condition
from .models import DisplayFields, WeatherSnapshot

OPEN_METEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

# Snapshot field -> Open-Meteo `current` variable, grouped by display flag.
_OPTIONAL_VARIABLES: dict[str, tuple[tuple[str, str], ...]] = {
    "precipitation": (("precipitation_mm", "precipitation"),),
    "wind": (
        ("wind_speed_ms", "wind_speed_10m"),
        ("wind_direction_deg", "wind_direction_10m"),
        ("wind_gust_ms", "wind_gusts_10m"),
    ),
    "pressure": (("pressure_hpa", "pressure_msl"),),
    "humidity": (("relative_humidity_pct", "relative_humidity_2m"),),
}


class OpenMeteoWeatherProvider(WeatherProvider):
    """Single-request provider with worldwide coverage."""

    provider_name = "openmeteo"

    def __init__(self, fetcher: HttpFetcher, settings: Any, logger: logging.Logger) -> None:
        self.fetcher = fetcher
        self.settings = settings
        self.logger = logger

    def build_url(self, *, lat: float, lon: float, fields: DisplayFields) -> str:
        variables = ["temperature_2m", "weather_code", "is_day"]
        for flag, pairs in _OPTIONAL_VARIABLES.items():
            if getattr(fields, flag):
                variables.extend(variable for _, variable in pairs)
        params = {
            "latitude": lat,
            "longitude": lon,
            "current": ",".join(variables),
            "temperature_unit": "fahrenheit",
            "wind_speed_unit": "ms",
            "precipitation_unit": "mm",
            "timezone": "auto",
        }
        return f"{OPEN_METEO_FORECAST_URL}?{urlencode(params, safe=',')}"

    def fetch_current(self, *, lat: float, lon: float, fields: DisplayFields) -> WeatherSnapshot:
        url = self.build_url(lat=lat, lon=lon, fields=fields)
        payload = self._request_json(url)

        current = payload.get("current")
        if not isinstance(current, dict):
            raise WeatherProviderError("Open-Meteo payload missing 'current' object.")

        temperature = self._as_float(current.get("temperature_2m"))
        code = current.get("weather_code")
        if temperature is None or isinstance(code, bool) or not isinstance(code, (int, float)):
            raise WeatherProviderError(
                f"Open-Meteo returned incomplete data for ({lat}, {lon}): "
                f"temperature_2m={current.get('temperature_2m')!r} weather_code={code!r}"
            )

        is_day = current.get("is_day")
        condition = weather_code_to_condition(int(code), is_day=is_day != 0)

        optional: dict[str, float] = {}
        for flag, pairs in _OPTIONAL_VARIABLES.items():
            if not getattr(fields, flag):
                continue
            for field_name, variable in pairs:
                value = self._as_float(current.get(variable))
                if value is not None:
                    optional[field_name] = value

        timezone = payload.get("timezone")
        return WeatherSnapshot(
            provider=self.provider_name,
            temperature_f=temperature,
            condition=condition,
            timezone=timezone.strip() if isinstance(timezone, str) and timezone.strip() else None,
            source_url=url,
            **optional,
        )

    def _request_json(self, url: str) -> dict[str, Any]:
        try:
            payload = self.fetcher.fetch_json(url, timeout=self.settings.weather_timeout_seconds)
        except FetchError as exc:
            raise WeatherProviderError(f"Open-Meteo request failed at {url}: {exc}") from exc
        if not isinstance(payload, dict):
            raise WeatherProviderError(
                f"Open-Meteo returned unexpected payload type {type(payload).__name__}."
            )
        return payload

    @staticmethod
    def _as_float(value: Any) -> float | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return float(value)
        return None
