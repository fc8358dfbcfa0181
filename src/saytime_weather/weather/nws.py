"""NWS (api.weather.gov) current-conditions provider."""

from __future__ import annotations

import logging
from typing import Any

from ..exceptions import FetchError, WeatherProviderError
from ..http import HttpFetcher
from .base import WeatherProvider
from .conditions import Condition, condition_from_icon, normalize_text
from .models import Coordinates, DisplayFields, WeatherSnapshot
from .units import celsius_to_fahrenheit, log_unknown_wind_unit, pascal_to_hpa, wind_to_ms

NWS_API_BASE = "https://api.weather.gov"


class NWSWeatherProvider(WeatherProvider):
    """Reads the latest station observation near a point, falling back to the forecast.

    Flow: points lookup → observation station list → latest observation of
    each station in listed order until one gives both temperature and
    condition → first forecast period for whatever is still missing.
    """

    provider_name = "nws"

    def __init__(self, fetcher: HttpFetcher, settings: Any, logger: logging.Logger) -> None:
        self.fetcher = fetcher
        self.settings = settings
        self.logger = logger

    def fetch_current(self, *, lat: float, lon: float, fields: DisplayFields) -> WeatherSnapshot:
        self._validate_input(lat=lat, lon=lon)

        points_url = f"{NWS_API_BASE}/points/{lat:.4f},{lon:.4f}"
        points_payload = self._request_json(points_url, context="points lookup")
        properties = points_payload.get("properties")
        if not isinstance(properties, dict):
            raise WeatherProviderError("NWS points payload missing 'properties' object.")

        timezone = self._as_str(properties.get("timeZone"))
        temperature_f: float | None = None
        condition: Condition | None = None
        optional: dict[str, float] = {}
        source_url = points_url

        stations_url = self._as_str(properties.get("observationStations"))
        if stations_url:
            for station_id in self._station_ids(stations_url):
                obs_url = f"{NWS_API_BASE}/stations/{station_id}/observations/latest"
                try:
                    obs_payload = self._request_json(obs_url, context="latest observation")
                except WeatherProviderError as exc:
                    self.logger.info("Skipping NWS station %s: %s", station_id, exc)
                    continue
                obs_props = obs_payload.get("properties")
                if not isinstance(obs_props, dict):
                    continue

                obs_temp = self._observation_temperature_f(obs_props)
                if obs_temp is not None:
                    temperature_f = obs_temp
                text_condition = self._text_condition(obs_props)
                if text_condition is not None:
                    condition = text_condition
                elif condition is None:
                    condition = self._icon_condition(obs_props)
                if fields.any_optional:
                    optional = self._observation_optional_fields(obs_props, fields)
                source_url = obs_url

                if temperature_f is not None and condition is not None:
                    break

        if temperature_f is None or condition is None:
            forecast_url = self._as_str(properties.get("forecast"))
            if forecast_url:
                temperature_f, condition = self._forecast_fallback(
                    forecast_url,
                    temperature_f=temperature_f,
                    condition=condition,
                )
                source_url = forecast_url

        if temperature_f is None or condition is None:
            raise WeatherProviderError(
                f"NWS returned incomplete data for ({lat:.4f}, {lon:.4f}): "
                f"temperature={temperature_f!r} condition={condition!r}"
            )

        return WeatherSnapshot(
            provider=self.provider_name,
            temperature_f=temperature_f,
            condition=condition,
            timezone=timezone,
            source_url=source_url,
            **optional,
        )

    def _validate_input(self, *, lat: float, lon: float) -> None:
        if not (-90 <= lat <= 90):
            raise WeatherProviderError(f"Invalid latitude {lat}; expected between -90 and 90.")
        if not (-180 <= lon <= 180):
            raise WeatherProviderError(f"Invalid longitude {lon}; expected between -180 and 180.")
        if not Coordinates(lat=lat, lon=lon).is_us_location:
            raise WeatherProviderError(
                f"NWS only covers US locations; ({lat}, {lon}) is outside the US bounding box."
            )

    def _request_json(self, url: str, context: str) -> dict[str, Any]:
        try:
            payload = self.fetcher.fetch_json(
                url,
                timeout=self.settings.weather_timeout_seconds,
                user_agent=self.settings.nws_user_agent,
                accept="application/geo+json",
            )
        except FetchError as exc:
            raise WeatherProviderError(f"NWS {context} failed at {url}: {exc}") from exc

        if not isinstance(payload, dict):
            raise WeatherProviderError(
                f"NWS {context} returned unexpected payload type "
                f"{type(payload).__name__} at {url}."
            )
        return payload

    def _station_ids(self, stations_url: str) -> list[str]:
        try:
            stations_payload = self._request_json(stations_url, context="observation stations")
        except WeatherProviderError as exc:
            self.logger.info("NWS observation station list unavailable: %s", exc)
            return []

        features = stations_payload.get("features")
        if not isinstance(features, list):
            return []
        station_ids: list[str] = []
        for feature in features:
            if not isinstance(feature, dict):
                continue
            props = feature.get("properties")
            if not isinstance(props, dict):
                continue
            station_id = self._as_str(props.get("stationIdentifier"))
            if station_id:
                station_ids.append(station_id)
        return station_ids

    def _observation_temperature_f(self, obs_props: dict[str, Any]) -> float | None:
        celsius = self._quantity_value(obs_props.get("temperature"))
        if celsius is None:
            return None
        return celsius_to_fahrenheit(celsius)

    @staticmethod
    def _text_condition(obs_props: dict[str, Any]) -> Condition | None:
        text = obs_props.get("textDescription")
        if isinstance(text, str) and text.strip():
            return normalize_text(text)
        return None

    @staticmethod
    def _icon_condition(obs_props: dict[str, Any]) -> Condition | None:
        icon = obs_props.get("icon")
        if isinstance(icon, str) and icon.strip():
            return condition_from_icon(icon)
        return None

    def _observation_optional_fields(
        self, obs_props: dict[str, Any], fields: DisplayFields
    ) -> dict[str, float]:
        values: dict[str, float] = {}

        if fields.precipitation:
            precip = self._quantity_value(obs_props.get("precipitationLastHour"))
            if precip is not None:
                values["precipitation_mm"] = precip

        if fields.wind:
            speed_qty = obs_props.get("windSpeed")
            speed = self._quantity_value(speed_qty)
            if speed is not None:
                unit = self._quantity_unit(speed_qty)
                log_unknown_wind_unit(self.logger, unit, "NWS windSpeed")
                values["wind_speed_ms"] = wind_to_ms(speed, unit)
            gust_qty = obs_props.get("windGust")
            gust = self._quantity_value(gust_qty)
            if gust is not None:
                unit = self._quantity_unit(gust_qty)
                log_unknown_wind_unit(self.logger, unit, "NWS windGust")
                values["wind_gust_ms"] = wind_to_ms(gust, unit)
            direction = self._quantity_value(obs_props.get("windDirection"))
            if direction is not None:
                values["wind_direction_deg"] = direction

        if fields.pressure:
            pressure_qty = obs_props.get("barometricPressure")
            pressure = self._quantity_value(pressure_qty)
            if pressure is not None:
                unit = (self._quantity_unit(pressure_qty) or "").lower()
                values["pressure_hpa"] = pressure if "hpa" in unit else pascal_to_hpa(pressure)

        if fields.humidity:
            humidity = self._quantity_value(obs_props.get("relativeHumidity"))
            if humidity is not None:
                values["relative_humidity_pct"] = humidity

        return values

    def _forecast_fallback(
        self,
        forecast_url: str,
        *,
        temperature_f: float | None,
        condition: Condition | None,
    ) -> tuple[float | None, Condition | None]:
        try:
            forecast_payload = self._request_json(forecast_url, context="forecast fetch")
        except WeatherProviderError as exc:
            self.logger.info("NWS forecast fallback unavailable: %s", exc)
            return temperature_f, condition

        properties = forecast_payload.get("properties")
        if not isinstance(properties, dict):
            return temperature_f, condition
        periods = properties.get("periods")
        if not isinstance(periods, list) or not periods or not isinstance(periods[0], dict):
            return temperature_f, condition

        current = periods[0]
        if temperature_f is None:
            temperature_f = self._as_float(current.get("temperature"))
        if condition is None:
            text = self._as_str(current.get("shortForecast")) or self._as_str(
                current.get("detailedForecast")
            )
            if text:
                condition = normalize_text(text)
        return temperature_f, condition

    @classmethod
    def _quantity_value(cls, quantity: Any) -> float | None:
        """Extract the numeric value of an NWS `{unitCode, value}` quantity."""
        if isinstance(quantity, dict):
            return cls._as_float(quantity.get("value"))
        return None

    @classmethod
    def _quantity_unit(cls, quantity: Any) -> str | None:
        if isinstance(quantity, dict):
            return cls._as_str(quantity.get("unitCode"))
        return None

    @staticmethod
    def _as_str(value: Any) -> str | None:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    @staticmethod
    def _as_float(value: Any) -> float | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return float(value)
        return None
