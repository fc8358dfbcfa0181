"""Typed settings loader for saytime-weather."""

from __future__ import annotations

import configparser
import logging
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError
from .weather.models import DisplayFields, ProviderPreference

DEFAULT_CONFIG_PATH = Path("/etc/asterisk/local/weather.ini")
INI_SECTION = "weather"

# INI keys as written by the installer -> settings aliases.
_INI_KEY_ALIASES = {
    "temperature_mode": "TEMPERATURE_MODE",
    "process_condition": "PROCESS_CONDITION",
    "default_country": "DEFAULT_COUNTRY",
    "weather_provider": "WEATHER_PROVIDER",
    "show_precipitation": "SHOW_PRECIPITATION",
    "show_wind": "SHOW_WIND",
    "show_pressure": "SHOW_PRESSURE",
    "show_humidity": "SHOW_HUMIDITY",
    "precip_unit": "PRECIP_UNIT",
    "wind_unit": "WIND_UNIT",
    "pressure_unit": "PRESSURE_UNIT",
}

_VALID_PROVIDERS = ("openmeteo", "nws")

logger = logging.getLogger("saytime_weather.config")


class Settings(BaseSettings):
    """Application settings loaded from environment variables, `.env`, and the INI file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    temperature_mode: Literal["F", "C"] = Field(default="F", alias="TEMPERATURE_MODE")
    process_condition: bool = Field(default=True, alias="PROCESS_CONDITION")
    default_country: str = Field(default="us", alias="DEFAULT_COUNTRY")
    weather_provider: Literal["openmeteo", "nws"] = Field(
        default="openmeteo",
        alias="WEATHER_PROVIDER",
    )

    show_precipitation: bool = Field(default=False, alias="SHOW_PRECIPITATION")
    show_wind: bool = Field(default=False, alias="SHOW_WIND")
    show_pressure: bool = Field(default=False, alias="SHOW_PRESSURE")
    show_humidity: bool = Field(default=False, alias="SHOW_HUMIDITY")
    precip_unit: Literal["mm", "in"] = Field(default="mm", alias="PRECIP_UNIT")
    wind_unit: Literal["mph", "kmh", "ms", "kts"] = Field(default="mph", alias="WIND_UNIT")
    pressure_unit: Literal["hPa", "inHg"] = Field(default="inHg", alias="PRESSURE_UNIT")

    nws_user_agent: str = Field(
        default="saytime-weather/0.1 (contact: saytime-weather@example.com)",
        alias="NWS_USER_AGENT",
    )
    http_user_agent: str = Field(
        default="Mozilla/5.0 (compatible; saytime-weather/0.1)",
        alias="HTTP_USER_AGENT",
    )
    geocode_timeout_seconds: float = Field(default=10.0, alias="GEOCODE_TIMEOUT_SECONDS")
    weather_timeout_seconds: float = Field(default=15.0, alias="WEATHER_TIMEOUT_SECONDS")
    http_max_redirects: int = Field(default=5, alias="HTTP_MAX_REDIRECTS")
    geocode_min_interval_seconds: float = Field(
        default=1.0,
        alias="GEOCODE_MIN_INTERVAL_SECONDS",
    )

    temperature_file: Path = Field(default=Path("/tmp/temperature"), alias="TEMPERATURE_FILE")
    condition_file: Path = Field(default=Path("/tmp/condition.ulaw"), alias="CONDITION_FILE")
    timezone_file: Path = Field(default=Path("/tmp/timezone"), alias="TIMEZONE_FILE")
    sound_dir: Path = Field(
        default=Path("/usr/share/asterisk/sounds/en/wx"),
        alias="WEATHER_SOUND_DIR",
    )

    @field_validator("temperature_mode", mode="before")
    @classmethod
    def normalize_temperature_mode(cls, value: Any) -> Any:
        """Accept lower-case `f`/`c` as written in hand-edited INI files."""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator(
        "process_condition",
        "show_precipitation",
        "show_wind",
        "show_pressure",
        "show_humidity",
        mode="before",
    )
    @classmethod
    def normalize_yes_no(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("weather_provider", mode="before")
    @classmethod
    def fallback_unknown_provider(cls, value: Any) -> Any:
        """Unknown provider names degrade to openmeteo instead of failing the run."""
        if not isinstance(value, str):
            return value
        candidate = value.strip().lower()
        if candidate not in _VALID_PROVIDERS:
            logger.warning("Invalid weather_provider %r, using default (openmeteo)", value)
            return "openmeteo"
        return candidate

    @field_validator("default_country", mode="before")
    @classmethod
    def normalize_country(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @model_validator(mode="after")
    def validate_ranges(self) -> Settings:
        """Validate numeric limits and free-text fields."""
        if not self.default_country.isalpha() or len(self.default_country) != 2:
            raise ValueError("DEFAULT_COUNTRY must be a two-letter ISO country code.")
        if not self.nws_user_agent.strip():
            raise ValueError("NWS_USER_AGENT must not be empty.")
        if not self.http_user_agent.strip():
            raise ValueError("HTTP_USER_AGENT must not be empty.")
        if self.geocode_timeout_seconds <= 0:
            raise ValueError("GEOCODE_TIMEOUT_SECONDS must be > 0.")
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        if self.http_max_redirects < 0:
            raise ValueError("HTTP_MAX_REDIRECTS must be >= 0.")
        if self.geocode_min_interval_seconds < 0:
            raise ValueError("GEOCODE_MIN_INTERVAL_SECONDS must be >= 0.")
        return self

    @property
    def provider_preference(self) -> ProviderPreference:
        """Provider preference, flagged as explicit when any source named a provider."""
        return ProviderPreference(
            provider=self.weather_provider,
            explicitly_set="weather_provider" in self.model_fields_set,
        )

    @property
    def display_fields(self) -> DisplayFields:
        return DisplayFields(
            precipitation=self.show_precipitation,
            wind=self.show_wind,
            pressure=self.show_pressure,
            humidity=self.show_humidity,
            precip_unit=self.precip_unit,
            wind_unit=self.wind_unit,
            pressure_unit=self.pressure_unit,
        )

    def safe_summary(self) -> dict[str, Any]:
        """Return a config summary for debug logging."""
        return {
            "temperature_mode": self.temperature_mode,
            "process_condition": self.process_condition,
            "default_country": self.default_country,
            "weather_provider": self.weather_provider,
            "provider_explicitly_set": self.provider_preference.explicitly_set,
            "display_fields": self.display_fields.model_dump(),
            "geocode_timeout_seconds": self.geocode_timeout_seconds,
            "weather_timeout_seconds": self.weather_timeout_seconds,
            "sound_dir": str(self.sound_dir),
        }


def read_ini_overrides(path: Path) -> dict[str, str]:
    """Read the `[weather]` section of an INI file into settings aliases."""
    parser = configparser.ConfigParser(interpolation=None)
    try:
        with path.open(encoding="utf-8") as fh:
            parser.read_file(fh)
    except (OSError, configparser.Error) as exc:
        raise ConfigError(f"Failed to parse config file {path}: {exc}") from exc

    if not parser.has_section(INI_SECTION):
        return {}

    overrides: dict[str, str] = {}
    for key, raw_value in parser.items(INI_SECTION):
        alias = _INI_KEY_ALIASES.get(key.strip().lower())
        if alias is None:
            continue
        overrides[alias] = raw_value.strip().strip("\"'")
    return overrides


def load_settings(
    config_file: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load and validate settings, raising ConfigError on failure.

    Precedence, highest first: explicit ``overrides`` (command-line options),
    the INI file, environment variables, `.env`, field defaults. A custom
    ``config_file`` must exist; the default INI path is optional.
    """
    if config_file is not None and not config_file.exists():
        raise ConfigError(f"Custom config file not found: {config_file}")

    ini_path = config_file or DEFAULT_CONFIG_PATH
    init_values: dict[str, Any] = {}
    if ini_path.exists():
        init_values.update(read_ini_overrides(ini_path))
    init_values.update(overrides or {})

    try:
        return Settings(**init_values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
