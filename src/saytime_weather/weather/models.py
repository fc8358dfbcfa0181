"""Typed models for resolved locations and normalized weather snapshots."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .conditions import Condition

ProviderName = Literal["openmeteo", "nws"]


class StationCode(BaseModel):
    """Airport weather station identified by its 4-letter ICAO code."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["station"] = "station"
    code: str = Field(pattern=r"^[A-Z]{4}$")


class Coordinates(BaseModel):
    """Latitude/longitude pair in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["coordinates"] = "coordinates"
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)

    @property
    def is_us_location(self) -> bool:
        """Coarse bounding box for the contiguous US, Alaska and Hawaii."""
        return 18.0 <= self.lat <= 72.0 and -180.0 <= self.lon <= -50.0


ResolvedLocation = Annotated[StationCode | Coordinates, Field(discriminator="kind")]


class ProviderPreference(BaseModel):
    """Configured provider plus whether the configuration named it explicitly."""

    provider: ProviderName = "openmeteo"
    explicitly_set: bool = False


class DisplayFields(BaseModel):
    """Optional summary fields and the units they are displayed in."""

    precipitation: bool = False
    wind: bool = False
    pressure: bool = False
    humidity: bool = False
    precip_unit: Literal["mm", "in"] = "mm"
    wind_unit: Literal["mph", "kmh", "ms", "kts"] = "mph"
    pressure_unit: Literal["hPa", "inHg"] = "inHg"

    @property
    def any_optional(self) -> bool:
        return self.precipitation or self.wind or self.pressure or self.humidity


class WeatherSnapshot(BaseModel):
    """Normalized current conditions from any provider.

    Temperature and condition are both required: a provider that can only
    supply one of them must fail instead of building a snapshot.
    """

    provider: str
    temperature_f: float
    condition: Condition
    timezone: str | None = None
    source_url: str | None = None

    precipitation_mm: float | None = None
    wind_speed_ms: float | None = None
    wind_direction_deg: float | None = None
    wind_gust_ms: float | None = None
    pressure_hpa: float | None = None
    relative_humidity_pct: float | None = None


class OrchestratorResult(BaseModel):
    """Outcome of running the provider fallback chain for one location."""

    available: bool
    provider: str | None = None
    snapshot: WeatherSnapshot | None = None
    attempted_providers: list[str] = Field(default_factory=list)
    reasons: list[str] = Field(default_factory=list)
