"""Weather providers, condition vocabulary, and normalized snapshot models."""

from .base import WeatherProvider
from .conditions import Condition
from .metar import MetarProvider
from .models import (
    Coordinates,
    DisplayFields,
    OrchestratorResult,
    ProviderPreference,
    StationCode,
    WeatherSnapshot,
)
from .nws import NWSWeatherProvider
from .openmeteo import OpenMeteoWeatherProvider
from .orchestrator import WeatherOrchestrator

__all__ = [
    "Condition",
    "Coordinates",
    "DisplayFields",
    "MetarProvider",
    "NWSWeatherProvider",
    "OpenMeteoWeatherProvider",
    "OrchestratorResult",
    "ProviderPreference",
    "StationCode",
    "WeatherOrchestrator",
    "WeatherProvider",
    "WeatherSnapshot",
]
