"""Provider-agnostic weather interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import DisplayFields, WeatherSnapshot


class WeatherProvider(ABC):
    """Base contract for coordinate-based current-conditions providers.

    Implementations raise ``WeatherProviderError`` or ``FetchError`` when they
    cannot produce both a temperature and a condition.
    """

    provider_name: str

    @abstractmethod
    def fetch_current(self, *, lat: float, lon: float, fields: DisplayFields) -> WeatherSnapshot:
        """Fetch and normalize current conditions for a coordinate pair."""
