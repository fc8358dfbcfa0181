"""Provider selection and fallback for a resolved location."""

from __future__ import annotations

import logging

from ..exceptions import FetchError, SideEffectWriteError, WeatherProviderError
from ..run_files import RunFiles
from .base import WeatherProvider
from .metar import MetarProvider
from .models import (
    Coordinates,
    DisplayFields,
    OrchestratorResult,
    ProviderPreference,
    StationCode,
    WeatherSnapshot,
)


class WeatherOrchestrator:
    """Queries providers in policy order and returns the first complete snapshot.

    Station codes only ever go to METAR. Coordinates go to NWS first when the
    preference was not set explicitly and the point is inside the US box, or
    when NWS is the configured provider; Open-Meteo is the fallback in both
    cases and the only provider otherwise.
    """

    def __init__(
        self,
        *,
        metar: MetarProvider,
        nws: WeatherProvider,
        openmeteo: WeatherProvider,
        logger: logging.Logger,
        run_files: RunFiles | None = None,
    ) -> None:
        self.metar = metar
        self.nws = nws
        self.openmeteo = openmeteo
        self.logger = logger
        self.run_files = run_files

    def provider_order(
        self, location: Coordinates, preference: ProviderPreference
    ) -> list[WeatherProvider]:
        """Return the providers to try for a coordinate pair, in order."""
        if not preference.explicitly_set and location.is_us_location:
            return [self.nws, self.openmeteo]
        if preference.provider == "nws":
            if not location.is_us_location:
                return [self.openmeteo]
            return [self.nws, self.openmeteo]
        return [self.openmeteo]

    def fetch(
        self,
        location: StationCode | Coordinates,
        preference: ProviderPreference,
        fields: DisplayFields | None = None,
    ) -> OrchestratorResult:
        fields = fields or DisplayFields()
        if isinstance(location, StationCode):
            return self._fetch_station(location)

        attempted: list[str] = []
        reasons: list[str] = []
        for provider in self.provider_order(location, preference):
            attempted.append(provider.provider_name)
            try:
                snapshot = provider.fetch_current(lat=location.lat, lon=location.lon, fields=fields)
            except (WeatherProviderError, FetchError) as exc:
                self.logger.info("Provider %s failed: %s", provider.provider_name, exc)
                reasons.append(f"{provider.provider_name}: {exc}")
                continue
            self._persist_timezone(snapshot)
            return OrchestratorResult(
                available=True,
                provider=provider.provider_name,
                snapshot=snapshot,
                attempted_providers=attempted,
                reasons=reasons,
            )

        return OrchestratorResult(
            available=False,
            attempted_providers=attempted,
            reasons=reasons,
        )

    def _fetch_station(self, location: StationCode) -> OrchestratorResult:
        attempted = [self.metar.provider_name]
        try:
            snapshot = self.metar.fetch_station(location.code)
        except (WeatherProviderError, FetchError) as exc:
            self.logger.info("METAR lookup for %s failed: %s", location.code, exc)
            return OrchestratorResult(
                available=False,
                attempted_providers=attempted,
                reasons=[f"{self.metar.provider_name}: {exc}"],
            )
        return OrchestratorResult(
            available=True,
            provider=self.metar.provider_name,
            snapshot=snapshot,
            attempted_providers=attempted,
        )

    def _persist_timezone(self, snapshot: WeatherSnapshot) -> None:
        if self.run_files is None or not snapshot.timezone:
            return
        try:
            self.run_files.write_timezone(snapshot.timezone)
        except SideEffectWriteError as exc:
            self.logger.warning("Failed to write timezone file: %s", exc)
