"""One invocation of the weather pipeline: token → location → snapshot → outputs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from .audio import AudioSegmentInventory, AudioSegmentMatcher
from .exceptions import LocationNotFound, ProviderUnavailable, SideEffectWriteError
from .http import HttpFetcher
from .location import LocationResolver, NominatimGeocoder, validate_token
from .run_files import RunFiles
from .summary import announced_temperature, format_summary
from .weather.metar import MetarProvider
from .weather.models import (
    Coordinates,
    DisplayFields,
    ProviderPreference,
    ResolvedLocation,
    WeatherSnapshot,
)
from .weather.nws import NWSWeatherProvider
from .weather.openmeteo import OpenMeteoWeatherProvider
from .weather.orchestrator import WeatherOrchestrator


class RunContext(BaseModel):
    """Everything one run produced, returned instead of kept as ambient state."""

    token: str
    location: ResolvedLocation | None = None
    snapshot: WeatherSnapshot | None = None
    provider: str | None = None
    attempted_providers: list[str] = Field(default_factory=list)
    summary: str | None = None
    temperature_value: int | None = None
    condition_segments: list[str] = Field(default_factory=list)
    written_files: list[Path] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class WeatherReporter:
    """Wires resolver, orchestrator, matcher and run files for a single run."""

    def __init__(
        self,
        settings: Any,
        logger: logging.Logger,
        *,
        resolver: LocationResolver,
        orchestrator: WeatherOrchestrator,
        run_files: RunFiles,
        inventory: AudioSegmentInventory,
        matcher: AudioSegmentMatcher | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self.resolver = resolver
        self.orchestrator = orchestrator
        self.run_files = run_files
        self.inventory = inventory
        self.matcher = matcher or AudioSegmentMatcher(logger=logger)

    @classmethod
    def from_settings(
        cls, settings: Any, logger: logging.Logger, fetcher: HttpFetcher
    ) -> WeatherReporter:
        run_files = RunFiles.from_settings(settings)
        geocoder = NominatimGeocoder(fetcher, settings, logger)
        orchestrator = WeatherOrchestrator(
            metar=MetarProvider(fetcher, settings, logger),
            nws=NWSWeatherProvider(fetcher, settings, logger),
            openmeteo=OpenMeteoWeatherProvider(fetcher, settings, logger),
            logger=logger,
            run_files=run_files,
        )
        return cls(
            settings,
            logger,
            resolver=LocationResolver(geocoder, settings.default_country, logger),
            orchestrator=orchestrator,
            run_files=run_files,
            inventory=AudioSegmentInventory(settings.sound_dir),
        )

    @property
    def preference(self) -> ProviderPreference:
        return self.settings.provider_preference

    @property
    def fields(self) -> DisplayFields:
        return self.settings.display_fields

    def run(self, token: str, *, display_only: bool = False) -> RunContext:
        """Run the pipeline for one location token.

        Raises InputRejected, LocationNotFound or ProviderUnavailable; every
        other failure is recorded in ``RunContext.warnings``.
        """
        token = validate_token(token)
        context = RunContext(token=token)
        self._cleanup(context)

        location = self.resolver.resolve(token)
        if location is None:
            raise LocationNotFound(f"Could not get coordinates for location: {token}")
        context.location = location

        result = self.orchestrator.fetch(location, self.preference, self.fields)
        context.attempted_providers = list(result.attempted_providers)
        if not result.available or result.snapshot is None:
            raise ProviderUnavailable(
                self._unavailable_message(token, location, result.attempted_providers),
                attempted_providers=result.attempted_providers,
            )

        snapshot = result.snapshot
        context.snapshot = snapshot
        context.provider = result.provider
        context.summary = format_summary(snapshot, self.fields)
        if snapshot.timezone and self.run_files.timezone_path.exists():
            context.written_files.append(self.run_files.timezone_path)
        if display_only:
            return context

        self._write_temperature(context, snapshot)
        if self.settings.process_condition:
            self._write_condition(context, snapshot)
        return context

    def _cleanup(self, context: RunContext) -> None:
        try:
            self.run_files.cleanup()
        except SideEffectWriteError as exc:
            self._warn(context, str(exc))

    def _write_temperature(self, context: RunContext, snapshot: WeatherSnapshot) -> None:
        value = announced_temperature(snapshot, self.settings.temperature_mode)
        context.temperature_value = value
        if value is None:
            self._warn(
                context,
                f"Temperature {snapshot.temperature_f:.1f}°F is outside the announceable range; "
                "temperature file not written.",
            )
            return
        try:
            context.written_files.append(self.run_files.write_temperature(value))
        except SideEffectWriteError as exc:
            self._warn(context, f"Error writing temperature file: {exc}")

    def _write_condition(self, context: RunContext, snapshot: WeatherSnapshot) -> None:
        if not self.inventory.directory.is_dir():
            self._warn(context, f"Weather sound directory not found: {self.inventory.directory}")
            return

        segments = self.matcher.match(snapshot.condition, self.inventory)
        context.condition_segments = segments
        if not segments:
            self._warn(
                context,
                f"No weather condition sound files found for: {snapshot.condition} "
                f"(sound directory {self.inventory.directory})",
            )
            return
        try:
            path = self.run_files.write_condition_audio(
                self.inventory.path(name) for name in segments
            )
        except SideEffectWriteError as exc:
            self._warn(context, str(exc))
            return
        context.written_files.append(path)

    def _warn(self, context: RunContext, message: str) -> None:
        self.logger.warning(message)
        context.warnings.append(message)

    @staticmethod
    def _unavailable_message(
        token: str, location: ResolvedLocation, attempted: list[str]
    ) -> str:
        providers = ", ".join(name.upper() for name in attempted) or "none"
        if isinstance(location, Coordinates):
            where = f"lat={location.lat}, lon={location.lon}"
        else:
            where = f"station={location.code}"
        message = f"Failed to fetch weather data from {providers} for {token} ({where})"
        if "nws" in attempted:
            message += "; note: NWS only supports US locations"
        return message

