"""Application exception classes."""


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class FetchError(Exception):
    """Raised when an HTTP fetch fails, is redirected too often, or returns bad JSON."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class WeatherProviderError(Exception):
    """Raised when weather provider requests or normalization fail."""


class InputRejected(Exception):
    """Raised when a location token is malformed; no fetch is attempted."""


class LocationNotFound(Exception):
    """Raised when a location token could not be resolved to a station or coordinates."""


class ProviderUnavailable(Exception):
    """Raised when every provider in the fallback chain failed."""

    def __init__(self, message: str, *, attempted_providers: list[str] | None = None) -> None:
        super().__init__(message)
        self.attempted_providers = list(attempted_providers or [])


class SideEffectWriteError(Exception):
    """Raised when a temperature, condition, or timezone file cannot be written."""
