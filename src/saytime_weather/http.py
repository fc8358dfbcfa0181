"""Blocking HTTP fetch helper with explicit timeouts and capped redirect following."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from .exceptions import FetchError

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})


class HttpFetcher:
    """Thin synchronous wrapper over ``httpx.Client``.

    Redirects are followed by hand so that every hop consumes one unit of
    ``max_redirects``; a redirect arriving after the budget is spent fails the
    fetch. Only HTTP 200 counts as success and nothing is retried.
    """

    def __init__(
        self,
        *,
        user_agent: str,
        max_redirects: int = 5,
        transport: httpx.BaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.user_agent = user_agent
        self.max_redirects = max_redirects
        self.logger = logger or logging.getLogger("saytime_weather.http")
        self._client = httpx.Client(follow_redirects=False, transport=transport)

    def __enter__(self) -> HttpFetcher:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch_text(
        self,
        url: str,
        *,
        timeout: float,
        user_agent: str | None = None,
        accept: str | None = None,
    ) -> str:
        """GET ``url`` and return the body of the final 200 response."""
        return self._get(url, timeout=timeout, user_agent=user_agent, accept=accept).text

    def _get(
        self,
        url: str,
        *,
        timeout: float,
        user_agent: str | None,
        accept: str | None,
    ) -> httpx.Response:
        headers = {"User-Agent": user_agent or self.user_agent}
        if accept:
            headers["Accept"] = accept

        current = httpx.URL(url)
        remaining = self.max_redirects
        while True:
            try:
                response = self._client.get(current, headers=headers, timeout=timeout)
            except httpx.HTTPError as exc:
                raise FetchError(f"Request to {current} failed: {type(exc).__name__}: {exc}") from exc

            status = response.status_code
            if status == 200:
                return response

            if status in REDIRECT_STATUSES:
                location = response.headers.get("location")
                if not location:
                    raise FetchError(
                        f"Redirect {status} from {current} without Location header.",
                        status_code=status,
                    )
                if remaining <= 0:
                    raise FetchError(
                        f"Too many redirects while fetching {url} "
                        f"(limit {self.max_redirects}).",
                        status_code=status,
                    )
                remaining -= 1
                current = current.join(location)
                self.logger.debug("Following redirect %d to %s", status, current)
                continue

            raise FetchError(
                f"Request to {current} failed with status {status}.",
                status_code=status,
            )

    def fetch_json(
        self,
        url: str,
        *,
        timeout: float,
        user_agent: str | None = None,
        accept: str | None = "application/json",
    ) -> Any:
        """GET ``url`` and decode its JSON body; empty or malformed bodies raise FetchError."""
        response = self._get(url, timeout=timeout, user_agent=user_agent, accept=accept)
        if not response.content.strip():
            raise FetchError(f"Empty JSON body from {url}.")
        try:
            return response.json()
        except ValueError as exc:
            raise FetchError(f"Malformed JSON from {url}: {exc}") from exc


class RateLimiter:
    """Enforces a minimum delay between consecutive calls."""

    def __init__(self, min_interval_seconds: float, *, clock: Any = None, sleep: Any = None) -> None:
        self.min_interval_seconds = min_interval_seconds
        self._clock = clock or time.monotonic
        self._sleep = sleep or time.sleep
        self._last_call: float | None = None

    def wait(self) -> None:
        now = self._clock()
        if self._last_call is not None:
            remaining = self.min_interval_seconds - (now - self._last_call)
            if remaining > 0:
                self._sleep(remaining)
                now = self._clock()
        self._last_call = now
