"""Command-line entry point: fetch current weather for a location token."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from . import __version__
from .config import Settings, load_settings
from .exceptions import ConfigError, InputRejected, LocationNotFound, ProviderUnavailable
from .http import HttpFetcher
from .log_setup import setup_logger
from .service import RunContext, WeatherReporter
from .weather.models import Coordinates

EXIT_OK = 0
EXIT_INPUT = 1
EXIT_CONFIG = 2
EXIT_NOT_FOUND = 3
EXIT_UNAVAILABLE = 4
EXIT_UNEXPECTED = 99


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="saytime-weather",
        description=(
            "Fetch current weather for a postal code, airport code or special "
            "location and write the temperature and condition files used by the "
            "time announcement."
        ),
    )
    parser.add_argument(
        "location",
        help="Postal code, 3-letter IATA or 4-letter ICAO airport code, or special location.",
    )
    parser.add_argument(
        "mode",
        nargs="?",
        choices=["v"],
        default=None,
        help="Pass 'v' to display the weather only, without writing any files.",
    )
    parser.add_argument("-c", "--config", type=Path, default=None, help="Custom INI config file.")
    parser.add_argument(
        "-d",
        "--default-country",
        default=None,
        help="Two-letter country code used for postal code lookups.",
    )
    parser.add_argument(
        "-t",
        "--temperature-mode",
        type=str.upper,
        choices=["F", "C"],
        default=None,
        help="Temperature unit written to the temperature file.",
    )
    parser.add_argument(
        "--no-condition",
        action="store_true",
        help="Do not build the condition audio file.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.default_country:
        overrides["DEFAULT_COUNTRY"] = args.default_country
    if args.temperature_mode:
        overrides["TEMPERATURE_MODE"] = args.temperature_mode
    if args.no_condition:
        overrides["PROCESS_CONDITION"] = False
    return overrides


def _print_details(console: Console, context: RunContext, settings: Settings) -> None:
    table = Table(title="Weather Lookup")
    table.add_column("Field")
    table.add_column("Value", overflow="fold")

    location = context.location
    if isinstance(location, Coordinates):
        resolved = f"{location.lat:.4f}, {location.lon:.4f}"
    elif location is not None:
        resolved = f"station {location.code}"
    else:
        resolved = "-"

    snapshot = context.snapshot
    table.add_row("Token", context.token)
    table.add_row("Resolved", resolved)
    table.add_row("Providers tried", ", ".join(context.attempted_providers) or "-")
    table.add_row("Provider", context.provider or "-")
    table.add_row("Source", (snapshot.source_url if snapshot else None) or "-")
    table.add_row("Timezone", (snapshot.timezone if snapshot else None) or "-")
    table.add_row("Temperature mode", settings.temperature_mode)
    table.add_row(
        "Temperature file",
        "-" if context.temperature_value is None else str(context.temperature_value),
    )
    table.add_row("Condition segments", ", ".join(context.condition_segments) or "-")
    table.add_row("Files written", ", ".join(str(path) for path in context.written_files) or "-")
    console.print(table)


def main(argv: list[str] | None = None) -> int:
    """Run one weather lookup and return the process exit code."""
    args = parse_args(argv)
    logger = setup_logger(level=logging.DEBUG if args.verbose else logging.WARNING)
    console = Console(highlight=False)

    try:
        settings = load_settings(config_file=args.config, overrides=_cli_overrides(args))
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return EXIT_CONFIG
    logger.debug("Loaded settings: %s", settings.safe_summary())

    display_only = args.mode == "v"
    try:
        with HttpFetcher(
            user_agent=settings.http_user_agent,
            max_redirects=settings.http_max_redirects,
            logger=logger,
        ) as fetcher:
            reporter = WeatherReporter.from_settings(settings, logger, fetcher)
            context = reporter.run(args.location, display_only=display_only)
    except InputRejected as exc:
        logger.error("Invalid location: %s", exc)
        return EXIT_INPUT
    except LocationNotFound as exc:
        logger.error("%s", exc)
        return EXIT_NOT_FOUND
    except ProviderUnavailable as exc:
        logger.error("%s", exc)
        return EXIT_UNAVAILABLE
    except Exception as exc:  # pragma: no cover - last-resort exit code
        logger.exception("Unexpected weather CLI failure: %s", exc)
        return EXIT_UNEXPECTED

    console.print(context.summary)
    if args.verbose:
        _print_details(console, context, settings)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
