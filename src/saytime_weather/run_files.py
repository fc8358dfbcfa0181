"""Well-known output files shared with the time-announcement consumer."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .exceptions import SideEffectWriteError


class RunFiles:
    """Writes the temperature, condition audio, and timezone files for one run.

    All three files are removed by :meth:`cleanup` at the start of a run so a
    failed run never leaves stale values behind for the consumer.
    """

    def __init__(self, temperature_path: Path, condition_path: Path, timezone_path: Path) -> None:
        self.temperature_path = temperature_path
        self.condition_path = condition_path
        self.timezone_path = timezone_path

    @classmethod
    def from_settings(cls, settings: Any) -> RunFiles:
        return cls(
            temperature_path=settings.temperature_file,
            condition_path=settings.condition_file,
            timezone_path=settings.timezone_file,
        )

    @property
    def paths(self) -> tuple[Path, Path, Path]:
        return (self.temperature_path, self.condition_path, self.timezone_path)

    def cleanup(self) -> list[Path]:
        """Delete any existing run files; returns the paths that were removed."""
        removed: list[Path] = []
        for path in self.paths:
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                raise SideEffectWriteError(f"Failed removing {path}: {exc}") from exc
            removed.append(path)
        return removed

    def write_temperature(self, value: int) -> Path:
        return self._write_text(self.temperature_path, str(value))

    def write_timezone(self, timezone: str) -> Path:
        return self._write_text(self.timezone_path, timezone)

    def write_condition_audio(self, segments: Iterable[Path]) -> Path:
        """Concatenate raw segment bytes into the condition audio file.

        Every segment is read before the file is opened, so a missing segment
        leaves no partial file behind.
        """
        try:
            chunks = [segment.read_bytes() for segment in segments]
            self.condition_path.write_bytes(b"".join(chunks))
        except OSError as exc:
            self.condition_path.unlink(missing_ok=True)
            raise SideEffectWriteError(
                f"Failed writing condition audio {self.condition_path}: {exc}"
            ) from exc
        return self.condition_path

    @staticmethod
    def _write_text(path: Path, text: str) -> Path:
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise SideEffectWriteError(f"Failed writing {path}: {exc}") from exc
        return path
