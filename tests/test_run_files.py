"""Tests for the temperature, condition audio and timezone output files."""

from __future__ import annotations

from pathlib import Path

import pytest

from saytime_weather.exceptions import SideEffectWriteError
from saytime_weather.run_files import RunFiles


def _run_files(base: Path) -> RunFiles:
    return RunFiles(base / "temperature", base / "condition.ulaw", base / "timezone")


def test_cleanup_removes_existing_files_and_is_idempotent(tmp_path: Path) -> None:
    run_files = _run_files(tmp_path)
    run_files.write_temperature(72)
    run_files.write_timezone("America/Chicago")

    removed = run_files.cleanup()

    assert removed == [tmp_path / "temperature", tmp_path / "timezone"]
    assert run_files.cleanup() == []
    assert not any(path.exists() for path in run_files.paths)


@pytest.mark.parametrize("value", [72, -5, 0])
def test_temperature_is_plain_signed_integer(tmp_path: Path, value: int) -> None:
    path = _run_files(tmp_path).write_temperature(value)
    assert path.read_text(encoding="utf-8") == str(value)


def test_condition_audio_is_raw_concatenation(tmp_path: Path) -> None:
    sounds = tmp_path / "wx"
    sounds.mkdir()
    (sounds / "light.ulaw").write_bytes(b"\x01\x02")
    (sounds / "rain.ulaw").write_bytes(b"\x03")

    path = _run_files(tmp_path).write_condition_audio(
        [sounds / "light.ulaw", sounds / "rain.ulaw"]
    )

    assert path.read_bytes() == b"\x01\x02\x03"


def test_write_failures_raise_side_effect_error(tmp_path: Path) -> None:
    run_files = _run_files(tmp_path / "missing")

    with pytest.raises(SideEffectWriteError):
        run_files.write_temperature(70)
    with pytest.raises(SideEffectWriteError):
        run_files.write_timezone("UTC")
    with pytest.raises(SideEffectWriteError):
        run_files.write_condition_audio([tmp_path / "absent.ulaw"])


def test_missing_segment_leaves_no_partial_condition_file(tmp_path: Path) -> None:
    (tmp_path / "light.ulaw").write_bytes(b"AAA")
    run_files = _run_files(tmp_path)

    with pytest.raises(SideEffectWriteError):
        run_files.write_condition_audio([tmp_path / "light.ulaw", tmp_path / "rain.ulaw"])

    assert not run_files.condition_path.exists()


def test_failed_write_removes_previous_condition_file(tmp_path: Path) -> None:
    run_files = _run_files(tmp_path)
    run_files.condition_path.write_bytes(b"stale")

    with pytest.raises(SideEffectWriteError):
        run_files.write_condition_audio([tmp_path / "absent.ulaw"])

    assert not run_files.condition_path.exists()


def test_from_settings_uses_configured_paths(tmp_path: Path) -> None:
    class Settings:
        temperature_file = tmp_path / "t"
        condition_file = tmp_path / "c.ulaw"
        timezone_file = tmp_path / "tz"

    run_files = RunFiles.from_settings(Settings())

    assert run_files.paths == (tmp_path / "t", tmp_path / "c.ulaw", tmp_path / "tz")
