"""Tests for matching condition labels to audio segment files."""

from __future__ import annotations

from pathlib import Path

import pytest

from saytime_weather.audio import AudioSegmentInventory, AudioSegmentMatcher, word_rank


def _inventory(tmp_path: Path, *stems: str) -> AudioSegmentInventory:
    for stem in stems:
        (tmp_path / f"{stem}.ulaw").write_bytes(stem.encode("ascii"))
    return AudioSegmentInventory(tmp_path)


def test_exact_phrase_wins_over_words(tmp_path: Path) -> None:
    inventory = _inventory(tmp_path, "light-rain", "light", "rain")

    assert AudioSegmentMatcher().match("Light Rain", inventory) == ["light-rain.ulaw"]


@pytest.mark.parametrize("stem", ["light rain", "light_rain", "lightrain"])
def test_exact_phrase_variants(tmp_path: Path, stem: str) -> None:
    inventory = _inventory(tmp_path, stem)

    assert AudioSegmentMatcher().match("Light Rain", inventory) == [f"{stem}.ulaw"]


def test_per_word_match_keeps_condition_order(tmp_path: Path) -> None:
    inventory = _inventory(tmp_path, "rain", "light")

    assert AudioSegmentMatcher().match("Light Rain", inventory) == ["light.ulaw", "rain.ulaw"]


def test_per_word_match_skips_words_without_files(tmp_path: Path) -> None:
    inventory = _inventory(tmp_path, "cloudy")

    assert AudioSegmentMatcher().match("Partly Cloudy", inventory) == ["cloudy.ulaw"]


def test_fuzzy_match_prefers_important_words(tmp_path: Path) -> None:
    inventory = _inventory(tmp_path, "heavy-weather", "snowfall")

    assert AudioSegmentMatcher().match("Heavy Snow", inventory) == ["snowfall.ulaw"]


def test_fuzzy_match_ignores_short_words(tmp_path: Path) -> None:
    inventory = _inventory(tmp_path, "forward", "fair")

    # "fog" is shorter than four characters, so "forward" is not a containment hit.
    assert AudioSegmentMatcher().match("Fog", inventory) == ["fair.ulaw"]


def test_defaults_are_used_when_nothing_matches(tmp_path: Path) -> None:
    inventory = _inventory(tmp_path, "sunny", "fair")

    assert AudioSegmentMatcher().match("Thunderstorm with Hail", inventory) == ["sunny.ulaw"]


def test_no_files_means_no_match(tmp_path: Path) -> None:
    assert AudioSegmentMatcher().match("Rain", AudioSegmentInventory(tmp_path)) == []
    assert AudioSegmentMatcher().match("Rain", AudioSegmentInventory(tmp_path / "absent")) == []


def test_inventory_stems_are_sorted_and_filtered(tmp_path: Path) -> None:
    inventory = _inventory(tmp_path, "snow", "clear")
    (tmp_path / "notes.txt").write_text("x", encoding="utf-8")
    (tmp_path / "sub.ulaw").mkdir()

    assert inventory.stems() == ["clear", "snow"]


def test_word_rank() -> None:
    assert word_rank("rain") < word_rank("light") < word_rank("with")
