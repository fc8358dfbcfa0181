"""Condition-to-audio-segment matching against a directory of `.ulaw` files."""

from __future__ import annotations

import logging
import re
from pathlib import Path

SEGMENT_EXTENSION = ".ulaw"

IMPORTANT_WORDS = frozenset(
    {
        "snow", "rain", "thunderstorm", "hail", "sleet", "fog", "drizzle",
        "showers", "cloudy", "overcast", "sunny", "clear",
    }
)
MODIFIER_WORDS = frozenset({"light", "heavy", "freezing", "mostly", "partly"})
DEFAULT_SEGMENTS = ("clear", "sunny", "fair")
MIN_FUZZY_WORD_LENGTH = 4

_WHITESPACE_RE = re.compile(r"\s+")


class AudioSegmentInventory:
    """Read-only view of the segment files in a sound directory.

    Every query hits the filesystem; the directory may be changed by other
    tools between runs.
    """

    def __init__(self, directory: Path, extension: str = SEGMENT_EXTENSION) -> None:
        self.directory = directory
        self.extension = extension

    def filename(self, stem: str) -> str:
        return f"{stem}{self.extension}"

    def path(self, filename: str) -> Path:
        return self.directory / filename

    def exists(self, stem: str) -> bool:
        return self.path(self.filename(stem)).is_file()

    def stems(self) -> list[str]:
        """Sorted stems of every segment file in the directory."""
        if not self.directory.is_dir():
            return []
        return sorted(
            entry.name[: -len(self.extension)]
            for entry in self.directory.iterdir()
            if entry.is_file() and entry.name.lower().endswith(self.extension)
        )


def word_rank(word: str) -> int:
    """Importance rank: weather nouns first, then modifiers, then everything else."""
    if word in IMPORTANT_WORDS:
        return 0
    if word in MODIFIER_WORDS:
        return 1
    return 2


class AudioSegmentMatcher:
    """Selects the segment files that voice a condition label.

    Tiers, first non-empty wins: exact phrase, every word with its own file
    (left to right), fuzzy stem containment by word importance, and finally
    the generic `clear`/`sunny`/`fair` segments.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("saytime_weather.audio")

    def match(self, condition: str, inventory: AudioSegmentInventory) -> list[str]:
        phrase = condition.strip().lower()
        words = phrase.split()

        for tier, finder in (
            ("exact", lambda: self._exact_phrase(phrase, inventory)),
            ("per-word", lambda: self._per_word(words, inventory)),
            ("fuzzy", lambda: self._fuzzy(words, inventory)),
            ("default", lambda: self._defaults(inventory)),
        ):
            found = finder()
            if found:
                self.logger.debug("Condition %r matched %s tier: %s", condition, tier, found)
                return found
        return []

    @staticmethod
    def _exact_phrase(phrase: str, inventory: AudioSegmentInventory) -> list[str]:
        if not phrase:
            return []
        variants = (
            phrase,
            _WHITESPACE_RE.sub("-", phrase),
            _WHITESPACE_RE.sub("_", phrase),
            _WHITESPACE_RE.sub("", phrase),
        )
        for variant in variants:
            if inventory.exists(variant):
                return [inventory.filename(variant)]
        return []

    @staticmethod
    def _per_word(words: list[str], inventory: AudioSegmentInventory) -> list[str]:
        return [inventory.filename(word) for word in words if inventory.exists(word)]

    @staticmethod
    def _fuzzy(words: list[str], inventory: AudioSegmentInventory) -> list[str]:
        ranked = sorted(words, key=word_rank)
        stems = inventory.stems()
        for word in ranked:
            for stem in stems:
                candidate = stem.lower()
                if candidate == word or (len(word) >= MIN_FUZZY_WORD_LENGTH and word in candidate):
                    return [inventory.filename(stem)]
        return []

    @staticmethod
    def _defaults(inventory: AudioSegmentInventory) -> list[str]:
        for stem in DEFAULT_SEGMENTS:
            if inventory.exists(stem):
                return [inventory.filename(stem)]
        return []
