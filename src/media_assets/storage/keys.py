"""Storage key derivation.

Clients name uploads ``<name>-<id1>-<id2>``; the trailing id pair is dropped
and replaced by a date-based suffix (``YYYYMMDD`` + six random digits) to
form the storage key. No collision check is made: two uploads of the same
name that draw the same suffix on the same day overwrite each other.
"""

from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Callable, Optional
from urllib.parse import unquote, urlsplit

from media_assets.exceptions import ValidationError

SUFFIX_SEGMENTS = 2
RANDOM_MIN = 100_000
RANDOM_MAX = 999_999


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def has_unique_suffix(filename: str) -> bool:
    parts = filename.split("-")
    return len(parts) > SUFFIX_SEGMENTS and bool("-".join(parts[:-SUFFIX_SEGMENTS]))


def key_from_url(url: str) -> str:
    """Storage key addressed by a record's ``fileUrl`` (its last path segment)."""
    path = urlsplit(url).path or url
    return unquote(path.rstrip("/").rsplit("/", 1)[-1])


class KeyGenerator:
    """Derives display names and storage keys from upload filenames.

    One instance lives for the whole process; the clock and random source are
    injectable so tests can pin the suffix.
    """

    def __init__(
        self,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None,
        strict: bool = False,
    ):
        self._clock = clock or _utcnow
        self._rng = rng or random.SystemRandom()
        self.strict = strict

    def check(self, filename: str) -> None:
        """Reject names without the id-pair suffix when running strict."""
        if self.strict and not has_unique_suffix(filename):
            raise ValidationError(
                f"Filename '{filename}' must end with two hyphen-separated id segments"
            )

    def display_name(self, filename: str) -> str:
        if not has_unique_suffix(filename):
            self.check(filename)
            return filename
        return "-".join(filename.split("-")[:-SUFFIX_SEGMENTS])

    def suffix(self) -> str:
        return f"{self._clock():%Y%m%d}{self._rng.randint(RANDOM_MIN, RANDOM_MAX)}"

    def key_for(self, filename: str) -> str:
        return f"{self.display_name(filename)}-{self.suffix()}"
