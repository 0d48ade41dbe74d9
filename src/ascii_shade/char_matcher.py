"""Match image brightness values to characters of similar visual density."""

import bisect
import logging
import math
from typing import Callable, Iterable

import numpy as np

from .glyphs import GLYPH_SIZE, glyph_coverage

logger = logging.getLogger(__name__)

PIXELS_IN_GLYPH = GLYPH_SIZE * GLYPH_SIZE


class InvalidCharsetError(ValueError):
    """A matcher was created without any characters."""


class EmptyMatcherError(LookupError):
    """A brightness was queried against a matcher holding no characters."""


# -----------------------------
# Glyph brightness memo
# -----------------------------
class GlyphBrightnessCache:
    """
    Memoizes the raw brightness of each character: the fraction of "on"
    cells in its glyph bitmap. Entries are never invalidated.
    """

    def __init__(self, coverage: Callable[[str], np.ndarray] | None = None):
        self._coverage = coverage or glyph_coverage
        self._values: dict[str, float] = {}

    def brightness(self, char: str) -> float:
        value = self._values.get(char)
        if value is None:
            cells = np.asarray(self._coverage(char), dtype=bool)
            value = int(np.count_nonzero(cells)) / PIXELS_IN_GLYPH
            self._values[char] = value
        return value

    def __contains__(self, char) -> bool:
        return char in self._values

    def __len__(self) -> int:
        return len(self._values)


# -----------------------------
# Matcher
# -----------------------------
class SubImgCharMatcher:
    """
    Holds a mutable character set indexed by normalized brightness.

    Raw brightness is rescaled so the darkest character present maps to 0
    and the brightest to 1. Adding or removing a character that does not
    move the current min/max patches the index in place; otherwise the
    whole index is rebuilt.
    """

    def __init__(self, charset: Iterable[str], glyph_cache: GlyphBrightnessCache | None = None):
        self._glyphs = glyph_cache if glyph_cache is not None else GlyphBrightnessCache()
        self._raw: dict[str, float] = {}
        self._keys: list[float] = []
        self._buckets: dict[float, list[str]] = {}
        self._min = math.inf
        self._max = -math.inf

        for c in charset:
            raw = self._glyphs.brightness(c)
            self._min = min(self._min, raw)
            self._max = max(self._max, raw)
            self._raw[c] = raw

        if not self._raw:
            raise InvalidCharsetError("cannot build a matcher from an empty charset")

        self._rebuild_index()

    # -- snapshot ---------------------------------------------------------

    @property
    def charset(self) -> frozenset:
        return frozenset(self._raw)

    def __len__(self) -> int:
        return len(self._raw)

    def __contains__(self, char) -> bool:
        return char in self._raw

    # -- mutation ---------------------------------------------------------

    def add_char(self, c: str) -> None:
        if c in self._raw:
            return

        raw = self._glyphs.brightness(c)
        self._raw[c] = raw

        if raw > self._max or raw < self._min:
            self._max = max(self._max, raw)
            self._min = min(self._min, raw)
            logger.debug("add %r moved range to [%s, %s]; rebuilding", c, self._min, self._max)
            self._rebuild_index()
            return

        self._insert(self._normalize(raw), c)

    def remove_char(self, c: str) -> None:
        raw = self._raw.get(c)
        if raw is None:
            return

        if self._min < raw < self._max:
            del self._raw[c]
            self._discard(self._normalize(raw), c)
            return

        del self._raw[c]
        if not self._raw:
            self._keys.clear()
            self._buckets.clear()
            self._min = math.inf
            self._max = -math.inf
            return

        self._min = min(self._raw.values())
        self._max = max(self._raw.values())
        logger.debug("remove %r moved range to [%s, %s]; rebuilding", c, self._min, self._max)
        self._rebuild_index()

    # -- lookup -----------------------------------------------------------

    def get_char_by_image_brightness(self, brightness: float) -> str:
        """
        Return the character whose normalized brightness is closest.

        Equidistant neighbours resolve to the darker one; characters that
        share a brightness resolve to the smallest code point.
        """
        keys = self._keys
        if not keys:
            raise EmptyMatcherError("matcher has no characters")

        i = bisect.bisect_left(keys, brightness)
        if i < len(keys) and keys[i] == brightness:
            return self._buckets[keys[i]][0]
        if i == 0:
            return self._buckets[keys[0]][0]
        if i == len(keys):
            return self._buckets[keys[-1]][0]

        lo, hi = keys[i - 1], keys[i]
        if (brightness - lo) <= (hi - brightness):
            return self._buckets[lo][0]
        return self._buckets[hi][0]

    # -- index maintenance ------------------------------------------------

    def _normalize(self, raw: float) -> float:
        if self._max == self._min:
            return 0.0
        return (raw - self._min) / (self._max - self._min)

    def _insert(self, key: float, c: str) -> None:
        bucket = self._buckets.get(key)
        if bucket is None:
            bisect.insort(self._keys, key)
            self._buckets[key] = [c]
        else:
            bisect.insort(bucket, c)

    def _discard(self, key: float, c: str) -> None:
        bucket = self._buckets[key]
        bucket.remove(c)
        if not bucket:
            del self._buckets[key]
            self._keys.pop(bisect.bisect_left(self._keys, key))

    def _rebuild_index(self) -> None:
        buckets: dict[float, list[str]] = {}
        for c, raw in self._raw.items():
            buckets.setdefault(self._normalize(raw), []).append(c)
        for bucket in buckets.values():
            bucket.sort()
        self._buckets = buckets
        self._keys = sorted(buckets)
