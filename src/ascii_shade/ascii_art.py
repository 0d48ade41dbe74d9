"""Run the image -> brightness -> character pipeline with reusable caches."""

import logging
from typing import Iterable

import numpy as np

from .char_matcher import GlyphBrightnessCache, SubImgCharMatcher
from .image_processing import brightness_matrix, check_image_resolution, pad_image

logger = logging.getLogger(__name__)


class ConversionCache:
    """
    State carried between conversions.

    Holds the glyph brightness memo, the brightness matrix of the last
    image/resolution pair, and the matcher built for the last charset.
    Not safe for concurrent use; give each thread its own instance.
    """

    def __init__(self, glyph_cache: GlyphBrightnessCache | None = None):
        self.glyphs = glyph_cache if glyph_cache is not None else GlyphBrightnessCache()
        self.image = None
        self.resolution: int | None = None
        self.brightness: np.ndarray | None = None
        self.charset: frozenset | None = None
        self.matcher: SubImgCharMatcher | None = None

    def clear(self) -> None:
        """Forget the image and charset entries. The glyph memo is kept."""
        self.image = None
        self.resolution = None
        self.brightness = None
        self.charset = None
        self.matcher = None

    def brightness_for(self, image, resolution: int) -> np.ndarray:
        if (
            self.brightness is not None
            and self.image is image
            and self.resolution == resolution
        ):
            logger.debug("Brightness cache hit (resolution=%d)", resolution)
            return self.brightness

        logger.debug("Brightness cache miss (resolution=%s)", resolution)
        matrix = brightness_matrix(pad_image(image), resolution)
        self.image = image
        self.resolution = resolution
        self.brightness = matrix
        return matrix

    def matcher_for(self, charset: Iterable[str]) -> SubImgCharMatcher:
        """
        Return a matcher for `charset`, reusing the previous one when possible.

        A changed charset is applied to the cached matcher as adds and
        removes so its index is patched rather than rebuilt.
        """
        key = frozenset(charset)
        if self.matcher is not None and self.charset == key:
            logger.debug("Matcher cache hit (%d chars)", len(key))
            return self.matcher

        if self.matcher is not None and key:
            added = key - self.charset
            removed = self.charset - key
            logger.debug("Updating matcher (+%d -%d chars)", len(added), len(removed))
            # Add before removing so the matcher never runs empty.
            try:
                for c in sorted(added):
                    self.matcher.add_char(c)
                for c in sorted(removed):
                    self.matcher.remove_char(c)
            except Exception:
                self.charset = None
                self.matcher = None
                raise
            self.charset = key
            return self.matcher

        logger.debug("Building matcher for %d chars", len(key))
        matcher = SubImgCharMatcher(key, glyph_cache=self.glyphs)
        self.charset = key
        self.matcher = matcher
        return matcher


class AsciiArtAlgorithm:
    def __init__(
        self,
        image,
        charset: Iterable[str],
        resolution: int,
        reverse: bool = False,
        cache: ConversionCache | None = None,
    ):
        self.image = image
        self.charset = frozenset(charset)
        self.resolution = resolution
        self.reverse = reverse
        self.cache = cache if cache is not None else ConversionCache()

    def run(self) -> list[list[str]]:
        """Return the character grid, row-major, one character per tile."""
        logger.info(
            "Converting image (resolution=%s chars=%d reversed=%s)",
            self.resolution,
            len(self.charset),
            self.reverse,
        )
        # Fail on a bad image or resolution before either cache is touched.
        check_image_resolution(self.image, self.resolution)
        matcher = self.cache.matcher_for(self.charset)
        matrix = self.cache.brightness_for(self.image, self.resolution)

        pick = matcher.get_char_by_image_brightness
        if self.reverse:
            return [[pick(1.0 - float(b)) for b in row] for row in matrix]
        return [[pick(float(b)) for b in row] for row in matrix]


def convert_image(
    image,
    charset: Iterable[str],
    resolution: int,
    reverse: bool = False,
    cache: ConversionCache | None = None,
) -> list[list[str]]:
    return AsciiArtAlgorithm(image, charset, resolution, reverse=reverse, cache=cache).run()


def grid_to_lines(grid) -> list[str]:
    return ["".join(row) for row in grid]
