"""Shared fixtures: font-independent glyph coverage and small test images."""

import numpy as np
import pytest
from PIL import Image

from ascii_shade.char_matcher import GlyphBrightnessCache
from ascii_shade.glyphs import GLYPH_SIZE


def coverage_with(on_cells: int) -> np.ndarray:
    cells = np.zeros(GLYPH_SIZE * GLYPH_SIZE, dtype=bool)
    cells[:on_cells] = True
    return cells.reshape(GLYPH_SIZE, GLYPH_SIZE)


def printable_count(ch: str) -> int:
    """Deterministic stand-in ink count for any printable character."""
    if ch == " ":
        return 0
    return min(256, (ord(ch) * 7) % 257)


@pytest.fixture
def fake_coverage():
    """Build a coverage function from a {char: on_cell_count} table."""

    def make(counts):
        def coverage(ch):
            return coverage_with(counts[ch])

        return coverage

    return make


@pytest.fixture
def glyph_cache():
    """Glyph cache covering every printable ASCII character."""
    return GlyphBrightnessCache(lambda ch: coverage_with(printable_count(ch)))


@pytest.fixture
def gradient_png(tmp_path):
    """8x4 horizontal gradient saved as PNG."""
    row = np.linspace(0, 255, 8).astype(np.uint8)
    arr = np.repeat(np.tile(row, (4, 1))[:, :, None], 3, axis=2)
    path = tmp_path / "gradient.png"
    Image.fromarray(arr).save(path)
    return path
