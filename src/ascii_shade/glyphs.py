"""Render single characters into fixed-size coverage bitmaps."""

import functools
import logging
import os
import platform

import numpy as np
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

GLYPH_SIZE = 16
INK_THRESHOLD = 127


def find_default_mono_font():
    system = platform.system().lower()

    candidates = []
    if "darwin" in system:  # macOS
        candidates = [
            "/System/Library/Fonts/Menlo.ttc",
            "/System/Library/Fonts/Monaco.ttf",
            "/Library/Fonts/Courier New.ttf",
            "/System/Library/Fonts/Supplemental/Courier New.ttf",
        ]
    elif "windows" in system:
        windir = os.environ.get("WINDIR", r"C:\Windows")
        candidates = [
            os.path.join(windir, "Fonts", "cour.ttf"),
            os.path.join(windir, "Fonts", "CONSOLA.TTF"),
            os.path.join(windir, "Fonts", "LUCON.TTF"),
        ]
    else:  # Linux and others
        candidates = [
            "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
            "/usr/share/fonts/truetype/noto/NotoSansMono-Regular.ttf",
            "/usr/share/fonts/truetype/ubuntu/UbuntuMono-R.ttf",
        ]

    for p in candidates:
        if os.path.exists(p):
            return p
    return None


@functools.lru_cache(maxsize=8)
def load_font(font_path: str | None, size: int = GLYPH_SIZE):
    """Load a TrueType font, falling back to Pillow's default font."""
    if not font_path:
        font_path = find_default_mono_font()

    if font_path:
        logger.debug("Loading glyph font %s (size=%d)", font_path, size)
        return ImageFont.truetype(font_path, size)

    logger.debug("Using PIL default font for glyphs")
    return ImageFont.load_default()


def glyph_coverage(char: str, font_path: str | None = None) -> np.ndarray:
    """
    Return a GLYPH_SIZE x GLYPH_SIZE boolean grid, True where the glyph has ink.

    The character is drawn white on black and centered by its text bbox.
    """
    if not isinstance(char, str) or len(char) != 1:
        raise ValueError(f"expected a single character, got {char!r}")

    font = load_font(font_path, GLYPH_SIZE)
    img = Image.new("L", (GLYPH_SIZE, GLYPH_SIZE), color=0)
    draw = ImageDraw.Draw(img)

    left, top, right, bottom = draw.textbbox((0, 0), char, font=font)
    x = (GLYPH_SIZE - (right - left)) // 2 - left
    y = (GLYPH_SIZE - (bottom - top)) // 2 - top
    draw.text((x, y), char, fill=255, font=font)

    return np.asarray(img) > INK_THRESHOLD
