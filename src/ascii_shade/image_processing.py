"""Pad images to power-of-two canvases, cut them into tiles, measure brightness."""

import logging

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

# -----------------------------
# Constants
# -----------------------------
RED_WEIGHT = 0.2126
GREEN_WEIGHT = 0.7152
BLUE_WEIGHT = 0.0722
LUMA_WEIGHTS = np.array([RED_WEIGHT, GREEN_WEIGHT, BLUE_WEIGHT], dtype=np.float64)

MAX_RGB = 255
BACKGROUND = (255, 255, 255)


class InvalidResolutionError(ValueError):
    """Resolution cannot split the padded canvas into square tiles."""


# -----------------------------
# Loading
# -----------------------------
def to_rgb_array(image) -> np.ndarray:
    """
    Accept a PIL image, an HxW greyscale array or an HxWx3 array and
    return an HxWx3 uint8 array.
    """
    if isinstance(image, Image.Image):
        return np.asarray(image.convert("RGB"), dtype=np.uint8)

    arr = np.asarray(image)
    if arr.ndim == 2:
        arr = np.stack([arr, arr, arr], axis=-1)
    if arr.ndim != 3 or arr.shape[2] < 3:
        raise ValueError(f"expected an HxWx3 RGB array, got shape {arr.shape}")
    return arr[:, :, :3].astype(np.uint8, copy=False)


def load_image(path: str) -> np.ndarray:
    """Decode an image file into an RGB array. Pillow errors propagate."""
    with Image.open(path) as img:
        arr = to_rgb_array(img)
    logger.debug("Loaded %s (%dx%d)", path, arr.shape[1], arr.shape[0])
    return arr


# -----------------------------
# Padding
# -----------------------------
def next_power_of_two(n: int) -> int:
    p = 1
    while p < n:
        p *= 2
    return p


def pad_image(image, background=BACKGROUND) -> np.ndarray:
    """
    Center the image on the smallest power-of-two canvas that holds it.

    Margins are filled with `background`. When the leftover is odd the extra
    pixel goes to the bottom/right. The returned canvas is read-only.
    """
    src = to_rgb_array(image)
    h, w = src.shape[:2]
    padded_h = next_power_of_two(h)
    padded_w = next_power_of_two(w)

    canvas = np.empty((padded_h, padded_w, 3), dtype=np.uint8)
    canvas[:, :] = background

    top = (padded_h - h) // 2
    left = (padded_w - w) // 2
    canvas[top : top + h, left : left + w] = src

    canvas.setflags(write=False)
    logger.debug("Padded %dx%d -> %dx%d", w, h, padded_w, padded_h)
    return canvas


# -----------------------------
# Tiling
# -----------------------------
def validate_resolution(canvas_width: int, resolution) -> int:
    """Return the tile side for `resolution`, or raise InvalidResolutionError."""
    if isinstance(resolution, bool) or not isinstance(resolution, (int, np.integer)):
        raise InvalidResolutionError(f"resolution must be an integer, got {resolution!r}")
    if resolution <= 0:
        raise InvalidResolutionError(f"resolution must be positive, got {resolution}")
    if canvas_width % resolution != 0:
        raise InvalidResolutionError(
            f"resolution {resolution} does not divide padded width {canvas_width}"
        )
    side = canvas_width // resolution
    if side == 0:
        raise InvalidResolutionError(f"resolution {resolution} gives empty tiles")
    return side


def tile_layout(padded_h: int, padded_w: int, resolution) -> tuple[int, int]:
    """Return (side, rows) for tiling a padded canvas at `resolution`."""
    side = validate_resolution(padded_w, resolution)
    rows = padded_h // side
    if rows == 0:
        raise InvalidResolutionError(
            f"tile side {side} is taller than padded height {padded_h}"
        )
    return side, rows


def check_image_resolution(image, resolution) -> None:
    """Raise InvalidResolutionError if the padded `image` cannot be tiled."""
    h, w = to_rgb_array(image).shape[:2]
    tile_layout(next_power_of_two(h), next_power_of_two(w), resolution)


def tile_image(canvas: np.ndarray, resolution: int) -> list[list[np.ndarray]]:
    """
    Split a padded canvas into `rows x resolution` square tiles.

    Tile (i, j) starts at pixel (i*side, j*side). Tiles are views into the
    canvas, so they share its read-only flag.
    """
    padded_h, padded_w = canvas.shape[:2]
    side, rows = tile_layout(padded_h, padded_w, resolution)

    grid = []
    for i in range(rows):
        y0 = i * side
        grid.append(
            [canvas[y0 : y0 + side, j * side : (j + 1) * side] for j in range(resolution)]
        )
    return grid


# -----------------------------
# Brightness
# -----------------------------
def sample_brightness(sub_image: np.ndarray) -> float:
    """Mean perceptual luma of the tile, normalized to [0, 1]."""
    pixels = np.asarray(sub_image, dtype=np.float64).reshape(-1, 3)
    if pixels.shape[0] == 0:
        raise ValueError("cannot sample brightness of an empty image")
    total = float(np.sum(pixels @ LUMA_WEIGHTS))
    value = total / (pixels.shape[0] * MAX_RGB)
    return min(1.0, max(0.0, value))


def brightness_matrix(canvas: np.ndarray, resolution: int) -> np.ndarray:
    tiles = tile_image(canvas, resolution)
    out = np.empty((len(tiles), resolution), dtype=np.float64)
    for i, row in enumerate(tiles):
        for j, tile in enumerate(row):
            out[i, j] = sample_brightness(tile)
    return out
