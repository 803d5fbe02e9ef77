"""Pixel ground truth loading and visualization saving using Pillow."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image

from lineeval.scoring import RasterMask

logger = logging.getLogger(__name__)


def load_raster_mask(path: Path) -> RasterMask:
    """Load a pixel-level ground truth image as a RasterMask.

    Args:
        path: Image file (PNG, GIF, ...) in DIVA-HisDB encoding

    Returns:
        RasterMask with the image's boundary and background flags

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    with Image.open(path) as image:
        rgb = np.asarray(image.convert("RGB"))

    mask = RasterMask.from_rgb(rgb)
    logger.debug("loaded pixel ground truth %s (%dx%d)", path, mask.width, mask.height)
    return mask


def image_size(path: Path) -> tuple[int, int]:
    """Return (width, height) of an image without decoding it."""
    with Image.open(path) as image:
        return image.size


def save_visualization(visualization: np.ndarray, path: Path) -> None:
    """Write an RGB visualization array to an image file."""
    Image.fromarray(visualization.astype(np.uint8)).save(path)
    logger.info("Writing evaluation image in %s", path)
