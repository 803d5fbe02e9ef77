"""Diagnostic image of the accepted pairs' pixel classification."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from lineeval.geometry import Polygon, Rect
from lineeval.scoring import PairScore, PixelClass, RasterMask, classify_pair

BOUNDARY_COLOR = (128, 128, 128)
MATCHING_COLOR = (0, 255, 0)
MISSED_COLOR = (255, 0, 0)
FALSE_COLOR = (0, 0, 255)

_PALETTE = {
    PixelClass.BOUNDARY: BOUNDARY_COLOR,
    PixelClass.MATCHING: MATCHING_COLOR,
    PixelClass.MISSED: MISSED_COLOR,
    PixelClass.FALSE: FALSE_COLOR,
}


def render_visualization(
    pair_scores: Iterable[PairScore],
    ground_truth: Sequence[Polygon],
    method_output: Sequence[Polygon],
    size: tuple[int, int],
    mask: RasterMask | None = None,
    main_text_area: Rect | None = None,
) -> np.ndarray:
    """Paint the classification of every accepted pair.

    Starts from a black image. Within the bounding box of each accepted pair,
    boundary pixels are painted grey, matching pixels green, missed pixels red
    and false pixels blue. Everything else is left untouched.

    Args:
        pair_scores: Scored pairs (rejected ones are skipped)
        ground_truth: Ground truth polygons the scores refer to
        method_output: Method output polygons the scores refer to
        size: (width, height) of the ground truth image
        mask: Pixel ground truth used during scoring
        main_text_area: Main text area used during scoring

    Returns:
        (height, width, 3) uint8 RGB array
    """
    width, height = size
    canvas = np.zeros((height, width, 3), dtype=np.uint8)
    page = Rect(0, 0, width, height)

    for score in pair_scores:
        if not score.accepted:
            continue

        window, labels = classify_pair(
            method_output[score.mo_index],
            ground_truth[score.gt_index],
            mask,
            main_text_area,
        )

        # Polygons may stick out of the page when no mask bounds them
        visible = window.intersection(page)
        if visible.is_empty:
            continue
        labels = labels[
            visible.y - window.y : visible.y1 - window.y,
            visible.x - window.x : visible.x1 - window.x,
        ]
        region = canvas[visible.y : visible.y1, visible.x : visible.x1]

        for pixel_class, color in _PALETTE.items():
            region[labels == pixel_class] = color

    return canvas
