"""Pixel-level scoring of matched polygon pairs.

For each matched pair every pixel of the union of the two bounding boxes is
classified as matching (in both polygons), missed (ground truth only) or
false (method output only). Pixels flagged as boundary or background in the
pixel ground truth, and pixels outside the main text area, are not scored.

A pair is accepted as a correctly segmented line only if its pixel IoU is
strictly above the threshold. Rejected pairs count for nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum

import numpy as np

from lineeval.exceptions import MaskOutOfRangeError
from lineeval.geometry import Polygon, Rect, contains_points, union_box

logger = logging.getLogger(__name__)

# Pixel ground truth encoding (DIVA-HisDB): red bit 7 marks boundaries,
# blue bit 0 marks background
BOUNDARY_BIT = 0x80
BACKGROUND_BIT = 0x01


class PixelClass(IntEnum):
    """Per-pixel classification label."""

    OUTSIDE = 0  # in neither polygon
    MATCHING = 1
    MISSED = 2
    FALSE = 3
    BOUNDARY = 4
    IGNORED = 5  # background or outside the main text area


@dataclass
class RasterMask:
    """Per-pixel boundary / background flags of the pixel ground truth.

    Both arrays are boolean and indexed ``[y, x]``.
    """

    boundary: np.ndarray
    background: np.ndarray

    def __post_init__(self):
        if self.boundary.shape != self.background.shape:
            raise ValueError(
                f"boundary and background shapes differ: "
                f"{self.boundary.shape} != {self.background.shape}"
            )

    @classmethod
    def from_rgb(cls, rgb: np.ndarray) -> RasterMask:
        """Decode an (height, width, 3) uint8 RGB array."""
        rgb = np.asarray(rgb)
        return cls(
            boundary=(rgb[..., 0] & BOUNDARY_BIT) != 0,
            background=(rgb[..., 2] & BACKGROUND_BIT) != 0,
        )

    @property
    def width(self) -> int:
        return self.boundary.shape[1]

    @property
    def height(self) -> int:
        return self.boundary.shape[0]

    def covers(self, rect: Rect) -> bool:
        """True if every pixel of `rect` lies on the mask."""
        if rect.is_empty:
            return True
        return rect.x >= 0 and rect.y >= 0 and rect.x1 <= self.width and rect.y1 <= self.height

    def window(self, rect: Rect) -> tuple[np.ndarray, np.ndarray]:
        """Boundary and background flags for the pixels of `rect`.

        Raises:
            MaskOutOfRangeError: If the mask doesn't cover `rect`
        """
        if not self.covers(rect):
            raise MaskOutOfRangeError(
                f"pixel ground truth of size {self.width}x{self.height} does not cover "
                f"region x=[{rect.x}, {rect.x1}) y=[{rect.y}, {rect.y1})"
            )
        rows = slice(rect.y, rect.y1)
        cols = slice(rect.x, rect.x1)
        return self.boundary[rows, cols], self.background[rows, cols]


@dataclass
class ConfusionCounts:
    """Pixel counts for one pair, or summed over several pairs."""

    matching: int = 0
    missed: int = 0
    false: int = 0
    output: int = 0  # pixels in the method output polygon
    truth: int = 0  # pixels in the ground truth polygon

    @property
    def union(self) -> int:
        """Pixels in either polygon."""
        return self.matching + self.missed + self.false

    @property
    def iou(self) -> float:
        """Intersection over union, 0.0 if both polygons are empty."""
        if self.union == 0:
            return 0.0
        return self.matching / self.union

    def __add__(self, other: ConfusionCounts) -> ConfusionCounts:
        return ConfusionCounts(
            matching=self.matching + other.matching,
            missed=self.missed + other.missed,
            false=self.false + other.false,
            output=self.output + other.output,
            truth=self.truth + other.truth,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "matching": self.matching,
            "missed": self.missed,
            "false": self.false,
            "output": self.output,
            "truth": self.truth,
        }


@dataclass
class PairScore:
    """Scoring outcome of one matched pair."""

    mo_index: int
    gt_index: int
    counts: ConfusionCounts
    accepted: bool

    @property
    def iou(self) -> float:
        return self.counts.iou


def classify_pair(
    pmo: Polygon,
    pgt: Polygon,
    mask: RasterMask | None = None,
    main_text_area: Rect | None = None,
) -> tuple[Rect, np.ndarray]:
    """Label every pixel of the pair's union bounding box.

    Args:
        pmo: Method output polygon
        pgt: Ground truth polygon
        mask: Optional pixel ground truth flags
        main_text_area: Optional region outside which pixels are ignored

    Returns:
        Tuple of (window, labels) where labels is a uint8 array of
        `PixelClass` values indexed ``[y - window.y, x - window.x]``

    Raises:
        MaskOutOfRangeError: If a mask is given and doesn't cover the window
    """
    window = union_box(pmo, pgt)
    xs, ys = window.grid()

    in_mo = contains_points(pmo, xs, ys)
    in_gt = contains_points(pgt, xs, ys)

    labels = np.full(xs.shape, PixelClass.OUTSIDE, dtype=np.uint8)
    labels[in_mo & in_gt] = PixelClass.MATCHING
    labels[~in_mo & in_gt] = PixelClass.MISSED
    labels[in_mo & ~in_gt] = PixelClass.FALSE

    if main_text_area is not None:
        labels[~main_text_area.contains_points(xs, ys)] = PixelClass.IGNORED

    if mask is not None:
        boundary, background = mask.window(window)
        labels[background] = PixelClass.IGNORED
        labels[boundary] = PixelClass.BOUNDARY

    return window, labels


def count_pixels(labels: np.ndarray) -> ConfusionCounts:
    """Confusion counts of a label array from `classify_pair`."""
    matching = int(np.count_nonzero(labels == PixelClass.MATCHING))
    missed = int(np.count_nonzero(labels == PixelClass.MISSED))
    false = int(np.count_nonzero(labels == PixelClass.FALSE))
    return ConfusionCounts(
        matching=matching,
        missed=missed,
        false=false,
        output=matching + false,
        truth=matching + missed,
    )


def score_pair(
    mo_index: int,
    gt_index: int,
    pmo: Polygon,
    pgt: Polygon,
    threshold: float,
    mask: RasterMask | None = None,
    main_text_area: Rect | None = None,
) -> PairScore:
    """Classify the pair's pixels and decide whether it is accepted."""
    _, labels = classify_pair(pmo, pgt, mask, main_text_area)
    counts = count_pixels(labels)
    accepted = counts.iou > threshold

    if accepted:
        logger.debug("pair mo=%d gt=%d accepted, IoU = %.4f", mo_index, gt_index, counts.iou)
    else:
        logger.debug(
            "pair mo=%d gt=%d skipped, IoU below threshold: %.4f",
            mo_index,
            gt_index,
            counts.iou,
        )
    return PairScore(mo_index=mo_index, gt_index=gt_index, counts=counts, accepted=accepted)


def score_pairs(
    matching: Sequence[tuple[int, int]],
    ground_truth: Sequence[Polygon],
    method_output: Sequence[Polygon],
    threshold: float,
    mask: RasterMask | None = None,
    main_text_area: Rect | None = None,
) -> list[PairScore]:
    """Score every (mo_index, gt_index) pair of a matching."""
    return [
        score_pair(
            mo_index,
            gt_index,
            method_output[mo_index],
            ground_truth[gt_index],
            threshold,
            mask,
            main_text_area,
        )
        for mo_index, gt_index in matching
    ]
