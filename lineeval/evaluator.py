"""
Line segmentation evaluation orchestrator.

This module provides the main `evaluate()` function that scores one page by
wiring together:
- build_candidates / greedy_match (polygon correspondence)
- score_pairs (pixel classification and threshold acceptance)
- compute_results (line and pixel metrics)
- render_visualization (optional diagnostic image)

`evaluate()` keeps no state between calls; everything it produces, the
visualization included, is returned in the EvaluationResult.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from lineeval.config import EvaluationConfig
from lineeval.geometry import Polygon, Rect
from lineeval.matching import match_polygons
from lineeval.metrics import Results, compute_results
from lineeval.scoring import PairScore, RasterMask, score_pairs
from lineeval.visualize import render_visualization

logger = logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    """Everything produced by one evaluation."""

    results: Results
    pair_scores: list[PairScore] = field(default_factory=list)
    visualization: np.ndarray | None = None

    @property
    def matching(self) -> list[tuple[int, int]]:
        """All matched (mo_index, gt_index) pairs, accepted or not."""
        return [(s.mo_index, s.gt_index) for s in self.pair_scores]

    @property
    def accepted_pairs(self) -> list[PairScore]:
        """Pairs whose IoU passed the threshold."""
        return [s for s in self.pair_scores if s.accepted]


def evaluate(
    ground_truth: Sequence[Polygon],
    method_output: Sequence[Polygon],
    mask: RasterMask | None = None,
    main_text_area: Rect | None = None,
    config: EvaluationConfig | None = None,
    image_size: tuple[int, int] | None = None,
) -> EvaluationResult:
    """
    Evaluate method output line polygons against ground truth.

    Args:
        ground_truth: Ground truth line polygons
        method_output: Line polygons produced by the evaluated method
        mask: Optional pixel ground truth; boundary and background pixels
            are not scored
        main_text_area: Optional rectangle; pixels outside are not scored
        config: Evaluation options (defaults if None)
        image_size: (width, height) of the visualization when no mask is
            given; defaults to the extent of all polygons

    Returns:
        EvaluationResult with the metrics, the pair scores and, if
        config.render_visualization is set, the visualization image

    Raises:
        MaskOutOfRangeError: If the mask doesn't cover a matched pair

    Example:
        >>> from lineeval import MetricId
        >>> truth = [Polygon.from_rect(0, 0, 10, 10)]
        >>> output = [Polygon.from_rect(5, 5, 15, 15)]
        >>> result = evaluate(truth, output, config=EvaluationConfig(threshold=0.1))
        >>> result.results[MetricId.PRECISION]
        0.25
    """
    if config is None:
        config = EvaluationConfig()

    logger.debug(
        "evaluating %d proposed lines against %d truth lines",
        len(method_output),
        len(ground_truth),
    )

    matching = match_polygons(ground_truth, method_output, config.weighting, config.strategy)
    logger.debug("matching.size %d", len(matching))

    pair_scores = score_pairs(
        matching,
        ground_truth,
        method_output,
        config.threshold,
        mask,
        main_text_area,
    )
    results = compute_results(pair_scores, len(ground_truth), len(method_output))

    visualization = None
    if config.render_visualization:
        size = _visualization_size(ground_truth, method_output, mask, image_size)
        visualization = render_visualization(
            pair_scores, ground_truth, method_output, size, mask, main_text_area
        )

    return EvaluationResult(
        results=results,
        pair_scores=pair_scores,
        visualization=visualization,
    )


def _visualization_size(
    ground_truth: Sequence[Polygon],
    method_output: Sequence[Polygon],
    mask: RasterMask | None,
    image_size: tuple[int, int] | None,
) -> tuple[int, int]:
    """Pick the (width, height) of the visualization image."""
    if mask is not None:
        return mask.width, mask.height
    if image_size is not None:
        return image_size

    width = height = 0
    for polygon in (*ground_truth, *method_output):
        width = max(width, polygon.bounds.x1)
        height = max(height, polygon.bounds.y1)
    return width, height
