"""Match method-output line polygons to ground truth line polygons.

This module provides:
1. Candidate - A possible (ground truth, method output) correspondence
2. build_candidates() - Weighted candidates for all overlapping pairs
3. greedy_match() - Largest-overlap-first injective matching
4. optimal_match() - Maximum-weight assignment (scipy)
5. match_polygons() - Candidates + matching in one call

Polygons are referred to by their index in the input sequences.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

import numpy as np
from scipy.optimize import linear_sum_assignment

from lineeval.geometry import Polygon, contains_points, intersection_area, intersects

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """A possible correspondence between two overlapping polygons."""

    gt_index: int
    mo_index: int
    weight: int  # Overlap size in pixels


def build_candidates(
    ground_truth: Sequence[Polygon],
    method_output: Sequence[Polygon],
    weighting: Literal["bbox", "polygon"] = "bbox",
) -> list[Candidate]:
    """Find every pair of polygons whose bounding boxes intersect.

    Args:
        ground_truth: Ground truth polygons
        method_output: Method output polygons
        weighting: "bbox" weighs a pair by the pixels shared by the two
            bounding rectangles; "polygon" by the pixels shared by the two
            polygons themselves

    Returns:
        Candidates ordered by ground truth index, then method output index.
        This order decides ties in `greedy_match`.
    """
    candidates: list[Candidate] = []

    for gt_index, pgt in enumerate(ground_truth):
        for mo_index, pmo in enumerate(method_output):
            if not intersects(pgt.bounds, pmo.bounds):
                continue

            if weighting == "polygon":
                weight = _polygon_overlap(pgt, pmo)
            else:
                weight = intersection_area(pgt.bounds, pmo.bounds)

            candidates.append(Candidate(gt_index, mo_index, weight))
            logger.debug("candidate gt=%d mo=%d weight=%d", gt_index, mo_index, weight)

    logger.debug("%d matching candidates", len(candidates))
    return candidates


def _polygon_overlap(a: Polygon, b: Polygon) -> int:
    """Count pixels inside both polygons."""
    xs, ys = a.bounds.intersection(b.bounds).grid()
    return int(np.count_nonzero(contains_points(a, xs, ys) & contains_points(b, xs, ys)))


def greedy_match(candidates: Sequence[Candidate]) -> list[tuple[int, int]]:
    """Resolve candidates into a one-to-one matching, biggest overlap first.

    Repeatedly commits the heaviest candidate whose polygons are both still
    free. Among equal weights the candidate that comes first wins, so
    reordering the candidates can change the result. Zero-weight candidates
    are never matched. This approximates a maximum-weight matching; it is not
    guaranteed to be optimal.

    Args:
        candidates: Output of `build_candidates`

    Returns:
        List of (mo_index, gt_index) pairs in the order they were committed
    """
    matched_gt: set[int] = set()
    matched_mo: set[int] = set()
    matching: list[tuple[int, int]] = []

    # Stable sort: walking it once is the same as rescanning for the maximum
    for cand in sorted(candidates, key=lambda c: -c.weight):
        if cand.weight <= 0:
            break
        if cand.gt_index in matched_gt or cand.mo_index in matched_mo:
            continue

        matched_gt.add(cand.gt_index)
        matched_mo.add(cand.mo_index)
        matching.append((cand.mo_index, cand.gt_index))
        logger.debug("match mo=%d gt=%d (%d px)", cand.mo_index, cand.gt_index, cand.weight)

    logger.debug("found %d matches", len(matching))
    return matching


def optimal_match(candidates: Sequence[Candidate]) -> list[tuple[int, int]]:
    """Resolve candidates into a maximum-total-weight one-to-one matching.

    Same contract as `greedy_match` (candidates in, injective matching out)
    but solved exactly with the Hungarian algorithm.

    Returns:
        List of (mo_index, gt_index) pairs ordered by ground truth index
    """
    positive = [c for c in candidates if c.weight > 0]
    if not positive:
        return []

    gt_ids = sorted({c.gt_index for c in positive})
    mo_ids = sorted({c.mo_index for c in positive})
    gt_row = {gt: i for i, gt in enumerate(gt_ids)}
    mo_col = {mo: j for j, mo in enumerate(mo_ids)}

    weights = np.zeros((len(gt_ids), len(mo_ids)))
    for c in positive:
        weights[gt_row[c.gt_index], mo_col[c.mo_index]] = c.weight

    rows, cols = linear_sum_assignment(weights, maximize=True)

    matching = [
        (mo_ids[j], gt_ids[i]) for i, j in zip(rows, cols, strict=True) if weights[i, j] > 0
    ]
    logger.debug("found %d matches (optimal)", len(matching))
    return matching


def match_polygons(
    ground_truth: Sequence[Polygon],
    method_output: Sequence[Polygon],
    weighting: Literal["bbox", "polygon"] = "bbox",
    strategy: Literal["greedy", "optimal"] = "greedy",
) -> list[tuple[int, int]]:
    """Build candidates and resolve them with the chosen strategy.

    Returns:
        List of (mo_index, gt_index) pairs
    """
    candidates = build_candidates(ground_truth, method_output, weighting)
    if strategy == "optimal":
        return optimal_match(candidates)
    return greedy_match(candidates)
