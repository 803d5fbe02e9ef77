"""Compute line-level and pixel-level metrics from scored pairs.

This module provides:
1. MetricId - Enumeration of the reported metrics
2. Results - Ordered mapping from MetricId to value
3. compute_results() - Aggregate accepted pairs into Results
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from enum import Enum

from lineeval.scoring import ConfusionCounts, PairScore

logger = logging.getLogger(__name__)

MetricValue = int | float | str


class MetricId(Enum):
    """Reported metrics. The value is the name used in CSV and JSON reports."""

    LINES_TRUTH = "NbLinesTruth"
    LINES_PROPOSED = "NbLinesProposed"
    LINES_CORRECT = "NbLinesCorrect"
    LINES_RECALL = "LinesRecall"
    LINES_PRECISION = "LinesPrecision"
    LINES_IU = "LinesIU"
    PIXEL_IU = "PixelIU"
    PRECISION = "Precision"
    RECALL = "Recall"
    TRUE_POSITIVE = "TruePositive"
    FALSE_POSITIVE = "FalsePositive"
    FALSE_NEGATIVE = "FalseNegative"
    FILENAME = "filename"

    @property
    def kind(self) -> type:
        """Python type of the metric's value."""
        if self in _COUNT_METRICS:
            return int
        if self is MetricId.FILENAME:
            return str
        return float


_COUNT_METRICS = frozenset(
    {MetricId.LINES_TRUTH, MetricId.LINES_PROPOSED, MetricId.LINES_CORRECT}
)


class Results(Mapping[MetricId, MetricValue]):
    """Ordered metric values of one evaluation.

    Iteration follows insertion order, which is the order metrics are
    reported in.
    """

    def __init__(self, values: Iterable[tuple[MetricId, MetricValue]] = ()) -> None:
        self._values: dict[MetricId, MetricValue] = {}
        for metric, value in values:
            self.put(metric, value)

    def put(self, metric: MetricId, value: MetricValue) -> None:
        """Set or update a metric, coercing the value to the metric's type."""
        self._values[metric] = metric.kind(value)

    def __getitem__(self, metric: MetricId) -> MetricValue:
        return self._values[metric]

    def __iter__(self) -> Iterator[MetricId]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        items = ", ".join(f"{m.value}={v!r}" for m, v in self._values.items())
        return f"Results({items})"

    def numeric_items(self) -> list[tuple[MetricId, int | float]]:
        """Metrics with a numeric value, in report order."""
        return [(m, v) for m, v in self._values.items() if m.kind is not str]

    def to_dict(self) -> dict[str, MetricValue]:
        """Convert to a name -> value dictionary for serialization."""
        return {m.value: v for m, v in self._values.items()}


def safe_divide(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0.0 if the denominator is 0."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def compute_results(
    pair_scores: Iterable[PairScore],
    n_truth: int,
    n_proposed: int,
) -> Results:
    """Aggregate accepted pairs into line and pixel metrics.

    Args:
        pair_scores: Scores of all matched pairs (rejected pairs are skipped)
        n_truth: Number of ground truth polygons
        n_proposed: Number of method output polygons

    Returns:
        Results with line counts, line recall/precision/IU and pixel metrics
    """
    n_correct = 0
    total = ConfusionCounts()
    for score in pair_scores:
        if score.accepted:
            n_correct += 1
            total += score.counts

    logger.debug("accepted %d of %d truth / %d proposed lines", n_correct, n_truth, n_proposed)
    logger.debug("pixel counts: %s", total.to_dict())

    line_union = n_truth + n_proposed - n_correct

    results = Results()
    results.put(MetricId.LINES_TRUTH, n_truth)
    results.put(MetricId.LINES_PROPOSED, n_proposed)
    results.put(MetricId.LINES_CORRECT, n_correct)
    results.put(MetricId.LINES_RECALL, safe_divide(n_correct, n_truth))
    results.put(MetricId.LINES_PRECISION, safe_divide(n_correct, n_proposed))
    results.put(MetricId.LINES_IU, safe_divide(n_correct, line_union))

    results.put(MetricId.PIXEL_IU, safe_divide(total.matching, total.union))
    results.put(MetricId.PRECISION, safe_divide(total.matching, total.output))
    results.put(MetricId.RECALL, safe_divide(total.matching, total.truth))
    results.put(MetricId.TRUE_POSITIVE, safe_divide(total.matching, total.truth))
    results.put(MetricId.FALSE_POSITIVE, safe_divide(total.false, total.output))
    results.put(MetricId.FALSE_NEGATIVE, safe_divide(total.missed, total.truth))

    logger.debug("line IU = %.4f", results[MetricId.LINES_IU])
    logger.debug("pixel IU = %.4f", results[MetricId.PIXEL_IU])
    return results
