"""Tests for lineeval.evaluator module."""

import numpy as np
import pytest

from lineeval.config import EvaluationConfig
from lineeval.evaluator import evaluate
from lineeval.geometry import Polygon, Rect
from lineeval.metrics import MetricId
from lineeval.scoring import RasterMask
from lineeval.visualize import BOUNDARY_COLOR, FALSE_COLOR, MATCHING_COLOR, MISSED_COLOR

GT = [Polygon.from_rect(0, 0, 10, 10)]
MO = [Polygon.from_rect(5, 5, 15, 15)]


def text_lines(count: int, offset: int = 0) -> list[Polygon]:
    """Helper to create horizontal line polygons stacked vertically."""
    return [
        Polygon(((10, y + offset), (200, y + offset + 3), (198, y + 20), (12, y + 18)))
        for y in range(0, 40 * count, 40)
    ]


class TestReferenceCase:
    """Two offset squares: overlap 25 pixels, union 175 pixels."""

    def test_low_threshold_accepts(self):
        """Test the pair is accepted at threshold 0.1."""
        result = evaluate(GT, MO, config=EvaluationConfig(threshold=0.1))
        r = result.results

        assert r[MetricId.LINES_CORRECT] == 1
        assert r[MetricId.PRECISION] == pytest.approx(0.25)
        assert r[MetricId.RECALL] == pytest.approx(0.25)
        assert r[MetricId.PIXEL_IU] == pytest.approx(25 / 175)
        assert r[MetricId.LINES_IU] == 1.0
        assert result.pair_scores[0].iou == pytest.approx(25 / 175)

    def test_high_threshold_rejects(self):
        """Test the pair is rejected at threshold 0.5."""
        r = evaluate(GT, MO, config=EvaluationConfig(threshold=0.5)).results

        assert r[MetricId.LINES_CORRECT] == 0
        assert r[MetricId.LINES_PRECISION] == 0.0
        assert r[MetricId.LINES_RECALL] == 0.0
        assert r[MetricId.PIXEL_IU] == 0.0
        assert r[MetricId.PRECISION] == 0.0
        assert r[MetricId.RECALL] == 0.0

    def test_rejected_pair_still_listed(self):
        """Test the matching keeps rejected pairs."""
        result = evaluate(GT, MO, config=EvaluationConfig(threshold=0.5))
        assert result.matching == [(0, 0)]
        assert result.accepted_pairs == []


class TestProperties:
    """Properties that hold for any input."""

    def test_no_overlap_gives_zero_metrics(self):
        """Test disjoint polygon sets."""
        truth = [Polygon.from_rect(0, 0, 10, 10), Polygon.from_rect(0, 20, 10, 30)]
        output = [Polygon.from_rect(50, 0, 60, 10)]
        result = evaluate(truth, output)

        assert result.matching == []
        for metric, value in result.results.numeric_items():
            if metric not in (MetricId.LINES_TRUTH, MetricId.LINES_PROPOSED):
                assert value == 0
        assert result.results[MetricId.LINES_TRUTH] == 2
        assert result.results[MetricId.LINES_PROPOSED] == 1

    def test_empty_inputs(self):
        """Test empty polygon sets give zeros."""
        result = evaluate([], [])
        assert all(value == 0 for value in result.results.values())

    def test_self_evaluation(self):
        """Test identical sets score perfectly."""
        lines = text_lines(5)
        r = evaluate(lines, lines).results

        assert r[MetricId.LINES_CORRECT] == 5
        assert r[MetricId.LINES_IU] == 1.0
        assert r[MetricId.PIXEL_IU] == 1.0
        assert r[MetricId.PRECISION] == 1.0
        assert r[MetricId.RECALL] == 1.0
        assert r[MetricId.FALSE_POSITIVE] == 0.0
        assert r[MetricId.FALSE_NEGATIVE] == 0.0

    def test_swap_exchanges_precision_and_recall(self):
        """Test swapping truth and output swaps precision and recall."""
        truth = [Polygon.from_rect(0, 0, 10, 10)]
        output = [Polygon.from_rect(0, 0, 10, 20), Polygon.from_rect(50, 50, 60, 60)]
        config = EvaluationConfig(threshold=0.4)

        forward = evaluate(truth, output, config=config).results
        backward = evaluate(output, truth, config=config).results

        assert forward[MetricId.PRECISION] == pytest.approx(0.5)
        assert forward[MetricId.RECALL] == pytest.approx(1.0)
        assert forward[MetricId.PRECISION] == backward[MetricId.RECALL]
        assert forward[MetricId.RECALL] == backward[MetricId.PRECISION]
        assert forward[MetricId.LINES_PRECISION] == backward[MetricId.LINES_RECALL]
        assert forward[MetricId.LINES_RECALL] == backward[MetricId.LINES_PRECISION]
        assert forward[MetricId.PIXEL_IU] == backward[MetricId.PIXEL_IU]
        assert forward[MetricId.LINES_IU] == backward[MetricId.LINES_IU]

    def test_threshold_monotonic(self):
        """Test raising the threshold never adds correct lines."""
        truth = text_lines(6)
        output = text_lines(6, offset=6)
        counts = [
            evaluate(truth, output, config=EvaluationConfig(threshold=t)).results[
                MetricId.LINES_CORRECT
            ]
            for t in (0.0, 0.2, 0.4, 0.6, 0.8, 1.0)
        ]
        assert counts == sorted(counts, reverse=True)
        assert counts[0] == 6
        assert counts[-1] == 0

    def test_matching_injective(self):
        """Test no polygon is used twice."""
        truth = text_lines(6)
        output = text_lines(6, offset=25)
        matching = evaluate(truth, output).matching
        assert len({mo for mo, _ in matching}) == len(matching)
        assert len({gt for _, gt in matching}) == len(matching)

    def test_repeated_calls_are_independent(self):
        """Test evaluation keeps no state between calls."""
        config = EvaluationConfig(threshold=0.1, render_visualization=True)
        first = evaluate(GT, MO, config=config)
        evaluate(text_lines(3), text_lines(3), config=config)
        again = evaluate(GT, MO, config=config)

        assert first.results.to_dict() == again.results.to_dict()
        assert np.array_equal(first.visualization, again.visualization)

    def test_optimal_strategy(self):
        """Test the optimal strategy scores a simple page like greedy."""
        lines = text_lines(4)
        r = evaluate(lines, lines, config=EvaluationConfig(strategy="optimal")).results
        assert r[MetricId.LINES_IU] == 1.0


class TestMaskAndArea:
    """Tests for pixel ground truth and main text area handling."""

    def test_mask_excludes_boundary(self):
        """Test boundary pixels change pixel counts but not line counts."""
        mask = RasterMask(
            boundary=np.zeros((20, 20), dtype=bool),
            background=np.zeros((20, 20), dtype=bool),
        )
        mask.boundary[0:5, 0:5] = True
        result = evaluate(GT, MO, mask=mask, config=EvaluationConfig(threshold=0.1))

        # 25 missed pixels fall on the boundary
        assert result.pair_scores[0].counts.missed == 50
        assert result.results[MetricId.PIXEL_IU] == pytest.approx(25 / 150)

    def test_main_text_area(self):
        """Test pixels outside the main text area are not scored."""
        result = evaluate(GT, GT, main_text_area=Rect(0, 0, 10, 5))
        assert result.pair_scores[0].counts.matching == 50
        assert result.results[MetricId.PIXEL_IU] == 1.0


class TestVisualization:
    """Tests for the visualization returned by evaluate."""

    def test_not_rendered_by_default(self):
        """Test no visualization unless requested."""
        assert evaluate(GT, MO).visualization is None

    def test_colors(self):
        """Test each pixel class is painted in its color."""
        config = EvaluationConfig(threshold=0.1, render_visualization=True)
        image = evaluate(GT, MO, config=config).visualization

        assert image.shape == (15, 15, 3)
        assert tuple(image[7, 7]) == MATCHING_COLOR
        assert tuple(image[2, 2]) == MISSED_COLOR
        assert tuple(image[12, 12]) == FALSE_COLOR
        assert tuple(image[12, 2]) == (0, 0, 0)

    def test_rejected_pairs_not_painted(self):
        """Test only accepted pairs are painted."""
        config = EvaluationConfig(threshold=0.5, render_visualization=True)
        image = evaluate(GT, MO, config=config).visualization
        assert not image.any()

    def test_size_from_image_size(self):
        """Test explicit image size without mask."""
        config = EvaluationConfig(threshold=0.1, render_visualization=True)
        image = evaluate(GT, MO, config=config, image_size=(40, 30)).visualization
        assert image.shape == (30, 40, 3)

    def test_polygons_outside_page_are_clipped(self):
        """Test pairs partly outside the image size don't fail."""
        config = EvaluationConfig(threshold=0.1, render_visualization=True)
        image = evaluate(GT, MO, config=config, image_size=(8, 8)).visualization
        assert image.shape == (8, 8, 3)
        assert tuple(image[2, 2]) == MISSED_COLOR

    def test_size_and_boundary_from_mask(self):
        """Test mask size and boundary marker."""
        mask = RasterMask(
            boundary=np.zeros((25, 30), dtype=bool),
            background=np.zeros((25, 30), dtype=bool),
        )
        mask.boundary[0, 0] = True
        mask.boundary[20, 20] = True  # outside every pair
        config = EvaluationConfig(threshold=0.1, render_visualization=True)
        image = evaluate(GT, MO, mask=mask, config=config).visualization

        assert image.shape == (25, 30, 3)
        assert tuple(image[0, 0]) == BOUNDARY_COLOR
        assert tuple(image[20, 20]) == (0, 0, 0)
