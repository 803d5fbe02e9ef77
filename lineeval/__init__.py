"""
LineEval: Evaluate text line segmentations of document images.

Matches the line polygons produced by a segmentation method to hand
annotated ground truth polygons and scores every match at pixel level,
reporting line-count and pixel precision, recall and IU.

Example:
    >>> import lineeval
    >>> truth = lineeval.read_line_polygons("page_gt.xml")
    >>> output = lineeval.read_line_polygons("page_pred.xml")
    >>> mask = lineeval.load_raster_mask("page_gt.png")
    >>> result = lineeval.evaluate(truth, output, mask=mask)
    >>> result.results[lineeval.MetricId.LINES_IU]

Run ``lineeval --help`` for the command line interface.
"""

from lineeval.config import EvaluationConfig, load_config
from lineeval.evaluator import EvaluationResult, evaluate
from lineeval.exceptions import (
    ConfigurationError,
    LineEvalError,
    MaskOutOfRangeError,
    PageFormatError,
)
from lineeval.geometry import (
    Polygon,
    Rect,
    bounding_box,
    contains,
    contains_points,
    intersects,
)
from lineeval.matching import (
    Candidate,
    build_candidates,
    greedy_match,
    match_polygons,
    optimal_match,
)
from lineeval.metrics import MetricId, Results, compute_results
from lineeval.readers import (
    load_raster_mask,
    read_line_polygons,
    read_main_text_area,
    save_visualization,
)
from lineeval.scoring import ConfusionCounts, PairScore, RasterMask, score_pair, score_pairs
from lineeval.visualize import render_visualization

__version__ = "0.1.0"
__all__ = [
    # Main API
    "evaluate",
    "EvaluationResult",
    # Configuration
    "EvaluationConfig",
    "load_config",
    # Geometry
    "Polygon",
    "Rect",
    "bounding_box",
    "intersects",
    "contains",
    "contains_points",
    # Matching
    "Candidate",
    "build_candidates",
    "greedy_match",
    "optimal_match",
    "match_polygons",
    # Scoring
    "RasterMask",
    "ConfusionCounts",
    "PairScore",
    "score_pair",
    "score_pairs",
    # Metrics
    "MetricId",
    "Results",
    "compute_results",
    # Visualization
    "render_visualization",
    # Readers
    "read_line_polygons",
    "read_main_text_area",
    "load_raster_mask",
    "save_visualization",
    # Exceptions
    "LineEvalError",
    "ConfigurationError",
    "PageFormatError",
    "MaskOutOfRangeError",
]
