"""
Evaluate a Text Line Segmentation Against Ground Truth

Compares the text lines of a PAGE-XML prediction with the ground truth
PAGE-XML and pixel-level ground truth image of the same page, and reports
line and pixel precision, recall and IU.

Usage:
    # Evaluate one page
    lineeval -igt page.png -xgt page_gt.xml -xp page_pred.xml

    # Write the results (and the visualization image) next to each other
    lineeval -igt page.png -xgt page_gt.xml -xp page_pred.xml -o results/page.csv

    # Lower matching threshold, restricted to the main text area
    lineeval -igt page.png -xgt page_gt.xml -xp page_pred.xml -mt 0.5 --main-text-area
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from lineeval.config import EvaluationConfig, load_config
from lineeval.evaluator import evaluate
from lineeval.exceptions import LineEvalError
from lineeval.metrics import MetricId
from lineeval.readers import (
    image_size,
    load_raster_mask,
    read_line_polygons,
    read_main_text_area,
    save_visualization,
)
from lineeval.reports import generate_cli_report, save_json_report, write_csv

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lineeval",
        description="Evaluate text line segmentation against ground truth",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "-igt",
        "--image-ground-truth",
        type=Path,
        help="Ground truth image at pixel level (boundary/background flags)",
    )
    parser.add_argument(
        "-xgt",
        "--xml-ground-truth",
        type=Path,
        required=True,
        help="Ground truth PAGE-XML",
    )
    parser.add_argument(
        "-xp",
        "--xml-prediction",
        type=Path,
        required=True,
        help="Prediction PAGE-XML",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output path for the CSV file",
    )
    parser.add_argument(
        "--json",
        type=Path,
        help="Output path for a JSON report",
    )
    parser.add_argument(
        "-mt",
        "--matching-threshold",
        type=float,
        default=None,
        help="Pixel IU a matched line must exceed to count as correct (default: 0.75)",
    )
    parser.add_argument(
        "-c",
        "--comments",
        action="store_true",
        default=None,
        help="Take comment lines into account",
    )
    parser.add_argument(
        "--main-text-area",
        action="store_true",
        default=None,
        help="Only score pixels inside the first text region of the ground truth",
    )
    parser.add_argument(
        "--weighting",
        choices=["bbox", "polygon"],
        default=None,
        help="Overlap measure used to rank candidate matches (default: bbox)",
    )
    parser.add_argument(
        "--strategy",
        choices=["greedy", "optimal"],
        default=None,
        help="Matching strategy (default: greedy)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML file with evaluation options; command line options take precedence",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="count", default=0, help="More logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    return parser


def _setup_logging(verbose: int, quiet: bool) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _build_config(args: argparse.Namespace) -> EvaluationConfig:
    overrides = {
        "threshold": args.matching_threshold,
        "include_comments": args.comments,
        "use_main_text_area": args.main_text_area,
        "weighting": args.weighting,
        "strategy": args.strategy,
        "render_visualization": True if args.output else None,
    }
    if args.config:
        return load_config(args.config, **overrides)
    return EvaluationConfig(**{k: v for k, v in overrides.items() if v is not None})


def visualization_path(output_path: Path, image_path: Path | None) -> Path:
    """Path of the visualization image written next to the CSV results.

    ``results/page.csv`` with ground truth image ``page.png`` gives
    ``results/page.visualization.png``.
    """
    suffix = image_path.suffix if image_path else ".png"
    return output_path.with_suffix(f".visualization{suffix}")


def run(args: argparse.Namespace) -> int:
    """Evaluate one page as described by parsed command line arguments."""
    config = _build_config(args)
    logger.info("Matching threshold is: %.1f %%", 100 * config.threshold)

    mask = None
    size = None
    if args.image_ground_truth:
        logger.info("Loading image ground truth from %s", args.image_ground_truth)
        mask = load_raster_mask(args.image_ground_truth)
        size = image_size(args.image_ground_truth)

    logger.info("Loading page ground truth from %s", args.xml_ground_truth)
    truth = read_line_polygons(args.xml_ground_truth, config.include_comments)

    logger.info("Loading method output from %s", args.xml_prediction)
    output = read_line_polygons(args.xml_prediction, config.include_comments)

    main_text_area = None
    if config.use_main_text_area:
        main_text_area = read_main_text_area(args.xml_ground_truth)

    logger.info("Evaluating...")
    evaluation = evaluate(
        truth,
        output,
        mask=mask,
        main_text_area=main_text_area,
        config=config,
        image_size=size,
    )
    results = evaluation.results
    results.put(MetricId.FILENAME, args.xml_prediction.stem)

    print(generate_cli_report(results))

    if args.output:
        if evaluation.visualization is not None:
            save_visualization(
                evaluation.visualization,
                visualization_path(args.output, args.image_ground_truth),
            )
        logger.info("Writing results in %s", args.output)
        write_csv(results, args.output)

    if args.json:
        logger.info("Writing JSON report in %s", args.json)
        save_json_report(results, args.json, args.xml_ground_truth.name)

    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose, args.quiet)

    try:
        return run(args)
    except (LineEvalError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
