"""
Configuration for LineEval line segmentation evaluation.

Options can be given in code, in a YAML file (load_config) or on the command line.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Literal

import yaml

from lineeval.exceptions import ConfigurationError

DEFAULT_THRESHOLD = 0.75


@dataclass
class EvaluationConfig:
    """
    Configuration for one evaluation run.

    All options have sensible defaults. Create a config only
    if you need to customize behavior.

    Example:
        >>> config = EvaluationConfig(threshold=0.5, strategy="optimal")
        >>> result = lineeval.evaluate(truth, output, config=config)
    """

    # A matched pair counts as a correct line only if its pixel IoU is above this
    threshold: float = DEFAULT_THRESHOLD

    # Candidate weights: bounding-rectangle overlap or exact polygon overlap
    weighting: Literal["bbox", "polygon"] = "bbox"

    # Matching: greedy largest-overlap-first, or optimal assignment
    strategy: Literal["greedy", "optimal"] = "greedy"

    # Input options (used when reading PAGE-XML files)
    use_main_text_area: bool = False
    include_comments: bool = False

    # Output options
    render_visualization: bool = False

    def __post_init__(self):
        """Validate configuration."""
        if not 0.0 <= self.threshold <= 1.0:
            raise ConfigurationError(
                f"threshold must be between 0.0 and 1.0, got {self.threshold}"
            )

        valid_weightings = ("bbox", "polygon")
        if self.weighting not in valid_weightings:
            raise ConfigurationError(
                f"weighting must be one of {valid_weightings}, got {self.weighting!r}"
            )

        valid_strategies = ("greedy", "optimal")
        if self.strategy not in valid_strategies:
            raise ConfigurationError(
                f"strategy must be one of {valid_strategies}, got {self.strategy!r}"
            )


def load_config(path: Path, **overrides) -> EvaluationConfig:
    """Load an EvaluationConfig from a YAML file.

    Args:
        path: YAML file with top-level keys named like EvaluationConfig fields
        **overrides: Values that take precedence over the file (None is ignored)

    Returns:
        Validated EvaluationConfig

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the file has unknown keys or invalid values
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: expected a mapping at top level")

    known = {f.name for f in fields(EvaluationConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"{path}: unknown configuration keys {unknown}")

    data.update({k: v for k, v in overrides.items() if v is not None})
    return EvaluationConfig(**data)
