"""
Exception classes for LineEval.

All LineEval exceptions inherit from LineEvalError,
making it easy to catch all library errors.

Example:
    >>> try:
    ...     polygons = read_line_polygons("prediction.xml")
    ... except lineeval.PageFormatError as e:
    ...     print(f"Not a PAGE document: {e}")
    ... except lineeval.LineEvalError as e:
    ...     print(f"LineEval error: {e}")
"""


class LineEvalError(Exception):
    """
    Base exception for all LineEval errors.

    Catch this to handle any LineEval-specific error.
    """

    pass


class ConfigurationError(LineEvalError, ValueError):
    """
    Raised for invalid configuration.

    Example:
        >>> EvaluationConfig(threshold=1.5)
        ConfigurationError: threshold must be between 0.0 and 1.0, got 1.5
    """

    pass


class PageFormatError(LineEvalError):
    """
    Raised when a PAGE-XML file cannot be read.

    Covers malformed XML and documents without a Page element.
    """

    pass


class MaskOutOfRangeError(LineEvalError, IndexError):
    """
    Raised when the pixel ground truth does not cover a matched pair.

    The mask must span the union bounding box of every matched pair.
    A smaller mask means the image and the XML files do not belong together,
    so the evaluation is aborted.
    """

    pass
