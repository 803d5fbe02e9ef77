"""
PAGE-XML reader for text line polygons.

Reads ``TextRegion/TextLine/Coords@points`` from PAGE documents. The
namespace is taken from the root element, so every PAGE schema version
is accepted.

By default only regions with ``id="region_textline"`` are read; the other
regions of DIVA-HisDB ground truth hold comments and decorations. Pass
``include_comments=True`` to read the lines of every region.
"""

from __future__ import annotations

import logging
from pathlib import Path
from xml.etree import ElementTree as ET

from lineeval.exceptions import PageFormatError
from lineeval.geometry import Polygon, Rect

logger = logging.getLogger(__name__)

TEXT_LINE_REGION_ID = "region_textline"


def parse_points(points_str: str) -> list[tuple[int, int]]:
    """Parse a PAGE points string into integer (x, y) tuples.

    Args:
        points_str: String like "10,20 30,40 50,60"

    Returns:
        List of (x, y) tuples; fractional coordinates are truncated

    Raises:
        ValueError: If the points string is malformed
    """
    points: list[tuple[int, int]] = []
    for point_str in points_str.split():
        parts = point_str.split(",")
        if len(parts) != 2:
            raise ValueError(f"Invalid point format: {point_str}")
        try:
            points.append((int(float(parts[0])), int(float(parts[1]))))
        except ValueError as exc:
            raise ValueError(f"Could not parse coordinates from '{point_str}': {exc}") from exc
    return points


def _load_page(path: Path) -> tuple[ET.Element, dict[str, str]]:
    """Parse the document and return its Page element and namespace map."""
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as exc:
        raise PageFormatError(f"Invalid PAGE-XML file {path}: {exc}") from exc

    # "{http://...}PcGts" -> "http://..."
    namespace = root.tag[1:].split("}")[0] if root.tag.startswith("{") else ""
    ns = {"page": namespace} if namespace else {}
    prefix = "page:" if namespace else ""

    page = root.find(f"{prefix}Page", ns)
    if page is None:
        raise PageFormatError(f"No Page element in {path}")
    return page, ns


def _tag(name: str, ns: dict[str, str]) -> str:
    return f"page:{name}" if ns else name


def read_line_polygons(path: Path, include_comments: bool = False) -> list[Polygon]:
    """Read the text line polygons of a PAGE document.

    Args:
        path: PAGE-XML file
        include_comments: Read lines of every TextRegion, not only the
            main text line region

    Returns:
        One Polygon per TextLine, in document order

    Raises:
        FileNotFoundError: If the file doesn't exist
        PageFormatError: If the file isn't a PAGE document
    """
    page, ns = _load_page(Path(path))
    polygons: list[Polygon] = []

    for region in page.findall(_tag("TextRegion", ns), ns):
        if not include_comments and region.get("id") != TEXT_LINE_REGION_ID:
            continue

        for line in region.findall(_tag("TextLine", ns), ns):
            line_id = line.get("id", "?")
            coords = line.find(_tag("Coords", ns), ns)
            if coords is None or not coords.get("points"):
                logger.warning("TextLine %s missing Coords points, skipping", line_id)
                continue

            try:
                points = parse_points(coords.get("points"))
            except ValueError as exc:
                logger.warning("TextLine %s has invalid Coords: %s, skipping", line_id, exc)
                continue

            polygons.append(Polygon.from_points(points))

    if not polygons and page.find(f".//{_tag('TextLine', ns)}", ns) is not None:
        logger.warning(
            "No lines read from %s: no TextRegion with id '%s' (use comments to read all)",
            path,
            TEXT_LINE_REGION_ID,
        )

    logger.debug("found %d polygons in %s", len(polygons), path)
    return polygons


def read_main_text_area(path: Path) -> Rect | None:
    """Bounding rectangle of the first TextRegion of a PAGE document.

    Returns:
        The rectangle, or None if the page has no region with coordinates

    Raises:
        PageFormatError: If the file isn't a PAGE document
    """
    page, ns = _load_page(Path(path))
    region = page.find(_tag("TextRegion", ns), ns)
    coords = region.find(_tag("Coords", ns), ns) if region is not None else None
    if coords is None or not coords.get("points"):
        logger.warning("No main text area in %s", path)
        return None

    try:
        points = parse_points(coords.get("points"))
    except ValueError as exc:
        raise PageFormatError(f"Invalid main text area in {path}: {exc}") from exc

    bounds = Polygon.from_points(points).bounds
    logger.debug("main text area %s", bounds)
    return bounds
