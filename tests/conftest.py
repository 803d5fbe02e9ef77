"""
Pytest configuration and fixtures for LineEval tests.
"""

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

PAGE_NS = "http://schema.primaresearch.org/PAGE/gts/pagecontent/2013-07-15"


def page_xml(
    regions: dict[str, list[str]],
    namespace: str | None = PAGE_NS,
    region_points: str = "0,0 100,0 100,100 0,100",
) -> str:
    """Build a PAGE document.

    Args:
        regions: Region id -> list of TextLine points strings
        namespace: PAGE namespace, or None for a namespace-less document
        region_points: Coords points of every TextRegion
    """
    xmlns = f' xmlns="{namespace}"' if namespace else ""
    body = []
    for region_id, lines in regions.items():
        body.append(f'<TextRegion id="{region_id}">')
        body.append(f'<Coords points="{region_points}"/>')
        for i, points in enumerate(lines):
            body.append(f'<TextLine id="{region_id}_line_{i}"><Coords points="{points}"/></TextLine>')
        body.append("</TextRegion>")
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f"<PcGts{xmlns}>"
        '<Page imageFilename="page.png" imageWidth="100" imageHeight="100">'
        + "".join(body)
        + "</Page></PcGts>"
    )


@pytest.fixture
def write_page(tmp_path: Path):
    """Return a function writing a PAGE document into tmp_path."""

    def _write(
        name: str,
        regions: dict[str, list[str]],
        namespace: str | None = PAGE_NS,
        region_points: str = "0,0 100,0 100,100 0,100",
    ) -> Path:
        path = tmp_path / name
        path.write_text(page_xml(regions, namespace, region_points), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_gt_image(tmp_path: Path):
    """Return a function writing a DIVA-style pixel ground truth PNG.

    Every pixel is foreground (blue = 0x08) except those listed as
    boundary (red bit 7 set) or background (blue = 0x01).
    """

    def _write(
        name: str,
        size: tuple[int, int],
        boundary: list[tuple[int, int]] = (),
        background: list[tuple[int, int]] = (),
    ) -> Path:
        width, height = size
        rgb = np.zeros((height, width, 3), dtype=np.uint8)
        rgb[..., 2] = 0x08
        for x, y in boundary:
            rgb[y, x, 0] = 0x80
        for x, y in background:
            rgb[y, x, 2] = 0x01
        path = tmp_path / name
        Image.fromarray(rgb).save(path)
        return path

    return _write
