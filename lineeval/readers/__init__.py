"""Input and output of pages: PAGE-XML line polygons and pixel ground truth."""

from lineeval.readers.images import image_size, load_raster_mask, save_visualization
from lineeval.readers.page_xml import (
    parse_points,
    read_line_polygons,
    read_main_text_area,
)

__all__ = [
    # PAGE-XML
    "parse_points",
    "read_line_polygons",
    "read_main_text_area",
    # Images
    "load_raster_mask",
    "image_size",
    "save_visualization",
]
