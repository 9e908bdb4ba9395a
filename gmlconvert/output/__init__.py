"""The output formats for the parsed GML objects.

Other formats can be added by implementing the :class:`~gmlconvert.output.GmlBuilder` interface.
"""

from .base import GmlBuilder
from .gml import GmlRenderer, render_gml
from .grid import GridMetadata, extract_grid_metadata, pixel_to_world, world_to_pixel

__all__ = [
    "GmlBuilder",
    "GmlRenderer",
    "GridMetadata",
    "extract_grid_metadata",
    "pixel_to_world",
    "render_gml",
    "world_to_pixel",
]
