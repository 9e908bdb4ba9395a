"""Exporting the grid of a coverage as raster (GeoTIFF-style) metadata.

The affine transform follows the GDAL/GeoTIFF convention::

    x_world = a * x_pixel + b * y_pixel + c
    y_world = d * x_pixel + e * y_pixel + f
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from gmlconvert.exceptions import UnsupportedCoverageType
from gmlconvert.parsers.gml import (
    GmlCoverage,
    GmlMultiPointCoverage,
    GmlRangeField,
    GmlRectifiedGrid,
)

__all__ = (
    "GridMetadata",
    "extract_grid_metadata",
    "pixel_to_world",
    "world_to_pixel",
)


@dataclass(frozen=True)
class GridMetadata:
    """The raster properties of a coverage grid."""

    width: int
    height: int
    bbox: tuple[float, float, float, float] | None = None
    crs: str | None = None
    origin: tuple[float, ...] | None = None
    transform: tuple[float, float, float, float, float, float] | None = None
    resolution: tuple[float, float] | None = None
    rotation: float | None = None
    bands: int | None = None
    band_info: tuple[GmlRangeField, ...] = ()


def extract_grid_metadata(coverage: GmlCoverage) -> GridMetadata:
    """Tell the raster properties of a grid coverage.

    :raises UnsupportedCoverageType: For a MultiPointCoverage, which has no grid.
    """
    if isinstance(coverage, GmlMultiPointCoverage):
        raise UnsupportedCoverageType(
            "Raster metadata extraction is not supported for MultiPointCoverage"
        )

    grid = coverage.domain_set
    fields = {
        "width": grid.limits.width,
        "height": grid.limits.height,
        "bbox": coverage.bounded_by.bbox if coverage.bounded_by is not None else None,
    }

    if isinstance(grid, GmlRectifiedGrid):
        fields["crs"] = grid.srs_name
        fields["origin"] = grid.origin
        fields.update(_get_transform(grid))

    if coverage.range_type:
        fields["bands"] = len(coverage.range_type)
        fields["band_info"] = coverage.range_type

    return GridMetadata(**fields)


def _get_transform(grid: GmlRectifiedGrid) -> dict:
    offset_x, offset_y = grid.offset_vectors[0], grid.offset_vectors[1]
    result = {
        "transform": (
            offset_x[0],
            offset_y[0],
            grid.origin[0],
            offset_x[1],
            offset_y[1],
            grid.origin[1],
        ),
        "resolution": (math.hypot(offset_x[0], offset_x[1]), math.hypot(offset_y[0], offset_y[1])),
    }

    if offset_x[1] != 0 or offset_y[0] != 0:
        # Skewed or rotated grid
        result["rotation"] = math.degrees(math.atan2(offset_x[1], offset_x[0]))
    return result


def pixel_to_world(pixel_x: float, pixel_y: float, metadata: GridMetadata):
    """Translate a pixel position into world coordinates.
    This returns ``None`` when the grid has no transform.
    """
    if metadata.transform is None:
        return None

    a, b, c, d, e, f = metadata.transform
    return (a * pixel_x + b * pixel_y + c, d * pixel_x + e * pixel_y + f)


def world_to_pixel(world_x: float, world_y: float, metadata: GridMetadata):
    """Translate world coordinates into a (fractional) pixel position.
    This returns ``None`` when the grid has no transform, or the transform can't be inverted.
    """
    if metadata.transform is None:
        return None

    a, b, c, d, e, f = metadata.transform
    det = a * e - b * d
    if det == 0:
        return None

    dx = world_x - c
    dy = world_y - f
    return ((e * dx - b * dy) / det, (-d * dx + a * dy) / det)
