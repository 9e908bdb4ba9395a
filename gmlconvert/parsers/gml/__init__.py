"""Parsing logic for all GML versions.

Overview of GML 3.2 changes: https://mapserver.org/el/development/rfc/ms-rfc-105.html#rfc105
"""

from __future__ import annotations

from .base import GmlGeometry, GmlObject, get_gml_id
from .coordinates import Coordinate, parse_coordinates, parse_pos, parse_pos_list, parse_tuples
from .coverages import (  # also do tag registration
    GmlCoverage,
    GmlGrid,
    GmlGridCoverage,
    GmlGridEnvelope,
    GmlMultiPointCoverage,
    GmlRangeField,
    GmlRangeSet,
    GmlRectifiedGrid,
    GmlRectifiedGridCoverage,
    GmlReferenceableGridCoverage,
)
from .dialect import detect_gml_version, version_from_namespace
from .features import GmlFeature, GmlFeatureCollection, is_feature_collection, parse_properties
from .geometries import (  # also do tag registration
    GmlBox,
    GmlCurve,
    GmlEnvelope,
    GmlLinearRing,
    GmlLineString,
    GmlMultiLineString,
    GmlMultiPoint,
    GmlMultiPolygon,
    GmlPoint,
    GmlPolygon,
    GmlSurface,
    is_geometry_element,
    parse_bounded_by,
)

__all__ = [
    "Coordinate",
    "GmlObject",
    "GmlGeometry",
    "GmlPoint",
    "GmlLineString",
    "GmlCurve",
    "GmlLinearRing",
    "GmlPolygon",
    "GmlSurface",
    "GmlEnvelope",
    "GmlBox",
    "GmlMultiPoint",
    "GmlMultiLineString",
    "GmlMultiPolygon",
    "GmlFeature",
    "GmlFeatureCollection",
    "GmlCoverage",
    "GmlGrid",
    "GmlGridEnvelope",
    "GmlRectifiedGrid",
    "GmlRangeField",
    "GmlRangeSet",
    "GmlRectifiedGridCoverage",
    "GmlGridCoverage",
    "GmlReferenceableGridCoverage",
    "GmlMultiPointCoverage",
    "detect_gml_version",
    "version_from_namespace",
    "get_gml_id",
    "is_feature_collection",
    "is_geometry_element",
    "parse_bounded_by",
    "parse_coordinates",
    "parse_pos",
    "parse_pos_list",
    "parse_properties",
    "parse_tuples",
]
