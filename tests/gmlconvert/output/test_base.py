from dataclasses import dataclass

import pytest

from gmlconvert.exceptions import UnsupportedGeometryType
from gmlconvert.output import GmlBuilder
from gmlconvert.parsers import parse_gml
from gmlconvert.parsers.gml import (
    GmlBox,
    GmlCurve,
    GmlFeature,
    GmlFeatureCollection,
    GmlGeometry,
    GmlMultiLineString,
    GmlPoint,
)


class NameBuilder(GmlBuilder):
    """A builder that only tells which method was called."""

    def build_point(self, geometry):
        return "point"

    def build_line_string(self, geometry):
        return "line_string"

    def build_curve(self, geometry):
        return "curve"

    def build_linear_ring(self, geometry):
        return "linear_ring"

    def build_polygon(self, geometry):
        return "polygon"

    def build_surface(self, geometry):
        return "surface"

    def build_envelope(self, geometry):
        return "envelope"

    def build_box(self, geometry):
        return "box"

    def build_multi_point(self, geometry):
        return "multi_point"

    def build_multi_line_string(self, geometry):
        return "multi_line_string"

    def build_multi_polygon(self, geometry):
        return "multi_polygon"

    def build_feature(self, feature):
        return f"feature:{self.build(feature.geometry)}"

    def finish_collection(self, collection, features):
        return features

    def build_rectified_grid_coverage(self, coverage):
        return "rectified_grid_coverage"

    def build_grid_coverage(self, coverage):
        return "grid_coverage"

    def build_referenceable_grid_coverage(self, coverage):
        return "referenceable_grid_coverage"

    def build_multi_point_coverage(self, coverage):
        return "multi_point_coverage"


@dataclass(frozen=True)
class ExtendedPoint(GmlPoint):
    """A subclass that is not registered as parser."""

    label: str = ""


class TestBuilder:
    """Prove that each object is handed to the right build method."""

    @pytest.mark.parametrize(
        "obj,expect",
        [
            (GmlPoint((1.0, 2.0)), "point"),
            (GmlCurve(((1.0, 2.0), (3.0, 4.0))), "curve"),
            (GmlBox((0.0, 0.0, 1.0, 1.0)), "box"),
            (GmlMultiLineString((((1.0, 2.0), (3.0, 4.0)),)), "multi_line_string"),
            (ExtendedPoint((1.0, 2.0), label="a"), "point"),
        ],
    )
    def test_build(self, obj, expect):
        assert NameBuilder().build(obj) == expect

    def test_feature_collection(self):
        """Prove that the collection builds all features before finishing."""
        collection = GmlFeatureCollection(
            features=(
                GmlFeature(id="a", geometry=GmlPoint((1.0, 2.0))),
                GmlFeature(id="b", geometry=GmlCurve(((1.0, 2.0), (3.0, 4.0)))),
            )
        )
        assert NameBuilder().build(collection) == ["feature:point", "feature:curve"]

    def test_coverage(self, rectified_grid_coverage):
        assert NameBuilder().build(parse_gml(rectified_grid_coverage)) == "rectified_grid_coverage"

    def test_unknown_object(self):
        with pytest.raises(UnsupportedGeometryType, match="NameBuilder can't build GmlGeometry"):
            NameBuilder().build(GmlGeometry())

    def test_abstract(self):
        """Prove that incomplete builders can't be created."""

        class PartialBuilder(GmlBuilder):
            def build_point(self, geometry):
                return "point"

        with pytest.raises(TypeError):
            PartialBuilder()
