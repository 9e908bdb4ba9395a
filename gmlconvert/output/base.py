"""The interface for all output formats.

Each output format implements a :class:`GmlBuilder`, which has a ``build_...()``
method for every kind of parsed object. The :meth:`GmlBuilder.build` method
picks the right method for a given object.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from gmlconvert.exceptions import UnsupportedGeometryType
from gmlconvert.parsers.gml import (
    GmlBox,
    GmlCurve,
    GmlEnvelope,
    GmlFeature,
    GmlFeatureCollection,
    GmlGridCoverage,
    GmlLinearRing,
    GmlLineString,
    GmlMultiLineString,
    GmlMultiPoint,
    GmlMultiPointCoverage,
    GmlMultiPolygon,
    GmlObject,
    GmlPoint,
    GmlPolygon,
    GmlRectifiedGridCoverage,
    GmlReferenceableGridCoverage,
    GmlSurface,
)

__all__ = ("GmlBuilder",)

BUILD_METHODS = {
    GmlPoint: "build_point",
    GmlLineString: "build_line_string",
    GmlCurve: "build_curve",
    GmlLinearRing: "build_linear_ring",
    GmlPolygon: "build_polygon",
    GmlSurface: "build_surface",
    GmlEnvelope: "build_envelope",
    GmlBox: "build_box",
    GmlMultiPoint: "build_multi_point",
    GmlMultiLineString: "build_multi_line_string",
    GmlMultiPolygon: "build_multi_polygon",
    GmlFeature: "build_feature",
    GmlFeatureCollection: "build_feature_collection",
    GmlRectifiedGridCoverage: "build_rectified_grid_coverage",
    GmlGridCoverage: "build_grid_coverage",
    GmlReferenceableGridCoverage: "build_referenceable_grid_coverage",
    GmlMultiPointCoverage: "build_multi_point_coverage",
}


class GmlBuilder(ABC):
    """Base class for converting the parsed GML objects into another format.

    Subclasses implement all ``build_...()`` methods, so every kind of object can be handled.
    """

    def build(self, obj: GmlObject):
        """Convert any parsed object, by calling the corresponding ``build_...()`` method."""
        for cls in type(obj).__mro__:
            method_name = BUILD_METHODS.get(cls)
            if method_name is not None:
                return getattr(self, method_name)(obj)

        raise UnsupportedGeometryType(
            f"{self.__class__.__name__} can't build {obj.__class__.__name__} objects."
        )

    @abstractmethod
    def build_point(self, geometry: GmlPoint): ...

    @abstractmethod
    def build_line_string(self, geometry: GmlLineString): ...

    @abstractmethod
    def build_curve(self, geometry: GmlCurve): ...

    @abstractmethod
    def build_linear_ring(self, geometry: GmlLinearRing): ...

    @abstractmethod
    def build_polygon(self, geometry: GmlPolygon): ...

    @abstractmethod
    def build_surface(self, geometry: GmlSurface): ...

    @abstractmethod
    def build_envelope(self, geometry: GmlEnvelope): ...

    @abstractmethod
    def build_box(self, geometry: GmlBox): ...

    @abstractmethod
    def build_multi_point(self, geometry: GmlMultiPoint): ...

    @abstractmethod
    def build_multi_line_string(self, geometry: GmlMultiLineString): ...

    @abstractmethod
    def build_multi_polygon(self, geometry: GmlMultiPolygon): ...

    @abstractmethod
    def build_feature(self, feature: GmlFeature): ...

    def build_feature_collection(self, collection: GmlFeatureCollection):
        """Build all features, and combine them into the collection.
        All features are built before :meth:`finish_collection` is called.
        """
        features = [self.build_feature(feature) for feature in collection.features]
        return self.finish_collection(collection, features)

    @abstractmethod
    def finish_collection(self, collection: GmlFeatureCollection, features: list):
        """Combine the built features into the collection output."""

    @abstractmethod
    def build_rectified_grid_coverage(self, coverage: GmlRectifiedGridCoverage): ...

    @abstractmethod
    def build_grid_coverage(self, coverage: GmlGridCoverage): ...

    @abstractmethod
    def build_referenceable_grid_coverage(self, coverage: GmlReferenceableGridCoverage): ...

    @abstractmethod
    def build_multi_point_coverage(self, coverage: GmlMultiPointCoverage): ...
