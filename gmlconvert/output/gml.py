"""Writing the parsed objects as GML 2.1.2 or GML 3.2.

The two versions write the same geometry in a different way:

=================  ===================================  =====================================
Object             GML 2.1.2                            GML 3.2
=================  ===================================  =====================================
coordinates        ``<gml:coordinates>x,y x,y``         ``<gml:posList>x y x y``
Polygon rings      ``outerBoundaryIs/innerBoundaryIs``  ``exterior/interior``
Envelope, Box      ``<gml:Box>``                        ``<gml:Envelope>``
Curve              ``<gml:LineString>``                 ``<gml:Curve>`` with segments
Surface            ``<gml:MultiPolygon>``               ``<gml:Surface>`` with patches
feature id         ``fid="..."``                        ``gml:id="..."``
=================  ===================================  =====================================

Coverages can only be written as GML 3.2, with their grid and band descriptions.
The coverage values themselves are not part of the parsed objects.
"""

from __future__ import annotations

from collections.abc import Mapping

from gmlconvert import conf
from gmlconvert.exceptions import UnsupportedGeometryType
from gmlconvert.parsers.gml import (
    Coordinate,
    GmlBox,
    GmlCoverage,
    GmlCurve,
    GmlEnvelope,
    GmlFeature,
    GmlFeatureCollection,
    GmlGeometry,
    GmlGrid,
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
    GmlRangeField,
    GmlRangeSet,
    GmlRectifiedGrid,
    GmlRectifiedGridCoverage,
    GmlReferenceableGridCoverage,
    GmlSurface,
)
from gmlconvert.parsers.xml import xmlns
from gmlconvert.types import GmlVersion

from .base import GmlBuilder
from .utils import (
    GML_NAMESPACES,
    attr_escape,
    format_coordinate,
    render_xmlns_attributes,
    tag_escape,
    value_to_xml_string,
)

__all__ = (
    "GmlRenderer",
    "render_gml",
)

Ring = tuple[Coordinate, ...]


def render_gml(obj: GmlObject, output_version: GmlVersion | str, pretty_print=False) -> str:
    """Write a parsed geometry, feature or collection as GML text."""
    return GmlRenderer(output_version, pretty_print=pretty_print).render(obj)


class GmlRenderer(GmlBuilder):
    """Write the GML objects as XML text in the requested GML version.

    The ``build_...()`` methods return the XML of a single element.
    The :meth:`render` method adds the XML namespaces to the outer element.
    """

    def __init__(self, output_version: GmlVersion | str, pretty_print=False):
        self.version = GmlVersion.as_output_version(output_version)
        self.is_legacy = self.version.is_legacy
        self.pretty_print = pretty_print
        self.indent = conf.GMLCONVERT_INDENT

    def render(self, obj: GmlObject) -> str:
        """Render the object as a complete XML fragment."""
        namespaces = {"gml": GML_NAMESPACES[self.version.value]}
        if isinstance(obj, (GmlFeature, GmlFeatureCollection)):
            namespaces["xsi"] = xmlns.xsi.value
        elif isinstance(obj, GmlCoverage):
            namespaces["gmlcov"] = xmlns.gmlcov.value
            namespaces["swe"] = xmlns.swe20.value

        content = self.build(obj)

        # Write the XML namespaces inside the first tag
        end_pos = content.find(">")
        return f"{content[:end_pos]} {render_xmlns_attributes(namespaces)}{content[end_pos:]}"

    # -- XML writing

    def _element(self, tag: str, children: list[str], attrs="") -> str:
        """Write an element with child elements."""
        if not self.pretty_print:
            return f"<{tag}{attrs}>{''.join(children)}</{tag}>"

        lines = [f"<{tag}{attrs}>"]
        for child in children:
            lines.extend(f"{self.indent}{line}" for line in child.split("\n"))
        lines.append(f"</{tag}>")
        return "\n".join(lines)

    def _srs_attrs(self, geometry: GmlGeometry) -> str:
        if not geometry.srs_name:
            return ""
        return f' srsName="{attr_escape(geometry.srs_name)}"'

    def _coordinates(self, coordinates: tuple[Coordinate, ...]) -> str:
        """Write the coordinates of a line or ring."""
        if self.is_legacy:
            text = " ".join(format_coordinate(c, separator=",") for c in coordinates)
            return f"<gml:coordinates>{text}</gml:coordinates>"
        else:
            text = " ".join(format_coordinate(c) for c in coordinates)
            return f"<gml:posList{self._dim_attrs(coordinates)}>{text}</gml:posList>"

    def _position(self, coordinate: Coordinate) -> str:
        """Write the coordinate of a point."""
        if self.is_legacy:
            text = format_coordinate(coordinate, separator=",")
            return f"<gml:coordinates>{text}</gml:coordinates>"
        else:
            dim_attrs = self._dim_attrs((coordinate,))
            return f"<gml:pos{dim_attrs}>{format_coordinate(coordinate)}</gml:pos>"

    def _dim_attrs(self, coordinates: tuple[Coordinate, ...]) -> str:
        # The default of 2 ordinates is not written.
        dim = len(coordinates[0]) if coordinates else 2
        return f' srsDimension="{dim}"' if dim > 2 else ""

    # -- geometries

    def build_point(self, geometry: GmlPoint, attrs=None) -> str:
        attrs = self._srs_attrs(geometry) if attrs is None else attrs
        return self._element("gml:Point", [self._position(geometry.coordinates)], attrs)

    def build_line_string(self, geometry: GmlLineString | GmlCurve, attrs=None) -> str:
        attrs = self._srs_attrs(geometry) if attrs is None else attrs
        return self._element("gml:LineString", [self._coordinates(geometry.coordinates)], attrs)

    def build_curve(self, geometry: GmlCurve) -> str:
        if self.is_legacy:
            return self.build_line_string(geometry)

        segment = self._element(
            "gml:LineStringSegment", [self._coordinates(geometry.coordinates)]
        )
        return self._element(
            "gml:Curve",
            [self._element("gml:segments", [segment])],
            self._srs_attrs(geometry),
        )

    def build_linear_ring(self, geometry: GmlLinearRing, attrs=None) -> str:
        attrs = self._srs_attrs(geometry) if attrs is None else attrs
        return self._render_ring(geometry.coordinates, attrs)

    def _render_ring(self, ring: Ring, attrs="") -> str:
        return self._element("gml:LinearRing", [self._coordinates(ring)], attrs)

    def _render_rings(self, rings: tuple[Ring, ...]) -> list[str]:
        # lol: http://erouault.blogspot.com/2014/04/gml-madness.html
        if self.is_legacy:
            exterior_tag, interior_tag = "gml:outerBoundaryIs", "gml:innerBoundaryIs"
        else:
            exterior_tag, interior_tag = "gml:exterior", "gml:interior"

        return [
            self._element(exterior_tag if i == 0 else interior_tag, [self._render_ring(ring)])
            for i, ring in enumerate(rings)
        ]

    def build_polygon(self, geometry: GmlPolygon, attrs=None) -> str:
        attrs = self._srs_attrs(geometry) if attrs is None else attrs
        return self._element("gml:Polygon", self._render_rings(geometry.coordinates), attrs)

    def build_surface(self, geometry: GmlSurface) -> str:
        if self.is_legacy:
            return self.build_multi_polygon(geometry.as_multi_polygon())

        patches = [
            self._element("gml:PolygonPatch", self._render_rings(patch.coordinates))
            for patch in geometry.patches
        ]
        return self._element(
            "gml:Surface",
            [self._element("gml:patches", patches)],
            self._srs_attrs(geometry),
        )

    def build_envelope(self, geometry: GmlEnvelope | GmlBox) -> str:
        min_x, min_y, max_x, max_y = geometry.bbox
        if self.is_legacy:
            corners = format_coordinate((min_x, min_y), ","), format_coordinate((max_x, max_y), ",")
            return self._element(
                "gml:Box",
                [f"<gml:coordinates>{' '.join(corners)}</gml:coordinates>"],
                self._srs_attrs(geometry),
            )

        return self._element(
            "gml:Envelope",
            [
                f"<gml:lowerCorner>{format_coordinate((min_x, min_y))}</gml:lowerCorner>",
                f"<gml:upperCorner>{format_coordinate((max_x, max_y))}</gml:upperCorner>",
            ],
            self._srs_attrs(geometry),
        )

    build_box = build_envelope

    def build_multi_point(self, geometry: GmlMultiPoint) -> str:
        members = [
            self._element("gml:pointMember", [self.build_point(GmlPoint(point), attrs="")])
            for point in geometry.coordinates
        ]
        return self._element("gml:MultiPoint", members, self._srs_attrs(geometry))

    def build_multi_line_string(self, geometry: GmlMultiLineString) -> str:
        members = [
            self._element(
                "gml:lineStringMember", [self.build_line_string(GmlLineString(line), attrs="")]
            )
            for line in geometry.coordinates
        ]
        return self._element("gml:MultiLineString", members, self._srs_attrs(geometry))

    def build_multi_polygon(self, geometry: GmlMultiPolygon) -> str:
        members = [
            self._element("gml:polygonMember", [self.build_polygon(GmlPolygon(rings), attrs="")])
            for rings in geometry.coordinates
        ]
        return self._element("gml:MultiPolygon", members, self._srs_attrs(geometry))

    # -- features

    def build_feature(self, feature: GmlFeature) -> str:
        """Write the feature inside a ``<gml:featureMember>``."""
        children = []
        if feature.bounded_by is not None:
            children.append(self._render_bounded_by(feature.bounded_by))

        for name, value in feature.properties.items():
            children.extend(self._render_property(name, value))

        geometry = self.build(feature.geometry)
        if feature.geometry_name:
            geometry = self._element(feature.geometry_name, [geometry])
        children.append(geometry)

        attrs = ""
        if feature.id:
            id_attr = "fid" if self.is_legacy else "gml:id"
            attrs = f' {id_attr}="{attr_escape(feature.id)}"'

        return self._element(
            "gml:featureMember", [self._element(feature.type_name, children, attrs)]
        )

    def finish_collection(self, collection: GmlFeatureCollection, features: list[str]) -> str:
        children = []
        if collection.bounded_by is not None:
            children.append(self._render_bounded_by(collection.bounded_by))
        children.extend(features)
        return self._element("gml:FeatureCollection", children)

    def _render_bounded_by(self, bounded_by: GmlEnvelope | GmlBox) -> str:
        return self._element("gml:boundedBy", [self.build_envelope(bounded_by)])

    def _render_property(self, name: str, value) -> list[str]:
        """Write a property value, which gives multiple elements for a repeated value."""
        if value is None:
            return [f'<{name} xsi:nil="true"/>']
        elif isinstance(value, (tuple, list)):
            return [element for item in value for element in self._render_property(name, item)]
        elif isinstance(value, Mapping):
            children = [
                element
                for sub_name, sub_value in value.items()
                for element in self._render_property(sub_name, sub_value)
            ]
            return [self._element(name, children)]
        else:
            text = value_to_xml_string(value)
            if self.pretty_print:
                # Keep the newlines of the value when the output is indented.
                text = text.replace("\n", "&#10;")
            return [f"<{name}>{text}</{name}>"]

    # -- coverages

    def build_rectified_grid_coverage(self, coverage: GmlRectifiedGridCoverage) -> str:
        return self._render_coverage(coverage, self._render_rectified_grid)

    def build_grid_coverage(self, coverage: GmlGridCoverage | GmlReferenceableGridCoverage) -> str:
        return self._render_coverage(coverage, self._render_grid)

    # Only the grid limits of a referenceable grid are known.
    build_referenceable_grid_coverage = build_grid_coverage

    def build_multi_point_coverage(self, coverage: GmlMultiPointCoverage) -> str:
        return self._render_coverage(coverage, self.build_multi_point)

    def _render_coverage(self, coverage: GmlCoverage, render_domain) -> str:
        """Write the coverage with its ``boundedBy``, ``domainSet``, ``rangeSet`` and ``rangeType``."""
        if self.is_legacy:
            raise UnsupportedGeometryType(
                f"Writing a {coverage.type} as GML {self.version} is not supported."
            )

        children = []
        if coverage.bounded_by is not None:
            children.append(self._render_bounded_by(coverage.bounded_by))
        children.append(self._element("gml:domainSet", [render_domain(coverage.domain_set)]))
        children.append(self._render_range_set(coverage.range_set))
        if coverage.range_type:
            children.append(self._render_range_type(coverage.range_type))

        return self._element(f"gml:{coverage.type}", children, self._id_attrs(coverage.id))

    def _id_attrs(self, id: str | None) -> str:
        return f' gml:id="{attr_escape(id)}"' if id else ""

    def _grid_children(self, grid: GmlGrid) -> list[str]:
        limits = grid.limits
        grid_envelope = self._element(
            "gml:GridEnvelope",
            [
                f"<gml:low>{' '.join(map(str, limits.low))}</gml:low>",
                f"<gml:high>{' '.join(map(str, limits.high))}</gml:high>",
            ],
        )
        children = [self._element("gml:limits", [grid_envelope])]
        if grid.axis_labels:
            labels = tag_escape(" ".join(grid.axis_labels))
            children.append(f"<gml:axisLabels>{labels}</gml:axisLabels>")
        return children

    def _render_grid(self, grid: GmlGrid) -> str:
        attrs = f'{self._id_attrs(grid.id)} dimension="{grid.dimension}"'
        return self._element("gml:Grid", self._grid_children(grid), attrs)

    def _render_rectified_grid(self, grid: GmlRectifiedGrid) -> str:
        children = self._grid_children(grid)
        origin = self.build_point(GmlPoint(grid.origin), attrs="")
        children.append(self._element("gml:origin", [origin]))
        children.extend(
            f"<gml:offsetVector>{format_coordinate(vector)}</gml:offsetVector>"
            for vector in grid.offset_vectors
        )

        attrs = f'{self._id_attrs(grid.id)} dimension="{grid.dimension}"'
        if grid.srs_name:
            attrs += f' srsName="{attr_escape(grid.srs_name)}"'
        return self._element("gml:RectifiedGrid", children, attrs)

    def _render_range_set(self, range_set: GmlRangeSet) -> str:
        if not range_set.file_name:
            # The values are not part of the parsed coverage.
            return self._element("gml:rangeSet", ["<gml:DataBlock/>"])

        children = [
            "<gml:rangeParameters/>",
            f"<gml:fileName>{tag_escape(range_set.file_name)}</gml:fileName>",
        ]
        if range_set.file_structure:
            structure = tag_escape(range_set.file_structure)
            children.append(f"<gml:fileStructure>{structure}</gml:fileStructure>")
        return self._element("gml:rangeSet", [self._element("gml:File", children)])

    def _render_range_type(self, range_type: tuple[GmlRangeField, ...]) -> str:
        fields = []
        for field in range_type:
            quantity = []
            if field.description is not None:
                quantity.append(
                    f"<swe:description>{tag_escape(field.description)}</swe:description>"
                )
            if field.data_type is not None:
                quantity.append(f"<swe:dataType>{tag_escape(field.data_type)}</swe:dataType>")
            if field.uom is not None:
                quantity.append(f'<swe:uom code="{attr_escape(field.uom)}"/>')

            name_attr = f' name="{attr_escape(field.name)}"' if field.name is not None else ""
            fields.append(
                self._element("swe:field", [self._element("swe:Quantity", quantity)], name_attr)
            )

        return self._element("gmlcov:rangeType", [self._element("swe:DataRecord", fields)])
