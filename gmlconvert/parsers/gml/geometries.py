"""Parsing of the GML geometry elements.

GML is a complex beast with many different forms for the same thing:
http://erouault.blogspot.com/2014/04/gml-madness.html

This module reads all of them into the same set of classes. The encoding
of coordinates is chosen by the element that holds them: ``<gml:coordinates>``
always contains comma-separated tuples, while ``<gml:pos>`` and ``<gml:posList>``
always contain a flat list of numbers. GML 3.0 and 3.1 use the same namespace as GML 2,
so the version alone can't tell which form is used.
"""

from __future__ import annotations

from dataclasses import dataclass

from gmlconvert import conf
from gmlconvert.exceptions import ExternalParsingError
from gmlconvert.parsers.ast import expect_tag, tag_registry
from gmlconvert.parsers.xml import NSElement
from gmlconvert.types import GmlVersion

from .base import GmlGeometry
from .coordinates import Coordinate, check_dimensions, parse_pos, parse_pos_list, parse_tuples

__all__ = (
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
    "is_geometry_element",
    "parse_bounded_by",
)

BBox = tuple[float, float, float, float]


def is_geometry_element(element: NSElement) -> bool:
    """Tell whether the element is a GML geometry that can be parsed."""
    return tag_registry.can_parse(element, allowed_types=(GmlGeometry,))


def get_srs_dimension(element: NSElement, inherited: int | None = None) -> int | None:
    """Tell the declared number of ordinates per position.
    The ``srsDimension`` of the element wins, then the one of the enclosing geometry.
    This returns ``None`` when no dimension is declared at all.
    """
    dimension = element.get_int_attribute("srsDimension")
    if dimension is not None:
        return dimension
    return inherited


def read_positions(element: NSElement, srs_dimension: int | None) -> list[Coordinate] | None:
    """Read the positions of a geometry element, in any of the supported forms.
    This returns ``None`` when the element has no coordinate data at all.
    """
    pos_list = element.find_local("posList")
    if pos_list is not None:
        dimension = get_srs_dimension(pos_list, srs_dimension)
        if dimension is None:
            dimension = conf.GMLCONVERT_DEFAULT_SRS_DIMENSION
        return parse_pos_list(pos_list.text or "", dimension)

    coordinates = element.find_local("coordinates")
    if coordinates is not None:
        return parse_tuples(
            coordinates.text or "",
            cs=coordinates.get("cs", ","),
            ts=coordinates.get("ts", " "),
            decimal=coordinates.get("decimal", "."),
        )

    # A sequence of <gml:pos>, or GML 2 <gml:coord> elements.
    positions = [
        parse_pos(pos.text or "", get_srs_dimension(pos, srs_dimension))
        for pos in element.findall_local("pos")
    ]
    positions.extend(_parse_coord(coord) for coord in element.findall_local("coord"))
    if positions:
        check_dimensions(positions, f"<{element.qname}>")
        return positions

    return None


def _parse_coord(element: NSElement) -> Coordinate:
    """Parse the GML 2 ``<gml:coord><gml:X>..</gml:X><gml:Y>..</gml:Y></gml:coord>`` notation."""
    ordinates = []
    for name in ("X", "Y", "Z"):
        text = element.findtext_local(name)
        if text is None:
            break
        ordinates.append(parse_pos(text))

    if not ordinates:
        raise ExternalParsingError(f"Element <{element.qname}> misses the <X> and <Y> values.")
    return tuple(value for ordinate in ordinates for value in ordinate)


def _require_positions(element: NSElement, srs_dimension: int | None) -> list[Coordinate]:
    positions = read_positions(element, srs_dimension)
    if positions is None:
        raise ExternalParsingError(f"Invalid GML {element.local_name}: no coordinates found.")
    return positions


def _get_srs_name(element: NSElement, inherited: str | None = None) -> str | None:
    return element.get("srsName") or inherited


def _iter_members(
    element: NSElement, member_names: tuple[str, ...], container_names: tuple[str, ...]
):
    """Iterate over the member geometry elements of a multi-geometry, in source order.
    The members can be written as ``<gml:pointMember>`` that each hold one geometry,
    or as a ``<gml:pointMembers>`` container that holds all geometries.
    """
    for child in element:
        local_name = child.local_name
        if local_name in member_names:
            # Only one geometry per member element
            for geometry in child:
                yield geometry
                break
        elif local_name in container_names:
            yield from child


def _to_bbox(element: NSElement, lower: Coordinate, upper: Coordinate) -> BBox:
    if len(lower) < 2 or len(upper) < 2:
        raise ExternalParsingError(
            f"Invalid GML {element.local_name}: corners need at least 2 ordinates."
        )

    bbox = (lower[0], lower[1], upper[0], upper[1])
    if conf.GMLCONVERT_VALIDATE_BBOX and (bbox[0] > bbox[2] or bbox[1] > bbox[3]):
        raise ExternalParsingError(
            f"Invalid GML {element.local_name}: the lower corner exceeds the upper corner."
        )
    return bbox


@dataclass(frozen=True)
@tag_registry.register("Point")
class GmlPoint(GmlGeometry):
    """A ``<gml:Point>``, which holds a single position."""

    coordinates: Coordinate

    @classmethod
    @expect_tag("Point")
    def from_xml(cls, element: NSElement, version: GmlVersion, srs_dimension=None, srs_name=None):
        positions = _require_positions(element, get_srs_dimension(element, srs_dimension))
        if not positions:
            raise ExternalParsingError("Invalid GML Point: empty position.")
        return cls(
            tuple(positions[0]),
            srs_name=_get_srs_name(element, srs_name),
            version=version,
        )


@dataclass(frozen=True)
@tag_registry.register("LineString")
class GmlLineString(GmlGeometry):
    """A ``<gml:LineString>``."""

    coordinates: tuple[Coordinate, ...]

    @classmethod
    @expect_tag("LineString")
    def from_xml(cls, element: NSElement, version: GmlVersion, srs_dimension=None, srs_name=None):
        return cls(
            tuple(_require_positions(element, get_srs_dimension(element, srs_dimension))),
            srs_name=_get_srs_name(element, srs_name),
            version=version,
        )


@dataclass(frozen=True)
@tag_registry.register("Curve")
class GmlCurve(GmlGeometry):
    """A ``<gml:Curve>``. The positions of all its line segments are concatenated.

    Example::

        <gml:Curve>
          <gml:segments>
            <gml:LineStringSegment>
              <gml:posList>0 0 10 10</gml:posList>
            </gml:LineStringSegment>
          </gml:segments>
        </gml:Curve>
    """

    coordinates: tuple[Coordinate, ...]

    @classmethod
    @expect_tag("Curve")
    def from_xml(cls, element: NSElement, version: GmlVersion, srs_dimension=None, srs_name=None):
        srs_dimension = get_srs_dimension(element, srs_dimension)
        segments = element.find_local("segments")
        if segments is None:
            raise ExternalParsingError("Invalid GML Curve: missing <segments> element.")

        coordinates = []
        for segment in segments.findall_local("LineStringSegment"):
            coordinates.extend(
                _require_positions(segment, get_srs_dimension(segment, srs_dimension))
            )

        # Segments can declare their own srsDimension, but form a single line.
        check_dimensions(coordinates, f"<{element.qname}> segments")
        return cls(
            tuple(coordinates),
            srs_name=_get_srs_name(element, srs_name),
            version=version,
        )


@dataclass(frozen=True)
@tag_registry.register("LinearRing")
class GmlLinearRing(GmlGeometry):
    """A ``<gml:LinearRing>``. Whether the ring is closed is not checked."""

    coordinates: tuple[Coordinate, ...]

    @classmethod
    @expect_tag("LinearRing")
    def from_xml(cls, element: NSElement, version: GmlVersion, srs_dimension=None, srs_name=None):
        return cls(
            tuple(_require_positions(element, get_srs_dimension(element, srs_dimension))),
            srs_name=_get_srs_name(element, srs_name),
            version=version,
        )


def _read_rings(element: NSElement, version: GmlVersion, srs_dimension: int | None):
    """Read the exterior and interior rings of a Polygon or PolygonPatch."""
    exterior = element.find_local("exterior", "outerBoundaryIs")
    if exterior is None:
        raise ExternalParsingError(f"Invalid GML {element.local_name}: missing exterior ring.")

    rings = [exterior]
    rings.extend(element.findall_local("interior", "innerBoundaryIs"))

    result = []
    for boundary in rings:
        ring = boundary.find_local("LinearRing")
        if ring is None:
            raise ExternalParsingError(
                f"Invalid GML {element.local_name}: <{boundary.qname}> has no <LinearRing>."
            )
        result.append(GmlLinearRing.from_xml(ring, version, srs_dimension).coordinates)

    check_dimensions(
        [position for ring in result for position in ring], f"<{element.qname}> rings"
    )
    return tuple(result)


@dataclass(frozen=True)
@tag_registry.register("Polygon")
class GmlPolygon(GmlGeometry):
    """A ``<gml:Polygon>``. The first ring is the exterior, all others are interior rings.

    GML 2 names the rings ``<gml:outerBoundaryIs>`` and ``<gml:innerBoundaryIs>``,
    GML 3 uses ``<gml:exterior>`` and ``<gml:interior>``.
    """

    coordinates: tuple[tuple[Coordinate, ...], ...]

    @property
    def exterior(self) -> tuple[Coordinate, ...]:
        return self.coordinates[0]

    @property
    def interiors(self) -> tuple[tuple[Coordinate, ...], ...]:
        return self.coordinates[1:]

    @classmethod
    @expect_tag("Polygon", "PolygonPatch")
    def from_xml(cls, element: NSElement, version: GmlVersion, srs_dimension=None, srs_name=None):
        return cls(
            _read_rings(element, version, get_srs_dimension(element, srs_dimension)),
            srs_name=_get_srs_name(element, srs_name),
            version=version,
        )


@dataclass(frozen=True)
@tag_registry.register("Surface")
class GmlSurface(GmlGeometry):
    """A ``<gml:Surface>``, which consists of polygon patches.

    Example::

        <gml:Surface>
          <gml:patches>
            <gml:PolygonPatch>
              <gml:exterior>
                <gml:LinearRing>...</gml:LinearRing>
              </gml:exterior>
            </gml:PolygonPatch>
          </gml:patches>
        </gml:Surface>
    """

    patches: tuple[GmlPolygon, ...]

    @property
    def coordinates(self) -> tuple[tuple[tuple[Coordinate, ...], ...], ...]:
        """The surface as multi-polygon coordinates, one polygon per patch."""
        return tuple(patch.coordinates for patch in self.patches)

    def as_multi_polygon(self) -> GmlMultiPolygon:
        """Approximate the surface as multi-polygon."""
        return GmlMultiPolygon(self.coordinates, srs_name=self.srs_name, version=self.version)

    @classmethod
    @expect_tag("Surface")
    def from_xml(cls, element: NSElement, version: GmlVersion, srs_dimension=None, srs_name=None):
        srs_dimension = get_srs_dimension(element, srs_dimension)
        srs_name = _get_srs_name(element, srs_name)
        patches = element.find_local("patches")
        polygon_patches = patches.findall_local("PolygonPatch") if patches is not None else []
        if not polygon_patches:
            raise ExternalParsingError("Invalid GML Surface: no <PolygonPatch> elements found.")

        return cls(
            tuple(
                GmlPolygon.from_xml(patch, version, srs_dimension, srs_name)
                for patch in polygon_patches
            ),
            srs_name=srs_name,
            version=version,
        )


@dataclass(frozen=True)
@tag_registry.register("Envelope")
class GmlEnvelope(GmlGeometry):
    """A ``<gml:Envelope>``, with the ``bbox`` as ``(min_x, min_y, max_x, max_y)``.

    Only the first 2 values of each corner are used.
    """

    bbox: BBox

    @classmethod
    @expect_tag("Envelope")
    def from_xml(cls, element: NSElement, version: GmlVersion, srs_dimension=None, srs_name=None):
        srs_dimension = get_srs_dimension(element, srs_dimension)
        lower_corner = element.find_local("lowerCorner")
        upper_corner = element.find_local("upperCorner")
        if lower_corner is not None and upper_corner is not None:
            lower = parse_pos(
                lower_corner.text or "", get_srs_dimension(lower_corner, srs_dimension)
            )
            upper = parse_pos(
                upper_corner.text or "", get_srs_dimension(upper_corner, srs_dimension)
            )
        else:
            # GML 3.0 also allowed two <gml:pos> or a <gml:coordinates> element.
            lower, upper = _read_corners(element, srs_dimension)

        return cls(
            _to_bbox(element, lower, upper),
            srs_name=_get_srs_name(element, srs_name),
            version=version,
        )


@dataclass(frozen=True)
@tag_registry.register("Box")
class GmlBox(GmlGeometry):
    """A GML 2 ``<gml:Box>``, with the ``bbox`` as ``(min_x, min_y, max_x, max_y)``.

    Example::

        <gml:Box>
          <gml:coordinates>0,0 10,10</gml:coordinates>
        </gml:Box>
    """

    bbox: BBox

    @classmethod
    @expect_tag("Box")
    def from_xml(cls, element: NSElement, version: GmlVersion, srs_dimension=None, srs_name=None):
        lower, upper = _read_corners(element, get_srs_dimension(element, srs_dimension))
        return cls(
            _to_bbox(element, lower, upper),
            srs_name=_get_srs_name(element, srs_name),
            version=version,
        )


def _read_corners(
    element: NSElement, srs_dimension: int | None
) -> tuple[Coordinate, Coordinate]:
    positions = _require_positions(element, srs_dimension)
    if len(positions) == 4 and all(len(position) == 1 for position in positions):
        # Written as "min_x min_y max_x max_y" without the comma separators.
        positions = [positions[0] + positions[1], positions[2] + positions[3]]

    if len(positions) != 2:
        raise ExternalParsingError(
            f"Invalid GML {element.local_name}: expected 2 corners, got {len(positions)}."
        )
    return positions[0], positions[1]


@dataclass(frozen=True)
@tag_registry.register("MultiPoint")
class GmlMultiPoint(GmlGeometry):
    """A ``<gml:MultiPoint>``."""

    coordinates: tuple[Coordinate, ...]

    @classmethod
    @expect_tag("MultiPoint")
    def from_xml(cls, element: NSElement, version: GmlVersion, srs_dimension=None, srs_name=None):
        srs_dimension = get_srs_dimension(element, srs_dimension)
        srs_name = _get_srs_name(element, srs_name)
        points = [
            GmlPoint.from_xml(member, version, srs_dimension, srs_name).coordinates
            for member in _iter_members(element, ("pointMember",), ("pointMembers",))
        ]

        if not points:
            # GML 2 style, with all positions in a single <gml:coordinates> element.
            positions = read_positions(element, srs_dimension)
            if positions is None:
                raise ExternalParsingError("Invalid GML MultiPoint: no members found.")
            points = [tuple(position) for position in positions]

        return cls(tuple(points), srs_name=srs_name, version=version)


def _line_coordinates(element: NSElement, version: GmlVersion, srs_dimension, srs_name):
    if element.local_name == "Curve":
        return GmlCurve.from_xml(element, version, srs_dimension, srs_name).coordinates
    elif element.local_name == "LinearRing":
        return GmlLinearRing.from_xml(element, version, srs_dimension, srs_name).coordinates
    else:
        return GmlLineString.from_xml(element, version, srs_dimension, srs_name).coordinates


@dataclass(frozen=True)
@tag_registry.register("MultiCurve")
@tag_registry.register("MultiLineString")
class GmlMultiLineString(GmlGeometry):
    """A ``<gml:MultiLineString>``, also used for ``<gml:MultiCurve>``."""

    coordinates: tuple[tuple[Coordinate, ...], ...]

    @classmethod
    @expect_tag("MultiLineString", "MultiCurve")
    def from_xml(cls, element: NSElement, version: GmlVersion, srs_dimension=None, srs_name=None):
        srs_dimension = get_srs_dimension(element, srs_dimension)
        srs_name = _get_srs_name(element, srs_name)
        lines = [
            _line_coordinates(member, version, srs_dimension, srs_name)
            for member in _iter_members(
                element,
                ("lineStringMember", "curveMember"),
                ("lineStringMembers", "curveMembers"),
            )
        ]

        if not lines:
            # GML 2 style, a single line as <gml:coordinates> element.
            positions = read_positions(element, srs_dimension)
            if positions is None:
                raise ExternalParsingError(f"Invalid GML {element.local_name}: no members found.")
            lines = [tuple(positions)]

        return cls(tuple(lines), srs_name=srs_name, version=version)


@dataclass(frozen=True)
@tag_registry.register("MultiSurface")
@tag_registry.register("MultiPolygon")
class GmlMultiPolygon(GmlGeometry):
    """A ``<gml:MultiPolygon>``, also used for ``<gml:MultiSurface>``.
    Each ``<gml:Surface>`` member adds a polygon for each of its patches.
    """

    coordinates: tuple[tuple[tuple[Coordinate, ...], ...], ...]

    @classmethod
    @expect_tag("MultiPolygon", "MultiSurface")
    def from_xml(cls, element: NSElement, version: GmlVersion, srs_dimension=None, srs_name=None):
        srs_dimension = get_srs_dimension(element, srs_dimension)
        srs_name = _get_srs_name(element, srs_name)
        polygons = []
        for member in _iter_members(
            element,
            ("polygonMember", "surfaceMember"),
            ("polygonMembers", "surfaceMembers"),
        ):
            if member.local_name == "Surface":
                surface = GmlSurface.from_xml(member, version, srs_dimension, srs_name)
                polygons.extend(surface.coordinates)
            else:
                polygons.append(
                    GmlPolygon.from_xml(member, version, srs_dimension, srs_name).coordinates
                )

        if not polygons:
            raise ExternalParsingError(f"Invalid GML {element.local_name}: no members found.")

        return cls(tuple(polygons), srs_name=srs_name, version=version)


def parse_bounded_by(element: NSElement, version: GmlVersion) -> GmlEnvelope | GmlBox | None:
    """Parse the ``<gml:boundedBy>`` child of a feature, collection or coverage.
    A ``<gml:null>`` (GML 2) or ``<gml:Null>`` value means there is no bounding box.
    """
    bounded_by = element.find_local("boundedBy")
    if bounded_by is None:
        return None

    for child in bounded_by:
        if child.local_name == "Envelope":
            return GmlEnvelope.from_xml(child, version)
        elif child.local_name == "Box":
            return GmlBox.from_xml(child, version)
        elif child.local_name in ("null", "Null"):
            return None

    return None
