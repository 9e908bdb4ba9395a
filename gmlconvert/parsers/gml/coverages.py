"""Parsing of GML coverages.

Coverages describe gridded (raster) data. The grid is found in the ``<gml:domainSet>``,
the bands in the ``<gmlcov:rangeType>`` and the location of the data in the ``<gml:rangeSet>``.
The coverage elements can either be in the GML namespace, or in the GMLCOV namespace
of the coverage implementation schema.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from gmlconvert.exceptions import ExternalParsingError, wrap_parser_errors
from gmlconvert.parsers.ast import tag_registry
from gmlconvert.parsers.xml import NSElement, is_gml_namespace, xmlns
from gmlconvert.types import GmlVersion

from .base import GmlObject, get_gml_id
from .coordinates import Coordinate, parse_pos
from .geometries import GmlBox, GmlEnvelope, GmlMultiPoint, GmlPoint, parse_bounded_by

__all__ = (
    "GmlGridEnvelope",
    "GmlGrid",
    "GmlRectifiedGrid",
    "GmlRangeField",
    "GmlRangeSet",
    "GmlCoverage",
    "GmlRectifiedGridCoverage",
    "GmlGridCoverage",
    "GmlReferenceableGridCoverage",
    "GmlMultiPointCoverage",
)


def _parse_ints(element: NSElement) -> tuple[int, ...]:
    with wrap_parser_errors(element.local_name):
        return tuple(int(value) for value in (element.text or "").split())


@dataclass(frozen=True)
@tag_registry.register("GridEnvelope")
class GmlGridEnvelope(GmlObject):
    """The index range of the grid cells, e.g. ``low=(0, 0)``, ``high=(99, 49)``."""

    low: tuple[int, ...]
    high: tuple[int, ...]

    @property
    def width(self) -> int:
        return self.high[0] - self.low[0] + 1

    @property
    def height(self) -> int:
        if len(self.high) < 2:
            return 1
        return self.high[1] - self.low[1] + 1

    @classmethod
    def from_xml(cls, element: NSElement, version: GmlVersion):
        low = element.find_local("low")
        high = element.find_local("high")
        if low is None or high is None:
            raise ExternalParsingError("Invalid GridEnvelope: missing <low> or <high>.")

        low_values = _parse_ints(low)
        high_values = _parse_ints(high)
        if not low_values or len(low_values) != len(high_values):
            raise ExternalParsingError(
                "Invalid GridEnvelope: <low> and <high> should have the same number of values,"
                f" got {len(low_values)} and {len(high_values)}."
            )
        return cls(low=low_values, high=high_values)


@dataclass(frozen=True)
@tag_registry.register("Grid")
class GmlGrid(GmlObject):
    """The ``<gml:Grid>`` that describes the cells of a coverage."""

    id: str | None
    dimension: int
    limits: GmlGridEnvelope
    axis_labels: tuple[str, ...] = ()

    @classmethod
    def from_xml(cls, element: NSElement, version: GmlVersion):
        return cls(**cls._get_grid_fields(element, version))

    @classmethod
    def _get_grid_fields(cls, element: NSElement, version: GmlVersion) -> dict:
        limits = element.find_local("limits", "gridLimits")
        grid_envelope = limits.find_local("GridEnvelope") if limits is not None else None
        if grid_envelope is None:
            raise ExternalParsingError(
                f"Invalid {element.local_name}: missing <limits><GridEnvelope>."
            )

        axis_labels = element.findtext_local("axisLabels")
        return {
            "id": get_gml_id(element),
            "dimension": element.get_int_attribute("dimension", 2),
            "limits": GmlGridEnvelope.from_xml(grid_envelope, version),
            "axis_labels": tuple(axis_labels.split()) if axis_labels else (),
        }


@dataclass(frozen=True)
@tag_registry.register("RectifiedGrid")
class GmlRectifiedGrid(GmlGrid):
    """A grid that is positioned in world coordinates.

    The ``origin`` is the world position of cell (0, 0),
    and each ``offset_vectors`` entry tells how one step along a grid axis moves in the world.
    """

    srs_name: str | None = None
    origin: Coordinate = ()
    offset_vectors: tuple[Coordinate, ...] = ()

    @classmethod
    def from_xml(cls, element: NSElement, version: GmlVersion):
        origin = element.find_local("origin")
        point = origin.find_local("Point") if origin is not None else None
        if point is None:
            raise ExternalParsingError("Invalid RectifiedGrid: missing <origin><Point>.")

        offset_vectors = tuple(
            parse_pos(vector.text or "") for vector in element.findall_local("offsetVector")
        )
        if len(offset_vectors) < 2:
            raise ExternalParsingError(
                f"Invalid RectifiedGrid: expected at least 2 <offsetVector> elements,"
                f" got {len(offset_vectors)}."
            )
        if any(len(vector) < 2 for vector in offset_vectors):
            raise ExternalParsingError(
                "Invalid RectifiedGrid: each <offsetVector> needs at least 2 values."
            )

        origin = GmlPoint.from_xml(point, version).coordinates
        if len(origin) < 2:
            raise ExternalParsingError("Invalid RectifiedGrid: the origin needs at least 2 values.")

        return cls(
            **cls._get_grid_fields(element, version),
            srs_name=element.get("srsName") or point.get("srsName"),
            origin=origin,
            offset_vectors=offset_vectors,
        )


@dataclass(frozen=True)
class GmlRangeField:
    """A band of the coverage, read from ``<swe:field>``."""

    name: str | None
    data_type: str | None = None
    uom: str | None = None
    description: str | None = None

    @classmethod
    def from_xml(cls, element: NSElement):
        quantity = element.find_local("Quantity")
        if quantity is None:
            return cls(name=element.get("name"))

        uom = quantity.find_local("uom")
        return cls(
            name=element.get("name"),
            data_type=_strip(quantity.findtext_local("dataType")),
            uom=quantity.get("uom") or (uom.get("code") if uom is not None else None),
            description=_strip(quantity.findtext_local("description")),
        )


@dataclass(frozen=True)
class GmlRangeSet:
    """The external file that holds the coverage values (``<gml:File>``)."""

    file_name: str | None = None
    file_structure: str | None = None

    @classmethod
    def from_xml(cls, element: NSElement | None):
        file = element.find_local("File") if element is not None else None
        if file is None:
            return cls()

        file_name = _strip(file.findtext_local("fileName"))
        if not file_name:
            return cls()
        return cls(
            file_name=file_name,
            file_structure=_strip(file.findtext_local("fileStructure")) or None,
        )


def _strip(text: str | None) -> str | None:
    return text.strip() if text is not None else None


def _parse_range_type(element: NSElement | None) -> tuple[GmlRangeField, ...]:
    data_record = element.find_local("DataRecord") if element is not None else None
    if data_record is None:
        return ()
    return tuple(GmlRangeField.from_xml(field) for field in data_record.findall_local("field"))


@dataclass(frozen=True)
class GmlCoverage(GmlObject):
    """Abstract base class for the coverages."""

    id: str | None
    bounded_by: GmlEnvelope | GmlBox | None
    domain_set: GmlObject
    range_set: GmlRangeSet
    range_type: tuple[GmlRangeField, ...]
    version: GmlVersion

    #: The element that is expected in the domainSet.
    domain_type: ClassVar[type[GmlObject]]

    @classmethod
    def accepts_namespace(cls, namespace: str | None) -> bool:
        return is_gml_namespace(namespace) or namespace == xmlns.gmlcov.value

    @classmethod
    def from_xml(cls, element: NSElement, version: GmlVersion):
        domain_set = element.find_local("domainSet")
        if domain_set is None:
            raise ExternalParsingError(f"Invalid {element.local_name}: missing <domainSet>.")

        return cls(
            id=get_gml_id(element),
            bounded_by=parse_bounded_by(element, version),
            domain_set=cls.domain_from_xml(domain_set, version),
            range_set=GmlRangeSet.from_xml(element.find_local("rangeSet")),
            range_type=_parse_range_type(element.find_local("rangeType")),
            version=version,
        )

    @classmethod
    def domain_from_xml(cls, domain_set: NSElement, version: GmlVersion) -> GmlObject:
        """Parse the grid (or points) inside the ``<gml:domainSet>``."""
        tag = cls.domain_type.xml_name
        domain = domain_set.find_local(tag)
        if domain is None:
            raise ExternalParsingError(f"Invalid {cls.xml_name}: missing <{tag}> in <domainSet>.")
        return cls.domain_type.from_xml(domain, version)


@dataclass(frozen=True)
@tag_registry.register("RectifiedGridCoverage")
@tag_registry.register("GMLJP2RectifiedGridCoverage", hidden=True)
class GmlRectifiedGridCoverage(GmlCoverage):
    """A coverage on a grid with world coordinates, the common form for raster data."""

    domain_set: GmlRectifiedGrid
    domain_type = GmlRectifiedGrid


@dataclass(frozen=True)
@tag_registry.register("GridCoverage")
class GmlGridCoverage(GmlCoverage):
    """A coverage on a grid without world coordinates."""

    domain_set: GmlGrid
    domain_type = GmlGrid


@dataclass(frozen=True)
@tag_registry.register("ReferenceableGridCoverage")
class GmlReferenceableGridCoverage(GmlCoverage):
    """A coverage with an irregular grid.
    Only the grid limits are read, not the georeferencing of the grid.
    """

    domain_set: GmlGrid
    domain_type = GmlGrid

    @classmethod
    def domain_from_xml(cls, domain_set: NSElement, version: GmlVersion) -> GmlObject:
        # The <gmlrgrid:ReferenceableGridBy...> elements also have the grid limits.
        for child in domain_set:
            if child.local_name.startswith("ReferenceableGrid"):
                return GmlGrid.from_xml(child, version)
        return super().domain_from_xml(domain_set, version)


@dataclass(frozen=True)
@tag_registry.register("MultiPointCoverage")
class GmlMultiPointCoverage(GmlCoverage):
    """A coverage of scattered points. This coverage has no grid."""

    domain_set: GmlMultiPoint
    domain_type = GmlMultiPoint
