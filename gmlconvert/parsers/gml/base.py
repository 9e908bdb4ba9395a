"""The base classes for GML objects.

All parsed objects are frozen dataclasses, so they can't be modified
after parsing. They all track the GML version they were read from.
"""

from __future__ import annotations

from dataclasses import KW_ONLY, dataclass

from gmlconvert.parsers.ast import AstNode
from gmlconvert.parsers.xml import NSElement, is_gml_namespace, split_ns
from gmlconvert.types import GmlVersion

__all__ = (
    "GmlObject",
    "GmlGeometry",
    "get_gml_id",
)


class GmlObject(AstNode):
    """Abstract base classes for all GML objects, regardless of their version."""

    @property
    def type(self) -> str:
        """The GML name of this object, e.g. ``Point``."""
        return self.xml_name


@dataclass(frozen=True)
class GmlGeometry(GmlObject):
    """Abstract base class for all geometries.

    The ``srs_name`` is kept as-is; coordinates are never transformed.
    """

    _: KW_ONLY
    srs_name: str | None = None
    version: GmlVersion = GmlVersion.V3_2


def get_gml_id(element: NSElement) -> str | None:
    """Read the ``gml:id`` attribute (GML 3), or the ``fid`` attribute (GML 2)."""
    for name, value in element.attrib.items():
        namespace, local_name = split_ns(name)
        if local_name == "id" and is_gml_namespace(namespace):
            return value

    return element.get("fid")
