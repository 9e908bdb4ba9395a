"""The GML versions (dialects) that can be read and written."""

from __future__ import annotations

from enum import Enum

from gmlconvert.exceptions import UnsupportedSourceVersion, UnsupportedTargetVersion

__all__ = (
    "GmlVersion",
    "OUTPUT_VERSIONS",
)


class GmlVersion(Enum):
    """The GML dialect a geometry or feature was encoded in.

    GML 2.1.2 writes coordinates as comma-separated tuples (``<gml:coordinates>10,20</...>``),
    GML 3.x writes a flat whitespace-separated list (``<gml:posList>10 20</...>``)
    that is grouped by the ``srsDimension``.
    """

    V2_1_2 = "2.1.2"
    V3_0 = "3.0"
    V3_1 = "3.1"
    V3_2 = "3.2"
    V3_3 = "3.3"

    def __str__(self):
        # Python 3.11+ has StrEnum for this.
        return self.value

    @classmethod
    def from_string(cls, value: GmlVersion | str) -> GmlVersion:
        """Resolve the version from the string notation, e.g. ``"3.2"``."""
        if isinstance(value, GmlVersion):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedSourceVersion(f"Unsupported GML version: {value!r}") from None

    @classmethod
    def as_output_version(cls, value: GmlVersion | str) -> GmlVersion:
        """Resolve the version, and check whether it can be used to write GML."""
        try:
            version = cls(value) if not isinstance(value, GmlVersion) else value
        except ValueError:
            version = None

        if version not in OUTPUT_VERSIONS:
            allowed = ", ".join(v.value for v in OUTPUT_VERSIONS)
            raise UnsupportedTargetVersion(
                f"Unsupported target GML version: {str(value)!r}, expected one of: {allowed}."
            )
        return version

    @property
    def is_legacy(self) -> bool:
        """Tell whether this is the GML 2 dialect with comma-separated tuples."""
        return self is GmlVersion.V2_1_2


#: The versions that the re-encoder can produce.
OUTPUT_VERSIONS = (GmlVersion.V2_1_2, GmlVersion.V3_2)
