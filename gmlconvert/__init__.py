"""Parse GML 2.1.2 up to 3.3, and convert between GML versions."""

__version__ = "0.9.0"

from .convert import ConvertOptions, convert_gml, convert_object, parse_gml  # noqa: E402
from .types import GmlVersion  # noqa: E402

__all__ = (
    "ConvertOptions",
    "GmlVersion",
    "convert_gml",
    "convert_object",
    "parse_gml",
)
