"""General utilities for outputting XML content"""

import math

from gmlconvert.parsers.xml import xmlns

__all__ = (
    "attr_escape",
    "tag_escape",
    "format_number",
    "format_coordinate",
    "render_xmlns_attributes",
    "value_to_xml_string",
)


def tag_escape(s: str):
    """Escape a value for usage in XML text."""
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def attr_escape(s: str):
    """Escape a value for usage in an XML attribute.
    This is slightly faster than ``html.escape()`` as it doesn't replace single quotes.
    """
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def format_number(value: float) -> str:
    """Write a number in the shortest form that reads back to the same value.
    Whole numbers are written without a fraction, so ``10.0`` becomes ``10``.
    """
    if not isinstance(value, float):
        return str(value)
    elif value.is_integer():
        # Keep the sign of -0.0
        return str(int(value)) if value or math.copysign(1.0, value) > 0 else "-0"
    else:
        return repr(value)


def format_coordinate(coordinate, separator=" ") -> str:
    """Write the ordinates of a single position."""
    return separator.join(map(format_number, coordinate))


def value_to_xml_string(value) -> str:
    """Format a Python value for usage in XML text."""
    # Simple scalar value
    if isinstance(value, str):  # most cases
        return tag_escape(value)
    elif isinstance(value, bool):
        return "true" if value else "false"
    elif isinstance(value, float):
        return format_number(value)
    else:
        return tag_escape(str(value))


def render_xmlns_attributes(xml_namespaces: dict[str, str]):
    """Render XML Namespace declaration attributes, i.e. ``xmlns:prefix="uri"`` for each dict item."""
    return " ".join(
        f'xmlns:{prefix}="{xml_namespace}"' if prefix else f'xmlns="{xml_namespace}"'
        for prefix, xml_namespace in xml_namespaces.items()
    )


#: The namespace each output version writes.
GML_NAMESPACES = {
    "2.1.2": xmlns.gml21.value,
    "3.2": xmlns.gml32.value,
}
