"""Reading the coordinate text of GML elements.

GML has two ways to write coordinates:

* ``<gml:coordinates>10,20 30,40</gml:coordinates>`` (GML 2 style): tuples separated by
  whitespace (the ``ts`` attribute), ordinates separated by commas (the ``cs`` attribute).
* ``<gml:posList srsDimension="2">10 20 30 40</gml:posList>`` (GML 3 style): a flat list
  of numbers, which is grouped into tuples by the ``srsDimension``.

Both forms produce a list of tuples.
"""

from __future__ import annotations

import logging

from gmlconvert import conf
from gmlconvert.exceptions import MalformedCoordinates
from gmlconvert.types import GmlVersion

logger = logging.getLogger(__name__)

Coordinate = tuple[float, ...]

__all__ = (
    "Coordinate",
    "check_dimensions",
    "parse_coordinates",
    "parse_tuples",
    "parse_pos_list",
    "parse_pos",
)


def parse_coordinates(
    text: str, version: GmlVersion | str, srs_dimension: int = 2
) -> list[Coordinate]:
    """Parse the coordinate text as the given GML version would write it.

    For GML 2.1.2, the text contains comma-separated tuples.
    The tuple size is taken from the text itself, not from the ``srs_dimension``.

    For GML 3.x, the text is a flat list of numbers that is grouped per ``srs_dimension``.
    With 2 ordinates, this gives the same list of pairs as the GML 2 notation.
    """
    version = GmlVersion.from_string(version)
    if version.is_legacy:
        return parse_tuples(text)
    else:
        return parse_pos_list(text, srs_dimension)


def parse_tuples(text: str, cs: str = ",", ts: str = " ", decimal: str = ".") -> list[Coordinate]:
    """Parse the ``<gml:coordinates>`` notation. The arguments reflect the element attributes."""
    if not ts or ts.isspace():
        # Any whitespace is allowed, including newlines.
        tuple_texts = text.split()
    else:
        tuple_texts = [part.strip() for part in text.split(ts)]

    coordinates = [_to_numbers(tuple_text.split(cs), decimal) for tuple_text in tuple_texts if tuple_text]
    check_dimensions(coordinates, repr(text.strip()))
    return coordinates


def check_dimensions(coordinates, source: str) -> None:
    """Check that all positions of a geometry have the same number of ordinates.

    :param source: Describes where the coordinates came from, for the error message.
    :raises MalformedCoordinates: When the sizes differ, unless strict checking is disabled.
    """
    sizes = {len(coordinate) for coordinate in coordinates}
    if len(sizes) > 1:
        message = (
            f"Coordinate tuples have mixed dimensions ({', '.join(map(str, sorted(sizes)))})"
            f" in {source}"
        )
        if conf.GMLCONVERT_STRICT_COORDINATES:
            raise MalformedCoordinates(message)
        logger.warning("%s, keeping them as-is.", message)


def parse_pos_list(text: str, srs_dimension: int = 2) -> list[Coordinate]:
    """Parse the ``<gml:posList>`` notation, grouping the flat values per ``srs_dimension``."""
    if srs_dimension < 1:
        raise MalformedCoordinates(f"Invalid srsDimension: {srs_dimension}")

    values = _to_numbers(text.split())
    end = len(values)
    remainder = end % srs_dimension
    if remainder:
        message = (
            f"Coordinate list of {end} values doesn't form tuples of {srs_dimension} values"
        )
        if conf.GMLCONVERT_STRICT_COORDINATES:
            raise MalformedCoordinates(message)

        logger.warning("%s, ignoring the last %d value(s).", message, remainder)
        end -= remainder

    return [tuple(values[i : i + srs_dimension]) for i in range(0, end, srs_dimension)]


def parse_pos(text: str, srs_dimension: int | None = None) -> Coordinate:
    """Parse a single position (``<gml:pos>``, ``<gml:lowerCorner>``, etc..)

    When an ``srs_dimension`` is declared, the position should have that many values.
    """
    values = _to_numbers(text.split())
    if not values:
        raise MalformedCoordinates("Empty position, expected at least one value.")

    if srs_dimension is not None and len(values) != srs_dimension:
        message = f"Position of {len(values)} values doesn't match the srsDimension {srs_dimension}"
        if conf.GMLCONVERT_STRICT_COORDINATES:
            raise MalformedCoordinates(message)
        logger.warning("%s, keeping it as-is.", message)

    return values


def _to_numbers(parts: list[str], decimal: str = ".") -> tuple[float, ...]:
    try:
        if decimal != ".":
            return tuple(float(part.replace(decimal, ".")) for part in parts)
        return tuple(float(part) for part in parts)
    except ValueError:
        raise MalformedCoordinates(f"Coordinates contain non-numeric values: {parts!r}") from None
