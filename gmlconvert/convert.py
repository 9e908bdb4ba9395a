"""The entry points to convert GML documents between versions.

Usage:

.. code-block:: python

    from gmlconvert.convert import ConvertOptions, convert_gml

    gml2_text = convert_gml(gml32_text, ConvertOptions(output_version="2.1.2"))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from gmlconvert.output.gml import GmlRenderer
from gmlconvert.parsers.documents import parse_gml
from gmlconvert.parsers.gml import GmlObject
from gmlconvert.types import GmlVersion

logger = logging.getLogger(__name__)

__all__ = (
    "ConvertOptions",
    "convert_gml",
    "convert_object",
    "parse_gml",
)


@dataclass(frozen=True)
class ConvertOptions:
    """How the GML should be converted.

    :param output_version: The GML version to write (``2.1.2`` or ``3.2``).
    :param input_version: Read the input as this version, instead of detecting the version.
    :param pretty_print: Whether to indent the output.
    """

    output_version: GmlVersion | str
    input_version: GmlVersion | str | None = None
    pretty_print: bool = False


def convert_gml(text: str | bytes, options: ConvertOptions) -> str:
    """Convert a GML document into another GML version.

    :raises OwsExceptionError: When the document is an exception report.
    :raises ExternalParsingError: When the document can't be parsed or written.
    """
    # Fail early on the output version, before parsing the whole document.
    renderer = GmlRenderer(options.output_version, pretty_print=options.pretty_print)
    obj = parse_gml(text, version=options.input_version)
    logger.debug("Converting GML %s %s to GML %s", obj.version, obj.type, renderer.version)
    return renderer.render(obj)


def convert_object(obj: GmlObject, options: ConvertOptions) -> str:
    """Write an already parsed GML object as the requested GML version."""
    return GmlRenderer(options.output_version, pretty_print=options.pretty_print).render(obj)
