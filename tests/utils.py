from __future__ import annotations

import logging
from doctest import Example

from lxml import etree
from lxml.doctestcompare import PARSE_XML, LXMLOutputChecker

from gmlconvert.parsers.xml import xmlns

logger = logging.getLogger(__name__)

# Namespaces for tag retrieval
NAMESPACES = {
    "app": "http://example.org/gmlconvert",
    "gml": xmlns.gml32.value,
    "gml21": xmlns.gml21.value,
    "ows": xmlns.ows.value,
    "wfs": xmlns.wfs.value,
}

GML21_NS = f'xmlns:gml="{xmlns.gml21}"'
GML32_NS = f'xmlns:gml="{xmlns.gml32}"'
GML33_NS = 'xmlns:gml="http://www.opengis.net/gml/3.3"'

XML_NS_WFS = (
    f'xmlns:wfs="{xmlns.wfs}"'
    f' xmlns:gml="{xmlns.gml32}"'
    f' xmlns:app="http://example.org/gmlconvert"'
)


def parse_xml(xml_text: str) -> etree._Element:
    """Parse the XML with lxml, to prove the output is well-formed."""
    try:
        return etree.fromstring(xml_text.encode())
    except etree.XMLSyntaxError as err:
        source_lines = xml_text.splitlines()
        raise AssertionError(
            f"XML syntax error: {err} (source: {source_lines[err.lineno - 1].strip()})"
        ) from err


def assert_xml_equal(got: bytes | str, want: str):
    """Compare two XML strings."""
    checker = LXMLOutputChecker()

    if isinstance(want, str) and isinstance(got, bytes):
        got = got.decode()

    if not checker.check_output(want, got, PARSE_XML):
        example = Example("", "")
        example.want = want  # unencoded, avoid doctest for bytes type.
        message = checker.output_difference(example, got, PARSE_XML)
        raise AssertionError(message)
