"""XML parsing for all incoming documents.

This logic uses the etree logic from the standard library,
with some extra extensions to expose the original namespace aliases.
Using defusedxml, incoming DOS attacks are prevented.

The elements are translated into Python objects by the classes
registered in the :mod:`gmlconvert.parsers.ast` module.
"""

from __future__ import annotations

import logging
import typing
from enum import Enum
from xml.etree.ElementTree import Element, TreeBuilder

from defusedxml.ElementTree import DefusedXMLParser, ParseError

from gmlconvert.exceptions import ExternalParsingError, wrap_parser_errors

logger = logging.getLogger(__name__)

__all__ = (
    "xmlns",
    "NSElement",
    "parse_xml_from_string",
    "split_ns",
    "is_gml_namespace",
)

GML_LEGACY_NAMESPACE = "http://www.opengis.net/gml"
_ANY_GML_NS = "http://www.opengis.net/gml/"


class xmlns(Enum):
    """Common namespaces within GML land.
    Note these short aliases are arbitrary in XML syntax; the XML code may use any alias (such as ns0).
    The full qualified name (e.g. ``<{http://www.opengis.net/gml/3.2}Point>``) is the actual tag name.
    """

    # XML standard
    xml = "http://www.w3.org/XML/1998/namespace"
    xsi = "http://www.w3.org/2001/XMLSchema-instance"
    xlink = "http://www.w3.org/1999/xlink"

    # APIs by the Open Geospatial Consortium (OGC)
    ows10 = "http://www.opengis.net/ows"  # OGC Web Service (OWS) base classes
    ows11 = "http://www.opengis.net/ows/1.1"
    ows20 = "http://www.opengis.net/ows/2.0"
    wfs1 = "http://www.opengis.net/wfs"
    wfs20 = "http://www.opengis.net/wfs/2.0"  # Web Feature Service (WFS)
    gml21 = GML_LEGACY_NAMESPACE  # also used by GML 3.0 and 3.1
    gml32 = "http://www.opengis.net/gml/3.2"
    gml33 = "http://www.opengis.net/gml/3.3"
    gmlcov = "http://www.opengis.net/gmlcov/1.0"  # Coverage implementation schema
    swe20 = "http://www.opengis.net/swe/2.0"  # SWE Common, used for the coverage rangeType

    # Internal aliases
    ows = ows11
    wfs = wfs20
    gml = gml32  # alias to latest version
    swe = swe20

    def __str__(self):
        # Python 3.11+ has StrEnum for this.
        return self.value

    def qname(self, local_name) -> str:
        """Convert the tag name into a fully qualified name."""
        return f"{{{self.value}}}{local_name}"  # same as QName(..).text


def is_gml_namespace(namespace: str | None) -> bool:
    """Tell whether the namespace is any of the GML namespaces.
    Note the ``gmlcov`` namespace is not GML, even though it has the same prefix.
    """
    if not namespace:
        return False
    return namespace == GML_LEGACY_NAMESPACE or namespace.startswith(_ANY_GML_NS)


class NSElement(Element):
    """Custom XML element, which also exposes its original namespace aliases.
    That information is needed to find which alias a document uses for GML,
    and to report errors using the prefixes that the document used.

    As the same GML tag name exists in multiple namespaces
    (e.g. ``http://www.opengis.net/gml`` and ``http://www.opengis.net/gml/3.2``),
    this element also offers lookups by the local name of a tag.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.ns_aliases = {}  # assigned by NSTreeBuilder, in {prefix: uri} format.

    @property
    def namespace(self) -> str | None:
        """Provide the namespace URI of this tag."""
        return split_ns(self.tag)[0]

    @property
    def local_name(self) -> str:
        """Provide the tag name without its namespace."""
        return split_ns(self.tag)[1]

    @property
    def qname(self) -> str:
        """Provde the tag name in its original short format"""
        ns, localname = split_ns(self.tag)
        if ns:
            for prefix, full_ns in self.ns_aliases.items():
                if full_ns == ns:
                    return f"{prefix}:{localname}" if prefix else localname
        return localname

    @property
    def is_gml(self) -> bool:
        """Tell whether the element is a GML element (of any version)."""
        return is_gml_namespace(self.namespace)

    @property
    def is_nil(self) -> bool:
        """Tell whether the element is marked as ``xsi:nil="true"``."""
        return self.get(xmlns.xsi.qname("nil")) in ("true", "1")

    def find_local(self, *local_names: str) -> NSElement | None:
        """Find the first child element that has one of the local names (in any namespace)."""
        for child in self:
            if split_ns(child.tag)[1] in local_names:
                return child
        return None

    def findall_local(self, *local_names: str) -> list[NSElement]:
        """Find all child elements with one of the local names (in any namespace).
        This always returns a list, regardless of how often the element occurs.
        """
        return [child for child in self if split_ns(child.tag)[1] in local_names]

    def findtext_local(self, local_name: str) -> str | None:
        """Find the text of the first child that has the given local name."""
        child = self.find_local(local_name)
        if child is None:
            return None
        return child.text or ""

    def get_int_attribute(self, name: str, default=None) -> int | None:
        """Retrieve the integer value from an element attribute."""
        value = self.attrib.get(name)
        if value is None:
            return default

        with wrap_parser_errors(name):
            return int(value)

    if typing.TYPE_CHECKING:
        # Make sure the type checking knows the actual type of the elements.
        def find(self, path: str, namespaces: dict[str, str] | None = None) -> NSElement | None:
            return super().find(path, namespaces)

        def findall(self, path: str, namespaces: dict[str, str] | None = None) -> list[NSElement]:
            return super().findall(path, namespaces)

        def iter(self, tag: str | None = None) -> typing.Iterator[NSElement]:
            return super().iter(tag)

        def __iter__(self) -> typing.Iterator[NSElement]:
            return super().__iter__()


class NSTreeBuilder(TreeBuilder):
    """Custom TreeBuilder to track namespaces."""

    def __init__(self, **kwargs):
        super().__init__(element_factory=NSElement, **kwargs)
        # A new stack level is added directly, as start_ns() is called before start()
        self.ns_stack = [{}]

    def start(self, tag, attrs):
        element = super().start(tag, attrs)
        self.ns_stack.append({})  # reserve stack for child tags
        return element

    def start_ns(self, prefix, uri):
        self.ns_stack[-1][prefix] = uri

    def end(self, tag) -> Element:
        element = super().end(tag)
        self.ns_stack.pop()  # clear reservation for child tags
        element.ns_aliases = self._flatten_ns()
        return element

    def _flatten_ns(self) -> dict:
        result = {}
        for level in self.ns_stack:
            result.update(level)
        return result


def parse_xml_from_string(xml_string: str | bytes) -> NSElement:
    """Provide a safe and consistent way for parsing XML.

    This uses a custom parser, so namespace aliases can be tracked.
    All elements also have an :attr:`ns_aliases` attribute that exposes
    the original alias that was used for the namespace.
    """
    # Passing a custom parser potentially circumvents defusedxml,
    # so note the parser is again configured in the same way:
    parser = DefusedXMLParser(
        target=NSTreeBuilder(),
        forbid_dtd=True,
        forbid_entities=True,
        forbid_external=True,
    )

    # Not allowing DTD, do a primitive strip, and allow parsing to fail if it was mangled.
    # Documents often start with whitespace when they're embedded in other text.
    xml_string = xml_string.lstrip()
    if isinstance(xml_string, str) and xml_string.startswith("<?"):
        xml_string = xml_string[xml_string.find("?>") + 2 :]

    try:
        parser.feed(xml_string)
        return parser.close()
    except ParseError as e:
        # Offer consistent results for callers to check for invalid data.
        logger.debug("Parsing XML error: %s: %s", e, xml_string)
        raise ExternalParsingError(str(e)) from e


def split_ns(xml_name: str) -> tuple[str | None, str]:
    """Split the element tag or attribute/text value into the namespace and
    local name. The stdlib etree doesn't have the properties for this (lxml does).
    """
    # Tags may start with a `{ns}`
    if xml_name.startswith("{"):
        end = xml_name.index("}")
        return xml_name[1:end], xml_name[end + 1 :]
    else:
        return None, xml_name
