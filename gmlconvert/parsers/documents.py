"""Reading complete documents.

A document is first classified, as services return an ``<ows:ExceptionReport>``
instead of the requested data when something went wrong. Only after that,
the GML version is detected and the GML objects are parsed.
"""

from __future__ import annotations

import logging
from enum import Enum

from gmlconvert.exceptions import NoNamespaceFound, OwsExceptionError, UnsupportedGeometryType
from gmlconvert.parsers.ast import tag_registry
from gmlconvert.parsers.gml import (
    GmlFeature,
    GmlFeatureCollection,
    GmlObject,
    detect_gml_version,
    is_feature_collection,
)
from gmlconvert.parsers.gml.dialect import find_gml_namespace
from gmlconvert.parsers.gml.features import FEATURE_MEMBER_TAGS, find_geometry
from gmlconvert.parsers.ows import find_exception_report, parse_exception_report
from gmlconvert.parsers.xml import NSElement, parse_xml_from_string
from gmlconvert.types import GmlVersion

logger = logging.getLogger(__name__)

__all__ = (
    "DocumentKind",
    "classify_document",
    "parse_gml",
    "parse_document_element",
)


class DocumentKind(Enum):
    """What kind of content a document holds."""

    GEOMETRY = "geometry"
    EXCEPTION_REPORT = "exception_report"
    UNKNOWN = "unknown"


def classify_document(root: NSElement) -> DocumentKind:
    """Tell what the document contains. This never raises an exception."""
    if find_exception_report(root) is not None:
        return DocumentKind.EXCEPTION_REPORT
    elif find_gml_namespace(root) is not None:
        return DocumentKind.GEOMETRY
    else:
        return DocumentKind.UNKNOWN


def parse_gml(text: str | bytes, version: GmlVersion | str | None = None) -> GmlObject:
    """Parse a GML document into the Python objects.

    :param text: The XML document.
    :param version: Force reading the document as this GML version, instead of detecting it.
    :raises OwsExceptionError: When the document is an exception report.
    :raises ExternalParsingError: When the document can't be parsed.
    """
    root = parse_xml_from_string(text)
    return parse_document_element(root, version)


def parse_document_element(root: NSElement, version: GmlVersion | str | None = None) -> GmlObject:
    """Parse the root element of a GML document."""
    kind = classify_document(root)
    if kind is DocumentKind.EXCEPTION_REPORT:
        raise OwsExceptionError(parse_exception_report(root))
    elif kind is DocumentKind.UNKNOWN:
        raise NoNamespaceFound(f"No GML namespace found in <{root.qname}> document.")

    if version is None:
        version = detect_gml_version(root)
    else:
        version = GmlVersion.from_string(version)

    return _parse_root_object(root, version)


def _parse_root_object(root: NSElement, version: GmlVersion) -> GmlObject:
    # A collection anywhere wins, e.g. inside a <soap:Body> envelope.
    for element in root.iter():
        if is_feature_collection(element):
            return GmlFeatureCollection.from_xml(element, version)

    if tag_registry.can_parse(root, allowed_types=(GmlObject,)):
        return tag_registry.node_from_xml(root, version, allowed_types=(GmlObject,))

    if root.local_name in FEATURE_MEMBER_TAGS and len(root):
        return GmlFeature.from_xml(root[0], version)

    if root.is_gml:
        # Unknown GML element, this raises the error with all supported elements.
        tag_registry.resolve_class(root, allowed_types=(GmlObject,))

    geometry, _ = find_geometry(root)
    if geometry is not None:
        return GmlFeature.from_xml(root, version)

    for element in root.iter():
        if tag_registry.can_parse(element, allowed_types=(GmlObject,)):
            return tag_registry.node_from_xml(element, version, allowed_types=(GmlObject,))

    raise UnsupportedGeometryType(f"No supported GML element found in <{root.qname}> document.")
