"""All parser logic to process incoming XML data.

This handles all tags, including:

* ``<gml:...>`` of all GML versions.
* ``<gmlcov:...>`` and ``<swe:...>`` of coverages.
* ``<ows:ExceptionReport>`` returned by services.

Internally, the XML string is translated into a tree of frozen dataclasses.
"""

from .documents import DocumentKind, classify_document, parse_document_element, parse_gml

__all__ = (
    "DocumentKind",
    "classify_document",
    "parse_document_element",
    "parse_gml",
)
