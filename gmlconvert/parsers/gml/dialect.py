"""Detecting the GML version of a document.

The version is read from the namespace of the first GML element. Note that
GML 2.1.2, 3.0 and 3.1 share the ``http://www.opengis.net/gml`` namespace,
so documents in that namespace are all read with the GML 2 assumptions;
the geometry parser still recognizes ``<gml:pos>`` and ``<gml:posList>`` elements in them.
"""

from __future__ import annotations

import logging

from gmlconvert import conf
from gmlconvert.exceptions import NoNamespaceFound
from gmlconvert.parsers.xml import GML_LEGACY_NAMESPACE, NSElement, is_gml_namespace
from gmlconvert.types import GmlVersion

logger = logging.getLogger(__name__)

__all__ = (
    "detect_gml_version",
    "find_gml_namespace",
    "version_from_namespace",
)

# The order matters, the first match wins.
NAMESPACE_VERSIONS = (
    ("/gml/3.3", GmlVersion.V3_3),
    ("/gml/3.2", GmlVersion.V3_2),
    ("/gml/3.1", GmlVersion.V3_1),
    ("/gml/3.0", GmlVersion.V3_0),
)


def detect_gml_version(root: NSElement) -> GmlVersion:
    """Tell which GML version the document uses.

    :raises NoNamespaceFound: When no GML element exists in the document.
    """
    namespace = find_gml_namespace(root)
    if namespace is None:
        raise NoNamespaceFound(f"No GML namespace found in <{root.qname}> document.")

    version = version_from_namespace(namespace)
    logger.debug("Detected GML %s from namespace %s", version, namespace)
    return version


def find_gml_namespace(root: NSElement) -> str | None:
    """Find the namespace of the first GML element, in document order.
    When no element uses GML, a declared ``gml`` prefix is used instead.
    """
    for element in root.iter():
        namespace = element.namespace
        if is_gml_namespace(namespace):
            return namespace

    for element in root.iter():
        namespace = element.ns_aliases.get("gml")
        if is_gml_namespace(namespace):
            return namespace

    return None


def version_from_namespace(namespace: str) -> GmlVersion:
    """Translate the GML namespace URI into the version.
    Unknown GML namespaces are assumed to follow the latest version.
    """
    for fragment, version in NAMESPACE_VERSIONS:
        if fragment in namespace:
            return version

    if namespace == GML_LEGACY_NAMESPACE:
        return GmlVersion.V2_1_2

    return GmlVersion.from_string(conf.GMLCONVERT_FALLBACK_VERSION)
