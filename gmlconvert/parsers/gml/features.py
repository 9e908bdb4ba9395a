"""Parsing of features and feature collections.

A feature is any element that holds a GML geometry, either directly or inside a property element::

    <gml:featureMember>
      <app:Building gml:id="building.1">
        <app:name>Town hall</app:name>
        <app:geometry>
          <gml:Point><gml:pos>10 20</gml:pos></gml:Point>
        </app:geometry>
      </app:Building>
    </gml:featureMember>

All other child elements are read as properties.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from gmlconvert.exceptions import ExternalParsingError
from gmlconvert.parsers.ast import tag_registry
from gmlconvert.parsers.xml import NSElement
from gmlconvert.types import GmlVersion

from .base import GmlGeometry, GmlObject, get_gml_id
from .geometries import GmlBox, GmlEnvelope, is_geometry_element, parse_bounded_by

__all__ = (
    "GmlFeature",
    "GmlFeatureCollection",
    "find_geometry",
    "freeze_value",
    "is_feature_collection",
    "parse_properties",
)

FEATURE_MEMBER_TAGS = ("featureMember", "member")
FEATURE_CONTAINER_TAGS = ("featureMembers",)


def is_feature_collection(element: NSElement) -> bool:
    """Tell whether the element is a collection, e.g. ``<wfs:FeatureCollection>``."""
    return element.local_name.endswith("FeatureCollection")


def parse_properties(elements) -> Mapping:
    """Read the property elements of a feature.

    Leaf elements give their text, elements with children give a nested mapping,
    and properties that occur multiple times are collected in a tuple.
    The result is read-only, like the rest of the parsed objects.
    """
    properties = {}
    for child in elements:
        name = child.local_name
        value = _get_value(child)
        if name not in properties:
            properties[name] = value
        elif isinstance(properties[name], list):
            properties[name].append(value)
        else:
            properties[name] = [properties[name], value]
    return freeze_value(properties)


def freeze_value(value):
    """Turn the dicts and lists of a property value into read-only types."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze_value(item) for key, item in value.items()})
    elif isinstance(value, (list, tuple)):
        return tuple(freeze_value(item) for item in value)
    else:
        return value


def _get_value(element: NSElement):
    if element.is_nil:
        return None
    if len(element):
        return parse_properties(element)
    return (element.text or "").strip()


def find_geometry(element: NSElement) -> tuple[NSElement | None, NSElement | None]:
    """Find the geometry of a feature, and the property that wraps it."""
    for child in element:
        if child.local_name == "boundedBy":
            continue
        if is_geometry_element(child):
            return child, None
        if len(child) and is_geometry_element(child[0]):
            return child[0], child

    return None, None


@dataclass(frozen=True)
class GmlFeature(GmlObject):
    """A feature with a geometry and its properties.

    The ``type_name`` and ``geometry_name`` keep the local names
    of the feature element and the geometry property, so the feature
    can be written back with the same structure.

    The ``properties`` are a read-only mapping; dicts and lists passed
    to the constructor are converted into mappings and tuples.

    Only the first geometry of a feature is parsed as geometry.
    Any other geometry property is read like a plain nested property
    (e.g. ``{"Point": {"pos": "1 2"}}``), so it's written back without the
    GML prefix, and it's not converted to the requested GML version.
    """

    id: str | None
    geometry: GmlGeometry
    properties: Mapping = field(default_factory=dict)
    bounded_by: GmlEnvelope | GmlBox | None = None
    version: GmlVersion = GmlVersion.V3_2
    type_name: str = "Feature"
    geometry_name: str | None = None

    def __post_init__(self):
        # The dataclass is frozen, so the field can only be replaced this way.
        object.__setattr__(self, "properties", freeze_value(self.properties))

    @property
    def type(self) -> str:
        return "Feature"

    @classmethod
    def from_xml(cls, element: NSElement, version: GmlVersion):
        geometry_element, wrapper = find_geometry(element)
        if geometry_element is None:
            raise ExternalParsingError(f"No geometry found for feature <{element.qname}>.")

        geometry = tag_registry.node_from_xml(
            geometry_element, version, allowed_types=(GmlGeometry,)
        )
        return cls(
            id=get_gml_id(element),
            geometry=geometry,
            properties=parse_properties(
                child
                for child in element
                if child is not geometry_element
                and child is not wrapper
                and not (child.local_name == "boundedBy" and child.is_gml)
            ),
            bounded_by=parse_bounded_by(element, version),
            version=version,
            type_name=element.local_name,
            geometry_name=wrapper.local_name if wrapper is not None else None,
        )


@dataclass(frozen=True)
@tag_registry.register("FeatureCollection")
class GmlFeatureCollection(GmlObject):
    """A collection of features.

    Members are read from ``<gml:featureMember>`` and ``<wfs:member>`` elements,
    and from the ``<gml:featureMembers>`` container. Collections nested
    in a member (as WFS 2 does for joins) are flattened into this collection.
    """

    features: tuple[GmlFeature, ...]
    bounded_by: GmlEnvelope | GmlBox | None = None
    version: GmlVersion = GmlVersion.V3_2

    @classmethod
    def from_xml(cls, element: NSElement, version: GmlVersion):
        features = []
        for child in element:
            local_name = child.local_name
            if local_name in FEATURE_MEMBER_TAGS:
                members = child[:1]
            elif local_name in FEATURE_CONTAINER_TAGS:
                members = list(child)
            else:
                continue

            for member in members:
                if is_feature_collection(member):
                    features.extend(cls.from_xml(member, version).features)
                else:
                    features.append(GmlFeature.from_xml(member, version))

        return cls(
            features=tuple(features),
            bounded_by=parse_bounded_by(element, version),
            version=version,
        )
