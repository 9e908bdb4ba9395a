"""Utilities for translating XML elements into Python objects.

Python classes can inherit :class:`AstNode` and register themselves as the parser
for a given tag. The custom ``from_xml()`` method copies the XML data into the
attributes of a (frozen) dataclass.

Next, when :meth:`TagRegistry.node_from_xml` is called,
it will detect which class the XML Element refers to and initialize it using the ``from_xml()`` call.
As convenience, calling a :meth:`AstNode.child_from_xml`
on a subclass will also initialize the right subclass.

Unlike most XML languages, the same GML tag exists in multiple namespaces:
``http://www.opengis.net/gml`` for GML 2.1.2 up to 3.1 and ``http://www.opengis.net/gml/3.2``
for GML 3.2 and 3.3. Hence, the tags are registered by their local name,
and each class tells which namespaces it accepts.
"""

from __future__ import annotations

from functools import wraps
from typing import TypeVar

from django.utils.functional import classproperty

from gmlconvert.exceptions import InvalidXmlElement, UnsupportedGeometryType
from gmlconvert.parsers.xml import NSElement, is_gml_namespace, split_ns
from gmlconvert.types import GmlVersion

__all__ = (
    "AstNode",
    "TagRegistry",
    "tag_registry",
    "expect_tag",
)


class AstNode:
    """The base node for all classes that represent an XML tag.

    Each subclass should implement the :meth:`from_xml` to translate
    an XML tag into a Python (data) class.
    """

    _xml_tags = []

    @classproperty
    def xml_name(cls) -> str:
        """Tell the default tag by which this class is registered"""
        return cls._xml_tags[0]

    xml_name.__doc__ = "Tell the default tag by which this class is registered"

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        # Each class level has a fresh list of supported child tags.
        cls._xml_tags = []

    @classmethod
    def accepts_namespace(cls, namespace: str | None) -> bool:
        """Tell whether the tag may appear in the given namespace. By default, any GML version."""
        return is_gml_namespace(namespace)

    @classmethod
    def from_xml(cls, element: NSElement, version: GmlVersion):
        """Initialize this Python class from the data of the corresponding XML tag.
        Each subclass overrides this to implement the XML parsing of that particular XML tag.
        """
        raise NotImplementedError(
            f"{cls.__name__}.from_xml() is not implemented to parse <{element.tag}>"
        )

    @classmethod
    def child_from_xml(cls, element: NSElement, version: GmlVersion) -> AstNode:
        """Parse the element, returning the correct subclass of this tag.

        When ``GmlGeometry.child_from_xml(some_node)`` is given, it may
        return a ``GmlPoint``, ``GmlPolygon``, etc.
        """
        sub_class = tag_registry.resolve_class(element, allowed_types=(cls,))
        return sub_class.from_xml(element, version)

    @classmethod
    def get_tag_names(cls) -> list[str]:
        """Provide all known XML tags that this code can parse."""
        all_xml_tags = cls._xml_tags.copy()
        for sub_cls in cls.__subclasses__():
            all_xml_tags.extend(sub_cls.get_tag_names())
        return all_xml_tags


A = TypeVar("A", bound=AstNode)


class TagRegistry:
    """Registration of all classes that can parse XML nodes.

    The same class can be registered multiple times for different tag names.
    """

    parsers: dict[str, type[AstNode]]

    def __init__(self):
        self.parsers = {}

    def register(self, tag: str | None = None, hidden: bool = False):
        """Decorator to register a class as XML element parser.

        Usage:

        .. code-block:: python

            @dataclass(frozen=True)
            @tag_registry.register("Point")
            class GmlPoint(GmlGeometry):
                @classmethod
                def from_xml(cls, element: NSElement, version: GmlVersion):
                    return cls(
                        ...
                    )

        Whenever an element of the registered XML name is found,
        the given class will be initialized.
        Hidden tags can be parsed, but are not listed by :meth:`AstNode.get_tag_names`.
        """

        def _dec(node_class: type[AstNode]) -> type[AstNode]:
            self._register_tag_parser(node_class, tag=tag or node_class.__name__, hidden=hidden)
            return node_class

        return _dec

    def _register_tag_parser(self, node_class: type[AstNode], tag: str, hidden: bool = False):
        """Register a Python (data) class as parser for an XML node."""
        if not issubclass(node_class, AstNode):
            raise TypeError(f"{node_class} must be a subclass of AstNode")

        if tag in self.parsers:
            raise RuntimeError(f"Another class is already registered to parse the <{tag}> tag.")

        self.parsers[tag] = node_class  # Track this parser to resolve the tag.
        if not hidden:
            node_class._xml_tags.append(tag)  # Allow fetching all names later

    def can_parse(self, element: NSElement, allowed_types: tuple[type[A]] | None = None) -> bool:
        """Tell whether the element is handled by a registered class."""
        namespace, local_name = split_ns(element.tag)
        node_class = self.parsers.get(local_name)
        if node_class is None or not node_class.accepts_namespace(namespace):
            return False
        return allowed_types is None or issubclass(node_class, allowed_types)

    def node_from_xml(
        self,
        element: NSElement,
        version: GmlVersion,
        allowed_types: tuple[type[A]] | None = None,
    ) -> A:
        """Find the ``AstNode`` subclass that corresponds to the given XML element,
        and initialize it with the element. This is a convenience shortcut.
        """
        node_class = self.resolve_class(element, allowed_types)
        return node_class.from_xml(element, version)

    def resolve_class(
        self, element: NSElement, allowed_types: tuple[type[A]] | None = None
    ) -> type[A]:
        """Find the :class:`AstNode` subclass that corresponds to the given XML element."""
        namespace, local_name = split_ns(element.tag)
        node_class = self.parsers.get(local_name)
        if node_class is None or not node_class.accepts_namespace(namespace):
            msg = f"Unsupported GML element: <{element.qname}>"
            if namespace is None:
                msg = f"{msg} without an XML namespace"
            if allowed_types:
                allowed = _tag_names_to_text(_get_allowed_tag_names(*allowed_types))
                msg = f"{msg}, expected one of: {allowed}."

            raise UnsupportedGeometryType(msg)

        # Check whether the resolved class is indeed a valid option here.
        if allowed_types is not None and not issubclass(node_class, allowed_types):
            types = ", ".join(c.__name__ for c in allowed_types)
            raise InvalidXmlElement(
                f"Unexpected {node_class.__name__} for <{element.qname}> node, "
                f"expected one of: {types}"
            )

        return node_class


def expect_tag(*tag_names: str):
    """Decorator for ``from_xml()`` methods that validate whether a given tag is provided.

    For example:

    .. code-block:: python

        @classmethod
        @expect_tag("Envelope")
        def from_xml(cls, element, version):
            ...

    This guard is needed when nodes are passed directly to a ``from_xml()`` method.
    """
    valid_tags = set(tag_names)

    def _wrapper(func):
        @wraps(func)
        def _expect_tag_decorator(cls, element: NSElement, *args, **kwargs):
            if element.local_name not in valid_tags:
                raise InvalidXmlElement(
                    f"{cls.__name__} parser expects an <{tag_names[0]}> node,"
                    f" got <{element.qname}>"
                )
            return func(cls, element, *args, **kwargs)

        return _expect_tag_decorator

    return _wrapper


def _get_allowed_tag_names(*expect_types: type[AstNode]) -> list[str]:
    # Resolve arguments later, as get_tag_names() depends on __subclasses__()
    # which may not be completely known at this point.
    tag_names = []
    for child_type in expect_types:
        if isinstance(child_type, type) and issubclass(child_type, AstNode):
            tag_names.extend(child_type.get_tag_names())
        else:
            raise TypeError(f"Unexpected {child_type!r}")
    return tag_names


def _tag_names_to_text(tag_names: list[str]) -> str:
    body = ">, <".join(sorted(tag_names))
    return f"<{body}>"


#: The tag registry to register new parsing classes at.
tag_registry = TagRegistry()
