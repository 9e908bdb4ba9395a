"""Exceptions for parsing and converting GML.

All errors caused by the input document inherit from :class:`ExternalParsingError`,
which is a :class:`ValueError`. A service error report (``<ows:ExceptionReport>``)
is not a parsing problem; it's raised as :class:`OwsExceptionError` that carries
the complete report.
"""

from __future__ import annotations

import logging
import typing
from contextlib import contextmanager

if typing.TYPE_CHECKING:
    from gmlconvert.parsers.ows import OwsExceptionReport

logger = logging.getLogger(__name__)

__all__ = (
    "wrap_parser_errors",
    "ExternalParsingError",
    "XmlElementNotSupported",
    "InvalidXmlElement",
    "NoNamespaceFound",
    "UnsupportedSourceVersion",
    "UnsupportedTargetVersion",
    "MalformedCoordinates",
    "UnsupportedGeometryType",
    "UnsupportedCoverageType",
    "OwsExceptionError",
)


@contextmanager
def wrap_parser_errors(name: str):
    """Convert the value into a Python format.
    This catches any typical exceptions and transforms them into an ExternalParsingError.
    """
    try:
        yield
    except ExternalParsingError:
        raise
    except (TypeError, ValueError) as e:
        # TypeError/ValueError are raised by int() / float() for unexpected data
        raise ExternalParsingError(f"Invalid {name} value: {e}") from e


class ExternalParsingError(ValueError):
    """Raise a ValueError for a parsing problem.
    This helps to distinguish between internal bugs
    (e.g. unpacking values) and malformed external input.
    """


class XmlElementNotSupported(ExternalParsingError):
    """Raise a ValueError when an XML tag is not known by the parser at all."""


class InvalidXmlElement(ExternalParsingError):
    """Raise a ValueError when a particular XML tag wasn't expected."""


class NoNamespaceFound(ExternalParsingError):
    """The document doesn't contain any element in a GML namespace."""


class UnsupportedSourceVersion(ExternalParsingError):
    """The requested input version is not a known GML version."""


class UnsupportedTargetVersion(ExternalParsingError):
    """The requested output version can't be generated."""


class MalformedCoordinates(ExternalParsingError):
    """The coordinate text doesn't form complete tuples of the same size."""


class UnsupportedGeometryType(XmlElementNotSupported):
    """The GML element is not a geometry (or other object) this package can handle."""


class UnsupportedCoverageType(ExternalParsingError):
    """The coverage lacks the grid that an operation requires."""


class OwsExceptionError(Exception):
    """The service returned an ``<ows:ExceptionReport>`` instead of data.

    The complete report is available as :attr:`report`,
    so callers can show the service error instead of a parsing failure.
    """

    def __init__(self, report: OwsExceptionReport):
        first = report.exceptions[0] if report.exceptions else None
        if first is not None:
            message = f"OWS Exception [{first.exception_code}]: {', '.join(first.exception_text)}"
        else:
            message = "OWS Exception Report received"

        super().__init__(message)
        self.report = report

    def all_messages(self) -> str:
        """Format all exceptions of the report, one per line."""
        lines = []
        for exception in self.report.exceptions:
            locator = f" [{exception.locator}]" if exception.locator else ""
            lines.append(
                f"{exception.exception_code}{locator}: {', '.join(exception.exception_text)}"
            )
        return "\n".join(lines)
