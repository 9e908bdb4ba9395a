"""Generic Open Web Services (OWS) bits that are found in service responses.

Services like WFS and WCS return an exception report instead of the requested data
when a request fails. This is recognized before any GML parsing happens.
"""

from .reports import (
    OwsException,
    OwsExceptionReport,
    find_exception_report,
    is_exception_report,
    parse_exception_report,
)

__all__ = (
    "OwsException",
    "OwsExceptionReport",
    "find_exception_report",
    "is_exception_report",
    "parse_exception_report",
)
