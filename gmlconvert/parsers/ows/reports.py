"""Reading the ``<ows:ExceptionReport>`` that services return instead of data.

A WFS or WCS server reports a failed request as::

    <ows:ExceptionReport xmlns:ows="http://www.opengis.net/ows/1.1" version="2.0.0">
      <ows:Exception exceptionCode="InvalidParameterValue" locator="typeNames">
        <ows:ExceptionText>Unknown feature type</ows:ExceptionText>
      </ows:Exception>
    </ows:ExceptionReport>

See: https://schemas.opengis.net/ows/1.1.0/owsExceptionReport.xsd
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.utils.html import format_html, format_html_join

from gmlconvert.exceptions import InvalidXmlElement
from gmlconvert.parsers.xml import NSElement

logger = logging.getLogger(__name__)

__all__ = (
    "OwsException",
    "OwsExceptionReport",
    "parse_exception_report",
    "is_exception_report",
    "find_exception_report",
)

REPORT_TAG = "ExceptionReport"


def is_exception_report(text: str | bytes) -> bool:
    """Quick check whether the raw text holds an exception report, without parsing it."""
    if isinstance(text, bytes):
        return b"<ows:ExceptionReport" in text or b"<ExceptionReport" in text
    return "<ows:ExceptionReport" in text or "<ExceptionReport" in text


def find_exception_report(root: NSElement) -> NSElement | None:
    """Find the report element, which can be the root or be wrapped (e.g. in a ``<soap:Body>``)."""
    for element in root.iter():
        if element.local_name == REPORT_TAG:
            return element
    return None


@dataclass(frozen=True)
class OwsException:
    """A single ``<ows:Exception>`` of the report."""

    exception_code: str
    locator: str | None = None
    exception_text: tuple[str, ...] = ()

    @classmethod
    def from_xml(cls, element: NSElement):
        return cls(
            exception_code=element.get("exceptionCode") or "Unknown",
            locator=element.get("locator"),
            exception_text=tuple(
                (text.text or "").strip() for text in element.findall_local("ExceptionText")
            ),
        )

    def as_xml(self) -> str:
        """Serialize the exception to an XML string."""
        return format_html(
            '  <ows:Exception exceptionCode="{code}"{locator_attr}>\n{texts}  </ows:Exception>\n',
            code=self.exception_code,
            locator_attr=(
                format_html(' locator="{locator}"', locator=self.locator) if self.locator else ""
            ),
            texts=format_html_join(
                "",
                "    <ows:ExceptionText>{}</ows:ExceptionText>\n",
                ((text,) for text in self.exception_text),
            ),
        )


@dataclass(frozen=True)
class OwsExceptionReport:
    """The complete ``<ows:ExceptionReport>``, with the exceptions in document order."""

    version: str = "1.0.0"
    exceptions: tuple[OwsException, ...] = ()

    @classmethod
    def from_xml(cls, element: NSElement):
        if element.local_name != REPORT_TAG:
            raise InvalidXmlElement(f"Expected an <ows:ExceptionReport>, got <{element.qname}>.")

        return cls(
            version=element.get("version") or "1.0.0",
            exceptions=tuple(
                OwsException.from_xml(child) for child in element.findall_local("Exception")
            ),
        )

    def as_xml(self) -> str:
        """Serialize the report again, using the OWS 1.1 namespace."""
        return format_html(
            "<ows:ExceptionReport"
            ' xmlns:ows="http://www.opengis.net/ows/1.1"'
            ' xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"'
            ' xsi:schemaLocation="http://www.opengis.net/ows/1.1'
            ' http://schemas.opengis.net/ows/1.1.0/owsExceptionReport.xsd"'
            ' version="{version}">\n'
            "{exceptions}"
            "</ows:ExceptionReport>\n",
            version=self.version,
            exceptions=format_html_join(
                "", "{}", ((exception.as_xml(),) for exception in self.exceptions)
            ),
        )


def parse_exception_report(root: NSElement) -> OwsExceptionReport:
    """Read the exception report from a parsed document.

    :raises InvalidXmlElement: When the document has no ``<ExceptionReport>`` element.
    """
    element = find_exception_report(root)
    if element is None:
        raise InvalidXmlElement(f"Not an OWS Exception Report: <{root.qname}>.")

    report = OwsExceptionReport.from_xml(element)
    logger.debug(
        "Received OWS Exception Report %s with %d exception(s)",
        report.version,
        len(report.exceptions),
    )
    return report
