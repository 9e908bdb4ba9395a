import logging

import pytest

from gmlconvert import ConvertOptions, GmlVersion, convert_gml, convert_object, parse_gml
from gmlconvert.exceptions import (
    ExternalParsingError,
    OwsExceptionError,
    UnsupportedTargetVersion,
)
from gmlconvert.parsers.gml import GmlPolygon
from tests.utils import GML21_NS, GML32_NS, assert_xml_equal, parse_xml


class TestConvertGml:
    """Prove that the complete conversion works for the common cases."""

    def test_gml32_to_gml21(self, gml32_polygon, caplog):
        with caplog.at_level(logging.DEBUG, logger="gmlconvert.convert"):
            output = convert_gml(gml32_polygon, ConvertOptions(output_version="2.1.2"))

        assert output.startswith("<gml:Polygon ")
        assert GML21_NS in output
        assert "<gml:coordinates>0,0 10,0 10,10 0,10 0,0</gml:coordinates>" in output
        assert "Converting GML 3.2 Polygon to GML 2.1.2" in caplog.text

    def test_gml21_to_gml32(self, gml21_polygon):
        output = convert_gml(
            gml21_polygon.encode(),
            ConvertOptions(output_version=GmlVersion.V3_2, pretty_print=True),
        )
        parse_xml(output)
        assert "\n  <gml:exterior>\n" in output
        assert GML32_NS in output

    def test_same_version(self, gml32_polygon):
        """Converting to the same version gives equivalent XML."""
        output = convert_gml(gml32_polygon, ConvertOptions(output_version="3.2"))
        assert_xml_equal(output, gml32_polygon)

    def test_input_version(self):
        """Prove that the input version can be forced."""
        output = convert_gml(
            f"<gml:Point {GML21_NS}><gml:pos>1 2</gml:pos></gml:Point>",
            ConvertOptions(output_version="2.1.2", input_version="3.1"),
        )
        assert "<gml:coordinates>1,2</gml:coordinates>" in output

    def test_feature_collection(self, wfs_feature_collection):
        output = convert_gml(wfs_feature_collection, ConvertOptions(output_version="2.1.2"))
        root = parse_xml(output)
        assert root.tag == "{http://www.opengis.net/gml}FeatureCollection"
        assert len(root) == 2

    def test_unsupported_target(self):
        """Prove that the output version is checked before parsing the input."""
        with pytest.raises(UnsupportedTargetVersion):
            convert_gml("not even XML", ConvertOptions(output_version="3.3"))

    def test_invalid_input(self):
        with pytest.raises(ExternalParsingError):
            convert_gml("not even XML", ConvertOptions(output_version="3.2"))

    def test_exception_report(self):
        with pytest.raises(OwsExceptionError, match=r"OWS Exception \[NoApplicableCode\]"):
            convert_gml(
                '<ows:ExceptionReport xmlns:ows="http://www.opengis.net/ows/1.1">'
                '<ows:Exception exceptionCode="NoApplicableCode">'
                "<ows:ExceptionText>Oops</ows:ExceptionText>"
                "</ows:Exception>"
                "</ows:ExceptionReport>",
                ConvertOptions(output_version="3.2"),
            )


def test_convert_object(gml21_polygon):
    polygon = parse_gml(gml21_polygon)
    assert isinstance(polygon, GmlPolygon)
    output = convert_object(polygon, ConvertOptions(output_version="3.2"))
    assert "<gml:posList>2 2 4 2 4 4 2 4 2 2</gml:posList>" in output


def test_options_frozen():
    options = ConvertOptions(output_version="3.2")
    with pytest.raises(AttributeError):
        options.pretty_print = True
