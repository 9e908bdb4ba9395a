import pytest

from gmlconvert.exceptions import ExternalParsingError
from gmlconvert.parsers.gml import (
    GmlCoverage,
    GmlEnvelope,
    GmlGrid,
    GmlGridCoverage,
    GmlGridEnvelope,
    GmlMultiPoint,
    GmlMultiPointCoverage,
    GmlRangeField,
    GmlRangeSet,
    GmlRectifiedGrid,
    GmlRectifiedGridCoverage,
    GmlReferenceableGridCoverage,
)
from gmlconvert.parsers.xml import parse_xml_from_string
from gmlconvert.types import GmlVersion
from tests.utils import GML32_NS

GMLCOV_NS = 'xmlns:gmlcov="http://www.opengis.net/gmlcov/1.0"'

GRID_LIMITS = """<gml:limits>
  <gml:GridEnvelope><gml:low>0 0</gml:low><gml:high>9 4</gml:high></gml:GridEnvelope>
</gml:limits>"""


def parse_coverage(xml_text: str) -> GmlCoverage:
    return GmlCoverage.child_from_xml(parse_xml_from_string(xml_text), GmlVersion.V3_2)


class TestRectifiedGridCoverage:
    def test_parse(self, rectified_grid_coverage):
        coverage = parse_coverage(rectified_grid_coverage)
        assert isinstance(coverage, GmlRectifiedGridCoverage)
        assert coverage.id == "dem"
        assert coverage.type == "RectifiedGridCoverage"
        assert coverage.bounded_by == GmlEnvelope((0.0, 40.0, 10.0, 50.0), srs_name="EPSG:4326")

        grid = coverage.domain_set
        assert grid == GmlRectifiedGrid(
            id="grid",
            dimension=2,
            limits=GmlGridEnvelope(low=(0, 0), high=(99, 49)),
            axis_labels=("Long", "Lat"),
            srs_name="EPSG:4326",
            origin=(0.0, 50.0),
            offset_vectors=((0.1, 0.0), (0.0, -0.2)),
        )
        assert grid.limits.width == 100
        assert grid.limits.height == 50

        assert coverage.range_set == GmlRangeSet(
            file_name="dem.tif", file_structure="Record Interleaved"
        )
        assert coverage.range_type == (
            GmlRangeField(
                name="elevation",
                data_type="float32",
                uom="m",
                description="Height above sea level",
            ),
        )

    def test_gml_namespace(self):
        """Prove that the coverage can also be written in the GML namespace."""
        coverage = parse_coverage(
            f"""<gml:RectifiedGridCoverage {GML32_NS}>
              <gml:domainSet>
                <gml:RectifiedGrid dimension="2">
                  {GRID_LIMITS}
                  <gml:origin>
                    <gml:Point srsName="EPSG:28992"><gml:pos>100 200</gml:pos></gml:Point>
                  </gml:origin>
                  <gml:offsetVector>10 0</gml:offsetVector>
                  <gml:offsetVector>0 -10</gml:offsetVector>
                </gml:RectifiedGrid>
              </gml:domainSet>
            </gml:RectifiedGridCoverage>"""
        )
        assert coverage.bounded_by is None
        assert coverage.range_set == GmlRangeSet()
        assert coverage.range_type == ()

        # The srsName of the origin is used when the grid has none.
        assert coverage.domain_set.srs_name == "EPSG:28992"
        assert coverage.domain_set.axis_labels == ()

    def test_gmljp2(self):
        """Prove that the hidden GMLJP2 tag is parsed as the same coverage."""
        coverage = parse_coverage(
            f"""<gml:GMLJP2RectifiedGridCoverage {GML32_NS}>
              <gml:domainSet>
                <gml:RectifiedGrid>
                  {GRID_LIMITS}
                  <gml:origin><gml:Point><gml:pos>0 0</gml:pos></gml:Point></gml:origin>
                  <gml:offsetVector>1 0</gml:offsetVector>
                  <gml:offsetVector>0 1</gml:offsetVector>
                </gml:RectifiedGrid>
              </gml:domainSet>
            </gml:GMLJP2RectifiedGridCoverage>"""
        )
        assert isinstance(coverage, GmlRectifiedGridCoverage)
        assert coverage.type == "RectifiedGridCoverage"

    def test_missing_origin(self):
        with pytest.raises(ExternalParsingError, match="missing <origin><Point>"):
            parse_coverage(
                f"""<gml:RectifiedGridCoverage {GML32_NS}>
                  <gml:domainSet><gml:RectifiedGrid>{GRID_LIMITS}</gml:RectifiedGrid></gml:domainSet>
                </gml:RectifiedGridCoverage>"""
            )

    def test_single_offset_vector(self):
        with pytest.raises(ExternalParsingError, match="at least 2 <offsetVector> elements, got 1"):
            parse_coverage(
                f"""<gml:RectifiedGridCoverage {GML32_NS}>
                  <gml:domainSet>
                    <gml:RectifiedGrid>
                      {GRID_LIMITS}
                      <gml:origin><gml:Point><gml:pos>0 0</gml:pos></gml:Point></gml:origin>
                      <gml:offsetVector>1 0</gml:offsetVector>
                    </gml:RectifiedGrid>
                  </gml:domainSet>
                </gml:RectifiedGridCoverage>"""
            )

    def test_short_offset_vectors(self):
        with pytest.raises(ExternalParsingError, match="each <offsetVector> needs at least 2"):
            parse_coverage(
                f"""<gml:RectifiedGridCoverage {GML32_NS}>
                  <gml:domainSet>
                    <gml:RectifiedGrid>
                      {GRID_LIMITS}
                      <gml:origin><gml:Point><gml:pos>0 0</gml:pos></gml:Point></gml:origin>
                      <gml:offsetVector>1</gml:offsetVector>
                      <gml:offsetVector>1</gml:offsetVector>
                    </gml:RectifiedGrid>
                  </gml:domainSet>
                </gml:RectifiedGridCoverage>"""
            )

    def test_short_origin(self):
        with pytest.raises(ExternalParsingError, match="the origin needs at least 2 values"):
            parse_coverage(
                f"""<gml:RectifiedGridCoverage {GML32_NS}>
                  <gml:domainSet>
                    <gml:RectifiedGrid>
                      {GRID_LIMITS}
                      <gml:origin><gml:Point><gml:pos>5</gml:pos></gml:Point></gml:origin>
                      <gml:offsetVector>1 0</gml:offsetVector>
                      <gml:offsetVector>0 1</gml:offsetVector>
                    </gml:RectifiedGrid>
                  </gml:domainSet>
                </gml:RectifiedGridCoverage>"""
            )

    def test_missing_domain_set(self):
        with pytest.raises(ExternalParsingError, match="missing <domainSet>"):
            parse_coverage(f"<gml:RectifiedGridCoverage {GML32_NS}/>")

    def test_missing_grid(self):
        with pytest.raises(ExternalParsingError, match="missing <RectifiedGrid> in <domainSet>"):
            parse_coverage(
                f"<gml:RectifiedGridCoverage {GML32_NS}><gml:domainSet/></gml:RectifiedGridCoverage>"
            )


class TestGridCoverage:
    def test_parse(self):
        coverage = parse_coverage(
            f"""<gmlcov:GridCoverage {GMLCOV_NS} {GML32_NS} gml:id="cov">
              <gml:domainSet>
                <gml:Grid gml:id="g" dimension="2">{GRID_LIMITS}</gml:Grid>
              </gml:domainSet>
            </gmlcov:GridCoverage>"""
        )
        assert isinstance(coverage, GmlGridCoverage)
        assert coverage.domain_set == GmlGrid(
            id="g", dimension=2, limits=GmlGridEnvelope(low=(0, 0), high=(9, 4))
        )

    def test_grid_limits(self):
        """Prove that the older <gml:gridLimits> name is also read."""
        coverage = parse_coverage(
            f"""<gmlcov:GridCoverage {GMLCOV_NS} {GML32_NS}>
              <gml:domainSet>
                <gml:Grid>
                  <gml:gridLimits><gml:GridEnvelope>
                    <gml:low>1</gml:low><gml:high>10</gml:high>
                  </gml:GridEnvelope></gml:gridLimits>
                </gml:Grid>
              </gml:domainSet>
            </gmlcov:GridCoverage>"""
        )
        limits = coverage.domain_set.limits
        assert limits.width == 10
        assert limits.height == 1

    def test_invalid_limits(self):
        with pytest.raises(ExternalParsingError, match="Invalid high value"):
            parse_coverage(
                f"""<gmlcov:GridCoverage {GMLCOV_NS} {GML32_NS}>
                  <gml:domainSet><gml:Grid><gml:limits><gml:GridEnvelope>
                    <gml:low>0 0</gml:low><gml:high>nine 4</gml:high>
                  </gml:GridEnvelope></gml:limits></gml:Grid></gml:domainSet>
                </gmlcov:GridCoverage>"""
            )

    @pytest.mark.parametrize(
        "low,high,expect",
        [
            ("", "", "got 0 and 0"),
            ("0 0", "9", "got 2 and 1"),
        ],
    )
    def test_mismatched_limits(self, low, high, expect):
        with pytest.raises(ExternalParsingError, match=expect):
            parse_coverage(
                f"""<gmlcov:GridCoverage {GMLCOV_NS} {GML32_NS}>
                  <gml:domainSet><gml:Grid><gml:limits><gml:GridEnvelope>
                    <gml:low>{low}</gml:low><gml:high>{high}</gml:high>
                  </gml:GridEnvelope></gml:limits></gml:Grid></gml:domainSet>
                </gmlcov:GridCoverage>"""
            )


def test_referenceable_grid_coverage():
    """Prove that the grid limits are read from a ReferenceableGridBy... element."""
    coverage = parse_coverage(
        f"""<gmlcov:ReferenceableGridCoverage {GMLCOV_NS} {GML32_NS}
            xmlns:gmlrgrid="http://www.opengis.net/gml/3.3/rgrid">
          <gml:domainSet>
            <gmlrgrid:ReferenceableGridByVectors dimension="2">
              {GRID_LIMITS}
              <gml:axisLabels>x y</gml:axisLabels>
            </gmlrgrid:ReferenceableGridByVectors>
          </gml:domainSet>
        </gmlcov:ReferenceableGridCoverage>"""
    )
    assert isinstance(coverage, GmlReferenceableGridCoverage)
    assert coverage.domain_set.axis_labels == ("x", "y")
    assert coverage.domain_set.limits.width == 10


def test_multi_point_coverage():
    coverage = parse_coverage(
        f"""<gmlcov:MultiPointCoverage {GMLCOV_NS} {GML32_NS}>
          <gml:domainSet>
            <gml:MultiPoint>
              <gml:pointMember><gml:Point><gml:pos>1 2</gml:pos></gml:Point></gml:pointMember>
            </gml:MultiPoint>
          </gml:domainSet>
        </gmlcov:MultiPointCoverage>"""
    )
    assert isinstance(coverage, GmlMultiPointCoverage)
    assert coverage.domain_set == GmlMultiPoint(((1.0, 2.0),))


def test_range_field_uom_code():
    """Prove that the <swe:uom code=".."> notation is also read."""
    element = parse_xml_from_string(
        """<swe:field xmlns:swe="http://www.opengis.net/swe/2.0" name="band1">
          <swe:Quantity><swe:uom code="W.m-2.Sr-1"/></swe:Quantity>
        </swe:field>"""
    )
    assert GmlRangeField.from_xml(element) == GmlRangeField(name="band1", uom="W.m-2.Sr-1")
