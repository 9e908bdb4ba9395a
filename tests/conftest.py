from __future__ import annotations

import django
import pytest

from gmlconvert import __version__, conf

from tests.utils import GML21_NS, GML32_NS, XML_NS_WFS


def pytest_configure():
    print(f"Running with Django {django.__version__}, gmlconvert {__version__}")
    print(f"Using GMLCONVERT_STRICT_COORDINATES={conf.GMLCONVERT_STRICT_COORDINATES}")


@pytest.fixture()
def gml32_polygon() -> str:
    """A GML 3.2 polygon with a hole."""
    return f"""<gml:Polygon {GML32_NS} srsName="urn:ogc:def:crs:EPSG::28992">
      <gml:exterior>
        <gml:LinearRing>
          <gml:posList>0 0 10 0 10 10 0 10 0 0</gml:posList>
        </gml:LinearRing>
      </gml:exterior>
      <gml:interior>
        <gml:LinearRing>
          <gml:posList>2 2 4 2 4 4 2 4 2 2</gml:posList>
        </gml:LinearRing>
      </gml:interior>
    </gml:Polygon>"""


@pytest.fixture()
def gml21_polygon() -> str:
    """The same polygon, written as GML 2.1.2."""
    return f"""<gml:Polygon {GML21_NS} srsName="EPSG:28992">
      <gml:outerBoundaryIs>
        <gml:LinearRing>
          <gml:coordinates>0,0 10,0 10,10 0,10 0,0</gml:coordinates>
        </gml:LinearRing>
      </gml:outerBoundaryIs>
      <gml:innerBoundaryIs>
        <gml:LinearRing>
          <gml:coordinates>2,2 4,2 4,4 2,4 2,2</gml:coordinates>
        </gml:LinearRing>
      </gml:innerBoundaryIs>
    </gml:Polygon>"""


@pytest.fixture()
def wfs_feature_collection() -> str:
    """A WFS 2.0 response with two features."""
    return f"""<?xml version="1.0" encoding="UTF-8"?>
    <wfs:FeatureCollection {XML_NS_WFS} numberMatched="2" numberReturned="2">
      <wfs:member>
        <app:restaurant gml:id="restaurant.1">
          <gml:boundedBy>
            <gml:Envelope srsName="urn:ogc:def:crs:EPSG::4326">
              <gml:lowerCorner>4.9 52.3</gml:lowerCorner>
              <gml:upperCorner>4.9 52.3</gml:upperCorner>
            </gml:Envelope>
          </gml:boundedBy>
          <app:name>Café Noir</app:name>
          <app:rating>5.0</app:rating>
          <app:location>
            <gml:Point gml:id="restaurant.1.location" srsName="urn:ogc:def:crs:EPSG::4326">
              <gml:pos>4.9 52.3</gml:pos>
            </gml:Point>
          </app:location>
        </app:restaurant>
      </wfs:member>
      <wfs:member>
        <app:restaurant gml:id="restaurant.2">
          <app:name>Foo Bar</app:name>
          <app:rating xsi:nil="true" xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"/>
          <app:tags>pizza</app:tags>
          <app:tags>pasta</app:tags>
          <app:location>
            <gml:Point srsName="urn:ogc:def:crs:EPSG::4326">
              <gml:pos>4.8 52.4</gml:pos>
            </gml:Point>
          </app:location>
        </app:restaurant>
      </wfs:member>
    </wfs:FeatureCollection>"""


@pytest.fixture()
def rectified_grid_coverage() -> str:
    """A GMLCOV coverage, as returned by WCS 2.0 DescribeCoverage."""
    return f"""<gmlcov:RectifiedGridCoverage {GML32_NS}
        xmlns:gmlcov="http://www.opengis.net/gmlcov/1.0"
        xmlns:swe="http://www.opengis.net/swe/2.0"
        gml:id="dem">
      <gml:boundedBy>
        <gml:Envelope srsName="EPSG:4326">
          <gml:lowerCorner>0 40</gml:lowerCorner>
          <gml:upperCorner>10 50</gml:upperCorner>
        </gml:Envelope>
      </gml:boundedBy>
      <gml:domainSet>
        <gml:RectifiedGrid gml:id="grid" dimension="2" srsName="EPSG:4326">
          <gml:limits>
            <gml:GridEnvelope>
              <gml:low>0 0</gml:low>
              <gml:high>99 49</gml:high>
            </gml:GridEnvelope>
          </gml:limits>
          <gml:axisLabels>Long Lat</gml:axisLabels>
          <gml:origin>
            <gml:Point gml:id="origin">
              <gml:pos>0 50</gml:pos>
            </gml:Point>
          </gml:origin>
          <gml:offsetVector>0.1 0</gml:offsetVector>
          <gml:offsetVector>0 -0.2</gml:offsetVector>
        </gml:RectifiedGrid>
      </gml:domainSet>
      <gml:rangeSet>
        <gml:File>
          <gml:fileName>dem.tif</gml:fileName>
          <gml:fileStructure>Record Interleaved</gml:fileStructure>
        </gml:File>
      </gml:rangeSet>
      <gmlcov:rangeType>
        <swe:DataRecord>
          <swe:field name="elevation">
            <swe:Quantity uom="m">
              <swe:description>Height above sea level</swe:description>
              <swe:dataType>float32</swe:dataType>
            </swe:Quantity>
          </swe:field>
        </swe:DataRecord>
      </gmlcov:rangeType>
    </gmlcov:RectifiedGridCoverage>"""
