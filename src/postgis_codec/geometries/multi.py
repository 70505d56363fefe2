"""Homogeneous multi-geometries."""

from typing import Optional, Sequence

from .dimension import Dimension
from .geometry import GeometryContainer
from .linestring import LineString
from .point import Point
from .polygon import Polygon


class MultiPoint(GeometryContainer):
    geometry_type = "MULTIPOINT"
    child_type = Point

    def __init__(
        self,
        points: Sequence[Point] = (),
        srid: Optional[int] = None,
        dimension: Optional[Dimension] = None
    ):
        super().__init__(points, srid, dimension)

    @property
    def points(self) -> list[Point]:
        return self._children


class MultiLineString(GeometryContainer):
    geometry_type = "MULTILINESTRING"
    child_type = LineString

    def __init__(
        self,
        line_strings: Sequence[LineString] = (),
        srid: Optional[int] = None,
        dimension: Optional[Dimension] = None
    ):
        super().__init__(line_strings, srid, dimension)

    @property
    def line_strings(self) -> list[LineString]:
        return self._children


class MultiPolygon(GeometryContainer):
    geometry_type = "MULTIPOLYGON"
    child_type = Polygon

    def __init__(
        self,
        polygons: Sequence[Polygon] = (),
        srid: Optional[int] = None,
        dimension: Optional[Dimension] = None
    ):
        super().__init__(polygons, srid, dimension)

    @property
    def polygons(self) -> list[Polygon]:
        return self._children
