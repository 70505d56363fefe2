# Geometry data model
from .dimension import Dimension
from .geometry import Geometry, GeometryContainer
from .point import Point, WGS84_SRID
from .linestring import LineString
from .polygon import Polygon
from .multi import MultiPoint, MultiLineString, MultiPolygon
from .collection import GeometryCollection

__all__ = [
    "Dimension",
    "Geometry",
    "GeometryContainer",
    "Point",
    "WGS84_SRID",
    "LineString",
    "Polygon",
    "MultiPoint",
    "MultiLineString",
    "MultiPolygon",
    "GeometryCollection",
]
