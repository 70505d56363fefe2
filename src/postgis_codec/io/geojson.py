"""
Geometry to GeoJSON geometry dict conversion.
"""

from typing import Any

from ..exceptions import InvalidGeometryError
from ..geometries import (
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
from .wkb_parser import WKBInput, parse_wkb


def _position(point: Point) -> list[float]:
    if point.is_empty():
        return []
    if point.z is not None:
        return [point.x, point.y, point.z]
    return [point.x, point.y]


def _line(line: LineString) -> list[list[float]]:
    return [_position(p) for p in line.points]


def _polygon(polygon: Polygon) -> list[list[list[float]]]:
    return [_line(ring) for ring in polygon.rings]


def to_geojson(geometry: Geometry) -> dict[str, Any]:
    """
    Convert a Geometry to a GeoJSON geometry dict.

    Args:
        geometry: Geometry to convert

    Returns:
        GeoJSON geometry dict with 'type' and 'coordinates'
        (or 'geometries' for a GeometryCollection)

    Raises:
        InvalidGeometryError: If the geometry has M values, which GeoJSON
            cannot represent
    """
    geometry.validate()
    if geometry.is_measured():
        raise InvalidGeometryError(
            f"GeoJSON cannot represent measured (M) geometries: {type(geometry).__name__} "
            f"is {geometry.dimension.name}"
        )

    if isinstance(geometry, Point):
        return {"type": "Point", "coordinates": _position(geometry)}

    elif isinstance(geometry, LineString):
        return {"type": "LineString", "coordinates": _line(geometry)}

    elif isinstance(geometry, Polygon):
        return {"type": "Polygon", "coordinates": _polygon(geometry)}

    elif isinstance(geometry, MultiPoint):
        return {"type": "MultiPoint", "coordinates": [_position(p) for p in geometry.points]}

    elif isinstance(geometry, MultiLineString):
        return {"type": "MultiLineString", "coordinates": [_line(l) for l in geometry.line_strings]}

    elif isinstance(geometry, MultiPolygon):
        return {"type": "MultiPolygon", "coordinates": [_polygon(p) for p in geometry.polygons]}

    elif isinstance(geometry, GeometryCollection):
        return {
            "type": "GeometryCollection",
            "geometries": [to_geojson(g) for g in geometry.geometries],
        }

    else:
        raise TypeError(f"Unsupported geometry class: {type(geometry).__name__}")


def wkb_to_geojson(wkb: WKBInput) -> dict[str, Any]:
    """
    Convert EWKB straight to a GeoJSON geometry dict.

    Raises:
        MalformedWKBError: If the WKB is invalid
    """
    return to_geojson(parse_wkb(wkb))
