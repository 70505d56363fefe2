"""
Geometry to PostGIS Extended WKB (EWKB) writer.

The output is what PostGIS itself emits: the SRID is written once, on the
outermost geometry, and nested members only carry their Z/M flags.
"""

import struct
from typing import Optional

from ..geometries import (
    Dimension,
    Geometry,
    GeometryCollection,
    GeometryContainer,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
from .wkb_parser import (
    BIG_ENDIAN,
    EWKB_M_FLAG,
    EWKB_SRID_FLAG,
    EWKB_Z_FLAG,
    LITTLE_ENDIAN,
    WKB_GEOMETRYCOLLECTION,
    WKB_LINESTRING,
    WKB_MULTILINESTRING,
    WKB_MULTIPOINT,
    WKB_MULTIPOLYGON,
    WKB_POINT,
    WKB_POLYGON,
)

# Exact class -> WKB type code
WKB_TYPE_CODES = {
    Point: WKB_POINT,
    LineString: WKB_LINESTRING,
    Polygon: WKB_POLYGON,
    MultiPoint: WKB_MULTIPOINT,
    MultiLineString: WKB_MULTILINESTRING,
    MultiPolygon: WKB_MULTIPOLYGON,
    GeometryCollection: WKB_GEOMETRYCOLLECTION,
}

_USE_GEOMETRY_SRID = object()


def dump_wkb(geometry: Geometry, big_endian: bool = False, srid=_USE_GEOMETRY_SRID) -> bytes:
    """
    Convert a Geometry to EWKB.

    Args:
        geometry: Geometry to encode
        big_endian: Write big endian (XDR) instead of little endian (NDR)
        srid: SRID to embed; defaults to the geometry's own SRID. Pass None
            to write plain WKB without an SRID.

    Returns:
        EWKB bytes

    Raises:
        InvalidGeometryError: If members disagree on dimension
    """
    geometry.validate()
    if srid is _USE_GEOMETRY_SRID:
        srid = geometry.srid
    endian = ">" if big_endian else "<"
    parts: list[bytes] = []
    _write_geometry(parts, geometry, endian, srid)
    return b"".join(parts)


def dump_hex(geometry: Geometry, big_endian: bool = False, srid=_USE_GEOMETRY_SRID) -> str:
    """EWKB as an uppercase hex string, the form PostGIS prints."""
    return dump_wkb(geometry, big_endian, srid).hex().upper()


def _type_word(geometry: Geometry, srid: Optional[int]) -> int:
    try:
        word = WKB_TYPE_CODES[type(geometry)]
    except KeyError:
        raise TypeError(f"Unsupported geometry class: {type(geometry).__name__}") from None
    dimension = geometry.dimension
    if dimension.has_z_dimension():
        word |= EWKB_Z_FLAG
    if dimension.is_measured():
        word |= EWKB_M_FLAG
    if srid is not None:
        word |= EWKB_SRID_FLAG
    return word


def _write_geometry(parts: list, geometry: Geometry, endian: str, srid: Optional[int]):
    """Write a complete geometry with header. srid is only set at the top level."""
    byte_order = BIG_ENDIAN if endian == ">" else LITTLE_ENDIAN
    parts.append(struct.pack(f"{endian}BI", byte_order, _type_word(geometry, srid)))
    if srid is not None:
        parts.append(struct.pack(f"{endian}i", srid))

    if isinstance(geometry, Point):
        _write_coordinates(parts, geometry, geometry.dimension, endian)
    elif isinstance(geometry, LineString):
        _write_linestring(parts, geometry, endian)
    elif isinstance(geometry, Polygon):
        parts.append(struct.pack(f"{endian}I", len(geometry.rings)))
        for ring in geometry.rings:
            _write_linestring(parts, ring, endian)
    elif isinstance(geometry, GeometryContainer):
        parts.append(struct.pack(f"{endian}I", len(geometry)))
        for member in geometry:
            _write_geometry(parts, member, endian, None)


def _write_linestring(parts: list, line: LineString, endian: str):
    parts.append(struct.pack(f"{endian}I", len(line.points)))
    dimension = line.dimension
    for point in line.points:
        _write_coordinates(parts, point, dimension, endian)


def _write_coordinates(parts: list, point: Point, dimension: Dimension, endian: str):
    parts.append(struct.pack(f"{endian}{dimension.coordinate_count}d", *point.coordinates()))
