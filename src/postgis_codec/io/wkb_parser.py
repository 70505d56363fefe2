"""
Pure-Python parser for PostGIS Extended WKB (EWKB).

Supports Point, LineString, Polygon, the Multi* variants and (nested)
GeometryCollections, in 2D, Z, M and ZM. Both EWKB flag bits and ISO
(1000/2000/3000) type codes are understood.
"""

import logging
import struct
from dataclasses import dataclass
from typing import Optional, Union

from ..exceptions import MalformedWKBError
from ..geometries import (
    Dimension,
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)

logger = logging.getLogger(__name__)


# WKB geometry type codes
WKB_POINT = 1
WKB_LINESTRING = 2
WKB_POLYGON = 3
WKB_MULTIPOINT = 4
WKB_MULTILINESTRING = 5
WKB_MULTIPOLYGON = 6
WKB_GEOMETRYCOLLECTION = 7

# EWKB flags in the high bits of the type word
EWKB_Z_FLAG = 0x80000000
EWKB_M_FLAG = 0x40000000
EWKB_SRID_FLAG = 0x20000000
TYPE_MASK = 0x0FFFFFFF

# Byte order markers
BIG_ENDIAN = 0
LITTLE_ENDIAN = 1

# Smallest possible nested geometry: byte order + type word
_MIN_GEOMETRY_SIZE = 5
_COUNT_SIZE = 4
_DOUBLE_SIZE = 8

# Guards against stack exhaustion on hostile nesting
MAX_NESTING_DEPTH = 64

GEOMETRY_TYPE_NAMES = {
    WKB_POINT: "Point",
    WKB_LINESTRING: "LineString",
    WKB_POLYGON: "Polygon",
    WKB_MULTIPOINT: "MultiPoint",
    WKB_MULTILINESTRING: "MultiLineString",
    WKB_MULTIPOLYGON: "MultiPolygon",
    WKB_GEOMETRYCOLLECTION: "GeometryCollection",
}

WKBInput = Union[bytes, bytearray, memoryview, str]


@dataclass(frozen=True)
class WKBHeader:
    """Decoded byte order and type word of one (sub-)geometry."""
    endian: str
    geometry_type: int
    dimension: Dimension
    srid: Optional[int]


def parse_wkb(data: WKBInput, strict_rings: bool = False) -> Geometry:
    """
    Convert EWKB to a Geometry.

    Args:
        data: WKB bytes, or a hex string as returned by PostgreSQL
        strict_rings: Reject polygon rings that are not closed or have
            fewer than 4 points

    Returns:
        The decoded geometry. The top-level SRID (if any) is set on every
        descendant.

    Raises:
        MalformedWKBError: If the buffer is truncated, declares an unknown
            type, has counts that exceed the buffer, or has trailing bytes
    """
    wkb = _as_bytes(data)
    if not wkb:
        raise MalformedWKBError("Invalid WKB: empty buffer")

    geometry, offset = _parse_geometry(wkb, 0, None, False, strict_rings, 0)

    if offset != len(wkb):
        raise MalformedWKBError(
            f"Invalid WKB: {len(wkb) - offset} trailing bytes after geometry", offset
        )

    logger.debug(
        "Parsed %s (srid=%s, dimension=%s) from %d bytes",
        type(geometry).__name__, geometry.srid, geometry.dimension.name, len(wkb)
    )
    return geometry


def _as_bytes(data: WKBInput) -> bytes:
    """Normalize raw bytes, memoryviews and hex strings to bytes."""
    if isinstance(data, str):
        text = data.strip()
        # bytea hex output format
        if text.startswith("\\x"):
            text = text[2:]
        try:
            return bytes.fromhex(text)
        except ValueError as e:
            raise MalformedWKBError(f"Invalid WKB hex string: {e}") from e
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"Cannot parse WKB from {type(data).__name__}")


def _unpack(fmt: str, wkb: bytes, offset: int, what: str) -> tuple[tuple, int]:
    """Unpack a struct at offset, failing if the buffer is too short."""
    size = struct.calcsize(fmt)
    if offset + size > len(wkb):
        raise MalformedWKBError(f"Invalid WKB: buffer ends before {what}", offset)
    return struct.unpack_from(fmt, wkb, offset), offset + size


def read_header(wkb: bytes, offset: int) -> tuple[WKBHeader, int]:
    """
    Read byte order, type word and optional SRID.

    Returns:
        (header, offset just past the header)
    """
    if offset >= len(wkb):
        raise MalformedWKBError("Invalid WKB: buffer ends before byte order", offset)

    byte_order = wkb[offset]
    if byte_order == BIG_ENDIAN:
        endian = ">"
    elif byte_order == LITTLE_ENDIAN:
        endian = "<"
    else:
        raise MalformedWKBError(f"Invalid WKB byte order: {byte_order}", offset)

    (type_word,), offset = _unpack(f"{endian}I", wkb, offset + 1, "geometry type")

    has_z = bool(type_word & EWKB_Z_FLAG)
    has_m = bool(type_word & EWKB_M_FLAG)
    has_srid = bool(type_word & EWKB_SRID_FLAG)
    geom_type = type_word & TYPE_MASK

    # ISO WKB: Z (1000+), M (2000+), ZM (3000+)
    iso_dim, geom_type = divmod(geom_type, 1000)
    if iso_dim > 3:
        raise MalformedWKBError(f"Unsupported geometry type: {type_word & TYPE_MASK}", offset - 4)
    has_z = has_z or iso_dim in (1, 3)
    has_m = has_m or iso_dim in (2, 3)

    if geom_type not in GEOMETRY_TYPE_NAMES:
        raise MalformedWKBError(f"Unsupported geometry type: {geom_type}", offset - 4)

    srid = None
    if has_srid:
        (srid,), offset = _unpack(f"{endian}i", wkb, offset, "SRID")

    header = WKBHeader(
        endian=endian,
        geometry_type=geom_type,
        dimension=Dimension.from_flags(has_z, has_m),
        srid=srid
    )
    return header, offset


def _parse_geometry(
    wkb: bytes,
    offset: int,
    srid: Optional[int],
    nested: bool,
    strict_rings: bool,
    depth: int
) -> tuple[Geometry, int]:
    """Parse one complete WKB geometry (header included) at offset."""
    if depth > MAX_NESTING_DEPTH:
        raise MalformedWKBError(f"Invalid WKB: nesting deeper than {MAX_NESTING_DEPTH}", offset)

    start = offset
    header, offset = read_header(wkb, offset)

    if nested:
        # Sub-geometries inherit the outer SRID and never carry their own
        if header.srid is not None:
            raise MalformedWKBError(
                f"Invalid WKB: nested {GEOMETRY_TYPE_NAMES[header.geometry_type]} "
                f"declares its own SRID {header.srid}",
                start
            )
    else:
        srid = header.srid

    geom_type = header.geometry_type
    if geom_type == WKB_POINT:
        return _parse_point(wkb, offset, header.endian, header.dimension, srid)
    elif geom_type == WKB_LINESTRING:
        return _parse_linestring(wkb, offset, header.endian, header.dimension, srid)
    elif geom_type == WKB_POLYGON:
        return _parse_polygon(wkb, offset, header.endian, header.dimension, srid, strict_rings)
    elif geom_type == WKB_MULTIPOINT:
        return _parse_multi(wkb, offset, header, srid, MultiPoint, WKB_POINT, strict_rings, depth)
    elif geom_type == WKB_MULTILINESTRING:
        return _parse_multi(wkb, offset, header, srid, MultiLineString, WKB_LINESTRING, strict_rings, depth)
    elif geom_type == WKB_MULTIPOLYGON:
        return _parse_multi(wkb, offset, header, srid, MultiPolygon, WKB_POLYGON, strict_rings, depth)
    else:
        return _parse_multi(wkb, offset, header, srid, GeometryCollection, None, strict_rings, depth)


def _read_count(wkb: bytes, offset: int, endian: str, item_size: int, what: str) -> tuple[int, int]:
    """
    Read an element count and check the remaining buffer can hold it.

    item_size is the minimum number of bytes each element occupies.
    """
    (count,), offset = _unpack(f"{endian}I", wkb, offset, f"{what} count")
    remaining = len(wkb) - offset
    if count * item_size > remaining:
        raise MalformedWKBError(
            f"Invalid WKB: {count} {what} declared but only {remaining} bytes remain",
            offset - _COUNT_SIZE
        )
    return count, offset


def _read_point(
    wkb: bytes,
    offset: int,
    endian: str,
    dimension: Dimension,
    srid: Optional[int]
) -> tuple[Point, int]:
    """Read one coordinate tuple (no header)."""
    values, offset = _unpack(
        f"{endian}{dimension.coordinate_count}d", wkb, offset, "coordinates"
    )
    x, y = values[0], values[1]
    z = values[2] if dimension.has_z_dimension() else None
    m = values[-1] if dimension.is_measured() else None
    return Point(x, y, z, m, srid), offset


def _parse_point(
    wkb: bytes,
    offset: int,
    endian: str,
    dimension: Dimension,
    srid: Optional[int]
) -> tuple[Point, int]:
    """Parse Point geometry."""
    return _read_point(wkb, offset, endian, dimension, srid)


def _parse_linestring(
    wkb: bytes,
    offset: int,
    endian: str,
    dimension: Dimension,
    srid: Optional[int]
) -> tuple[LineString, int]:
    """Parse LineString geometry (also used for polygon rings)."""
    num_points, offset = _read_count(
        wkb, offset, endian, _DOUBLE_SIZE * dimension.coordinate_count, "points"
    )
    points = []
    for _ in range(num_points):
        point, offset = _read_point(wkb, offset, endian, dimension, srid)
        points.append(point)
    return LineString(points, srid, dimension), offset


def _parse_polygon(
    wkb: bytes,
    offset: int,
    endian: str,
    dimension: Dimension,
    srid: Optional[int],
    strict_rings: bool
) -> tuple[Polygon, int]:
    """Parse Polygon geometry."""
    num_rings, offset = _read_count(wkb, offset, endian, _COUNT_SIZE, "rings")
    rings = []
    for i in range(num_rings):
        ring_start = offset
        ring, offset = _parse_linestring(wkb, offset, endian, dimension, srid)
        if strict_rings and not ring.is_ring():
            raise MalformedWKBError(
                f"Invalid WKB: polygon ring {i} is not a closed ring of at least "
                f"4 points ({len(ring)} points)",
                ring_start
            )
        rings.append(ring)
    return Polygon(rings, srid, dimension), offset


def _parse_multi(
    wkb: bytes,
    offset: int,
    header: WKBHeader,
    srid: Optional[int],
    geometry_class: type,
    member_type: Optional[int],
    strict_rings: bool,
    depth: int
) -> tuple[Geometry, int]:
    """
    Parse Multi* geometry or GeometryCollection.

    Each member is a complete WKB geometry with its own byte order and type
    word. member_type restricts the allowed member type (None = any).
    """
    type_name = GEOMETRY_TYPE_NAMES[header.geometry_type]
    num_geoms, offset = _read_count(
        wkb, offset, header.endian, _MIN_GEOMETRY_SIZE, "geometries"
    )

    members = []
    for _ in range(num_geoms):
        member_start = offset
        member, offset = _parse_geometry(wkb, offset, srid, True, strict_rings, depth + 1)

        if member_type is not None and not isinstance(member, _MEMBER_CLASSES[member_type]):
            raise MalformedWKBError(
                f"Invalid WKB: {type_name} cannot contain {type(member).__name__}",
                member_start
            )
        if member.dimension != header.dimension:
            raise MalformedWKBError(
                f"Invalid WKB: {type_name} is {header.dimension.name} but member "
                f"{type(member).__name__} is {member.dimension.name}",
                member_start
            )
        members.append(member)

    return geometry_class(members, srid, header.dimension), offset


_MEMBER_CLASSES = {
    WKB_POINT: Point,
    WKB_LINESTRING: LineString,
    WKB_POLYGON: Polygon,
}
