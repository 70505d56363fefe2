"""Tests for the EWKB parser."""

import math
import struct

import pytest

from postgis_codec.exceptions import MalformedWKBError
from postgis_codec.geometries import (
    Dimension,
    GeometryCollection,
    LineString,
    MultiPoint,
    Point,
    Polygon,
)
from postgis_codec.io.wkb_parser import MAX_NESTING_DEPTH, parse_wkb, read_header


def ring_bytes(endian, coords):
    data = struct.pack(f"{endian}I", len(coords))
    for x, y in coords:
        data += struct.pack(f"{endian}dd", x, y)
    return data


SQUARE = [(0, 0), (4, 0), (4, 4), (0, 4), (0, 0)]
HOLE = [(1, 1), (2, 1), (2, 2), (1, 1)]


class TestPoints:

    def test_ewkb_point_with_srid(self, point_ewkb):
        point = parse_wkb(point_ewkb)
        assert point == Point(9.1, 48.7, srid=4326)
        assert point.dimension == Dimension.D2

    def test_plain_wkb_has_no_srid(self):
        point = parse_wkb(struct.pack("<BIdd", 1, 1, 1.5, 2.5))
        assert point == Point(1.5, 2.5)
        assert not point.has_srid()

    def test_big_endian(self):
        point = parse_wkb(struct.pack(">BIidd", 0, 0x20000001, 3006, 1.0, 2.0))
        assert point == Point(1, 2, srid=3006)

    def test_z_flag(self):
        point = parse_wkb(struct.pack("<BI3d", 1, 0x80000001, 1, 2, 3))
        assert point.dimension == Dimension.Z
        assert point.z == 3.0
        assert point.m is None

    def test_m_flag(self):
        point = parse_wkb(struct.pack("<BI3d", 1, 0x40000001, 1, 2, 5))
        assert point.dimension == Dimension.M
        assert point.z is None
        assert point.m == 5.0

    def test_zm_flags_with_srid(self):
        point = parse_wkb(struct.pack("<BIi4d", 1, 0xE0000001, 4326, 1, 2, 3, 4))
        assert point == Point(1, 2, 3, 4, srid=4326)

    @pytest.mark.parametrize("code, dimension", [
        (1001, Dimension.Z),
        (2001, Dimension.M),
        (3001, Dimension.ZM),
    ])
    def test_iso_type_codes(self, code, dimension):
        count = dimension.coordinate_count
        point = parse_wkb(struct.pack(f"<BI{count}d", 1, code, *range(1, count + 1)))
        assert point.dimension == dimension

    def test_empty_point(self):
        point = parse_wkb(struct.pack("<BIdd", 1, 1, math.nan, math.nan))
        assert point.is_empty()
        assert point == Point.make_empty()


class TestComposites:

    def test_linestring_big_endian(self):
        data = struct.pack(">BII4d", 0, 2, 2, 0, 0, 1, 1)
        assert parse_wkb(data) == LineString([Point(0, 0), Point(1, 1)])

    def test_polygon_with_hole_inherits_srid(self):
        data = struct.pack("<BIiI", 1, 0x20000003, 3006, 2)
        data += ring_bytes("<", SQUARE) + ring_bytes("<", HOLE)
        polygon = parse_wkb(data)
        assert isinstance(polygon, Polygon)
        assert polygon.srid == 3006
        assert len(polygon.exterior_ring) == 5
        assert len(polygon.interior_rings) == 1
        assert all(p.srid == 3006 for ring in polygon.rings for p in ring.points)

    def test_multipoint_members_reread_byte_order(self):
        data = struct.pack("<BIiI", 1, 0x20000004, 3006, 2)
        data += struct.pack("<BIdd", 1, 1, 1, 2)
        data += struct.pack(">BIdd", 0, 1, 3, 4)
        multi = parse_wkb(data)
        assert isinstance(multi, MultiPoint)
        assert multi.points == [Point(1, 2, srid=3006), Point(3, 4, srid=3006)]

    def test_nested_collection(self):
        line = struct.pack("<BII4d", 1, 2, 2, 0, 0, 1, 1)
        inner = struct.pack("<BII", 1, 7, 1) + line
        data = struct.pack("<BIiI", 1, 0x20000007, 4326, 2)
        data += struct.pack("<BIdd", 1, 1, 5, 6) + inner

        collection = parse_wkb(data)
        assert isinstance(collection, GeometryCollection)
        assert collection.srid == 4326
        assert collection.geometries[0] == Point(5, 6, srid=4326)
        nested = collection.geometries[1]
        assert isinstance(nested, GeometryCollection)
        assert nested.srid == 4326
        assert nested.geometries[0].srid == 4326

    def test_empty_composites_keep_dimension(self):
        line = parse_wkb(struct.pack("<BII", 1, 0x80000002, 0))
        assert line.is_empty()
        assert line.dimension == Dimension.Z
        collection = parse_wkb(struct.pack("<BIiI", 1, 0x20000007, 4326, 0))
        assert collection.is_empty()
        assert collection.srid == 4326


class TestInputForms:

    def test_hex_string(self, point_ewkb):
        assert parse_wkb(point_ewkb.hex()) == parse_wkb(point_ewkb)
        assert parse_wkb(point_ewkb.hex().upper()) == parse_wkb(point_ewkb)

    def test_bytea_hex_string(self, point_ewkb):
        assert parse_wkb("\\x" + point_ewkb.hex()) == parse_wkb(point_ewkb)

    def test_memoryview(self, point_ewkb):
        assert parse_wkb(memoryview(point_ewkb)) == parse_wkb(point_ewkb)

    def test_invalid_hex(self):
        with pytest.raises(MalformedWKBError, match="hex"):
            parse_wkb("not hex")

    def test_unsupported_input_type(self):
        with pytest.raises(TypeError):
            parse_wkb(12345)


class TestMalformed:

    def test_empty_buffer(self):
        with pytest.raises(MalformedWKBError):
            parse_wkb(b"")

    def test_truncated_coordinates(self, point_ewkb):
        with pytest.raises(MalformedWKBError, match="coordinates"):
            parse_wkb(point_ewkb[:-1])

    def test_truncated_every_prefix(self, point_ewkb):
        for length in range(len(point_ewkb)):
            with pytest.raises(MalformedWKBError):
                parse_wkb(point_ewkb[:length])

    def test_truncated_polygon(self):
        data = struct.pack("<BII", 1, 3, 1) + ring_bytes("<", SQUARE)
        with pytest.raises(MalformedWKBError):
            parse_wkb(data[:-8])

    def test_bad_byte_order(self):
        with pytest.raises(MalformedWKBError, match="byte order"):
            parse_wkb(struct.pack("<BIdd", 2, 1, 1, 2))

    def test_unknown_type(self):
        with pytest.raises(MalformedWKBError, match="Unsupported geometry type: 8"):
            parse_wkb(struct.pack("<BIdd", 1, 8, 1, 2))

    def test_count_exceeds_buffer(self):
        data = struct.pack("<BII", 1, 2, 1_000_000) + struct.pack("<4d", 0, 0, 1, 1)
        with pytest.raises(MalformedWKBError, match="1000000 points declared"):
            parse_wkb(data)

    def test_member_count_exceeds_buffer(self):
        data = struct.pack("<BII", 1, 7, 0xFFFFFFFF)
        with pytest.raises(MalformedWKBError, match="geometries declared"):
            parse_wkb(data)

    def test_trailing_bytes(self, point_ewkb):
        with pytest.raises(MalformedWKBError, match="trailing"):
            parse_wkb(point_ewkb + b"\x00")

    def test_nested_srid_rejected(self):
        data = struct.pack("<BIiI", 1, 0x20000004, 4326, 1)
        data += struct.pack("<BIidd", 1, 0x20000001, 4326, 1, 2)
        with pytest.raises(MalformedWKBError, match="own SRID"):
            parse_wkb(data)

    def test_mixed_member_dimensions(self):
        data = struct.pack("<BII", 1, 4, 2)
        data += struct.pack("<BIdd", 1, 1, 1, 2)
        data += struct.pack("<BI3d", 1, 0x80000001, 1, 2, 3)
        with pytest.raises(MalformedWKBError, match="member Point is Z"):
            parse_wkb(data)

    def test_wrong_member_type(self):
        data = struct.pack("<BII", 1, 4, 1) + struct.pack("<BII4d", 1, 2, 2, 0, 0, 1, 1)
        with pytest.raises(MalformedWKBError, match="MultiPoint cannot contain LineString"):
            parse_wkb(data)

    def test_nesting_depth_limit(self):
        depth = MAX_NESTING_DEPTH + 5
        data = struct.pack("<BII", 1, 7, 1) * depth + struct.pack("<BIdd", 1, 1, 1, 2)
        with pytest.raises(MalformedWKBError, match="nesting"):
            parse_wkb(data)


class TestStrictRings:

    def unclosed_polygon(self):
        return struct.pack("<BII", 1, 3, 1) + ring_bytes("<", SQUARE[:-1])

    def test_lenient_by_default(self):
        polygon = parse_wkb(self.unclosed_polygon())
        assert not polygon.exterior_ring.is_closed()

    def test_strict_rejects_unclosed_ring(self):
        with pytest.raises(MalformedWKBError, match="ring 0"):
            parse_wkb(self.unclosed_polygon(), strict_rings=True)

    def test_strict_accepts_closed_rings(self):
        data = struct.pack("<BII", 1, 3, 2) + ring_bytes("<", SQUARE) + ring_bytes("<", HOLE)
        assert len(parse_wkb(data, strict_rings=True).rings) == 2


def test_read_header(point_ewkb):
    header, offset = read_header(point_ewkb, 0)
    assert header.endian == "<"
    assert header.geometry_type == 1
    assert header.srid == 4326
    assert header.dimension == Dimension.D2
    assert offset == 9
