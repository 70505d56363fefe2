import pytest

from postgis_codec import adapters
from postgis_codec.geometries import Point

psycopg2 = pytest.importorskip("psycopg2")


class FakeCursor:
    def __init__(self, rows):
        self.rows = rows
        self.queries = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, query, params=None):
        self.queries.append((query, params))

    def fetchone(self):
        return self.rows.pop(0)


class FakeConnection:
    def __init__(self, rows):
        self.cur = FakeCursor(rows)

    def cursor(self):
        return self.cur


def test_as_sql_is_unquoted():
    wrapped = adapters.as_sql("public.ST_GeomFromText('POINT(1 2)', 4326)")
    assert isinstance(wrapped, psycopg2.extensions.AsIs)
    assert wrapped.adapted == "public.ST_GeomFromText('POINT(1 2)', 4326)"


def test_cast_geometry(point_ewkb):
    assert adapters.cast_geometry(None) is None
    assert adapters.cast_geometry(point_ewkb.hex().upper()) == Point(9.1, 48.7, srid=4326)


def test_register_skips_missing_types(monkeypatch):
    registered = []
    monkeypatch.setattr(psycopg2.extensions, "register_type", lambda *args: registered.append(args))

    conn = FakeConnection([(None,), (None,)])
    assert adapters.register_geometry_types(conn) == {}
    assert registered == []
    assert [params for _, params in conn.cur.queries] == [("geometry",), ("geography",)]


def test_register_found_types(monkeypatch):
    registered = []
    monkeypatch.setattr(psycopg2.extensions, "register_type", lambda *args: registered.append(args))

    conn = FakeConnection([(17001,), (17002,)])
    assert adapters.register_geometry_types(conn) == {"geometry": 17001, "geography": 17002}
    assert len(registered) == 1
    caster, target = registered[0]
    assert target is conn
    assert caster.values == (17001, 17002)
