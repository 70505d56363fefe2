"""
psycopg2 integration helpers.

- as_sql() passes generated constructor SQL through query parameters verbatim
- register_geometry_types() makes geometry/geography columns come back as
  Geometry objects instead of hex EWKB strings
"""

import logging

try:
    import psycopg2
    import psycopg2.extensions
    HAS_PSYCOPG2 = True
except ImportError:
    HAS_PSYCOPG2 = False

from .geometries import Geometry
from .io.wkb_parser import parse_wkb

logger = logging.getLogger(__name__)


def _require_psycopg2():
    if not HAS_PSYCOPG2:
        raise ImportError(
            "psycopg2 is required for database integration. "
            "Install with: pip install psycopg2-binary"
        )


def as_sql(expression: str):
    """
    Wrap a generated SQL expression so psycopg2 inserts it unquoted.

    Example:
        cur.execute(
            'INSERT INTO "public"."parcels" (geom) VALUES (%s)',
            (as_sql(columns.to_insertable("geom", point)),)
        )
    """
    _require_psycopg2()
    return psycopg2.extensions.AsIs(expression)


def cast_geometry(value, cursor=None) -> Geometry:
    """psycopg2 typecaster: hex EWKB text -> Geometry (None stays None)."""
    if value is None:
        return None
    return parse_wkb(value)


def register_geometry_types(conn, type_names: tuple[str, ...] = ("geometry", "geography")) -> dict[str, int]:
    """
    Register a typecaster decoding PostGIS columns on a connection.

    Args:
        conn: Open psycopg2 connection
        type_names: PostGIS type names to register

    Returns:
        Mapping of type name to the OID that was registered. Types that are
        not installed in the database are skipped.
    """
    _require_psycopg2()

    registered = {}
    with conn.cursor() as cur:
        for name in type_names:
            cur.execute("SELECT to_regtype(%s)::oid", (name,))
            row = cur.fetchone()
            if not row or not row[0]:
                logger.debug("PostGIS type %s not found, skipping", name)
                continue
            registered[name] = row[0]

    if registered:
        caster = psycopg2.extensions.new_type(
            tuple(registered.values()), "POSTGIS_GEOMETRY", cast_geometry
        )
        psycopg2.extensions.register_type(caster, conn)
        logger.debug("Registered geometry typecaster for %s", registered)

    return registered
