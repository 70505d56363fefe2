"""
SQL constructor expressions for PostGIS geometry and geography columns.

Generators turn a Geometry into a schema-qualified constructor call such as
``public.ST_GeomFromText('POINT(1 2)', 4326)``. They emit whatever SRID
they are given and never reconcile it with a column; that is the job of
``postgis_codec.columns``.
"""

import importlib
import logging
import math
from abc import ABC, abstractmethod
from typing import Optional

from ..exceptions import ConfigurationError, InvalidGeometryError
from ..geometries import (
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
from .wkb_generator import dump_hex

logger = logging.getLogger(__name__)

DEFAULT_SRID = 4326


def resolve_srid(geometry: Geometry, srid: Optional[int] = None) -> int:
    """SRID to emit: the explicit one, else the geometry's, else 4326."""
    if srid is not None:
        return srid
    if geometry.has_srid():
        return geometry.srid
    return DEFAULT_SRID


def check_coordinates(geometry: Geometry, allow_empty_point: bool = True):
    """
    Ensure every coordinate is finite.

    NaN is only accepted as the empty-point sentinel of a standalone point
    (top level or collection member), never inside a coordinate list.

    Raises:
        InvalidGeometryError: On the first NaN or infinite coordinate
    """
    if isinstance(geometry, Point):
        if allow_empty_point and geometry.is_empty():
            return
        for value in geometry.coordinates():
            if not math.isfinite(value):
                raise InvalidGeometryError(
                    f"Cannot render coordinate {value!r} of {geometry!r}"
                )
    elif isinstance(geometry, (LineString, MultiPoint)):
        for point in geometry:
            check_coordinates(point, allow_empty_point=False)
    elif isinstance(geometry, GeometryContainer):
        for member in geometry:
            check_coordinates(member)
    else:
        raise TypeError(f"Unsupported geometry class: {type(geometry).__name__}")


def _format_number(value: float) -> str:
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


def _format_point(point: Point) -> str:
    return " ".join(_format_number(v) for v in point.coordinates())


def _format_points(points: list[Point]) -> str:
    if not points:
        return "EMPTY"
    return f"({', '.join(_format_point(p) for p in points)})"


def _keyword(geometry: Geometry) -> str:
    suffix = geometry.dimension.value
    if suffix:
        return f"{geometry.geometry_type} {suffix} "
    return geometry.geometry_type


def _body(geometry: Geometry) -> str:
    """The parenthesized part of the WKT, without the type keyword."""
    if isinstance(geometry, Point):
        return f"({_format_point(geometry)})"

    elif isinstance(geometry, LineString):
        return _format_points(geometry.points)

    elif isinstance(geometry, Polygon):
        if any(ring.is_empty() for ring in geometry.rings):
            raise InvalidGeometryError(f"Polygon rings cannot be empty: {geometry!r}")
        return f"({', '.join(_format_points(ring.points) for ring in geometry.rings)})"

    elif isinstance(geometry, MultiPoint):
        return f"({', '.join(f'({_format_point(p)})' for p in geometry.points)})"

    elif isinstance(geometry, MultiLineString):
        return f"({', '.join(_format_points(line.points) for line in geometry.line_strings)})"

    elif isinstance(geometry, MultiPolygon):
        return f"({', '.join(_body(p) if p.rings else 'EMPTY' for p in geometry.polygons)})"

    elif isinstance(geometry, GeometryCollection):
        return f"({', '.join(_render(member) for member in geometry.geometries)})"

    else:
        raise TypeError(f"Unsupported geometry class: {type(geometry).__name__}")


def _render(geometry: Geometry) -> str:
    keyword = _keyword(geometry)
    if geometry.is_empty():
        return f"{keyword.rstrip()} EMPTY"
    return f"{keyword}{_body(geometry)}"


def to_wkt(geometry: Geometry) -> str:
    """
    Convert a Geometry to WKT.

    Args:
        geometry: Geometry to render

    Returns:
        WKT string, e.g. "POINT(1 2)" or "LINESTRING Z (0 0 1, 1 1 2)"

    Raises:
        InvalidGeometryError: If a coordinate is NaN or infinite outside an
            empty point, members disagree on dimension, or a polygon ring
            is empty
    """
    geometry.validate()
    check_coordinates(geometry)
    return _render(geometry)


class BaseGenerator(ABC):
    """Builds PostGIS constructor SQL for geometry and geography columns."""

    #: Name used to select the generator in settings
    name = "base"

    @abstractmethod
    def to_geometry_sql(self, geometry: Geometry, schema: str = "public", srid: Optional[int] = None) -> str:
        """SQL expression producing a geometry value."""

    @abstractmethod
    def to_geography_sql(self, geometry: Geometry, schema: str = "public", srid: Optional[int] = None) -> str:
        """
        SQL expression producing a geography value.

        Callers must not pass a GeometryCollection here.
        """


class WKTGenerator(BaseGenerator):
    """Generates ST_GeomFromText / ST_GeogFromText calls."""

    name = "wkt"

    def generate(self, geometry: Geometry) -> str:
        return to_wkt(geometry)

    def to_geometry_sql(self, geometry: Geometry, schema: str = "public", srid: Optional[int] = None) -> str:
        return f"{schema}.ST_GeomFromText('{self.generate(geometry)}', {resolve_srid(geometry, srid)})"

    def to_geography_sql(self, geometry: Geometry, schema: str = "public", srid: Optional[int] = None) -> str:
        # ST_GeogFromText takes a single argument, so the SRID goes in as EWKT
        return f"{schema}.ST_GeogFromText('SRID={resolve_srid(geometry, srid)};{self.generate(geometry)}')"


class WKBGenerator(BaseGenerator):
    """Generates ST_GeomFromEWKB / ST_GeogFromWKB calls with hex EWKB literals."""

    name = "wkb"

    def generate(self, geometry: Geometry, srid: Optional[int] = None) -> str:
        check_coordinates(geometry)
        return dump_hex(geometry, srid=resolve_srid(geometry, srid))

    def to_geometry_sql(self, geometry: Geometry, schema: str = "public", srid: Optional[int] = None) -> str:
        return f"{schema}.ST_GeomFromEWKB(decode('{self.generate(geometry, srid)}', 'hex'))"

    def to_geography_sql(self, geometry: Geometry, schema: str = "public", srid: Optional[int] = None) -> str:
        return f"{schema}.ST_GeogFromWKB(decode('{self.generate(geometry, srid)}', 'hex'))"


GENERATORS = {
    WKTGenerator.name: WKTGenerator,
    WKBGenerator.name: WKBGenerator,
}


def get_generator(name: str = "wkt") -> BaseGenerator:
    """
    Instantiate a generator by name.

    Args:
        name: "wkt", "wkb", or a "package.module:ClassName" path to a
            BaseGenerator subclass

    Returns:
        Generator instance

    Raises:
        ConfigurationError: If the name cannot be resolved
    """
    if ":" in name:
        module_name, _, class_name = name.partition(":")
        try:
            generator_class = getattr(importlib.import_module(module_name), class_name)
        except (ImportError, AttributeError) as e:
            raise ConfigurationError(f"Cannot load SQL generator '{name}': {e}") from e
        if not (isinstance(generator_class, type) and issubclass(generator_class, BaseGenerator)):
            raise ConfigurationError(f"'{name}' is not a BaseGenerator subclass")
    else:
        generator_class = GENERATORS.get(name.lower())
        if generator_class is None:
            raise ConfigurationError(
                f"Unknown SQL generator '{name}'. Available: {', '.join(sorted(GENERATORS))}"
            )

    logger.debug("Using SQL generator %s", generator_class.__name__)
    return generator_class()
