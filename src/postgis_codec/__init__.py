# PostGIS geometry model and EWKB / WKT codecs
from .exceptions import (
    PostgisCodecError,
    MalformedWKBError,
    InvalidGeometryError,
    UnsupportedGeometryForGeographyError,
    SridMismatchError,
    GeodeticMismatchError,
    MissingColumnConfigurationError,
    ConfigurationError,
)
from .geometries import (
    Dimension,
    Geometry,
    Point,
    LineString,
    Polygon,
    MultiPoint,
    MultiLineString,
    MultiPolygon,
    GeometryCollection,
)
from .io import (
    parse_wkb,
    dump_wkb,
    dump_hex,
    to_wkt,
    to_geojson,
    BaseGenerator,
    WKTGenerator,
    WKBGenerator,
    get_generator,
)
from .config import CodecSettings, ColumnConfig
from .columns import PostgisColumns

__version__ = "0.1.0"

__all__ = [
    "PostgisCodecError",
    "MalformedWKBError",
    "InvalidGeometryError",
    "UnsupportedGeometryForGeographyError",
    "SridMismatchError",
    "GeodeticMismatchError",
    "MissingColumnConfigurationError",
    "ConfigurationError",
    "Dimension",
    "Geometry",
    "Point",
    "LineString",
    "Polygon",
    "MultiPoint",
    "MultiLineString",
    "MultiPolygon",
    "GeometryCollection",
    "parse_wkb",
    "dump_wkb",
    "dump_hex",
    "to_wkt",
    "to_geojson",
    "BaseGenerator",
    "WKTGenerator",
    "WKBGenerator",
    "get_generator",
    "CodecSettings",
    "ColumnConfig",
    "PostgisColumns",
]
