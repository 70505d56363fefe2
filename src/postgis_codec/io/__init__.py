# Binary and text codecs
from .wkb_parser import parse_wkb
from .wkb_generator import dump_wkb, dump_hex
from .sql_generator import (
    BaseGenerator,
    WKTGenerator,
    WKBGenerator,
    get_generator,
    to_wkt,
    DEFAULT_SRID,
)
from .geojson import to_geojson, wkb_to_geojson

__all__ = [
    "parse_wkb",
    "dump_wkb",
    "dump_hex",
    "BaseGenerator",
    "WKTGenerator",
    "WKBGenerator",
    "get_generator",
    "to_wkt",
    "DEFAULT_SRID",
    "to_geojson",
    "wkb_to_geojson",
]
