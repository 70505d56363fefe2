#!/usr/bin/env python3
"""
Command line tool for inspecting PostGIS EWKB values.

Usage:
    postgis-codec wkt 0101000020E610000033333333333322409A99999999594840
    postgis-codec geojson <hex>
    postgis-codec sql <hex> --schema public --type geography --srid 4326
    echo <hex> | postgis-codec info
"""

import argparse
import json
import sys

from .config import CodecSettings
from .columns import PostgisColumns
from .exceptions import PostgisCodecError
from .io import parse_wkb, to_geojson, to_wkt


def _read_hex(args) -> str:
    if args.wkb:
        return "".join(args.wkb)
    return sys.stdin.read().strip()


def cmd_wkt(args, geometry):
    print(to_wkt(geometry))


def cmd_geojson(args, geometry):
    print(json.dumps(to_geojson(geometry), indent=args.indent))


def cmd_sql(args, geometry):
    settings = CodecSettings.from_env()
    overrides = {
        "schema_name": args.schema,
        "sql_generator": args.generator,
        "transform_to_database_projection": args.transform or None,
    }
    settings = settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    column = {"type": args.type}
    if args.srid is not None:
        column["srid"] = args.srid
    columns = PostgisColumns({"value": column}, settings=settings, owner="command line")
    print(columns.to_insertable("value", geometry))


def cmd_info(args, geometry):
    print(f"Type:       {type(geometry).__name__}")
    print(f"SRID:       {geometry.srid if geometry.has_srid() else 'none'}")
    print(f"Dimension:  {geometry.dimension.name}")
    print(f"Empty:      {'yes' if geometry.is_empty() else 'no'}")
    if not geometry.is_empty() and hasattr(geometry, "__len__"):
        print(f"Members:    {len(geometry)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="postgis-codec",
        description="Decode PostGIS EWKB and render it as WKT, GeoJSON or SQL"
    )
    parser.add_argument(
        "--strict-rings",
        action="store_true",
        help="Reject polygon rings that are not closed"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_command(name, func, help_text):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("wkb", nargs="*", help="Hex EWKB (read from stdin if omitted)")
        sub.set_defaults(func=func)
        return sub

    add_command("wkt", cmd_wkt, "Print the geometry as WKT")

    geojson = add_command("geojson", cmd_geojson, "Print the geometry as GeoJSON")
    geojson.add_argument("--indent", type=int, default=None, help="JSON indentation")

    sql = add_command("sql", cmd_sql, "Print an insertable SQL expression")
    sql.add_argument("--schema", type=str, default=None, help="Schema for function names (default: public)")
    sql.add_argument(
        "--type",
        choices=["geometry", "geography"],
        default="geometry",
        help="Target column type (default: geometry)"
    )
    sql.add_argument("--srid", type=int, default=None, help="Target column SRID (default: 4326)")
    sql.add_argument("--generator", type=str, default=None, help="SQL generator: wkt or wkb")
    sql.add_argument(
        "--transform",
        action="store_true",
        help="Wrap in ST_Transform when the geometry SRID differs from the column"
    )

    add_command("info", cmd_info, "Print type, SRID and dimension")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        geometry = parse_wkb(_read_hex(args), strict_rings=args.strict_rings)
        args.func(args, geometry)
    except PostgisCodecError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
