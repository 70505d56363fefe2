"""
Column-level coordination between geometries and PostGIS columns.

PostgisColumns knows which attributes of a record are PostGIS columns and
how each is stored (geometry or geography, SRID). On the write path it
reconciles SRIDs and turns Geometry values into constructor SQL; on the
read path it decodes the EWKB the database returns.
"""

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from .config import CodecSettings, ColumnConfig
from .exceptions import (
    MissingColumnConfigurationError,
    SridMismatchError,
    UnsupportedGeometryForGeographyError,
)
from .geometries import Geometry, GeometryCollection
from .io.sql_generator import BaseGenerator, get_generator
from .io.wkb_parser import parse_wkb

logger = logging.getLogger(__name__)

ColumnDeclaration = Union[ColumnConfig, Mapping[str, Any], None]


class PostgisColumns:
    """
    Declared PostGIS columns of one model or table.

    Columns are declared either as a list of names (which use the default
    type and SRID from the settings) or as a mapping of name to
    ColumnConfig / dict. A partial dict is completed from the defaults.

    Example:
        columns = PostgisColumns(
            {"location": {"type": "geography"}, "area": {"srid": 3006}},
            settings=CodecSettings.from_env(),
            owner="Parcel",
        )
        sql = columns.to_insertable("location", Point.make_geodetic(52.5, 13.4))
    """

    def __init__(
        self,
        columns: Union[Mapping[str, ColumnDeclaration], Iterable[str], None],
        settings: Optional[CodecSettings] = None,
        owner: str = "model",
        generator: Optional[BaseGenerator] = None
    ):
        """
        Args:
            columns: Column declarations, or None if the owner declares none
            settings: Defaults, schema and SRID policy (default settings if None)
            owner: Name of the model/table, used in error messages
            generator: SQL generator; resolved from settings.sql_generator if None
        """
        self.settings = settings or CodecSettings()
        self.owner = owner
        self.generator = generator or get_generator(self.settings.sql_generator)
        self._columns = self._normalize(columns)

    def _normalize(self, columns) -> Optional[dict[str, ColumnConfig]]:
        if columns is None:
            return None

        default = self.settings.default_column()
        if isinstance(columns, Mapping):
            items = columns.items()
        else:
            items = ((name, None) for name in columns)

        normalized = {}
        for name, declaration in items:
            if declaration is None:
                normalized[name] = default
            elif isinstance(declaration, ColumnConfig):
                normalized[name] = declaration
            else:
                normalized[name] = ColumnConfig(**{**default.model_dump(), **declaration})
        return normalized

    @property
    def schema(self) -> str:
        return self.settings.schema_name

    def column_names(self) -> list[str]:
        """
        Names of all declared PostGIS columns.

        Raises:
            MissingColumnConfigurationError: If the owner declared no columns
        """
        if self._columns is None:
            raise MissingColumnConfigurationError(
                f"{self.owner} has not defined any postgis columns"
            )
        return list(self._columns)

    def get_column_config(self, key: str) -> ColumnConfig:
        """
        Resolved type and SRID of a column.

        Raises:
            MissingColumnConfigurationError: If the column is not declared
        """
        if key not in self.column_names():
            raise MissingColumnConfigurationError(
                f"{self.owner} has not defined the column '{key}' as a postgis column",
                key=key
            )
        return self._columns[key]

    def _needs_transform(self, geometry: Geometry, srid: int) -> bool:
        """
        Check the geometry SRID against the column SRID.

        Returns:
            True if the SQL must be wrapped in ST_Transform

        Raises:
            SridMismatchError: If they differ and auto-transform is disabled
        """
        if not geometry.has_srid() or geometry.srid == srid:
            return False
        if not self.settings.transform_to_database_projection:
            raise SridMismatchError(expected=srid, actual=geometry.srid)
        logger.info(
            "Transforming %s from SRID %s to column SRID %s",
            type(geometry).__name__, geometry.srid, srid
        )
        return True

    def geom_from_text(self, geometry: Geometry, srid: Optional[int] = None) -> str:
        """
        SQL for inserting a geometry into a geometry column.

        Args:
            geometry: Value to insert
            srid: Column SRID (settings.default_srid if None)

        Returns:
            SQL expression
        """
        srid = self.settings.default_srid if srid is None else srid
        transform = self._needs_transform(geometry, srid)

        sql = self.generator.to_geometry_sql(
            geometry, self.schema, geometry.srid if geometry.has_srid() else srid
        )
        if transform:
            sql = f"{self.schema}.ST_Transform({sql}, {srid})"
        return sql

    def geog_from_text(self, geometry: Geometry, srid: Optional[int] = None) -> str:
        """
        SQL for inserting a geometry into a geography column.

        Raises:
            UnsupportedGeometryForGeographyError: For a GeometryCollection
            SridMismatchError: If the SRIDs differ and auto-transform is disabled
        """
        if isinstance(geometry, GeometryCollection):
            raise UnsupportedGeometryForGeographyError(type(geometry).__name__)

        srid = self.settings.default_srid if srid is None else srid
        if self._needs_transform(geometry, srid):
            geometry_sql = self.generator.to_geometry_sql(geometry, self.schema, geometry.srid)
            return f"{self.schema}.geography({self.schema}.ST_Transform({geometry_sql}, {srid}))"

        return self.generator.to_geography_sql(geometry, self.schema, srid)

    def get_geometry_as_insertable(self, geometry: Geometry, column_config: ColumnConfig) -> str:
        if column_config.type == "geometry":
            return self.geom_from_text(geometry, column_config.srid)
        return self.geog_from_text(geometry, column_config.srid)

    def to_insertable(self, key: str, geometry: Geometry) -> str:
        """SQL for writing geometry into the declared column key."""
        return self.get_geometry_as_insertable(geometry, self.get_column_config(key))

    def transform_attributes(self, attributes: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Geometry]]:
        """
        Replace Geometry values with insertable SQL for a write.

        Args:
            attributes: Attribute name -> value

        Returns:
            (attributes with SQL in place of geometries,
             the original geometries by name so they can be restored)
        """
        converted = dict(attributes)
        originals = {}
        for key, value in attributes.items():
            if isinstance(value, Geometry):
                originals[key] = value
                converted[key] = self.to_insertable(key, value)
        return converted, originals

    def parse_attributes(self, attributes: Mapping[str, Any], strict_rings: bool = False) -> dict[str, Any]:
        """
        Decode raw EWKB values of declared columns returned by the database.

        Values that are not str/bytes (e.g. None or already-decoded
        geometries) are left untouched, as are undeclared columns.
        """
        names = set(self.column_names())
        parsed = dict(attributes)
        for key, value in attributes.items():
            if key in names and isinstance(value, (str, bytes, bytearray, memoryview)):
                parsed[key] = parse_wkb(value, strict_rings=strict_rings)
        return parsed
