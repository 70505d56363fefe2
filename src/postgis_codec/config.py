"""
Settings for the column coordination layer.

Settings are plain pydantic models passed explicitly to the objects that
need them; nothing in the codecs reads configuration globally.
"""

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError

PostgisType = Literal["geometry", "geography"]

# Environment variable -> settings field
ENV_VARS = {
    "POSTGIS_CODEC_SCHEMA": "schema_name",
    "POSTGIS_CODEC_DEFAULT_TYPE": "default_postgis_type",
    "POSTGIS_CODEC_DEFAULT_SRID": "default_srid",
    "POSTGIS_CODEC_AUTO_TRANSFORM": "transform_to_database_projection",
    "POSTGIS_CODEC_GENERATOR": "sql_generator",
}


def _lower(value):
    return value.strip().lower() if isinstance(value, str) else value


class ColumnConfig(BaseModel):
    """Storage kind and SRID of one PostGIS column."""
    model_config = ConfigDict(frozen=True)

    type: PostgisType = "geometry"
    srid: int = 4326

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value):
        return _lower(value)


class CodecSettings(BaseModel):
    """
    Defaults consumed by PostgisColumns.

    Attributes:
        schema_name: Schema that qualifies the PostGIS function names
        default_postgis_type: Column type for columns declared without one
        default_srid: SRID for columns declared without one
        transform_to_database_projection: Wrap mismatching geometries in
            ST_Transform instead of raising SridMismatchError
        sql_generator: Name of the generator ("wkt", "wkb" or "module:Class")
    """
    model_config = ConfigDict(frozen=True)

    schema_name: str = Field(default="public", min_length=1)
    default_postgis_type: PostgisType = "geometry"
    default_srid: int = 4326
    transform_to_database_projection: bool = False
    sql_generator: str = "wkt"

    @field_validator("default_postgis_type", mode="before")
    @classmethod
    def normalize_type(cls, value):
        return _lower(value)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CodecSettings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            Settings with unset variables left at their defaults

        Raises:
            ConfigurationError: If a variable has an invalid value
        """
        environ = os.environ if environ is None else environ
        values = {
            field: environ[var]
            for var, field in ENV_VARS.items()
            if environ.get(var, "").strip()
        }
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid postgis_codec environment settings: {e}") from e

    def default_column(self) -> ColumnConfig:
        return ColumnConfig(type=self.default_postgis_type, srid=self.default_srid)
