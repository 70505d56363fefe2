"""
Error types raised by the geometry model, the codecs and the column glue.

Every error derives from PostgisCodecError so callers can catch the whole
family, and each message names the offending value.
"""

from typing import Optional


class PostgisCodecError(Exception):
    """Base class for all postgis_codec errors."""


class MalformedWKBError(PostgisCodecError, ValueError):
    """Raised when a byte buffer is not valid (E)WKB."""

    def __init__(self, message: str, offset: Optional[int] = None):
        if offset is not None:
            message = f"{message} (at byte {offset})"
        super().__init__(message)
        self.offset = offset


class InvalidGeometryError(PostgisCodecError, ValueError):
    """Raised when a geometry violates a structural invariant."""


class UnsupportedGeometryForGeographyError(PostgisCodecError):
    """Raised when a geometry kind cannot be stored in a geography column."""

    def __init__(self, geometry_type: str):
        super().__init__(
            f"{geometry_type} cannot be inserted into a geography column, "
            f"use a geometry column instead"
        )
        self.geometry_type = geometry_type


class SridMismatchError(PostgisCodecError):
    """Raised when a geometry SRID differs from the target column SRID."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"SRID mismatch: column expects {expected} but geometry has {actual}. "
            f"Enable transform_to_database_projection to convert automatically."
        )
        self.expected = expected
        self.actual = actual


class GeodeticMismatchError(PostgisCodecError):
    """Raised when a geodetic accessor is used on a non-geodetic point."""

    def __init__(self, srid: Optional[int]):
        super().__init__(
            f"Geodetic accessors require SRID 4326 (or none), point has SRID {srid}"
        )
        self.srid = srid


class MissingColumnConfigurationError(PostgisCodecError, LookupError):
    """Raised when a column has no declared PostGIS configuration."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class ConfigurationError(PostgisCodecError, ValueError):
    """Raised for invalid settings values."""
