"""
Point geometry with optional Z and M components and WGS84 helpers.
"""

import math
from typing import Optional

from ..exceptions import GeodeticMismatchError
from .dimension import Dimension
from .geometry import Geometry

#: SRID of WGS84, used by the geodetic helpers
WGS84_SRID = 4326


def _same_value(a: Optional[float], b: Optional[float]) -> bool:
    """Compare two optional coordinates, treating NaN as equal to NaN."""
    if a is None or b is None:
        return a is b
    if math.isnan(a) and math.isnan(b):
        return True
    return a == b


class Point(Geometry):
    """
    A single position.

    The dimension is derived from which of z and m are set, so assigning
    z or m changes it and assigning x or y never does. An empty point has
    NaN for x and y (and for z/m when its dimension declares them).
    """

    geometry_type = "POINT"

    def __init__(
        self,
        x: float,
        y: float,
        z: Optional[float] = None,
        m: Optional[float] = None,
        srid: Optional[int] = None
    ):
        super().__init__(srid)
        self._x = float(x)
        self._y = float(y)
        self._z = None if z is None else float(z)
        self._m = None if m is None else float(m)

    @classmethod
    def make(
        cls,
        x: float,
        y: float,
        z: Optional[float] = None,
        m: Optional[float] = None,
        srid: Optional[int] = None
    ) -> "Point":
        return cls(x, y, z, m, srid)

    @classmethod
    def make_geodetic(
        cls,
        latitude: float,
        longitude: float,
        altitude: Optional[float] = None,
        m: Optional[float] = None
    ) -> "Point":
        """
        Create a WGS84 point (SRID 4326).

        Args:
            latitude: Latitude in degrees (stored as y)
            longitude: Longitude in degrees (stored as x)
            altitude: Optional altitude (stored as z)
            m: Optional measure

        Returns:
            Point with SRID 4326
        """
        return cls(longitude, latitude, altitude, m, WGS84_SRID)

    @classmethod
    def make_empty(cls, srid: Optional[int] = None, dimension: Dimension = Dimension.D2) -> "Point":
        z = math.nan if dimension.has_z_dimension() else None
        m = math.nan if dimension.is_measured() else None
        return cls(math.nan, math.nan, z, m, srid)

    @property
    def dimension(self) -> Dimension:
        return Dimension.from_coordinates(self._x, self._y, self._z, self._m)

    def is_empty(self) -> bool:
        return math.isnan(self._x) and math.isnan(self._y)

    @property
    def x(self) -> float:
        return self._x

    @x.setter
    def x(self, value: float):
        self._x = float(value)

    @property
    def y(self) -> float:
        return self._y

    @y.setter
    def y(self, value: float):
        self._y = float(value)

    @property
    def z(self) -> Optional[float]:
        return self._z

    @z.setter
    def z(self, value: Optional[float]):
        self._z = None if value is None else float(value)

    @property
    def m(self) -> Optional[float]:
        return self._m

    @m.setter
    def m(self, value: Optional[float]):
        self._m = None if value is None else float(value)

    def coordinates(self) -> tuple:
        """Coordinate tuple in WKB order: x, y, then z and m when present."""
        coords = [self._x, self._y]
        if self._z is not None:
            coords.append(self._z)
        if self._m is not None:
            coords.append(self._m)
        return tuple(coords)

    # Geodetic helpers

    def is_geodetic(self) -> bool:
        return self.srid in (None, 0, WGS84_SRID)

    def _assert_geodetic(self):
        if not self.is_geodetic():
            raise GeodeticMismatchError(self.srid)

    @property
    def latitude(self) -> float:
        self._assert_geodetic()
        return self._y

    @latitude.setter
    def latitude(self, value: float):
        self._assert_geodetic()
        self.y = value

    @property
    def longitude(self) -> float:
        self._assert_geodetic()
        return self._x

    @longitude.setter
    def longitude(self, value: float):
        self._assert_geodetic()
        self.x = value

    @property
    def altitude(self) -> Optional[float]:
        self._assert_geodetic()
        return self._z

    @altitude.setter
    def altitude(self, value: Optional[float]):
        self._assert_geodetic()
        self.z = value

    def _same_payload(self, other: "Point") -> bool:
        return all(
            _same_value(a, b)
            for a, b in zip(
                (self._x, self._y, self._z, self._m),
                (other._x, other._y, other._z, other._m)
            )
        )

    def __repr__(self):
        if self.is_empty():
            return f"Point.make_empty(srid={self.srid!r}, dimension=Dimension.{self.dimension.name})"
        parts = [f"x={self._x!r}", f"y={self._y!r}"]
        if self._z is not None:
            parts.append(f"z={self._z!r}")
        if self._m is not None:
            parts.append(f"m={self._m!r}")
        parts.append(f"srid={self.srid!r}")
        return f"Point({', '.join(parts)})"
