"""GeometryCollection: a heterogeneous, nestable list of geometries."""

from typing import Optional, Sequence

from .dimension import Dimension
from .geometry import Geometry, GeometryContainer


class GeometryCollection(GeometryContainer):
    """
    Any mix of geometries, including other collections.

    Collections can only be stored in geometry columns, never in
    geography columns.
    """

    geometry_type = "GEOMETRYCOLLECTION"
    child_type = Geometry

    def __init__(
        self,
        geometries: Sequence[Geometry] = (),
        srid: Optional[int] = None,
        dimension: Optional[Dimension] = None
    ):
        super().__init__(geometries, srid, dimension)

    @property
    def geometries(self) -> list[Geometry]:
        return self._children
