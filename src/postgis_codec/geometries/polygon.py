"""Polygon geometry."""

from typing import Optional, Sequence

from .dimension import Dimension
from .geometry import GeometryContainer
from .linestring import LineString


class Polygon(GeometryContainer):
    """
    A polygon made of linear rings.

    The first ring is the exterior boundary, any further rings are holes.
    """

    geometry_type = "POLYGON"
    child_type = LineString

    def __init__(
        self,
        rings: Sequence[LineString] = (),
        srid: Optional[int] = None,
        dimension: Optional[Dimension] = None
    ):
        super().__init__(rings, srid, dimension)

    @property
    def rings(self) -> list[LineString]:
        return self._children

    @property
    def exterior_ring(self) -> Optional[LineString]:
        return self._children[0] if self._children else None

    @property
    def interior_rings(self) -> list[LineString]:
        return self._children[1:]
