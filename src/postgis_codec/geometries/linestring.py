"""LineString geometry."""

from typing import Optional, Sequence

from .dimension import Dimension
from .geometry import GeometryContainer
from .point import Point


class LineString(GeometryContainer):
    """An ordered sequence of points. Also used for polygon rings."""

    geometry_type = "LINESTRING"
    child_type = Point

    def __init__(
        self,
        points: Sequence[Point] = (),
        srid: Optional[int] = None,
        dimension: Optional[Dimension] = None
    ):
        super().__init__(points, srid, dimension)

    @property
    def points(self) -> list[Point]:
        return self._children

    def is_closed(self) -> bool:
        """True if the first and last coordinates are equal."""
        if not self._children:
            return False
        return self._children[0].coordinates() == self._children[-1].coordinates()

    def is_ring(self) -> bool:
        """True if this line can serve as a polygon ring (closed, at least 4 points)."""
        return len(self._children) >= 4 and self.is_closed()
