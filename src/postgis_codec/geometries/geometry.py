"""
Root of the geometry variant family and the shared composite behaviour.

The family is closed: Point, LineString, Polygon, MultiPoint,
MultiLineString, MultiPolygon and GeometryCollection. Codecs dispatch on
exactly these classes.
"""

import copy
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..exceptions import InvalidGeometryError
from .dimension import Dimension


class Geometry(ABC):
    """
    Base class for all geometries.

    Attributes:
        srid: Spatial reference ID, or None to inherit the column default
    """

    #: OGC type keyword used in WKT
    geometry_type = "GEOMETRY"

    def __init__(self, srid: Optional[int] = None):
        self.srid = srid

    def has_srid(self) -> bool:
        return self.srid is not None

    @property
    @abstractmethod
    def dimension(self) -> Dimension:
        """Coordinate dimension, derived from the contents."""

    @abstractmethod
    def is_empty(self) -> bool:
        """True if the geometry has no coordinates."""

    def is_3d(self) -> bool:
        return self.dimension.has_z_dimension()

    def is_measured(self) -> bool:
        return self.dimension.is_measured()

    def _assign_srid(self, srid: Optional[int]):
        """Set the SRID on this geometry and everything it contains."""
        self.srid = srid

    def _with_srid(self, srid: Optional[int]) -> "Geometry":
        """Copy of this geometry carrying srid, leaving the original untouched."""
        clone = copy.deepcopy(self)
        clone._assign_srid(srid)
        return clone

    def validate(self):
        """
        Check the invariants that mutation after construction can break.

        Raises:
            InvalidGeometryError: If a container holds members of another dimension
        """

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return (
            self.srid == other.srid
            and self.dimension == other.dimension
            and self._same_payload(other)
        )

    # Geometries are mutable values
    __hash__ = None

    @abstractmethod
    def _same_payload(self, other) -> bool:
        """Compare contents with another geometry of the same class."""


class GeometryContainer(Geometry):
    """
    A geometry made of an ordered sequence of child geometries.

    Children share the container's SRID and dimension. An empty container
    keeps the dimension it was created with.
    """

    #: Allowed child class (or tuple of classes)
    child_type: type = Geometry

    def __init__(
        self,
        children: Sequence[Geometry] = (),
        srid: Optional[int] = None,
        dimension: Optional[Dimension] = None
    ):
        children = list(children)
        for child in children:
            if not isinstance(child, self.child_type):
                raise InvalidGeometryError(
                    f"{type(self).__name__} cannot contain {type(child).__name__}"
                )

        srid = self._resolve_srid(children, srid)
        self._empty_dimension = self._resolve_dimension(children, dimension)

        super().__init__(srid)
        # Children with another SRID are copied; the caller's objects keep theirs
        self._children = [c if c.srid == srid else c._with_srid(srid) for c in children]

    @classmethod
    def make_empty(cls, srid: Optional[int] = None, dimension: Dimension = Dimension.D2):
        return cls([], srid=srid, dimension=dimension)

    def _resolve_srid(self, children: list, srid: Optional[int]) -> Optional[int]:
        child_srids = {c.srid for c in children if c.srid is not None}
        if srid is None:
            if len(child_srids) > 1:
                raise InvalidGeometryError(
                    f"{type(self).__name__} children have conflicting SRIDs: "
                    f"{sorted(child_srids)}"
                )
            return child_srids.pop() if child_srids else None

        conflicting = child_srids - {srid}
        if conflicting:
            raise InvalidGeometryError(
                f"{type(self).__name__} has SRID {srid} but children have "
                f"SRID {sorted(conflicting)}"
            )
        return srid

    def _resolve_dimension(self, children: list, dimension: Optional[Dimension]) -> Dimension:
        dims = {c.dimension for c in children}
        if len(dims) > 1:
            names = sorted(d.name for d in dims)
            raise InvalidGeometryError(
                f"{type(self).__name__} children have mixed dimensions: {names}"
            )
        if dims:
            child_dim = dims.pop()
            if dimension is not None and dimension != child_dim:
                raise InvalidGeometryError(
                    f"{type(self).__name__} declared {dimension.name} but children "
                    f"are {child_dim.name}"
                )
            return child_dim
        return dimension or Dimension.D2

    @property
    def dimension(self) -> Dimension:
        if self._children:
            return self._children[0].dimension
        return self._empty_dimension

    @property
    def children(self) -> list:
        return self._children

    def is_empty(self) -> bool:
        return len(self._children) == 0

    def _assign_srid(self, srid: Optional[int]):
        self.srid = srid
        for child in self._children:
            child._assign_srid(srid)

    def validate(self):
        dimension = self.dimension
        for child in self._children:
            child.validate()
            if child.dimension != dimension:
                raise InvalidGeometryError(
                    f"{type(self).__name__} is {dimension.name} but member "
                    f"{type(child).__name__} is {child.dimension.name}"
                )

    def _same_payload(self, other) -> bool:
        return self._children == other._children

    def __len__(self):
        return len(self._children)

    def __iter__(self):
        return iter(self._children)

    def __getitem__(self, index):
        return self._children[index]

    def __repr__(self):
        return (
            f"{type(self).__name__}({self._children!r}, srid={self.srid!r}, "
            f"dimension=Dimension.{self.dimension.name})"
        )
