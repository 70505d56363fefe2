"""
Coordinate dimension classification (2D / Z / M / ZM).
"""

from enum import Enum
from typing import Optional


class Dimension(Enum):
    """Shape of a coordinate tuple. The value is the OGC WKT suffix."""
    D2 = ""
    Z = "Z"
    M = "M"
    ZM = "ZM"

    @classmethod
    def from_coordinates(
        cls,
        x: float,
        y: float,
        z: Optional[float] = None,
        m: Optional[float] = None
    ) -> "Dimension":
        """
        Classify a coordinate tuple.

        Only the presence of z and m matters, not their value: NaN counts
        as present.
        """
        if z is not None and m is not None:
            return cls.ZM
        if z is not None:
            return cls.Z
        if m is not None:
            return cls.M
        return cls.D2

    @classmethod
    def from_flags(cls, has_z: bool, has_m: bool) -> "Dimension":
        """Dimension for a pair of Z/M flags (as found in a WKB type word)."""
        return cls.from_coordinates(0.0, 0.0, 0.0 if has_z else None, 0.0 if has_m else None)

    def has_z_dimension(self) -> bool:
        return self in (Dimension.Z, Dimension.ZM)

    def is_measured(self) -> bool:
        return self in (Dimension.M, Dimension.ZM)

    @property
    def coordinate_count(self) -> int:
        """Number of doubles per coordinate tuple."""
        return 2 + int(self.has_z_dimension()) + int(self.is_measured())
