"""
Wang Tiles - Map Topology

Describes how the cells of a map are laid out, and the coordinate
projections used by staggered (isometric / hexagonal offset) maps.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Orientation(Enum):
    ORTHOGONAL = "orthogonal"
    ISOMETRIC = "isometric"
    STAGGERED = "staggered"
    HEXAGONAL = "hexagonal"


class StaggerAxis(Enum):
    X = "x"
    Y = "y"


class StaggerIndex(Enum):
    ODD = "odd"
    EVEN = "even"


@dataclass(frozen=True)
class MapTopology:
    """Read-only layout descriptor of a map."""

    orientation: Orientation = Orientation.ORTHOGONAL
    stagger_axis: StaggerAxis = StaggerAxis.Y
    stagger_index: StaggerIndex = StaggerIndex.ODD

    @property
    def is_staggered(self) -> bool:
        # Hexagonal maps use the same offset layout as staggered ones
        return self.orientation in (Orientation.STAGGERED, Orientation.HEXAGONAL)


@dataclass(frozen=True)
class StaggeredGeometry:
    """
    Diagonal neighbor projection for staggered maps.

    Every other row (stagger axis Y) or column (stagger axis X) is shifted
    by half a cell. Which ones are shifted is given by the stagger index.
    """

    stagger_axis: StaggerAxis = StaggerAxis.Y
    stagger_index: StaggerIndex = StaggerIndex.ODD

    @classmethod
    def from_topology(cls, topology: MapTopology) -> StaggeredGeometry:
        return cls(topology.stagger_axis, topology.stagger_index)

    @property
    def _stagger_even(self) -> int:
        return 1 if self.stagger_index is StaggerIndex.EVEN else 0

    def do_stagger_x(self, x: int) -> bool:
        return self.stagger_axis is StaggerAxis.X and bool((x & 1) ^ self._stagger_even)

    def do_stagger_y(self, y: int) -> bool:
        return self.stagger_axis is StaggerAxis.Y and bool((y & 1) ^ self._stagger_even)

    def top_left(self, x: int, y: int) -> tuple[int, int]:
        if self.stagger_axis is StaggerAxis.Y:
            if self.do_stagger_y(y):
                return (x, y - 1)
            return (x - 1, y - 1)
        if self.do_stagger_x(x):
            return (x - 1, y)
        return (x - 1, y - 1)

    def top_right(self, x: int, y: int) -> tuple[int, int]:
        if self.stagger_axis is StaggerAxis.Y:
            if self.do_stagger_y(y):
                return (x + 1, y - 1)
            return (x, y - 1)
        if self.do_stagger_x(x):
            return (x + 1, y)
        return (x + 1, y - 1)

    def bottom_left(self, x: int, y: int) -> tuple[int, int]:
        if self.stagger_axis is StaggerAxis.Y:
            if self.do_stagger_y(y):
                return (x, y + 1)
            return (x - 1, y + 1)
        if self.do_stagger_x(x):
            return (x - 1, y + 1)
        return (x - 1, y)

    def bottom_right(self, x: int, y: int) -> tuple[int, int]:
        if self.stagger_axis is StaggerAxis.Y:
            if self.do_stagger_y(y):
                return (x + 1, y + 1)
            return (x, y + 1)
        if self.do_stagger_x(x):
            return (x + 1, y + 1)
        return (x + 1, y)
