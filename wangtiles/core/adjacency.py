"""
Wang Tiles - Cell Adjacency

Maps a cell and one of its 8 Wang slots to the neighboring cell that shares
that edge or corner. Neighbor-of-neighbor across the opposite slot always
leads back to the original cell.
"""

from __future__ import annotations

from typing import Protocol

from .constants import NUM_INDEXES
from .topology import MapTopology, StaggerAxis, StaggeredGeometry
from .wang_id import WangId


class Adjacency(Protocol):
    """Neighbor lookup for one grid topology."""

    def neighbor(self, point: tuple[int, int], index: int) -> tuple[int, int]:
        """Cell across slot `index` of `point`."""
        ...

    def neighbors(self, point: tuple[int, int]) -> list[tuple[int, int]]:
        """All 8 neighbors, indexed by slot."""
        ...


# Offsets indexed by Wang slot: N, NE, E, SE, S, SW, W, NW
AROUND_TILE_POINTS = (
    (0, -1),
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
)

# Corner offsets on staggered maps, for corner slots 1, 3, 5, 7
STAGGER_X_CORNER_OFFSETS = ((2, 0), (0, 1), (-2, 0), (0, -1))
STAGGER_Y_CORNER_OFFSETS = ((1, 0), (0, 2), (-1, 0), (0, -2))


class RectangularAdjacency:
    """Compass offsets, used for orthogonal and isometric maps."""

    def neighbor(self, point: tuple[int, int], index: int) -> tuple[int, int]:
        assert 0 <= index < NUM_INDEXES, f"Wang index out of range: {index}"
        dx, dy = AROUND_TILE_POINTS[index]
        return (point[0] + dx, point[1] + dy)

    def neighbors(self, point: tuple[int, int]) -> list[tuple[int, int]]:
        return [self.neighbor(point, index) for index in range(NUM_INDEXES)]


class StaggeredAdjacency:
    """
    Neighbors on a staggered map.

    A staggered cell is drawn as a diamond, so its edges face the diagonal
    neighbors and its corners point at the cells two half-steps away along
    each axis.
    """

    def __init__(self, geometry: StaggeredGeometry):
        self.geometry = geometry
        if geometry.stagger_axis is StaggerAxis.X:
            self._corner_offsets = STAGGER_X_CORNER_OFFSETS
        else:
            self._corner_offsets = STAGGER_Y_CORNER_OFFSETS

    def neighbor(self, point: tuple[int, int], index: int) -> tuple[int, int]:
        assert 0 <= index < NUM_INDEXES, f"Wang index out of range: {index}"
        x, y = point
        if index == WangId.TOP:
            return self.geometry.top_right(x, y)
        if index == WangId.RIGHT:
            return self.geometry.bottom_right(x, y)
        if index == WangId.BOTTOM:
            return self.geometry.bottom_left(x, y)
        if index == WangId.LEFT:
            return self.geometry.top_left(x, y)
        dx, dy = self._corner_offsets[index // 2]
        return (x + dx, y + dy)

    def neighbors(self, point: tuple[int, int]) -> list[tuple[int, int]]:
        return [self.neighbor(point, index) for index in range(NUM_INDEXES)]


def adjacency_for(topology: MapTopology | None = None) -> Adjacency:
    """Pick the adjacency implementation for a map topology."""
    if topology is not None and topology.is_staggered:
        return StaggeredAdjacency(StaggeredGeometry.from_topology(topology))
    return RectangularAdjacency()
