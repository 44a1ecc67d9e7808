"""
Wang Tiles - Wang Brush

Turns a brush stroke (a color painted on a cell, an edge or a corner) into
the per-cell color constraints and the region the Wang filler completes.
Pointer handling is left to the caller: it supplies the painted cell and,
outside of tile mode, the Wang slot under the pointer.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum

from wangtiles.core.constants import NUM_INDEXES
from wangtiles.core.tile_layer import Region, TileLayer
from wangtiles.core.topology import MapTopology
from wangtiles.core.wang_id import CellConstraint, ConstraintGrid, WangId
from wangtiles.core.wang_set import WangSet

from .wang_filler import WangFiller

logger = logging.getLogger(__name__)


class BrushMode(Enum):
    IDLE = "idle"
    PAINT_CORNER = "paint_corner"
    PAINT_EDGE = "paint_edge"
    PAINT_EDGE_AND_CORNER = "paint_edge_and_corner"


def brush_mode_for_color(wang_set: WangSet | None, color: int) -> BrushMode:
    """
    Choose how a color is painted from where the set's tiles use it.

    Colors used only on edges paint edges, colors used only on corners paint
    corners. Anything else paints both.
    """
    if wang_set is None:
        used_as_edge, used_as_corner = False, False
    else:
        used_as_edge, used_as_corner = wang_set.color_usage(color)

    if used_as_edge == used_as_corner:
        return BrushMode.PAINT_EDGE_AND_CORNER
    if used_as_edge:
        return BrushMode.PAINT_EDGE
    return BrushMode.PAINT_CORNER


@dataclass
class BrushStroke:
    """Tiles produced by one brush application."""

    stamp: TileLayer
    region: Region
    invalid: Region = field(default_factory=Region)

    @property
    def is_valid(self) -> bool:
        return self.invalid.is_empty()


class WangBrush:
    """Paints Wang colors and lets the filler complete the touched cells."""

    def __init__(
        self,
        wang_set: WangSet | None = None,
        topology: MapTopology | None = None,
        rng: random.Random | None = None,
    ):
        self.topology = topology if topology is not None else MapTopology()
        self.rng = rng if rng is not None else random.Random()
        self.wang_set: WangSet | None = None
        self.color = 0
        self.mode = BrushMode.IDLE
        self._filler: WangFiller | None = None
        self.set_wang_set(wang_set)

    def set_wang_set(self, wang_set: WangSet | None) -> None:
        """Switch sets. The brush is idle until a color is chosen."""
        self.wang_set = wang_set
        self.color = 0
        self.mode = BrushMode.IDLE
        if wang_set is None:
            self._filler = None
        else:
            self._filler = WangFiller(wang_set, self.topology, self.rng)

    def set_color(self, color: int) -> None:
        self.color = color
        self.mode = brush_mode_for_color(self.wang_set, color)
        logger.debug("Wang brush color %d, mode %s", color, self.mode.value)

    def build_constraints(
        self,
        paint_point: tuple[int, int],
        wang_index: int | None = None,
        tile_mode: bool = False,
    ) -> tuple[ConstraintGrid, Region]:
        """
        Constraints and fill region for painting the current color.

        Args:
            paint_point: Cell under the pointer.
            wang_index: Slot of `paint_point` being painted. Ignored in tile
                mode, where the whole cell takes the color.
            tile_mode: Paint the whole cell instead of one edge or corner.

        Returns:
            (constraints, region) to hand to WangFiller.fill_region.
        """
        grid = ConstraintGrid()
        region = Region()

        if self._filler is None or self.mode is BrushMode.IDLE:
            return grid, region

        if tile_mode:
            self._build_tile(grid, region, paint_point)
            return grid, region

        if wang_index is None:
            return grid, region

        mode = self.mode
        if mode is BrushMode.PAINT_EDGE_AND_CORNER:
            mode = BrushMode.PAINT_CORNER if WangId.is_corner(wang_index) else BrushMode.PAINT_EDGE

        if mode is BrushMode.PAINT_CORNER:
            assert WangId.is_corner(wang_index), f"Corner brush needs a corner index, got {wang_index}"
            self._build_corner(grid, region, self._vertex_cell(paint_point, wang_index))
        else:
            assert not WangId.is_corner(wang_index), f"Edge brush needs an edge index, got {wang_index}"
            self._build_edge(grid, region, paint_point, wang_index)

        return grid, region

    def paint(
        self,
        layer: TileLayer,
        paint_point: tuple[int, int],
        wang_index: int | None = None,
        tile_mode: bool = False,
    ) -> BrushStroke:
        """
        Fill the cells touched by a brush application.

        `layer` is only read. The result is a stamp positioned in map
        coordinates, together with the cells that could not be matched.
        """
        grid, region = self.build_constraints(paint_point, wang_index, tile_mode)
        stamp = TileLayer()
        if region.is_empty():
            return BrushStroke(stamp, region)

        result = self._filler.fill_region(stamp, layer, region, grid)
        return BrushStroke(stamp, region, result.invalid)

    def capture_color(self, layer: TileLayer, point: tuple[int, int], wang_index: int) -> int | None:
        """
        Pick up the color at slot `wang_index` of the tile at `point`.

        Returns:
            The newly selected color, or None when the slot has no color or
            already holds the current one.
        """
        if self.wang_set is None:
            return None

        wang_id = self.wang_set.wang_id_of_cell(layer.cell_at(point[0], point[1]))
        color = wang_id.index_color(wang_index)
        if not color or color == self.color:
            return None

        self.set_color(color)
        return color

    # -------------------------------------------------------------------------
    # Constraint shapes
    # -------------------------------------------------------------------------

    def _neighbor(self, point: tuple[int, int], index: int) -> tuple[int, int]:
        return self._filler.adjacency.neighbor(point, index)

    def _vertex_cell(self, point: tuple[int, int], corner_index: int) -> tuple[int, int]:
        """Cell whose top-left corner is corner `corner_index` of `point`."""
        if corner_index == WangId.TOP_RIGHT:
            return self._neighbor(point, WangId.RIGHT)
        if corner_index == WangId.BOTTOM_LEFT:
            return self._neighbor(point, WangId.BOTTOM)
        if corner_index == WangId.BOTTOM_RIGHT:
            return self._neighbor(point, WangId.BOTTOM_RIGHT)
        return point

    def _build_tile(self, grid: ConstraintGrid, region: Region, point: tuple[int, int]) -> None:
        paints_edges = self.mode in (BrushMode.PAINT_EDGE, BrushMode.PAINT_EDGE_AND_CORNER)
        paints_corners = self.mode in (BrushMode.PAINT_CORNER, BrushMode.PAINT_EDGE_AND_CORNER)

        center = CellConstraint()
        for index in range(NUM_INDEXES):
            if (paints_corners and WangId.is_corner(index)) or (paints_edges and not WangId.is_corner(index)):
                center = center.constrain(index, self.color)
        region.add(point)
        grid.set(point, center)

        for index in range(NUM_INDEXES):
            is_corner = WangId.is_corner(index)
            if self.mode is BrushMode.PAINT_EDGE and is_corner:
                continue

            adjacent_point = self._neighbor(point, index)
            adjacent = CellConstraint()

            # Side or corner facing the painted cell
            if is_corner or paints_edges:
                adjacent = adjacent.constrain(WangId.opposite_index(index), self.color)

            # Corners of an edge neighbor that touch the painted cell
            if not is_corner and paints_corners:
                adjacent = adjacent.constrain((index + 3) % NUM_INDEXES, self.color)
                adjacent = adjacent.constrain((index + 5) % NUM_INDEXES, self.color)

            region.add(adjacent_point)
            grid.set(adjacent_point, adjacent)

    def _build_corner(self, grid: ConstraintGrid, region: Region, point: tuple[int, int]) -> None:
        """Paint the top-left corner of `point` on all four cells sharing it."""
        cells = (
            (self._neighbor(point, WangId.TOP), WangId.BOTTOM_LEFT),
            (point, WangId.TOP_LEFT),
            (self._neighbor(point, WangId.LEFT), WangId.TOP_RIGHT),
            (self._neighbor(point, WangId.TOP_LEFT), WangId.BOTTOM_RIGHT),
        )
        for cell, corner_index in cells:
            region.add(cell)
            grid.constrain(cell, corner_index, self.color)

    def _build_edge(self, grid: ConstraintGrid, region: Region, point: tuple[int, int], edge_index: int) -> None:
        dir_point = self._neighbor(point, edge_index)
        region.add(point)
        region.add(dir_point)
        grid.constrain(point, edge_index, self.color)
        grid.constrain(dir_point, WangId.opposite_index(edge_index), self.color)
