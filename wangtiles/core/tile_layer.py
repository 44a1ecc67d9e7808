"""
Wang Tiles - Tile Layers and Regions

A TileLayer is a positioned grid of cells, each either a tile id from a
tile set or empty. A Region is the set of cells an operation works on.
All coordinates are (x, y) map coordinates.
"""

from __future__ import annotations

from typing import Iterable, Iterator

import numpy as np
from pygame import Rect

from .constants import EMPTY_CELL


class Region:
    """Set of cells, iterated in row-major order (by y, then x)."""

    def __init__(self, cells: Iterable[tuple[int, int]] = ()):
        self._cells: set[tuple[int, int]] = set(cells)

    @classmethod
    def from_rect(cls, rect: Rect) -> Region:
        region = cls()
        region.add_rect(rect)
        return region

    def add(self, point: tuple[int, int]) -> None:
        self._cells.add((point[0], point[1]))

    def add_rect(self, rect: Rect) -> None:
        for y in range(rect.top, rect.bottom):
            for x in range(rect.left, rect.right):
                self._cells.add((x, y))

    def bounding_rect(self) -> Rect:
        """Smallest rect containing every cell; a zero-size rect when empty."""
        if not self._cells:
            return Rect(0, 0, 0, 0)
        xs = [x for x, _ in self._cells]
        ys = [y for _, y in self._cells]
        left, top = min(xs), min(ys)
        return Rect(left, top, max(xs) - left + 1, max(ys) - top + 1)

    def translated(self, dx: int, dy: int) -> Region:
        return Region((x + dx, y + dy) for x, y in self._cells)

    def is_empty(self) -> bool:
        return not self._cells

    def __contains__(self, point: object) -> bool:
        return point in self._cells

    def __iter__(self) -> Iterator[tuple[int, int]]:
        return iter(sorted(self._cells, key=lambda p: (p[1], p[0])))

    def __len__(self) -> int:
        return len(self._cells)

    def __bool__(self) -> bool:
        return bool(self._cells)

    def __or__(self, other: Region) -> Region:
        return Region(self._cells | other._cells)

    def __sub__(self, other: Region) -> Region:
        return Region(self._cells - other._cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Region):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        return f"Region({sorted(self._cells, key=lambda p: (p[1], p[0]))})"


class TileLayer:
    """
    Positioned grid of tile cells backed by a numpy array.

    Storage holds EMPTY_CELL for cells without a tile; the public accessors
    translate that to None.
    """

    def __init__(self, x: int = 0, y: int = 0, width: int = 0, height: int = 0, name: str = ""):
        self.name = name
        self.x = x
        self.y = y
        self.cells = np.full((height, width), EMPTY_CELL, dtype=np.int32)

    @classmethod
    def from_rows(cls, rows: list[list[int | None]], x: int = 0, y: int = 0, name: str = "") -> TileLayer:
        """Build a layer from rows of tile ids (None for empty cells)."""
        height = len(rows)
        width = len(rows[0]) if height > 0 else 0
        layer = cls(x, y, width, height, name)
        for row_index, row in enumerate(rows):
            for col_index, cell in enumerate(row):
                if cell is not None:
                    layer.cells[row_index, col_index] = cell
        return layer

    @property
    def width(self) -> int:
        return self.cells.shape[1]

    @property
    def height(self) -> int:
        return self.cells.shape[0]

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height

    def cell_at(self, x: int, y: int) -> int | None:
        """Tile id at (x, y), or None when empty or outside the layer."""
        if not self.contains(x, y):
            return None
        cell = int(self.cells[y - self.y, x - self.x])
        return None if cell == EMPTY_CELL else cell

    def set_cell(self, x: int, y: int, cell: int | None) -> None:
        if not self.contains(x, y):
            raise IndexError(f"Cell ({x}, {y}) outside layer {tuple(self.rect)}")
        self.cells[y - self.y, x - self.x] = EMPTY_CELL if cell is None else cell

    def is_empty(self) -> bool:
        return not np.any(self.cells != EMPTY_CELL)

    def region(self) -> Region:
        """Region of all occupied cells."""
        rows, cols = np.nonzero(self.cells != EMPTY_CELL)
        return Region((int(c) + self.x, int(r) + self.y) for r, c in zip(rows, cols))

    def resize_to_include(self, rect: Rect) -> None:
        """Grow the layer so it covers `rect`, keeping existing cells in place."""
        if rect.width <= 0 or rect.height <= 0:
            return
        if self.width == 0 or self.height == 0:
            self.x, self.y = rect.left, rect.top
            self.cells = np.full((rect.height, rect.width), EMPTY_CELL, dtype=np.int32)
            return

        left = min(self.x, rect.left)
        top = min(self.y, rect.top)
        right = max(self.x + self.width, rect.right)
        bottom = max(self.y + self.height, rect.bottom)
        if (left, top, right, bottom) == (self.x, self.y, self.x + self.width, self.y + self.height):
            return

        grown = np.full((bottom - top, right - left), EMPTY_CELL, dtype=np.int32)
        off_x, off_y = self.x - left, self.y - top
        grown[off_y:off_y + self.height, off_x:off_x + self.width] = self.cells
        self.x, self.y = left, top
        self.cells = grown

    def set_cells(self, source: TileLayer, region: Region) -> None:
        """Copy the cells of `source` within `region` into this layer, growing it as needed."""
        self.resize_to_include(region.bounding_rect())
        for x, y in region:
            self.set_cell(x, y, source.cell_at(x, y))

    def copy(self) -> TileLayer:
        layer = TileLayer(self.x, self.y, 0, 0, self.name)
        layer.cells = self.cells.copy()
        return layer

    def to_rows(self) -> list[list[int | None]]:
        return [
            [None if cell == EMPTY_CELL else int(cell) for cell in row]
            for row in self.cells
        ]
