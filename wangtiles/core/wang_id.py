"""
Wang Tiles - Color Signatures

A WangId packs one 4-bit color per slot for the 8 slots around a cell
(4 edges and 4 corners). Color 0 means "don't care".

Slot layout (even slots are edges, odd slots are corners):

    7 0 1
    6 . 2
    5 4 3
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from .constants import (
    BITS_PER_INDEX,
    FULL_MASK,
    INDEX_MASK,
    MAX_COLOR_COUNT,
    NUM_INDEXES,
)
from .tile_layer import Region


def _check_index(index: int) -> None:
    assert 0 <= index < NUM_INDEXES, f"Wang index out of range: {index}"


@dataclass(frozen=True, order=True)
class WangId:
    """Immutable 8-slot color signature."""

    value: int = 0

    TOP = 0
    TOP_RIGHT = 1
    RIGHT = 2
    BOTTOM_RIGHT = 3
    BOTTOM = 4
    BOTTOM_LEFT = 5
    LEFT = 6
    TOP_LEFT = 7

    def __post_init__(self):
        assert 0 <= self.value <= FULL_MASK, f"WangId value out of range: {self.value:#x}"

    @classmethod
    def from_colors(cls, colors: Iterable[int]) -> WangId:
        """Build a signature from 8 slot colors, starting at TOP."""
        colors = list(colors)
        assert len(colors) == NUM_INDEXES, f"Expected {NUM_INDEXES} colors, got {len(colors)}"
        wang_id = cls()
        for index, color in enumerate(colors):
            wang_id = wang_id.with_index_color(index, color)
        return wang_id

    @classmethod
    def filled(cls, color: int) -> WangId:
        """Signature with every slot set to the same color."""
        return cls.from_colors([color] * NUM_INDEXES)

    # -------------------------------------------------------------------------
    # Slot accessors
    # -------------------------------------------------------------------------

    def index_color(self, index: int) -> int:
        _check_index(index)
        return (self.value >> (index * BITS_PER_INDEX)) & INDEX_MASK

    def with_index_color(self, index: int, color: int) -> WangId:
        """Return a copy with the color at slot `index` replaced."""
        _check_index(index)
        assert 0 <= color <= MAX_COLOR_COUNT, f"Wang color out of range: {color}"
        shift = index * BITS_PER_INDEX
        value = (self.value & ~(INDEX_MASK << shift) & FULL_MASK) | (color << shift)
        return WangId(value)

    def edge_color(self, edge: int) -> int:
        return self.index_color(edge * 2)

    def with_edge_color(self, edge: int, color: int) -> WangId:
        return self.with_index_color(edge * 2, color)

    def corner_color(self, corner: int) -> int:
        return self.index_color(corner * 2 + 1)

    def with_corner_color(self, corner: int, color: int) -> WangId:
        return self.with_index_color(corner * 2 + 1, color)

    def colors(self) -> list[int]:
        return [self.index_color(i) for i in range(NUM_INDEXES)]

    # -------------------------------------------------------------------------
    # Slot arithmetic
    # -------------------------------------------------------------------------

    @staticmethod
    def opposite_index(index: int) -> int:
        """Slot on the neighbor across `index` that touches this cell's slot."""
        _check_index(index)
        return (index + 4) % NUM_INDEXES

    @staticmethod
    def next_index(index: int) -> int:
        _check_index(index)
        return (index + 1) % NUM_INDEXES

    @staticmethod
    def previous_index(index: int) -> int:
        _check_index(index)
        return (index + NUM_INDEXES - 1) % NUM_INDEXES

    @staticmethod
    def is_corner(index: int) -> bool:
        _check_index(index)
        return bool(index & 1)

    # -------------------------------------------------------------------------
    # Masks and wildcards
    # -------------------------------------------------------------------------

    def mask(self) -> WangId:
        """Signature with a full nibble in every slot that has a color."""
        value = 0
        for index in range(NUM_INDEXES):
            if self.index_color(index):
                value |= INDEX_MASK << (index * BITS_PER_INDEX)
        return WangId(value)

    def has_wildcards(self) -> bool:
        return any(self.index_color(i) == 0 for i in range(NUM_INDEXES))

    def has_edge_wildcards(self) -> bool:
        return any(self.index_color(i) == 0 for i in range(0, NUM_INDEXES, 2))

    def has_corner_wildcards(self) -> bool:
        return any(self.index_color(i) == 0 for i in range(1, NUM_INDEXES, 2))

    # -------------------------------------------------------------------------
    # Transformations
    # -------------------------------------------------------------------------

    def rotated(self, rotations: int) -> WangId:
        """Rotate clockwise by `rotations` quarter turns."""
        rotations %= 4
        if rotations == 0:
            return self
        shift = rotations * 2 * BITS_PER_INDEX
        value = ((self.value << shift) | (self.value >> (32 - shift))) & FULL_MASK
        return WangId(value)

    def flipped_horizontally(self) -> WangId:
        colors = self.colors()
        return WangId.from_colors(colors[(NUM_INDEXES - i) % NUM_INDEXES] for i in range(NUM_INDEXES))

    def flipped_vertically(self) -> WangId:
        colors = self.colors()
        return WangId.from_colors(colors[(12 - i) % NUM_INDEXES] for i in range(NUM_INDEXES))

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def __and__(self, other: WangId) -> WangId:
        return WangId(self.value & other.value)

    def __or__(self, other: WangId) -> WangId:
        return WangId(self.value | other.value)

    def __bool__(self) -> bool:
        return self.value != 0

    def __int__(self) -> int:
        return self.value

    def __iter__(self) -> Iterator[int]:
        return iter(self.colors())

    def __str__(self) -> str:
        return ",".join(str(c) for c in self.colors())


# All 8 slots fully constrained
FULL_WANG_MASK = WangId(FULL_MASK)


@dataclass(frozen=True)
class CellConstraint:
    """
    Desired colors for one cell, and which of them are binding.

    A slot is constrained iff its mask nibble is non-zero. The desired color
    of an unconstrained slot is ignored.
    """

    desired: WangId = field(default_factory=WangId)
    mask: WangId = field(default_factory=WangId)

    def is_constrained(self, index: int) -> bool:
        return self.mask.index_color(index) != 0

    def is_empty(self) -> bool:
        return not self.mask

    def constrain(self, index: int, color: int) -> CellConstraint:
        """Return a copy requiring `color` at slot `index`."""
        return CellConstraint(
            self.desired.with_index_color(index, color),
            self.mask.with_index_color(index, INDEX_MASK),
        )

    def merged(self, other: CellConstraint) -> CellConstraint:
        """Take slots constrained only by `other` into a copy of this constraint."""
        result = self
        for index in range(NUM_INDEXES):
            if not self.is_constrained(index) and other.is_constrained(index):
                result = result.constrain(index, other.desired.index_color(index))
        return result


class ConstraintGrid:
    """Sparse (x, y) -> CellConstraint mapping. Absent cells are unconstrained."""

    def __init__(self, entries: dict[tuple[int, int], CellConstraint] | None = None):
        self._entries: dict[tuple[int, int], CellConstraint] = dict(entries or {})

    def get(self, point: tuple[int, int]) -> CellConstraint:
        return self._entries.get(point, CellConstraint())

    def set(self, point: tuple[int, int], constraint: CellConstraint) -> None:
        self._entries[point] = constraint

    def constrain(self, point: tuple[int, int], index: int, color: int) -> None:
        """Add a single slot requirement to the constraint at `point`."""
        self._entries[point] = self.get(point).constrain(index, color)

    def points(self) -> list[tuple[int, int]]:
        return list(self._entries)

    def region(self) -> Region:
        """Region covering every constrained cell."""
        return Region(self._entries)

    def items(self):
        return self._entries.items()

    def __contains__(self, point: tuple[int, int]) -> bool:
        return point in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[tuple[int, int]]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConstraintGrid):
            return NotImplemented
        return self._entries == other._entries
