"""
Wang Tiles - Wang Sets

A WangSet tags tiles of a tile set with color signatures and indexes them
so the filler can look up every tile compatible with a partial signature.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from .constants import DEFAULT_PROBABILITY, MAX_COLOR_COUNT, NUM_INDEXES
from .random_picker import RandomPicker
from .wang_id import WangId


@dataclass
class WangColor:
    """Display label for one color of a WangSet."""

    name: str
    color: tuple[int, int, int] = (255, 0, 0)


@dataclass(frozen=True)
class WangTile:
    """A tile id with its signature and relative probability."""

    tile_id: int
    wang_id: WangId
    probability: float = DEFAULT_PROBABILITY


class WangSet:
    """
    Ordered collection of Wang tiles with a signature index.

    Colors are numbered from 1; color 0 is the "don't care" value and has
    no label. The index grouping tiles by exact signature is built lazily
    and dropped whenever tiles change.
    """

    def __init__(self, name: str = "", colors: list[WangColor] | None = None):
        self.name = name
        self.colors: list[WangColor] = []
        self._tiles: dict[int, WangTile] = {}
        self._tiles_by_wang_id: dict[WangId, list[WangTile]] | None = None

        for color in colors or []:
            self.add_color(color.name, color.color)

    # -------------------------------------------------------------------------
    # Colors
    # -------------------------------------------------------------------------

    @property
    def color_count(self) -> int:
        return len(self.colors)

    def add_color(self, name: str, color: tuple[int, int, int] = (255, 0, 0)) -> int:
        """Add a color and return its index."""
        if self.color_count >= MAX_COLOR_COUNT:
            raise ValueError(f"A WangSet supports at most {MAX_COLOR_COUNT} colors")
        self.colors.append(WangColor(name, color))
        return self.color_count

    def color_at(self, index: int) -> WangColor:
        if not 1 <= index <= self.color_count:
            raise IndexError(f"Color index {index} out of range 1..{self.color_count}")
        return self.colors[index - 1]

    def color_usage(self, color: int) -> tuple[bool, bool]:
        """
        Report where a color appears on the tiles of this set.

        Returns:
            (used_as_edge, used_as_corner)
        """
        used_as_edge = False
        used_as_corner = False
        if 0 < color <= self.color_count:
            for wang_tile in self._tiles.values():
                for index in range(NUM_INDEXES):
                    if wang_tile.wang_id.index_color(index) == color:
                        if WangId.is_corner(index):
                            used_as_corner = True
                        else:
                            used_as_edge = True
        return used_as_edge, used_as_corner

    # -------------------------------------------------------------------------
    # Tiles
    # -------------------------------------------------------------------------

    @property
    def wang_tiles(self) -> list[WangTile]:
        return list(self._tiles.values())

    def add_tile(self, tile_id: int, wang_id: WangId, probability: float = DEFAULT_PROBABILITY) -> WangTile:
        """
        Tag a tile with a signature, replacing any previous signature.

        Raises:
            ValueError: If the signature uses an unknown color or the
                probability is negative.
        """
        if probability < 0:
            raise ValueError(f"Tile {tile_id} has negative probability {probability}")
        for index in range(NUM_INDEXES):
            color = wang_id.index_color(index)
            if color > self.color_count:
                raise ValueError(
                    f"Tile {tile_id} uses color {color} at index {index}, "
                    f"but set '{self.name}' only has {self.color_count} colors"
                )

        wang_tile = WangTile(tile_id, wang_id, probability)
        self._tiles.pop(tile_id, None)
        self._tiles[tile_id] = wang_tile
        self._tiles_by_wang_id = None
        return wang_tile

    def remove_tile(self, tile_id: int) -> None:
        if self._tiles.pop(tile_id, None) is not None:
            self._tiles_by_wang_id = None

    def wang_id_of_tile(self, tile_id: int) -> WangId:
        """Signature of a tile; the empty signature for tiles not in this set."""
        wang_tile = self._tiles.get(tile_id)
        return wang_tile.wang_id if wang_tile is not None else WangId()

    def wang_id_of_cell(self, cell: int | None) -> WangId:
        if cell is None:
            return WangId()
        return self.wang_id_of_tile(cell)

    def tile_probability(self, tile_id: int) -> float:
        wang_tile = self._tiles.get(tile_id)
        return wang_tile.probability if wang_tile is not None else 0.0

    def __contains__(self, tile_id: int) -> bool:
        return tile_id in self._tiles

    def __len__(self) -> int:
        return len(self._tiles)

    # -------------------------------------------------------------------------
    # Signature index
    # -------------------------------------------------------------------------

    def _index(self) -> dict[WangId, list[WangTile]]:
        if self._tiles_by_wang_id is None:
            index: dict[WangId, list[WangTile]] = {}
            for wang_tile in self._tiles.values():
                index.setdefault(wang_tile.wang_id, []).append(wang_tile)
            self._tiles_by_wang_id = index
        return self._tiles_by_wang_id

    def candidates_exact(self, wang_id: WangId) -> list[WangTile]:
        """All tiles whose signature equals `wang_id`."""
        return list(self._index().get(wang_id, []))

    def candidates_matching(self, desired: WangId, mask: WangId) -> list[WangTile]:
        """
        All tiles agreeing with `desired` on every slot where `mask` is set.

        Slots with a zero mask are free and may hold any color on the
        candidate, including 0.
        """
        full_mask = mask.mask()
        wanted = desired & full_mask
        candidates = []
        for wang_id, wang_tiles in self._index().items():
            if wang_id & full_mask == wanted:
                candidates.extend(wang_tiles)
        return candidates

    def pick_matching(self, desired: WangId, mask: WangId, rng: random.Random | None = None) -> int | None:
        """
        Draw one matching tile id weighted by probability.

        Returns:
            A tile id, or None when no candidate with a positive probability
            exists.
        """
        picker: RandomPicker[int] = RandomPicker(rng)
        for wang_tile in self.candidates_matching(desired, mask):
            picker.add(wang_tile.tile_id, wang_tile.probability)
        if picker.is_empty():
            return None
        return picker.pick()
