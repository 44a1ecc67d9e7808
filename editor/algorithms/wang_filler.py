"""
Wang Tiles - Wang Fill Algorithm

Chooses tiles for a region of cells so that every placed tile matches the
colors of its already placed neighbors and any externally requested colors.

Cells are resolved greedily in row-major order. Each chosen tile is written
to the working layer immediately, so later cells in the same fill see it as
a neighbor. There is no backtracking: a cell that cannot be matched is left
empty and reported as invalid.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from wangtiles.core.adjacency import adjacency_for
from wangtiles.core.constants import MAX_FILL_CELLS, NUM_INDEXES
from wangtiles.core.tile_layer import Region, TileLayer
from wangtiles.core.topology import MapTopology
from wangtiles.core.wang_id import CellConstraint, ConstraintGrid, WangId
from wangtiles.core.wang_set import WangSet

logger = logging.getLogger(__name__)


class RegionTooLargeError(ValueError):
    """Raised when a fill region exceeds the filler's cell limit."""


@dataclass
class FillResult:
    """Outcome of a fill: the region handled and the cells left empty."""

    region: Region
    invalid: Region = field(default_factory=Region)

    @property
    def is_valid(self) -> bool:
        return self.invalid.is_empty()

    @property
    def filled_count(self) -> int:
        return len(self.region) - len(self.invalid)


class WangFiller:
    """
    Fills regions of a tile layer with tiles from a WangSet.

    Neighbor lookup is fixed at construction from the map topology. The
    random source may be seeded for reproducible fills.
    """

    def __init__(
        self,
        wang_set: WangSet,
        topology: MapTopology | None = None,
        rng: random.Random | None = None,
        max_cells: int | None = MAX_FILL_CELLS,
    ):
        """
        Args:
            wang_set: Tiles to choose from.
            topology: Map layout; orthogonal when omitted.
            rng: Random source for weighted tile choice.
            max_cells: Largest region accepted by fill_region, or None for
                no limit.
        """
        self.wang_set = wang_set
        self.topology = topology if topology is not None else MapTopology()
        self.adjacency = adjacency_for(self.topology)
        self.rng = rng if rng is not None else random.Random()
        self.max_cells = max_cells

    def find_fitting_cell(
        self,
        back: TileLayer,
        front: TileLayer,
        region: Region,
        point: tuple[int, int],
        constraints: ConstraintGrid | None = None,
    ) -> int | None:
        """
        Pick a tile for `point` that fits its surroundings.

        Requested colors from `constraints` take precedence; remaining slots
        are constrained by neighbors read from `front` inside `region` and
        from `back` outside of it.

        Returns:
            A tile id, or None when no tile in the set fits.
        """
        info = constraints.get(point) if constraints is not None else CellConstraint()
        info = self.constraint_from_surroundings(back, front, region, point, info)
        return self.wang_set.pick_matching(info.desired, info.mask, self.rng)

    def fill_region(
        self,
        target: TileLayer,
        back: TileLayer,
        region: Region,
        constraints: ConstraintGrid | None = None,
    ) -> FillResult:
        """
        Fill every cell of `region` in `target`.

        Args:
            target: Layer receiving the result. Only cells within `region`
                are written; the layer grows to cover the region.
            back: Existing content, read for neighbors outside `region`.
            region: Cells to decide.
            constraints: Optional requested colors per cell. Without it the
                fill only matches neighbors.

        Returns:
            FillResult listing the cells no tile could satisfy.

        Raises:
            RegionTooLargeError: If the region exceeds `max_cells`.
        """
        if self.max_cells is not None and len(region) > self.max_cells:
            raise RegionTooLargeError(
                f"Region has {len(region)} cells, limit is {self.max_cells}"
            )

        bounds = region.bounding_rect()
        front = TileLayer(bounds.x, bounds.y, bounds.width, bounds.height)
        invalid = Region()

        for point in region:
            cell = self.find_fitting_cell(back, front, region, point, constraints)
            if cell is None:
                logger.debug("No Wang tile fits cell %s", point)
                invalid.add(point)
                continue
            front.set_cell(point[0], point[1], cell)

        target.set_cells(front, region)

        result = FillResult(region, invalid)
        logger.debug(
            "Wang fill of '%s': %d/%d cells filled",
            self.wang_set.name,
            result.filled_count,
            len(region),
        )
        return result

    def constraint_from_surroundings(
        self,
        back: TileLayer,
        front: TileLayer,
        region: Region,
        point: tuple[int, int],
        info: CellConstraint | None = None,
    ) -> CellConstraint:
        """Add the colors required by placed neighbors to the slots `info` leaves free."""
        if info is None:
            info = CellConstraint()
        surroundings = self.wang_id_from_surroundings(back, front, region, point)
        return info.merged(CellConstraint(surroundings, surroundings.mask()))

    def wang_id_from_surroundings(
        self,
        back: TileLayer,
        front: TileLayer,
        region: Region,
        point: tuple[int, int],
    ) -> WangId:
        """
        Colors the neighbors of `point` impose on it.

        Each slot takes the color of the touching slot on the neighbor across
        it. A corner is shared by four cells, so when the diagonal neighbor
        leaves it open the two edge neighbors sharing it are asked next.
        """
        wang_ids = [
            self.wang_set.wang_id_of_cell(self._get_cell(back, front, region, neighbor))
            for neighbor in self.adjacency.neighbors(point)
        ]

        result = WangId()
        for index in range(NUM_INDEXES):
            color = wang_ids[index].index_color(WangId.opposite_index(index))
            if not color and WangId.is_corner(index):
                color = wang_ids[WangId.previous_index(index)].index_color((index + 2) % NUM_INDEXES)
            if not color and WangId.is_corner(index):
                color = wang_ids[WangId.next_index(index)].index_color((index + 6) % NUM_INDEXES)
            if color:
                result = result.with_index_color(index, color)
        return result

    def _get_cell(
        self,
        back: TileLayer,
        front: TileLayer,
        region: Region,
        point: tuple[int, int],
    ) -> int | None:
        """Cell from `front` inside the region, from `back` outside it."""
        if point in region:
            return front.cell_at(point[0], point[1])
        return back.cell_at(point[0], point[1])
