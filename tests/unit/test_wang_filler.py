"""
Unit tests for the WangFiller algorithm.
"""

import logging
import random

import pytest
from pygame import Rect

from editor.algorithms.wang_filler import FillResult, RegionTooLargeError, WangFiller
from wangtiles.core.adjacency import adjacency_for
from wangtiles.core.constants import NUM_INDEXES
from wangtiles.core.tile_layer import Region, TileLayer
from wangtiles.core.topology import MapTopology, Orientation, StaggerAxis, StaggerIndex
from wangtiles.core.wang_id import FULL_WANG_MASK, CellConstraint, ConstraintGrid, WangId
from wangtiles.core.wang_set import WangSet

GRASS = 1
SAND = 2


# =============================================================================
# Helper Functions
# =============================================================================

def corner_id(top_right: int, bottom_right: int, bottom_left: int, top_left: int) -> WangId:
    return WangId.from_colors([0, top_right, 0, bottom_right, 0, bottom_left, 0, top_left])


def tile_for(wang_set: WangSet, wang_id: WangId) -> int:
    return wang_set.candidates_exact(wang_id)[0].tile_id


def find_mismatches(layer: TileLayer, wang_set: WangSet, topology: MapTopology | None = None):
    """
    List (cell, slot) pairs whose color disagrees with the placed neighbor
    across that slot. Uncolored neighbor slots impose nothing.
    """
    adjacency = adjacency_for(topology)
    mismatches = []
    for point in layer.region():
        wang_id = wang_set.wang_id_of_cell(layer.cell_at(*point))
        for index in range(NUM_INDEXES):
            neighbor = adjacency.neighbor(point, index)
            neighbor_id = wang_set.wang_id_of_cell(layer.cell_at(*neighbor))
            neighbor_color = neighbor_id.index_color(WangId.opposite_index(index))
            if neighbor_color and wang_id.index_color(index) != neighbor_color:
                mismatches.append((point, index))
    return mismatches


# =============================================================================
# Neighbor Matching Tests
# =============================================================================

class TestNeighborMatching:
    """Fills without external constraints only follow neighbors."""

    def test_vertical_pair_forced_to_agree(self, stacked_wang_set):
        """Bottom of the upper cell must equal top of the lower one."""
        chosen = set()
        for seed in range(30):
            filler = WangFiller(stacked_wang_set, rng=random.Random(seed))
            target = TileLayer()
            result = filler.fill_region(target, TileLayer(), Region([(0, 0), (0, 1)]))
            assert result.is_valid
            assert target.cell_at(0, 0) == target.cell_at(0, 1)
            chosen.add(target.cell_at(0, 0))
        assert chosen == {0, 1}

    def test_filled_region_is_consistent(self, corner_wang_set, rng):
        filler = WangFiller(corner_wang_set, rng=rng)
        target = TileLayer()
        result = filler.fill_region(target, TileLayer(), Region.from_rect(Rect(0, 0, 6, 6)))
        assert result.is_valid
        assert result.filled_count == 36
        assert len(target.region()) == 36
        assert find_mismatches(target, corner_wang_set) == []

    def test_edge_set_fill_is_consistent(self, edge_wang_set, rng):
        filler = WangFiller(edge_wang_set, rng=rng)
        target = TileLayer()
        result = filler.fill_region(target, TileLayer(), Region.from_rect(Rect(-2, -2, 5, 5)))
        assert result.is_valid
        assert find_mismatches(target, edge_wang_set) == []

    def test_fill_matches_background(self, corner_wang_set, grass_layer, rng):
        """Cells on the region border take the colors of the background around them."""
        filler = WangFiller(corner_wang_set, rng=rng)
        target = grass_layer.copy()
        result = filler.fill_region(target, grass_layer, Region.from_rect(Rect(2, 2, 4, 4)))
        assert result.is_valid
        assert find_mismatches(target, corner_wang_set) == []

    def test_corner_falls_back_to_edge_neighbors(self, corner_wang_set, rng):
        """With no diagonal neighbor, the cell above still fixes both top corners."""
        back = TileLayer(0, 0, 3, 3)
        back.set_cell(1, 0, tile_for(corner_wang_set, corner_id(GRASS, GRASS, SAND, GRASS)))

        filler = WangFiller(corner_wang_set, rng=rng)
        target = TileLayer()
        filler.fill_region(target, back, Region([(1, 1)]))

        wang_id = corner_wang_set.wang_id_of_cell(target.cell_at(1, 1))
        assert wang_id.index_color(WangId.TOP_LEFT) == SAND
        assert wang_id.index_color(WangId.TOP_RIGHT) == GRASS

    def test_staggered_fill_is_consistent(self, corner_wang_set, rng):
        topology = MapTopology(Orientation.STAGGERED, StaggerAxis.Y, StaggerIndex.ODD)
        filler = WangFiller(corner_wang_set, topology=topology, rng=rng)
        target = TileLayer()
        result = filler.fill_region(target, TileLayer(), Region.from_rect(Rect(0, 0, 5, 6)))
        assert result.is_valid
        assert find_mismatches(target, corner_wang_set, topology) == []

    def test_staggered_x_fill_is_consistent(self, corner_wang_set, rng):
        topology = MapTopology(Orientation.HEXAGONAL, StaggerAxis.X, StaggerIndex.EVEN)
        filler = WangFiller(corner_wang_set, topology=topology, rng=rng)
        target = TileLayer()
        result = filler.fill_region(target, TileLayer(), Region.from_rect(Rect(0, 0, 6, 5)))
        assert result.is_valid
        assert find_mismatches(target, corner_wang_set, topology) == []


# =============================================================================
# External Constraint Tests
# =============================================================================

class TestConstraints:
    """Fills driven by a constraint grid."""

    @pytest.fixture
    def road_tile(self, edge_wang_set):
        return tile_for(edge_wang_set, WangId.from_colors([1, 0, 1, 0, 1, 0, 1, 0]))

    def test_neighbor_constrains_touching_edge(self, edge_wang_set, road_tile, rng):
        back = TileLayer.from_rows([[road_tile, None]])
        filler = WangFiller(edge_wang_set, rng=rng)
        target = TileLayer()
        filler.fill_region(target, back, Region([(1, 0)]))
        assert edge_wang_set.wang_id_of_cell(target.cell_at(1, 0)).index_color(WangId.LEFT) == 1

    def test_requested_color_overrides_neighbor(self, edge_wang_set, road_tile, rng):
        back = TileLayer.from_rows([[road_tile, None]])
        grid = ConstraintGrid()
        grid.constrain((1, 0), WangId.LEFT, 2)

        filler = WangFiller(edge_wang_set, rng=rng)
        target = TileLayer()
        result = filler.fill_region(target, back, Region([(1, 0)]), grid)

        assert result.is_valid
        assert edge_wang_set.wang_id_of_cell(target.cell_at(1, 0)).index_color(WangId.LEFT) == 2

    def test_requested_colors_propagate_to_unconstrained_cells(self, corner_wang_set, rng):
        grid = ConstraintGrid()
        corner_mask = WangId.from_colors([0, 0xF, 0, 0xF, 0, 0xF, 0, 0xF])
        grid.set((0, 0), CellConstraint(WangId.filled(SAND), corner_mask))

        filler = WangFiller(corner_wang_set, rng=rng)
        target = TileLayer()
        result = filler.fill_region(target, TileLayer(), Region.from_rect(Rect(0, 0, 2, 2)), grid)

        assert result.is_valid
        right = corner_wang_set.wang_id_of_cell(target.cell_at(1, 0))
        below = corner_wang_set.wang_id_of_cell(target.cell_at(0, 1))
        diagonal = corner_wang_set.wang_id_of_cell(target.cell_at(1, 1))
        assert right.index_color(WangId.TOP_LEFT) == SAND
        assert right.index_color(WangId.BOTTOM_LEFT) == SAND
        assert below.index_color(WangId.TOP_RIGHT) == SAND
        assert diagonal.index_color(WangId.TOP_LEFT) == SAND

    def test_unsatisfiable_cell_left_empty_and_reported(self, corner_wang_set, rng):
        """A cell requiring colors no tile has stays empty; the rest still fills."""
        grid = ConstraintGrid()
        grid.set((1, 1), CellConstraint(WangId.filled(3), FULL_WANG_MASK))

        filler = WangFiller(corner_wang_set, rng=rng)
        target = TileLayer()
        region = Region.from_rect(Rect(0, 0, 3, 3))
        result = filler.fill_region(target, TileLayer(), region, grid)

        assert not result.is_valid
        assert result.invalid == Region([(1, 1)])
        assert result.filled_count == 8
        assert target.cell_at(1, 1) is None
        for point in region - result.invalid:
            assert target.cell_at(*point) is not None
        assert find_mismatches(target, corner_wang_set) == []

    def test_unsatisfiable_cell_is_logged(self, corner_wang_set, rng, caplog):
        grid = ConstraintGrid()
        grid.set((1, 1), CellConstraint(WangId.filled(3), FULL_WANG_MASK))
        filler = WangFiller(corner_wang_set, rng=rng)
        with caplog.at_level(logging.DEBUG, logger="editor.algorithms.wang_filler"):
            filler.fill_region(TileLayer(), TileLayer(), Region([(1, 1)]), grid)
        assert "No Wang tile fits cell (1, 1)" in caplog.text


# =============================================================================
# Layer Handling Tests
# =============================================================================

class TestLayers:
    """Which layers the filler reads and writes."""

    def test_target_written_only_inside_region(self, corner_wang_set, rng):
        target = TileLayer.from_rows([[99] * 4 for _ in range(4)])
        filler = WangFiller(corner_wang_set, rng=rng)
        filler.fill_region(target, TileLayer(), Region([(1, 1), (2, 1)]))

        for point in Region.from_rect(Rect(0, 0, 4, 4)):
            if point in ((1, 1), (2, 1)):
                assert target.cell_at(*point) in corner_wang_set
            else:
                assert target.cell_at(*point) == 99

    def test_background_is_not_modified(self, corner_wang_set, grass_layer, rng):
        before = grass_layer.to_rows()
        filler = WangFiller(corner_wang_set, rng=rng)
        filler.fill_region(TileLayer(), grass_layer, Region.from_rect(Rect(1, 1, 3, 3)))
        assert grass_layer.to_rows() == before

    def test_background_inside_region_is_ignored(self, stacked_wang_set):
        """Cells being decided never read the background at their own position."""
        back = TileLayer.from_rows([[0], [1]])
        filler = WangFiller(stacked_wang_set)
        seen = set()
        for seed in range(20):
            filler.rng = random.Random(seed)
            target = TileLayer()
            filler.fill_region(target, back, Region([(0, 0)]))
            seen.add(target.cell_at(0, 0))
        # Only the tile below counts
        assert seen == {1}

    def test_empty_wang_set_leaves_everything_invalid(self, rng):
        filler = WangFiller(WangSet("empty"), rng=rng)
        target = TileLayer()
        region = Region.from_rect(Rect(0, 0, 2, 2))
        result = filler.fill_region(target, TileLayer(), region)
        assert result.invalid == region
        assert result.filled_count == 0
        assert target.is_empty()

    def test_region_limit(self, corner_wang_set):
        filler = WangFiller(corner_wang_set, max_cells=3)
        target = TileLayer()
        with pytest.raises(RegionTooLargeError):
            filler.fill_region(target, TileLayer(), Region.from_rect(Rect(0, 0, 2, 2)))
        assert target.is_empty()

    def test_region_limit_is_a_value_error(self):
        assert issubclass(RegionTooLargeError, ValueError)

    def test_no_region_limit(self, corner_wang_set, rng):
        filler = WangFiller(corner_wang_set, rng=rng, max_cells=None)
        result = filler.fill_region(TileLayer(), TileLayer(), Region.from_rect(Rect(0, 0, 3, 3)))
        assert result.is_valid

    def test_empty_region(self, corner_wang_set):
        result = WangFiller(corner_wang_set).fill_region(TileLayer(), TileLayer(), Region())
        assert result == FillResult(Region(), Region())
        assert result.is_valid


# =============================================================================
# Randomness Tests
# =============================================================================

class TestRandomness:
    """Weighted and reproducible tile choice."""

    def test_same_seed_same_result(self, corner_wang_set):
        region = Region.from_rect(Rect(0, 0, 5, 5))
        first = TileLayer()
        second = TileLayer()
        WangFiller(corner_wang_set, rng=random.Random(77)).fill_region(first, TileLayer(), region)
        WangFiller(corner_wang_set, rng=random.Random(77)).fill_region(second, TileLayer(), region)
        assert first.to_rows() == second.to_rows()

    def test_zero_probability_tile_never_placed(self, corner_wang_set, grass_tile, rng):
        corner_wang_set.add_tile(grass_tile, corner_wang_set.wang_id_of_tile(grass_tile), probability=0)
        target = TileLayer()
        WangFiller(corner_wang_set, rng=rng).fill_region(target, TileLayer(), Region.from_rect(Rect(0, 0, 6, 6)))
        assert grass_tile not in {cell for row in target.to_rows() for cell in row}

    def test_single_cell_frequencies_follow_weights(self, stacked_wang_set):
        stacked_wang_set.add_tile(1, stacked_wang_set.wang_id_of_tile(1), probability=3)
        filler = WangFiller(stacked_wang_set, rng=random.Random(2024))
        draws = 4000
        hits = sum(
            filler.find_fitting_cell(TileLayer(), TileLayer(), Region([(0, 0)]), (0, 0)) == 1
            for _ in range(draws)
        )
        assert hits / draws == pytest.approx(0.75, abs=0.03)


# =============================================================================
# Single Cell Tests
# =============================================================================

class TestFindFittingCell:
    """Tests for resolving one cell."""

    def test_reads_front_inside_region(self, stacked_wang_set, rng):
        front = TileLayer.from_rows([[1], [None]])
        back = TileLayer.from_rows([[0], [None]])
        region = Region([(0, 0), (0, 1)])
        filler = WangFiller(stacked_wang_set, rng=rng)
        for _ in range(10):
            assert filler.find_fitting_cell(back, front, region, (0, 1)) == 1

    def test_reads_back_outside_region(self, stacked_wang_set, rng):
        front = TileLayer.from_rows([[1], [None]])
        back = TileLayer.from_rows([[0], [None]])
        region = Region([(0, 1)])
        filler = WangFiller(stacked_wang_set, rng=rng)
        for _ in range(10):
            assert filler.find_fitting_cell(back, front, region, (0, 1)) == 0

    def test_returns_none_when_nothing_fits(self, stacked_wang_set, rng):
        grid = ConstraintGrid()
        grid.constrain((0, 0), WangId.LEFT, 1)
        filler = WangFiller(stacked_wang_set, rng=rng)
        assert filler.find_fitting_cell(TileLayer(), TileLayer(), Region([(0, 0)]), (0, 0), grid) is None

    def test_constraint_from_surroundings_masks_only_colored_slots(self, stacked_wang_set):
        back = TileLayer.from_rows([[0], [None]])
        filler = WangFiller(stacked_wang_set)
        info = filler.constraint_from_surroundings(back, TileLayer(), Region([(0, 1)]), (0, 1))
        assert info.is_constrained(WangId.TOP)
        assert info.desired.index_color(WangId.TOP) == 1
        assert [i for i in range(NUM_INDEXES) if info.is_constrained(i)] == [WangId.TOP]
