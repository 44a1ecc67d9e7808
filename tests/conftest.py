"""Shared pytest fixtures for Wang set and fill tests."""

import itertools
import random

import pytest

from wangtiles.core.tile_layer import TileLayer
from wangtiles.core.wang_id import WangId
from wangtiles.core.wang_set import WangSet

GRASS = 1
SAND = 2


@pytest.fixture
def rng():
    """Seeded random source so fills are reproducible."""
    return random.Random(1234)


@pytest.fixture
def corner_wang_set():
    """Complete 2-color corner set: one tile per corner combination (16 tiles)."""
    wang_set = WangSet("terrain")
    wang_set.add_color("grass", (0, 160, 0))
    wang_set.add_color("sand", (220, 200, 120))
    for tile_id, corners in enumerate(itertools.product((GRASS, SAND), repeat=4)):
        wang_id = WangId()
        for corner, color in enumerate(corners):
            wang_id = wang_id.with_corner_color(corner, color)
        wang_set.add_tile(tile_id, wang_id)
    return wang_set


@pytest.fixture
def edge_wang_set():
    """Complete 2-color edge set: one tile per edge combination (16 tiles)."""
    wang_set = WangSet("paths")
    wang_set.add_color("road", (90, 90, 90))
    wang_set.add_color("field", (120, 200, 60))
    for tile_id, edges in enumerate(itertools.product((1, 2), repeat=4)):
        wang_id = WangId()
        for edge, color in enumerate(edges):
            wang_id = wang_id.with_edge_color(edge, color)
        wang_set.add_tile(tile_id, wang_id)
    return wang_set


@pytest.fixture
def stacked_wang_set():
    """Tiles A (top/bottom color 1) and B (top/bottom color 2)."""
    wang_set = WangSet("stacked")
    wang_set.add_color("red")
    wang_set.add_color("blue")
    wang_set.add_tile(0, WangId().with_index_color(WangId.TOP, 1).with_index_color(WangId.BOTTOM, 1))
    wang_set.add_tile(1, WangId().with_index_color(WangId.TOP, 2).with_index_color(WangId.BOTTOM, 2))
    return wang_set


@pytest.fixture
def grass_tile(corner_wang_set):
    """Tile id of the all-grass corner tile."""
    all_grass = WangId.from_colors([0, GRASS, 0, GRASS, 0, GRASS, 0, GRASS])
    return corner_wang_set.candidates_exact(all_grass)[0].tile_id


@pytest.fixture
def grass_layer(grass_tile):
    """8x8 layer covered with all-grass tiles."""
    return TileLayer.from_rows([[grass_tile] * 8 for _ in range(8)])
