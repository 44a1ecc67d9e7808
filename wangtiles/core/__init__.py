"""
Core Wang tile functionality.

This package contains color signatures, Wang sets with their signature
index, tile layers, map topology and cell adjacency.
"""

from .adjacency import Adjacency, RectangularAdjacency, StaggeredAdjacency, adjacency_for
from .random_picker import RandomPicker
from .tile_layer import Region, TileLayer
from .topology import MapTopology, Orientation, StaggerAxis, StaggeredGeometry, StaggerIndex
from .wang_id import CellConstraint, ConstraintGrid, WangId
from .wang_set import WangColor, WangSet, WangTile

__all__ = [
    "Adjacency",
    "RectangularAdjacency",
    "StaggeredAdjacency",
    "adjacency_for",
    "RandomPicker",
    "Region",
    "TileLayer",
    "MapTopology",
    "Orientation",
    "StaggerAxis",
    "StaggeredGeometry",
    "StaggerIndex",
    "CellConstraint",
    "ConstraintGrid",
    "WangId",
    "WangColor",
    "WangSet",
    "WangTile",
]
