"""
Wang Tiles - Editor Algorithms

Contains algorithmic tools for the editor (Wang fill, Wang brush).
"""

from .wang_brush import BrushMode, BrushStroke, WangBrush, brush_mode_for_color
from .wang_filler import FillResult, RegionTooLargeError, WangFiller

__all__ = [
    "BrushMode",
    "BrushStroke",
    "WangBrush",
    "brush_mode_for_color",
    "FillResult",
    "RegionTooLargeError",
    "WangFiller",
]
