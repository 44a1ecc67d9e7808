"""
Wang Tiles - Editor Package

Editor-side algorithms that paint Wang tiles into tile layers.
"""
