"""
Wang Tiles - Core Constants

Shared configuration constants for signatures, layers and filling.
"""

# Signature layout
NUM_INDEXES = 8
NUM_EDGES = 4
NUM_CORNERS = 4
BITS_PER_INDEX = 4
INDEX_MASK = 0xF
FULL_MASK = 0xFFFFFFFF
MAX_COLOR_COUNT = 15

# Layer storage
EMPTY_CELL = -1  # no tile placed / not yet resolved

# Tile weights
DEFAULT_PROBABILITY = 1.0

# Largest region a single fill call accepts
MAX_FILL_CELLS = 1 << 16
