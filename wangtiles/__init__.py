"""
Wang Tiles

Color signatures, Wang sets and tile layers for edge/corner matched tile
painting.
"""
