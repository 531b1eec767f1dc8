"""Named starting patterns."""

from core.errors import PatternError
from simulation.coordinates import Coordinate


def cells_from_strings(rows, origin=(0, 0), live_char="#"):
    """ASCII art to Coordinates; row index is y, column index is x."""
    ox, oy = origin
    return {
        Coordinate(ox + x, oy + y)
        for y, row in enumerate(rows)
        for x, char in enumerate(row)
        if char == live_char
    }


_PATTERNS = {
    "glider": (".#.", "..#", "###"),
    "blinker": ("###",),
    "block": ("##", "##"),
    "beehive": (".##.", "#..#", ".##."),
    "toad": (".###", "###."),
    "beacon": ("##..", "##..", "..##", "..##"),
    "r-pentomino": (".##", "##.", ".#."),
}

# The glider sits centred on the origin: (0,-1) (1,0) (-1,1) (0,1) (1,1)
_ORIGINS = {
    "glider": (-1, -1),
}


def pattern_names():
    return sorted(_PATTERNS)


def get_pattern(name):
    """Fresh set of Coordinates for a named pattern."""
    key = name.strip().lower()
    if key not in _PATTERNS:
        raise PatternError(f"unknown pattern {name!r}", context={"known": pattern_names()})
    return cells_from_strings(_PATTERNS[key], origin=_ORIGINS.get(key, (0, 0)))
