"""Cell coordinates on the signed 64-bit plane."""

from core.errors import CoordinateRangeError

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def _in_range(value):
    return INT64_MIN <= value <= INT64_MAX


class Coordinate:
    """Immutable (x, y) cell position. The y axis decreases upwards."""

    __slots__ = ("x", "y")

    def __init__(self, x, y):
        for name, value in (("x", x), ("y", y)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an int, got {type(value).__name__}")
        if not (_in_range(x) and _in_range(y)):
            raise CoordinateRangeError("coordinate outside int64 range", x=x, y=y)
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)

    @classmethod
    def from_tuple(cls, pair):
        if isinstance(pair, cls):
            return pair
        x, y = pair
        return cls(x, y)

    def to_tuple(self):
        return (self.x, self.y)

    def within_bounds(self, offset=None):
        """True if this coordinate, shifted by ``offset`` when given, stays in range."""
        if offset is None:
            return _in_range(self.x) and _in_range(self.y)
        return _in_range(self.x + offset.x) and _in_range(self.y + offset.y)

    def __add__(self, other):
        if not isinstance(other, Coordinate):
            return NotImplemented
        return Coordinate(self.x + other.x, self.y + other.y)

    def __setattr__(self, name, value):
        raise AttributeError("Coordinate is immutable")

    def __delattr__(self, name):
        raise AttributeError("Coordinate is immutable")

    def __eq__(self, other):
        if not isinstance(other, Coordinate):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __lt__(self, other):
        if not isinstance(other, Coordinate):
            return NotImplemented
        return (self.x, self.y) < (other.x, other.y)

    def __hash__(self):
        return hash((self.x, self.y))

    def __iter__(self):
        yield self.x
        yield self.y

    def __repr__(self):
        return f"Coordinate({self.x}, {self.y})"


# up, down, left, right, up-right, up-left, down-right, down-left
NEIGHBOR_OFFSETS = (
    Coordinate(0, -1),
    Coordinate(0, 1),
    Coordinate(-1, 0),
    Coordinate(1, 0),
    Coordinate(1, -1),
    Coordinate(-1, -1),
    Coordinate(1, 1),
    Coordinate(-1, 1),
)
