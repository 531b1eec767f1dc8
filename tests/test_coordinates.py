"""Unit tests for Coordinate."""

import pytest

from core.errors import CoordinateRangeError
from simulation.coordinates import Coordinate, INT64_MAX, INT64_MIN, NEIGHBOR_OFFSETS


class TestCoordinate:
    """Tests for Coordinate class."""

    def test_creation(self):
        """Coordinate stores x and y."""
        c = Coordinate(3, -7)
        assert c.x == 3
        assert c.y == -7

    def test_immutable(self):
        """Attributes cannot be reassigned."""
        c = Coordinate(1, 2)
        with pytest.raises(AttributeError):
            c.x = 5
        assert c.x == 1

    def test_structural_equality_and_hash(self):
        """Equal components mean equal coordinates with equal hashes."""
        assert Coordinate(4, 5) == Coordinate(4, 5)
        assert hash(Coordinate(4, 5)) == hash(Coordinate(4, 5))
        assert Coordinate(4, 5) != Coordinate(5, 4)
        assert len({Coordinate(0, 0), Coordinate(0, 0), Coordinate(0, 1)}) == 2

    def test_add(self):
        """Adding returns a new coordinate."""
        a = Coordinate(10, -3)
        result = a + Coordinate(-1, 1)
        assert result == Coordinate(9, -2)
        assert a == Coordinate(10, -3)

    def test_add_past_range_raises(self):
        """Python ints never wrap, so overflowing the plane is an error."""
        with pytest.raises(CoordinateRangeError):
            Coordinate(INT64_MAX, 0) + Coordinate(1, 0)

    def test_range_limits_accepted(self):
        """Both int64 extremes are valid positions."""
        Coordinate(INT64_MIN, INT64_MAX)
        Coordinate(INT64_MAX, INT64_MIN)

    def test_out_of_range_rejected(self):
        """Values outside int64 raise CoordinateRangeError (a ValueError)."""
        with pytest.raises(CoordinateRangeError) as info:
            Coordinate(INT64_MAX + 1, 0)
        assert isinstance(info.value, ValueError)
        assert info.value.context["x"] == INT64_MAX + 1
        with pytest.raises(CoordinateRangeError):
            Coordinate(0, INT64_MIN - 1)

    def test_non_integers_rejected(self):
        """Floats, strings and bools are not coordinates."""
        for bad in (1.0, "1", True):
            with pytest.raises(TypeError):
                Coordinate(bad, 0)

    def test_within_bounds_without_offset(self):
        """Any constructed coordinate is in range."""
        assert Coordinate(INT64_MAX, INT64_MIN).within_bounds()

    def test_within_bounds_with_offset(self):
        """Offsets that would leave the plane are reported."""
        corner = Coordinate(INT64_MAX, INT64_MIN)
        assert not corner.within_bounds(Coordinate(1, 0))
        assert not corner.within_bounds(Coordinate(0, -1))
        assert corner.within_bounds(Coordinate(-1, 1))
        assert Coordinate(0, 0).within_bounds(Coordinate(1, -1))

    def test_tuple_round_trip(self):
        """to_tuple/from_tuple and unpacking agree."""
        c = Coordinate.from_tuple((2, 9))
        assert c.to_tuple() == (2, 9)
        x, y = c
        assert (x, y) == (2, 9)
        assert Coordinate.from_tuple(c) is c

    def test_ordering(self):
        """Coordinates sort by x then y."""
        cells = [Coordinate(1, 0), Coordinate(0, 5), Coordinate(0, -1)]
        assert sorted(cells) == [Coordinate(0, -1), Coordinate(0, 5), Coordinate(1, 0)]

    def test_uses_slots(self):
        """Coordinate uses __slots__ for memory efficiency."""
        assert not hasattr(Coordinate(0, 0), "__dict__")


class TestNeighborOffsets:
    """Tests for the fixed neighbour table."""

    def test_eight_distinct_offsets(self):
        """Eight unique unit offsets, excluding the cell itself."""
        assert len(NEIGHBOR_OFFSETS) == 8
        assert len(set(NEIGHBOR_OFFSETS)) == 8
        assert Coordinate(0, 0) not in NEIGHBOR_OFFSETS
        assert all(dx in (-1, 0, 1) and dy in (-1, 0, 1) for dx, dy in NEIGHBOR_OFFSETS)

    def test_table_is_immutable(self):
        """The table is a tuple."""
        assert isinstance(NEIGHBOR_OFFSETS, tuple)
