"""Unit tests for named patterns."""

import pytest

from core.errors import PatternError
from simulation.coordinates import Coordinate
from simulation.patterns import cells_from_strings, get_pattern, pattern_names


class TestCellsFromStrings:
    """Tests for cells_from_strings."""

    def test_rows_are_y(self):
        """Row index is y, column index is x."""
        assert cells_from_strings(["#.", ".#"]) == {Coordinate(0, 0), Coordinate(1, 1)}

    def test_origin_offset(self):
        """Origin shifts every cell."""
        assert cells_from_strings(["#"], origin=(5, -2)) == {Coordinate(5, -2)}

    def test_custom_live_char(self):
        """Any character can mark live cells."""
        assert cells_from_strings(["o.o"], live_char="o") == {Coordinate(0, 0), Coordinate(2, 0)}


class TestGetPattern:
    """Tests for get_pattern."""

    def test_glider_cells(self):
        """The glider is centred on the origin."""
        assert get_pattern("glider") == {
            Coordinate(0, -1), Coordinate(1, 0), Coordinate(-1, 1), Coordinate(0, 1), Coordinate(1, 1)
        }

    def test_case_insensitive(self):
        """Names ignore case and surrounding spaces."""
        assert get_pattern(" Blinker ") == get_pattern("blinker")

    def test_returns_fresh_set(self):
        """Callers may mutate the returned set."""
        first = get_pattern("block")
        first.clear()
        assert len(get_pattern("block")) == 4

    def test_unknown_pattern(self):
        """Unknown names raise PatternError listing the known ones."""
        with pytest.raises(PatternError) as info:
            get_pattern("spaceship-9000")
        assert "glider" in info.value.context["known"]

    def test_pattern_names(self):
        """All names resolve."""
        names = pattern_names()
        assert names == sorted(names)
        for name in names:
            assert get_pattern(name)
