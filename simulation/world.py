"""Sparse Life world: only live cells are stored."""

from core.errors import CoordinateRangeError
from internal.logging import get_logger
from simulation.coordinates import Coordinate, NEIGHBOR_OFFSETS


class World:
    """Unbounded B3/S23 world evolved in two phases per generation.

    ``evaluate()`` reads the current generation and fills the pending cull and
    birth buffers; ``update()`` commits them. No neighbour count ever sees a
    half-applied next generation.
    """

    def __init__(self, initial_cells=()):
        self._live = {Coordinate.from_tuple(cell) for cell in initial_cells}
        self._cull = set()
        self._birth = set()
        self._evaluated = False
        self.generation = 0
        self._log = get_logger().bind(component="world")

    def __len__(self):
        return len(self._live)

    def __contains__(self, coordinate):
        return self.is_alive(coordinate)

    def __iter__(self):
        return iter(self.cells())

    @property
    def population(self):
        return len(self._live)

    @property
    def pending_culls(self):
        return frozenset(self._cull)

    @property
    def pending_births(self):
        return frozenset(self._birth)

    def is_alive(self, coordinate):
        # off-plane positions are permanently dead
        try:
            coordinate = Coordinate.from_tuple(coordinate)
        except CoordinateRangeError:
            return False
        return coordinate in self._live

    def cells(self):
        """Read-only snapshot of the live set."""
        return frozenset(self._live)

    def bounding_box(self):
        if not self._live:
            return None
        xs = [cell.x for cell in self._live]
        ys = [cell.y for cell in self._live]
        return (min(xs), min(ys), max(xs), max(ys))

    def neighbors(self, coordinate):
        """Yield the in-range neighbours of ``coordinate``."""
        for offset in NEIGHBOR_OFFSETS:
            if coordinate.within_bounds(offset):
                yield coordinate + offset

    def count_live_neighbors(self, coordinate):
        coordinate = Coordinate.from_tuple(coordinate)
        return sum(1 for neighbor in self.neighbors(coordinate) if neighbor in self._live)

    def evaluate(self):
        """Fill the pending buffers from the current generation. Never mutates the live set."""
        examined = set()
        for cell in self._live:
            if not cell.within_bounds():
                continue
            self._check_cell(cell, examined)
        self._evaluated = True
        self._log.debug("world evaluated", generation=self.generation, population=len(self._live),
                        culls=len(self._cull), births=len(self._birth))

    def update(self):
        """Commit pending culls then births and drain both buffers."""
        for cell in self._cull:
            self._live.discard(cell)
        self._live.update(self._birth)
        self._cull.clear()
        self._birth.clear()
        if self._evaluated:
            self.generation += 1
            self._evaluated = False

    def step(self, generations=1):
        if generations < 0:
            raise ValueError(f"generations must be >= 0, got {generations}")
        for _ in range(generations):
            self.evaluate()
            self.update()
        return self

    def _check_cell(self, cell, examined):
        live_neighbors = 0
        for neighbor in self.neighbors(cell):
            if neighbor in self._live:
                live_neighbors += 1
            elif neighbor not in examined:
                examined.add(neighbor)
                self._check_resurrection(neighbor)

        if live_neighbors < 2 or live_neighbors > 3:
            self._cull.add(cell)

    def _check_resurrection(self, coordinate):
        if self.count_live_neighbors(coordinate) == 3:
            self._birth.add(coordinate)
