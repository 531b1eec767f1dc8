from utils.ksuid import generate_ksuid
from utils.timestamp import format_timestamp


class StateSnapshot:
    """Immutable view of one generation, safe to hand to bus subscribers."""

    __slots__ = ("id", "timestamp", "generation", "cells")

    def __init__(self, generation, cells, id=None, timestamp=None):
        self.id = id or generate_ksuid()
        self.timestamp = timestamp or format_timestamp()
        self.generation = generation
        self.cells = frozenset(cells)

    @property
    def population(self):
        return len(self.cells)

    def to_dict(self):
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "generation": self.generation,
            "population": self.population,
            "cells": [[cell.x, cell.y] for cell in sorted(self.cells)],
        }
