"""Life 1.06 plain-text pattern format: a header line, then one "x y" pair per live cell."""

from core.errors import CoordinateRangeError, PatternError
from simulation.coordinates import Coordinate

LIFE_106_HEADER = "#Life 1.06"


def format_life106(cells, header=LIFE_106_HEADER, sort=False):
    """Render live cells as Life 1.06 text."""
    coordinates = [Coordinate.from_tuple(cell) for cell in cells]
    if sort:
        coordinates.sort()
    lines = [header] + [f"{cell.x} {cell.y}" for cell in coordinates]
    return "\n".join(lines) + "\n"


def parse_life106(text):
    """Read Life 1.06 text into a set of Coordinates.

    Raises PatternError (with the 1-based line number in ``context``) for a
    missing header, a line that is not two integers, or an out-of-range cell.
    """
    cells = set()
    seen_header = False
    text = text.removeprefix("\ufeff")
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        if not seen_header:
            if line != LIFE_106_HEADER:
                raise PatternError(f"expected {LIFE_106_HEADER!r} header, got {line!r}", line=number)
            seen_header = True
            continue
        if line.startswith("#"):
            continue
        parts = line.split()
        if len(parts) != 2:
            raise PatternError(f"expected 'x y', got {line!r}", line=number)
        try:
            x, y = int(parts[0]), int(parts[1])
        except ValueError:
            raise PatternError(f"non-integer coordinate in {line!r}", line=number) from None
        try:
            cells.add(Coordinate(x, y))
        except CoordinateRangeError as exc:
            raise PatternError(f"coordinate out of range in {line!r}", line=number, cause=exc) from exc
    if not seen_header:
        raise PatternError(f"missing {LIFE_106_HEADER!r} header")
    return cells
