"""Simulation control routes."""

import time
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from communication.bus import TOPIC_CONTROL
from simulation.coordinates import Coordinate
from simulation.patterns import get_pattern
from ui.auth import verify_basic_auth

router = APIRouter(prefix="/api/v1/control", tags=["control"])

MAX_STEP = 10_000

# These will be set by app.py
_engine = None
_bus = None


def init(engine, bus):
    """Initialize with engine and bus references."""
    global _engine, _bus
    _engine = engine
    _bus = bus


class SeedRequest(BaseModel):
    """Either a named pattern or an explicit list of live cells."""

    pattern: Optional[str] = None
    cells: Optional[List[Tuple[int, int]]] = None


async def _announce(kind, **fields):
    await _bus.publish(TOPIC_CONTROL, {"kind": kind, "timestamp": time.time(), **fields})


@router.post("/pause")
async def pause(username=Depends(verify_basic_auth)):
    """Pause simulation (requires basic auth)."""
    await _engine.pause()
    await _announce("paused", generation=_engine.generation)
    return {"ok": True}


@router.post("/resume")
async def resume(username=Depends(verify_basic_auth)):
    """Resume simulation (requires basic auth)."""
    await _engine.resume()
    await _announce("resumed", generation=_engine.generation)
    return {"ok": True}


@router.post("/reset")
async def reset(username=Depends(verify_basic_auth)):
    """Reload the configured pattern (requires basic auth)."""
    _engine.reset()
    await _announce("reset", pattern=_engine.config.pattern)
    return {"ok": True}


@router.post("/step")
async def step(generations: int = Query(1, ge=1, le=MAX_STEP), username=Depends(verify_basic_auth)):
    """Advance by ``generations`` right away, even while paused (requires basic auth)."""
    snapshot = await _engine.advance(generations)
    await _announce("stepped", generations=generations, generation=snapshot.generation)
    return {"ok": True, "generation": snapshot.generation, "population": snapshot.population}


@router.post("/seed")
async def seed(request: SeedRequest, username=Depends(verify_basic_auth)):
    """Replace the live set (requires basic auth). PatternError/CoordinateRangeError map to 400."""
    if (request.pattern is None) == (request.cells is None):
        raise HTTPException(status_code=400, detail="give exactly one of 'pattern' or 'cells'")
    if request.pattern is not None:
        cells = get_pattern(request.pattern)
    else:
        cells = {Coordinate(x, y) for x, y in request.cells}
    _engine.seed(cells)
    await _announce("seeded", population=len(cells))
    return {"ok": True, "generation": _engine.generation, "population": len(cells)}
