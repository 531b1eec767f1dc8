"""API routes for world inspection, stats and subscribers."""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from simulation.life106 import LIFE_106_HEADER, format_life106
from simulation.patterns import pattern_names
from utils.timestamp import format_timestamp
from ui.auth import verify_basic_auth

router = APIRouter(prefix="/api/v1", tags=["api"])

# These will be set by app.py
_engine = None
_bus = None
_journal = None
_print_header = LIFE_106_HEADER


def init(engine, bus, journal, print_header=LIFE_106_HEADER):
    """Initialize with engine, bus, journal references and the Life 1.06 header."""
    global _engine, _bus, _journal, _print_header
    _engine = engine
    _bus = bus
    _journal = journal
    _print_header = print_header


@router.get("/world")
async def world(username=Depends(verify_basic_auth)):
    """Current generation as JSON (requires basic auth)."""
    snapshot = await _engine.get_snapshot()
    return snapshot.to_dict()


@router.get("/world/life106", response_class=PlainTextResponse)
async def world_life106(username=Depends(verify_basic_auth)):
    """Current generation as Life 1.06 text (requires basic auth)."""
    snapshot = await _engine.get_snapshot()
    return format_life106(snapshot.cells, header=_print_header, sort=True)


@router.get("/patterns")
async def patterns(username=Depends(verify_basic_auth)):
    """Names accepted by /control/seed (requires basic auth)."""
    return {"patterns": pattern_names()}


@router.get("/stats")
async def stats(username=Depends(verify_basic_auth)):
    """Return simulation, bus and journal statistics (requires basic auth)."""
    bus_stats = _bus.get_stats()
    snapshot = await _engine.get_snapshot()
    world = _engine.world
    return {
        "timestamp": format_timestamp(),
        "simulation": {
            "generation": snapshot.generation,
            "population": snapshot.population,
            "bounding_box": world.bounding_box(),
            "state": _engine.state,
        },
        "bus": bus_stats,
        "journal": _journal.get_stats(),
    }


@router.get("/subscribers")
async def subscribers(username=Depends(verify_basic_auth)):
    """Return info about all current subscribers (requires basic auth)."""
    return await _bus.get_subscriber_info()
