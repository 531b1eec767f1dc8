"""Liveness and readiness routes. Unauthenticated, for load balancers and dashboards."""

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from core.health import Status
from utils.timestamp import format_timestamp

router = APIRouter(prefix="/api/v1", tags=["health"])

# These will be set by app.py
_engine = None
_bus = None
_checker = None


def init(engine, bus, checker):
    global _engine, _bus, _checker
    _engine = engine
    _bus = bus
    _checker = checker


def _respond(status, content):
    return JSONResponse(content=content, status_code=503 if status is Status.FAIL else 200)


@router.get("/health")
async def health():
    """All checks; 503 when a critical one fails."""
    report = await _checker.check()
    return _respond(report.status, report.to_dict())


@router.get("/health/{name}")
async def health_check(name: str):
    """One named check, run fresh."""
    if name not in _checker.names:
        raise HTTPException(status_code=404, detail=f"no check named {name!r}; have {_checker.names}")
    result = await _checker.run_one(name)
    return _respond(result.status, result.to_dict())


@router.get("/heartbeat")
async def heartbeat():
    snapshot = await _engine.get_snapshot()
    return {
        "status": "ok",
        "timestamp": format_timestamp(),
        "generation": snapshot.generation,
        "population": snapshot.population,
        "engine_state": _engine.state,
        "tick_loop": _engine.loop_alive,
        "subscribers": _bus.get_stats()["subscriber_count"],
    }
