"""FastAPI application factory."""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from communication.bus import EventBus
from config import load_config
from core.errors import BaseSimError
from core.health import (
    HealthChecker,
    create_bus_check,
    create_engine_check,
    create_journal_check,
    create_world_check,
)
from internal.logging import AsyncFileLogger, StructuredLogger, get_logger
from simulation.engine import SimulationEngine
from simulation.state import StateSnapshot
from utils.crash import create_async_handler
from ui.routes import api, control, events, health

VERSION = "1.0.0"
JOURNAL_SUBSCRIBER = "journal"


def journal_item(journal, item):
    """Record one bus item; snapshots are reduced to generation and population."""
    if isinstance(item, StateSnapshot):
        return journal.log_generation(item.generation, item.population)
    return journal.log_event(item)


async def journal_worker(subscriber, journal):
    while True:
        journal_item(journal, await subscriber.queue.get())


def build_health_checker(engine, bus, journal):
    checker = HealthChecker()
    checker.register("engine", create_engine_check(engine))
    checker.register("world", create_world_check(engine), critical=False)
    checker.register("bus", create_bus_check(bus))
    checker.register("journal", create_journal_check(journal), critical=False)
    return checker


def create_app(config=None):
    """Wire engine, bus, journal and health checks into a FastAPI app."""
    config = config or load_config()

    StructuredLogger.configure(min_level=config.logging.level)
    log = get_logger().bind(component="app")

    bus = EventBus(queue_size=100)
    engine = SimulationEngine(bus=bus, config=config.simulation)
    journal = AsyncFileLogger(config.logging.file, summary_every=config.logging.summary_every)
    checker = build_health_checker(engine, bus, journal)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        asyncio.get_running_loop().set_exception_handler(create_async_handler(log))
        await journal.start()
        subscriber = await bus.subscribe(JOURNAL_SUBSCRIBER, max_queue_size=200)
        worker = asyncio.create_task(journal_worker(subscriber, journal))
        await engine.start()
        log.info("service started", version=VERSION, pattern=config.simulation.pattern,
                 tick_interval=config.simulation.tick_interval)
        try:
            yield
        finally:
            await engine.stop()
            worker.cancel()
            try:
                await worker
            except asyncio.CancelledError:
                pass
            # the final engine_stopped event is still queued
            while not subscriber.queue.empty():
                journal_item(journal, subscriber.queue.get_nowait())
            await bus.unsubscribe(JOURNAL_SUBSCRIBER)
            await journal.stop()
            log.info("service stopped", generation=engine.generation, journal=journal.get_stats())

    app = FastAPI(
        title="Life Simulator",
        version=VERSION,
        description="sparse unbounded Conway's Game of Life service",
        lifespan=lifespan,
    )

    @app.exception_handler(BaseSimError)
    async def sim_error_handler(request: Request, exc: BaseSimError):
        log.warn("request rejected", error=exc, path=request.url.path)
        return JSONResponse(status_code=400, content=exc.to_dict())

    control.init(engine, bus)
    api.init(engine, bus, journal, print_header=config.simulation.print_header)
    health.init(engine, bus, checker)
    events.init(engine, bus)
    for module in (control, api, health, events):
        app.include_router(module.router)

    app.state.engine = engine
    app.state.bus = bus
    app.state.journal = journal
    app.state.health_checker = checker
    return app
