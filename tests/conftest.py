"""Pytest fixtures for all tests."""

import base64

import pytest
from httpx import AsyncClient, ASGITransport

from ui.app import create_app
from communication.bus import EventBus
from simulation.engine import SimulationEngine
from simulation.patterns import get_pattern
from simulation.world import World
from config import Config, SimulationConfig


@pytest.fixture
def glider():
    """The glider used by the batch driver."""
    return get_pattern("glider")


@pytest.fixture
def world(glider):
    """Create a test world seeded with a glider."""
    return World(glider)


@pytest.fixture
def sim_config():
    """Create test simulation config."""
    return SimulationConfig(tick_interval=0.05, pattern="glider")


@pytest.fixture
async def bus():
    """Create test event bus."""
    return EventBus(queue_size=10)


@pytest.fixture
async def engine(bus, sim_config):
    """Create test simulation engine."""
    eng = SimulationEngine(bus=bus, config=sim_config)
    yield eng
    if eng._task:
        await eng.stop()


@pytest.fixture
def app_config(tmp_path):
    """Config whose log files land in a temp dir."""
    config = Config(simulation=SimulationConfig(tick_interval=0.05))
    config.logging.file = str(tmp_path / "simulator.log")
    config.logging.crash_file = str(tmp_path / "crash.log")
    return config


@pytest.fixture
async def app(app_config):
    """Create test FastAPI app."""
    return create_app(app_config)


@pytest.fixture
async def client(app):
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth():
    """Basic auth header with the default credentials."""
    credentials = base64.b64encode(b"admin:admin123").decode()
    return {"Authorization": f"Basic {credentials}"}
