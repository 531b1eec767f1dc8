import asyncio
import time
from communication.bus import TOPIC_CONTROL, TOPIC_GENERATION
from config import load_config
from internal.logging import get_logger
from simulation.patterns import get_pattern
from simulation.state import StateSnapshot
from simulation.world import World
from utils.timestamp import elapsed_ms

class EngineState:
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"

class SimulationEngine:
    """Drives a World one generation per tick and publishes snapshots on the bus."""

    def __init__(self, bus, config=None):
        self.bus = bus
        self.config = config or load_config().simulation
        self._lock = asyncio.Lock()
        self._log = get_logger().bind(component="engine")
        self.world = World(get_pattern(self.config.pattern))
        self._state = EngineState.STOPPED
        self._task = None
        self._stop = asyncio.Event()
        self._last_publish_generation = -1

    @property
    def paused(self):
        return self._state == EngineState.PAUSED

    @property
    def state(self):
        return self._state

    @property
    def generation(self):
        return self.world.generation

    @property
    def loop_alive(self):
        return self._task is not None and not self._task.done()

    def reset(self):
        """Reload the configured starting pattern."""
        self.seed(get_pattern(self.config.pattern))

    def seed(self, cells):
        """Replace the live set and restart the generation count."""
        self.world = World(cells)
        self._last_publish_generation = -1
        if self._state == EngineState.FINISHED:
            self._state = EngineState.RUNNING
        self._log.info("world seeded", population=len(self.world))

    async def start(self):
        if self._task:
            return
        self._stop.clear()
        self._state = EngineState.RUNNING
        self._task = asyncio.create_task(self._loop())

    async def stop(self):
        self._stop.set()
        if self._task:
            await self._task
            self._task = None
        self._state = EngineState.STOPPED
        await self.bus.publish(TOPIC_CONTROL, {"kind": "engine_stopped", "generation": self.generation})

    async def pause(self):
        async with self._lock:
            if not self._task:
                return
            self._state = EngineState.PAUSED
            self._log.info("engine paused", generation=self.generation)

    async def resume(self):
        async with self._lock:
            if not self._task:
                return
            self._state = EngineState.RUNNING
            self._log.info("engine resumed", generation=self.generation)

    async def advance(self, generations=1):
        """Advance immediately, whatever the loop state, and publish the result."""
        async with self._lock:
            self.world.step(generations)
            snapshot = self._snapshot()
        await self._publish(snapshot)
        return snapshot

    async def get_snapshot(self):
        async with self._lock:
            return self._snapshot()

    def _snapshot(self):
        return StateSnapshot(self.world.generation, self.world.cells())

    def _limit_reached(self):
        limit = self.config.max_generations
        return limit > 0 and self.world.generation >= limit

    def _tick(self):
        start = time.perf_counter()
        self.world.evaluate()
        self.world.update()
        self._log.debug("generation", generation=self.world.generation,
                        population=len(self.world), ms=elapsed_ms(start))
        if self._limit_reached():
            self._state = EngineState.FINISHED
            self._log.info("generation limit reached", generation=self.world.generation)

    async def _publish(self, snapshot):
        if snapshot.generation == self._last_publish_generation:
            return
        try:
            await self.bus.publish(TOPIC_GENERATION, snapshot)
            self._last_publish_generation = snapshot.generation
        except Exception as exc:
            self._log.warn("publish fail", error=exc)

    async def _loop(self):
        tick_interval = self.config.tick_interval
        next_tick_time = time.perf_counter()
        self._log.info("engine start", dt=tick_interval, pattern=self.config.pattern)

        while not self._stop.is_set():
            wait_time = next_tick_time - time.perf_counter()
            if wait_time > 0:
                try:
                    await asyncio.wait_for(self._stop.wait(), timeout=wait_time)
                    break
                except asyncio.TimeoutError:
                    pass
            next_tick_time += tick_interval

            try:
                async with self._lock:
                    if self._state == EngineState.RUNNING:
                        if self._limit_reached():
                            self._state = EngineState.FINISHED
                        else:
                            self._tick()
                    snapshot = self._snapshot()
            except Exception as exc:
                self._log.error("tick fail", error=exc, generation=self.generation)
                continue

            # Paused or finished engines republish nothing
            await self._publish(snapshot)

        self._log.info("engine stop", generation=self.generation)
