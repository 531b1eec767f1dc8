"""Health checks for the Life service: tick loop progress, the world, bus delivery and the journal."""

import asyncio
import time
from enum import Enum
from communication.bus import TOPIC_CONTROL, TOPIC_GENERATION
from utils.timestamp import format_timestamp

class Status(Enum):
    OK = "healthy"
    DEGRADED = "degraded"
    FAIL = "unhealthy"

_RANK = {Status.OK: 0, Status.DEGRADED: 1, Status.FAIL: 2}

class CheckResult:
    """Outcome of one check. ``name`` is filled in by the checker that ran it."""

    __slots__ = ("name", "status", "msg", "detail")

    def __init__(self, status, msg="", **detail):
        self.name = None
        self.status = status
        self.msg = msg
        self.detail = detail

    def to_dict(self):
        out = {"name": self.name, "status": self.status.value, "msg": self.msg}
        if self.detail:
            out["detail"] = self.detail
        return out

class HealthReport:
    __slots__ = ("status", "checks", "uptime", "timestamp")

    def __init__(self, status, checks, uptime=0):
        self.status = status
        self.checks = checks
        self.uptime = uptime
        self.timestamp = format_timestamp()

    def to_dict(self):
        return {"status": self.status.value, "timestamp": self.timestamp, "uptime": round(self.uptime, 1),
                "checks": [check.to_dict() for check in self.checks]}

def overall_status(results):
    """Worst status wins; a failing non-critical check only counts as degraded."""
    worst = Status.OK
    for result, critical in results:
        status = result.status
        if status is Status.FAIL and not critical:
            status = Status.DEGRADED
        if _RANK[status] > _RANK[worst]:
            worst = status
    return worst

class HealthChecker:
    """Runs the registered async checks in order and caches the report for ``ttl`` seconds."""

    def __init__(self, ttl=1.0, timeout=5.0):
        self._checks = {}
        self._ttl = ttl
        self._timeout = timeout
        self._started = time.monotonic()
        self._report = None
        self._report_at = 0.0

    @property
    def names(self):
        return list(self._checks)

    def register(self, name, check_fn, critical=True):
        self._checks[name] = (check_fn, critical)
        self._report = None

    async def run_one(self, name):
        """Run a single check by name. Raises KeyError for names never registered."""
        check_fn, _ = self._checks[name]
        try:
            result = await asyncio.wait_for(check_fn(), timeout=self._timeout)
        except asyncio.TimeoutError:
            result = CheckResult(Status.FAIL, "timeout")
        except Exception as exc:
            result = CheckResult(Status.FAIL, str(exc))
        result.name = name
        return result

    async def check(self):
        now = time.monotonic()
        if self._report is not None and now - self._report_at < self._ttl:
            return self._report
        names = self.names
        results = [await self.run_one(name) for name in names]
        graded = [(result, self._checks[name][1]) for name, result in zip(names, results)]
        self._report = HealthReport(overall_status(graded), results, now - self._started)
        self._report_at = now
        return self._report

# Checks
class EngineWatch:
    """Tick loop check. A running engine whose generation stalls for ``threshold`` seconds is stuck."""

    def __init__(self, engine, threshold=5.0):
        self.engine = engine
        self.threshold = threshold
        self._generation = None
        self._moved_at = time.monotonic()

    async def __call__(self):
        snapshot = await self.engine.get_snapshot()
        state = self.engine.state
        now = time.monotonic()
        detail = {"state": state, "generation": snapshot.generation}

        if state == "stopped":
            return CheckResult(Status.DEGRADED, "stopped", **detail)
        if state == "running" and not self.engine.loop_alive:
            return CheckResult(Status.FAIL, "tick loop not running", **detail)

        if state != "running" or snapshot.generation != self._generation:
            self._generation, self._moved_at = snapshot.generation, now
        elif now - self._moved_at > self.threshold:
            return CheckResult(Status.FAIL, f"stuck at generation {snapshot.generation}", **detail)
        return CheckResult(Status.OK, f"{state} at generation {snapshot.generation}", **detail)

def create_engine_check(engine, threshold=5.0):
    return EngineWatch(engine, threshold)

def create_world_check(engine):
    """An extinct world never changes again until it is reseeded."""
    async def check():
        snapshot = await engine.get_snapshot()
        if not snapshot.population:
            return CheckResult(Status.DEGRADED, f"extinct at generation {snapshot.generation}", population=0)
        return CheckResult(Status.OK, f"{snapshot.population} live cells", population=snapshot.population,
                           bounding_box=engine.world.bounding_box())
    return check

def create_bus_check(bus, lag_ratio=0.1):
    """Any lost control event degrades; generations degrade past ``lag_ratio`` of deliveries lost."""
    async def check():
        stats = bus.get_stats()
        control = stats["topics"][TOPIC_CONTROL]
        generation = stats["topics"][TOPIC_GENERATION]
        if control["dropped"]:
            return CheckResult(Status.DEGRADED, f"{control['dropped']} control events dropped")
        attempts = generation["delivered"] + generation["dropped"]
        if attempts and generation["dropped"] / attempts > lag_ratio:
            return CheckResult(Status.DEGRADED, "subscribers lagging", dropped=generation["dropped"])
        return CheckResult(Status.OK, f"{stats['subscriber_count']} subscribers")
    return check

def create_journal_check(journal, fill_ratio=0.9):
    async def check():
        stats = journal.get_stats()
        capacity = journal.queue.maxsize
        if stats["queued"] > fill_ratio * capacity:
            return CheckResult(Status.DEGRADED, f"{stats['queued']}/{capacity} queued")
        if stats["dropped"]:
            return CheckResult(Status.DEGRADED, f"{stats['dropped']} records dropped")
        return CheckResult(Status.OK, f"{stats['written']} written")
    return check
