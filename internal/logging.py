import asyncio
import json
import os
import sys
import threading
from enum import IntEnum
from utils.timestamp import format_timestamp

class LogLevel(IntEnum):
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

    @classmethod
    def parse(cls, name, default=None):
        """Map a config string ("info", "WARNING", ...) to a level."""
        key = str(name).strip().upper()
        if key == "WARNING":
            key = "WARN"
        try:
            return cls[key]
        except KeyError:
            if default is not None:
                return default
            raise ValueError(f"unknown log level: {name!r}") from None

_logger = None
_logger_lock = threading.Lock()

class StructuredLogger:
    def __init__(self, level=LogLevel.INFO, fields=None, stream=None):
        self.level = level
        self.fields = fields or {}
        self.stream = stream

    def _emit(self, level, message, error=None, **kwargs):
        if level < self.level:
            return
        try:
            record = {"timestamp": format_timestamp(), "level": level.name, "msg": message,
                      **self.fields, **kwargs}
            if error:
                record["err"] = str(error)
            print(json.dumps(record, default=str), file=self.stream or sys.stderr, flush=True)
        except Exception:
            pass

    def bind(self, **fields):
        """Child logger that adds ``fields`` to every record and follows the root level."""
        return _BoundLogger(self, fields)

    def is_enabled(self, level):
        return level >= self.level

    def debug(self, message, **kwargs):
        self._emit(LogLevel.DEBUG, message, **kwargs)

    def info(self, message, **kwargs):
        self._emit(LogLevel.INFO, message, **kwargs)

    def warn(self, message, error=None, **kwargs):
        self._emit(LogLevel.WARN, message, error, **kwargs)

    def error(self, message, error=None, **kwargs):
        self._emit(LogLevel.ERROR, message, error, **kwargs)

    @classmethod
    def configure(cls, min_level=LogLevel.INFO, stream=None):
        global _logger
        if isinstance(min_level, str):
            min_level = LogLevel.parse(min_level, default=LogLevel.INFO)
        with _logger_lock:
            if _logger is None:
                _logger = cls(min_level, stream=stream)
            else:
                _logger.level = min_level
                _logger.stream = stream
        return _logger


class _BoundLogger:
    __slots__ = ("_parent", "fields")

    def __init__(self, parent, fields):
        self._parent = parent
        self.fields = fields

    def bind(self, **fields):
        return _BoundLogger(self._parent, {**self.fields, **fields})

    def is_enabled(self, level):
        return self._parent.is_enabled(level)

    def debug(self, message, **kwargs):
        self._parent._emit(LogLevel.DEBUG, message, **{**self.fields, **kwargs})

    def info(self, message, **kwargs):
        self._parent._emit(LogLevel.INFO, message, **{**self.fields, **kwargs})

    def warn(self, message, error=None, **kwargs):
        self._parent._emit(LogLevel.WARN, message, error, **{**self.fields, **kwargs})

    def error(self, message, error=None, **kwargs):
        self._parent._emit(LogLevel.ERROR, message, error, **{**self.fields, **kwargs})


def get_logger():
    global _logger
    if _logger is None:
        with _logger_lock:
            if _logger is None:
                _logger = StructuredLogger()
    return _logger


_CLOSE = object()

class AsyncFileLogger:
    """Background JSON-lines journal of control events and generation summaries.

    A generation is reduced to its number and population, and only every
    ``summary_every``-th one is kept, so the file never holds cell positions.
    Records are written in batches of up to ``batch_size``.
    """

    def __init__(self, file_path, queue_size=1000, summary_every=1, batch_size=64):
        self.path = file_path
        self.summary_every = max(1, summary_every)
        self.batch_size = batch_size
        self.queue = asyncio.Queue(maxsize=queue_size)
        self._task = None
        self.written = 0
        self.dropped = 0

    def log_event(self, event):
        return self._enqueue("control", event)

    def log_generation(self, generation, population):
        """Queue a summary; generations off the ``summary_every`` stride are skipped."""
        if generation % self.summary_every:
            return False
        return self._enqueue("generation", {"generation": generation, "population": population})

    def _enqueue(self, topic, data):
        try:
            self.queue.put_nowait({"timestamp": format_timestamp(), "topic": topic, "data": data})
        except asyncio.QueueFull:
            self.dropped += 1
            return False
        return True

    async def start(self):
        if self._task:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self):
        """Flush everything queued so far, then close the file."""
        if not self._task:
            return
        await self.queue.put(_CLOSE)
        await self._task
        self._task = None

    def get_stats(self):
        return {"queued": self.queue.qsize(), "written": self.written, "dropped": self.dropped,
                "summary_every": self.summary_every}

    def _open(self):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        return open(self.path, "a", encoding="utf-8")

    async def _run(self):
        file = self._open()
        try:
            closing = False
            while not closing:
                batch = [await self.queue.get()]
                while len(batch) < self.batch_size and not self.queue.empty():
                    batch.append(self.queue.get_nowait())
                records = [record for record in batch if record is not _CLOSE]
                closing = len(records) < len(batch)
                if not records:
                    continue
                # removed or rotated underneath us
                if not os.path.exists(self.path):
                    file.close()
                    file = self._open()
                    get_logger().warn("journal file reopened", path=self.path)
                file.write("".join(json.dumps(record, default=str) + "\n" for record in records))
                file.flush()
                self.written += len(records)
        finally:
            file.close()
