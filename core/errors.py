"""Custom errors with tracking IDs."""

from utils.timestamp import format_timestamp
from utils.ksuid import generate_ksuid


class BaseSimError(Exception):
    """Base error with unique ID and timestamp for tracking."""

    def __init__(self, message, context=None, cause=None):
        super().__init__(message)
        self.error_id = generate_ksuid()
        self.timestamp = format_timestamp()
        self.context = context or {}
        self.cause = cause

    def __str__(self):
        return f"[{self.error_id}] {super().__str__()}"

    def to_dict(self):
        return {
            "error_id": self.error_id,
            "timestamp": self.timestamp,
            "type": type(self).__name__,
            "msg": self.args[0] if self.args else "",
            "context": self.context,
        }


class CoordinateRangeError(BaseSimError, ValueError):
    """Coordinate outside the signed 64-bit plane."""

    def __init__(self, message, x=None, y=None, **kwargs):
        context = kwargs.pop("context", {})
        if x is not None:
            context["x"] = x
        if y is not None:
            context["y"] = y
        super().__init__(message, context=context, **kwargs)


class PatternError(BaseSimError, ValueError):
    """Unknown pattern name or malformed pattern text."""

    def __init__(self, message, line=None, **kwargs):
        context = kwargs.pop("context", {})
        if line is not None:
            context["line"] = line
        super().__init__(message, context=context, **kwargs)
