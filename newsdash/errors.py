"""Exception types shared by the aggregation pipeline and the backend client."""

from typing import Optional


class NewsDashError(Exception):
    """Base class for all newsdash errors."""


class InvalidInput(NewsDashError):
    """Caller parameters were rejected before any fetch was issued."""


class SourceUnavailable(NewsDashError):
    """A single feed could not be fetched (network, timeout, bad payload)."""

    def __init__(self, feed_id: str, reason: str = ""):
        self.feed_id = feed_id
        self.reason = reason
        message = f"Feed '{feed_id}' is unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class BackendError(NewsDashError):
    """A non-feed backend call failed."""

    def __init__(self, operation: str, reason: str = "", status: Optional[int] = None):
        self.operation = operation
        self.reason = reason
        self.status = status
        message = f"Backend call '{operation}' failed"
        if status is not None:
            message = f"{message} (HTTP {status})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
