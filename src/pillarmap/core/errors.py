"""Error taxonomy for roadmap parsing and editing."""

from typing import Optional


class RoadmapError(Exception):
    """Base class for all pillarmap errors."""

    pass


class SchemaViolation(RoadmapError, ValueError):
    """Raised when a parse result does not have the roadmap shape."""

    pass


class EmptySourceText(RoadmapError, ValueError):
    """Raised when there is no roadmap text to parse."""

    def __init__(self, message: str = "Please paste some roadmap text."):
        super().__init__(message)


class StaleAddress(RoadmapError, LookupError):
    """
    Raised when an edit address no longer resolves.

    The edit resolver absorbs this by default; it only reaches callers that
    ask for strict resolution.
    """

    def __init__(
        self,
        reason: str,
        timeframe_id: str,
        pillar_id: str,
        task_index: Optional[int] = None,
    ):
        self.reason = reason
        self.timeframe_id = timeframe_id
        self.pillar_id = pillar_id
        self.task_index = task_index
        address = f"{timeframe_id}/{pillar_id}"
        if task_index is not None:
            address += f"[{task_index}]"
        super().__init__(f"Stale edit address {address}: {reason}")


class UpstreamFailure(RoadmapError, RuntimeError):
    """Raised when an external model call fails or returns an unusable payload."""

    def __init__(self, message: str, provider: Optional[str] = None):
        self.provider = provider
        super().__init__(message)
