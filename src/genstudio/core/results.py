"""Generation outcome passed from the relay to the rendering layer."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

DEFAULT_STATUS = "completed"


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def format_duration(seconds: float) -> str:
    """Elapsed seconds as a non-negative, two-decimal string."""
    return f"{max(seconds, 0.0):.2f}"


@dataclass
class GenerationResult:
    """Outcome of one submission.

    ``output`` is a string, a list of strings or a JSON-compatible mapping
    (``None`` before anything was generated). When ``error`` is set it takes
    precedence over ``output`` in the rendered view.
    """

    output: Any = None
    status: str = DEFAULT_STATUS
    started_at: str | None = None
    ended_at: str | None = None
    duration_seconds: str | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @classmethod
    def from_error(cls, message: str) -> "GenerationResult":
        return cls(output=None, status="failed", error=message)
