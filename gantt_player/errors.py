"""
Error types raised by the Gantt player.

Each error carries a short, user-facing ``message`` plus optional technical
``details`` that only go to the log.
"""

from typing import Optional


class GanttPlayerError(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or message


class NoTimeline(GanttPlayerError):
    """Playback was requested before any simulation produced a timeline."""

    def __init__(self, message: str = "Run the simulation first.") -> None:
        super().__init__(message)


class InvalidTimeline(GanttPlayerError):
    """The backend's timeline payload is missing or malformed."""


class BackendError(GanttPlayerError):
    """The simulation service could not be reached or answered badly."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details)
        self.status = status
