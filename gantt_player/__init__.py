"""Animated Gantt chart player for CPU scheduling simulations."""

from .errors import BackendError, GanttPlayerError, InvalidTimeline, NoTimeline
from .playback import Phase, PlaybackController
from .timeline import Segment, Timeline, parse_timeline

__version__ = "0.1.0"

__all__ = [
    "BackendError",
    "GanttPlayerError",
    "InvalidTimeline",
    "NoTimeline",
    "Phase",
    "PlaybackController",
    "Segment",
    "Timeline",
    "parse_timeline",
]
