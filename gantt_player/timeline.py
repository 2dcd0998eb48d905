"""
Timeline model
==============

A *timeline* is the ordered list of CPU execution intervals returned by the
simulation service for one run. It is immutable: a new run produces a new
:class:`Timeline` that replaces the old one wholesale.
"""

import logging
import math
import numbers
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Tuple, Union

from .errors import InvalidTimeline

logger = logging.getLogger(__name__)

Number = Union[int, float]


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Segment:
    """
    One contiguous interval during which a process holds the CPU.

    Attributes:
        pid:   Process identifier (e.g. "P1"). Not unique on its own; the
               same process appears once per time slice.
        start: Time unit at which the slice begins.
        end:   Time unit at which the slice ends (strictly after ``start``).
    """

    pid: str
    start: Number
    end: Number

    @property
    def duration(self) -> Number:
        return self.end - self.start

    @property
    def label(self) -> str:
        return f"{self.pid} ({self.start}-{self.end})"


class Timeline:
    """
    Immutable, start-ordered sequence of :class:`Segment` objects.

    The extent of the chart is exposed as ``global_start``, ``global_end``
    and ``span``; ``span`` never drops below 1 so a chart is never zero
    units wide.
    """

    __slots__ = ("_segments", "_global_start", "_global_end")

    def __init__(self, segments: Sequence[Segment] = ()) -> None:
        ordered = tuple(sorted(segments, key=lambda s: s.start))
        self._segments: Tuple[Segment, ...] = ordered
        if ordered:
            self._global_start = min(s.start for s in ordered)
            self._global_end = max(s.end for s in ordered)
        else:
            self._global_start = 0
            self._global_end = 0

    @classmethod
    def empty(cls) -> "Timeline":
        return cls(())

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return self._segments

    @property
    def global_start(self) -> Number:
        return self._global_start

    @property
    def global_end(self) -> Number:
        return self._global_end

    @property
    def span(self) -> Number:
        return max(1, self._global_end - self._global_start)

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self._segments)

    def __getitem__(self, index: int) -> Segment:
        return self._segments[index]

    def __bool__(self) -> bool:
        return bool(self._segments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Timeline):
            return NotImplemented
        return self._segments == other._segments

    def __hash__(self) -> int:
        return hash(self._segments)

    def __repr__(self) -> str:
        return f"Timeline({len(self._segments)} segments, {self._global_start}-{self._global_end})"


# ---------------------------------------------------------------------------
# Parsing / validation
# ---------------------------------------------------------------------------


def _as_time(raw: Mapping[str, Any], key: str, index: int) -> Number:
    value = raw.get(key)
    # bool is an int subclass; "true" is never a valid time.
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidTimeline(
            f"Segment {index} has a non-numeric '{key}'.",
            details=f"segment={raw!r}",
        )
    if not math.isfinite(value):
        raise InvalidTimeline(
            f"Segment {index} has a non-finite '{key}'.",
            details=f"segment={raw!r}",
        )
    if value < 0:
        raise InvalidTimeline(
            f"Segment {index} has a negative '{key}'.",
            details=f"segment={raw!r}",
        )
    return value


def _parse_segment(raw: Any, index: int) -> Segment:
    if not isinstance(raw, Mapping):
        raise InvalidTimeline(f"Segment {index} is not an object.", details=f"segment={raw!r}")

    pid = raw.get("pid")
    if pid is None or str(pid) == "":
        raise InvalidTimeline(f"Segment {index} has no pid.", details=f"segment={raw!r}")

    start = _as_time(raw, "start", index)
    end = _as_time(raw, "end", index)
    if end <= start:
        raise InvalidTimeline(
            f"Segment {index} ({pid}) ends at {end}, not after its start {start}.",
            details=f"segment={raw!r}",
        )
    return Segment(pid=str(pid), start=start, end=end)


def _check_no_self_overlap(timeline: Timeline) -> None:
    last_end: Dict[str, Number] = {}
    for seg in timeline:
        previous = last_end.get(seg.pid)
        if previous is not None and seg.start < previous:
            raise InvalidTimeline(
                f"Segments of {seg.pid} overlap at t={seg.start}.",
                details=f"previous end={previous}, segment={seg!r}",
            )
        last_end[seg.pid] = max(seg.end, previous) if previous is not None else seg.end


def parse_timeline(payload: Optional[Any]) -> Timeline:
    """
    Build a :class:`Timeline` from the backend's ``timeline`` value.

    Args:
        payload: Expected to be a list of ``{"pid", "start", "end"}`` objects.

    Returns:
        The validated timeline. An empty list gives an empty timeline.

    Raises:
        InvalidTimeline: if the payload is absent, not a list, or contains a
            malformed segment (missing pid, bad times, ``end <= start``, or
            two overlapping slices of the same process).
    """
    if payload is None:
        raise InvalidTimeline("Response has no timeline.")
    if isinstance(payload, (str, bytes)) or not isinstance(payload, (list, tuple)):
        raise InvalidTimeline(
            "Timeline is not a list of segments.",
            details=f"type={type(payload).__name__}",
        )

    segments = [_parse_segment(raw, index) for index, raw in enumerate(payload)]
    timeline = Timeline(segments)
    _check_no_self_overlap(timeline)

    logger.debug("Parsed %r", timeline)
    return timeline
