"""
Playback controller
===================

Replays a :class:`~gantt_player.timeline.Timeline` segment by segment on the
Tk event loop. Each step highlights the segment's process as *running*,
waits a duration proportional to the segment length, marks it *done* and
moves the cursor on.

State machine::

    IDLE ──play──► PLAYING ──pause──► PAUSED
                     │  ▲               │
                     │  └─────play──────┘
                     ▼
                  FINISHED ──play──► PLAYING
    (any) ──reset──► IDLE

Pausing does not interrupt the step already waiting: it completes, and the
next segment starts (with a full wait) once ``play()`` resumes. If that step
was the last one, the run finishes.

Scheduling goes through an object with Tk's ``after(ms, func)`` /
``after_cancel(id)`` pair (any widget, or a fake clock in tests), so all
transitions run on one thread and need no locking.
"""

import enum
import logging
from typing import Any, Callable, Optional

from .config import DEFAULT_SPEED, MIN_STEP_MS, UNIT_MS
from .errors import NoTimeline
from .rows import DONE, RUNNING
from .timeline import Segment, Timeline

logger = logging.getLogger(__name__)

HighlightSink = Any  # needs highlight(pid, state) and clear_all()
StatusCallback = Callable[[str], None]


class Phase(enum.Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


def step_duration_ms(
    segment: Segment,
    speed_multiplier: float,
    unit_ms: float = UNIT_MS,
    min_step_ms: float = MIN_STEP_MS,
) -> int:
    """Milliseconds a segment stays highlighted, never below ``min_step_ms``."""
    return int(round(max(min_step_ms, segment.duration * unit_ms / speed_multiplier)))


class PlaybackController:
    """
    Drives highlight events over a timeline.

    Args:
        scheduler:        Object with Tk-style ``after`` / ``after_cancel``.
        sink:             Receives ``highlight(pid, state)`` and ``clear_all()``.
        on_status:        Optional callback receiving status words
                          ("playing", "paused", "reset", "finished").
        speed_multiplier: Initial playback speed (> 0).
    """

    def __init__(
        self,
        scheduler: Any,
        sink: HighlightSink,
        on_status: Optional[StatusCallback] = None,
        speed_multiplier: float = DEFAULT_SPEED,
        unit_ms: float = UNIT_MS,
        min_step_ms: float = MIN_STEP_MS,
    ) -> None:
        self.scheduler = scheduler
        self.sink = sink
        self.on_status = on_status
        self.unit_ms = unit_ms
        self.min_step_ms = min_step_ms

        self._timeline: Timeline = Timeline.empty()
        self._phase = Phase.IDLE
        self._cursor = 0
        self._speed = DEFAULT_SPEED
        self.speed_multiplier = speed_multiplier

        # Tk after() id of the step currently waiting, if any.
        self._pending: Optional[Any] = None

    # ------------------------------------------------------------------#
    # State                                                             #
    # ------------------------------------------------------------------#

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def cursor_index(self) -> int:
        return self._cursor

    @property
    def timeline(self) -> Timeline:
        return self._timeline

    @property
    def speed_multiplier(self) -> float:
        return self._speed

    @speed_multiplier.setter
    def speed_multiplier(self, value: float) -> None:
        value = float(value)
        if not value > 0:
            raise ValueError(f"Speed multiplier must be positive, got {value}")
        self._speed = value

    def load(self, timeline: Optional[Timeline]) -> None:
        """Install a new timeline (or none), resetting any playback in progress."""
        self.reset()
        self._timeline = timeline if timeline is not None else Timeline.empty()
        logger.info("Loaded timeline with %d segments", len(self._timeline))

    # ------------------------------------------------------------------#
    # Transitions                                                       #
    # ------------------------------------------------------------------#

    def play(self) -> None:
        """
        Start or resume playback.

        Raises:
            NoTimeline: if there is nothing to play.
        """
        if not self._timeline:
            raise NoTimeline()

        if self._phase is Phase.PLAYING:
            return

        if self._phase in (Phase.IDLE, Phase.FINISHED):
            self._cursor = 0

        self._phase = Phase.PLAYING
        self._report("playing")

        # A step paused mid-wait is still scheduled; it continues the run.
        if self._pending is None:
            self._begin_step()

    def pause(self) -> None:
        """Hold playback after the current step; ignored unless playing."""
        if self._phase is not Phase.PLAYING:
            return
        self._phase = Phase.PAUSED
        self._report("paused")

    def reset(self) -> None:
        """Stop everything, rewind to the first segment and clear highlights."""
        if self._pending is not None:
            self.scheduler.after_cancel(self._pending)
            self._pending = None
        self._cursor = 0
        self._phase = Phase.IDLE
        self.sink.clear_all()
        self._report("reset")

    # ------------------------------------------------------------------#
    # Stepping                                                          #
    # ------------------------------------------------------------------#

    def _begin_step(self) -> None:
        if self._phase is not Phase.PLAYING:
            return
        if self._cursor >= len(self._timeline):
            self._finish()
            return

        segment = self._timeline[self._cursor]
        self.sink.highlight(segment.pid, RUNNING)
        delay = step_duration_ms(segment, self._speed, self.unit_ms, self.min_step_ms)
        logger.debug("Segment %d %s for %d ms", self._cursor, segment.label, delay)
        self._pending = self.scheduler.after(delay, self._end_step)

    def _end_step(self) -> None:
        self._pending = None
        segment = self._timeline[self._cursor]
        self.sink.highlight(segment.pid, DONE)
        self._cursor += 1

        if self._cursor >= len(self._timeline):
            # The last step ends the run even if a pause arrived during it.
            self._finish()
        elif self._phase is Phase.PLAYING:
            self._begin_step()

    def _finish(self) -> None:
        self._phase = Phase.FINISHED
        self._cursor = 0
        logger.info("Playback finished")
        self._report("finished")

    def _report(self, status: str) -> None:
        logger.debug("Playback status: %s", status)
        if self.on_status is not None:
            self.on_status(status)
