"""
One rendered session: the current timeline and everything that reads it.

The :class:`Session` is the single owner of the last successfully received
timeline. Both the run handler (``run``) and the playback controller get it
from here; nothing keeps it in a global.
"""

import logging
from typing import Any, Callable, Optional

from .backend import SimulationClient, SimulationResult
from .errors import BackendError, InvalidTimeline
from .gantt import GanttRenderer
from .playback import PlaybackController
from .rows import ProcessTable
from .timeline import Timeline

logger = logging.getLogger(__name__)

StatusCallback = Callable[[str], None]


class Session:
    """
    Ties together the table, the simulation client, the renderer and the
    playback controller.

    Args:
        client:    Simulation service client.
        table:     Process table (also the highlight sink).
        renderer:  Gantt renderer bound to the chart canvas.
        scheduler: Tk-style ``after`` / ``after_cancel`` provider.
        on_status: Receives human-readable status lines.
        speed:     Initial playback speed multiplier.
    """

    def __init__(
        self,
        client: SimulationClient,
        table: ProcessTable,
        renderer: GanttRenderer,
        scheduler: Any,
        on_status: Optional[StatusCallback] = None,
        speed: float = 1.0,
    ) -> None:
        self.client = client
        self.table = table
        self.renderer = renderer
        self.on_status = on_status
        self.status = "Status: idle"
        self.result: Optional[SimulationResult] = None
        self.controller = PlaybackController(
            scheduler,
            table,
            on_status=self._on_playback_status,
            speed_multiplier=speed,
        )

    @property
    def timeline(self) -> Timeline:
        return self.controller.timeline

    def run(self, quantum: int) -> SimulationResult:
        """
        Ask the service to simulate the current table and install the result.

        On a backend failure the previous timeline, chart and metrics are
        left exactly as they were. A malformed timeline clears the chart and
        the previous run's row metrics, and leaves playback idle with
        nothing loaded.

        Raises:
            ValueError:      the table has no rows.
            BackendError:    the service failed.
            InvalidTimeline: the service's timeline was malformed.
        """
        processes = self.table.to_processes()
        if not processes:
            raise ValueError("Add at least one process")

        self._set_status("calling backend...")
        try:
            result = self.client.simulate(processes, quantum)
        except InvalidTimeline as exc:
            logger.error("Rejected timeline: %s", exc.details)
            self.renderer.clear()
            self.controller.load(None)
            self.table.reset_metrics()
            self.result = None
            self._set_status(f"Error - invalid timeline: {exc.message}")
            raise
        except BackendError as exc:
            logger.error("Simulation failed: %s", exc.details)
            self._set_status(f"Error - {exc.message}")
            raise

        self._install(result)
        return result

    def _install(self, result: SimulationResult) -> None:
        # Everything is built before anything is swapped in.
        self.renderer.draw(result.timeline)
        self.controller.load(result.timeline)
        self.table.apply_metrics(result.metrics)
        self.result = result
        self._set_status("ready - use Play to animate")

    def clear(self) -> None:
        """Drop rows, results, chart and timeline."""
        self.controller.load(None)
        self.table.clear()
        self.renderer.clear()
        self.result = None
        self._set_status("cleared")

    # Playback pass-throughs; the controller reports its own status.

    def play(self) -> None:
        self.controller.play()

    def pause(self) -> None:
        self.controller.pause()

    def reset(self) -> None:
        self.controller.reset()

    def set_speed(self, speed: float) -> None:
        self.controller.speed_multiplier = speed

    def _on_playback_status(self, status: str) -> None:
        self._set_status(status)

    def _set_status(self, text: str) -> None:
        self.status = f"Status: {text}"
        if self.on_status is not None:
            self.on_status(self.status)
