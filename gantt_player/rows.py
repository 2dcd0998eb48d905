"""
Process table rows and their playback highlight state.

The table lives in memory, keyed by row id with a secondary pid index, so
highlighting never has to walk the widget tree. A ``listener`` callback is
told about every row whose display changed; the GUI uses it to restyle the
matching Treeview item.
"""

import logging
from dataclasses import dataclass
from itertools import count
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

RUNNING = "running"
DONE = "done"
HIGHLIGHT_STATES = (RUNNING, DONE)


@dataclass
class ProcessRow:
    """
    One user-entered process.

    Attributes:
        row_id:          Stable identifier of the row (independent of pid).
        pid:             User-editable process identifier.
        arrival_time:    Arrival time sent to the simulation service.
        burst_time:      CPU burst sent to the simulation service.
        waiting_time:    Filled in from the last run's metrics.
        turnaround_time: Filled in from the last run's metrics.
        state:           Highlight class: None, "running" or "done".
    """

    row_id: int
    pid: str
    arrival_time: int = 0
    burst_time: int = 1
    waiting_time: Optional[float] = None
    turnaround_time: Optional[float] = None
    state: Optional[str] = None


RowListener = Callable[[ProcessRow], None]


class ProcessTable:
    """In-memory process table; also the sink for playback highlight events."""

    def __init__(self, listener: Optional[RowListener] = None) -> None:
        self._rows: Dict[int, ProcessRow] = {}
        self._by_pid: Dict[str, List[int]] = {}
        self._ids = count(1)
        self.listener = listener

    # ------------------------------------------------------------------#
    # Row management                                                    #
    # ------------------------------------------------------------------#

    def add_row(self, pid: Optional[str] = None, arrival_time: int = 0, burst_time: int = 1) -> ProcessRow:
        """Append a row; the pid defaults to ``P{n+1}`` like new rows in the form."""
        if pid is None:
            pid = f"P{len(self._rows) + 1}"
        row = ProcessRow(row_id=next(self._ids), pid=pid, arrival_time=arrival_time, burst_time=burst_time)
        self._rows[row.row_id] = row
        self._by_pid.setdefault(pid, []).append(row.row_id)
        self._notify(row)
        return row

    def remove_row(self, row_id: int) -> None:
        row = self._rows.pop(row_id, None)
        if row is None:
            return
        self._unindex(row)

    def update_row(
        self,
        row_id: int,
        pid: Optional[str] = None,
        arrival_time: Optional[int] = None,
        burst_time: Optional[int] = None,
    ) -> ProcessRow:
        """Edit a row in place; changing the pid moves it in the pid index."""
        row = self._rows[row_id]
        if pid is not None and pid != row.pid:
            self._unindex(row)
            row.pid = pid
            self._by_pid.setdefault(pid, []).append(row_id)
        if arrival_time is not None:
            row.arrival_time = arrival_time
        if burst_time is not None:
            row.burst_time = burst_time
        self._notify(row)
        return row

    def clear(self) -> None:
        self._rows.clear()
        self._by_pid.clear()

    def get(self, row_id: int) -> ProcessRow:
        return self._rows[row_id]

    def rows(self) -> List[ProcessRow]:
        return list(self._rows.values())

    def rows_for(self, pid: str) -> List[ProcessRow]:
        return [self._rows[row_id] for row_id in self._by_pid.get(pid, ())]

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self):
        return iter(list(self._rows.values()))

    def to_processes(self) -> List[Dict[str, Any]]:
        """Rows as simulation request entries, filling blanks with defaults."""
        return [
            {
                "pid": row.pid or "P",
                "arrival_time": row.arrival_time or 0,
                "burst_time": row.burst_time or 1,
            }
            for row in self._rows.values()
        ]

    def apply_metrics(self, metrics: Iterable[Any]) -> None:
        """Copy waiting / turnaround times from a run's metrics onto matching rows."""
        by_pid: Dict[str, Any] = {}
        for metric in metrics:
            pid = metric["pid"] if isinstance(metric, Mapping) else metric.pid
            by_pid[pid] = metric
        for row in self._rows.values():
            metric = by_pid.get(row.pid)
            if metric is None:
                continue
            if isinstance(metric, Mapping):
                row.waiting_time = metric.get("waiting_time")
                row.turnaround_time = metric.get("turnaround_time")
            else:
                row.waiting_time = metric.waiting_time
                row.turnaround_time = metric.turnaround_time
            self._notify(row)

    def reset_metrics(self) -> None:
        for row in self._rows.values():
            row.waiting_time = None
            row.turnaround_time = None
            self._notify(row)

    # ------------------------------------------------------------------#
    # Highlight sink                                                    #
    # ------------------------------------------------------------------#

    def highlight(self, pid: str, state: str) -> None:
        """
        Mark every row with this pid as ``running`` or ``done``.

        The two classes are mutually exclusive; the new one replaces the
        old. Duplicate pids all receive the update.
        """
        if state not in HIGHLIGHT_STATES:
            raise ValueError(f"Unknown highlight state: {state!r}")
        for row in self.rows_for(pid):
            row.state = state
            self._notify(row)

    def clear_all(self) -> None:
        """Remove every highlight class."""
        for row in self._rows.values():
            if row.state is not None:
                row.state = None
                self._notify(row)

    # ------------------------------------------------------------------#
    # Internals                                                         #
    # ------------------------------------------------------------------#

    def _unindex(self, row: ProcessRow) -> None:
        ids = self._by_pid.get(row.pid)
        if not ids:
            return
        if row.row_id in ids:
            ids.remove(row.row_id)
        if not ids:
            del self._by_pid[row.pid]

    def _notify(self, row: ProcessRow) -> None:
        if self.listener is not None:
            self.listener(row)
