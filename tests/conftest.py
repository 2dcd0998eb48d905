"""Display-free stand-ins for the Tk objects the player talks to."""

from typing import Any, Callable, Dict, List, Tuple

import pytest

from gantt_player.timeline import Segment, Timeline


class FakeScheduler:
    """Manual clock with Tk's after() / after_cancel() interface."""

    def __init__(self) -> None:
        self.now = 0
        self._next_id = 0
        self._jobs: Dict[str, Tuple[int, Callable[[], None]]] = {}
        self.delays: List[int] = []

    def after(self, ms: int, func: Callable[[], None]) -> str:
        self._next_id += 1
        job_id = f"after#{self._next_id}"
        self._jobs[job_id] = (self.now + ms, func)
        self.delays.append(ms)
        return job_id

    def after_cancel(self, job_id: str) -> None:
        self._jobs.pop(job_id, None)

    @property
    def pending(self) -> int:
        return len(self._jobs)

    def advance(self, ms: int) -> None:
        """Move the clock forward, firing due callbacks in time order."""
        target = self.now + ms
        while True:
            due = [(when, job_id) for job_id, (when, _) in self._jobs.items() if when <= target]
            if not due:
                break
            when, job_id = min(due)
            _, func = self._jobs.pop(job_id)
            self.now = when
            func()
        self.now = target

    def run_all(self) -> None:
        while self._jobs:
            when = min(w for w, _ in self._jobs.values())
            self.advance(when - self.now)


class RecordingSink:
    def __init__(self) -> None:
        self.events: List[Tuple[str, str]] = []
        self.clears = 0

    def highlight(self, pid: str, state: str) -> None:
        self.events.append((pid, state))

    def clear_all(self) -> None:
        self.clears += 1


class FakeCanvas:
    """Records the tkinter.Canvas calls made by the renderer."""

    def __init__(self) -> None:
        self.options: Dict[str, Any] = {}
        self.items: List[Tuple[str, tuple, Dict[str, Any]]] = []
        self.deletes = 0

    def configure(self, **kwargs: Any) -> None:
        self.options.update(kwargs)

    def delete(self, tag: str) -> None:
        assert tag == "all"
        self.items.clear()
        self.deletes += 1

    def create_rectangle(self, *coords: float, **kwargs: Any) -> int:
        self.items.append(("rectangle", coords, kwargs))
        return len(self.items)

    def create_text(self, *coords: float, **kwargs: Any) -> int:
        self.items.append(("text", coords, kwargs))
        return len(self.items)

    def of_kind(self, kind: str) -> List[Tuple[str, tuple, Dict[str, Any]]]:
        return [item for item in self.items if item[0] == kind]


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def canvas() -> FakeCanvas:
    return FakeCanvas()


@pytest.fixture
def two_segments() -> Timeline:
    return Timeline([Segment("P1", 0, 5), Segment("P2", 5, 8)])
