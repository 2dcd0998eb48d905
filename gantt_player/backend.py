"""
Client for the external scheduling simulation service.

The service owns the scheduling algorithm. We send it the process list and
the round-robin quantum and get back a timeline, per-process metrics and
averages.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

import requests

from .config import DEFAULT_BACKEND_URL, DEFAULT_TIMEOUT
from .errors import BackendError
from .timeline import Timeline, parse_timeline

logger = logging.getLogger(__name__)

SIMULATE_PATH = "/api/simulate"


# ---------------------------------------------------------------------------
# Response model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProcessMetric:
    pid: str
    arrival_time: Any = None
    burst_time: Any = None
    completion_time: Any = None
    waiting_time: Any = None
    turnaround_time: Any = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ProcessMetric":
        return cls(
            pid=str(raw.get("pid", "")),
            arrival_time=raw.get("arrival_time"),
            burst_time=raw.get("burst_time"),
            completion_time=raw.get("completion_time"),
            waiting_time=raw.get("waiting_time"),
            turnaround_time=raw.get("turnaround_time"),
        )

    def summary(self) -> str:
        return (
            f"{self.pid}: arrival={self.arrival_time}, burst={self.burst_time}, "
            f"comp={self.completion_time}, wait={self.waiting_time}, tat={self.turnaround_time}"
        )


@dataclass(frozen=True)
class Averages:
    avg_turnaround_time: float
    avg_waiting_time: float


@dataclass(frozen=True)
class SimulationResult:
    """Parsed response of one simulation run."""

    timeline: Timeline
    metrics: List[ProcessMetric]
    averages: Averages

    def summary(self) -> str:
        return "\n".join(m.summary() for m in self.metrics)


def _parse_averages(raw: Any) -> Averages:
    if not isinstance(raw, Mapping):
        raise BackendError("Response has no averages.", details=f"averages={raw!r}")
    try:
        return Averages(
            avg_turnaround_time=float(raw["avg_turnaround_time"]),
            avg_waiting_time=float(raw["avg_waiting_time"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise BackendError("Response averages are malformed.", details=str(exc)) from exc


def parse_response(data: Any) -> SimulationResult:
    """
    Turn the decoded JSON body into a :class:`SimulationResult`.

    Raises:
        InvalidTimeline: if the timeline field is missing or malformed.
        BackendError:    if the body or its metrics/averages are malformed.
    """
    if not isinstance(data, Mapping):
        raise BackendError("Response is not a JSON object.", details=f"body={data!r}")

    timeline = parse_timeline(data.get("timeline"))

    raw_metrics = data.get("metrics") or []
    if not isinstance(raw_metrics, list) or not all(isinstance(m, Mapping) for m in raw_metrics):
        raise BackendError("Response metrics are malformed.", details=f"metrics={raw_metrics!r}")

    return SimulationResult(
        timeline=timeline,
        metrics=[ProcessMetric.from_dict(m) for m in raw_metrics],
        averages=_parse_averages(data.get("averages")),
    )


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------


class SimulationClient:
    """Thin ``requests`` wrapper around ``POST /api/simulate``. No retries."""

    def __init__(
        self,
        base_url: str = DEFAULT_BACKEND_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    @property
    def endpoint(self) -> str:
        return self.base_url + SIMULATE_PATH

    def simulate(self, processes: Sequence[Dict[str, Any]], quantum: int) -> SimulationResult:
        """
        Run one simulation.

        Args:
            processes: ``{"pid", "arrival_time", "burst_time"}`` entries.
            quantum:   Round-robin time slice (positive).

        Raises:
            BackendError:    network failure, non-2xx status or bad JSON.
            InvalidTimeline: the response's timeline is malformed.
        """
        body = {"processes": list(processes), "quantum": quantum}
        logger.info("POST %s (%d processes, quantum=%d)", self.endpoint, len(body["processes"]), quantum)

        try:
            resp = self.session.post(self.endpoint, json=body, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Simulation request failed: %s", exc)
            raise BackendError(str(exc) or exc.__class__.__name__, details=repr(exc)) from exc

        if not resp.ok:
            logger.warning("Simulation service answered HTTP %s", resp.status_code)
            raise BackendError(f"HTTP {resp.status_code}", status=resp.status_code, details=resp.text[:500])

        try:
            data = resp.json()
        except ValueError as exc:
            logger.warning("Simulation service returned invalid JSON: %s", exc)
            raise BackendError("Invalid JSON in response", status=resp.status_code, details=str(exc)) from exc

        result = parse_response(data)
        logger.info("Received %d segments, %d metrics", len(result.timeline), len(result.metrics))
        return result

    def close(self) -> None:
        self.session.close()
