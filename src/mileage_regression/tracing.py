"""Structured run events for training and prediction commands."""

from __future__ import annotations

import csv
import json
import threading
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

EventSink = Callable[[dict[str, Any]], None]


class RunTraceCollector:
    """Thread-safe, sequence-numbered event log exported as JSON or CSV."""

    _CSV_COLUMNS = [
        "seq",
        "timestamp",
        "event_type",
        "component",
        "action",
        "status",
        "iteration",
        "cost",
        "duration_ms",
        "details",
    ]

    def __init__(self) -> None:
        self._events: list[dict[str, Any]] = []
        self._next_seq = 1
        self._lock = threading.Lock()
        self._live_sink: EventSink | None = None

    def set_live_sink(self, sink: EventSink | None) -> None:
        """Stream each new event to `sink`; `None` stops streaming."""
        with self._lock:
            self._live_sink = sink

    def log(
        self,
        *,
        event_type: str,
        component: str,
        action: str,
        status: str = "ok",
        iteration: int | None = None,
        cost: float | None = None,
        duration_ms: int | None = None,
        details: dict[str, Any] | str | None = None,
    ) -> None:
        """Record an event and hand a copy to the live sink, if any."""
        event, sink = self._append(
            event_type=event_type,
            component=component,
            action=action,
            status=status,
            iteration=iteration,
            cost=cost,
            duration_ms=duration_ms,
            details=details,
        )
        if sink is None:
            return
        try:
            sink(dict(event))
        except Exception as exc:  # noqa: BLE001 - sink errors are recorded, not raised
            # Recorded without the sink so a broken sink cannot recurse.
            self._append(
                event_type="run",
                component="tracing",
                action="live_sink_failed",
                status="error",
                details={"failed_seq": event["seq"], "error": repr(exc)},
            )

    def events(self) -> list[dict[str, Any]]:
        """Return a shallow copy of collected events."""
        with self._lock:
            return list(self._events)

    def iteration_logger(self, every: int, max_iterations: int) -> IterationSampler:
        """Build an optimizer callback that records sampled iterations."""
        return IterationSampler(self, every=every, max_iterations=max_iterations)

    def write_json(self, path: Path) -> None:
        """Write trace events as JSON array."""
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(self.events(), indent=2, default=str)
        path.write_text(payload + "\n", encoding="utf-8")

    def write_csv(self, path: Path) -> None:
        """Write trace events as CSV rows."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", newline="", encoding="utf-8") as file_obj:
            writer = csv.DictWriter(file_obj, fieldnames=self._CSV_COLUMNS)
            writer.writeheader()
            for event in self.events():
                writer.writerow({key: event.get(key, "") for key in self._CSV_COLUMNS})

    def _append(
        self,
        *,
        event_type: str,
        component: str,
        action: str,
        status: str,
        iteration: int | None = None,
        cost: float | None = None,
        duration_ms: int | None = None,
        details: dict[str, Any] | str | None = None,
    ) -> tuple[dict[str, Any], EventSink | None]:
        with self._lock:
            event = {
                "seq": self._next_seq,
                "timestamp": datetime.now(UTC).isoformat(),
                "event_type": event_type,
                "component": component,
                "action": action,
                "status": status,
                "iteration": "" if iteration is None else iteration,
                "cost": "" if cost is None else cost,
                "duration_ms": "" if duration_ms is None else duration_ms,
                "details": _serialize_details(details),
            }
            self._events.append(event)
            self._next_seq += 1
            return event, self._live_sink


class IterationSampler:
    """Optimizer callback keeping the first, every `every`-th and the capped iteration.

    `finish` records the iteration training actually stopped at, which differs from
    `max_iterations` when the convergence threshold ends the run early.
    """

    def __init__(self, trace: RunTraceCollector, every: int, max_iterations: int) -> None:
        self._trace = trace
        self._every = every
        self._max_iterations = max_iterations
        self._last_logged = 0

    def __call__(self, iteration: int, beta0: float, beta1: float, cost: float) -> None:
        if iteration == 1 or iteration % self._every == 0 or iteration == self._max_iterations:
            self._record(iteration, beta0, beta1, cost)

    def finish(self, iteration: int, beta0: float, beta1: float, cost: float) -> None:
        if iteration > 0 and iteration != self._last_logged:
            self._record(iteration, beta0, beta1, cost)

    def _record(self, iteration: int, beta0: float, beta1: float, cost: float) -> None:
        self._trace.log(
            event_type="train",
            component="optimizer",
            action="iteration",
            iteration=iteration,
            cost=cost,
            details={"beta0": beta0, "beta1": beta1},
        )
        self._last_logged = iteration


def _serialize_details(details: dict[str, Any] | str | None) -> str:
    if details is None:
        return ""
    if isinstance(details, str):
        return details
    return json.dumps(details, sort_keys=True, default=str)
