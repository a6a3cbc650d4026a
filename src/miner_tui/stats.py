"""
Statistics model shown by the dashboard.

The statistics are produced by the mining process and only read here. The
producer mutates a single ``Stats`` instance through ``SharedStats.write()``;
the dashboard takes short, non-blocking reads through
``SharedStats.snapshot()`` and works on the returned copy so the lock is
never held while the display is being updated.
"""

from __future__ import annotations

import contextlib
import copy
import threading
from dataclasses import dataclass, field
from typing import Iterator


@dataclass(slots=True)
class ClientStats:
    """State of the connection to the mining pool/stratum server."""

    server_url: str = ""
    connected: bool = False
    connection_status: str = "Connection Status: Starting"
    last_message_sent: str = "Last Message Sent: None"
    last_message_received: str = "Last Message Received: None"


@dataclass(slots=True)
class SolverStats:
    """Per-device solver statistics."""

    device_id: int = 0
    device_name: str = "Unknown"
    solver_name: str = ""
    edge_bits: int = 0
    iterations: int = 0
    last_start_time: float = 0.0  # unix timestamps
    last_end_time: float = 0.0
    last_solution_time: float = 0.0
    num_solutions: int = 0
    errored: bool = False

    @property
    def last_solve_duration(self) -> float:
        return max(self.last_end_time - self.last_start_time, 0.0)

    @property
    def graphs_per_second(self) -> float:
        duration = self.last_solve_duration
        if duration <= 0:
            return 0.0
        return 1.0 / duration


@dataclass(slots=True)
class SolutionStats:
    """Share submission counters."""

    num_solutions_found: int = 0
    num_rejected: int = 0
    num_staled: int = 0
    num_blocks_found: int = 0


@dataclass(slots=True)
class MiningStats:
    """Current job and solver state."""

    block_height: int = 0
    target_difficulty: int = 0
    edge_bits: int = 0
    solvers: list[SolverStats] = field(default_factory=list)
    solution_stats: SolutionStats = field(default_factory=SolutionStats)

    @property
    def combined_gps(self) -> float:
        return sum(solver.graphs_per_second for solver in self.solvers if not solver.errored)

    @property
    def is_mining(self) -> bool:
        return self.block_height > 0


@dataclass(slots=True)
class Stats:
    """Everything the dashboard can display."""

    client_stats: ClientStats = field(default_factory=ClientStats)
    mining_stats: MiningStats = field(default_factory=MiningStats)


class SharedStats:
    """
    Lock-guarded ``Stats`` shared between the producer and the dashboard.

    There is a single exclusive lock rather than a reader/writer lock: the
    dashboard is the only reader and reads once per update interval. Readers
    get a deep copy from ``snapshot()`` instead of a handle on the live
    object, so the lock is released before any view code runs. The copy is
    small (a handful of counters plus one entry per device).
    """

    def __init__(self, stats: Stats | None = None) -> None:
        self._lock = threading.Lock()
        self._stats = stats if stats is not None else Stats()

    @contextlib.contextmanager
    def write(self) -> Iterator[Stats]:
        """Hold the lock and yield the live ``Stats`` for mutation."""
        with self._lock:
            yield self._stats

    def snapshot(self, timeout: float | None = None) -> Stats | None:
        """
        Return a private copy of the current statistics.

        Args:
            timeout: Seconds to wait for the lock. ``None`` waits indefinitely,
                ``0`` does not wait at all.

        Returns:
            The copy, or ``None`` when the lock could not be acquired in time.
        """
        if timeout is None:
            acquired = self._lock.acquire()
        elif timeout <= 0:
            acquired = self._lock.acquire(blocking=False)
        else:
            acquired = self._lock.acquire(timeout=timeout)
        if not acquired:
            return None
        try:
            return copy.deepcopy(self._stats)
        finally:
            self._lock.release()
