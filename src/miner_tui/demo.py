"""Synthetic statistics producer so the dashboard can run without a miner attached."""

from __future__ import annotations

import random
import threading
import time

from loguru import logger

from .stats import SharedStats, SolverStats

_DEMO_SERVER = "stratum+tcp://pool.example.org:3416"


class DemoProducer(threading.Thread):
    """Writes plausible mining statistics into ``SharedStats`` until stopped."""

    def __init__(
        self,
        stats: SharedStats,
        *,
        num_devices: int = 2,
        interval: float = 0.5,
        seed: int | None = None,
    ) -> None:
        super().__init__(name="miner-tui-demo", daemon=True)
        self._stats = stats
        self._num_devices = num_devices
        self._interval = interval
        self._random = random.Random(seed)
        self._stop_event = threading.Event()

    def stop(self) -> None:
        self._stop_event.set()

    def run(self) -> None:
        logger.info(f"Demo producer started with {self._num_devices} devices")
        with self._stats.write() as stats:
            stats.client_stats.server_url = _DEMO_SERVER
            stats.mining_stats.edge_bits = 31
            stats.mining_stats.solvers = [
                SolverStats(device_id=i, device_name=f"Demo GPU {i}", solver_name="cuckatoo31", edge_bits=31)
                for i in range(self._num_devices)
            ]
        while not self._stop_event.wait(self._interval):
            self.tick()
        logger.info("Demo producer stopped")

    def tick(self) -> None:
        """Advance the simulation by one step."""
        now = time.time()
        rng = self._random
        with self._stats.write() as stats:
            client = stats.client_stats
            mining = stats.mining_stats
            if not client.connected:
                client.connected = True
                client.connection_status = "Connection Status: Connected"
                mining.block_height = 1_000_000
                mining.target_difficulty = 1
            client.last_message_sent = f"Last Message Sent: Getting job template at {time.strftime('%H:%M:%S')}"

            if rng.random() < 0.1:
                mining.block_height += 1
                client.last_message_received = (
                    f"Last Message Received: New job at height {mining.block_height}"
                )

            for solver in mining.solvers:
                solver.iterations += 1
                solver.last_start_time = now - rng.uniform(0.2, 0.4)
                solver.last_end_time = now
                if rng.random() < 0.05:
                    solver.num_solutions += 1
                    solver.last_solution_time = now
                    mining.solution_stats.num_solutions_found += 1
                    if rng.random() < 0.1:
                        mining.solution_stats.num_rejected += 1
