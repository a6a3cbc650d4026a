"""Mining status view."""

from __future__ import annotations

import time

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..stats import SolverStats, Stats
from .constants import (
    TABLE_MINING_COLUMN_DEVICE,
    TABLE_MINING_COLUMN_GPS,
    TABLE_MINING_COLUMN_LAST_SOLVE,
    TABLE_MINING_COLUMN_SOLUTIONS,
    TABLE_MINING_COLUMN_SOLVER,
    TABLE_MINING_COLUMN_STATUS,
)
from .surface import DisplaySurface, TextView


def format_duration(seconds: float) -> str:
    """Render a solve time in the most readable unit."""
    if seconds <= 0:
        return "—"
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    return f"{seconds:.2f} s"


def format_age(timestamp: float, now: float | None = None) -> str:
    if timestamp <= 0:
        return "never"
    if now is None:
        now = time.time()
    elapsed = max(now - timestamp, 0.0)
    if elapsed < 60:
        return f"{elapsed:.0f}s ago"
    if elapsed < 3600:
        return f"{elapsed // 60:.0f}m ago"
    return f"{elapsed // 3600:.0f}h ago"


class MiningView:
    """Connection, job and per-device solver status."""

    def __init__(self) -> None:
        self._connection = TextView(Text("Waiting for miner data...", style="dim"))
        self._status = TextView(Text(""))
        self._devices = TextView(Text(""))

    def create(self) -> RenderableType:
        return Panel(
            Group(self._connection, Text(""), self._status, Text(""), self._devices),
            title="Mining",
            border_style="cyan",
            padding=(0, 1),
        )

    def update(self, surface: DisplaySurface, stats: Stats) -> None:
        self._connection.set_content(self._render_connection(stats))
        self._status.set_content(self._render_status(stats))
        self._devices.set_content(self._render_devices(stats.mining_stats.solvers))
        surface.refresh()

    # --- Rendering ---------------------------------------------------------

    @staticmethod
    def _render_connection(stats: Stats) -> RenderableType:
        client = stats.client_stats
        grid = Table.grid(padding=(0, 2))
        grid.add_column(no_wrap=True)
        grid.add_column()
        server = client.server_url or "—"
        state = Text("Connected", style="ok") if client.connected else Text("Disconnected", style="error")
        grid.add_row(Text("Server:", style="label"), Text(server, style="value"))
        grid.add_row(Text("Connection:", style="label"), state)
        grid.add_row(Text("", style="label"), Text(client.connection_status, style="value"))
        grid.add_row(Text("", style="label"), Text(client.last_message_sent, style="value"))
        grid.add_row(Text("", style="label"), Text(client.last_message_received, style="value"))
        return grid

    @staticmethod
    def _render_status(stats: Stats) -> RenderableType:
        mining = stats.mining_stats
        solutions = mining.solution_stats
        grid = Table.grid(padding=(0, 2))
        grid.add_column(no_wrap=True)
        grid.add_column()

        if mining.is_mining:
            status = (
                f"Mining at height {mining.block_height:,} "
                f"at target difficulty {mining.target_difficulty:,}"
            )
        elif stats.client_stats.connected:
            status = "Waiting for job"
        else:
            status = "Waiting for server"

        grid.add_row(Text("Mining Status:", style="label"), Text(status, style="value"))
        grid.add_row(
            Text("Solutions:", style="label"),
            Text(
                f"{solutions.num_solutions_found:,} found, "
                f"{solutions.num_rejected:,} rejected, "
                f"{solutions.num_staled:,} stale, "
                f"{solutions.num_blocks_found:,} blocks",
                style="value",
            ),
        )
        edge_bits = f"C{mining.edge_bits}" if mining.edge_bits else "—"
        grid.add_row(
            Text("Graph Rate:", style="label"),
            Text(f"{mining.combined_gps:.4f} gps ({edge_bits})", style="value"),
        )
        return grid

    @staticmethod
    def _render_devices(solvers: list[SolverStats]) -> RenderableType:
        if not solvers:
            return Text("No mining devices reported", style="dim")

        table = Table(show_header=True, header_style="bold magenta", box=None, padding=(0, 1))
        table.add_column(TABLE_MINING_COLUMN_DEVICE, style="label", no_wrap=True)
        table.add_column(TABLE_MINING_COLUMN_SOLVER, no_wrap=True)
        table.add_column(TABLE_MINING_COLUMN_GPS, justify="right", style="value")
        table.add_column(TABLE_MINING_COLUMN_SOLUTIONS, justify="right", style="value")
        table.add_column(TABLE_MINING_COLUMN_LAST_SOLVE, justify="right")
        table.add_column(TABLE_MINING_COLUMN_STATUS, no_wrap=True)

        now = time.time()
        for solver in solvers:
            if solver.errored:
                status = Text("Errored", style="error")
            else:
                status = Text(f"OK ({solver.iterations:,} iterations)", style="ok")
            table.add_row(
                f"{solver.device_id}: {solver.device_name}",
                solver.solver_name or "—",
                f"{solver.graphs_per_second:.4f}",
                f"{solver.num_solutions:,} ({format_age(solver.last_solution_time, now)})",
                format_duration(solver.last_solve_duration),
                status,
            )
        return table
