"""Version and runtime information view."""

from __future__ import annotations

import platform
from datetime import datetime
from importlib import metadata

import psutil
from rich.console import RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .. import __version__
from ..stats import Stats
from .surface import DisplaySurface, TextView


def package_version(name: str) -> str:
    try:
        return metadata.version(name)
    except metadata.PackageNotFoundError:
        return "unknown"


def process_memory_mb() -> float:
    """Resident memory of this process in MiB."""
    return psutil.Process().memory_info().rss / (1024**2)


class VersionView:
    """Build information plus a few runtime figures refreshed on every update."""

    def __init__(self) -> None:
        self._runtime = TextView(self._render_runtime(last_update=None))

    def create(self) -> RenderableType:
        grid = Table.grid(padding=(0, 2))
        grid.add_column(no_wrap=True)
        grid.add_column()
        grid.add_row(Text("Version:", style="label"), Text(__version__, style="value"))
        grid.add_row(Text("Python:", style="label"), Text(platform.python_version(), style="value"))
        grid.add_row(Text("Platform:", style="label"), Text(platform.platform(terse=True), style="value"))
        grid.add_row(Text("rich:", style="label"), Text(package_version("rich"), style="value"))
        grid.add_row(Text("blessed:", style="label"), Text(package_version("blessed"), style="value"))

        table = Table.grid()
        table.add_row(grid)
        table.add_row(Text(""))
        table.add_row(self._runtime)
        return Panel(table, title="Version Info", border_style="cyan", padding=(0, 1))

    def update(self, surface: DisplaySurface, stats: Stats) -> None:
        self._runtime.set_content(self._render_runtime(last_update=datetime.now()))
        surface.refresh()

    @staticmethod
    def _render_runtime(last_update: datetime | None) -> RenderableType:
        grid = Table.grid(padding=(0, 2))
        grid.add_column(no_wrap=True)
        grid.add_column()
        grid.add_row(Text("Memory:", style="label"), Text(f"{process_memory_mb():.1f} MiB", style="value"))
        stamp = last_update.strftime("%H:%M:%S") if last_update is not None else "—"
        grid.add_row(Text("Last Update:", style="label"), Text(stamp, style="value"))
        return grid
