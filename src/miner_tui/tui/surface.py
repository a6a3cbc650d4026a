"""
Terminal display surface.

The surface owns a single-threaded loop that reads keys, runs deferred
callbacks and redraws the screen. Widgets may only be touched from that loop;
other threads hand work to it through the ``CallbackSink`` returned by
``DisplaySurface.cb_sink()``.
"""

from __future__ import annotations

import queue
from typing import Callable

from blessed import Terminal
from loguru import logger
from rich.console import Console, RenderableType
from rich.live import Live
from rich.text import Text

from ..exceptions import SurfaceClosedError
from .theme import DASHBOARD_THEME

SurfaceCallback = Callable[["DisplaySurface"], None]


class CallbackSink:
    """Thread-safe queue of callbacks executed on the surface loop."""

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[SurfaceCallback] = queue.SimpleQueue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, callback: SurfaceCallback) -> None:
        """Schedule ``callback`` to run on the surface loop."""
        if self._closed:
            raise SurfaceClosedError("Display surface is no longer running")
        self._queue.put(callback)

    def close(self) -> None:
        self._closed = True

    def drain(self, surface: "DisplaySurface", timeout: float = 0.0) -> int:
        """
        Run every pending callback against ``surface``.

        Waits up to ``timeout`` seconds for the first callback, then runs
        whatever else is queued without waiting. Returns the number of
        callbacks executed.
        """
        try:
            if timeout > 0:
                callback = self._queue.get(timeout=timeout)
            else:
                callback = self._queue.get_nowait()
        except queue.Empty:
            return 0

        processed = 0
        while True:
            try:
                callback(surface)
            except Exception as e:
                logger.exception(f"Display callback failed: {e}")
            processed += 1
            try:
                callback = self._queue.get_nowait()
            except queue.Empty:
                return processed


class TextView:
    """Mutable renderable whose content is swapped from the surface thread."""

    def __init__(self, content: RenderableType = "") -> None:
        self._content = content

    @property
    def content(self) -> RenderableType:
        return self._content

    def set_content(self, content: RenderableType) -> None:
        self._content = content

    def __rich__(self) -> RenderableType:
        return self._content


class DisplaySurface:
    """Rich/blessed backed terminal surface with a deferred-callback sink."""

    def __init__(
        self,
        *,
        fps: int = 4,
        console: Console | None = None,
        term: Terminal | None = None,
        headless: bool = False,
    ) -> None:
        self.console = console if console is not None else Console(theme=DASHBOARD_THEME)
        self.term = term
        self.headless = headless
        self.set_fps(fps)
        self._sink = CallbackSink()
        self._global_callbacks: dict[str, SurfaceCallback] = {}
        self._layers: list[RenderableType] = []
        self._running = False
        self._quit_requested = False
        self._dirty = True

    # --- Configuration -----------------------------------------------------

    def set_fps(self, fps: int) -> None:
        if fps <= 0:
            raise ValueError("fps must be positive")
        self._fps = fps

    @property
    def frame_interval(self) -> float:
        return 1.0 / self._fps

    def add_layer(self, renderable: RenderableType) -> None:
        """Push a layer; only the top layer is drawn."""
        self._layers.append(renderable)
        self._dirty = True

    def add_global_callback(self, key: str, callback: SurfaceCallback) -> None:
        """
        Bind ``callback`` to a key, whatever layer is shown.

        ``key`` is either a printable character (``"q"``) or a blessed key
        name (``"KEY_UP"``).
        """
        self._global_callbacks[key] = callback

    def cb_sink(self) -> CallbackSink:
        return self._sink

    # --- Loop control ------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._running and not self._quit_requested

    def quit(self) -> None:
        """Stop the loop after the current frame. Only call from the surface thread."""
        self._quit_requested = True

    def refresh(self) -> None:
        """Mark the screen as needing a redraw on the next frame."""
        self._dirty = True

    def on_key(self, key: str) -> bool:
        """Dispatch a key press to its global callback. Returns whether one was bound."""
        callback = self._global_callbacks.get(key)
        if callback is None:
            return False
        callback(self)
        self._dirty = True
        return True

    def render(self) -> RenderableType:
        if not self._layers:
            return Text("")
        return self._layers[-1]

    def run(self) -> None:
        """Run the loop on the calling thread until ``quit()`` is called."""
        if self._running:
            raise RuntimeError("Display surface is already running")
        self._running = True
        try:
            if self.headless:
                self._run_headless()
            else:
                self._run_terminal()
        finally:
            self._running = False
            self._sink.close()

    def _run_headless(self) -> None:
        while not self._quit_requested:
            self._sink.drain(self, timeout=self.frame_interval)

    def _run_terminal(self) -> None:
        term = self.term if self.term is not None else Terminal()
        last_size = (term.width, term.height)
        with term.cbreak(), term.hidden_cursor():
            with Live(self.render(), console=self.console, screen=True, auto_refresh=False) as live:
                while not self._quit_requested:
                    key = term.inkey(timeout=self.frame_interval)
                    if key:
                        self.on_key(key.name or str(key))
                    self._sink.drain(self)

                    size = (term.width, term.height)
                    if self._dirty or size != last_size:
                        live.update(self.render(), refresh=True)
                        self._dirty = False
                        last_size = size
