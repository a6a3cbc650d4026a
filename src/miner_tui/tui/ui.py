"""
Dashboard coordination.

Three threads cooperate here:

* the display surface loop, which owns every widget,
* the ``UpdateRelay``, which turns ``UIMessage``s into callbacks on the
  surface's deferred-callback sink,
* the ``Controller`` loop, which polls for shutdown requests and pushes a
  statistics snapshot to the UI once per interval.

All communication goes through ordered queues, so a ``Quit`` sent after an
``UpdateStatus`` is always forwarded after that update.
"""

from __future__ import annotations

import queue
import threading
import time
from typing import Callable, Iterable, Protocol

from loguru import logger
from rich.console import RenderableType
from rich.layout import Layout
from rich.panel import Panel
from rich.styled import Styled
from rich.text import Text

from .. import settings
from ..exceptions import SurfaceClosedError
from ..stats import SharedStats, Stats
from . import menu
from .constants import KEY_MENU_DOWN, KEY_MENU_UP, MAIN_MENU, ROOT_STACK, TITLE, TITLE_TEXT, VIEW_MINING, VIEW_VERSION
from .mining import MiningView
from .surface import CallbackSink, DisplaySurface, SurfaceCallback
from .types import ControllerMessage, ControllerState, Quit, UIMessage, UpdateStatus
from .version import VersionView


class View(Protocol):
    def create(self) -> RenderableType: ...

    def update(self, surface: DisplaySurface, stats: Stats) -> None: ...


def default_views() -> dict[str, View]:
    # Insertion order is stacking order; the last view starts on top
    return {
        VIEW_VERSION: VersionView(),
        VIEW_MINING: MiningView(),
    }


def build_layout(views: dict[str, View]) -> tuple[Layout, menu.Menu]:
    """Assemble the title bar, the main menu and the view stack."""
    stack = menu.ViewStack()
    for name, view in views.items():
        stack.add_layer(name, view.create())

    main_menu = menu.create(stack, views)

    layout = Layout(name="root")
    layout.split_column(
        Layout(Panel(Text(TITLE_TEXT, style="title"), border_style="border"), name=TITLE, size=3),
        Layout(name="body"),
    )
    layout["body"].split_row(
        Layout(Panel(main_menu, title="Menu", border_style="border"), name=MAIN_MENU, size=20),
        Layout(stack, name=ROOT_STACK),
    )
    return layout, main_menu


class UpdateRelay(threading.Thread):
    """Forwards UI messages onto the display surface thread until ``Quit``."""

    def __init__(self, ui_rx: queue.SimpleQueue[UIMessage], sink: CallbackSink, views: Iterable[View]) -> None:
        super().__init__(name="miner-tui-relay", daemon=True)
        self._ui_rx = ui_rx
        self._sink = sink
        self._views = list(views)

    def run(self) -> None:
        while True:
            message = self._ui_rx.get()
            if isinstance(message, UpdateStatus):
                self._forward(self._update_callback(message.stats))
            elif isinstance(message, Quit):
                self._forward(lambda surface: surface.quit())
                break
            else:
                logger.warning(f"Update relay ignoring unknown message: {message!r}")
        logger.debug("Update relay stopped")

    def _update_callback(self, stats: Stats) -> SurfaceCallback:
        views = self._views

        def update(surface: DisplaySurface) -> None:
            for view in views:
                view.update(surface, stats)

        return update

    def _forward(self, callback: SurfaceCallback) -> None:
        try:
            self._sink.send(callback)
        except SurfaceClosedError:
            logger.debug("Display surface already closed, dropping callback")


def _run_surface(
    surface: DisplaySurface,
    views: dict[str, View],
    ui_rx: queue.SimpleQueue[UIMessage],
    shutdown_sink: queue.SimpleQueue[ControllerMessage],
    quit_key: str,
) -> None:
    """Body of the display thread: build widgets, start the relay, run the loop."""
    try:
        layout, main_menu = build_layout(views)
        surface.add_layer(Styled(layout, "background"))
        surface.add_global_callback(quit_key, lambda _surface: shutdown_sink.put(ControllerMessage.SHUTDOWN))
        surface.add_global_callback(KEY_MENU_UP, lambda _surface: main_menu.select_previous())
        surface.add_global_callback(KEY_MENU_DOWN, lambda _surface: main_menu.select_next())

        UpdateRelay(ui_rx, surface.cb_sink(), views.values()).start()
        surface.run()
    except Exception as e:
        logger.exception(f"Display surface stopped unexpectedly: {type(e).__name__}: {e}")
        shutdown_sink.put(ControllerMessage.SHUTDOWN)


class UI:
    """Handle on the display thread: a send-only message channel plus a join handle."""

    def __init__(
        self,
        ui_tx: queue.SimpleQueue[UIMessage],
        handle: threading.Thread | None,
        surface: DisplaySurface,
    ) -> None:
        self.ui_tx = ui_tx
        self.surface = surface
        self._handle = handle

    @classmethod
    def create(
        cls,
        shutdown_sink: queue.SimpleQueue[ControllerMessage],
        *,
        surface: DisplaySurface | None = None,
        views: dict[str, View] | None = None,
        quit_key: str | None = None,
    ) -> "UI":
        """
        Start the display thread and its update relay.

        Args:
            shutdown_sink: Receives ``ControllerMessage.SHUTDOWN`` when the
                operator presses the quit key.
            surface: Surface to drive; defaults to a terminal surface.
            views: Views keyed by name, in stacking order.
            quit_key: Key bound to shutdown; defaults to ``settings.QUIT_KEY``.
        """
        ui_tx: queue.SimpleQueue[UIMessage] = queue.SimpleQueue()
        if surface is None:
            surface = DisplaySurface(fps=settings.DASHBOARD_FPS)
        if views is None:
            views = default_views()
        handle = threading.Thread(
            target=_run_surface,
            args=(surface, views, ui_tx, shutdown_sink, quit_key or settings.QUIT_KEY),
            name="miner-tui-surface",
            daemon=True,
        )
        handle.start()
        logger.info("Dashboard UI started")
        return cls(ui_tx, handle, surface)

    @property
    def is_stopped(self) -> bool:
        return self._handle is None

    def send(self, message: UIMessage) -> None:
        # Unbounded queue: a put never blocks. Messages sent after the relay
        # exited are simply never read.
        self.ui_tx.put(message)

    def stop(self) -> None:
        """Ask the display to quit and wait for its thread. Safe to call repeatedly."""
        self.send(Quit())
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.join()
        except RuntimeError as e:
            logger.debug(f"Could not join display thread: {e}")
        logger.info("Dashboard UI stopped")


class Controller:
    """Polls for shutdown and pushes statistics to the UI at a fixed interval."""

    def __init__(
        self,
        *,
        ui_factory: Callable[[queue.SimpleQueue[ControllerMessage]], UI] = UI.create,
        stat_update_interval: float | None = None,
        poll_interval: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.rx: queue.SimpleQueue[ControllerMessage] = queue.SimpleQueue()
        self.ui = ui_factory(self.rx)
        self.state = ControllerState.RUNNING
        self._stat_update_interval = (
            stat_update_interval if stat_update_interval is not None else settings.STAT_UPDATE_INTERVAL
        )
        self._poll_interval = poll_interval if poll_interval is not None else settings.CONTROLLER_POLL_INTERVAL
        self._clock = clock
        self._sleep = sleep

    def request_shutdown(self) -> None:
        """Thread-safe; the run loop notices within one poll interval."""
        self.rx.put(ControllerMessage.SHUTDOWN)

    def run(self, stats: SharedStats) -> None:
        """Run until a shutdown request arrives, then stop the UI."""
        if self.state is ControllerState.STOPPED:
            return

        next_stat_update = self._clock() + self._stat_update_interval
        while True:
            if self._shutdown_requested():
                self.ui.stop()
                self.state = ControllerState.STOPPED
                logger.info("Controller stopped")
                return

            if self._clock() >= next_stat_update:
                snapshot = stats.snapshot(timeout=0)
                if snapshot is None:
                    logger.debug("Statistics are locked by the producer, retrying on next tick")
                else:
                    self.ui.send(UpdateStatus(snapshot))
                    next_stat_update = self._clock() + self._stat_update_interval

            self._sleep(self._poll_interval)

    def _shutdown_requested(self) -> bool:
        try:
            message = self.rx.get_nowait()
        except queue.Empty:
            return False
        return message is ControllerMessage.SHUTDOWN
