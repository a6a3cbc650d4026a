import queue
import threading

from rich.styled import Styled

from fakes import RecordingView, make_console, make_stats
from miner_tui.tui.surface import DisplaySurface
from miner_tui.tui.types import ControllerMessage, UpdateStatus
from miner_tui.tui.ui import UI


def _headless_surface():
    return DisplaySurface(fps=50, console=make_console(), headless=True)


def _create_ui(view, surface=None):
    shutdown_sink = queue.SimpleQueue()
    ui = UI.create(shutdown_sink, surface=surface or _headless_surface(), views={"recording": view})
    return ui, shutdown_sink


def test_updates_run_on_the_display_thread():
    view = RecordingView()
    ui, _ = _create_ui(view)
    try:
        stats = make_stats(5)
        ui.send(UpdateStatus(stats))
        assert view.updated.wait(2)
        assert view.updates == [stats]
        assert view.threads == ["miner-tui-surface"]
    finally:
        ui.stop()


def test_stop_is_idempotent():
    ui, _ = _create_ui(RecordingView())

    ui.stop()
    assert ui.is_stopped
    assert not ui.surface.is_running

    ui.stop()
    assert ui.is_stopped


def test_quit_key_requests_shutdown():
    ui, shutdown_sink = _create_ui(RecordingView())
    try:
        ui.surface.cb_sink().send(lambda surface: surface.on_key("q"))
        assert shutdown_sink.get(timeout=2) is ControllerMessage.SHUTDOWN
    finally:
        ui.stop()


def test_custom_quit_key():
    shutdown_sink = queue.SimpleQueue()
    ui = UI.create(shutdown_sink, surface=_headless_surface(), views={"recording": RecordingView()}, quit_key="x")
    try:
        ui.surface.cb_sink().send(lambda surface: surface.on_key("q"))
        ui.surface.cb_sink().send(lambda surface: surface.on_key("x"))
        assert shutdown_sink.get(timeout=2) is ControllerMessage.SHUTDOWN
        assert shutdown_sink.empty()
    finally:
        ui.stop()


class CrashingSurface(DisplaySurface):
    def run(self):
        raise RuntimeError("terminal went away")


def test_stop_after_display_thread_crashed():
    ui, shutdown_sink = _create_ui(RecordingView(), surface=CrashingSurface(console=make_console(), headless=True))

    # The crash is reported to the controller
    assert shutdown_sink.get(timeout=2) is ControllerMessage.SHUTDOWN

    stopper = threading.Thread(target=ui.stop)
    stopper.start()
    stopper.join(5)
    assert not stopper.is_alive()
    assert ui.is_stopped


def test_stop_requested_from_display_thread_does_not_deadlock():
    ui, _ = _create_ui(RecordingView())
    done = threading.Event()

    def stop_from_surface(surface):
        ui.stop()
        done.set()

    ui.surface.cb_sink().send(stop_from_surface)
    assert done.wait(2)
    assert ui.is_stopped


def test_root_layer_is_drawn_on_theme_background():
    ui, _ = _create_ui(RecordingView())
    frames = queue.SimpleQueue()
    try:
        ui.surface.cb_sink().send(lambda surface: frames.put(surface.render()))
        frame = frames.get(timeout=2)
        assert isinstance(frame, Styled)
        assert frame.style == "background"
    finally:
        ui.stop()
