import threading

from fakes import FakeClock, RecordingUI, RecordingView, make_console, make_stats
from miner_tui.stats import SharedStats, Stats
from miner_tui.tui.surface import DisplaySurface
from miner_tui.tui.types import ControllerMessage, ControllerState, UpdateStatus
from miner_tui.tui.ui import UI, Controller


def _controller(clock, interval=1.0, poll=0.1):
    return Controller(
        ui_factory=lambda shutdown_sink: RecordingUI(shutdown_sink, clock),
        stat_update_interval=interval,
        poll_interval=poll,
        clock=clock,
        sleep=clock.sleep,
    )


def _shutdown_at(controller, clock, ticks):
    def on_tick(now_ticks):
        if now_ticks == ticks:
            controller.rx.put(ControllerMessage.SHUTDOWN)

    clock.on_tick = on_tick


def test_one_update_per_interval():
    clock = FakeClock()
    controller = _controller(clock)
    _shutdown_at(controller, clock, 21)

    controller.run(SharedStats())

    ui = controller.ui
    assert ui.sent_at[:2] == [1.0, 2.0]
    assert len([t for t in ui.sent_at[:-1] if t <= 1.0]) == 1
    assert len([t for t in ui.sent_at[:-1] if t <= 2.0]) == 2
    assert len(ui.updates) == 2
    assert len(ui.quits) == 1
    assert ui.messages[-1] is ui.quits[0]


def test_shutdown_before_first_update():
    clock = FakeClock()
    controller = _controller(clock)
    _shutdown_at(controller, clock, 3)

    controller.run(SharedStats())

    assert controller.ui.updates == []
    assert len(controller.ui.quits) == 1
    assert controller.ui.stop_calls == 1
    assert controller.state is ControllerState.STOPPED


def test_shutdown_is_observed_within_one_poll_interval():
    clock = FakeClock()
    controller = _controller(clock)
    _shutdown_at(controller, clock, 15)

    controller.run(SharedStats())

    assert clock() - 1.5 <= 0.1


def test_run_after_stop_returns_immediately():
    clock = FakeClock()
    controller = _controller(clock)
    controller.request_shutdown()
    controller.run(SharedStats())
    ticks = clock.ticks

    controller.run(SharedStats())

    assert clock.ticks == ticks
    assert controller.ui.stop_calls == 1


def test_updates_carry_a_snapshot_not_the_shared_container():
    clock = FakeClock()
    controller = _controller(clock)
    _shutdown_at(controller, clock, 11)
    shared = SharedStats()
    with shared.write() as stats:
        stats.mining_stats.block_height = 3

    controller.run(shared)

    (update,) = controller.ui.updates
    assert isinstance(update, UpdateStatus)
    assert isinstance(update.stats, Stats)
    assert update.stats.mining_stats.block_height == 3


class BusyStats:
    """Pretends the producer holds the lock for the first few attempts."""

    def __init__(self, busy_attempts):
        self.busy_attempts = busy_attempts
        self.timeouts = []

    def snapshot(self, timeout=None):
        self.timeouts.append(timeout)
        if len(self.timeouts) <= self.busy_attempts:
            return None
        return make_stats(1)


def test_locked_statistics_are_retried_on_next_tick():
    clock = FakeClock()
    controller = _controller(clock)
    _shutdown_at(controller, clock, 23)
    stats = BusyStats(busy_attempts=2)

    controller.run(stats)

    assert stats.timeouts[0] == 0
    # Attempts at 1.0 and 1.1 fail, 1.2 succeeds; the next deadline is 2.2
    assert controller.ui.sent_at[:2] == [1.2, 2.2]


def test_controller_drives_real_ui_until_shutdown():
    view = RecordingView()
    surface = DisplaySurface(fps=50, console=make_console(), headless=True)
    controller = Controller(
        ui_factory=lambda shutdown_sink: UI.create(shutdown_sink, surface=surface, views={"recording": view}),
        stat_update_interval=0.05,
        poll_interval=0.01,
    )
    shared = SharedStats()
    runner = threading.Thread(target=controller.run, args=(shared,))
    runner.start()

    assert view.updated.wait(5)
    controller.request_shutdown()
    runner.join(5)

    assert not runner.is_alive()
    assert controller.state is ControllerState.STOPPED
    assert controller.ui.is_stopped
    assert not surface.is_running


def test_quit_key_stops_the_controller():
    surface = DisplaySurface(fps=50, console=make_console(), headless=True)
    controller = Controller(
        ui_factory=lambda shutdown_sink: UI.create(
            shutdown_sink, surface=surface, views={"recording": RecordingView()}, quit_key="q"
        ),
        stat_update_interval=10.0,
        poll_interval=0.01,
    )
    runner = threading.Thread(target=controller.run, args=(SharedStats(),))
    runner.start()

    surface.cb_sink().send(lambda s: s.on_key("q"))
    runner.join(5)

    assert not runner.is_alive()
    assert controller.state is ControllerState.STOPPED
