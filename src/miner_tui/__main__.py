import argparse
import logging
import sys

from loguru import logger

from miner_tui import settings
from miner_tui.demo import DemoProducer
from miner_tui.stats import SharedStats
from miner_tui.tui import UI, Controller, DisplaySurface


def configure_logging(log_file: str | None, level: str, *, dashboard: bool) -> None:
    """
    Route loguru output away from the terminal while the dashboard owns it.

    With the dashboard active, loguru's stderr sink is removed and records
    only go to ``log_file`` (if given). Standard library logging is disabled
    for the same reason.
    """
    logger.remove()
    if dashboard:
        logging.disable(logging.CRITICAL)
        logging.captureWarnings(False)
    else:
        logger.add(sys.stderr, level=level)
    if log_file:
        logger.add(log_file, level=level, rotation="10 MB", enqueue=True)


def main() -> None:
    """Main entry point for the miner dashboard."""
    parser = argparse.ArgumentParser(description="Live terminal dashboard for miner statistics.")
    parser.add_argument(
        "--fps",
        type=int,
        default=settings.DASHBOARD_FPS,
        help="Dashboard frames per second.",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=settings.STAT_UPDATE_INTERVAL,
        help="Seconds between statistics updates.",
    )
    parser.add_argument(
        "--log-file",
        dest="log_file",
        default=settings.LOG_FILE,
        help="Write logs to this file; the terminal is reserved for the dashboard.",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Feed the dashboard with synthetic mining statistics.",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without drawing to the terminal (logs go to stderr). Stop with Ctrl+C.",
    )
    args = parser.parse_args()

    configure_logging(args.log_file, settings.LOG_LEVEL, dashboard=not args.headless)

    stats = SharedStats()
    producer = DemoProducer(stats) if args.demo else None

    def ui_factory(shutdown_sink):
        return UI.create(shutdown_sink, surface=DisplaySurface(fps=args.fps, headless=args.headless))

    controller = Controller(ui_factory=ui_factory, stat_update_interval=args.interval)
    if producer is not None:
        producer.start()
    try:
        controller.run(stats)
    except KeyboardInterrupt:
        controller.ui.stop()
    finally:
        if producer is not None:
            producer.stop()


if __name__ == "__main__":
    main()
