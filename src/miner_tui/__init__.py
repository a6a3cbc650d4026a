"""Terminal status dashboard for a running miner."""

__version__ = "0.1.0"
