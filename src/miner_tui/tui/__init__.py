"""
Terminal dashboard for miner statistics.

The display runs on its own thread; ``Controller`` feeds it statistics
snapshots through ``UI`` and the ``UpdateRelay`` until the operator quits.
"""

from .surface import CallbackSink, DisplaySurface, TextView
from .types import ControllerMessage, ControllerState, Quit, UIMessage, UpdateStatus
from .ui import UI, Controller, UpdateRelay

__all__ = [
    "CallbackSink",
    "Controller",
    "ControllerMessage",
    "ControllerState",
    "DisplaySurface",
    "Quit",
    "TextView",
    "UI",
    "UIMessage",
    "UpdateRelay",
    "UpdateStatus",
]
