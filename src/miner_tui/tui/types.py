"""Messages exchanged between the controller, the UI handle and the relay."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union

from ..stats import Stats


@dataclass(frozen=True, slots=True)
class UpdateStatus:
    """Ask the views to show a new statistics snapshot."""

    stats: Stats


@dataclass(frozen=True, slots=True)
class Quit:
    """Ask the display surface to terminate; the relay exits after forwarding it."""


UIMessage = Union[UpdateStatus, Quit]


class ControllerMessage(enum.Enum):
    SHUTDOWN = enum.auto()


class ControllerState(enum.Enum):
    RUNNING = enum.auto()
    STOPPED = enum.auto()
