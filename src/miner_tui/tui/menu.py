"""Main menu and the stack of views it switches between."""

from __future__ import annotations

from typing import Iterable

from rich.console import RenderableType
from rich.table import Table
from rich.text import Text

from .constants import VIEW_MINING, VIEW_VERSION

MENU_ENTRIES: list[tuple[str, str]] = [
    ("Mining", VIEW_MINING),
    ("Version Info", VIEW_VERSION),
]


class ViewStack:
    """Named layers of which exactly one is visible."""

    def __init__(self) -> None:
        self._layers: dict[str, RenderableType] = {}
        self._active: str | None = None

    def add_layer(self, name: str, renderable: RenderableType) -> "ViewStack":
        self._layers[name] = renderable
        # The most recently added layer is on top, like a stack
        self._active = name
        return self

    @property
    def active(self) -> str | None:
        return self._active

    def show(self, name: str) -> None:
        if name not in self._layers:
            raise KeyError(f"Unknown view: {name}")
        self._active = name

    def __rich__(self) -> RenderableType:
        if self._active is None:
            return Text("")
        return self._layers[self._active]


class Menu:
    """Vertical selection list; moving the selection switches the visible view."""

    def __init__(self, stack: ViewStack, entries: list[tuple[str, str]] | None = None) -> None:
        self._stack = stack
        self._entries = list(entries if entries is not None else MENU_ENTRIES)
        if not self._entries:
            raise ValueError("Menu needs at least one entry")
        self._selected = 0
        for index, (_, view_name) in enumerate(self._entries):
            if view_name == stack.active:
                self._selected = index
                break

    @property
    def selected_view(self) -> str:
        return self._entries[self._selected][1]

    def select_previous(self) -> None:
        self._select(max(self._selected - 1, 0))

    def select_next(self) -> None:
        self._select(min(self._selected + 1, len(self._entries) - 1))

    def _select(self, index: int) -> None:
        self._selected = index
        self._stack.show(self.selected_view)

    def __rich__(self) -> RenderableType:
        table = Table.grid(padding=(0, 1))
        table.add_column(no_wrap=True)
        for index, (label, _) in enumerate(self._entries):
            style = "highlight" if index == self._selected else "primary"
            table.add_row(Text(label, style=style))
        return table


def create(stack: ViewStack, view_names: Iterable[str]) -> Menu:
    """
    Build the main menu bound to ``stack``.

    Known views keep the order of ``MENU_ENTRIES``; any other view is listed
    after them under a title-cased version of its name.
    """
    view_names = list(view_names)
    entries = [(label, name) for label, name in MENU_ENTRIES if name in view_names]
    listed = {name for _, name in entries}
    entries += [(name.replace("_", " ").title(), name) for name in view_names if name not in listed]
    return Menu(stack, entries)
