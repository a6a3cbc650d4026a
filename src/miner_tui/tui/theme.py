"""Colour palette for the dashboard."""

from rich.theme import Theme

DASHBOARD_THEME = Theme(
    {
        "background": "white on black",
        "primary": "white",
        "title": "bold yellow",
        "label": "cyan",
        "value": "yellow",
        "highlight": "bold black on cyan",
        "border": "white",
        "ok": "green",
        "error": "bold red",
        "dim": "dim",
    }
)
