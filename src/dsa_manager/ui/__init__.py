"""Text presentation of engine results."""

from __future__ import annotations

from dsa_manager.ui.text import (
    format_table,
    render_check,
    render_initiative,
    render_roll,
)


__all__ = [
    "format_table",
    "render_check",
    "render_initiative",
    "render_roll",
]
