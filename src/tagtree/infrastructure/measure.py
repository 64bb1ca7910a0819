"""Text measurement collaborators.

The layer assigner only needs ``measure(label) -> float``.  The default
implementation counts terminal cells with Rich (so wide CJK glyphs take two
cells) and scales by a fixed per-cell width.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from rich.cells import cell_len


@runtime_checkable
class TextMeasurer(Protocol):
    """Anything that can report the rendered width of a label."""

    def measure(self, label: str) -> float: ...


class CellWidthMeasurer:
    """Width = terminal cell count x *char_width*."""

    def __init__(self, char_width: float = 7.0) -> None:
        if char_width <= 0:
            msg = f"char_width must be positive, got {char_width}"
            raise ValueError(msg)
        self.char_width = char_width

    def measure(self, label: str) -> float:
        return cell_len(label) * self.char_width
