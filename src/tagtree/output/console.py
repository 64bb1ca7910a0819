"""Rich Console factory and theme for tagtree output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

TAGTREE_THEME = Theme(
    {
        "tt.ok": "bold green",
        "tt.error": "bold red",
        "tt.op": "bold cyan",
        "tt.key": "dim",
        "tt.id": "bold blue",
        "tt.kind.word": "bold",
        "tt.kind.link": "italic cyan",
        "tt.incoming": "dark_orange",
        "tt.coord": "magenta",
    }
)

_KIND_STYLES: dict[str, str] = {
    "Word": "tt.kind.word",
    "Link": "tt.kind.link",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=TAGTREE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    """Return the Rich style name for a node kind."""
    return _KIND_STYLES.get(kind, "")
