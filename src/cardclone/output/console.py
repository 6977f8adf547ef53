"""Rich Console factory and theme for cardclone output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

CARD_THEME = Theme(
    {
        "card.ok": "bold green",
        "card.error": "bold red",
        "card.warning": "bold yellow",
        "card.op": "bold cyan",
        "card.key": "dim",
        "card.handle": "bold blue",
        "card.owner": "magenta",
        "card.url": "underline",
    }
)

_KEY_STYLES: dict[str, str] = {
    "handle": "card.handle",
    "owner": "card.owner",
    "previous_owner": "card.owner",
    "url": "card.url",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=CARD_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_key(key: str) -> str:
    """Return the Rich style name for a result data key."""
    return _KEY_STYLES.get(key, "")
