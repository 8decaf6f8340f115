"""Text rendering of grids.

Solved cells show their symbol; unsolved cells show how many candidates they
have left, so a half-collapsed (or contradicted) grid is still readable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text

if TYPE_CHECKING:
    from knoll.generation.wfc import Grid


# Style per hill piece
SYMBOL_STYLES: dict[str, str] = {
    " ": "",
    "/": "green",
    "\\": "green",
    "_": "bright_green",
    "#": "rgb(160,64,0)",    # Brown rock
}

UNSOLVED_STYLE = "bold yellow"
OVERFLOW_MARK = "?"  # Shown when more than 9 candidates remain


def cell_text(state: str | int) -> str:
    """Single-character display for one cell state."""
    if isinstance(state, str):
        return state
    return str(state) if state <= 9 else OVERFLOW_MARK


def render_ascii(grid: Grid) -> str:
    """Render a grid as plain text, one line per row."""
    return "\n".join(
        "".join(cell_text(state) for state in row)
        for row in grid.rows()
    )


def render_rich(grid: Grid, styles: dict[str, str] | None = None) -> Text:
    """Render a grid as colored rich Text."""
    if styles is None:
        styles = SYMBOL_STYLES

    text = Text()
    for row_number, row in enumerate(grid.rows()):
        if row_number:
            text.append("\n")
        for state in row:
            if isinstance(state, str):
                text.append(state, style=styles.get(state, ""))
            else:
                text.append(cell_text(state), style=UNSOLVED_STYLE)
    return text
