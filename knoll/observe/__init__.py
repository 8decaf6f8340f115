"""Display helpers for Knoll grids."""

from .render import SYMBOL_STYLES, render_ascii, render_rich

__all__ = ["SYMBOL_STYLES", "render_ascii", "render_rich"]
