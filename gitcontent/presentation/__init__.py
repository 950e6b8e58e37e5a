"""
Presentation — CLI output

- symbols: Unicode/ASCII status markers, safe_print
- render: text and JSON rendering of ContentResult
"""

from .symbols import get_symbols, safe_print, SymbolSet, UNICODE, ASCII
from .render import render_json, render_text, format_failure

__all__ = [
    "get_symbols", "safe_print", "SymbolSet", "UNICODE", "ASCII",
    "render_json", "render_text", "format_failure",
]
