"""
Render — ContentResult output for the CLI

Text mode: content verbatim, failures as status lines on stderr.
JSON mode: one document per run, serialized with orjson.
"""

from typing import List, Sequence

import orjson

from ..core.models import ContentResult
from .symbols import SymbolSet


def render_json(results: Sequence[ContentResult], compact: bool = False) -> str:
    """
    Serialize results as JSON.

    A single result renders as an object, several as an array.
    """
    data = [r.to_dict() for r in results]
    payload = data[0] if len(data) == 1 else data
    option = 0 if compact else orjson.OPT_INDENT_2
    return orjson.dumps(payload, option=option).decode()


def format_failure(result: ContentResult, symbols: SymbolSet) -> str:
    """
    One status line for a failed result.

    Example:
        ❌ src/app.py: fatal: path 'src/app.py' does not exist in 'HEAD'
    """
    message = (result.error or "").strip() or f"exit {result.returncode}"
    return f"{symbols.check_fail} {result.request.file_path}: {message}"


def render_text(results: Sequence[ContentResult], symbols: SymbolSet) -> List[str]:
    """
    Content blocks for successful results.

    Several results are separated by a header line naming the file.
    """
    blocks: List[str] = []
    multiple = len(results) > 1
    for result in results:
        if result.failed:
            continue
        if multiple:
            blocks.append(f"{symbols.arrow} {result.request.file_path}\n{result.content}")
        else:
            blocks.append(result.content)
    return blocks
