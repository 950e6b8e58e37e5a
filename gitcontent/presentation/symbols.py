"""
Symbols — Status markers for CLI output

Progressive enhancement: Unicode when supported, ASCII fallback.
Configurable via display.symbols setting.

Also provides safe_print(): encoding-safe printing for file content,
which can hold characters the terminal cannot encode.
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional


# Common Unicode to ASCII replacements for display
UNICODE_TO_ASCII = {
    '→': '->',
    '←': '<-',
    '…': '...',
    '–': '-',
    '—': '--',
    '“': '"',
    '”': '"',
    '‘': "'",
    '’': "'",
    '•': '*',
    '✓': '[OK]',
    '⚠': '[!]',
    '❌': '[ERR]',
}


def safe_print(text: str, end: str = '\n', file=None) -> None:
    """
    Print with graceful encoding fallback.

    Handles UnicodeEncodeError by replacing unencodable characters
    with ASCII equivalents or '?' as last resort.

    Args:
        text: Text to print (may contain any Unicode)
        end: String appended after text (default: newline)
        file: Output stream (default: sys.stdout)
    """
    if file is None:
        file = sys.stdout

    try:
        print(text, end=end, file=file)
    except UnicodeEncodeError:
        safe_text = text
        for unicode_char, ascii_equiv in UNICODE_TO_ASCII.items():
            safe_text = safe_text.replace(unicode_char, ascii_equiv)

        try:
            print(safe_text, end=end, file=file)
        except UnicodeEncodeError:
            encoding = getattr(file, 'encoding', 'utf-8') or 'utf-8'
            encoded = safe_text.encode(encoding, errors='replace')
            print(encoded.decode(encoding), end=end, file=file)


@dataclass(frozen=True)
class SymbolSet:
    """Markers used in status lines."""
    check_pass: str
    check_warn: str
    check_fail: str
    arrow: str
    bullet: str


UNICODE = SymbolSet(
    check_pass='✓',
    check_warn='⚠',
    check_fail='❌',
    arrow='→',
    bullet='•',
)

ASCII = SymbolSet(
    check_pass='[OK]',
    check_warn='[!]',
    check_fail='[ERR]',
    arrow='->',
    bullet='*',
)


def supports_unicode() -> bool:
    """
    Check if environment likely supports Unicode output.

    Conservative: defaults to ASCII if uncertain.
    """
    if os.environ.get('GITCONTENT_ASCII_ONLY', '').lower() in ('1', 'true', 'yes'):
        return False
    if os.environ.get('GITCONTENT_UNICODE', '').lower() in ('1', 'true', 'yes'):
        return True

    stdout_encoding = getattr(sys.stdout, 'encoding', None)
    if stdout_encoding:
        encoding_lower = stdout_encoding.lower().replace('-', '').replace('_', '')
        # Windows code pages that don't support our Unicode symbols
        if encoding_lower.startswith('cp') or encoding_lower in ('ascii', 'latin1', 'iso88591'):
            return False
        if 'utf' in encoding_lower:
            return True

    lang = os.environ.get('LANG', '').lower()
    lc_all = os.environ.get('LC_ALL', '').lower()
    if 'utf-8' in lang or 'utf8' in lang or 'utf-8' in lc_all or 'utf8' in lc_all:
        return True

    # Windows Terminal
    if os.environ.get('WT_SESSION'):
        return True

    return False


def get_symbols(preference: Optional[str] = None) -> SymbolSet:
    """
    Get appropriate symbol set based on preference or auto-detection.

    Args:
        preference: "unicode", "ascii", or "auto" (None = auto)
    """
    if preference == 'unicode':
        return UNICODE
    if preference == 'ascii':
        return ASCII
    return UNICODE if supports_unicode() else ASCII
