"""
Text sanitization for the standard PDF fonts.

The standard Helvetica faces only cover a Latin-1 style glyph set, so user
text is folded to ASCII where a safe equivalent exists. Characters outside
the replacement table are passed through unchanged and may render as missing
glyphs; this is a known limitation.
"""

import re
from typing import Any, List


# Typographic punctuation and spacing
PUNCTUATION_MAP = {
    '\u202f': ' ',      # Narrow no-break space
    '\u00a0': ' ',      # No-break space
    '\u2018': "'",      # Left single quotation mark
    '\u2019': "'",      # Right single quotation mark
    '\u201c': '"',      # Left double quotation mark
    '\u201d': '"',      # Right double quotation mark
    '\u2013': '-',      # En dash
    '\u2014': '-',      # Em dash
    '\u2026': '...',    # Horizontal ellipsis
}

# French accented letters
ACCENT_MAP = {
    '\u00e9': 'e', '\u00e8': 'e', '\u00ea': 'e', '\u00eb': 'e',
    '\u00e0': 'a', '\u00e2': 'a',
    '\u00ee': 'i', '\u00ef': 'i',
    '\u00f4': 'o', '\u00f6': 'o',
    '\u00f9': 'u', '\u00fb': 'u',
    '\u00e7': 'c',
    '\u00c9': 'E', '\u00c8': 'E', '\u00ca': 'E', '\u00cb': 'E',
    '\u00c0': 'A', '\u00c2': 'A',
    '\u00ce': 'I', '\u00cf': 'I',
    '\u00d4': 'O', '\u00d6': 'O',
    '\u00d9': 'U', '\u00db': 'U',
    '\u00c7': 'C',
}

_TRANSLATION = str.maketrans({**PUNCTUATION_MAP, **ACCENT_MAP})

WHITESPACE_PATTERN = re.compile(r'\s+')


def sanitize(text: Any) -> str:
    """Fold text into the renderable glyph set. Never raises."""
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)
    return text.translate(_TRANSLATION)


def safe_text(value: Any, default: str = "") -> str:
    """Sanitize a value, substituting default for empty or missing values."""
    if value is None or value == "":
        return default
    return sanitize(value)


def wrap_text(text: str, max_chars: int) -> List[str]:
    """
    Greedy word wrap by character count.

    Every line fits in max_chars except a single word longer than the limit,
    which is kept whole on its own line. Joining the lines with single spaces
    gives back the whitespace-normalized input.
    """
    words = WHITESPACE_PATTERN.split(text.strip()) if text else []
    lines: List[str] = []
    current = ""

    for word in words:
        if not word:
            continue
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= max_chars:
            current = candidate
        else:
            if current:
                lines.append(current)
            current = word

    if current:
        lines.append(current)
    return lines
