"""
Line normalization for OCR transcripts.

Splits raw recognition output into the ordered line sequence every
extractor works on, and folds the glyphs OCR tends to garble:
- "\\5,000" / "￥5,000" → "¥5,000" (yen look-alikes)
- "２０２５／０９／１０" → "2025/09/10" (full-width digits and separators)
"""

import re
from typing import List, Optional

CANONICAL_CURRENCY = '¥'

# Backslash is what most OCR engines emit for a yen sign on Japanese receipts
CURRENCY_GLYPHS = {
    '\\': CANONICAL_CURRENCY,
    '＼': CANONICAL_CURRENCY,
    '￥': CANONICAL_CURRENCY,
}

FULLWIDTH_GLYPHS = {
    **{chr(0xFF10 + i): str(i) for i in range(10)},  # ０-９
    '，': ',',
    '．': '.',
    '／': '/',
    '－': '-',
    '：': ':',
}

_CANONICAL_TABLE = str.maketrans({**CURRENCY_GLYPHS, **FULLWIDTH_GLYPHS})

_LINE_BREAK = re.compile(r'\r\n|\r|\n')


def canonicalize_glyphs(line: str) -> str:
    """Map OCR look-alike currency glyphs and full-width digits onto ASCII/¥."""
    return line.translate(_CANONICAL_TABLE)


def normalize_lines(text: Optional[str], canonicalize: bool = True) -> List[str]:
    """
    Split OCR text into trimmed, non-empty lines in document order.

    Args:
        text: Raw transcript (may be empty or None)
        canonicalize: Fold currency glyphs and full-width digits before matching

    Returns:
        List of lines, top to bottom. Empty list for empty/None input.

    Examples:
        >>> normalize_lines("  さくら食堂 \\n\\n合計 \\\\1,200")
        ['さくら食堂', '合計 ¥1,200']
    """
    if not text or not isinstance(text, str):
        return []

    lines = []
    for segment in _LINE_BREAK.split(text):
        segment = segment.strip()
        if not segment:
            continue
        if canonicalize:
            segment = canonicalize_glyphs(segment)
        lines.append(segment)

    return lines
