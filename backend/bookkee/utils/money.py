"""
Money parsing utilities for receipt digit groups.

Receipts handled here are priced in whole yen, so a digit group maps to a
non-negative integer:
- "5,000" → 5000
- "1,234,567" → 1234567
- "50.25" → 50 (fraction dropped)
- ",," → None

The parser's dollar and keyword patterns capture the fraction ("12.80"),
so dropping it happens here rather than in the regex.
"""

from typing import Optional
import re

_THOUSANDS_SEPARATORS = re.compile(r',')
_DIGITS = re.compile(r'^\d+$')


def parse_amount(amount_str: str) -> Optional[int]:
    """
    Parse a matched digit group into a non-negative integer.

    Args:
        amount_str: Digit group, possibly with thousands separators

    Returns:
        Integer amount or None if parsing fails

    Examples:
        >>> parse_amount("5,000")
        5000
        >>> parse_amount("12.80")
        12
        >>> parse_amount(",,,") is None
        True
    """
    if not amount_str or not isinstance(amount_str, str):
        return None

    cleaned = _THOUSANDS_SEPARATORS.sub('', amount_str.strip())

    # Drop any decimal fraction
    if '.' in cleaned:
        cleaned = cleaned.split('.', 1)[0]

    if not _DIGITS.match(cleaned):
        return None

    try:
        return int(cleaned)
    except ValueError:
        return None


def format_amount(amount: Optional[int], symbol: str = '¥') -> str:
    """
    Format an integer amount for display.

    Examples:
        >>> format_amount(5000)
        '¥5,000'
        >>> format_amount(None)
        'N/A'
    """
    if amount is None:
        return 'N/A'

    return f"{symbol}{amount:,}"
