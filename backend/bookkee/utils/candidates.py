"""
Candidate dataclasses for extraction.

Each candidate represents a potential extracted value together with the
line it came from, so the selection step can report provenance.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, List, Optional


@dataclass
class Candidate:
    """Base class for extraction candidates."""
    value: Any
    pattern_name: str
    line_index: int  # Position in the normalized line sequence
    raw_text: str = ""  # Original matched text


@dataclass
class AmountCandidate(Candidate):
    """Candidate for the receipt total (non-negative integer)."""
    value: int


@dataclass
class DateCandidate(Candidate):
    """Candidate for the transaction date."""
    value: date
    priority: int = 100  # Priority of the rule that produced it


def select_largest_amount(candidates: List[AmountCandidate]) -> Optional[AmountCandidate]:
    """
    Pick the numerically largest amount candidate.

    The grand total dominates line items and tax lines, so the maximum wins.
    Ties keep the earliest candidate.
    """
    best: Optional[AmountCandidate] = None
    for candidate in candidates:
        if best is None or candidate.value > best.value:
            best = candidate
    return best
