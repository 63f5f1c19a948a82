"""
Receipt parser service for extracting bookkeeping fields from OCR text.
"""

import re
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Optional, Sequence, TypeVar

from bookkee.config import Settings, settings as default_settings
from bookkee.models.receipt import ExtractionResult
from bookkee.services.date_rules import DATE_RULES, DateRule, build_date_rules
from bookkee.utils.candidates import AmountCandidate, DateCandidate, select_largest_amount
from bookkee.utils.lines import normalize_lines
from bookkee.utils.money import parse_amount

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class PatternSpec:
    """A named regex pattern with example and notes for documentation."""
    name: str
    pattern: str
    example: str
    notes: Optional[str] = None
    flags: int = re.IGNORECASE
    compiled: re.Pattern = field(default=None, init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'compiled', re.compile(self.pattern, self.flags))


class ReceiptParser:
    """Service for parsing receipt text and extracting structured data."""

    # Words that mark the grand total / subtotal line
    TOTAL_KEYWORDS = (
        '総合計', '合計', '小計', 'お会計', 'ご請求額', '請求額',
        'お支払金額', 'お支払い金額', '金額',
        'SUBTOTAL', 'TOTAL', 'AMOUNT',
    )

    # Business-entity designations that suggest a merchant line
    BUSINESS_KEYWORDS = (
        '店', '施設', '（株）', '(株)', '株式会社', '有限会社', '商店', '食堂',
        'マート', 'ストア', '薬局',
        'STORE', 'SHOP', 'MART', 'MARKET', 'CAFE', 'RESTAURANT',
        'INC', 'LTD', 'CORP', 'CO.',
    )

    def __init__(self, config: Optional[Settings] = None):
        """Initialize parser with regex patterns and the date rule table."""
        self.config = config or default_settings

        if config is None:
            self.date_rules: Sequence[DateRule] = DATE_RULES
        else:
            self.date_rules = build_date_rules(
                pivot=config.TWO_DIGIT_YEAR_PIVOT,
                rollover_days=config.MONTH_DAY_ROLLOVER_DAYS,
            )

        self._init_patterns()

    def _init_patterns(self):
        """Initialize regex patterns for parsing."""

        keywords = '|'.join(re.escape(kw) for kw in self.TOTAL_KEYWORDS)

        self.amount_patterns = [
            PatternSpec(
                name='keyword_total',
                pattern=r'(?:' + keywords + r')\s*[:：]?\s*[¥$#€]?\s*([0-9,]+(?:\.[0-9]+)?)',
                example='合計 ¥5,000',
                notes='Total/subtotal keyword, optional currency marker',
            ),
            PatternSpec(
                name='currency_symbol',
                pattern=r'[¥#]\s*([0-9,]{3,})|[$€]\s*([0-9,]+(?:\.[0-9]+)?)',
                example='¥1,280',
                notes='Currency marker then digits; "#" is a common OCR misread of ¥',
            ),
            PatternSpec(
                name='unit_suffix',
                pattern=r'([0-9,]{3,})\s*円',
                example='3,000円',
            ),
        ]

        self.notes_keyword_pattern = PatternSpec(
            name='business_keyword',
            pattern='|'.join(re.escape(kw) for kw in self.BUSINESS_KEYWORDS),
            example='さくら食堂',
        )

        # A candidate notes line must match none of these
        self.notes_exclusion_patterns = [
            PatternSpec(
                name='receipt_header',
                pattern=r'領収書|領収証|レシート|RECEIPT|INVOICE',
                example='領収書',
            ),
            PatternSpec(
                name='date_token',
                pattern=r'[0-9]{2,}[/.年\-]',
                example='2025/09/10',
            ),
            PatternSpec(
                name='amount_token',
                pattern=r'[¥$#]?[0-9][0-9,]{2,}',
                example='¥1,200',
            ),
        ]

    def parse(self, text: Optional[str], today: Optional[date] = None) -> ExtractionResult:
        """
        Parse receipt text and extract date, amount and notes.

        Never raises: a failing extractor only blanks its own field.

        Args:
            text: OCR transcript (may be empty or None)
            today: Reference date for year inference and the date fallback

        Returns:
            ExtractionResult with date always populated
        """
        today = today or date.today()
        lines = self._safe_call(
            'lines',
            lambda: normalize_lines(text, canonicalize=self.config.CANONICALIZE_CURRENCY),
            [],
        )

        found_date = self._safe_call('date', lambda: self.extract_date(lines, today), None)
        amount = self._safe_call('amount', lambda: self.extract_amount(lines), None)
        notes = self._safe_call('notes', lambda: self.extract_notes(lines), None)

        return ExtractionResult(
            date=(found_date or today).isoformat(),
            amount=amount,
            notes=notes,
        )

    def _safe_call(self, field_name: str, func: Callable[[], T], default: T) -> T:
        try:
            return func()
        except Exception:
            logger.warning("Error extracting %s", field_name, exc_info=True)
            return default

    def find_date(self, lines: List[str], today: date) -> Optional[DateCandidate]:
        """
        Find the first date in document order, honoring rule priority per line.

        Returns:
            DateCandidate for the winning match, or None
        """
        for index, line in enumerate(lines):
            for rule in self.date_rules:
                for parsed, match in rule.iter_dates(line, today):
                    return DateCandidate(
                        value=parsed,
                        pattern_name=rule.name,
                        line_index=index,
                        raw_text=match.group(0),
                        priority=rule.priority,
                    )
        return None

    def extract_date(self, lines: List[str], today: Optional[date] = None) -> Optional[date]:
        """
        Extract the transaction date.

        Args:
            lines: Normalized lines
            today: Reference date for rules that infer the year

        Returns:
            The date, or None when no rule matched (the caller substitutes today)
        """
        candidate = self.find_date(lines, today or date.today())
        return candidate.value if candidate else None

    def find_amounts(self, lines: List[str]) -> List[AmountCandidate]:
        """Collect every parseable amount from every line and pattern."""
        candidates: List[AmountCandidate] = []

        for index, line in enumerate(lines):
            for spec in self.amount_patterns:
                for match in spec.compiled.finditer(line):
                    amount_str = next((g for g in match.groups() if g is not None), None)
                    amount = parse_amount(amount_str)

                    if amount is None:
                        continue

                    candidates.append(AmountCandidate(
                        value=amount,
                        pattern_name=spec.name,
                        line_index=index,
                        raw_text=match.group(0),
                    ))

        return candidates

    def extract_amount(self, lines: List[str]) -> Optional[int]:
        """
        Extract the receipt total as the largest amount candidate.

        Returns:
            Amount as int or None if nothing amount-like was found
        """
        best = select_largest_amount(self.find_amounts(lines))
        return best.value if best else None

    def extract_notes(self, lines: List[str]) -> Optional[str]:
        """
        Extract a merchant-like line from the top of the receipt.

        Returns:
            First qualifying line or None
        """
        for line in lines[:self.config.NOTES_SCAN_LINES]:
            if not (1 < len(line) < self.config.NOTES_MAX_LENGTH):
                continue
            if not self.notes_keyword_pattern.compiled.search(line):
                continue
            if any(spec.compiled.search(line) for spec in self.notes_exclusion_patterns):
                continue
            return line

        return None


_parser = ReceiptParser()


def extract(text: Optional[str], today: Optional[date] = None) -> ExtractionResult:
    """Extract date, amount and notes from an OCR transcript. Never raises."""
    return _parser.parse(text, today=today)
