"""
Ordered date rule table.

Each rule pairs a regex with a formatter that turns a match into a
calendar date. Rules are tried in ascending priority; the formatter raises
ValueError for out-of-range months/days so the caller can discard the
match and keep scanning.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from functools import partial
from typing import Callable, Iterator, Optional, Tuple

from bookkee.config import settings

# Digit-adjacency guards. `\b` is unusable here: CJK characters are word
# characters, so "日付25/09/10" has no boundary before the 2.
_NO_DIGIT_BEFORE = r'(?<!\d)'
_NO_DIGIT_AFTER = r'(?!\d)'
_SEP = r'[/.\-]'

# Era name → offset so that offset + era year = western year
WAREKI_OFFSETS = {
    '令和': 2018,
    '平成': 1988,
    '昭和': 1925,
}

Formatter = Callable[[re.Match, date], date]


@dataclass(frozen=True)
class DateRule:
    """A named, prioritized date pattern with its formatter."""
    name: str
    pattern: str
    priority: int
    formatter: Formatter
    example: str = ""
    flags: int = 0
    compiled: re.Pattern = field(default=None, init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'compiled', re.compile(self.pattern, self.flags))

    def iter_dates(self, line: str, today: date) -> Iterator[Tuple[date, re.Match]]:
        """Yield every calendar-valid date this rule finds in the line."""
        for match in self.compiled.finditer(line):
            try:
                yield self.formatter(match, today), match
            except ValueError:
                continue

    def parse(self, line: str, today: date) -> Optional[date]:
        """Return the first calendar-valid date in the line, or None."""
        for parsed, _ in self.iter_dates(line, today):
            return parsed
        return None


def window_two_digit_year(year: int, pivot: int) -> int:
    """
    Expand a two-digit year.

    Examples:
        >>> window_two_digit_year(25, 50)
        2025
        >>> window_two_digit_year(50, 50)
        2050
        >>> window_two_digit_year(51, 50)
        1951
    """
    return 1900 + year if year > pivot else 2000 + year


def _ymd(match: re.Match, today: date, year: int = 1, month: int = 2, day: int = 3) -> date:
    return date(int(match.group(year)), int(match.group(month)), int(match.group(day)))


def _wareki(match: re.Match, today: date) -> date:
    era, era_year, month, day = match.groups()
    offset = WAREKI_OFFSETS[era]
    year = 1 if era_year == '元' else int(era_year)
    return date(offset + year, int(month), int(day))


def _two_digit_year(match: re.Match, today: date, pivot: int, year: int, month: int, day: int) -> date:
    full_year = window_two_digit_year(int(match.group(year)), pivot)
    return date(full_year, int(match.group(month)), int(match.group(day)))


def _month_day(match: re.Match, today: date, rollover_days: Optional[int]) -> date:
    parsed = date(today.year, int(match.group(1)), int(match.group(2)))

    if rollover_days is not None and (today - parsed).days > rollover_days:
        try:
            parsed = parsed.replace(year=parsed.year + 1)
        except ValueError:
            # Feb 29 has no counterpart next year
            pass

    return parsed


def build_date_rules(
    pivot: int = 50,
    rollover_days: Optional[int] = None
) -> Tuple[DateRule, ...]:
    """
    Build the date rule table, sorted by ascending priority.

    Args:
        pivot: Two-digit years above this map to the 1900s, the rest to the 2000s
        rollover_days: If set, a bare month/day more than this many days in the
            past is moved to next year

    Returns:
        Immutable tuple of rules, most specific first
    """
    rules = [
        DateRule(
            name='kanji_ymd',
            pattern=_NO_DIGIT_BEFORE + r'(\d{4})\s*年\s*(\d{1,2})\s*月\s*(\d{1,2})(?!\d)\s*日?',
            priority=1,
            formatter=_ymd,
            example='2025年9月10日',
        ),
        DateRule(
            name='wareki_ymd',
            pattern=r'(令和|平成|昭和)\s*(元|\d{1,2})\s*年\s*(\d{1,2})\s*月\s*(\d{1,2})(?!\d)\s*日?',
            priority=2,
            formatter=_wareki,
            example='令和7年9月10日',
        ),
        DateRule(
            name='year_first',
            pattern=_NO_DIGIT_BEFORE + r'(\d{4})' + _SEP + r'(\d{1,2})' + _SEP + r'(\d{1,2})' + _NO_DIGIT_AFTER,
            priority=3,
            formatter=_ymd,
            example='2025/09/10',
        ),
        DateRule(
            name='year_last',
            pattern=_NO_DIGIT_BEFORE + r'(\d{1,2})' + _SEP + r'(\d{1,2})' + _SEP + r'(\d{4})' + _NO_DIGIT_AFTER,
            priority=4,
            formatter=partial(_ymd, year=3, month=1, day=2),
            example='09/10/2025',
        ),
        DateRule(
            name='two_digit_year_last',
            pattern=_NO_DIGIT_BEFORE + r'(\d{1,2})' + _SEP + r'(\d{1,2})' + _SEP + r'(\d{2})' + _NO_DIGIT_AFTER,
            priority=5,
            formatter=partial(_two_digit_year, pivot=pivot, year=3, month=1, day=2),
            example='09/10/25',
        ),
        DateRule(
            name='two_digit_year_first',
            pattern=_NO_DIGIT_BEFORE + r'(\d{2})' + _SEP + r'(\d{1,2})' + _SEP + r'(\d{1,2})' + _NO_DIGIT_AFTER,
            priority=6,
            formatter=partial(_two_digit_year, pivot=pivot, year=1, month=2, day=3),
            example='25.09.10',
        ),
        DateRule(
            name='month_day_kanji',
            pattern=r'(?<![\d年])(\d{1,2})\s*月\s*(\d{1,2})\s*日',
            priority=7,
            formatter=partial(_month_day, rollover_days=rollover_days),
            example='9月10日',
        ),
        DateRule(
            name='month_day',
            pattern=r'(?<![\d/.\-¥$#€])(\d{1,2})' + _SEP + r'(\d{1,2})(?![\d/.\-])',
            priority=8,
            formatter=partial(_month_day, rollover_days=rollover_days),
            example='9/10',
        ),
    ]

    return tuple(sorted(rules, key=lambda rule: rule.priority))


DATE_RULES = build_date_rules(
    pivot=settings.TWO_DIGIT_YEAR_PIVOT,
    rollover_days=settings.MONTH_DAY_ROLLOVER_DAYS,
)
