"""
Command-line entry point: parse an OCR transcript from a file or stdin.

Usage:
    bookkee-parse receipt.txt
    cat receipt.txt | bookkee-parse --today 2025-09-30
    bookkee-parse receipt.txt --verbose
"""

import argparse
import json
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from bookkee.services.parser import ReceiptParser
from bookkee.utils.lines import normalize_lines
from bookkee.utils.money import format_amount


def _parse_today(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date (expected YYYY-MM-DD): {value}")


def print_details(parser: ReceiptParser, text: str, today: date) -> None:
    """Print which rule and which candidates produced each field."""
    lines = normalize_lines(text, canonicalize=parser.config.CANONICALIZE_CURRENCY)

    print("="*60, file=sys.stderr)
    print(f"Lines: {len(lines)}", file=sys.stderr)

    found = parser.find_date(lines, today)
    if found:
        print(f"Date: {found.value} via {found.pattern_name} (priority {found.priority}) "
              f"(line {found.line_index}: {found.raw_text!r})", file=sys.stderr)
        for rule in parser.date_rules:
            if rule.name == found.pattern_name:
                continue
            shadowed = rule.parse(lines[found.line_index], today)
            if shadowed:
                print(f"  also matched: {shadowed} via {rule.name} (priority {rule.priority})",
                      file=sys.stderr)
    else:
        print(f"Date: none found, falling back to {today}", file=sys.stderr)

    for candidate in parser.find_amounts(lines):
        print(f"Amount candidate: {format_amount(candidate.value)} via {candidate.pattern_name} "
              f"(line {candidate.line_index})", file=sys.stderr)

    print("="*60, file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    parser_args = argparse.ArgumentParser(description='Extract date, amount and notes from receipt OCR text')
    parser_args.add_argument('file', nargs='?', type=str,
                             help='Transcript file (reads stdin when omitted)')
    parser_args.add_argument('--today', type=_parse_today, default=None,
                             help='Reference date as YYYY-MM-DD (default: current date)')
    parser_args.add_argument('--verbose', '-v', action='store_true',
                             help='Show matched rules and amount candidates on stderr')
    args = parser_args.parse_args(argv)

    if args.file:
        try:
            text = Path(args.file).read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error: cannot read {args.file}: {e}", file=sys.stderr)
            return 1
    else:
        text = sys.stdin.read()

    today = args.today or date.today()
    parser = ReceiptParser()

    if args.verbose:
        print_details(parser, text, today)

    result = parser.parse(text, today=today)
    print(json.dumps(result.model_dump(), ensure_ascii=False))
    return 0


if __name__ == '__main__':
    sys.exit(main())
