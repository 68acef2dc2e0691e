"""
Quotation numbering — ``YYYY/QUO/NNN``.

The counter restarts at 001 every calendar year and is zero-padded to three
digits; past 999 it simply grows wider.
"""
import re
from typing import Optional

QUOTATION_PREFIX = "QUO"
_NUMBER_RE = re.compile(r"^(\d{4})/QUO/(\d+)$")


def format_quotation_number(year: int, counter: int) -> str:
    if counter < 1:
        raise ValueError(f"quotation counter must be positive, got {counter}")
    return f"{year}/{QUOTATION_PREFIX}/{counter:03d}"


def parse_counter(number: str) -> Optional[int]:
    """Counter part of a well-formed number, else None."""
    match = _NUMBER_RE.match(number or "")
    return int(match.group(2)) if match else None


def next_quotation_number(last_number: Optional[str], year: int) -> str:
    """
    Number following *last_number* within *year*.

    A missing, malformed or previous-year last number restarts the counter.
    """
    counter = 1
    if last_number and last_number.startswith(f"{year}/"):
        previous = parse_counter(last_number)
        if previous is not None:
            counter = previous + 1
    return format_quotation_number(year, counter)


def year_pattern(year: int) -> str:
    """SQL LIKE pattern matching every number issued in *year*."""
    return f"{year}/{QUOTATION_PREFIX}/%"
