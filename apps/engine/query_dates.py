#!/usr/bin/env python3
"""Year and date-range extraction from normalized questions."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta

from query_lexicon import (
    LAST_MARKERS,
    LAST_YEAR_PHRASES,
    THIS_MONTH_PHRASES,
    THIS_YEAR_PHRASES,
    WEEK_MARKERS,
)


MIN_YEAR = 1900
MAX_YEAR = 2100
MAX_NUMBER_DIGITS = 9


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime

    def contains(self, value: datetime) -> bool:
        return self.start <= value <= self.end


def has_phrase(normalized: str, phrases: set[str]) -> bool:
    padded = f" {normalized} "
    return any(f" {phrase} " in padded for phrase in phrases)


def positive_int(token: str) -> int | None:
    # Long digit runs are ids or typos, not quantities.
    if not token.isdecimal() or len(token) > MAX_NUMBER_DIGITS:
        return None
    value = int(token)
    return value if value > 0 else None


def first_positive_int(tokens: list[str]) -> int | None:
    for tok in tokens:
        value = positive_int(tok)
        if value is not None:
            return value
    return None


def extract_year(normalized: str, now: datetime) -> int | None:
    if has_phrase(normalized, LAST_YEAR_PHRASES):
        return now.year - 1
    if has_phrase(normalized, THIS_YEAR_PHRASES):
        return now.year

    for tok in normalized.split(" "):
        if len(tok) == 4 and tok.isdecimal():
            year = int(tok)
            if MIN_YEAR <= year <= MAX_YEAR:
                return year
    return None


def _word_after(tokens: list[str], idx: int) -> str | None:
    """Token after idx, hopping over one count ("last 3 weeks")."""
    pos = idx + 1
    if pos < len(tokens) and positive_int(tokens[pos]) is not None:
        pos += 1
    if pos < len(tokens):
        return tokens[pos]
    return None


def has_last_weeks_phrase(tokens: list[str]) -> bool:
    # "last 3 weeks" and "las 3 semanas pasadas" both qualify.
    for idx, tok in enumerate(tokens):
        if tok not in LAST_MARKERS:
            continue
        if _word_after(tokens, idx) in WEEK_MARKERS:
            return True
        if idx > 0 and tokens[idx - 1] in WEEK_MARKERS:
            return True
    return False


def extract_weeks(normalized: str) -> int | None:
    tokens = normalized.split(" ")
    if not has_last_weeks_phrase(tokens):
        return None
    return first_positive_int(tokens) or 1


def month_range(now: datetime) -> DateRange:
    last_day = calendar.monthrange(now.year, now.month)[1]
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    end = now.replace(day=last_day, hour=23, minute=59, second=59, microsecond=999999)
    return DateRange(start, end)


def year_range(year: int, now: datetime) -> DateRange:
    start = datetime(year, 1, 1, 0, 0, 0, tzinfo=now.tzinfo)
    end = datetime(year, 12, 31, 23, 59, 59, tzinfo=now.tzinfo)
    return DateRange(start, end)


def extract_date_range(normalized: str, now: datetime, year: int | None) -> DateRange | None:
    weeks = extract_weeks(normalized)
    if weeks is not None:
        try:
            start = now - timedelta(days=7 * weeks)
        except OverflowError:
            start = datetime.min.replace(tzinfo=now.tzinfo)
        return DateRange(start, now)

    if has_phrase(normalized, THIS_MONTH_PHRASES):
        return month_range(now)

    if year is not None:
        return year_range(year, now)

    return None
