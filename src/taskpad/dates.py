#!/usr/bin/env python3
"""
Parse free-text due dates.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

DUE_DATE_FORMAT = "%Y-%m-%d"
ISO_DATE_RE = re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b")
RELATIVE_RE = re.compile(r"\bin\s+(\d+)\s+(day|days|week|weeks)\b")
SLASH_DATE_RE = re.compile(r"\b\d{1,2}/\d{1,2}(?:/\d{2,4})?\b")
KEYWORD_OFFSETS = {
    "today": 0,
    "tonight": 0,
    "tomorrow": 1,
    "yesterday": -1,
}
WEEKDAYS = {
    "monday": 0,
    "mon": 0,
    "tuesday": 1,
    "tue": 1,
    "wednesday": 2,
    "wed": 2,
    "thursday": 3,
    "thu": 3,
    "friday": 4,
    "fri": 4,
    "saturday": 5,
    "sat": 5,
    "sunday": 6,
    "sun": 6,
}
MONTH_WORDS = (
    "january", "february", "march", "april", "may", "june", "july",
    "august", "september", "october", "november", "december",
    "jan", "feb", "mar", "apr", "jun", "jul", "aug", "sept", "sep",
    "oct", "nov", "dec",
)
WEEKDAY_PREFIXES = {"on", "next", "this", "by", "due", "until", "before"}
_MONTH = "(?:" + "|".join(MONTH_WORDS) + r")\.?"
_DAY = r"\d{1,2}(?:st|nd|rd|th)?"
MONTH_DAY_RE = re.compile(
    rf"\b(?:{_MONTH}\s+{_DAY}|{_DAY}\s+(?:of\s+)?{_MONTH})(?:,?\s+\d{{4}})?\b"
)


def format_due_date(value: date) -> str:
    """
    Format a date for storage.

    Examples
    --------
    >>> format_due_date(date(2024, 3, 9))
    '2024-03-09'
    """
    return value.strftime(DUE_DATE_FORMAT)


def is_overdue(due_date: Optional[str], today: Optional[date] = None) -> bool:
    """
    Return True when a stored due date lies before today.

    Examples
    --------
    >>> is_overdue("2024-01-01", today=date(2024, 1, 2))
    True
    >>> is_overdue("2024-01-02", today=date(2024, 1, 2))
    False
    >>> is_overdue(None)
    False
    """
    if not due_date:
        return False
    today = today or date.today()
    return due_date < format_due_date(today)


def _weekday_offset(words: list[str], today: date) -> Optional[int]:
    for index, word in enumerate(words):
        target = WEEKDAYS.get(word)
        if target is None:
            continue
        previous = words[index - 1] if index > 0 else None
        # "sun", "sat", "mon" and friends are ordinary words too
        if len(word) <= 3 and len(words) > 1 and previous not in WEEKDAY_PREFIXES:
            continue
        offset = (target - today.weekday()) % 7
        if previous == "next" and offset == 0:
            offset = 7
        return offset
    return None


def _date_phrase(text: str) -> Optional[str]:
    match = MONTH_DAY_RE.search(text) or SLASH_DATE_RE.search(text)
    return match.group(0) if match else None


def parse_due_date(text: str, now: Optional[datetime] = None) -> Optional[date]:
    """
    Parse a calendar date out of free text.

    Parameters
    ----------
    text : str
        Free text, such as a new task description or a date prompt answer.
    now : Optional[datetime], optional
        Reference time for relative expressions (default: current time).

    Returns
    -------
    Optional[date]
        Parsed date, or None when the text carries no date.

    Examples
    --------
    >>> now = datetime(2024, 5, 15, 9, 0)  # a Wednesday
    >>> parse_due_date("file taxes 2024-06-01", now)
    datetime.date(2024, 6, 1)
    >>> parse_due_date("call bank tomorrow", now)
    datetime.date(2024, 5, 16)
    >>> parse_due_date("review on friday", now)
    datetime.date(2024, 5, 17)
    >>> parse_due_date("in 2 weeks", now)
    datetime.date(2024, 5, 29)
    >>> parse_due_date("dentist June 3", now)
    datetime.date(2024, 6, 3)
    >>> parse_due_date("buy milk #errand", now) is None
    True
    >>> parse_due_date("buy sun cream", now) is None
    True
    """
    if not text or not text.strip():
        return None
    now = now or datetime.now()
    today = now.date()
    lowered = text.lower()

    iso = ISO_DATE_RE.search(lowered)
    if iso:
        try:
            return date(int(iso.group(1)), int(iso.group(2)), int(iso.group(3)))
        except ValueError:
            logger.debug("Ignoring invalid ISO date in %r", text)

    words = re.findall(r"[a-z]+", lowered)
    for word in words:
        if word in KEYWORD_OFFSETS:
            return today + timedelta(days=KEYWORD_OFFSETS[word])

    relative = RELATIVE_RE.search(lowered)
    if relative:
        amount = int(relative.group(1))
        unit = relative.group(2)
        days = amount * 7 if unit.startswith("week") else amount
        return today + timedelta(days=days)

    offset = _weekday_offset(words, today)
    if offset is not None:
        return today + timedelta(days=offset)

    phrase = _date_phrase(lowered)
    if phrase is None:
        return None
    try:
        parsed = date_parser.parse(
            phrase,
            default=now.replace(hour=0, minute=0, second=0, microsecond=0),
        )
    except (ValueError, OverflowError):
        logger.debug("No date found in %r", text)
        return None
    return parsed.date()
