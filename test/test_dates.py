"""
Tests for free-text due-date parsing.
"""

import doctest
from datetime import date, datetime

import pytest

import taskpad.dates as dates

NOW = datetime(2024, 5, 15, 18, 30)  # Wednesday


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("2024-06-01", date(2024, 6, 1)),
        ("file taxes by 2025-01-31 #money", date(2025, 1, 31)),
        ("today", date(2024, 5, 15)),
        ("call bank Tomorrow", date(2024, 5, 16)),
        ("yesterday", date(2024, 5, 14)),
        ("friday", date(2024, 5, 17)),
        ("wednesday", date(2024, 5, 15)),
        ("next wednesday", date(2024, 5, 22)),
        ("standup on mon", date(2024, 5, 20)),
        ("next sat", date(2024, 5, 18)),
        ("fri", date(2024, 5, 17)),
        ("3rd of june", date(2024, 6, 3)),
        ("submit report June 3, 2025", date(2025, 6, 3)),
        ("in 3 days", date(2024, 5, 18)),
        ("in 1 week", date(2024, 5, 22)),
        ("dentist June 3", date(2024, 6, 3)),
        ("party 7/4", date(2024, 7, 4)),
    ],
)
@pytest.mark.unit
def test_parse_due_date_recognizes_dates(text, expected):
    """
    Ensure supported date expressions resolve against the reference time.

    Parameters
    ----------
    text : str
        Free text.
    expected : date
        Expected date.

    Returns
    -------
    None
        This test asserts date parsing.
    """
    assert dates.parse_due_date(text, NOW) == expected


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "buy milk #errand #urgent",
        "Pay rent",
        "read chapter 3",
        "someday maybe",
        "2024-13-45",
        "buy sun cream",
        "sat exam prep",
        "I may call mom",
        "wed invitations",
        "fix mar bars",
        "call mon",
        "read chapter 3 in March",
    ],
)
@pytest.mark.unit
def test_parse_due_date_returns_none_without_date(text):
    """
    Ensure text without a recognizable date yields None.

    Parameters
    ----------
    text : str
        Free text.

    Returns
    -------
    None
        This test asserts parse failures degrade to None.
    """
    assert dates.parse_due_date(text, NOW) is None


@pytest.mark.unit
def test_parse_due_date_defaults_to_current_time():
    """
    Ensure the reference time defaults to now.

    Returns
    -------
    None
        This test asserts the default clock.
    """
    assert dates.parse_due_date("today") == date.today()


@pytest.mark.unit
def test_dates_doctest_examples():
    """
    Run doctest examples embedded in date helpers.

    Returns
    -------
    None
        This test asserts doctest coverage for date helpers.
    """
    results = doctest.testmod(dates)
    assert results.failed == 0
