"""Tests for date and datetime parsing."""

import pytest
from datetime import date, datetime

from ledgerparse.domain import errors
from ledgerparse.domain.errors import ValidationError
from ledgerparse.utils.date_parser import parse_date, parse_datetime, parse_price_datetime
from ledgerparse.utils.scanner import Backtrack


@pytest.mark.parametrize("text", ["2017-03-24", "2017/03/24", "2017.03.24", "2017-03/24"])
def test_parse_date_separators(text):
    """Test that every separator style yields the same date."""
    value, end = parse_date(text)
    assert value == date(2017, 3, 24)
    assert end == len(text)


def test_parse_date_at_offset():
    """Test parsing a date in the middle of a line."""
    text = "xx 2020-02-29 rest"
    value, end = parse_date(text, 3)
    assert value == date(2020, 2, 29)
    assert text[end:] == " rest"


def test_parse_date_invalid_month():
    """Test that a month of 13 is a calendar error, not a syntax error."""
    with pytest.raises(ValidationError) as exc_info:
        parse_date("2017-13-24")
    assert exc_info.value.kind == errors.NON_EXISTENT_DATE
    assert "2017-13-24" in str(exc_info.value)


def test_parse_date_non_leap_year():
    """Test that February 29th of a non-leap year is rejected."""
    with pytest.raises(ValidationError):
        parse_date("2019-02-29")


@pytest.mark.parametrize("text", ["17-03-24", "2017-3-24", "2017_03_24", "abcd-ef-gh", ""])
def test_parse_date_not_a_date(text):
    """Test that malformed dates backtrack instead of failing hard."""
    with pytest.raises(Backtrack):
        parse_date(text)


def test_parse_datetime():
    """Test parsing a date with a time of day."""
    value, end = parse_datetime("2017-03-24 17:15:23")
    assert value == datetime(2017, 3, 24, 17, 15, 23)
    assert end == 19


def test_parse_datetime_invalid_hour():
    """Test that an hour of 25 is a calendar error."""
    with pytest.raises(ValidationError) as exc_info:
        parse_datetime("2017-03-24 25:11:22")
    assert exc_info.value.kind == errors.NON_EXISTENT_DATE


def test_parse_price_datetime_without_time():
    """Test that a missing time defaults to midnight."""
    value, end = parse_price_datetime("2017-11-12 mBH")
    assert value == datetime(2017, 11, 12, 0, 0, 0)
    assert end == 10


def test_parse_price_datetime_with_time():
    """Test that a time is used when present."""
    value, _ = parse_price_datetime("2017-11-12 12:00:00 mBH")
    assert value == datetime(2017, 11, 12, 12, 0, 0)
