"""Date parsing utilities."""

from datetime import date, datetime, time

from ledgerparse.domain import errors
from ledgerparse.utils.scanner import (
    fail,
    first_of,
    invalid,
    parse_white_spaces,
    take_digits,
)

DATE_SEPARATORS = "-/."


def _parse_date_separator(text: str, pos: int) -> int:
    if pos < len(text) and text[pos] in DATE_SEPARATORS:
        return pos + 1
    raise fail(pos, "expected date separator '-', '/' or '.'")


def _parse_date_fields(text: str, pos: int) -> tuple[tuple[int, int, int], int]:
    year, pos = take_digits(text, pos, 4)
    pos = _parse_date_separator(text, pos)
    month, pos = take_digits(text, pos, 2)
    pos = _parse_date_separator(text, pos)
    day, pos = take_digits(text, pos, 2)
    return ((int(year), int(month), int(day)), pos)


def _parse_time_fields(text: str, pos: int) -> tuple[tuple[int, int, int], int]:
    hour, pos = take_digits(text, pos, 2)
    if not text.startswith(":", pos):
        raise fail(pos, "expected ':'")
    minute, pos = take_digits(text, pos + 1, 2)
    if not text.startswith(":", pos):
        raise fail(pos, "expected ':'")
    second, pos = take_digits(text, pos + 1, 2)
    return ((int(hour), int(minute), int(second)), pos)


def parse_date(text: str, pos: int = 0) -> tuple[date, int]:
    """Parse a ``YYYY-MM-DD`` date at ``pos``.

    Each separator may independently be ``-``, ``/`` or ``.``, so
    "2017-03-24", "2017/03/24" and "2017.03.24" are the same date.

    Args:
        text: Full input text
        pos: Offset to start at

    Returns:
        Tuple of (date, offset after the date)

    Raises:
        Backtrack: If the text does not look like a date
        ValidationError: If the fields do not form a real calendar date
    """
    (year, month, day), end = _parse_date_fields(text, pos)
    try:
        return (date(year, month, day), end)
    except ValueError:
        raise invalid(
            text, pos, errors.NON_EXISTENT_DATE, errors.non_existent_date(text[pos:end])
        )


def parse_datetime(text: str, pos: int = 0) -> tuple[datetime, int]:
    """Parse ``YYYY-MM-DD HH:MM:SS`` at ``pos``.

    Raises:
        Backtrack: If the text does not look like a date and time
        ValidationError: If either part is not a real calendar value
    """
    (year, month, day), end = _parse_date_fields(text, pos)
    _, end = parse_white_spaces(text, end)
    (hour, minute, second), end = _parse_time_fields(text, end)
    try:
        return (datetime(year, month, day, hour, minute, second), end)
    except ValueError:
        raise invalid(
            text, pos, errors.NON_EXISTENT_DATE, errors.non_existent_date(text[pos:end])
        )


def _parse_date_as_datetime(text: str, pos: int) -> tuple[datetime, int]:
    value, end = parse_date(text, pos)
    return (datetime.combine(value, time()), end)


def parse_price_datetime(text: str, pos: int = 0) -> tuple[datetime, int]:
    """Datetime of a commodity price; a missing time means midnight."""
    return first_of(
        text,
        pos,
        [
            ("date and time", parse_datetime),
            ("date", _parse_date_as_datetime),
        ],
    )
