"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation

from ledgerparse.domain.entities import (
    Amount,
    AmountBalance,
    Balance,
    Commodity,
    CommodityPosition,
    PostingAmount,
    Price,
    TotalPrice,
    UnitPrice,
    ZeroBalance,
)
from ledgerparse.utils.scanner import (
    expect,
    fail,
    first_of,
    is_digit,
    optional,
    skip_white_spaces,
    take_while,
)

# Characters that can never appear in an unquoted commodity symbol.
RESERVED_COMMODITY_CHARS = frozenset("{}[]()~`!@#%^&*-=+\\'\",./?;")


def is_commodity_char(c: str) -> bool:
    return not (is_digit(c) or c.isspace() or c in RESERVED_COMMODITY_CHARS)


def _parse_grouped_integer(text: str, pos: int) -> tuple[str, int]:
    leading, end = take_while(text, pos, is_digit)
    if not 1 <= len(leading) <= 3:
        raise fail(pos, "expected 1 to 3 leading digits")
    groups = []
    while text.startswith(",", end):
        group, after = take_while(text, end + 1, is_digit)
        if len(group) != 3:
            break
        groups.append(group)
        end = after
    if not groups:
        raise fail(end, "expected ',' followed by three digits")
    return (leading + "".join(groups), end)


def _parse_plain_integer(text: str, pos: int) -> tuple[str, int]:
    digits, end = take_while(text, pos, is_digit)
    if not digits:
        raise fail(pos, "expected digits")
    return (digits, end)


def parse_quantity(text: str, pos: int = 0) -> tuple[Decimal, int]:
    """Parse a decimal quantity such as "1000", "-12.13" or "12,456,132.14".

    Thousands grouping is tried before a plain digit run; the two forms
    never mix within one quantity.

    Args:
        text: Full input text
        pos: Offset to start at

    Returns:
        Tuple of (quantity, offset after the quantity)

    Raises:
        Backtrack: If no quantity starts at ``pos``
    """
    start = pos
    sign = ""
    if text.startswith("-", pos):
        sign = "-"
        pos += 1
    integer, pos = first_of(
        text,
        pos,
        [
            ("grouped digits", _parse_grouped_integer),
            ("digits", _parse_plain_integer),
        ],
    )
    fraction = ""
    if text.startswith(".", pos):
        digits, end = take_while(text, pos + 1, is_digit)
        if digits:
            fraction = "." + digits
            pos = end
    try:
        return (Decimal(sign + integer + fraction), pos)
    except InvalidOperation:
        raise fail(start, "malformed decimal quantity")


def _parse_quoted_commodity(text: str, pos: int) -> tuple[str, int]:
    pos = expect(text, pos, '"')
    chars = []
    while pos < len(text):
        c = text[pos]
        if c == "\\" and text.startswith('"', pos + 1):
            chars.append('"')
            pos += 2
        elif c == '"':
            if not chars:
                raise fail(pos, "empty quoted commodity")
            return ("".join(chars), pos + 1)
        elif c in "\r\n":
            break
        else:
            chars.append(c)
            pos += 1
    raise fail(pos, "unterminated quoted commodity")


def _parse_unquoted_commodity(text: str, pos: int) -> tuple[str, int]:
    name, end = take_while(text, pos, is_commodity_char)
    if not name:
        raise fail(pos, "expected commodity symbol")
    return (name, end)


def parse_commodity(text: str, pos: int = 0) -> tuple[str, int]:
    """Parse a quoted or unquoted commodity symbol."""
    return first_of(
        text,
        pos,
        [
            ("quoted commodity", _parse_quoted_commodity),
            ("unquoted commodity", _parse_unquoted_commodity),
        ],
    )


def _parse_left_amount(text: str, pos: int) -> tuple[Amount, int]:
    negative = text.startswith("-", pos)
    if negative:
        pos += 1
    pos = skip_white_spaces(text, pos)
    name, pos = parse_commodity(text, pos)
    pos = skip_white_spaces(text, pos)
    quantity, pos = parse_quantity(text, pos)
    if negative:
        quantity = -quantity
    return (Amount(quantity, Commodity(name, CommodityPosition.LEFT)), pos)


def _parse_right_amount(text: str, pos: int) -> tuple[Amount, int]:
    quantity, pos = parse_quantity(text, pos)
    pos = skip_white_spaces(text, pos)
    name, pos = parse_commodity(text, pos)
    return (Amount(quantity, Commodity(name, CommodityPosition.RIGHT)), pos)


def parse_amount(text: str, pos: int = 0) -> tuple[Amount, int]:
    """Parse an amount such as "$1.20", "-$ 1.20" or "1.20 USD".

    Commodity-first is attempted before quantity-first because a leading
    "-" is ambiguous until the commodity token is seen.
    """
    return first_of(
        text,
        pos,
        [
            ("commodity then quantity", _parse_left_amount),
            ("quantity then commodity", _parse_right_amount),
        ],
    )


def _parse_zero_balance(text: str, pos: int) -> tuple[Balance, int]:
    return (ZeroBalance(), expect(text, pos, "0"))


def _parse_amount_balance(text: str, pos: int) -> tuple[Balance, int]:
    amount, pos = parse_amount(text, pos)
    return (AmountBalance(amount), pos)


def parse_balance(text: str, pos: int = 0) -> tuple[Balance, int]:
    """Parse a balance assertion value; a bare "0" needs no commodity."""
    return first_of(
        text,
        pos,
        [
            ("amount", _parse_amount_balance),
            ("zero", _parse_zero_balance),
        ],
    )


def _parse_bracketed_amount(text: str, pos: int, opening: str, closing: str) -> tuple[Amount, int]:
    pos = expect(text, pos, opening)
    pos = skip_white_spaces(text, pos)
    amount, pos = parse_amount(text, pos)
    pos = skip_white_spaces(text, pos)
    return (amount, expect(text, pos, closing))


def _parse_total_lot_price(text: str, pos: int) -> tuple[Price, int]:
    amount, pos = _parse_bracketed_amount(text, pos, "{{", "}}")
    return (TotalPrice(amount), pos)


def _parse_unit_lot_price(text: str, pos: int) -> tuple[Price, int]:
    amount, pos = _parse_bracketed_amount(text, pos, "{", "}")
    return (UnitPrice(amount), pos)


def parse_lot_price(text: str, pos: int = 0) -> tuple[Price, int]:
    """Parse ``{amount}`` (unit) or ``{{amount}}`` (total) after whitespace."""
    pos = skip_white_spaces(text, pos)
    return first_of(
        text,
        pos,
        [
            ("total lot price", _parse_total_lot_price),
            ("unit lot price", _parse_unit_lot_price),
        ],
    )


def _parse_total_price(text: str, pos: int) -> tuple[Price, int]:
    pos = expect(text, pos, "@@")
    amount, pos = parse_amount(text, skip_white_spaces(text, pos))
    return (TotalPrice(amount), pos)


def _parse_unit_price(text: str, pos: int) -> tuple[Price, int]:
    pos = expect(text, pos, "@")
    amount, pos = parse_amount(text, skip_white_spaces(text, pos))
    return (UnitPrice(amount), pos)


def parse_price(text: str, pos: int = 0) -> tuple[Price, int]:
    """Parse ``@ amount`` (unit) or ``@@ amount`` (total) after whitespace."""
    pos = skip_white_spaces(text, pos)
    return first_of(
        text,
        pos,
        [
            ("total price", _parse_total_price),
            ("unit price", _parse_unit_price),
        ],
    )


def parse_posting_amount(text: str, pos: int = 0) -> tuple[PostingAmount, int]:
    """Parse an amount followed by optional lot price and price suffixes."""
    amount, pos = parse_amount(text, pos)
    lot_price, pos = optional(parse_lot_price, text, pos)
    price, pos = optional(parse_price, text, pos)
    return (PostingAmount(amount, lot_price, price), pos)
