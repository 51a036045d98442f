"""Top-level ledger grammar: postings, transactions, prices and the item loop."""

import logging
import re

from ledgerparse.domain import errors
from ledgerparse.domain.entities import (
    CommodityPrice,
    Document,
    EmptyLine,
    Include,
    Item,
    LineComment,
    Posting,
    Transaction,
    TransactionStatus,
)
from ledgerparse.domain.errors import TrailingInputError
from ledgerparse.parser.account import parse_account
from ledgerparse.parser.metadata import parse_inline_comment, parse_metadata_block
from ledgerparse.utils.amount_parser import (
    parse_amount,
    parse_balance,
    parse_commodity,
    parse_posting_amount,
)
from ledgerparse.utils.date_parser import parse_date, parse_price_datetime
from ledgerparse.utils.scanner import (
    Backtrack,
    at_eol_or_eof,
    expect,
    fail,
    first_of,
    invalid,
    many1,
    optional,
    parse_eol_or_eof,
    parse_white_spaces,
    skip_white_spaces,
    take_until_eol,
)

logger = logging.getLogger(__name__)

LINE_COMMENT_CHARS = ";#%|*"

# Where a payee ends and the header's inline comment begins.
DESCRIPTION_END_RE = re.compile(r"(?:^|  |\t)[ \t]*;")


def parse_status(text: str, pos: int) -> tuple[TransactionStatus, int]:
    if text.startswith("*", pos):
        return (TransactionStatus.CLEARED, pos + 1)
    if text.startswith("!", pos):
        return (TransactionStatus.PENDING, pos + 1)
    raise fail(pos, "expected status '*' or '!'")


def _parse_separated_amount(text: str, pos: int):
    _, pos = parse_white_spaces(text, pos)
    return parse_posting_amount(text, pos)


def _parse_balance_assertion(text: str, pos: int):
    pos = skip_white_spaces(text, pos)
    pos = expect(text, pos, "=")
    pos = skip_white_spaces(text, pos)
    return parse_balance(text, pos)


def parse_posting(text: str, pos: int) -> tuple[Posting, int]:
    """Parse one indented posting line and the comment lines under it."""
    _, pos = parse_white_spaces(text, pos)
    status, pos = optional(parse_status, text, pos)
    pos = skip_white_spaces(text, pos)
    (account, reality), pos = parse_account(text, pos)
    amount, pos = optional(_parse_separated_amount, text, pos)
    balance, pos = optional(_parse_balance_assertion, text, pos)
    pos = skip_white_spaces(text, pos)
    block, pos = parse_metadata_block(text, pos)
    if not at_eol_or_eof(text, pos):
        raise fail(pos, "unexpected text after posting")
    posting = Posting(
        account=account,
        reality=reality,
        amount=amount,
        balance=balance,
        status=status,
        comment=block.comment,
        metadata=block.metadata,
    )
    return (posting, pos)


def _parse_next_posting(text: str, pos: int) -> tuple[tuple[int, Posting], int]:
    eol, pos = parse_eol_or_eof(text, pos)
    if not eol:
        raise fail(pos, "expected posting on the next line")
    posting, end = parse_posting(text, pos)
    return ((pos, posting), end)


def _parse_code(text: str, pos: int) -> tuple[str, int]:
    pos = expect(text, pos, "(")
    end = pos
    while end < len(text) and text[end] not in ")\r\n":
        end += 1
    if end == pos or not text.startswith(")", end):
        raise fail(pos, "expected code in parentheses")
    return (text[pos:end], end + 1)


def _parse_description(text: str, pos: int) -> tuple[str, int]:
    rest, end = take_until_eol(text, pos)
    match = DESCRIPTION_END_RE.search(rest)
    if match is not None:
        end = pos + match.start()
    return (text[pos:end].strip(), end)


def validate_postings(text: str, start: int, postings: list[tuple[int, Posting]]) -> None:
    """Enforce the elided-posting rules for one transaction.

    Raises:
        ValidationError: If more than one posting is elided, or the only
            posting is elided
    """
    elided = [offset for offset, posting in postings if posting.is_elided]
    if len(elided) > 1:
        raise invalid(
            text,
            elided[1],
            errors.MORE_THAN_ONE_ELIDED_POSTING,
            errors.more_than_one_elided_posting(),
        )
    if elided and len(postings) == 1:
        raise invalid(
            text, start, errors.NO_POSTING_WITH_AMOUNT, errors.no_posting_with_amount()
        )


def parse_transaction(text: str, pos: int) -> tuple[Transaction, int]:
    """Parse a transaction header, its comments and one or more postings."""
    start = pos
    date, pos = parse_date(text, pos)
    effective_date = None
    if text.startswith("=", pos):
        effective_date, pos = parse_date(text, pos + 1)
    if not at_eol_or_eof(text, pos):
        _, pos = parse_white_spaces(text, pos)
    status, pos = optional(parse_status, text, pos)
    pos = skip_white_spaces(text, pos)
    code, pos = optional(_parse_code, text, pos)
    pos = skip_white_spaces(text, pos)
    description, pos = _parse_description(text, pos)
    block, pos = parse_metadata_block(text, pos)
    postings, pos = many1(_parse_next_posting, text, pos)
    validate_postings(text, start, postings)
    transaction = Transaction(
        date=date,
        effective_date=effective_date,
        status=status,
        code=code,
        description=description,
        comment=block.comment,
        metadata=block.metadata,
        postings=tuple(posting for _, posting in postings),
    )
    return (transaction, pos)


def parse_commodity_price(text: str, pos: int) -> tuple[CommodityPrice, int]:
    """Parse ``P <datetime> <commodity> <amount>``."""
    pos = expect(text, pos, "P")
    _, pos = parse_white_spaces(text, pos)
    moment, pos = parse_price_datetime(text, pos)
    _, pos = parse_white_spaces(text, pos)
    name, pos = parse_commodity(text, pos)
    _, pos = parse_white_spaces(text, pos)
    amount, pos = parse_amount(text, pos)
    pos = skip_white_spaces(text, pos)
    _, pos = optional(parse_inline_comment, text, pos)
    return (CommodityPrice(moment, name, amount), pos)


def parse_include(text: str, pos: int) -> tuple[Include, int]:
    """Parse ``include <path>``; the path is recorded, not resolved."""
    start = pos
    pos = expect(text, pos, "include")
    _, pos = parse_white_spaces(text, pos)
    path, pos = take_until_eol(text, pos)
    path = path.strip()
    if not path:
        raise invalid(text, start, errors.EMPTY_INCLUDE_PATH, errors.empty_include_path())
    return (Include(path), pos)


def parse_empty_line(text: str, pos: int) -> tuple[EmptyLine, int]:
    pos = skip_white_spaces(text, pos)
    if not at_eol_or_eof(text, pos):
        raise fail(pos, "expected empty line")
    return (EmptyLine(), pos)


def parse_line_comment(text: str, pos: int) -> tuple[LineComment, int]:
    """Parse a free-standing comment line; its text is not tag-parsed."""
    pos = skip_white_spaces(text, pos)
    if pos >= len(text) or text[pos] not in LINE_COMMENT_CHARS:
        raise fail(pos, f"expected one of '{LINE_COMMENT_CHARS}'")
    comment, pos = take_until_eol(text, pos + 1)
    return (LineComment(comment.strip()), pos)


def _terminated(parser):
    def parse(text: str, pos: int):
        value, pos = parser(text, pos)
        _, pos = parse_eol_or_eof(text, pos)
        return (value, pos)

    return parse


ITEM_PARSERS = [
    ("empty line", _terminated(parse_empty_line)),
    ("line comment", _terminated(parse_line_comment)),
    ("transaction", _terminated(parse_transaction)),
    ("commodity price", _terminated(parse_commodity_price)),
    ("include", _terminated(parse_include)),
]


def parse_ledger_item(text: str, pos: int) -> tuple[Item, int]:
    """Strip one top-level item from the front of ``text[pos:]``."""
    return first_of(text, pos, ITEM_PARSERS)


def parse_document(text: str) -> Document:
    """Parse a whole ledger document.

    Args:
        text: Complete ledger text

    Returns:
        Document with every top-level item in source order

    Raises:
        ValidationError: If the input is well formed but logically invalid
        TrailingInputError: If some input could not be parsed as an item
    """
    items: list[Item] = []
    pos = 0
    while pos < len(text):
        try:
            item, pos = parse_ledger_item(text, pos)
        except Backtrack as e:
            logger.debug("No ledger item matched at offset %d after %d items", pos, len(items))
            raise TrailingInputError(errors.no_item_matched(), text, pos, e.entries())
        items.append(item)
    document = Document(tuple(items))
    logger.debug(
        "Parsed %d items (%d transactions, %d commodity prices)",
        len(document.items),
        len(document.transactions),
        len(document.commodity_prices),
    )
    return document
