"""Write a Document back to ledger text.

Writing is a pure function of the Document and the SerializerSettings; the
source text is never consulted. Each ``write_*`` function appends to a sink
that only needs a ``write(str)`` method, so files, sockets and StringIO all
work and any OSError comes from the sink alone.
"""

import io
import math
from datetime import date
from decimal import Decimal
from typing import Optional, Protocol

from ledgerparse.domain.entities import (
    Amount,
    AmountBalance,
    Balance,
    CommodityPosition,
    CommodityPrice,
    Document,
    EmptyLine,
    Include,
    Item,
    LineComment,
    Posting,
    PostingAmount,
    PostingMetadata,
    Price,
    Reality,
    Tag,
    TotalPrice,
    Transaction,
)
from ledgerparse.domain.errors import ValidationError
from ledgerparse.parser.metadata import FreeComment, classify_comment
from ledgerparse.serializer.settings import SerializerSettings
from ledgerparse.utils.amount_parser import is_commodity_char


class Sink(Protocol):
    def write(self, s: str, /) -> object: ...


def quantity_to_str(quantity: Decimal) -> str:
    return format(quantity, "f")


def commodity_to_str(name: str) -> str:
    """Quote a commodity name that would not re-parse unquoted.

    Raises:
        ValueError: If no quoting of the name reads back as the same name
    """
    if not name or name.endswith("\\") or "\n" in name or "\r" in name:
        raise ValueError(f"Commodity name {name!r} cannot be written as ledger text")
    if all(is_commodity_char(c) for c in name):
        return name
    return '"' + name.replace('"', '\\"') + '"'


def amount_to_str(amount: Amount) -> str:
    name = commodity_to_str(amount.commodity.name)
    quantity = quantity_to_str(amount.quantity)
    if amount.commodity.position == CommodityPosition.LEFT:
        return f"{name}{quantity}"
    return f"{quantity} {name}"


def lot_price_to_str(price: Price) -> str:
    if isinstance(price, TotalPrice):
        return "{{" + amount_to_str(price.amount) + "}}"
    return "{" + amount_to_str(price.amount) + "}"


def price_to_str(price: Price) -> str:
    if isinstance(price, TotalPrice):
        return "@@ " + amount_to_str(price.amount)
    return "@ " + amount_to_str(price.amount)


def posting_amount_to_str(posting_amount: PostingAmount) -> str:
    parts = [amount_to_str(posting_amount.amount)]
    if posting_amount.lot_price is not None:
        parts.append(lot_price_to_str(posting_amount.lot_price))
    if posting_amount.price is not None:
        parts.append(price_to_str(posting_amount.price))
    return " ".join(parts)


def balance_to_str(balance: Balance) -> str:
    if isinstance(balance, AmountBalance):
        return amount_to_str(balance.amount)
    return "0"


def account_to_str(account: str, reality: Reality) -> str:
    if reality == Reality.BALANCED_VIRTUAL:
        return f"[{account}]"
    if reality == Reality.UNBALANCED_VIRTUAL:
        return f"({account})"
    return account


def comment_to_str(text: str, marker: str = ";") -> str:
    return f"{marker} {text}" if text else marker


def tag_to_str(tag: Tag, settings: SerializerSettings) -> str:
    """Render a tag as the body of a comment line."""
    value = tag.value
    if value is None:
        return f":{tag.name}:"
    if isinstance(value, str):
        return f"{tag.name}: {value}"
    if isinstance(value, date):
        return f"{tag.name}:: [{value.strftime(settings.transaction_date_format)}]"
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Tag {tag.name!r} has a value that cannot be written: {value!r}")
        return f"{tag.name}:: {value!r}"
    return f"{tag.name}:: {value}"


def date_directive_to_str(
    metadata: PostingMetadata, settings: SerializerSettings
) -> Optional[str]:
    """The ``[date=effective]`` body for a date override, if there is one."""
    if metadata.date is None and metadata.effective_date is None:
        return None
    fmt = settings.transaction_date_format
    directive = metadata.date.strftime(fmt) if metadata.date is not None else ""
    if metadata.effective_date is not None:
        directive += "=" + metadata.effective_date.strftime(fmt)
    return f"[{directive}]"


def reads_as_comment(line: str) -> bool:
    """True if ``; line`` parses back as plain comment text with no metadata."""
    try:
        return classify_comment(line, 0, len(line)) == FreeComment(line.strip(), ())
    except ValidationError:
        return False


def metadata_bodies(
    comment: Optional[str],
    metadata: PostingMetadata,
    settings: SerializerSettings,
    tags_first: bool,
) -> list[str]:
    """Comment line bodies for a comment plus its metadata.

    A comment line that would read back as a tag or a date directive is
    written after one of the plain ``:name:`` tags, as in
    ``; :trip: Note: paid cash``. Tag order and comment order both survive.

    Raises:
        ValueError: If a comment line cannot be written without changing
            its meaning
    """
    lines = comment.split("\n") if comment is not None else []
    tags = metadata.tags
    ambiguous = [index for index, line in enumerate(lines) if not reads_as_comment(line)]
    markers = [index for index, tag in enumerate(tags) if tag.value is None]
    if len(ambiguous) > len(markers):
        line = lines[ambiguous[len(markers)]]
        raise ValueError(f"Comment line {line!r} would read back as metadata")
    if not ambiguous:
        carried = {}
    elif tags_first:
        carried = dict(zip(ambiguous, markers[-len(ambiguous):]))
    else:
        carried = dict(zip(ambiguous, markers))

    # Where to stop writing tags before each line when tags come first.
    stops = []
    stop = len(tags)
    for index in reversed(range(len(lines))):
        stop = carried.get(index, stop)
        stops.append(stop)
    stops.reverse()

    directive = date_directive_to_str(metadata, settings)
    bodies = [directive] if directive is not None and tags_first else []
    pending = 0
    for index, line in enumerate(lines):
        stop = stops[index] if tags_first else carried.get(index, pending)
        bodies.extend(tag_to_str(tag, settings) for tag in tags[pending:stop])
        pending = max(pending, stop)
        if index not in carried:
            bodies.append(line)
            continue
        body = f"{tag_to_str(tags[stop], settings)} {line}"
        if classify_comment(body, 0, len(body)) != FreeComment(line.strip(), (tags[stop],)):
            raise ValueError(f"Comment line {line!r} would read back as metadata")
        bodies.append(body)
        pending = stop + 1
    if directive is not None and not tags_first:
        bodies.append(directive)
    bodies.extend(tag_to_str(tag, settings) for tag in tags[pending:])
    return bodies


def _write_comment_lines(sink: Sink, bodies: list[str], settings: SerializerSettings) -> None:
    for body in bodies:
        sink.write(f"{settings.eol}{settings.indent}{comment_to_str(body)}")


def account_separator(settings: SerializerSettings) -> str:
    """The indent, unless it is too narrow to end an account name."""
    if "\t" in settings.indent or "  " in settings.indent:
        return settings.indent
    return "  "


def write_posting(sink: Sink, posting: Posting, settings: SerializerSettings) -> None:
    """Write a posting without its leading indent or trailing line ending."""
    separator = account_separator(settings)
    if posting.status is not None:
        sink.write(f"{posting.status.value} ")
    sink.write(account_to_str(posting.account, posting.reality))
    if posting.amount is not None:
        sink.write(separator + posting_amount_to_str(posting.amount))
    if posting.balance is not None:
        sink.write(" = " if posting.amount is not None else separator + "= ")
        sink.write(balance_to_str(posting.balance))

    comment = posting.comment
    if (
        comment is not None
        and settings.posting_comments_sameline
        and "\n" not in comment
        and reads_as_comment(comment)
    ):
        sink.write(separator + comment_to_str(comment))
        comment = None
    _write_comment_lines(
        sink, metadata_bodies(comment, posting.metadata, settings, tags_first=True), settings
    )


def write_transaction(sink: Sink, transaction: Transaction, settings: SerializerSettings) -> None:
    """Write a transaction without its trailing line ending."""
    fmt = settings.transaction_date_format
    sink.write(transaction.date.strftime(fmt))
    if transaction.effective_date is not None:
        sink.write("=" + transaction.effective_date.strftime(fmt))
    if transaction.status is not None:
        sink.write(" " + transaction.status.value)
    if transaction.code is not None:
        sink.write(f" ({transaction.code})")
    if transaction.description:
        sink.write(" " + transaction.description)

    bodies = metadata_bodies(transaction.comment, transaction.metadata, settings, tags_first=False)
    _write_comment_lines(sink, bodies, settings)

    for posting in transaction.postings:
        sink.write(settings.eol + settings.indent)
        write_posting(sink, posting, settings)


def write_commodity_price(sink: Sink, price: CommodityPrice, settings: SerializerSettings) -> None:
    sink.write(
        "P {} {} {}".format(
            price.datetime.strftime(settings.commodity_date_format),
            commodity_to_str(price.commodity_name),
            amount_to_str(price.amount),
        )
    )


def write_item(sink: Sink, item: Item, settings: SerializerSettings) -> None:
    """Write one top-level item terminated by the configured line ending."""
    if isinstance(item, EmptyLine):
        pass
    elif isinstance(item, LineComment):
        sink.write(comment_to_str(item.text))
    elif isinstance(item, Transaction):
        write_transaction(sink, item, settings)
    elif isinstance(item, CommodityPrice):
        write_commodity_price(sink, item, settings)
    elif isinstance(item, Include):
        sink.write(f"include {item.path}")
    else:
        raise TypeError(f"Unknown ledger item: {item!r}")
    sink.write(settings.eol)


def write(document: Document, sink: Sink, settings: Optional[SerializerSettings] = None) -> None:
    """Write ``document`` to ``sink``.

    Raises:
        OSError: Only if the sink itself fails
    """
    settings = settings or SerializerSettings()
    previous = None
    for item in document.items:
        if isinstance(item, LineComment) and isinstance(previous, Transaction):
            # A ";" line here would read back as a comment on the last posting.
            sink.write(comment_to_str(item.text, "#") + settings.eol)
        else:
            write_item(sink, item, settings)
        previous = item


def serialize(document: Document, settings: Optional[SerializerSettings] = None) -> str:
    """Return the text of ``document`` under ``settings``."""
    buffer = io.StringIO()
    write(document, buffer, settings)
    return buffer.getvalue()
