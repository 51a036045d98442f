"""Simplified journal view over a parsed Document.

The Document keeps every item, blank lines and free-standing comments
included, so it can be written back faithfully. A Journal is what consumers
usually want instead: transactions and prices only, with a comment block
that directly precedes a transaction merged into that transaction's comment.
"""

from dataclasses import dataclass, replace
from typing import Optional

from ledgerparse.domain.entities import (
    CommodityPrice,
    Document,
    EmptyLine,
    Include,
    LineComment,
    Transaction,
)
from ledgerparse.parser.ledger import parse_document


@dataclass(frozen=True)
class Journal:
    """Transactions and commodity prices of a document, in source order."""

    transactions: tuple[Transaction, ...] = ()
    commodity_prices: tuple[CommodityPrice, ...] = ()
    includes: tuple[str, ...] = ()

    def accounts(self) -> list[str]:
        """Sorted names of every account used by a posting."""
        return sorted(
            {posting.account for txn in self.transactions for posting in txn.postings}
        )


def _join(first: Optional[str], second: Optional[str]) -> Optional[str]:
    if first is None:
        return second
    if second is None:
        return first
    return f"{first}\n{second}"


def build_journal(document: Document) -> Journal:
    """Collect transactions and prices, attaching preceding comments.

    A run of LineComment items accumulates into a pending comment. A blank
    line or a commodity price discards it; the next transaction consumes
    it, placing it before the transaction's own comment.
    """
    transactions: list[Transaction] = []
    prices: list[CommodityPrice] = []
    includes: list[str] = []
    pending: Optional[str] = None

    for item in document.items:
        if isinstance(item, LineComment):
            pending = _join(pending, item.text)
        elif isinstance(item, Transaction):
            if pending is not None:
                item = replace(item, comment=_join(pending, item.comment))
            pending = None
            transactions.append(item)
        elif isinstance(item, CommodityPrice):
            pending = None
            prices.append(item)
        elif isinstance(item, EmptyLine):
            pending = None
        elif isinstance(item, Include):
            includes.append(item.path)

    return Journal(tuple(transactions), tuple(prices), tuple(includes))


def parse_journal(text: str) -> Journal:
    """Parse ``text`` and return its simplified journal view."""
    return build_journal(parse_document(text))
