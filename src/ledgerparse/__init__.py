"""Parse ledger-format accounting journals and write them back out."""

from ledgerparse.domain.entities import (
    Amount,
    AmountBalance,
    Commodity,
    CommodityPosition,
    CommodityPrice,
    Document,
    EmptyLine,
    Include,
    LineComment,
    Posting,
    PostingAmount,
    PostingMetadata,
    Reality,
    Tag,
    TotalPrice,
    Transaction,
    TransactionStatus,
    UnitPrice,
    ZeroBalance,
)
from ledgerparse.domain.errors import (
    LedgerError,
    ParseError,
    TrailingInputError,
    ValidationError,
)
from ledgerparse.domain.journal import Journal, build_journal, parse_journal
from ledgerparse.parser.ledger import parse_document
from ledgerparse.serializer import SerializerSettings, serialize, write


def parse(text: str) -> Document:
    """Parse ledger ``text`` into a Document; see ``parse_document``."""
    return parse_document(text)


# Import main lazily to avoid circular dependencies
def __getattr__(name):
    if name == "main":
        from ledgerparse.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = [
    "Amount",
    "AmountBalance",
    "Commodity",
    "CommodityPosition",
    "CommodityPrice",
    "Document",
    "EmptyLine",
    "Include",
    "Journal",
    "LedgerError",
    "LineComment",
    "ParseError",
    "Posting",
    "PostingAmount",
    "PostingMetadata",
    "Reality",
    "SerializerSettings",
    "Tag",
    "TotalPrice",
    "TrailingInputError",
    "Transaction",
    "TransactionStatus",
    "UnitPrice",
    "ValidationError",
    "ZeroBalance",
    "build_journal",
    "parse",
    "parse_document",
    "parse_journal",
    "serialize",
    "write",
]
