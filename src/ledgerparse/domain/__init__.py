"""Domain layer for ledgerparse: document model and error types."""

from ledgerparse.domain.entities import Document, Transaction, Posting, CommodityPrice
from ledgerparse.domain.errors import (
    LedgerError,
    ParseError,
    ValidationError,
    TrailingInputError,
)

__all__ = [
    "Document",
    "Transaction",
    "Posting",
    "CommodityPrice",
    "LedgerError",
    "ParseError",
    "ValidationError",
    "TrailingInputError",
]
