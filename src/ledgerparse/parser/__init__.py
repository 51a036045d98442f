"""Grammar parser turning ledger text into a Document."""

from ledgerparse.parser.ledger import parse_document

__all__ = ["parse_document"]
