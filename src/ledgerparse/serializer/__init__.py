"""Serializer turning a Document back into ledger text."""

from ledgerparse.serializer.settings import SerializerSettings
from ledgerparse.serializer.writer import serialize, write

__all__ = ["SerializerSettings", "serialize", "write"]
