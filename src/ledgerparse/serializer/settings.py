"""Serializer configuration."""

from dataclasses import dataclass, replace

DEFAULT_TRANSACTION_DATE_FORMAT = "%Y-%m-%d"
DEFAULT_COMMODITY_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class SerializerSettings:
    """Formatting options for writing a Document back to text.

    Date formats are strftime patterns. Output re-parses only when the
    patterns produce fixed-width year, month and day fields.
    """

    indent: str = "  "
    eol: str = "\n"
    transaction_date_format: str = DEFAULT_TRANSACTION_DATE_FORMAT
    commodity_date_format: str = DEFAULT_COMMODITY_DATE_FORMAT
    posting_comments_sameline: bool = False

    def with_indent(self, indent: str) -> "SerializerSettings":
        return replace(self, indent=indent)

    def with_eol(self, eol: str) -> "SerializerSettings":
        return replace(self, eol=eol)

    def with_transaction_date_format(self, fmt: str) -> "SerializerSettings":
        return replace(self, transaction_date_format=fmt)

    def with_commodity_date_format(self, fmt: str) -> "SerializerSettings":
        return replace(self, commodity_date_format=fmt)

    def with_posting_comments_sameline(self, sameline: bool = True) -> "SerializerSettings":
        return replace(self, posting_comments_sameline=sameline)
