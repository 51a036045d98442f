"""Shared error messages and error types for ledger parsing."""

from typing import NamedTuple


class TrailEntry(NamedTuple):
    """One step of the grammar path that was attempted before a failure."""

    offset: int
    label: str


class LedgerError(ValueError):
    """Base class for ledger-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ParseError(LedgerError):
    """Input does not match the grammar at some position.

    Carries the full input, the offset of the failure and the trail of
    grammar alternatives that were attempted, innermost last.
    """

    def __init__(
        self,
        message: str,
        text: str = "",
        offset: int = 0,
        trail: tuple[TrailEntry, ...] = (),
    ):
        super().__init__(message)
        self.message = message
        self.text = text
        self.offset = offset
        self.trail = trail

    @property
    def remaining(self) -> str:
        """The unconsumed input at the point of failure."""
        return self.text[self.offset:]

    @property
    def line(self) -> int:
        """1-based line number of the failure."""
        return self.text.count("\n", 0, self.offset) + 1

    @property
    def column(self) -> int:
        """0-based column of the failure within its line."""
        return self.offset - (self.text.rfind("\n", 0, self.offset) + 1)

    def source_line(self) -> str:
        start = self.text.rfind("\n", 0, self.offset) + 1
        end = self.text.find("\n", self.offset)
        if end == -1:
            end = len(self.text)
        return self.text[start:end].rstrip("\r")

    def explain(self) -> str:
        """Render a caret-pointed diagnostic with the attempted grammar path."""
        lines = [
            self.message,
            f"line: {self.line}, column: {self.column}",
            self.source_line(),
            " " * self.column + "^",
        ]
        for entry in self.trail:
            lines.append(f"  at offset {entry.offset}: {entry.label}")
        return "\n".join(lines)


class ValidationError(ParseError):
    """Syntactically well-formed input that is logically invalid."""

    def __init__(
        self,
        kind: str,
        message: str,
        text: str = "",
        offset: int = 0,
        trail: tuple[TrailEntry, ...] = (),
    ):
        super().__init__(message, text, offset, trail)
        self.kind = kind


class TrailingInputError(ParseError):
    """The document loop stopped before consuming all input."""


NON_EXISTENT_DATE = "NonExistentDate"
MORE_THAN_ONE_ELIDED_POSTING = "MoreThanOneElidedPosting"
NO_POSTING_WITH_AMOUNT = "NoPostingWithAmount"
EMPTY_INCLUDE_PATH = "EmptyIncludePath"


def non_existent_date(value: str) -> str:
    """Return message for a date or time that is not on the calendar."""
    return f"'{value}' is not a valid calendar date or time"


def more_than_one_elided_posting() -> str:
    """Return message for a transaction with several postings lacking amounts."""
    return "Transaction has more than one elided posting (no amount and no balance)"


def no_posting_with_amount() -> str:
    """Return message for a lone elided posting."""
    return "Transaction has no posting with an amount to balance against"


def empty_include_path() -> str:
    return "Include directive has an empty path"


def no_item_matched() -> str:
    """Return message when no top-level item alternative matched."""
    return "Expected an empty line, comment, transaction, commodity price or include"
