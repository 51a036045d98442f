"""Low-level scanning helpers shared by the grammar.

Every parser in ledgerparse is a plain function ``parse_x(text, pos)`` that
returns ``(value, new_pos)``. ``text`` is always the complete input and is
never sliced into a new working buffer, so a failed alternative leaves
nothing behind: the caller simply retries from the same ``pos``.

A parser that does not match raises :class:`Backtrack`. Ordered alternatives
catch it and try the next one; when every alternative fails the trail of
all attempts is kept so the final diagnostic can explain the grammar path.
"""

from typing import Any, Callable

from ledgerparse.domain.errors import TrailEntry, ValidationError

Parser = Callable[[str, int], tuple[Any, int]]

WHITE_CHARS = " \t"
EOL_CHARS = "\r\n"


class Backtrack(Exception):
    """Raised when a grammar alternative does not match at ``offset``."""

    def __init__(self, offset: int, label: str, trail: tuple[TrailEntry, ...] = ()):
        super().__init__(label)
        self.offset = offset
        self.label = label
        self.trail = trail

    def entries(self) -> tuple[TrailEntry, ...]:
        """Trail of this failure including its own entry, innermost last."""
        return (TrailEntry(self.offset, self.label),) + self.trail


def fail(pos: int, label: str) -> Backtrack:
    return Backtrack(pos, label)


def invalid(text: str, pos: int, kind: str, message: str) -> ValidationError:
    """Build a semantic failure; these are never backtracked over."""
    return ValidationError(kind, message, text, pos, (TrailEntry(pos, message),))


def is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def at_eol_or_eof(text: str, pos: int) -> bool:
    return pos >= len(text) or text[pos] == "\n" or text.startswith("\r\n", pos)


def expect(text: str, pos: int, literal: str) -> int:
    """Consume ``literal`` or backtrack."""
    if not text.startswith(literal, pos):
        raise fail(pos, f"expected '{literal}'")
    return pos + len(literal)


def parse_white_spaces(text: str, pos: int) -> tuple[str, int]:
    """One or more spaces or tabs."""
    end = skip_white_spaces(text, pos)
    if end == pos:
        raise fail(pos, "expected whitespace")
    return (text[pos:end], end)


def skip_white_spaces(text: str, pos: int) -> int:
    """Zero or more spaces or tabs."""
    while pos < len(text) and text[pos] in WHITE_CHARS:
        pos += 1
    return pos


def parse_eol_or_eof(text: str, pos: int) -> tuple[str, int]:
    """A ``\\n`` or ``\\r\\n`` line ending, or the end of the input."""
    if pos >= len(text):
        return ("", pos)
    if text[pos] == "\n":
        return ("\n", pos + 1)
    if text.startswith("\r\n", pos):
        return ("\r\n", pos + 2)
    raise fail(pos, "expected end of line")


def take_while(text: str, pos: int, predicate: Callable[[str], bool]) -> tuple[str, int]:
    end = pos
    while end < len(text) and predicate(text[end]):
        end += 1
    return (text[pos:end], end)


def take_until_eol(text: str, pos: int) -> tuple[str, int]:
    """Everything up to, not including, the next line ending."""
    return take_while(text, pos, lambda c: c not in EOL_CHARS)


def take_digits(text: str, pos: int, count: int) -> tuple[str, int]:
    """Exactly ``count`` ASCII digits."""
    digits, end = take_while(text, pos, is_digit)
    if len(digits) < count:
        raise fail(pos, f"expected {count} digits")
    return (text[pos:pos + count], pos + count)


def optional(parser: Parser, text: str, pos: int) -> tuple[Any, int]:
    """Run ``parser``; on a mismatch return ``(None, pos)`` unchanged."""
    try:
        return parser(text, pos)
    except Backtrack:
        return (None, pos)


def first_of(text: str, pos: int, alternatives: list[tuple[str, Parser]]) -> tuple[Any, int]:
    """Try labelled alternatives in order and return the first match.

    When all of them fail, the resulting Backtrack keeps every alternative's
    trail so the diagnostic shows what was attempted.
    """
    trail: list[TrailEntry] = []
    for label, parser in alternatives:
        try:
            return parser(text, pos)
        except Backtrack as e:
            trail.append(TrailEntry(pos, label))
            trail.extend(e.entries())
    names = ", ".join(label for label, _ in alternatives)
    raise Backtrack(pos, f"expected one of: {names}", tuple(trail))


def many0(parser: Parser, text: str, pos: int) -> tuple[list, int]:
    """Apply ``parser`` until it stops matching or stops consuming input."""
    values = []
    while True:
        try:
            value, end = parser(text, pos)
        except Backtrack:
            return (values, pos)
        if end == pos:
            return (values, pos)
        values.append(value)
        pos = end


def many1(parser: Parser, text: str, pos: int) -> tuple[list, int]:
    first, pos = parser(text, pos)
    rest, pos = many0(parser, text, pos)
    return ([first] + rest, pos)
