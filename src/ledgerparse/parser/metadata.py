"""Metadata comments attached to transaction headers and postings.

A header or posting may be followed by an inline ``; comment`` and by any
number of ``; comment`` lines below it. Each comment body is one of, in
priority order:

1. a date directive: ``[date]``, ``[=effective_date]`` or ``[date=effective]``
2. a tag with a value: ``Name: text`` (string) or ``Name:: value`` (typed as
   integer, float or ``[date]``)
3. free text, possibly embedding tag lists like ``:tag1:tag2:``

The bodies are folded into a single comment string and a PostingMetadata.
"""

import re
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Union

from ledgerparse.domain.entities import PostingMetadata, Tag, TagValue
from ledgerparse.utils.date_parser import parse_date
from ledgerparse.utils.scanner import (
    Backtrack,
    expect,
    fail,
    many0,
    optional,
    parse_eol_or_eof,
    skip_white_spaces,
    take_until_eol,
)

TAG_WITH_VALUE_RE = re.compile(r"([^\s:]+)(::?)\s+(\S.*)")
INTEGER_RE = re.compile(r"-?[0-9]+")
FLOAT_RE = re.compile(r"-?(?:[0-9]+\.[0-9]*|\.[0-9]+|[0-9]+)(?:[eE][-+]?[0-9]+)?")
DATE_RE = r"[0-9]{4}[-/.][0-9]{2}[-/.][0-9]{2}"
DATE_DIRECTIVE_RE = re.compile(rf"\[(?:{DATE_RE})?(?:=(?:{DATE_RE}))?\]")
TAG_LIST_RE = re.compile(r"(?:^|(?<=\s)):((?:[^\s:]+:)+)(?=\s|$)")


@dataclass(frozen=True)
class DateDirective:
    date: Optional[date]
    effective_date: Optional[date]


@dataclass(frozen=True)
class TagDirective:
    tag: Tag


@dataclass(frozen=True)
class FreeComment:
    text: Optional[str]
    tags: tuple[Tag, ...]


CommentBody = Union[DateDirective, TagDirective, FreeComment]


@dataclass(frozen=True)
class MetadataBlock:
    """Result of folding the comment lines under a header or posting."""

    comment: Optional[str] = None
    metadata: PostingMetadata = PostingMetadata()


def _parse_date_directive(text: str, start: int, end: int) -> DateDirective:
    if DATE_DIRECTIVE_RE.fullmatch(text, start, end) is None:
        raise fail(start, "expected [date=effective_date]")
    pos = expect(text, start, "[")
    primary, pos = optional(parse_date, text, pos)
    effective = None
    if text.startswith("=", pos):
        effective, pos = parse_date(text, pos + 1)
    if primary is None and effective is None:
        raise fail(pos, "expected date")
    pos = expect(text, pos, "]")
    if pos != end:
        raise fail(pos, "unexpected text after date directive")
    return DateDirective(primary, effective)


def _parse_typed_value(text: str, start: int, value: str) -> TagValue:
    if INTEGER_RE.fullmatch(value):
        return int(value)
    if FLOAT_RE.fullmatch(value):
        return float(value)
    if value.startswith("[") and value.endswith("]"):
        parsed, end = parse_date(text, start + 1)
        if end == start + len(value) - 1:
            return parsed
    raise fail(start, f"'{value}' is not an integer, float or [date]")


def _parse_tag_with_value(text: str, start: int, end: int) -> TagDirective:
    match = TAG_WITH_VALUE_RE.fullmatch(text, start, end)
    if match is None:
        raise fail(start, "expected 'Name: value'")
    name, colons, value = match.groups()
    if colons == ":":
        return TagDirective(Tag(name, value))
    return TagDirective(Tag(name, _parse_typed_value(text, match.start(3), value)))


def _parse_free_comment(text: str, start: int, end: int) -> FreeComment:
    body = text[start:end]
    tags = []
    for match in TAG_LIST_RE.finditer(body):
        tags.extend(Tag(name) for name in match.group(1).split(":") if name)
    if not tags:
        return FreeComment(body, ())
    prose = " ".join(part.strip() for part in TAG_LIST_RE.split(body)[::2] if part.strip())
    return FreeComment(prose or None, tuple(tags))


def classify_comment(text: str, start: int, end: int) -> CommentBody:
    """Classify the comment body ``text[start:end]``."""
    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    for parser in (_parse_date_directive, _parse_tag_with_value):
        try:
            return parser(text, start, end)
        except Backtrack:
            continue
    return _parse_free_comment(text, start, end)


def _parse_comment_body(text: str, pos: int) -> tuple[CommentBody, int]:
    pos = expect(text, pos, ";")
    _, end = take_until_eol(text, pos)
    return (classify_comment(text, pos, end), end)


def parse_inline_comment(text: str, pos: int) -> tuple[CommentBody, int]:
    """A ``;`` comment on the same line, after optional whitespace."""
    return _parse_comment_body(text, skip_white_spaces(text, pos))


def parse_comment_line(text: str, pos: int) -> tuple[CommentBody, int]:
    """A ``;`` comment on the following line, indented or not."""
    eol, pos = parse_eol_or_eof(text, pos)
    if not eol:
        raise fail(pos, "expected end of line")
    pos = skip_white_spaces(text, pos)
    return _parse_comment_body(text, pos)


def fold_comments(bodies: list[CommentBody]) -> MetadataBlock:
    """Merge comment bodies; later date directives override earlier ones."""
    comments: list[str] = []
    metadata = PostingMetadata()
    for body in bodies:
        if isinstance(body, DateDirective):
            if body.date is not None:
                metadata = replace(metadata, date=body.date)
            if body.effective_date is not None:
                metadata = replace(metadata, effective_date=body.effective_date)
        elif isinstance(body, TagDirective):
            metadata = replace(metadata, tags=metadata.tags + (body.tag,))
        else:
            if body.text is not None:
                comments.append(body.text)
            if body.tags:
                metadata = replace(metadata, tags=metadata.tags + body.tags)
    return MetadataBlock("\n".join(comments) if comments else None, metadata)


def parse_metadata_block(text: str, pos: int) -> tuple[MetadataBlock, int]:
    """Parse an optional inline comment plus following comment lines."""
    inline, pos = optional(parse_inline_comment, text, pos)
    lines, pos = many0(parse_comment_line, text, pos)
    bodies = ([inline] if inline is not None else []) + lines
    return (fold_comments(bodies), pos)
