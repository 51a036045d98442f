"""Tests for comment classification and metadata folding."""

import pytest
from datetime import date

from ledgerparse.domain.entities import PostingMetadata, Tag
from ledgerparse.domain.errors import ValidationError
from ledgerparse.parser.metadata import (
    DateDirective,
    FreeComment,
    MetadataBlock,
    TagDirective,
    classify_comment,
    fold_comments,
    parse_comment_line,
    parse_metadata_block,
)
from ledgerparse.utils.scanner import Backtrack


def classify(body: str):
    return classify_comment(body, 0, len(body))


class TestClassifyComment:
    """Tests for classify_comment."""

    def test_date_directive(self):
        """Test a primary date override."""
        assert classify(" [2018-10-01]") == DateDirective(date(2018, 10, 1), None)

    def test_effective_date_directive(self):
        """Test an effective date override on its own."""
        assert classify("[=2018-10-14]") == DateDirective(None, date(2018, 10, 14))

    def test_both_dates(self):
        """Test a directive with both dates."""
        assert classify("[2018-10-01=2018-10-14]") == DateDirective(
            date(2018, 10, 1), date(2018, 10, 14)
        )

    def test_invalid_date_in_directive(self):
        """Test that a calendar error in a directive is not swallowed."""
        with pytest.raises(ValidationError):
            classify("[2018-02-30]")

    def test_string_tag(self):
        """Test a Name: value tag."""
        assert classify(" Payee: Corner Shop ") == TagDirective(Tag("Payee", "Corner Shop"))

    def test_integer_tag(self):
        """Test a typed integer tag."""
        assert classify("Count:: 42") == TagDirective(Tag("Count", 42))

    def test_float_tag(self):
        """Test a typed float tag."""
        assert classify("Rate:: -0.25") == TagDirective(Tag("Rate", -0.25))

    def test_date_tag(self):
        """Test a typed date tag."""
        assert classify("Due:: [2024-02-01]") == TagDirective(Tag("Due", date(2024, 2, 1)))

    def test_untyped_value_falls_back_to_free_text(self):
        """Test that a typed tag with an unusable value is kept as text."""
        assert classify("Count:: many") == FreeComment("Count:: many", ())

    def test_nan_is_not_a_float_tag(self):
        """Test that NaN never becomes a tag value."""
        assert classify("Rate:: nan") == FreeComment("Rate:: nan", ())

    @pytest.mark.parametrize("value", ["1_000", "infinity", "inf", "+5", "1,5"])
    def test_loose_numbers_stay_free_text(self, value):
        """Test that only plain decimal numbers become float tags."""
        body = f"Qty:: {value}"
        assert classify(body) == FreeComment(body, ())

    @pytest.mark.parametrize("value,expected", [("5.", 5.0), ("1e+20", 1e20), (".5", 0.5)])
    def test_float_forms(self, value, expected):
        """Test the float spellings the writer produces."""
        assert classify(f"Rate:: {value}") == TagDirective(Tag("Rate", expected))

    def test_invalid_date_in_prose_is_free_text(self):
        """Test that prose starting with a bad bracketed date stays a comment."""
        body = "[2019-02-29] typo on statement"
        assert classify(body) == FreeComment(body, ())

    def test_bracketed_text_is_free_text(self):
        """Test that brackets without a date are not a directive."""
        assert classify("[see receipt]") == FreeComment("[see receipt]", ())

    def test_tag_list(self):
        """Test a :tag1:tag2: list without prose."""
        assert classify(":food:groceries:") == FreeComment(None, (Tag("food"), Tag("groceries")))

    def test_tag_list_with_prose(self):
        """Test that prose around a tag list is kept as the comment."""
        assert classify("weekly :food: shopping") == FreeComment(
            "weekly shopping", (Tag("food"),)
        )

    def test_plain_text(self):
        """Test plain prose."""
        assert classify("  just a note ") == FreeComment("just a note", ())

    def test_empty(self):
        """Test an empty comment body."""
        assert classify("") == FreeComment("", ())


class TestFoldComments:
    """Tests for fold_comments."""

    def test_comments_are_joined_by_newlines(self):
        """Test that multiple free comments become one multi-line comment."""
        block = fold_comments([FreeComment("first", ()), FreeComment("second", ())])
        assert block.comment == "first\nsecond"
        assert block.metadata == PostingMetadata()

    def test_later_dates_override(self):
        """Test that a later directive replaces only the dates it names."""
        block = fold_comments(
            [
                DateDirective(date(2020, 1, 1), date(2020, 1, 2)),
                DateDirective(date(2020, 2, 1), None),
            ]
        )
        assert block.metadata.date == date(2020, 2, 1)
        assert block.metadata.effective_date == date(2020, 1, 2)

    def test_tags_are_collected_in_order(self):
        """Test that tags from every body are concatenated."""
        block = fold_comments(
            [
                TagDirective(Tag("a", "1")),
                FreeComment(None, (Tag("b"), Tag("c"))),
            ]
        )
        assert block.comment is None
        assert block.metadata.tags == (Tag("a", "1"), Tag("b"), Tag("c"))


class TestMetadataBlock:
    """Tests for parse_metadata_block."""

    def test_inline_and_following_lines(self):
        """Test an inline comment followed by indented comment lines."""
        text = "  ; inline\n  ; :tag:\n\t; Note: value\n  Assets"
        block, end = parse_metadata_block(text, 0)
        assert block == MetadataBlock(
            "inline", PostingMetadata(tags=(Tag("tag"), Tag("Note", "value")))
        )
        assert text[end:] == "\n  Assets"

    def test_no_comments(self):
        """Test that nothing is consumed without comments."""
        block, end = parse_metadata_block("\n  Assets", 0)
        assert block == MetadataBlock()
        assert end == 0

    def test_unindented_comment_is_attached(self):
        """Test that a comment line at the start of the next line still attaches."""
        text = "  ; test\n;comment line 2\n  Assets"
        block, end = parse_metadata_block(text, 0)
        assert block.comment == "test\ncomment line 2"
        assert text[end:] == "\n  Assets"

    def test_other_comment_characters_are_not_attached(self):
        """Test that only ';' lines belong to the block."""
        block, end = parse_metadata_block("\n# top level", 0)
        assert block.comment is None
        assert end == 0

    def test_comment_line_requires_line_ending(self):
        """Test that a comment line must start on a new line."""
        with pytest.raises(Backtrack):
            parse_comment_line("  ; same line", 0)
