"""Tests for document model entities."""

import pytest
from dataclasses import FrozenInstanceError
from datetime import date, datetime
from decimal import Decimal

from ledgerparse.domain.entities import (
    Amount,
    Commodity,
    CommodityPosition,
    CommodityPrice,
    Document,
    EmptyLine,
    Include,
    Posting,
    PostingAmount,
    PostingMetadata,
    Reality,
    Tag,
    Transaction,
    ZeroBalance,
)


def usd(quantity: str) -> Amount:
    return Amount(Decimal(quantity), Commodity("$", CommodityPosition.LEFT))


class TestPosting:
    """Tests for Posting entity."""

    def test_defaults(self):
        """Test a posting with only an account."""
        posting = Posting("Assets:Cash")
        assert posting.reality == Reality.REAL
        assert posting.metadata == PostingMetadata()
        assert posting.is_elided

    def test_balance_is_not_elided(self):
        """Test that a balance assertion counts as a value."""
        assert not Posting("Assets:Cash", balance=ZeroBalance()).is_elided

    def test_immutability(self):
        """Test that Posting entities are immutable."""
        posting = Posting("Assets:Cash")
        with pytest.raises(FrozenInstanceError):
            posting.account = "Other"

    def test_equality(self):
        """Test Posting entity equality."""
        first = Posting("A", amount=PostingAmount(usd("1.20")))
        second = Posting("A", amount=PostingAmount(usd("1.2")))
        third = Posting("B", amount=PostingAmount(usd("1.20")))
        assert first == second
        assert first != third


class TestTag:
    """Tests for Tag entity."""

    def test_marker_tag(self):
        """Test a tag without a value."""
        assert Tag("food").value is None

    @pytest.mark.parametrize("value", ["text", 3, 1.5, date(2024, 1, 1)])
    def test_typed_values(self, value):
        """Test each supported tag value type."""
        assert Tag("name", value).value == value

    def test_nan_rejected(self):
        """Test that NaN cannot be a tag value."""
        with pytest.raises(ValueError):
            Tag("name", float("nan"))


class TestDocument:
    """Tests for Document entity."""

    def test_views(self):
        """Test the typed item views."""
        transaction = Transaction(
            date(2020, 1, 1), (Posting("A", amount=PostingAmount(usd("1"))), Posting("B"))
        )
        price = CommodityPrice(datetime(2020, 1, 1, 12, 0, 0), "EUR", usd("1.10"))
        document = Document((EmptyLine(), transaction, price, Include("x.ledger")))
        assert document.transactions == (transaction,)
        assert document.commodity_prices == (price,)
        assert document.includes == (Include("x.ledger"),)

    def test_empty(self):
        """Test an empty document."""
        assert Document().items == ()
        assert Document().transactions == ()
