"""Shared pytest fixtures for ledgerparse tests."""

from pathlib import Path

import pytest

from ledgerparse.parser.ledger import parse_document
from ledgerparse.serializer.settings import SerializerSettings


SAMPLE_LEDGER = """\
; Opening balances for the year
2024-01-01 * Opening Balance
  Assets:Checking  $1,000.00
  Equity:Opening Balances

P 2024-01-02 12:00:00 AAPL $185.50

2024-01-05=2024-01-07 ! (1042) Grocery Store  ; weekly shopping
  ; :food:
  Expenses:Food  $54.20
  Assets:Checking

2024-01-10 Broker
  Assets:Brokerage  10 AAPL {$185.50} @ $186.00
  Assets:Checking  $-1,860.00 = $-805.80
include prices.ledger
"""


@pytest.fixture
def sample_text():
    """A small ledger exercising most of the grammar."""
    return SAMPLE_LEDGER


@pytest.fixture
def sample_document(sample_text):
    """The parsed form of ``sample_text``."""
    return parse_document(sample_text)


@pytest.fixture
def default_settings():
    """Serializer settings with every option at its default."""
    return SerializerSettings()


@pytest.fixture
def ledger_file(tmp_path: Path, sample_text):
    """Write the sample ledger to a temporary file and return its path."""
    path = tmp_path / "journal.ledger"
    path.write_text(sample_text, encoding="utf-8")
    return path


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
