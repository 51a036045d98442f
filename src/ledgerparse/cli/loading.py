"""Reading ledger files for the CLI commands."""

import logging

import click

from ledgerparse.cli.error_handling import handle_os_error, handle_parse_error
from ledgerparse.domain.entities import Document
from ledgerparse.domain.errors import ParseError
from ledgerparse.parser.ledger import parse_document

logger = logging.getLogger(__name__)


def read_ledger_text(ctx: click.Context, path: str) -> str:
    """Read a ledger file verbatim, keeping its line endings."""
    try:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except OSError as e:
        handle_os_error(ctx, e)


def load_document(ctx: click.Context, path: str) -> tuple[str, Document]:
    """Read and parse ``path``, exiting with a diagnostic on failure."""
    text = read_ledger_text(ctx, path)
    logger.debug("Read %d characters from %s", len(text), path)
    try:
        return (text, parse_document(text))
    except ParseError as e:
        handle_parse_error(ctx, path, e)
