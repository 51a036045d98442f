"""Format command: parse a ledger file and write it back normalized."""

import logging

import click

from ledgerparse.cli.error_handling import handle_os_error
from ledgerparse.cli.loading import load_document
from ledgerparse.serializer.settings import (
    DEFAULT_COMMODITY_DATE_FORMAT,
    DEFAULT_TRANSACTION_DATE_FORMAT,
    SerializerSettings,
)
from ledgerparse.serializer.writer import serialize

logger = logging.getLogger(__name__)

EOL_CHOICES = {"unix": "\n", "windows": "\r\n"}


def build_settings(
    indent: str,
    eol: str,
    date_format: str,
    price_date_format: str,
    sameline_comments: bool,
) -> SerializerSettings:
    """Build serializer settings from command-line option values.

    A literal ``\\t`` in ``indent`` stands for a tab character.
    """
    return (
        SerializerSettings()
        .with_indent(indent.replace("\\t", "\t"))
        .with_eol(EOL_CHOICES[eol])
        .with_transaction_date_format(date_format)
        .with_commodity_date_format(price_date_format)
        .with_posting_comments_sameline(sameline_comments)
    )


@click.command("format")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Write to this file instead of stdout")
@click.option(
    "--indent",
    default="  ",
    show_default=True,
    envvar="LEDGERPARSE_INDENT",
    help="Indentation for postings and comment lines ('\\t' for a tab)",
)
@click.option(
    "--eol",
    type=click.Choice(sorted(EOL_CHOICES)),
    default="unix",
    show_default=True,
    help="Line ending style",
)
@click.option(
    "--date-format",
    default=DEFAULT_TRANSACTION_DATE_FORMAT,
    show_default=True,
    envvar="LEDGERPARSE_DATE_FORMAT",
    help="strftime pattern for transaction and metadata dates",
)
@click.option(
    "--price-date-format",
    default=DEFAULT_COMMODITY_DATE_FORMAT,
    show_default=True,
    envvar="LEDGERPARSE_PRICE_DATE_FORMAT",
    help="strftime pattern for commodity price timestamps",
)
@click.option(
    "--sameline-comments",
    is_flag=True,
    default=False,
    envvar="LEDGERPARSE_SAMELINE_COMMENTS",
    help="Keep single-line posting comments on the posting line",
)
@click.option("--check", is_flag=True, help="Exit with status 1 if the file is not already formatted")
@click.pass_context
def format_command(
    ctx,
    file: str,
    output: str | None,
    indent: str,
    eol: str,
    date_format: str,
    price_date_format: str,
    sameline_comments: bool,
    check: bool,
):
    """Re-write a ledger file in normalized form.

    Examples:
        ledgerparse format journal.ledger
        ledgerparse format journal.ledger -o clean.ledger --indent '\\t'
        ledgerparse format journal.ledger --check
    """
    text, document = load_document(ctx, file)
    settings = build_settings(indent, eol, date_format, price_date_format, sameline_comments)
    formatted = serialize(document, settings)

    if check:
        if formatted != text:
            click.echo(f"{file} would be reformatted", err=True)
            ctx.exit(1)
        click.echo(f"{file} is already formatted")
        return

    if output is None:
        click.echo(formatted, nl=False)
        return

    try:
        with open(output, "w", encoding="utf-8", newline="") as f:
            f.write(formatted)
    except OSError as e:
        handle_os_error(ctx, e)
    logger.debug("Wrote %d characters to %s", len(formatted), output)
    click.echo(f"Wrote {len(document.items)} items to {output}")


def register_commands(cli):
    """Register format command with main CLI."""
    cli.add_command(format_command)
