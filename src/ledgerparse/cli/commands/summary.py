"""Summary command: show the simplified journal view of a ledger file."""

from collections import Counter

import click

from ledgerparse.cli.loading import load_document
from ledgerparse.domain.journal import build_journal


@click.command("summary")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--comments", is_flag=True, help="Also list transactions with their attached comments")
@click.pass_context
def summary(ctx, file: str, comments: bool):
    """Summarize transactions, prices and accounts in a ledger file."""
    _, document = load_document(ctx, file)
    journal = build_journal(document)

    if not journal.transactions and not journal.commodity_prices:
        click.echo("No transactions found.")
        return

    click.echo("Journal Summary")
    click.echo("=" * 50)
    click.echo(f"Transactions:      {len(journal.transactions)}")
    click.echo(f"Commodity prices:  {len(journal.commodity_prices)}")
    if journal.transactions:
        dates = [txn.date for txn in journal.transactions]
        click.echo(f"Period:            {min(dates)} to {max(dates)}")
    for path in journal.includes:
        click.echo(f"Includes:          {path}")

    posting_counts = Counter(
        posting.account for txn in journal.transactions for posting in txn.postings
    )
    if posting_counts:
        click.echo()
        click.echo(f"{'Account':<40} {'Postings':>9}")
        click.echo("-" * 50)
        for account in journal.accounts():
            click.echo(f"{account:<40} {posting_counts[account]:>9}")

    if comments:
        click.echo()
        for txn in journal.transactions:
            click.echo(f"{txn.date} {txn.description}")
            for line in (txn.comment or "").split("\n"):
                if line:
                    click.echo(f"    ; {line}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
