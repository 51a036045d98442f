"""Check command: validate a ledger file without rewriting it."""

import click

from ledgerparse.cli.loading import load_document


@click.command("check")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def check(ctx, file: str):
    """Parse a ledger file and report what it contains."""
    _, document = load_document(ctx, file)

    click.echo(f"{file}: OK")
    click.echo(f"  Items:             {len(document.items)}")
    click.echo(f"  Transactions:      {len(document.transactions)}")
    click.echo(f"  Commodity prices:  {len(document.commodity_prices)}")
    click.echo(f"  Includes:          {len(document.includes)}")


def register_commands(cli):
    """Register check command with main CLI."""
    cli.add_command(check)
