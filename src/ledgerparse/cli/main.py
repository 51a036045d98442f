"""Main CLI entry point."""

import logging

import click

# Import and register all commands at module level
from ledgerparse.cli.commands import check, format, summary


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log parser progress at DEBUG level")
@click.pass_context
def cli(ctx, verbose: bool):
    """Ledgerparse - parse, check and format ledger journals.

    Reads plain-text accounting journals in the ledger format and writes
    them back in a normalized layout.
    """
    ctx.ensure_object(dict)
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


# Register all commands
check.register_commands(cli)
format.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
