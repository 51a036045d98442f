"""CLI error handling helpers."""

import click

from ledgerparse.domain.errors import ParseError


def handle_parse_error(ctx: click.Context, path: str, error: ParseError) -> None:
    """Render a parse error with its caret diagnostic and exit with failure."""
    click.echo(f"Error: {path}:{error.line}:{error.column}", err=True)
    click.echo(error.explain(), err=True)
    ctx.exit(1)


def handle_os_error(ctx: click.Context, error: OSError) -> None:
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
