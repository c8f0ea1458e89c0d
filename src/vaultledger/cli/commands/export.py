"""Export command."""

import click

from vaultledger.domain.export import export_transactions_csv


@click.command("export")
@click.argument("output", type=click.Path(dir_okay=False, allow_dash=True), default="-")
@click.pass_context
def export(ctx, output: str):
    """Export transaction history as CSV.

    OUTPUT is a file path, or '-' (the default) for standard output.

    Examples:
        vaultledger export transactions.csv
    """
    with click.open_file(output, "w", encoding="utf-8") as stream:
        rows = export_transactions_csv(ctx.obj["session"].view(), stream)
    if output != "-":
        click.echo(f"Exported {rows} transactions to {output}")


def register_commands(cli):
    """Register export command with main CLI."""
    cli.add_command(export)
