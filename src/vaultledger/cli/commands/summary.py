"""Summary command."""

import click

from vaultledger.cli.error_handling import run_action
from vaultledger.utils.amount_parser import format_cents


@click.command("summary")
@click.pass_context
def summary(ctx):
    """Show net worth, this month's cash flow and progress."""
    data = run_action(ctx, "getFinancialSummary", {}).data
    stats = ctx.obj["session"].view().stats

    click.echo("\nFinancial Summary")
    click.echo("=" * 40)
    click.echo(f"Assets:       {format_cents(data['total_assets_cents']):>16s}")
    click.echo(f"Liabilities:  {format_cents(data['total_liabilities_cents']):>16s}")
    click.echo(f"Net worth:    {format_cents(data['net_worth_cents']):>16s}")
    click.echo(f"Saved:        {format_cents(data['total_saved_cents']):>16s}")
    click.echo("-" * 40)
    click.echo(f"Month income: {format_cents(data['month_income_cents']):>16s}")
    click.echo(f"Month spend:  {format_cents(data['month_expenses_cents']):>16s}")
    click.echo("-" * 40)
    click.echo(f"Rank: {data['rank']}")
    if data["next_rank"]:
        click.echo(f"Next rank: {data['next_rank']}")
    click.echo(f"Level {stats.level} ({stats.xp}/{stats.next_level_xp} XP)")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
