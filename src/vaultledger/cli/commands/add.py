"""Add transaction command."""

import click

from vaultledger.cli.error_handling import run_action
from vaultledger.domain.entities import Frequency, MetaOrigin, TransactionKind
from vaultledger.utils.amount_parser import format_cents


@click.command("add")
@click.option(
    "--type",
    "kind",
    type=click.Choice([k.value for k in TransactionKind], case_sensitive=False),
    default=TransactionKind.EXPENSE.value,
    show_default=True,
    help="Transaction type",
)
@click.option("--amount", required=True, help="Transaction amount (e.g., 12.50)")
@click.option("--account", help="Account name (defaults to the first account)")
@click.option("--category", help="Expense category name, or income source")
@click.option(
    "--date",
    "txn_date",
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--notes", default="", help="Notes")
@click.option(
    "--recurring",
    type=click.Choice([f.value for f in Frequency], case_sensitive=False),
    help="Repeat frequency",
)
@click.pass_context
def add_transaction(
    ctx,
    kind: str,
    amount: str,
    account: str | None,
    category: str | None,
    txn_date: str | None,
    notes: str,
    recurring: str | None,
):
    """Add an expense or income manually.

    Examples:
        vaultledger add --amount 45.20 --category Food --notes "Groceries"
        vaultledger add --type INCOME --amount 2500 --category Salary --account Chase
    """
    params = {
        "type": kind,
        "amount": amount,
        "accountName": account,
        "category": category,
        "date": txn_date,
        "notes": notes,
        "origin": MetaOrigin.MANUAL.value,
        "frequency": recurring,
    }
    result = run_action(ctx, "addTransaction", params)
    txn = result.data
    click.echo(f"Created transaction {txn['id']}")
    click.echo(f"  Type: {txn['kind']}")
    click.echo(f"  Date: {txn['date']}")
    click.echo(f"  Amount: {format_cents(txn['amount_cents'])}")
    if txn["notes"]:
        click.echo(f"  Notes: {txn['notes']}")
    if txn["is_recurring"]:
        click.echo(f"  Repeats: {txn['frequency']} (next {txn['next_due_date']})")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
