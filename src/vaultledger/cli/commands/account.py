"""Account management commands."""

import click

from vaultledger.cli.error_handling import run_action
from vaultledger.domain.entities import AccountType
from vaultledger.utils.amount_parser import format_cents


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("add")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice([t.value for t in AccountType], case_sensitive=False),
    default=AccountType.BANK.value,
    show_default=True,
    help="Account type",
)
@click.option("--balance", default="0", help="Opening balance (e.g., 1500.00 or -250.00)")
@click.option("--notes", help="Notes")
@click.pass_context
def add_account(ctx, name: str, account_type: str, balance: str, notes: str | None):
    """Create a new account.

    Examples:
        vaultledger account add "Chase Checking" --balance 1500
        vaultledger account add "Visa" --type CREDIT --balance -250.00
    """
    result = run_action(
        ctx, "addAccount", {"name": name, "type": account_type, "balance": balance, "notes": notes}
    )
    click.echo(result.message)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    accounts = run_action(ctx, "getAccounts", {}).data
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(
            f"ID: {acc['id']:3d} | {acc['name']:20s} | {acc['type']:10s} | "
            f"{format_cents(acc['balance_cents']):>14s}"
        )


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def delete_account(ctx, account: str) -> None:
    """Delete an account.

    ACCOUNT is matched against account names (first partial match wins).
    The account can only be deleted if no transaction references it.

    Examples:
        vaultledger account delete "Chase"
    """
    if not click.confirm(f"Are you sure you want to delete the account matching '{account}'?"):
        click.echo("Deletion cancelled.")
        return

    result = run_action(ctx, "deleteAccount", {"name": account})
    click.echo(result.message)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
