"""Money movement commands: transfers, debt payments and savings contributions."""

import click

from vaultledger.cli.error_handling import run_action


@click.command("transfer")
@click.argument("from_account", metavar="FROM_ACCOUNT")
@click.argument("to_account", metavar="TO_ACCOUNT")
@click.argument("amount")
@click.pass_context
def transfer(ctx, from_account: str, to_account: str, amount: str):
    """Move money between two accounts.

    Examples:
        vaultledger transfer Checking Savings 200
    """
    result = run_action(
        ctx,
        "transferFunds",
        {"fromAccountName": from_account, "toAccountName": to_account, "amount": amount},
    )
    click.echo(result.message)


@click.command("pay-debt")
@click.argument("debt", metavar="DEBT")
@click.argument("amount")
@click.option("--from", "from_account", help="Account to pay from (the first account when omitted)")
@click.pass_context
def pay_debt(ctx, debt: str, amount: str, from_account: str | None):
    """Pay toward a debt.

    Examples:
        vaultledger pay-debt "Student Loan" 150 --from Checking
    """
    result = run_action(
        ctx, "payDebt", {"debtName": debt, "amount": amount, "fromAccountName": from_account}
    )
    click.echo(result.message)


@click.command("contribute")
@click.argument("goal", metavar="GOAL")
@click.argument("amount")
@click.option("--from", "from_account", help="Account to contribute from (the first account when omitted)")
@click.pass_context
def contribute(ctx, goal: str, amount: str, from_account: str | None):
    """Contribute to a savings goal.

    Examples:
        vaultledger contribute "Emergency Fund" 100
    """
    result = run_action(
        ctx,
        "contributeToSavings",
        {"goalName": goal, "amount": amount, "fromAccountName": from_account},
    )
    click.echo(result.message)


def register_commands(cli):
    """Register money movement commands with main CLI."""
    cli.add_command(transfer)
    cli.add_command(pay_debt)
    cli.add_command(contribute)
