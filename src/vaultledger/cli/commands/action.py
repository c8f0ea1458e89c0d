"""Generic named-action command."""

import json

import click

from vaultledger.cli.error_handling import run_action


def parse_params(pairs: tuple[str, ...]) -> dict:
    """Parse KEY=VALUE pairs; values that are valid JSON are decoded.

    Raises:
        click.BadParameter: If a pair has no '='
    """
    params = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"Expected KEY=VALUE, got '{pair}'", param_hint="PARAMS")
        try:
            params[key] = json.loads(value)
        except json.JSONDecodeError:
            params[key] = value
    return params


@click.command("action")
@click.argument("name")
@click.argument("params", nargs=-1)
@click.pass_context
def action(ctx, name: str, params: tuple[str, ...]):
    """Run a named action with KEY=VALUE parameters.

    Money values are in whole currency units. Lists and objects may be given
    as JSON.

    Examples:
        vaultledger action addTransaction type=EXPENSE amount=19.99 category=Food
        vaultledger action transferFunds fromAccountName=Checking toAccountName=Savings amount=200
        vaultledger action getAccounts
    """
    result = run_action(ctx, name, parse_params(params))
    click.echo(result.message)
    if result.data is not None:
        click.echo(json.dumps(result.data, indent=2))


def register_commands(cli):
    """Register action command with main CLI."""
    cli.add_command(action)
