"""Assistant memory commands."""

import click

from vaultledger.cli.error_handling import run_action


@click.group()
def memory_group():
    """Manage facts the assistant remembers."""
    pass


@memory_group.command("add")
@click.argument("fact")
@click.pass_context
def add_fact(ctx, fact: str):
    """Remember a fact about the user."""
    click.echo(run_action(ctx, "rememberFact", {"fact": fact}).message)


@memory_group.command("list")
@click.pass_context
def list_facts(ctx):
    """List remembered facts."""
    facts = ctx.obj["session"].memory_facts
    if not facts:
        click.echo("No facts remembered.")
        return
    for fact in facts:
        click.echo(f"- {fact}")


def register_commands(cli):
    """Register memory commands with main CLI."""
    cli.add_command(memory_group, name="memory")
