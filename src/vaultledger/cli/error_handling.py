"""CLI helpers for running actions and reporting failures."""

from typing import Any

import click

from vaultledger.actions import ActionResult


def run_action(ctx: click.Context, action: str, params: dict[str, Any]) -> ActionResult:
    """Dispatch an action, exiting with failure if it did not succeed."""
    result = ctx.obj["dispatcher"].dispatch(action, params)
    if not result.success:
        click.echo(f"Error: {result.message}", err=True)
        ctx.exit(1)
    return result
