"""Main CLI entry point."""

import logging

import click

from vaultledger.actions import ActionDispatcher
from vaultledger.database.factories import create_sqlite_database
from vaultledger.session import Session

# Import and register all commands at module level
from vaultledger.cli.commands import (
    account,
    action,
    add,
    export,
    memory,
    money,
    summary,
)

LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def _shutdown(session: Session, db) -> None:
    session.close()
    if session.last_save_error is not None:
        click.echo(f"Warning: ledger could not be saved: {session.last_save_error}", err=True)
    db.disconnect()


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides VAULTLEDGER_DB_PATH environment variable)",
    envvar="VAULTLEDGER_DB_PATH",
)
@click.option(
    "--user",
    default="guest",
    show_default=True,
    envvar="VAULTLEDGER_USER",
    help="User whose ledger to open",
)
@click.option("-v", "--verbose", count=True, help="Increase log output (-v info, -vv debug)")
@click.pass_context
def cli(ctx, db_path: str | None, user: str, verbose: int):
    """VaultLedger - personal finance ledger.

    Track accounts, expenses, income, debts and savings goals. Every change
    goes through the same named actions the assistant uses.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=LOG_LEVELS[min(verbose, len(LOG_LEVELS) - 1)],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Open the ledger only when actually running a command (not for --help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        session = Session.open(db, user)
        ctx.obj["db"] = db
        ctx.obj["session"] = session
        ctx.obj["dispatcher"] = ActionDispatcher(session)
        ctx.call_on_close(lambda: _shutdown(session, db))


# Register all commands
account.register_commands(cli)
action.register_commands(cli)
add.register_commands(cli)
export.register_commands(cli)
memory.register_commands(cli)
money.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
