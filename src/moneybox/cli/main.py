"""Main CLI entry point."""

import click

from moneybox.cli.error_handling import handle_domain_error
from moneybox.config import configure_logging, load_settings
from moneybox.database.factories import create_sqlite_gateway
from moneybox.domain.errors import DomainError
from moneybox.domain.reports import ReportService
from moneybox.domain.store import FinanceStore
from moneybox.session import LocalSessionProvider

# Import and register all commands at module level
from moneybox.cli.commands import (
    account,
    category,
    transaction,
    savings,
    dates,
    plan,
    report,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides MONEYBOX_DB_PATH environment variable)",
    envvar="MONEYBOX_DB_PATH",
)
@click.option(
    "--user",
    help="User whose data to open (overrides MONEYBOX_USER environment variable)",
    envvar="MONEYBOX_USER",
)
@click.option(
    "--timezone",
    help="Time zone used by reports, e.g. America/Sao_Paulo",
    envvar="MONEYBOX_TIMEZONE",
)
@click.option("--debug", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, user: str | None, timezone: str | None, debug: bool):
    """Moneybox - Personal finance tracking.

    Keep accounts, transactions, savings goals and monthly budgets, with
    yearly and weekly reports.
    """
    ctx.ensure_object(dict)
    configure_logging(debug)

    # Open the store only when actually running a command (not for --help)
    if ctx.invoked_subcommand is None:
        return

    try:
        settings = load_settings(database_path=db_path, user_id=user, timezone=timezone)
        gateway = create_sqlite_gateway(settings.database_path, timeout=settings.db_timeout)
        gateway.connect()
        session = LocalSessionProvider()
        store = FinanceStore(gateway, session)
        store.attach()

        def teardown() -> None:
            store.detach()
            gateway.disconnect()

        ctx.call_on_close(teardown)
        session.sign_in(settings.user_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    ctx.obj["settings"] = settings
    ctx.obj["session"] = session
    ctx.obj["store"] = store
    ctx.obj["reports"] = ReportService(store, settings.tz)


# Register all commands
account.register_commands(cli)
category.register_commands(cli)
transaction.register_commands(cli)
savings.register_commands(cli)
dates.register_commands(cli)
plan.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
