"""Special date commands (birthdays, due dates, anniversaries)."""

from datetime import date as date_type

import click

from moneybox.cli.error_handling import handle_domain_error
from moneybox.cli.resolution import date_or_exit, get_store, resolve_id_or_exit
from moneybox.domain.errors import DomainError
from moneybox.domain.reports import upcoming_special_dates
from moneybox.domain.updates import SpecialDateUpdate
from moneybox.domain.validation import require_name


@click.group()
def dates_group():
    """Manage special dates."""
    pass


@dates_group.command("add")
@click.argument("name")
@click.argument("date")
@click.option("--description", help="Optional description")
@click.option("--recurring", is_flag=True, help="Repeats every year")
@click.pass_context
def add_date(ctx, name: str, date: str, description: str | None, recurring: bool):
    """Add a special date.

    Examples:
        moneybox dates add "Rent due" 2024-09-05 --recurring
    """
    store = get_store(ctx)
    try:
        special = store.add_special_date(
            name=require_name(name),
            date=date_or_exit(ctx, date),
            description=description,
            is_recurring=recurring,
        )
        click.echo(f"Added special date '{special.name}' on {special.date.isoformat()}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@dates_group.command("list")
@click.option("--upcoming", is_flag=True, help="Only dates in the next 30 days")
@click.pass_context
def list_dates(ctx, upcoming: bool):
    """List special dates, soonest first."""
    store = get_store(ctx)
    today = date_type.today()
    soon = upcoming_special_dates(store.special_dates, today)
    dates = soon if upcoming else sorted(store.special_dates, key=lambda d: d.date)
    if not dates:
        click.echo("No special dates found.")
        return

    soon_ids = {d.id for d in soon}
    for special in dates:
        flags = []
        if special.is_recurring:
            flags.append("recurring")
        if special.is_completed:
            flags.append("done")
        if special.id in soon_ids:
            flags.append("upcoming")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        click.echo(f"{special.id[:8]} | {special.date.isoformat()} | {special.name}{suffix}")


@dates_group.command("complete")
@click.argument("date_id")
@click.option("--undo", is_flag=True, help="Mark as not completed")
@click.pass_context
def complete_date(ctx, date_id: str, undo: bool):
    """Mark a special date as completed."""
    store = get_store(ctx)
    resolved = resolve_id_or_exit(ctx, store.special_dates, date_id, "Special date")
    try:
        special = store.update_special_date(resolved, SpecialDateUpdate(is_completed=not undo))
        click.echo(f"Marked '{special.name}' as {'not completed' if undo else 'completed'}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@dates_group.command("delete")
@click.argument("date_id")
@click.pass_context
def delete_date(ctx, date_id: str):
    """Delete a special date."""
    store = get_store(ctx)
    resolved = resolve_id_or_exit(ctx, store.special_dates, date_id, "Special date")
    try:
        store.remove_special_date(resolved)
        click.echo(f"Deleted special date {resolved[:8]}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register special date commands with main CLI."""
    cli.add_command(dates_group, name="dates")
