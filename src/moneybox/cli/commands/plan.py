"""Monthly budget plan commands: weekly goals and month notes."""

import click

from moneybox.cli.error_handling import handle_domain_error
from moneybox.cli.resolution import (
    amount_or_exit,
    format_amount,
    get_store,
    month_or_exit,
    resolve_category_or_exit,
)
from moneybox.domain.entities import TransactionType
from moneybox.domain.errors import DomainError
from moneybox.domain.reports import category_label

MONTH_HELP = "Month as YYYY-MM (defaults to the current month)"


@click.group()
def plan_group():
    """Plan weekly budgets and keep notes per month."""
    pass


@plan_group.command("goal")
@click.argument("category")
@click.option("--month", help=MONTH_HELP)
@click.option(
    "--week",
    "weeks",
    multiple=True,
    help="Planned amount for the next week group; repeat up to 5 times, '-' leaves a week unset",
)
@click.option("--monthly", help="Planned amount for monthly and recurring expenses")
@click.pass_context
def set_goal(ctx, category: str, month: str | None, weeks: tuple[str, ...], monthly: str | None):
    """Set the budget plan of an expense CATEGORY for a month.

    Replaces any plan already set for that category and month.

    Examples:
        moneybox plan goal Food --month 2024-08 --week 150 --week 150 --week 200
        moneybox plan goal Housing --month 2024-08 --monthly 1800
    """
    store = get_store(ctx)
    year, month_index = month_or_exit(ctx, month)
    target = resolve_category_or_exit(ctx, category, TransactionType.EXPENSE)
    amounts = [None if w.strip() in ("", "-") else amount_or_exit(ctx, w) for w in weeks]
    try:
        store.set_weekly_goal(
            year, month_index, target.id, amounts, monthly_amount=amount_or_exit(ctx, monthly)
        )
        click.echo(f"Saved plan for '{target.name}' in {year}-{month_index + 1:02d}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@plan_group.command("note")
@click.argument("content")
@click.option("--month", help=MONTH_HELP)
@click.pass_context
def set_note(ctx, content: str, month: str | None):
    """Set the note of a month, replacing any previous note."""
    store = get_store(ctx)
    year, month_index = month_or_exit(ctx, month)
    try:
        store.set_monthly_note(year, month_index, content)
        click.echo(f"Saved note for {year}-{month_index + 1:02d}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@plan_group.command("show")
@click.option("--month", help=MONTH_HELP)
@click.pass_context
def show_plan(ctx, month: str | None):
    """Show the plans and note of a month."""
    store = get_store(ctx)
    year, month_index = month_or_exit(ctx, month)
    goals = [g for g in store.weekly_goals if (g.year, g.month) == (year, month_index)]
    note = store.get_monthly_note(year, month_index)

    if not goals and note is None:
        click.echo(f"Nothing planned for {year}-{month_index + 1:02d}.")
        return

    for goal in goals:
        weeks = ", ".join("-" if a is None else format_amount(a) for a in goal.weekly_amounts)
        monthly = format_amount(goal.monthly_amount) if goal.monthly_amount is not None else "-"
        click.echo(
            f"{category_label(store.categories, goal.category_id):15s} | weeks: {weeks or '-'} | monthly: {monthly}"
        )
    if note is not None:
        click.echo(f"\nNote: {note.content}")


def register_commands(cli):
    """Register plan commands with main CLI."""
    cli.add_command(plan_group, name="plan")
