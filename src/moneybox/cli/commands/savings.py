"""Savings goal and movement commands."""

from datetime import date as date_type

import click

from moneybox.cli.error_handling import handle_domain_error
from moneybox.cli.resolution import (
    amount_or_exit,
    date_or_exit,
    format_amount,
    get_store,
    resolve_account_or_exit,
    resolve_goal_or_exit,
    resolve_id_or_exit,
)
from moneybox.domain.entities import MovementType
from moneybox.domain.errors import DomainError
from moneybox.domain.reports import savings_progress
from moneybox.domain.updates import SavingsGoalUpdate
from moneybox.domain.validation import check_movement_allowed, require_name


@click.group()
def savings_group():
    """Manage savings goals and move money in and out of them."""
    pass


@savings_group.command("create")
@click.argument("name")
@click.argument("target")
@click.option("--target-date", help="Date the goal should be reached")
@click.pass_context
def create_goal(ctx, name: str, target: str, target_date: str | None):
    """Create a savings goal with a TARGET amount.

    Examples:
        moneybox savings create "Emergency fund" 10000
        moneybox savings create "Trip" "R$ 3.500,00" --target-date 2025-12-01
    """
    store = get_store(ctx)
    try:
        goal = store.add_savings_goal(
            name=require_name(name),
            target_amount=amount_or_exit(ctx, target),
            target_date=date_or_exit(ctx, target_date),
        )
        click.echo(f"Created savings goal '{goal.name}' (ID: {goal.id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@savings_group.command("list")
@click.pass_context
def list_goals(ctx):
    """List savings goals with their progress."""
    store = get_store(ctx)
    if not store.savings_goals:
        click.echo("No savings goals found.")
        return

    for goal in store.savings_goals:
        due = f" | due {goal.target_date.isoformat()}" if goal.target_date else ""
        click.echo(
            f"{goal.id[:8]} | {goal.name:20s} | {format_amount(goal.current_amount)} of "
            f"{format_amount(goal.target_amount)} ({savings_progress(goal):.1f}%){due}"
        )


@savings_group.command("update")
@click.argument("goal")
@click.option("--name", help="New name")
@click.option("--target", help="New target amount")
@click.option("--target-date", help="New target date, or empty string to clear")
@click.pass_context
def update_goal(ctx, goal: str, name: str | None, target: str | None, target_date: str | None):
    """Update a savings goal. GOAL can be a name, ID or ID prefix."""
    store = get_store(ctx)
    target_goal = resolve_goal_or_exit(ctx, goal)
    update = SavingsGoalUpdate(
        name=name,
        target_amount=amount_or_exit(ctx, target),
        target_date=date_or_exit(ctx, target_date) if target_date else None,
        clear_target_date=target_date == "",
    )
    if update.is_empty():
        click.echo("Nothing to update.")
        return
    try:
        updated = store.update_savings_goal(target_goal.id, update)
        click.echo(f"Updated savings goal '{updated.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@savings_group.command("delete")
@click.argument("goal")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_goal(ctx, goal: str, yes: bool) -> None:
    """Delete a savings goal that has no movements."""
    store = get_store(ctx)
    target_goal = resolve_goal_or_exit(ctx, goal)
    if not yes and not click.confirm(
        f"Are you sure you want to delete savings goal '{target_goal.name}'?"
    ):
        click.echo("Deletion cancelled.")
        return
    try:
        store.remove_savings_goal(target_goal.id)
        click.echo(f"Deleted savings goal '{target_goal.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def _move(ctx, movement_type: MovementType, goal: str, amount: str, account: str, date, note):
    store = get_store(ctx)
    target_goal = resolve_goal_or_exit(ctx, goal)
    target_account = resolve_account_or_exit(ctx, account)
    move_amount = amount_or_exit(ctx, amount)
    try:
        check_movement_allowed(movement_type, move_amount, target_account, target_goal)
        store.add_savings_movement(
            type=movement_type,
            amount=move_amount,
            date=date_or_exit(ctx, date) or date_type.today(),
            goal_id=target_goal.id,
            account_id=target_account.id,
            note=note,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    updated_goal = store.get_savings_goal(target_goal.id)
    click.echo(
        f"{movement_type.value.capitalize()} of {format_amount(move_amount)} recorded. "
        f"'{updated_goal.name}' now has {format_amount(updated_goal.current_amount)}"
    )


@savings_group.command("deposit")
@click.argument("goal")
@click.argument("amount")
@click.option("--account", required=True, help="Account the money comes from")
@click.option("--date", help="Movement date")
@click.option("--note", help="Optional note")
@click.pass_context
def deposit(ctx, goal: str, amount: str, account: str, date: str | None, note: str | None):
    """Move AMOUNT from an account into a savings goal."""
    _move(ctx, MovementType.DEPOSIT, goal, amount, account, date, note)


@savings_group.command("withdraw")
@click.argument("goal")
@click.argument("amount")
@click.option("--account", required=True, help="Account the money goes to")
@click.option("--date", help="Movement date")
@click.option("--note", help="Optional note")
@click.pass_context
def withdraw(ctx, goal: str, amount: str, account: str, date: str | None, note: str | None):
    """Move AMOUNT from a savings goal back into an account."""
    _move(ctx, MovementType.WITHDRAW, goal, amount, account, date, note)


@savings_group.command("movements")
@click.argument("goal")
@click.pass_context
def list_movements(ctx, goal: str):
    """List the movements of a savings goal."""
    store = get_store(ctx)
    target_goal = resolve_goal_or_exit(ctx, goal)
    movements = store.movements_for_goal(target_goal.id)
    if not movements:
        click.echo("No movements found.")
        return

    accounts = {a.id: a.name for a in store.accounts}
    for movement in movements:
        sign = "+" if movement.type == MovementType.DEPOSIT else "-"
        note = f" | {movement.note}" if movement.note else ""
        click.echo(
            f"{movement.id[:8]} | {movement.date.isoformat()} | {sign}{format_amount(movement.amount):>12s} | "
            f"{accounts.get(movement.account_id, '?')}{note}"
        )


@savings_group.command("undo")
@click.argument("movement_id")
@click.pass_context
def delete_movement(ctx, movement_id: str) -> None:
    """Delete a savings movement and undo its transfer."""
    store = get_store(ctx)
    resolved = resolve_id_or_exit(ctx, store.savings_movements, movement_id, "Savings movement")
    try:
        store.remove_savings_movement(resolved)
        click.echo(f"Deleted savings movement {resolved[:8]}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register savings commands with main CLI."""
    cli.add_command(savings_group, name="savings")
