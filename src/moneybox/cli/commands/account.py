"""Account management commands."""

import click

from moneybox.cli.error_handling import handle_domain_error
from moneybox.cli.resolution import (
    amount_or_exit,
    format_amount,
    get_store,
    resolve_account_or_exit,
)
from moneybox.domain.entities import AccountType
from moneybox.domain.errors import DomainError
from moneybox.domain.updates import AccountUpdate
from moneybox.domain.validation import require_name

ACCOUNT_TYPES = click.Choice([t.value for t in AccountType])


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--type", "account_type", type=ACCOUNT_TYPES, default="checking", show_default=True)
@click.option("--balance", help="Opening balance (e.g., 1500.00 or 'R$ 1.500,00')")
@click.pass_context
def create_account(ctx, name: str, account_type: str, balance: str | None):
    """Create a new account.

    Examples:
        moneybox account create "Checking"
        moneybox account create "Nubank" --type credit --balance -250
    """
    store = get_store(ctx)
    opening = amount_or_exit(ctx, balance if balance is not None else "0")
    try:
        account = store.add_account(
            name=require_name(name), type=AccountType(account_type), balance=opening
        )
        click.echo(f"Created account '{account.name}' (ID: {account.id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts with their balances."""
    store = get_store(ctx)

    accounts = store.accounts
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        click.echo(
            f"{acc.id[:8]} | {acc.name:20s} | {acc.type.value:8s} | {format_amount(acc.balance):>14s}"
        )
    click.echo("-" * 70)
    click.echo(f"Total balance: {format_amount(store.total_balance())}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--type", "account_type", type=ACCOUNT_TYPES, help="New account type")
@click.option("--balance", help="Set the balance directly")
@click.pass_context
def update_account(
    ctx, account: str, name: str | None, account_type: str | None, balance: str | None
) -> None:
    """Update an account.

    ACCOUNT can be an account name, ID or ID prefix.

    Examples:
        moneybox account update "Checking" --name "Main checking"
        moneybox account update 3f2a --balance 1200
    """
    store = get_store(ctx)
    target = resolve_account_or_exit(ctx, account)
    update = AccountUpdate(
        name=name,
        type=AccountType(account_type) if account_type else None,
        balance=amount_or_exit(ctx, balance),
    )
    if update.is_empty():
        click.echo("Nothing to update.")
        return

    try:
        updated = store.update_account(target.id, update)
        click.echo(f"Updated account '{updated.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name, ID or ID prefix.

    The account can only be deleted if no transactions or savings movements
    reference it.
    """
    store = get_store(ctx)
    target = resolve_account_or_exit(ctx, account)

    if not yes and not click.confirm(f"Are you sure you want to delete account '{target.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        store.remove_account(target.id)
        click.echo(f"Deleted account '{target.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
