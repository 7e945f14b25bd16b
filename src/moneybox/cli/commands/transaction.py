"""Transaction management commands."""

from datetime import date as date_type

import click

from moneybox.cli.error_handling import handle_domain_error
from moneybox.cli.resolution import (
    amount_or_exit,
    date_or_exit,
    format_amount,
    get_store,
    resolve_account_or_exit,
    resolve_category_or_exit,
    resolve_id_or_exit,
)
from moneybox.domain.entities import PaymentType, TransactionType
from moneybox.domain.errors import DomainError
from moneybox.domain.reports import category_label
from moneybox.domain.updates import TransactionUpdate
from moneybox.domain.validation import check_category_matches, require_name, require_positive_amount

TRANSACTION_TYPES = click.Choice([t.value for t in TransactionType])
PAYMENT_TYPES = click.Choice([t.value for t in PaymentType])


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.argument("description")
@click.argument("amount")
@click.option("--type", "txn_type", type=TRANSACTION_TYPES, default="expense", show_default=True)
@click.option("--account", required=True, help="Account name or ID")
@click.option("--category", required=True, help="Category name or ID")
@click.option("--date", help="Transaction date (YYYY-MM-DD, DD/MM/YYYY or 'today', 'yesterday')")
@click.option("--payment-type", type=PAYMENT_TYPES, help="single, monthly or recurring")
@click.pass_context
def add_transaction(
    ctx,
    description: str,
    amount: str,
    txn_type: str,
    account: str,
    category: str,
    date: str | None,
    payment_type: str | None,
) -> None:
    """Add a transaction and update the account balance.

    Examples:
        moneybox transaction add "Groceries" 120.50 --account Checking --category Food
        moneybox transaction add "Salary" "R$ 5.000,00" --type income --account Checking --category Salary
        moneybox transaction add "Rent" 1800 --account Checking --category Housing --payment-type monthly
    """
    store = get_store(ctx)
    kind = TransactionType(txn_type)
    target_account = resolve_account_or_exit(ctx, account)
    target_category = resolve_category_or_exit(ctx, category, kind)
    txn_amount = amount_or_exit(ctx, amount)
    txn_date = date_or_exit(ctx, date) or date_type.today()

    try:
        check_category_matches(target_category, kind)
        txn = store.add_transaction(
            description=require_name(description, "Description"),
            amount=require_positive_amount(txn_amount),
            date=txn_date,
            type=kind,
            account_id=target_account.id,
            category_id=target_category.id,
            payment_type=PaymentType(payment_type) if payment_type else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    balance = store.get_account(target_account.id).balance
    click.echo(f"Added transaction {txn.id[:8]}: {txn.description} {format_amount(txn.amount)}")
    click.echo(f"Balance of '{target_account.name}': {format_amount(balance)}")


@transaction_group.command("list")
@click.option("--search", help="Text contained in the description")
@click.option("--type", "txn_type", type=TRANSACTION_TYPES, help="Only income or only expense")
@click.option("--category", help="Category name or ID")
@click.option("--account", help="Account name or ID")
@click.option("--recent", is_flag=True, help="Show only the five most recent transactions")
@click.pass_context
def list_transactions(
    ctx, search: str | None, txn_type: str | None, category: str | None, account: str | None, recent: bool
):
    """View transactions with optional filters."""
    store = get_store(ctx)
    if recent:
        transactions = store.recent_transactions()
    else:
        transactions = store.filter_transactions(
            search=search,
            txn_type=TransactionType(txn_type) if txn_type else None,
            category_id=resolve_category_or_exit(ctx, category).id if category else None,
            account_id=resolve_account_or_exit(ctx, account).id if account else None,
        )

    if not transactions:
        click.echo("No transactions found.")
        return

    accounts = {a.id: a.name for a in store.accounts}
    for txn in transactions:
        sign = "+" if txn.type == TransactionType.INCOME else "-"
        click.echo(
            f"{txn.id[:8]} | {txn.date.isoformat()} | {txn.description[:30]:30s} | "
            f"{sign}{format_amount(txn.amount):>12s} | "
            f"{category_label(store.categories, txn.category_id):15s} | "
            f"{accounts.get(txn.account_id, '?')}"
        )


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--description", help="Transaction description")
@click.option("--amount", help="Transaction amount")
@click.option("--date", help="Transaction date")
@click.option("--type", "txn_type", type=TRANSACTION_TYPES, help="income or expense")
@click.option("--account", help="Account name or ID")
@click.option("--category", help="Category name or ID")
@click.option("--payment-type", help="single, monthly, recurring, or empty string to clear")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    description: str | None,
    amount: str | None,
    date: str | None,
    txn_type: str | None,
    account: str | None,
    category: str | None,
    payment_type: str | None,
) -> None:
    """Update a transaction, moving balances as needed.

    Updates only the fields that are provided. TRANSACTION_ID can be an ID
    prefix.

    Examples:
        moneybox transaction update 3f2a --amount 50
        moneybox transaction update 3f2a --account Savings
        moneybox transaction update 3f2a --payment-type ""  # Clear payment type
    """
    store = get_store(ctx)
    txn_id = resolve_id_or_exit(ctx, store.transactions, transaction_id, "Transaction")
    current = store.get_transaction(txn_id)

    kind = TransactionType(txn_type) if txn_type else None
    account_id = resolve_account_or_exit(ctx, account).id if account else None
    category_id = None
    if category:
        target_category = resolve_category_or_exit(ctx, category, kind or current.type)
        category_id = target_category.id

    new_payment_type = None
    clear_payment_type = False
    if payment_type is not None:
        if payment_type == "":
            clear_payment_type = True
        else:
            try:
                new_payment_type = PaymentType(payment_type)
            except ValueError:
                handle_domain_error(ctx, ValueError(f"Unknown payment type '{payment_type}'"))

    update = TransactionUpdate(
        description=description,
        amount=amount_or_exit(ctx, amount),
        date=date_or_exit(ctx, date),
        type=kind,
        account_id=account_id,
        category_id=category_id,
        payment_type=new_payment_type,
        clear_payment_type=clear_payment_type,
    )
    if update.is_empty():
        click.echo("Nothing to update.")
        return

    try:
        if kind is not None and category_id is None:
            check_category_matches(store.require_category(current.category_id), kind)
        store.update_transaction(txn_id, update)
        click.echo(f"Updated transaction {txn_id[:8]}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, yes: bool) -> None:
    """Delete a transaction and reverse its effect on the balance."""
    store = get_store(ctx)
    txn_id = resolve_id_or_exit(ctx, store.transactions, transaction_id, "Transaction")
    txn = store.get_transaction(txn_id)

    if not yes and not click.confirm(f"Are you sure you want to delete '{txn.description}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        store.remove_transaction(txn_id)
        click.echo(f"Deleted transaction {txn_id[:8]}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
