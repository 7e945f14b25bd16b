"""Category management commands."""

import click

from moneybox.cli.error_handling import handle_domain_error
from moneybox.cli.resolution import get_store, resolve_category_or_exit
from moneybox.domain.entities import TransactionType
from moneybox.domain.errors import DomainError
from moneybox.domain.store import DEFAULT_CATEGORY_COLOR
from moneybox.domain.updates import CategoryUpdate
from moneybox.domain.validation import require_name

CATEGORY_TYPES = click.Choice([t.value for t in TransactionType])


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("create")
@click.argument("name")
@click.option("--type", "category_type", type=CATEGORY_TYPES, default="expense", show_default=True)
@click.option("--color", default=DEFAULT_CATEGORY_COLOR, show_default=True, help="Hex color")
@click.pass_context
def create_category(ctx, name: str, category_type: str, color: str):
    """Create a new category.

    Examples:
        moneybox category create "Health"
        moneybox category create "Bonus" --type income --color "#22c55e"
    """
    store = get_store(ctx)
    try:
        category = store.add_category(
            name=require_name(name), type=TransactionType(category_type), color=color
        )
        click.echo(f"Created {category.type.value} category '{category.name}' (ID: {category.id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@category_group.command("list")
@click.option("--type", "category_type", type=CATEGORY_TYPES, help="Only this type")
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List categories."""
    store = get_store(ctx)
    categories = [
        c for c in store.categories if category_type is None or c.type.value == category_type
    ]
    if not categories:
        click.echo("No categories found.")
        return

    for cat in categories:
        click.echo(f"{cat.id[:8]} | {cat.name:20s} | {cat.type.value:7s} | {cat.color}")


@category_group.command("update")
@click.argument("category")
@click.option("--name", help="New name")
@click.option("--type", "category_type", type=CATEGORY_TYPES, help="New type")
@click.option("--color", help="New hex color")
@click.pass_context
def update_category(
    ctx, category: str, name: str | None, category_type: str | None, color: str | None
) -> None:
    """Update a category. CATEGORY can be a name, ID or ID prefix."""
    store = get_store(ctx)
    target = resolve_category_or_exit(ctx, category)
    update = CategoryUpdate(
        name=name,
        type=TransactionType(category_type) if category_type else None,
        color=color,
    )
    if update.is_empty():
        click.echo("Nothing to update.")
        return
    try:
        updated = store.update_category(target.id, update)
        click.echo(f"Updated category '{updated.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@category_group.command("delete")
@click.argument("category")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_category(ctx, category: str, yes: bool) -> None:
    """Delete a category no transaction or month plan uses."""
    store = get_store(ctx)
    target = resolve_category_or_exit(ctx, category)

    if not yes and not click.confirm(f"Are you sure you want to delete category '{target.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        store.remove_category(target.id)
        click.echo(f"Deleted category '{target.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
