"""CLI helpers for turning option values into domain values, or exiting."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

import click

from moneybox.cli.error_handling import handle_domain_error
from moneybox.domain.entities import Account, Category, SavingsGoal, TransactionType
from moneybox.domain.errors import DomainError
from moneybox.domain.store import FinanceStore
from moneybox.domain.validation import parse_month_key
from moneybox.utils.amount_parser import parse_amount
from moneybox.utils.date_parser import parse_date
from moneybox.utils.resolvers import resolve_account, resolve_category, resolve_entity


def get_store(ctx: click.Context) -> FinanceStore:
    return ctx.obj["store"]


def resolve_account_or_exit(ctx: click.Context, reference: str) -> Account:
    """Resolve an account name, id or id prefix, or exit with a CLI error."""
    try:
        return resolve_account(get_store(ctx).accounts, reference)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def resolve_category_or_exit(
    ctx: click.Context, reference: str, txn_type: Optional[TransactionType] = None
) -> Category:
    try:
        return resolve_category(get_store(ctx).categories, reference, txn_type)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def resolve_goal_or_exit(ctx: click.Context, reference: str) -> SavingsGoal:
    try:
        return resolve_entity(get_store(ctx).savings_goals, reference, "Savings goal", by_name=True)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def resolve_id_or_exit(ctx: click.Context, entities, reference: str, kind: str) -> str:
    """Resolve a full id or unique id prefix among ``entities``."""
    try:
        return resolve_entity(entities, reference, kind).id
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def amount_or_exit(ctx: click.Context, value: Optional[str]) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return parse_amount(value)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def date_or_exit(ctx: click.Context, value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return parse_date(value)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def month_or_exit(ctx: click.Context, value: Optional[str]) -> tuple[int, int]:
    """Parse ``YYYY-MM`` into ``(year, month_index)``; defaults to this month."""
    if value is None:
        today = date.today()
        return today.year, today.month - 1
    try:
        return parse_month_key(value)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def format_amount(amount: Decimal) -> str:
    return f"{amount:,.2f}"
