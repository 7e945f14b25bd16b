"""Mapper functions to convert between domain models and SQLAlchemy models.

Rows are coerced into their semantic shape here: numeric columns become
``Decimal``, dates become ``datetime.date`` and enum columns are narrowed to
the domain enums. Anything that cannot be narrowed is a ``ValidationError``
rather than a half-typed entity.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Optional

from dateutil import parser as date_parser

from moneybox.database.base import Table
from moneybox.domain import entities as domain
from moneybox.domain.errors import ValidationError
from moneybox.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    SpecialDate as ORMSpecialDate,
    SavingsGoal as ORMSavingsGoal,
    SavingsMovement as ORMSavingsMovement,
    WeeklyGoal as ORMWeeklyGoal,
    MonthlyNote as ORMMonthlyNote,
    WEEK_COLUMNS,
)


def to_decimal(value: Any) -> Decimal:
    """Coerce a stored numeric value to Decimal."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"Invalid numeric value {value!r}") from e


def to_optional_decimal(value: Any) -> Optional[Decimal]:
    return None if value is None else to_decimal(value)


def to_date(value: Any) -> date:
    """Normalize a stored date, datetime or ISO string to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date_parser.isoparse(str(value)).date()
    except (ValueError, TypeError) as e:
        raise ValidationError(f"Invalid date value {value!r}") from e


def to_optional_date(value: Any) -> Optional[date]:
    return None if value is None else to_date(value)


def to_enum(enum_type: type[Enum], value: Any) -> Any:
    """Narrow a stored string to a domain enum member."""
    try:
        return enum_type(value)
    except ValueError as e:
        raise ValidationError(f"Invalid {enum_type.__name__} value {value!r}") from e


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        type=to_enum(domain.AccountType, orm_account.type),
        balance=to_decimal(orm_account.balance),
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        type=to_enum(domain.TransactionType, orm_category.type),
        color=orm_category.color,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    payment_type = None
    if orm_transaction.payment_type is not None:
        payment_type = to_enum(domain.PaymentType, orm_transaction.payment_type)
    return domain.Transaction(
        id=orm_transaction.id,
        description=orm_transaction.description,
        amount=to_decimal(orm_transaction.amount),
        date=to_date(orm_transaction.date),
        type=to_enum(domain.TransactionType, orm_transaction.type),
        account_id=orm_transaction.account_id,
        category_id=orm_transaction.category_id,
        payment_type=payment_type,
    )


def special_date_to_domain(orm_date: ORMSpecialDate) -> domain.SpecialDate:
    """Convert SQLAlchemy SpecialDate model to domain SpecialDate entity."""
    return domain.SpecialDate(
        id=orm_date.id,
        name=orm_date.name,
        date=to_date(orm_date.date),
        description=orm_date.description,
        is_recurring=bool(orm_date.is_recurring),
        is_completed=bool(orm_date.is_completed),
    )


def savings_goal_to_domain(orm_goal: ORMSavingsGoal) -> domain.SavingsGoal:
    """Convert SQLAlchemy SavingsGoal model to domain SavingsGoal entity."""
    return domain.SavingsGoal(
        id=orm_goal.id,
        name=orm_goal.name,
        target_amount=to_decimal(orm_goal.target_amount),
        current_amount=to_decimal(orm_goal.current_amount),
        target_date=to_optional_date(orm_goal.target_date),
        created_at=orm_goal.created_at,
    )


def savings_movement_to_domain(orm_movement: ORMSavingsMovement) -> domain.SavingsMovement:
    """Convert SQLAlchemy SavingsMovement model to domain SavingsMovement entity."""
    return domain.SavingsMovement(
        id=orm_movement.id,
        type=to_enum(domain.MovementType, orm_movement.type),
        amount=to_decimal(orm_movement.amount),
        date=to_date(orm_movement.date),
        goal_id=orm_movement.goal_id,
        account_id=orm_movement.account_id,
        note=orm_movement.note,
    )


def weekly_goal_to_domain(orm_goal: ORMWeeklyGoal) -> domain.WeeklyGoal:
    """Convert SQLAlchemy WeeklyGoal model to domain WeeklyGoal entity.

    Trailing unset week slots are dropped so the tuple only covers weeks
    that were ever planned.
    """
    amounts = [to_optional_decimal(getattr(orm_goal, column)) for column in WEEK_COLUMNS]
    while amounts and amounts[-1] is None:
        amounts.pop()
    return domain.WeeklyGoal(
        id=orm_goal.id,
        year=int(orm_goal.year),
        month=int(orm_goal.month),
        category_id=orm_goal.category_id,
        weekly_amounts=tuple(amounts),
        monthly_amount=to_optional_decimal(orm_goal.monthly_amount),
    )


def monthly_note_to_domain(orm_note: ORMMonthlyNote) -> domain.MonthlyNote:
    """Convert SQLAlchemy MonthlyNote model to domain MonthlyNote entity."""
    return domain.MonthlyNote(
        id=orm_note.id,
        year=int(orm_note.year),
        month=int(orm_note.month),
        content=orm_note.content or "",
    )


ORM_MODELS: dict[Table, type] = {
    Table.ACCOUNTS: ORMAccount,
    Table.CATEGORIES: ORMCategory,
    Table.TRANSACTIONS: ORMTransaction,
    Table.SPECIAL_DATES: ORMSpecialDate,
    Table.SAVINGS_GOALS: ORMSavingsGoal,
    Table.SAVINGS_MOVEMENTS: ORMSavingsMovement,
    Table.WEEKLY_GOALS: ORMWeeklyGoal,
    Table.MONTHLY_NOTES: ORMMonthlyNote,
}

TO_DOMAIN: dict[Table, Callable[[Any], Any]] = {
    Table.ACCOUNTS: account_to_domain,
    Table.CATEGORIES: category_to_domain,
    Table.TRANSACTIONS: transaction_to_domain,
    Table.SPECIAL_DATES: special_date_to_domain,
    Table.SAVINGS_GOALS: savings_goal_to_domain,
    Table.SAVINGS_MOVEMENTS: savings_movement_to_domain,
    Table.WEEKLY_GOALS: weekly_goal_to_domain,
    Table.MONTHLY_NOTES: monthly_note_to_domain,
}


def to_columns(table: Table, values: dict[str, Any]) -> dict[str, Any]:
    """Convert domain field values into column values for ``table``.

    Enum members are stored by value; a weekly goal's amount tuple is
    spread over its week columns.
    """
    columns = {}
    for name, value in values.items():
        if name == "weekly_amounts" and table == Table.WEEKLY_GOALS:
            padded = list(value) + [None] * (len(WEEK_COLUMNS) - len(value))
            columns.update(zip(WEEK_COLUMNS, padded))
        elif isinstance(value, Enum):
            columns[name] = value.value
        else:
            columns[name] = value
    return columns
