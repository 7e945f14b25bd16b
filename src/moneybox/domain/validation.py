"""Input checks applied before store operations are invoked.

The store trusts its callers on these points; commands run them first so
bad input never reaches the gateway.
"""

from decimal import Decimal
from typing import Any, Optional

from moneybox.domain.entities import (
    Account,
    Category,
    MovementType,
    SavingsGoal,
    TransactionType,
)
from moneybox.domain.errors import InvalidPeriodError, ValidationError


CENT = Decimal("0.01")


def check_cents(amount: Optional[Decimal], field: str = "Amount") -> None:
    """Money is stored to the cent; reject amounts with finer precision."""
    if amount is not None and amount != amount.quantize(CENT):
        raise ValidationError(f"{field} cannot have more than two decimal places, got {amount}")


def require_positive_amount(amount: Optional[Decimal], field: str = "Amount") -> Decimal:
    """Return ``amount`` if it is set, greater than zero and whole cents."""
    if amount is None:
        raise ValidationError(f"{field} is required")
    if amount <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    check_cents(amount, field)
    return amount


def require_name(value: Optional[str], field: str = "Name") -> str:
    """Return the stripped value, rejecting missing or blank text."""
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()


def check_category_matches(category: Category, txn_type: TransactionType) -> None:
    """A transaction must have the same type as its category."""
    if category.type != txn_type:
        raise ValidationError(
            f"Category '{category.name}' is for {category.type.value} transactions, "
            f"not {txn_type.value}"
        )


def check_movement_allowed(
    movement_type: MovementType, amount: Decimal, account: Account, goal: SavingsGoal
) -> None:
    """Reject movements that would overdraw the account or the goal."""
    require_positive_amount(amount)
    if movement_type == MovementType.DEPOSIT and account.balance < amount:
        raise ValidationError(
            f"Insufficient balance in account '{account.name}' "
            f"({account.balance:,.2f} available)"
        )
    if movement_type == MovementType.WITHDRAW and goal.current_amount < amount:
        raise ValidationError(
            f"Insufficient savings in goal '{goal.name}' "
            f"({goal.current_amount:,.2f} available)"
        )


def parse_period(year: Any, month: Any) -> tuple[int, int]:
    """Return ``(year, month_index)`` with the month in 0-11.

    Accepts ints or numeric strings. Raises InvalidPeriodError for anything
    that is not a valid calendar month.
    """
    try:
        year_value = int(str(year).strip())
        month_value = int(str(month).strip())
    except (TypeError, ValueError) as e:
        raise InvalidPeriodError(f"Invalid period {year!r}/{month!r}") from e
    if not 0 <= month_value <= 11:
        raise InvalidPeriodError(f"Month index must be between 0 and 11, got {month_value}")
    if not 1 <= year_value <= 9999:
        raise InvalidPeriodError(f"Invalid year {year_value}")
    return year_value, month_value


def parse_month_key(value: str) -> tuple[int, int]:
    """Parse a ``YYYY-MM`` string (month 1-12) into ``(year, month_index)``."""
    parts = value.strip().split("-") if value else []
    if len(parts) != 2:
        raise InvalidPeriodError(f"Expected a month like 2024-08, got {value!r}")
    year, month = parts
    try:
        month_number = int(month)
    except ValueError as e:
        raise InvalidPeriodError(f"Expected a month like 2024-08, got {value!r}") from e
    return parse_period(year, month_number - 1)
