"""Partial update structs, one per entity.

A field left at ``None`` is not changed. Optional entity fields that can be
cleared have an explicit ``clear_*`` flag, since ``None`` already means
"leave alone".
"""

import datetime as dt
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from moneybox.domain.entities import (
    AccountType,
    MovementType,
    PaymentType,
    TransactionType,
)
from moneybox.domain.errors import ValidationError
from moneybox.domain.validation import check_cents


def _check_enum(name: str, value: Any, enum_type: type[Enum]) -> None:
    if value is not None and not isinstance(value, enum_type):
        raise ValidationError(f"{name} must be a {enum_type.__name__}, got {value!r}")


def _check_positive(name: str, value: Optional[Decimal]) -> None:
    if value is not None and value <= 0:
        raise ValidationError(f"{name} must be greater than zero")
    check_cents(value, name)


def _check_not_negative(name: str, value: Optional[Decimal]) -> None:
    if value is not None and value < 0:
        raise ValidationError(f"{name} cannot be negative")
    check_cents(value, name)


def _check_name(name: str, value: Optional[str]) -> None:
    if value is not None and not value.strip():
        raise ValidationError(f"{name} cannot be empty")


def _check_clear(name: str, value: Any, clear: bool) -> None:
    if clear and value is not None:
        raise ValidationError(f"Cannot set both {name} and clear_{name}")


class _PartialUpdate(ABC):
    """Shared behaviour for the update dataclasses."""

    # Maps clear_<field> flags to the entity field they reset.
    _clearable: tuple[str, ...] = ()

    def changes(self) -> dict[str, Any]:
        """Return the entity fields this update sets."""
        result = {}
        for f in fields(self):
            if f.name.startswith("clear_"):
                continue
            value = getattr(self, f.name)
            if value is not None:
                result[f.name] = value
        for name in self._clearable:
            if getattr(self, f"clear_{name}"):
                result[name] = None
        return result

    def is_empty(self) -> bool:
        return not self.changes()

    @abstractmethod
    def validate(self) -> None:
        """Raise ValidationError if the update cannot be applied."""


@dataclass(frozen=True)
class AccountUpdate(_PartialUpdate):
    name: Optional[str] = None
    type: Optional[AccountType] = None
    balance: Optional[Decimal] = None

    def validate(self) -> None:
        _check_name("name", self.name)
        _check_enum("type", self.type, AccountType)
        check_cents(self.balance, "balance")


@dataclass(frozen=True)
class CategoryUpdate(_PartialUpdate):
    name: Optional[str] = None
    type: Optional[TransactionType] = None
    color: Optional[str] = None

    def validate(self) -> None:
        _check_name("name", self.name)
        _check_enum("type", self.type, TransactionType)


@dataclass(frozen=True)
class TransactionUpdate(_PartialUpdate):
    """Changes to a transaction.

    Amount, type and account changes are reconciled against account
    balances by the store as one combined edit.
    """

    description: Optional[str] = None
    amount: Optional[Decimal] = None
    date: Optional[dt.date] = None
    type: Optional[TransactionType] = None
    account_id: Optional[str] = None
    category_id: Optional[str] = None
    payment_type: Optional[PaymentType] = None
    clear_payment_type: bool = False

    _clearable = ("payment_type",)

    def validate(self) -> None:
        _check_positive("amount", self.amount)
        _check_enum("type", self.type, TransactionType)
        _check_enum("payment_type", self.payment_type, PaymentType)
        _check_clear("payment_type", self.payment_type, self.clear_payment_type)

    def touches_balance(self) -> bool:
        """Whether this update can move money between or within accounts."""
        return any(v is not None for v in (self.amount, self.type, self.account_id))


@dataclass(frozen=True)
class SpecialDateUpdate(_PartialUpdate):
    name: Optional[str] = None
    date: Optional[dt.date] = None
    description: Optional[str] = None
    is_recurring: Optional[bool] = None
    is_completed: Optional[bool] = None
    clear_description: bool = False

    _clearable = ("description",)

    def validate(self) -> None:
        _check_name("name", self.name)
        _check_clear("description", self.description, self.clear_description)


@dataclass(frozen=True)
class SavingsGoalUpdate(_PartialUpdate):
    """Changes to a savings goal's own fields.

    ``current_amount`` is absent on purpose: it only moves through savings
    movements.
    """

    name: Optional[str] = None
    target_amount: Optional[Decimal] = None
    target_date: Optional[dt.date] = None
    clear_target_date: bool = False

    _clearable = ("target_date",)

    def validate(self) -> None:
        _check_name("name", self.name)
        _check_positive("target_amount", self.target_amount)
        _check_clear("target_date", self.target_date, self.clear_target_date)


@dataclass(frozen=True)
class SavingsMovementUpdate(_PartialUpdate):
    type: Optional[MovementType] = None
    amount: Optional[Decimal] = None
    date: Optional[dt.date] = None
    goal_id: Optional[str] = None
    account_id: Optional[str] = None
    note: Optional[str] = None
    clear_note: bool = False

    _clearable = ("note",)

    def validate(self) -> None:
        _check_enum("type", self.type, MovementType)
        _check_positive("amount", self.amount)
        _check_clear("note", self.note, self.clear_note)


def validate_weekly_amounts(
    weekly_amounts: tuple[Optional[Decimal], ...], monthly_amount: Optional[Decimal], max_weeks: int
) -> None:
    """Validate the planned amounts of a weekly goal."""
    if len(weekly_amounts) > max_weeks:
        raise ValidationError(
            f"A month plan has at most {max_weeks} weekly amounts, got {len(weekly_amounts)}"
        )
    for index, amount in enumerate(weekly_amounts, start=1):
        _check_not_negative(f"week {index} amount", amount)
    _check_not_negative("monthly amount", monthly_amount)
