"""Domain model entities for moneybox.

These are pure data classes representing the user's financial records,
independent of database schema. The store hands them out as read-only
snapshots; changes go through the store's operations.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

# Number of weekly budget slots in a month plan.
MAX_WEEKS = 5


class AccountType(str, Enum):
    """Kind of account."""

    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT = "credit"


class TransactionType(str, Enum):
    """Direction of a transaction; also the type of a category."""

    INCOME = "income"
    EXPENSE = "expense"


class PaymentType(str, Enum):
    """How an expense is bucketed in the monthly report."""

    SINGLE = "single"
    MONTHLY = "monthly"
    RECURRING = "recurring"


class MovementType(str, Enum):
    """Direction of a savings movement."""

    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"


@dataclass(frozen=True)
class Account:
    """Account domain entity."""

    id: str
    name: str
    type: AccountType
    balance: Decimal
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: str
    name: str
    type: TransactionType
    color: str


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``amount`` is always positive; ``type`` carries the direction.
    """

    id: str
    description: str
    amount: Decimal
    date: date
    type: TransactionType
    account_id: str
    category_id: str
    payment_type: Optional[PaymentType] = None


@dataclass(frozen=True)
class SpecialDate:
    """Special date (birthday, due date, anniversary) domain entity."""

    id: str
    name: str
    date: date
    description: Optional[str] = None
    is_recurring: bool = False
    is_completed: bool = False


@dataclass(frozen=True)
class SavingsGoal:
    """Savings goal domain entity."""

    id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal
    target_date: Optional[date] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class SavingsMovement:
    """Transfer between an account and a savings goal."""

    id: str
    type: MovementType
    amount: Decimal
    date: date
    goal_id: str
    account_id: str
    note: Optional[str] = None


@dataclass(frozen=True)
class WeeklyGoal:
    """Budget plan for one expense category in one month."""

    id: str
    year: int
    month: int
    category_id: str
    weekly_amounts: tuple[Optional[Decimal], ...] = ()
    monthly_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class MonthlyNote:
    """Free-text note attached to a month."""

    id: str
    year: int
    month: int
    content: str


@dataclass(frozen=True)
class FinanceState:
    """Complete in-memory snapshot of one user's data."""

    accounts: tuple[Account, ...] = ()
    categories: tuple[Category, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    special_dates: tuple[SpecialDate, ...] = ()
    savings_goals: tuple[SavingsGoal, ...] = ()
    savings_movements: tuple[SavingsMovement, ...] = ()
    weekly_goals: tuple[WeeklyGoal, ...] = ()
    monthly_notes: tuple[MonthlyNote, ...] = ()
