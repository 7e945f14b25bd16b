"""Tests for database mappers."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from moneybox.database.base import Table
from moneybox.database.models import (
    Account as ORMAccount,
    Transaction as ORMTransaction,
    SpecialDate as ORMSpecialDate,
    WeeklyGoal as ORMWeeklyGoal,
    MonthlyNote as ORMMonthlyNote,
)
from moneybox.database.mappers import (
    account_to_domain,
    monthly_note_to_domain,
    special_date_to_domain,
    to_columns,
    to_date,
    to_decimal,
    transaction_to_domain,
    weekly_goal_to_domain,
)
from moneybox.domain.entities import (
    Account,
    AccountType,
    PaymentType,
    Transaction,
    TransactionType,
)
from moneybox.domain.errors import ValidationError


class TestCoercion:
    """Tests for raw value coercion."""

    def test_to_decimal(self):
        assert to_decimal(12.5) == Decimal("12.5")
        assert to_decimal("7.10") == Decimal("7.10")
        with pytest.raises(ValidationError):
            to_decimal("abc")

    def test_to_date_accepts_several_shapes(self):
        assert to_date(date(2024, 3, 1)) == date(2024, 3, 1)
        assert to_date(datetime(2024, 3, 1, 15, 30)) == date(2024, 3, 1)
        assert to_date("2024-03-01") == date(2024, 3, 1)
        assert to_date("2024-03-01T00:00:00+00:00") == date(2024, 3, 1)

    def test_to_date_rejects_garbage(self):
        with pytest.raises(ValidationError):
            to_date("not a date")


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        """Test converting ORM Account to domain Account."""
        orm_account = ORMAccount(
            id="acc-1",
            user_id="u",
            name="Checking",
            type="checking",
            balance="1500.25",
            created_at=datetime.now(UTC),
        )
        domain_account = account_to_domain(orm_account)

        assert isinstance(domain_account, Account)
        assert domain_account.id == "acc-1"
        assert domain_account.type == AccountType.CHECKING
        assert domain_account.balance == Decimal("1500.25")
        assert domain_account.created_at == orm_account.created_at

    def test_unknown_account_type_is_rejected(self):
        orm_account = ORMAccount(id="acc-1", user_id="u", name="X", type="bitcoin", balance=0)
        with pytest.raises(ValidationError):
            account_to_domain(orm_account)


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_transaction_to_domain(self):
        orm_transaction = ORMTransaction(
            id="t-1",
            user_id="u",
            description="Rent",
            amount=1800,
            date=date(2024, 8, 5),
            type="expense",
            account_id="acc-1",
            category_id="cat-1",
            payment_type="monthly",
        )
        txn = transaction_to_domain(orm_transaction)

        assert isinstance(txn, Transaction)
        assert txn.amount == Decimal("1800")
        assert txn.type == TransactionType.EXPENSE
        assert txn.payment_type == PaymentType.MONTHLY

    def test_missing_payment_type_stays_none(self):
        orm_transaction = ORMTransaction(
            id="t-1",
            user_id="u",
            description="Salary",
            amount=5000,
            date=date(2024, 8, 1),
            type="income",
            account_id="acc-1",
            category_id="cat-1",
            payment_type=None,
        )
        assert transaction_to_domain(orm_transaction).payment_type is None


def test_special_date_flags_are_booleans():
    orm_date = ORMSpecialDate(
        id="d-1", user_id="u", name="Birthday", date=date(2024, 5, 2), is_recurring=1, is_completed=0
    )
    special = special_date_to_domain(orm_date)
    assert special.is_recurring is True
    assert special.is_completed is False


def test_weekly_goal_drops_trailing_unset_weeks():
    orm_goal = ORMWeeklyGoal(
        id="g-1",
        user_id="u",
        year=2024,
        month=7,
        category_id="cat-1",
        week_1=Decimal("100"),
        week_2=None,
        week_3=Decimal("50"),
        week_4=None,
        week_5=None,
        monthly_amount=None,
    )
    goal = weekly_goal_to_domain(orm_goal)
    assert goal.weekly_amounts == (Decimal("100"), None, Decimal("50"))
    assert goal.monthly_amount is None


def test_monthly_note_defaults_to_empty_content():
    orm_note = ORMMonthlyNote(id="n-1", user_id="u", year=2024, month=0, content=None)
    assert monthly_note_to_domain(orm_note).content == ""


class TestToColumns:
    """Tests for domain values to column values."""

    def test_enums_are_stored_by_value(self):
        columns = to_columns(Table.ACCOUNTS, {"type": AccountType.CREDIT, "name": "Card"})
        assert columns == {"type": "credit", "name": "Card"}

    def test_weekly_amounts_spread_over_week_columns(self):
        columns = to_columns(
            Table.WEEKLY_GOALS, {"weekly_amounts": (Decimal("10"), Decimal("20"))}
        )
        assert columns == {
            "week_1": Decimal("10"),
            "week_2": Decimal("20"),
            "week_3": None,
            "week_4": None,
            "week_5": None,
        }
