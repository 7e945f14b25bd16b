"""Tests for the SQLAlchemy gateway."""

import pytest
from datetime import date
from decimal import Decimal

from moneybox.database.base import Table
from moneybox.domain import entities
from moneybox.domain.errors import NotFoundError, PersistenceError, ValidationError


def _account(gateway, user_id="u1", name="Checking", balance="100"):
    return gateway.insert(
        Table.ACCOUNTS,
        user_id,
        {"name": name, "type": entities.AccountType.CHECKING, "balance": Decimal(balance)},
    )


def _category(gateway, user_id="u1"):
    return gateway.insert(
        Table.CATEGORIES,
        user_id,
        {"name": "Food", "type": entities.TransactionType.EXPENSE, "color": "#ef4444"},
    )


class TestRowCrud:
    """Tests for insert, select, update and delete."""

    def test_insert_returns_domain_entity_with_id(self, temp_gateway):
        account = _account(temp_gateway)

        assert isinstance(account, entities.Account)
        assert account.id
        assert account.balance == Decimal("100")

    def test_select_is_scoped_by_user(self, temp_gateway):
        _account(temp_gateway, user_id="u1", name="Mine")
        _account(temp_gateway, user_id="u2", name="Theirs")

        accounts = temp_gateway.select(Table.ACCOUNTS, "u1")
        assert [a.name for a in accounts] == ["Mine"]

    def test_select_keeps_insertion_order(self, temp_gateway):
        for name in ("A", "B", "C"):
            _account(temp_gateway, name=name)
        assert [a.name for a in temp_gateway.select(Table.ACCOUNTS, "u1")] == ["A", "B", "C"]

    def test_update_writes_fields(self, temp_gateway):
        account = _account(temp_gateway)
        temp_gateway.update(Table.ACCOUNTS, "u1", account.id, {"balance": Decimal("42.50")})

        (stored,) = temp_gateway.select(Table.ACCOUNTS, "u1")
        assert stored.balance == Decimal("42.50")

    def test_update_other_users_row_is_not_found(self, temp_gateway):
        account = _account(temp_gateway, user_id="u1")
        with pytest.raises(NotFoundError):
            temp_gateway.update(Table.ACCOUNTS, "u2", account.id, {"name": "Hijacked"})

    def test_delete_removes_row(self, temp_gateway):
        account = _account(temp_gateway)
        temp_gateway.delete(Table.ACCOUNTS, "u1", account.id)
        assert temp_gateway.select(Table.ACCOUNTS, "u1") == []

    def test_delete_missing_row(self, temp_gateway):
        with pytest.raises(NotFoundError):
            temp_gateway.delete(Table.ACCOUNTS, "u1", "missing")

    def test_foreign_keys_are_enforced(self, temp_gateway):
        category = _category(temp_gateway)
        with pytest.raises(PersistenceError):
            temp_gateway.insert(
                Table.TRANSACTIONS,
                "u1",
                {
                    "description": "Lunch",
                    "amount": Decimal("20"),
                    "date": date(2024, 1, 10),
                    "type": entities.TransactionType.EXPENSE,
                    "account_id": "no-such-account",
                    "category_id": category.id,
                },
            )
        # The gateway stays usable after a failed write
        assert temp_gateway.select(Table.TRANSACTIONS, "u1") == []


class TestAtomic:
    """Tests for atomic blocks."""

    def test_writes_commit_together(self, temp_gateway):
        with temp_gateway.atomic():
            _account(temp_gateway, name="A")
            _account(temp_gateway, name="B")
        assert len(temp_gateway.select(Table.ACCOUNTS, "u1")) == 2

    def test_failure_rolls_back_every_write(self, temp_gateway):
        account = _account(temp_gateway)
        with pytest.raises(NotFoundError):
            with temp_gateway.atomic():
                temp_gateway.update(Table.ACCOUNTS, "u1", account.id, {"balance": Decimal("0")})
                temp_gateway.delete(Table.ACCOUNTS, "u1", "missing")

        (stored,) = temp_gateway.select(Table.ACCOUNTS, "u1")
        assert stored.balance == Decimal("100")

    def test_nested_blocks_commit_once(self, temp_gateway):
        with pytest.raises(RuntimeError):
            with temp_gateway.atomic():
                with temp_gateway.atomic():
                    _account(temp_gateway, name="Inner")
                raise RuntimeError("boom")
        assert temp_gateway.select(Table.ACCOUNTS, "u1") == []


class TestUpsert:
    """Tests for upsert on natural keys."""

    def test_weekly_goal_upsert_replaces_by_key(self, temp_gateway):
        category = _category(temp_gateway)
        key = {"year": 2024, "month": 7, "category_id": category.id}

        first = temp_gateway.upsert(
            Table.WEEKLY_GOALS, "u1", key, {"weekly_amounts": (Decimal("100"),)}
        )
        second = temp_gateway.upsert(
            Table.WEEKLY_GOALS,
            "u1",
            key,
            {"weekly_amounts": (Decimal("50"), Decimal("60")), "monthly_amount": Decimal("300")},
        )

        assert second.id == first.id
        (stored,) = temp_gateway.select(Table.WEEKLY_GOALS, "u1")
        assert stored.weekly_amounts == (Decimal("50"), Decimal("60"))
        assert stored.monthly_amount == Decimal("300")

    def test_monthly_note_upsert_inserts_per_month(self, temp_gateway):
        temp_gateway.upsert(Table.MONTHLY_NOTES, "u1", {"year": 2024, "month": 0}, {"content": "Jan"})
        temp_gateway.upsert(Table.MONTHLY_NOTES, "u1", {"year": 2024, "month": 1}, {"content": "Feb"})
        temp_gateway.upsert(Table.MONTHLY_NOTES, "u1", {"year": 2024, "month": 0}, {"content": "Jan!"})

        notes = temp_gateway.select(Table.MONTHLY_NOTES, "u1")
        assert sorted(n.content for n in notes) == ["Feb", "Jan!"]

    def test_upsert_requires_natural_key(self, temp_gateway):
        with pytest.raises(ValidationError):
            temp_gateway.upsert(Table.MONTHLY_NOTES, "u1", {"year": 2024}, {"content": "x"})
        with pytest.raises(ValidationError):
            temp_gateway.upsert(Table.ACCOUNTS, "u1", {"name": "x"}, {})
