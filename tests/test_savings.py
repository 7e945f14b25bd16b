"""Tests for savings goals and movements."""

import pytest
from datetime import date
from decimal import Decimal

from moneybox.database.base import Table
from moneybox.domain.entities import MovementType
from moneybox.domain.errors import DependencyError, NotFoundError, PersistenceError, ValidationError
from moneybox.domain.reports import savings_progress
from moneybox.domain.updates import AccountUpdate, SavingsGoalUpdate, SavingsMovementUpdate
from moneybox.domain.validation import check_movement_allowed


@pytest.fixture
def trip(store):
    """Savings goal of 2000."""
    return store.add_savings_goal("Trip", Decimal("2000"), target_date=date(2025, 1, 1))


def _deposit(store, goal, account, amount="300"):
    return store.add_savings_movement(
        type=MovementType.DEPOSIT,
        amount=Decimal(amount),
        date=date(2024, 8, 1),
        goal_id=goal.id,
        account_id=account.id,
    )


def test_new_goal_starts_empty(trip):
    assert trip.current_amount == Decimal("0")
    assert trip.target_date == date(2025, 1, 1)


def test_goal_target_must_be_positive(store):
    with pytest.raises(ValidationError):
        store.add_savings_goal("Nothing", Decimal("0"))


def test_deposit_moves_money_from_account_to_goal(store, checking, trip):
    _deposit(store, trip, checking)

    assert store.get_account(checking.id).balance == Decimal("700")
    assert store.get_savings_goal(trip.id).current_amount == Decimal("300")


def test_withdraw_moves_money_back(store, checking, trip):
    _deposit(store, trip, checking, "300")
    store.add_savings_movement(
        MovementType.WITHDRAW, Decimal("100"), date(2024, 8, 2), trip.id, checking.id, note="Tickets"
    )

    assert store.get_account(checking.id).balance == Decimal("800")
    assert store.get_savings_goal(trip.id).current_amount == Decimal("200")
    assert [m.note for m in store.movements_for_goal(trip.id)] == [None, "Tickets"]


def test_goal_total_is_not_capped_at_target(store, checking, trip):
    store.update_account(checking.id, AccountUpdate(balance=Decimal("5000")))
    _deposit(store, trip, checking, "2500")

    goal = store.get_savings_goal(trip.id)
    assert goal.current_amount == Decimal("2500")
    assert savings_progress(goal) == Decimal("100")


def test_update_movement_reconciles_both_sides(store, checking, trip):
    movement = _deposit(store, trip, checking, "300")
    store.update_savings_movement(movement.id, SavingsMovementUpdate(amount=Decimal("100")))

    assert store.get_account(checking.id).balance == Decimal("900")
    assert store.get_savings_goal(trip.id).current_amount == Decimal("100")


def test_update_movement_to_other_goal(store, checking, trip):
    other = store.add_savings_goal("Car", Decimal("10000"))
    movement = _deposit(store, trip, checking, "300")
    store.update_savings_movement(movement.id, SavingsMovementUpdate(goal_id=other.id))

    assert store.get_savings_goal(trip.id).current_amount == Decimal("0")
    assert store.get_savings_goal(other.id).current_amount == Decimal("300")
    assert store.get_account(checking.id).balance == Decimal("700")


def test_remove_movement_undoes_transfer(store, checking, trip):
    movement = _deposit(store, trip, checking, "300")
    store.remove_savings_movement(movement.id)

    assert store.get_account(checking.id).balance == Decimal("1000")
    assert store.get_savings_goal(trip.id).current_amount == Decimal("0")
    assert store.savings_movements == ()


def test_failed_goal_write_keeps_movement(store, checking, trip, temp_gateway, monkeypatch):
    movement = _deposit(store, trip, checking, "300")
    before = store.state
    original_update = temp_gateway.update

    def failing_update(table, user_id, entity_id, values):
        if table == Table.SAVINGS_GOALS:
            raise PersistenceError("database is locked")
        return original_update(table, user_id, entity_id, values)

    monkeypatch.setattr(temp_gateway, "update", failing_update)
    with pytest.raises(PersistenceError):
        store.remove_savings_movement(movement.id)

    assert store.state is before
    assert [m.id for m in temp_gateway.select(Table.SAVINGS_MOVEMENTS, store.user_id)] == [movement.id]
    (account,) = temp_gateway.select(Table.ACCOUNTS, store.user_id)
    (goal,) = temp_gateway.select(Table.SAVINGS_GOALS, store.user_id)
    assert account.balance == Decimal("700")
    assert goal.current_amount == Decimal("300")


def test_failed_delete_keeps_movement(store, checking, trip, temp_gateway, monkeypatch):
    movement = _deposit(store, trip, checking, "300")
    before = store.state

    def failing_delete(*args, **kwargs):
        raise PersistenceError("disk I/O error")

    monkeypatch.setattr(temp_gateway, "delete", failing_delete)
    with pytest.raises(PersistenceError):
        store.remove_savings_movement(movement.id)
    assert store.state is before
    assert len(temp_gateway.select(Table.SAVINGS_MOVEMENTS, store.user_id)) == 1


def test_movement_requires_known_goal(store, checking):
    with pytest.raises(NotFoundError):
        store.add_savings_movement(
            MovementType.DEPOSIT, Decimal("1"), date(2024, 1, 1), "missing", checking.id
        )


def test_goal_with_movements_cannot_be_removed(store, checking, trip):
    _deposit(store, trip, checking)
    with pytest.raises(DependencyError):
        store.remove_savings_goal(trip.id)
    with pytest.raises(DependencyError):
        store.remove_account(checking.id)


def test_goal_update_and_clear_target_date(store, trip):
    updated = store.update_savings_goal(
        trip.id, SavingsGoalUpdate(name="Japan", clear_target_date=True)
    )
    assert updated.name == "Japan"
    assert updated.target_date is None
    assert updated.current_amount == Decimal("0")


class TestMovementChecks:
    """Tests for overdraft checks applied before movements."""

    def test_deposit_needs_account_balance(self, checking, trip):
        with pytest.raises(ValidationError, match="Insufficient balance"):
            check_movement_allowed(MovementType.DEPOSIT, Decimal("1500"), checking, trip)

    def test_withdraw_needs_goal_balance(self, checking, trip):
        with pytest.raises(ValidationError, match="Insufficient savings"):
            check_movement_allowed(MovementType.WITHDRAW, Decimal("1"), checking, trip)

    def test_allowed_movement(self, checking, trip):
        check_movement_allowed(MovementType.DEPOSIT, Decimal("1000"), checking, trip)
