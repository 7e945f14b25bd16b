"""Balance effects of transactions and savings movements."""

from collections import defaultdict
from decimal import Decimal

from moneybox.domain.entities import MovementType, TransactionType


def transaction_effect(txn_type: TransactionType, amount: Decimal) -> Decimal:
    """Signed contribution of a transaction to its account's balance."""
    return amount if txn_type == TransactionType.INCOME else -amount


def reversal(txn_type: TransactionType, amount: Decimal) -> Decimal:
    """Balance change that undoes a transaction's effect."""
    return -transaction_effect(txn_type, amount)


def movement_effect(movement_type: MovementType, amount: Decimal) -> tuple[Decimal, Decimal]:
    """Return ``(account_delta, goal_delta)`` for a savings movement.

    A deposit takes money out of the account and into the goal; a withdraw
    does the opposite.
    """
    if movement_type == MovementType.DEPOSIT:
        return -amount, amount
    return amount, -amount


def balance_deltas(
    old_target: str, old_effect: Decimal, new_target: str, new_effect: Decimal
) -> dict[str, Decimal]:
    """Combine a reversed old effect and a new effect per target id.

    When both effects land on the same target they are summed into one
    delta; otherwise each target gets its own.
    """
    deltas: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    deltas[old_target] += old_effect
    deltas[new_target] += new_effect
    return dict(deltas)
