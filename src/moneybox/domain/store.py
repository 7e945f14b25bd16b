"""Finance state store.

In-memory projection of one user's records, kept in step with the gateway.
Every mutation persists first and only then swaps in a new snapshot, so a
failed write leaves the snapshot exactly as it was. The store is also the
only place that moves account balances and savings goal totals as a side
effect of transactions and savings movements.
"""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional

from moneybox.database.base import Gateway, Table
from moneybox.domain.entities import (
    Account,
    AccountType,
    Category,
    FinanceState,
    MAX_WEEKS,
    MonthlyNote,
    MovementType,
    PaymentType,
    SavingsGoal,
    SavingsMovement,
    SpecialDate,
    Transaction,
    TransactionType,
    WeeklyGoal,
)
from moneybox.domain.errors import (
    ConflictError,
    DependencyError,
    NotAuthenticatedError,
    NotFoundError,
    account_not_found,
    category_not_found,
    entity_delete_blocked,
    entity_not_found,
)
from moneybox.domain.ledger import balance_deltas, movement_effect, reversal, transaction_effect
from moneybox.domain.updates import (
    AccountUpdate,
    CategoryUpdate,
    SavingsGoalUpdate,
    SavingsMovementUpdate,
    SpecialDateUpdate,
    TransactionUpdate,
    validate_weekly_amounts,
)
from moneybox.domain.validation import check_cents, parse_period, require_positive_amount
from moneybox.session import AuthEvent, AuthEventKind, SessionProvider

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

DEFAULT_CATEGORY_COLOR = "#64748b"

# Seeded for users who have no categories yet.
DEFAULT_CATEGORIES = (
    ("Food", TransactionType.EXPENSE, "#ef4444"),
    ("Transport", TransactionType.EXPENSE, "#f97316"),
    ("Housing", TransactionType.EXPENSE, "#eab308"),
    ("Salary", TransactionType.INCOME, "#22c55e"),
    ("Freelance", TransactionType.INCOME, "#10b981"),
)

# Snapshot attribute holding each table's rows.
COLLECTIONS = {
    Table.ACCOUNTS: "accounts",
    Table.CATEGORIES: "categories",
    Table.TRANSACTIONS: "transactions",
    Table.SPECIAL_DATES: "special_dates",
    Table.SAVINGS_GOALS: "savings_goals",
    Table.SAVINGS_MOVEMENTS: "savings_movements",
    Table.WEEKLY_GOALS: "weekly_goals",
    Table.MONTHLY_NOTES: "monthly_notes",
}


class FinanceStore:
    """Authoritative in-memory cache of the signed-in user's finances."""

    def __init__(self, gateway: Gateway, session: SessionProvider):
        """Initialize the store.

        Args:
            gateway: Gateway used for every read and write
            session: Provider of the current user id
        """
        self.gateway = gateway
        self.session = session
        self._state = FinanceState()
        self._user_id: Optional[str] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    # Lifecycle
    def attach(self) -> None:
        """Follow the session: load on sign-in, reset on sign-out."""
        if self._unsubscribe is None:
            self._unsubscribe = self.session.subscribe(self._on_auth_event)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_auth_event(self, event: AuthEvent) -> None:
        if event.kind == AuthEventKind.SIGNED_OUT:
            self.reset()
        elif event.kind == AuthEventKind.SIGNED_IN and event.user_id != self._user_id:
            self.load_all()

    def reset(self) -> None:
        """Drop the snapshot."""
        self._state = FinanceState()
        self._user_id = None

    def load_all(self) -> FinanceState:
        """Load every table for the current user and replace the snapshot.

        Seeds the default categories when the user has none. The new
        snapshot is only installed once everything has been read, so callers
        never observe a partial load.

        Raises:
            NotAuthenticatedError: If nobody is signed in
            PersistenceError: If any read or the seeding fails
        """
        user_id = self.session.get_current_user_id()
        if user_id is None:
            raise NotAuthenticatedError("Sign in before loading finance data")

        with self.gateway.atomic():
            rows = {table: self.gateway.select(table, user_id) for table in COLLECTIONS}
            if not rows[Table.CATEGORIES]:
                logger.info("Seeding default categories for user %s", user_id)
                rows[Table.CATEGORIES] = [
                    self.gateway.insert(
                        Table.CATEGORIES,
                        user_id,
                        {"name": name, "type": category_type, "color": color},
                    )
                    for name, category_type, color in DEFAULT_CATEGORIES
                ]

        self._state = FinanceState(
            **{COLLECTIONS[table]: tuple(items) for table, items in rows.items()}
        )
        self._user_id = user_id
        logger.info(
            "Loaded %d accounts, %d transactions for user %s",
            len(self._state.accounts),
            len(self._state.transactions),
            user_id,
        )
        return self._state

    # Read access
    @property
    def is_loaded(self) -> bool:
        return self._user_id is not None

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def state(self) -> FinanceState:
        return self._state

    @property
    def accounts(self) -> tuple[Account, ...]:
        return self._state.accounts

    @property
    def categories(self) -> tuple[Category, ...]:
        return self._state.categories

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._state.transactions

    @property
    def special_dates(self) -> tuple[SpecialDate, ...]:
        return self._state.special_dates

    @property
    def savings_goals(self) -> tuple[SavingsGoal, ...]:
        return self._state.savings_goals

    @property
    def savings_movements(self) -> tuple[SavingsMovement, ...]:
        return self._state.savings_movements

    @property
    def weekly_goals(self) -> tuple[WeeklyGoal, ...]:
        return self._state.weekly_goals

    @property
    def monthly_notes(self) -> tuple[MonthlyNote, ...]:
        return self._state.monthly_notes

    def get_account(self, account_id: str) -> Optional[Account]:
        return self._find(Table.ACCOUNTS, account_id)

    def get_category(self, category_id: str) -> Optional[Category]:
        return self._find(Table.CATEGORIES, category_id)

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self._find(Table.TRANSACTIONS, transaction_id)

    def get_special_date(self, special_date_id: str) -> Optional[SpecialDate]:
        return self._find(Table.SPECIAL_DATES, special_date_id)

    def get_savings_goal(self, goal_id: str) -> Optional[SavingsGoal]:
        return self._find(Table.SAVINGS_GOALS, goal_id)

    def get_savings_movement(self, movement_id: str) -> Optional[SavingsMovement]:
        return self._find(Table.SAVINGS_MOVEMENTS, movement_id)

    def get_weekly_goal(self, year: int, month: int, category_id: str) -> Optional[WeeklyGoal]:
        for goal in self._state.weekly_goals:
            if (goal.year, goal.month, goal.category_id) == (year, month, category_id):
                return goal
        return None

    def get_monthly_note(self, year: int, month: int) -> Optional[MonthlyNote]:
        for note in self._state.monthly_notes:
            if (note.year, note.month) == (year, month):
                return note
        return None

    def movements_for_goal(self, goal_id: str) -> list[SavingsMovement]:
        return [m for m in self._state.savings_movements if m.goal_id == goal_id]

    def total_balance(self) -> Decimal:
        """Sum of all account balances."""
        return sum((account.balance for account in self._state.accounts), ZERO)

    def total_income(self, month: Optional[int] = None, year: Optional[int] = None) -> Decimal:
        """Income total, optionally limited to a month index (0-11) and/or year."""
        return self._total(TransactionType.INCOME, month, year)

    def total_expenses(self, month: Optional[int] = None, year: Optional[int] = None) -> Decimal:
        """Expense total, optionally limited to a month index (0-11) and/or year."""
        return self._total(TransactionType.EXPENSE, month, year)

    def _total(self, txn_type: TransactionType, month: Optional[int], year: Optional[int]) -> Decimal:
        return sum(
            (
                txn.amount
                for txn in self._state.transactions
                if txn.type == txn_type
                and (month is None or txn.date.month - 1 == month)
                and (year is None or txn.date.year == year)
            ),
            ZERO,
        )

    def recent_transactions(self, limit: int = 5) -> list[Transaction]:
        """Most recently added transactions, newest first."""
        if limit <= 0:
            return []
        return list(reversed(self._state.transactions[-limit:]))

    def filter_transactions(
        self,
        search: Optional[str] = None,
        txn_type: Optional[TransactionType] = None,
        category_id: Optional[str] = None,
        account_id: Optional[str] = None,
    ) -> list[Transaction]:
        """Filter transactions the way the transaction list does.

        Args:
            search: Case-insensitive substring of the description
            txn_type: Only income or only expense
            category_id: Only this category
            account_id: Only this account
        """
        needle = search.lower() if search else None
        return [
            txn
            for txn in self._state.transactions
            if (needle is None or needle in txn.description.lower())
            and (txn_type is None or txn.type == txn_type)
            and (category_id is None or txn.category_id == category_id)
            and (account_id is None or txn.account_id == account_id)
        ]

    # Accounts
    def add_account(
        self, name: str, type: AccountType, balance: Decimal = ZERO
    ) -> Account:
        """Create an account with an opening balance."""
        check_cents(balance, "Balance")
        return self._add(Table.ACCOUNTS, {"name": name, "type": type, "balance": balance})

    def update_account(self, account_id: str, update: AccountUpdate) -> Optional[Account]:
        return self._update(Table.ACCOUNTS, account_id, update)

    def remove_account(self, account_id: str) -> None:
        """Delete an account that no transaction or movement references.

        Raises:
            DependencyError: If the account is still referenced
        """
        account = self._find(Table.ACCOUNTS, account_id)
        if account is None:
            return
        self._check_dependents(
            "account",
            account.name,
            {
                "transaction": sum(1 for t in self._state.transactions if t.account_id == account_id),
                "savings movement": sum(
                    1 for m in self._state.savings_movements if m.account_id == account_id
                ),
            },
        )
        self._remove(Table.ACCOUNTS, account_id)

    # Categories
    def add_category(
        self, name: str, type: TransactionType, color: str = DEFAULT_CATEGORY_COLOR
    ) -> Category:
        return self._add(Table.CATEGORIES, {"name": name, "type": type, "color": color})

    def update_category(self, category_id: str, update: CategoryUpdate) -> Optional[Category]:
        return self._update(Table.CATEGORIES, category_id, update)

    def remove_category(self, category_id: str) -> None:
        """Delete a category that no transaction or month plan references.

        Raises:
            DependencyError: If the category is still referenced
        """
        category = self._find(Table.CATEGORIES, category_id)
        if category is None:
            return
        self._check_dependents(
            "category",
            category.name,
            {
                "transaction": sum(1 for t in self._state.transactions if t.category_id == category_id),
                "weekly goal": sum(1 for g in self._state.weekly_goals if g.category_id == category_id),
            },
        )
        self._remove(Table.CATEGORIES, category_id)

    # Special dates
    def add_special_date(
        self,
        name: str,
        date: date,
        description: Optional[str] = None,
        is_recurring: bool = False,
        is_completed: bool = False,
    ) -> SpecialDate:
        return self._add(
            Table.SPECIAL_DATES,
            {
                "name": name,
                "date": date,
                "description": description,
                "is_recurring": is_recurring,
                "is_completed": is_completed,
            },
        )

    def update_special_date(
        self, special_date_id: str, update: SpecialDateUpdate
    ) -> Optional[SpecialDate]:
        return self._update(Table.SPECIAL_DATES, special_date_id, update)

    def remove_special_date(self, special_date_id: str) -> None:
        if self._find(Table.SPECIAL_DATES, special_date_id) is not None:
            self._remove(Table.SPECIAL_DATES, special_date_id)

    # Savings goals
    def add_savings_goal(
        self, name: str, target_amount: Decimal, target_date: Optional[date] = None
    ) -> SavingsGoal:
        """Create a savings goal. It starts empty; money arrives through deposits."""
        require_positive_amount(target_amount, "Target amount")
        return self._add(
            Table.SAVINGS_GOALS,
            {
                "name": name,
                "target_amount": target_amount,
                "current_amount": ZERO,
                "target_date": target_date,
            },
        )

    def update_savings_goal(self, goal_id: str, update: SavingsGoalUpdate) -> Optional[SavingsGoal]:
        return self._update(Table.SAVINGS_GOALS, goal_id, update)

    def remove_savings_goal(self, goal_id: str) -> None:
        """Delete a savings goal with no movements left.

        Raises:
            DependencyError: If movements still reference the goal
        """
        goal = self._find(Table.SAVINGS_GOALS, goal_id)
        if goal is None:
            return
        self._check_dependents(
            "savings goal", goal.name, {"savings movement": len(self.movements_for_goal(goal_id))}
        )
        self._remove(Table.SAVINGS_GOALS, goal_id)

    # Transactions
    def add_transaction(
        self,
        description: str,
        amount: Decimal,
        date: date,
        type: TransactionType,
        account_id: str,
        category_id: str,
        payment_type: Optional[PaymentType] = None,
    ) -> Transaction:
        """Record a transaction and apply its effect to the account balance.

        The transaction row and the new balance are written in one atomic
        gateway block.

        Raises:
            NotFoundError: If the account is not loaded
            PersistenceError: If either write fails; nothing changes in memory
        """
        user_id = self._require_user()
        require_positive_amount(amount)
        self._require_account(account_id)
        accounts = self._adjusted(
            Table.ACCOUNTS, "balance", {account_id: transaction_effect(type, amount)}
        )

        with self.gateway.atomic():
            txn = self.gateway.insert(
                Table.TRANSACTIONS,
                user_id,
                {
                    "description": description,
                    "amount": amount,
                    "date": date,
                    "type": type,
                    "account_id": account_id,
                    "category_id": category_id,
                    "payment_type": payment_type,
                },
            )
            self._write_amounts(user_id, Table.ACCOUNTS, "balance", accounts)

        self._commit(
            transactions=self._state.transactions + (txn,),
            accounts=self._replaced(Table.ACCOUNTS, accounts),
        )
        logger.debug("Added transaction %s to account %s", txn.id, account_id)
        return txn

    def update_transaction(
        self, transaction_id: str, update: TransactionUpdate
    ) -> Optional[Transaction]:
        """Edit a transaction, reconciling balances from the merged result.

        The original effect is reversed and the effect of the merged
        transaction applied. When the account is unchanged both land on the
        same account as one delta; when it changes, the old account gets the
        reversal and the new account the new effect.

        Returns:
            The updated transaction, or None if the id is not loaded
        """
        update.validate()
        user_id = self._require_user()
        current = self._find(Table.TRANSACTIONS, transaction_id)
        if current is None:
            logger.debug("Ignoring update of unknown transaction %s", transaction_id)
            return None
        changes = update.changes()
        if not changes:
            return current

        merged = replace(current, **changes)
        accounts = []
        if update.touches_balance():
            if merged.account_id != current.account_id:
                self._require_account(merged.account_id)
            deltas = balance_deltas(
                current.account_id,
                reversal(current.type, current.amount),
                merged.account_id,
                transaction_effect(merged.type, merged.amount),
            )
            accounts = self._adjusted(Table.ACCOUNTS, "balance", deltas)

        with self.gateway.atomic():
            self.gateway.update(Table.TRANSACTIONS, user_id, transaction_id, changes)
            self._write_amounts(user_id, Table.ACCOUNTS, "balance", accounts)

        self._commit(
            transactions=self._replaced(Table.TRANSACTIONS, [merged]),
            accounts=self._replaced(Table.ACCOUNTS, accounts),
        )
        logger.debug("Updated transaction %s: %s", transaction_id, sorted(changes))
        return merged

    def remove_transaction(self, transaction_id: str) -> None:
        """Delete a transaction and reverse its effect on the account balance."""
        user_id = self._require_user()
        current = self._find(Table.TRANSACTIONS, transaction_id)
        if current is None:
            logger.debug("Ignoring removal of unknown transaction %s", transaction_id)
            return
        accounts = self._adjusted(
            Table.ACCOUNTS,
            "balance",
            {current.account_id: reversal(current.type, current.amount)},
        )

        with self.gateway.atomic():
            self.gateway.delete(Table.TRANSACTIONS, user_id, transaction_id)
            self._write_amounts(user_id, Table.ACCOUNTS, "balance", accounts)

        self._commit(
            transactions=self._without(Table.TRANSACTIONS, transaction_id),
            accounts=self._replaced(Table.ACCOUNTS, accounts),
        )
        logger.debug("Removed transaction %s", transaction_id)

    # Savings movements
    def add_savings_movement(
        self,
        type: MovementType,
        amount: Decimal,
        date: date,
        goal_id: str,
        account_id: str,
        note: Optional[str] = None,
    ) -> SavingsMovement:
        """Move money between an account and a savings goal.

        Overdraft checks belong to the caller (see
        ``validation.check_movement_allowed``).
        """
        user_id = self._require_user()
        require_positive_amount(amount)
        self._require_account(account_id)
        self._require_goal(goal_id)
        account_delta, goal_delta = movement_effect(type, amount)
        accounts = self._adjusted(Table.ACCOUNTS, "balance", {account_id: account_delta})
        goals = self._adjusted(Table.SAVINGS_GOALS, "current_amount", {goal_id: goal_delta})

        with self.gateway.atomic():
            movement = self.gateway.insert(
                Table.SAVINGS_MOVEMENTS,
                user_id,
                {
                    "type": type,
                    "amount": amount,
                    "date": date,
                    "goal_id": goal_id,
                    "account_id": account_id,
                    "note": note,
                },
            )
            self._write_amounts(user_id, Table.ACCOUNTS, "balance", accounts)
            self._write_amounts(user_id, Table.SAVINGS_GOALS, "current_amount", goals)

        self._commit(
            savings_movements=self._state.savings_movements + (movement,),
            accounts=self._replaced(Table.ACCOUNTS, accounts),
            savings_goals=self._replaced(Table.SAVINGS_GOALS, goals),
        )
        logger.debug("Recorded %s of %s for goal %s", type.value, amount, goal_id)
        return movement

    def update_savings_movement(
        self, movement_id: str, update: SavingsMovementUpdate
    ) -> Optional[SavingsMovement]:
        """Edit a savings movement, reconciling account and goal totals."""
        update.validate()
        user_id = self._require_user()
        current = self._find(Table.SAVINGS_MOVEMENTS, movement_id)
        if current is None:
            logger.debug("Ignoring update of unknown savings movement %s", movement_id)
            return None
        changes = update.changes()
        if not changes:
            return current

        merged = replace(current, **changes)
        if merged.account_id != current.account_id:
            self._require_account(merged.account_id)
        if merged.goal_id != current.goal_id:
            self._require_goal(merged.goal_id)
        old_account, old_goal = movement_effect(current.type, current.amount)
        new_account, new_goal = movement_effect(merged.type, merged.amount)
        accounts = self._adjusted(
            Table.ACCOUNTS,
            "balance",
            balance_deltas(current.account_id, -old_account, merged.account_id, new_account),
        )
        goals = self._adjusted(
            Table.SAVINGS_GOALS,
            "current_amount",
            balance_deltas(current.goal_id, -old_goal, merged.goal_id, new_goal),
        )

        with self.gateway.atomic():
            self.gateway.update(Table.SAVINGS_MOVEMENTS, user_id, movement_id, changes)
            self._write_amounts(user_id, Table.ACCOUNTS, "balance", accounts)
            self._write_amounts(user_id, Table.SAVINGS_GOALS, "current_amount", goals)

        self._commit(
            savings_movements=self._replaced(Table.SAVINGS_MOVEMENTS, [merged]),
            accounts=self._replaced(Table.ACCOUNTS, accounts),
            savings_goals=self._replaced(Table.SAVINGS_GOALS, goals),
        )
        return merged

    def remove_savings_movement(self, movement_id: str) -> None:
        """Delete a savings movement and undo its transfer."""
        user_id = self._require_user()
        current = self._find(Table.SAVINGS_MOVEMENTS, movement_id)
        if current is None:
            return
        account_delta, goal_delta = movement_effect(current.type, current.amount)
        accounts = self._adjusted(Table.ACCOUNTS, "balance", {current.account_id: -account_delta})
        goals = self._adjusted(
            Table.SAVINGS_GOALS, "current_amount", {current.goal_id: -goal_delta}
        )

        with self.gateway.atomic():
            self.gateway.delete(Table.SAVINGS_MOVEMENTS, user_id, movement_id)
            self._write_amounts(user_id, Table.ACCOUNTS, "balance", accounts)
            self._write_amounts(user_id, Table.SAVINGS_GOALS, "current_amount", goals)

        self._commit(
            savings_movements=self._without(Table.SAVINGS_MOVEMENTS, movement_id),
            accounts=self._replaced(Table.ACCOUNTS, accounts),
            savings_goals=self._replaced(Table.SAVINGS_GOALS, goals),
        )

    # Month plans and notes
    def set_weekly_goal(
        self,
        year: int,
        month: int,
        category_id: str,
        weekly_amounts: Iterable[Optional[Decimal]],
        monthly_amount: Optional[Decimal] = None,
    ) -> WeeklyGoal:
        """Create or replace the plan for one category in one month."""
        year, month = parse_period(year, month)
        amounts = tuple(weekly_amounts)
        validate_weekly_amounts(amounts, monthly_amount, MAX_WEEKS)
        user_id = self._require_user()
        goal = self.gateway.upsert(
            Table.WEEKLY_GOALS,
            user_id,
            {"year": year, "month": month, "category_id": category_id},
            {"weekly_amounts": amounts, "monthly_amount": monthly_amount},
        )
        self._commit(
            weekly_goals=self._upserted(
                Table.WEEKLY_GOALS, goal, lambda g: (g.year, g.month, g.category_id)
            )
        )
        return goal

    def set_monthly_note(self, year: int, month: int, content: str) -> MonthlyNote:
        """Create or replace the note for one month."""
        year, month = parse_period(year, month)
        user_id = self._require_user()
        note = self.gateway.upsert(
            Table.MONTHLY_NOTES,
            user_id,
            {"year": year, "month": month},
            {"content": content},
        )
        self._commit(
            monthly_notes=self._upserted(Table.MONTHLY_NOTES, note, lambda n: (n.year, n.month))
        )
        return note

    # Internals
    def _require_user(self) -> str:
        user_id = self.session.get_current_user_id()
        if user_id is None:
            raise NotAuthenticatedError("No user is signed in")
        if user_id != self._user_id:
            raise ConflictError(f"Finance data is not loaded for user {user_id}")
        return user_id

    def _require_account(self, account_id: str) -> Account:
        account = self._find(Table.ACCOUNTS, account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def _require_goal(self, goal_id: str) -> SavingsGoal:
        goal = self._find(Table.SAVINGS_GOALS, goal_id)
        if goal is None:
            raise NotFoundError(entity_not_found("Savings goal", goal_id))
        return goal

    def require_category(self, category_id: str) -> Category:
        category = self._find(Table.CATEGORIES, category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        return category

    def _check_dependents(self, kind: str, name: str, dependents: dict[str, int]) -> None:
        if any(count > 0 for count in dependents.values()):
            raise DependencyError(entity_delete_blocked(kind, name, dependents))

    def _collection(self, table: Table) -> tuple[Any, ...]:
        return getattr(self._state, COLLECTIONS[table])

    def _find(self, table: Table, entity_id: str) -> Any:
        for entity in self._collection(table):
            if entity.id == entity_id:
                return entity
        return None

    def _commit(self, **collections: tuple[Any, ...]) -> None:
        """Install a new snapshot with the given collections swapped in."""
        self._state = replace(self._state, **collections)

    def _replaced(self, table: Table, entities: Iterable[Any]) -> tuple[Any, ...]:
        updated = {entity.id: entity for entity in entities}
        return tuple(updated.get(entity.id, entity) for entity in self._collection(table))

    def _without(self, table: Table, entity_id: str) -> tuple[Any, ...]:
        return tuple(entity for entity in self._collection(table) if entity.id != entity_id)

    def _upserted(self, table: Table, entity: Any, key: Callable[[Any], Any]) -> tuple[Any, ...]:
        items = self._collection(table)
        if any(key(item) == key(entity) for item in items):
            return tuple(entity if key(item) == key(entity) else item for item in items)
        return items + (entity,)

    def _adjusted(self, table: Table, field: str, deltas: dict[str, Decimal]) -> list[Any]:
        """Return copies of the entities in ``deltas`` with ``field`` moved by each delta."""
        adjusted = []
        for entity_id, delta in deltas.items():
            if delta == 0:
                continue
            entity = self._find(table, entity_id)
            if entity is None:
                logger.warning(
                    "%s %s is not loaded; skipping adjustment of %s", table.value, entity_id, delta
                )
                continue
            adjusted.append(replace(entity, **{field: getattr(entity, field) + delta}))
        return adjusted

    def _write_amounts(self, user_id: str, table: Table, field: str, entities: list[Any]) -> None:
        for entity in entities:
            self.gateway.update(table, user_id, entity.id, {field: getattr(entity, field)})

    def _add(self, table: Table, values: dict[str, Any]) -> Any:
        user_id = self._require_user()
        entity = self.gateway.insert(table, user_id, values)
        self._commit(**{COLLECTIONS[table]: self._collection(table) + (entity,)})
        logger.debug("Added %s %s", table.value, entity.id)
        return entity

    def _update(self, table: Table, entity_id: str, update: Any) -> Any:
        update.validate()
        user_id = self._require_user()
        current = self._find(table, entity_id)
        if current is None:
            logger.debug("Ignoring update of unknown %s %s", table.value, entity_id)
            return None
        changes = update.changes()
        if not changes:
            return current
        self.gateway.update(table, user_id, entity_id, changes)
        merged = replace(current, **changes)
        self._commit(**{COLLECTIONS[table]: self._replaced(table, [merged])})
        logger.debug("Updated %s %s: %s", table.value, entity_id, sorted(changes))
        return merged

    def _remove(self, table: Table, entity_id: str) -> None:
        user_id = self._require_user()
        self.gateway.delete(table, user_id, entity_id)
        self._commit(**{COLLECTIONS[table]: self._without(table, entity_id)})
        logger.debug("Removed %s %s", table.value, entity_id)
