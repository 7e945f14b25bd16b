"""Abstract data gateway interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from enum import Enum
from typing import Any


class Table(str, Enum):
    """Tables served by the gateway, one per entity type."""

    ACCOUNTS = "accounts"
    CATEGORIES = "categories"
    TRANSACTIONS = "transactions"
    SPECIAL_DATES = "special_dates"
    SAVINGS_GOALS = "savings_goals"
    SAVINGS_MOVEMENTS = "savings_movements"
    WEEKLY_GOALS = "weekly_goals"
    MONTHLY_NOTES = "monthly_notes"


# Natural keys for tables written with upsert.
UPSERT_KEYS: dict[Table, tuple[str, ...]] = {
    Table.WEEKLY_GOALS: ("year", "month", "category_id"),
    Table.MONTHLY_NOTES: ("year", "month"),
}


class Gateway(ABC):
    """Row-level access to the user's persisted records.

    Every call is scoped by the owning user id. Values are dicts keyed by
    domain field names; rows come back as domain entities.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the backing store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the backing store."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Group writes so they commit together or not at all.

        Blocks may nest; only the outermost one commits.
        """
        pass

    @abstractmethod
    def select(self, table: Table, user_id: str) -> list[Any]:
        """Return every row of ``table`` owned by ``user_id``."""
        pass

    @abstractmethod
    def insert(self, table: Table, user_id: str, values: dict[str, Any]) -> Any:
        """Insert a row and return the stored entity, identifier assigned."""
        pass

    @abstractmethod
    def update(self, table: Table, user_id: str, entity_id: str, values: dict[str, Any]) -> None:
        """Write the given fields of one row.

        Raises:
            NotFoundError: If the row does not exist for this user
        """
        pass

    @abstractmethod
    def delete(self, table: Table, user_id: str, entity_id: str) -> None:
        """Delete one row.

        Raises:
            NotFoundError: If the row does not exist for this user
        """
        pass

    @abstractmethod
    def upsert(
        self, table: Table, user_id: str, key: dict[str, Any], values: dict[str, Any]
    ) -> Any:
        """Insert or update the row matching a natural key.

        Only tables listed in ``UPSERT_KEYS`` support this; ``key`` must
        hold exactly those fields.
        """
        pass
