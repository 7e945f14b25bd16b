"""Persistence layer for moneybox."""

from moneybox.database.base import Gateway, Table
from moneybox.database.factories import create_sqlite_gateway

__all__ = ["Gateway", "Table", "create_sqlite_gateway"]
