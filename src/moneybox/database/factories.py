"""Gateway factory functions."""

import os
from pathlib import Path
from typing import Optional

from moneybox.database.sqlalchemy_db import SQLAlchemyGateway

DEFAULT_TIMEOUT = 10.0


def default_database_path() -> str:
    """Return ``MONEYBOX_DB_PATH`` or ``~/.moneybox/moneybox.db``."""
    database_path = os.environ.get("MONEYBOX_DB_PATH")
    if database_path:
        return database_path
    db_dir = Path.home() / ".moneybox"
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "moneybox.db")


def create_sqlite_gateway(
    database_path: Optional[str] = None, timeout: Optional[float] = DEFAULT_TIMEOUT
) -> SQLAlchemyGateway:
    """Create a SQLite-backed gateway.

    Args:
        database_path: Path to SQLite database file. If None, checks MONEYBOX_DB_PATH
            environment variable, then defaults to ~/.moneybox/moneybox.db
        timeout: Seconds to wait on a locked database before failing

    Returns:
        SQLAlchemyGateway instance configured for SQLite
    """
    if database_path is None:
        database_path = default_database_path()
    return SQLAlchemyGateway(f"sqlite:///{database_path}", timeout=timeout)
