"""Shared pytest fixtures for moneybox tests."""

import os
import tempfile
from decimal import Decimal

import pytest

from moneybox.database.factories import create_sqlite_gateway
from moneybox.domain.entities import AccountType
from moneybox.domain.store import FinanceStore
from moneybox.session import LocalSessionProvider

USER_ID = "user-1"


@pytest.fixture
def temp_gateway():
    """Create a gateway over a temporary SQLite database."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    gateway = create_sqlite_gateway(database_path=db_path)
    # Store the path for tests that need it
    gateway.database_path = db_path
    gateway.connect()

    yield gateway

    gateway.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def session():
    """Session provider with nobody signed in."""
    return LocalSessionProvider()


@pytest.fixture
def store(temp_gateway, session):
    """Store attached to the session, loaded for USER_ID."""
    finance_store = FinanceStore(temp_gateway, session)
    finance_store.attach()
    session.sign_in(USER_ID)
    yield finance_store
    finance_store.detach()


@pytest.fixture
def checking(store):
    """Checking account opened with 1000."""
    return store.add_account("Checking", AccountType.CHECKING, Decimal("1000"))


@pytest.fixture
def food(store):
    """The seeded Food expense category."""
    return next(c for c in store.categories if c.name == "Food")


@pytest.fixture
def salary(store):
    """The seeded Salary income category."""
    return next(c for c in store.categories if c.name == "Salary")


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
