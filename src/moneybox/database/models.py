"""SQLAlchemy models for the moneybox database."""

import uuid
from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Text,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    # Naive UTC, the form SQLite hands back
    return datetime.now(UTC).replace(tzinfo=None)


class Account(Base):
    """Account model."""

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    transactions = relationship("Transaction", back_populates="account")


class Category(Base):
    """Category model."""

    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    color = Column(String, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    transactions = relationship("Transaction", back_populates="category")


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False)
    type = Column(String, nullable=False)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=False)
    payment_type = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    account = relationship("Account", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")


class SpecialDate(Base):
    """Special date model."""

    __tablename__ = "special_dates"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    is_recurring = Column(Boolean, default=False, nullable=False)
    is_completed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)


class SavingsGoal(Base):
    """Savings goal model."""

    __tablename__ = "savings_goals"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    target_amount = Column(Numeric(12, 2), nullable=False)
    current_amount = Column(Numeric(12, 2), nullable=False, default=0)
    target_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    movements = relationship("SavingsMovement", back_populates="goal")


class SavingsMovement(Base):
    """Savings movement model."""

    __tablename__ = "savings_movements"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    type = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False)
    goal_id = Column(String(36), ForeignKey("savings_goals.id"), nullable=False)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False)
    note = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    goal = relationship("SavingsGoal", back_populates="movements")


class WeeklyGoal(Base):
    """Monthly budget plan for one category, one column per week slot."""

    __tablename__ = "weekly_goals"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=False)
    week_1 = Column(Numeric(12, 2), nullable=True)
    week_2 = Column(Numeric(12, 2), nullable=True)
    week_3 = Column(Numeric(12, 2), nullable=True)
    week_4 = Column(Numeric(12, 2), nullable=True)
    week_5 = Column(Numeric(12, 2), nullable=True)
    monthly_amount = Column(Numeric(12, 2), nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "year", "month", "category_id", name="uq_weekly_goal_period"),
    )


class MonthlyNote(Base):
    """Monthly note model."""

    __tablename__ = "monthly_notes"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    content = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "year", "month", name="uq_monthly_note_period"),)


WEEK_COLUMNS = ("week_1", "week_2", "week_3", "week_4", "week_5")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_factory(database_url: str, timeout: float | None = None) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory.

    Args:
        database_url: SQLAlchemy database URL
        timeout: Seconds to wait on a locked or unreachable database before failing
    """
    connect_args = {}
    is_sqlite = database_url.startswith("sqlite")
    if timeout is not None:
        connect_args["timeout" if is_sqlite else "connect_timeout"] = timeout
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
