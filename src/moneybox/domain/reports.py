"""Reporting views derived from the store's current data.

Everything here is a pure function of the transactions, categories and
plans it is given. ``ReportService`` just feeds it the store's latest
snapshot, so results are recomputed on every call.
"""

import calendar
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from dateutil import tz as dateutil_tz

from moneybox.domain.entities import (
    Category,
    MAX_WEEKS,
    PaymentType,
    SavingsGoal,
    SpecialDate,
    Transaction,
    TransactionType,
    WeeklyGoal,
)
from moneybox.domain.validation import parse_month_key, parse_period

ZERO = Decimal("0")

UNKNOWN_CATEGORY = "Unknown category"

__all__ = [
    "AnnualSummary",
    "CategoryExpenses",
    "CategoryMatrix",
    "CategoryYearRow",
    "ComparisonCell",
    "ComparisonRow",
    "GoalComparison",
    "MonthSummary",
    "MonthTotals",
    "ReportService",
    "WeekGroup",
    "WeeklyBreakdown",
    "WeeklyRow",
    "annual_summary",
    "available_years",
    "category_label",
    "category_year_matrix",
    "goal_comparison",
    "month_summary",
    "parse_month_key",
    "parse_period",
    "report_date",
    "savings_progress",
    "upcoming_special_dates",
    "week_groups",
    "weekly_breakdown",
]


@dataclass(frozen=True)
class WeekGroup:
    """Contiguous run of days within a month, Monday-started."""

    index: int
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def label(self) -> str:
        return f"Week {self.index + 1} ({self.start.day:02d}-{self.end.day:02d})"


@dataclass(frozen=True)
class MonthTotals:
    month: int
    income: Decimal = ZERO
    expense: Decimal = ZERO
    count: int = 0

    @property
    def active(self) -> bool:
        """A month can be opened only if it has transactions."""
        return self.count > 0

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class AnnualSummary:
    year: int
    months: tuple[MonthTotals, ...]

    @property
    def income(self) -> Decimal:
        return sum((m.income for m in self.months), ZERO)

    @property
    def expense(self) -> Decimal:
        return sum((m.expense for m in self.months), ZERO)

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class CategoryYearRow:
    category_id: str
    label: str
    months: tuple[Decimal, ...]

    @property
    def total(self) -> Decimal:
        return sum(self.months, ZERO)


@dataclass(frozen=True)
class CategoryMatrix:
    """Expense totals per category per month for one year."""

    year: int
    rows: tuple[CategoryYearRow, ...]

    @property
    def month_totals(self) -> tuple[Decimal, ...]:
        return tuple(
            sum((row.months[month] for row in self.rows), ZERO) for month in range(12)
        )

    @property
    def total(self) -> Decimal:
        return sum((row.total for row in self.rows), ZERO)


@dataclass(frozen=True)
class CategoryExpenses:
    category_id: str
    label: str
    total: Decimal
    transactions: tuple[Transaction, ...]


@dataclass(frozen=True)
class MonthSummary:
    year: int
    month: int
    income: Decimal
    expense: Decimal
    transactions: tuple[Transaction, ...]
    by_category: tuple[CategoryExpenses, ...]

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class WeeklyRow:
    """Actual spend of one category, per week group plus the monthly column."""

    category_id: str
    label: str
    weeks: tuple[Decimal, ...]
    monthly: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return sum(self.weeks, ZERO) + self.monthly


@dataclass(frozen=True)
class WeeklyBreakdown:
    year: int
    month: int
    groups: tuple[WeekGroup, ...]
    rows: tuple[WeeklyRow, ...]

    @property
    def week_totals(self) -> tuple[Decimal, ...]:
        return tuple(
            sum((row.weeks[i] for row in self.rows), ZERO) for i in range(len(self.groups))
        )

    @property
    def monthly_total(self) -> Decimal:
        return sum((row.monthly for row in self.rows), ZERO)

    @property
    def total(self) -> Decimal:
        return sum((row.total for row in self.rows), ZERO)


@dataclass(frozen=True)
class ComparisonCell:
    planned: Decimal = ZERO
    actual: Decimal = ZERO

    @property
    def difference(self) -> Decimal:
        """Amount left in the plan; negative when overspent."""
        return self.planned - self.actual

    def __add__(self, other: "ComparisonCell") -> "ComparisonCell":
        return ComparisonCell(self.planned + other.planned, self.actual + other.actual)


@dataclass(frozen=True)
class ComparisonRow:
    category_id: Optional[str]
    label: str
    weeks: tuple[ComparisonCell, ...]
    monthly: ComparisonCell = field(default_factory=ComparisonCell)

    @property
    def total(self) -> ComparisonCell:
        return sum(self.weeks, ComparisonCell()) + self.monthly


@dataclass(frozen=True)
class GoalComparison:
    year: int
    month: int
    groups: tuple[WeekGroup, ...]
    rows: tuple[ComparisonRow, ...]
    totals: ComparisonRow


def report_date(stored: date, report_tz: Optional[tzinfo] = None) -> date:
    """Calendar day used when bucketing a stored transaction date.

    A stored date is a UTC midnight instant. It is shown in the report time
    zone and then moved one day forward, which for zones west of UTC lands
    back on the day that was entered.
    """
    instant = datetime.combine(stored, time.min, tzinfo=dateutil_tz.UTC)
    if report_tz is not None:
        instant = instant.astimezone(report_tz)
    return instant.date() + timedelta(days=1)


def week_groups(year: int, month: int) -> tuple[WeekGroup, ...]:
    """Split a month (index 0-11) into Monday-started week groups.

    A month touching six weeks folds the sixth group into the fifth.
    """
    year, month = parse_period(year, month)
    days_in_month = calendar.monthrange(year, month + 1)[1]
    first = date(year, month + 1, 1)
    last = date(year, month + 1, days_in_month)

    bounds = []
    start = first
    while start <= last:
        end = min(start + timedelta(days=6 - start.weekday()), last)
        bounds.append((start, end))
        start = end + timedelta(days=1)

    if len(bounds) > MAX_WEEKS:
        bounds = bounds[: MAX_WEEKS - 1] + [(bounds[MAX_WEEKS - 1][0], last)]
    return tuple(WeekGroup(i, start, end) for i, (start, end) in enumerate(bounds))


def category_label(categories: Iterable[Category], category_id: Optional[str]) -> str:
    """Category name for display; unknown ids get a placeholder."""
    for category in categories:
        if category.id == category_id:
            return category.name
    return UNKNOWN_CATEGORY


def _in_month(txn: Transaction, year: int, month: int) -> bool:
    return txn.date.year == year and txn.date.month - 1 == month


def _expense_category_ids(
    categories: Sequence[Category], transactions: Iterable[Transaction], extra: Iterable[str] = ()
) -> list[str]:
    """Expense categories in display order, then any unknown ids that carry data."""
    ids = [c.id for c in categories if c.type == TransactionType.EXPENSE]
    known = {c.id for c in categories}
    for category_id in [t.category_id for t in transactions] + list(extra):
        if category_id not in known and category_id not in ids:
            ids.append(category_id)
    return ids


def annual_summary(transactions: Iterable[Transaction], year: int) -> AnnualSummary:
    """Income and expense per month for ``year``; other years are ignored."""
    income: dict[int, Decimal] = defaultdict(lambda: ZERO)
    expense: dict[int, Decimal] = defaultdict(lambda: ZERO)
    count: dict[int, int] = defaultdict(int)
    for txn in transactions:
        if txn.date.year != year:
            continue
        month = txn.date.month - 1
        count[month] += 1
        if txn.type == TransactionType.INCOME:
            income[month] += txn.amount
        else:
            expense[month] += txn.amount
    return AnnualSummary(
        year=year,
        months=tuple(
            MonthTotals(month, income[month], expense[month], count[month]) for month in range(12)
        ),
    )


def available_years(transactions: Iterable[Transaction]) -> list[int]:
    """Years that have at least one transaction, newest first."""
    return sorted({txn.date.year for txn in transactions}, reverse=True)


def category_year_matrix(
    transactions: Sequence[Transaction], categories: Sequence[Category], year: int
) -> CategoryMatrix:
    """Expense totals per expense category and month for ``year``."""
    expenses = [
        t for t in transactions if t.type == TransactionType.EXPENSE and t.date.year == year
    ]
    totals: dict[str, list[Decimal]] = defaultdict(lambda: [ZERO] * 12)
    for txn in expenses:
        totals[txn.category_id][txn.date.month - 1] += txn.amount

    rows = tuple(
        CategoryYearRow(
            category_id=category_id,
            label=category_label(categories, category_id),
            months=tuple(totals[category_id]),
        )
        for category_id in _expense_category_ids(categories, expenses)
    )
    return CategoryMatrix(year=year, rows=rows)


def month_summary(
    transactions: Sequence[Transaction], categories: Sequence[Category], year: int, month: int
) -> MonthSummary:
    """Income, expense and per-category expenses for one month."""
    year, month = parse_period(year, month)
    in_month = tuple(t for t in transactions if _in_month(t, year, month))
    by_category: dict[str, list[Transaction]] = defaultdict(list)
    income = expense = ZERO
    for txn in in_month:
        if txn.type == TransactionType.INCOME:
            income += txn.amount
        else:
            expense += txn.amount
            by_category[txn.category_id].append(txn)

    groups = [
        CategoryExpenses(
            category_id=category_id,
            label=category_label(categories, category_id),
            total=sum((t.amount for t in items), ZERO),
            transactions=tuple(items),
        )
        for category_id, items in by_category.items()
    ]
    groups.sort(key=lambda group: group.total, reverse=True)
    return MonthSummary(
        year=year,
        month=month,
        income=income,
        expense=expense,
        transactions=in_month,
        by_category=tuple(groups),
    )


def _bucket_index(groups: Sequence[WeekGroup], day: date) -> int:
    for group in groups:
        if group.contains(day):
            return group.index
    # Shifted past either end of the month: keep it in the nearest group.
    return 0 if day < groups[0].start else groups[-1].index


def weekly_breakdown(
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    year: int,
    month: int,
    report_tz: Optional[tzinfo] = None,
) -> WeeklyBreakdown:
    """Actual expenses of a month per category and week group.

    Single (or unset) payment types are bucketed by their report date;
    monthly and recurring expenses go to the monthly column.
    """
    groups = week_groups(year, month)
    year, month = parse_period(year, month)
    expenses = [
        t
        for t in transactions
        if t.type == TransactionType.EXPENSE and _in_month(t, year, month)
    ]

    weeks: dict[str, list[Decimal]] = defaultdict(lambda: [ZERO] * len(groups))
    monthly: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for txn in expenses:
        if txn.payment_type in (PaymentType.MONTHLY, PaymentType.RECURRING):
            monthly[txn.category_id] += txn.amount
        else:
            index = _bucket_index(groups, report_date(txn.date, report_tz))
            weeks[txn.category_id][index] += txn.amount

    rows = tuple(
        WeeklyRow(
            category_id=category_id,
            label=category_label(categories, category_id),
            weeks=tuple(weeks[category_id]),
            monthly=monthly[category_id],
        )
        for category_id in _expense_category_ids(categories, expenses)
    )
    return WeeklyBreakdown(year=year, month=month, groups=groups, rows=rows)


def goal_comparison(
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    weekly_goals: Iterable[WeeklyGoal],
    year: int,
    month: int,
    report_tz: Optional[tzinfo] = None,
) -> GoalComparison:
    """Planned against actual spend, per expense category and in total."""
    breakdown = weekly_breakdown(transactions, categories, year, month, report_tz)
    groups = breakdown.groups
    plans = {
        g.category_id: g
        for g in weekly_goals
        if (g.year, g.month) == (breakdown.year, breakdown.month)
    }
    actuals = {row.category_id: row for row in breakdown.rows}
    category_ids = [row.category_id for row in breakdown.rows]
    category_ids += [cid for cid in plans if cid not in actuals]

    rows = []
    for category_id in category_ids:
        plan = plans.get(category_id)
        actual = actuals.get(category_id)
        planned_weeks = list(plan.weekly_amounts) if plan else []
        cells = []
        for group in groups:
            planned = None
            if group.index < len(planned_weeks):
                planned = planned_weeks[group.index]
            cells.append(
                ComparisonCell(
                    planned=planned or ZERO,
                    actual=actual.weeks[group.index] if actual else ZERO,
                )
            )
        monthly = ComparisonCell(
            planned=(plan.monthly_amount if plan else None) or ZERO,
            actual=actual.monthly if actual else ZERO,
        )
        rows.append(
            ComparisonRow(
                category_id=category_id,
                label=category_label(categories, category_id),
                weeks=tuple(cells),
                monthly=monthly,
            )
        )

    totals = ComparisonRow(
        category_id=None,
        label="Total",
        weeks=tuple(
            sum((row.weeks[i] for row in rows), ComparisonCell()) for i in range(len(groups))
        ),
        monthly=sum((row.monthly for row in rows), ComparisonCell()),
    )
    return GoalComparison(
        year=breakdown.year, month=breakdown.month, groups=groups, rows=tuple(rows), totals=totals
    )


def savings_progress(goal: SavingsGoal) -> Decimal:
    """Percentage of the target reached, capped at 100."""
    if goal.target_amount <= 0:
        return ZERO
    return min(goal.current_amount / goal.target_amount * 100, Decimal("100"))


def upcoming_special_dates(
    dates: Iterable[SpecialDate], today: date, window_days: int = 30
) -> list[SpecialDate]:
    """Special dates from today up to ``window_days`` ahead, soonest first."""
    upcoming = [d for d in dates if 0 <= (d.date - today).days <= window_days]
    return sorted(upcoming, key=lambda d: d.date)


class ReportService:
    """Reports over a store's current snapshot."""

    def __init__(self, store, report_tz: Optional[tzinfo] = None):
        """Initialize report service.

        Args:
            store: FinanceStore to read from
            report_tz: Time zone used to place dates in week groups
        """
        self.store = store
        self.report_tz = report_tz

    def annual_summary(self, year: int) -> AnnualSummary:
        return annual_summary(self.store.transactions, year)

    def available_years(self) -> list[int]:
        return available_years(self.store.transactions)

    def category_year_matrix(self, year: int) -> CategoryMatrix:
        return category_year_matrix(self.store.transactions, self.store.categories, year)

    def month_summary(self, year: int, month: int) -> MonthSummary:
        return month_summary(self.store.transactions, self.store.categories, year, month)

    def weekly_breakdown(self, year: int, month: int) -> WeeklyBreakdown:
        return weekly_breakdown(
            self.store.transactions, self.store.categories, year, month, self.report_tz
        )

    def goal_comparison(self, year: int, month: int) -> GoalComparison:
        return goal_comparison(
            self.store.transactions,
            self.store.categories,
            self.store.weekly_goals,
            year,
            month,
            self.report_tz,
        )

    def upcoming_special_dates(self, today: date, window_days: int = 30) -> list[SpecialDate]:
        return upcoming_special_dates(self.store.special_dates, today, window_days)
