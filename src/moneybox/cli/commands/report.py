"""Report commands: the yearly overview and the monthly detail."""

import calendar
from datetime import date

import click

from moneybox.cli.error_handling import handle_domain_error
from moneybox.cli.resolution import format_amount, month_or_exit
from moneybox.domain.errors import DomainError
from moneybox.domain.reports import ReportService


def _reports(ctx) -> ReportService:
    return ctx.obj["reports"]


def _cell(amount) -> str:
    return f"{format_amount(amount):>11s}"


@click.group()
def report_group():
    """Show reports."""
    pass


@report_group.command("year")
@click.argument("year", type=int, required=False)
@click.option("--by-category", is_flag=True, help="Show expenses per category and month")
@click.pass_context
def year_report(ctx, year: int | None, by_category: bool):
    """Income and expenses per month for YEAR (defaults to this year)."""
    reports = _reports(ctx)
    year = year or date.today().year

    summary = reports.annual_summary(year)
    years = reports.available_years()
    if years:
        click.echo(f"Years with data: {', '.join(str(y) for y in years)}")

    click.echo(f"\n{year}")
    click.echo("-" * 52)
    click.echo(f"{'Month':10s} | {'Income':>11s} | {'Expense':>11s} | {'Balance':>11s}")
    for totals in summary.months:
        marker = "" if totals.active else "  (empty)"
        click.echo(
            f"{calendar.month_abbr[totals.month + 1]:10s} | {_cell(totals.income)} | "
            f"{_cell(totals.expense)} | {_cell(totals.balance)}{marker}"
        )
    click.echo("-" * 52)
    click.echo(
        f"{'Total':10s} | {_cell(summary.income)} | {_cell(summary.expense)} | {_cell(summary.balance)}"
    )

    if by_category:
        matrix = reports.category_year_matrix(year)
        click.echo("\nExpenses by category:")
        header = " ".join(f"{calendar.month_abbr[m + 1]:>9s}" for m in range(12))
        click.echo(f"{'Category':15s} {header} {'Total':>10s}")
        for row in matrix.rows:
            cells = " ".join(f"{format_amount(v):>9s}" for v in row.months)
            click.echo(f"{row.label[:15]:15s} {cells} {format_amount(row.total):>10s}")
        cells = " ".join(f"{format_amount(v):>9s}" for v in matrix.month_totals)
        click.echo(f"{'Total':15s} {cells} {format_amount(matrix.total):>10s}")


@report_group.command("month")
@click.option("--month", help="Month as YYYY-MM (defaults to the current month)")
@click.pass_context
def month_report(ctx, month: str | None):
    """Income, expenses and the weekly plan-versus-actual table of a month."""
    reports = _reports(ctx)
    year, month_index = month_or_exit(ctx, month)
    try:
        summary = reports.month_summary(year, month_index)
        comparison = reports.goal_comparison(year, month_index)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"{calendar.month_name[month_index + 1]} {year}")
    click.echo(f"Income:  {format_amount(summary.income)}")
    click.echo(f"Expense: {format_amount(summary.expense)}")
    click.echo(f"Balance: {format_amount(summary.balance)}")

    if summary.by_category:
        click.echo("\nExpenses by category:")
        for group in summary.by_category:
            click.echo(f"  {group.label:20s} {format_amount(group.total):>12s}")

    click.echo("\nPlanned vs actual (difference = planned - actual):")
    headers = [group.label for group in comparison.groups] + ["Monthly", "Total"]
    click.echo(f"{'Category':15s} | " + " | ".join(f"{h:>22s}" for h in headers))
    for row in list(comparison.rows) + [comparison.totals]:
        cells = list(row.weeks) + [row.monthly, row.total]
        rendered = " | ".join(
            f"{format_amount(c.planned):>7s}/{format_amount(c.actual):>7s}/{format_amount(c.difference):>6s}"
            for c in cells
        )
        click.echo(f"{row.label[:15]:15s} | {rendered}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
