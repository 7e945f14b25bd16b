"""Tests for amount and date parsing and reference resolution."""

import pytest
from datetime import date
from decimal import Decimal

from moneybox.domain.entities import Account, AccountType, Category, TransactionType
from moneybox.domain.errors import ConflictError, NotFoundError, ValidationError
from moneybox.utils import parse_amount, parse_date, resolve_account, resolve_category


class TestParseAmount:
    """Tests for parse_amount."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("123.45", "123.45"),
            ("R$ 123,45", "123.45"),
            ("R$ 1.234,56", "1234.56"),
            ("1,234.56", "1234.56"),
            ("$1,000", "1000"),
            ("€ 10", "10"),
            ("-42.10", "-42.10"),
            ("(15.00)", "-15.00"),
            ("1.000.000", "1000000"),
        ],
    )
    def test_formats(self, text, expected):
        assert parse_amount(text) == Decimal(expected)

    @pytest.mark.parametrize("text", ["", "   ", "abc", "12a", "NaN"])
    def test_invalid(self, text):
        with pytest.raises(ValidationError):
            parse_amount(text)

    @pytest.mark.parametrize("text", ["10.005", "R$ 1.234,567", "0.001"])
    def test_rejects_fractions_of_a_cent(self, text):
        with pytest.raises(ValidationError):
            parse_amount(text)


class TestParseDate:
    """Tests for parse_date."""

    def test_relative_words(self):
        today = date(2024, 8, 15)
        assert parse_date("today", today) == today
        assert parse_date("Yesterday", today) == date(2024, 8, 14)
        assert parse_date("tomorrow", today) == date(2024, 8, 16)

    def test_iso_and_day_first(self):
        assert parse_date("2024-08-05") == date(2024, 8, 5)
        assert parse_date("05/08/2024") == date(2024, 8, 5)
        assert parse_date("August 5, 2024") == date(2024, 8, 5)

    def test_invalid(self):
        with pytest.raises(ValidationError):
            parse_date("someday")
        with pytest.raises(ValidationError):
            parse_date("")


class TestResolvers:
    """Tests for id, prefix and name resolution."""

    accounts = [
        Account(id="abc-111", name="Checking", type=AccountType.CHECKING, balance=Decimal("0")),
        Account(id="abd-222", name="Savings", type=AccountType.SAVINGS, balance=Decimal("0")),
    ]

    def test_by_id_prefix_and_name(self):
        assert resolve_account(self.accounts, "abd-222").name == "Savings"
        assert resolve_account(self.accounts, "abc").name == "Checking"
        assert resolve_account(self.accounts, "savings").id == "abd-222"

    def test_ambiguous_prefix(self):
        with pytest.raises(ConflictError):
            resolve_account(self.accounts, "ab")

    def test_not_found(self):
        with pytest.raises(NotFoundError):
            resolve_account(self.accounts, "Wallet")

    def test_category_filtered_by_type(self):
        categories = [
            Category(id="c1", name="Other", type=TransactionType.EXPENSE, color="#000"),
            Category(id="c2", name="Other", type=TransactionType.INCOME, color="#fff"),
        ]
        with pytest.raises(ConflictError):
            resolve_category(categories, "other")
        assert resolve_category(categories, "other", TransactionType.INCOME).id == "c2"
