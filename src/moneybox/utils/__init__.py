"""Utility functions for moneybox."""

from moneybox.utils.date_parser import parse_date
from moneybox.utils.amount_parser import parse_amount
from moneybox.utils.resolvers import resolve_account, resolve_category, resolve_entity

__all__ = ["parse_date", "parse_amount", "resolve_account", "resolve_category", "resolve_entity"]
