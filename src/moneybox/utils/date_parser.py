"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser

from moneybox.domain.errors import ValidationError


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports ISO dates ("2024-01-15"), day-first dates ("15/01/2024"), other
    formats dateutil understands ("January 15, 2024") and the relative words
    "today", "yesterday" and "tomorrow".

    Raises:
        ValidationError: If date string cannot be parsed
    """
    text = (date_str or "").strip().lower()
    if not text:
        raise ValidationError("Empty date string")
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in relative_dates:
        return relative_dates[text]

    try:
        if "/" in text:
            return date_parser.parse(text, dayfirst=True).date()
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Could not parse date '{date_str}'") from e
