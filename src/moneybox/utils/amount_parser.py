"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

from moneybox.domain.errors import ValidationError
from moneybox.domain.validation import check_cents


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "R$ 123,45" (Brazilian decimal comma)
    - "1.234,56" / "1,234.56" (thousands separators)
    - "$123.45", "€ 10"
    - "-123.45" or "(123.45)" (negative)

    When both ``.`` and ``,`` appear, the last one is the decimal separator.
    A lone ``,`` followed by one or two digits is a decimal comma. Amounts
    finer than one cent are rejected.

    Raises:
        ValidationError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValidationError("Empty amount string")

    text = amount_str.strip()

    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1]

    text = re.sub(r"R\$|[$€£]|\s", "", text)
    if text.startswith("-"):
        is_negative = not is_negative
        text = text[1:]

    if "," in text and "." in text:
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif "," in text:
        if re.fullmatch(r"\d+,\d{1,2}", text):
            text = text.replace(",", ".")
        else:
            text = text.replace(",", "")
    elif text.count(".") > 1:
        text = text.replace(".", "")

    try:
        amount = Decimal(text)
    except InvalidOperation as e:
        raise ValidationError(f"Could not parse amount '{amount_str}'") from e
    if not amount.is_finite():
        raise ValidationError(f"Could not parse amount '{amount_str}'")
    check_cents(amount)
    return -amount if is_negative else amount
