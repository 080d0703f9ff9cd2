"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles "35", "35.00", "R$ 35,00", "$1,234.56" and "1.234,56". When both
    separators are present the last one is the decimal separator; a lone
    comma followed by exactly two digits is treated as a decimal comma.

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = re.sub(r"(R\$|[$€£\s])", "", amount_str.strip())

    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif re.fullmatch(r"-?\d+,\d{2}", cleaned):
        cleaned = cleaned.replace(",", ".")
    else:
        cleaned = cleaned.replace(",", "")

    try:
        return Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")


MONEY_PLACES = Decimal("0.01")
# Numeric(10, 2) columns hold at most 8 integer digits
MONEY_LIMIT = Decimal("100000000")


def check_money(value: Decimal) -> Decimal:
    """Return value unchanged if it fits a money column exactly.

    Raises:
        ValueError: If value has more than two decimal places or more than
            eight integer digits
    """
    if abs(value) >= MONEY_LIMIT:
        raise ValueError(f"{value} is too large; the limit is {MONEY_LIMIT - MONEY_PLACES}")
    if value != value.quantize(MONEY_PLACES):
        raise ValueError(f"{value} has more than two decimal places")
    return value
