"""Display formatting for money, dates and measurement values."""

import re
from datetime import date, datetime
from typing import Optional, Union

from .sanitize import sanitize

DateLike = Union[date, datetime, str, None]

# A value ending in a number, optionally followed by a unit already
_TRAILING_NUMBER = re.compile(r"\d+(\.\d+)?\s*(cm|inches)?$", re.IGNORECASE)


def group_thousands(amount: Union[int, float]) -> str:
    """Group an integer amount with a single space every three digits."""
    value = int(round(amount))
    sign = "-" if value < 0 else ""
    return sign + f"{abs(value):,}".replace(",", " ")


def format_currency(amount: Union[int, float], currency: str = "FCFA") -> str:
    """Format an amount as '1 234 567 FCFA' (no decimals)."""
    return f"{group_thousands(amount)} {currency}"


def to_date(value: DateLike) -> Optional[date]:
    """Coerce a date, datetime or ISO string to a date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date()


def format_date(value: DateLike) -> str:
    """Format as dd/mm/yyyy, empty string when missing."""
    parsed = to_date(value)
    if parsed is None:
        return ""
    return parsed.strftime("%d/%m/%Y")


def format_datetime(value: Union[datetime, str, None]) -> str:
    """Format as 'dd/mm/yyyy a HH:MM'."""
    if value is None or value == "":
        return ""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return f"{value.strftime('%d/%m/%Y')} a {value.strftime('%H:%M')}"


def format_measurement(value: Union[str, int, float, None], unit: str) -> str:
    """
    Render a measurement for display.

    Values are opaque strings ("50 - 45", "87-2"). The unit is appended only
    when the value ends with a number and does not already name a unit.
    """
    if value is None or value == "":
        return ""
    if isinstance(value, (int, float)):
        return f"{value} {unit}"

    text = sanitize(value).strip()
    if _TRAILING_NUMBER.search(text):
        if "cm" in text or "inches" in text:
            return text
        return f"{text} {unit}"
    return text
