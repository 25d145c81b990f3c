"""Shared utilities used across the booking core."""

from datetime import datetime, timezone
from typing import Union

from booknpay.errors import InvalidInputError

InstantLike = Union[datetime, str]

CURRENCY_SYMBOLS: dict[str, str] = {
    "JMD": "$",
    "USD": "US$",
    "CAD": "CA$",
    "EUR": "€",
    "GBP": "£",
    "TTD": "TT$",
}


def parse_instant(value: InstantLike) -> datetime:
    """Parse an ISO-8601 string or datetime into a timezone-aware datetime.

    Naive values are assumed to be UTC.

    Examples:
        >>> parse_instant("2024-01-01T09:00:00Z").isoformat()
        '2024-01-01T09:00:00+00:00'
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        raw = value.strip()
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            raise InvalidInputError(f"Invalid instant: {value!r}") from None
    else:
        raise InvalidInputError(f"Invalid instant: {value!r}")

    return as_aware(parsed)


def as_aware(value: datetime) -> datetime:
    """Attach UTC to a naive datetime; aware values pass through unchanged."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Render an instant as a UTC ISO-8601 string with a ``Z`` suffix."""
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def format_currency(amount_cents: int, currency: str) -> str:
    """Format a cent amount for display, dropping a zero fractional part.

    Examples:
        >>> format_currency(500000, "JMD")
        '$5,000'
        >>> format_currency(1250, "USD")
        'US$12.5'
    """
    code = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    sign = "-" if amount_cents < 0 else ""
    whole, cents = divmod(abs(amount_cents), 100)
    text = f"{whole:,}"
    if cents:
        text += f".{cents:02d}".rstrip("0")
    return f"{sign}{symbol}{text}"
