#!/usr/bin/env python3

import hashlib
import re
from datetime import date, datetime
from decimal import Decimal

from camt_downgrade.errors import UnsupportedValue

AMOUNT_PATTERN = re.compile(r"\d+(\.\d+)?", re.ASCII)
CURRENCY_PATTERN = re.compile(r"[A-Z]{3}")
DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
DATETIME_PATTERN = re.compile(
    r"(?P<date>\d{4}-\d{2}-\d{2})T(?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})?",
    re.ASCII,
)


def parse_amount(text: str, path: str | None = None) -> Decimal:
    """Parses an XML Schema decimal without going through float."""
    text = text.strip()
    if not AMOUNT_PATTERN.fullmatch(text):
        raise UnsupportedValue(f"Cannot interpret amount {text!r}", path)
    return Decimal(text)


def format_amount(amount: Decimal) -> str:
    """Keeps every digit the source had, including trailing zeros."""
    return format(amount, "f")


def parse_currency(text: str, path: str | None = None) -> str:
    text = text.strip()
    if not CURRENCY_PATTERN.fullmatch(text):
        raise UnsupportedValue(f"Unsupported currency code {text!r}", path)
    return text


def parse_date(text: str, path: str | None = None) -> date:
    text = text.strip()
    if not DATE_PATTERN.fullmatch(text):
        raise UnsupportedValue(f"Unrecognized date format {text!r}", path)
    try:
        return date.fromisoformat(text)
    except ValueError as e:
        raise UnsupportedValue(f"Invalid date {text!r}", path) from e


def parse_datetime(text: str, path: str | None = None) -> datetime:
    """Parses an ISO 8601 date-time as used by ISO 20022.

    Fractions finer than microseconds are truncated and a trailing ``Z`` is
    read as UTC. Values without an offset stay naive.
    """
    text = text.strip()
    match = DATETIME_PATTERN.fullmatch(text)
    if not match:
        raise UnsupportedValue(f"Unrecognized date-time format {text!r}", path)

    normalized = f"{match.group('date')}T{match.group('time')}"
    if match.group("fraction"):
        normalized += "." + match.group("fraction")[:6].ljust(6, "0")
    offset = match.group("offset")
    if offset:
        normalized += "+00:00" if offset == "Z" else offset
    try:
        return datetime.fromisoformat(normalized)
    except ValueError as e:
        raise UnsupportedValue(f"Invalid date-time {text!r}", path) from e


def format_datetime(value: datetime) -> str:
    return value.isoformat(timespec="seconds")


def synthetic_reference(booking_date: date, amount: Decimal, position: int) -> str:
    """Derives a stable account servicer reference for an entry without one.

    Args:
      booking_date: The booking date of the entry.
      amount: The signed amount of the entry.
      position: The 1-based position of the entry within its account.
    Returns:
      ``TX`` followed by ten digits.
    """
    normalized = amount.normalize()
    if normalized == 0:
        normalized = Decimal(0)
    key = f"{booking_date.isoformat()}|{format_amount(normalized)}|{position}"
    digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
    return f"TX{int(digest, 16) % 10_000_000_000:010d}"
