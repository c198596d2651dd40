"""Deterministic ordering of transactions for output."""

from __future__ import annotations

import datetime as _dt
import re
from decimal import Decimal
from typing import List, Optional

from .ledger import MetaValue, Transaction

_COMMISSION_DATE_KEYS = ("commissionDate", "commission_date", "entrustDate", "payTime")
_ORDER_ID_KEYS = ("orderId", "order_id", "orderid", "reference")

_DATE_PATTERNS = (
    re.compile(r"([0-9]{4})([0-9]{2})([0-9]{2})"),
    re.compile(r"([0-9]{4})-([0-9]{1,2})-([0-9]{1,2})"),
    re.compile(r"([0-9]{4})/([0-9]{1,2})/([0-9]{1,2})"),
)

_DATETIME_PATTERNS = (
    re.compile(r"([0-9]{4})([0-9]{2})([0-9]{2})([0-9]{2})([0-9]{2})([0-9]{2})"),
    re.compile(
        r"([0-9]{4})-([0-9]{1,2})-([0-9]{1,2}) ([0-9]{1,2}):([0-9]{1,2}):([0-9]{1,2})"
    ),
    re.compile(
        r"([0-9]{4})/([0-9]{1,2})/([0-9]{1,2}) ([0-9]{1,2}):([0-9]{1,2}):([0-9]{1,2})"
    ),
)


def _make_date(year: str, month: str, day: str) -> Optional[_dt.date]:
    try:
        return _dt.date(int(year), int(month), int(day))
    except ValueError:
        return None


def _make_datetime(*parts: str) -> Optional[_dt.date]:
    year, month, day, hour, minute, second = (int(part) for part in parts)
    try:
        return _dt.datetime(year, month, day, hour, minute, second).date()
    except ValueError:
        return None


def parse_flexible_date(raw: str) -> Optional[_dt.date]:
    """Parse the date and date-time shapes commonly found in imported metadata."""
    trimmed = raw.strip()
    if not trimmed:
        return None

    for pattern in _DATE_PATTERNS:
        match = pattern.fullmatch(trimmed)
        if match:
            parsed = _make_date(*match.groups())
            if parsed is not None:
                return parsed

    for pattern in _DATETIME_PATTERNS:
        match = pattern.fullmatch(trimmed)
        if match:
            parsed = _make_datetime(*match.groups())
            if parsed is not None:
                return parsed

    digits = "".join(ch for ch in trimmed if ch in "0123456789")
    if len(digits) >= 8:
        return _make_date(digits[0:4], digits[4:6], digits[6:8])
    return None


def _meta_value_to_string(value: MetaValue) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, _dt.date):
        return value.strftime("%Y-%m-%d")
    return None


def _meta_value_to_date(value: MetaValue) -> Optional[_dt.date]:
    if isinstance(value, _dt.datetime):
        return value.date()
    if isinstance(value, _dt.date):
        return value
    if isinstance(value, str):
        return parse_flexible_date(value)
    if isinstance(value, Decimal):
        return parse_flexible_date(str(value))
    return None


def _commission_date(tx: Transaction) -> Optional[_dt.date]:
    for key in _COMMISSION_DATE_KEYS:
        value = tx.metadata.get(key)
        if value is None:
            continue
        parsed = _meta_value_to_date(value)
        if parsed is not None:
            return parsed
    return None


def _order_id(tx: Transaction) -> Optional[str]:
    for key in _ORDER_ID_KEYS:
        value = tx.metadata.get(key)
        if value is None:
            continue
        text = _meta_value_to_string(value)
        if text is None:
            continue
        trimmed = text.strip()
        if trimmed:
            return trimmed
    return None


def _sort_key(tx: Transaction) -> tuple:
    commission = _commission_date(tx)
    order_id = _order_id(tx)
    return (
        tx.date,
        commission is None,
        commission or _dt.date.min,
        order_id is None,
        order_id or "",
    )


def sort_transactions_for_output(transactions: List[Transaction]) -> None:
    """Sort in place by date, then commission date, then order id (missing keys last)."""
    transactions.sort(key=_sort_key)