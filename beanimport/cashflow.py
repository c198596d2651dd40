"""Cash-flow classification and double-entry postings for payment and bank records."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from .ledger import Amount, Posting, Transaction

_ZERO = Decimal(0)


def _ascii_lower(text: str) -> str:
    return "".join(ch.lower() if ch.isascii() else ch for ch in text)


def infer_is_expense(direction: Optional[str], amount: Decimal) -> bool:
    """Decide whether a record is an expense.

    Chinese and English direction keywords win; without a recognisable
    direction a positive amount counts as an expense.
    """
    if direction is not None:
        if "支出" in direction or "转出" in direction:
            return True
        if "收入" in direction or "转入" in direction:
            return False
        normalized = _ascii_lower(direction)
        if "expense" in normalized or "out" in normalized:
            return True
        if "income" in normalized or "in" in normalized:
            return False
    return amount > _ZERO


def apply_expense_postings(
    tx: Transaction,
    expense_account: str,
    asset_account: str,
    amount: Decimal,
    currency: str,
) -> Transaction:
    """Debit the expense account and credit the asset account by the absolute amount."""
    value = abs(amount)
    tx.with_posting(Posting(expense_account).with_amount(Amount(value, currency)))
    tx.with_posting(Posting(asset_account).with_amount(Amount(-value, currency)))
    return tx


def apply_income_postings(
    tx: Transaction,
    asset_account: str,
    income_account: str,
    amount: Decimal,
    currency: str,
) -> Transaction:
    """Debit the asset account and credit the income account by the absolute amount."""
    value = abs(amount)
    tx.with_posting(Posting(asset_account).with_amount(Amount(value, currency)))
    tx.with_posting(Posting(income_account).with_amount(Amount(-value, currency)))
    return tx