"""Per-trade realised profit metadata: grossPnl, feeTotal and netPnl."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Optional

from .ledger import MetaValue, Transaction, is_fiat_currency

_ZERO = Decimal(0)


@dataclass(frozen=True)
class TradeProfit:
    """Realised profit of one trade, before and after fees."""

    gross_pnl: Decimal
    fee_total: Decimal
    net_pnl: Decimal


def _read_numeric_metadata(metadata: Dict[str, MetaValue], key: str) -> Optional[Decimal]:
    value = metadata.get(key)
    if isinstance(value, Decimal):
        return value
    if isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return None
        return number if number.is_finite() else None
    return None


def _infer_fee_total(tx: Transaction, quote_currency: Optional[str]) -> Decimal:
    total = _ZERO
    for posting in tx.postings:
        if not posting.account.startswith("Expenses:") or posting.amount is None:
            continue
        amount = posting.amount
        if amount.number.is_signed():
            continue
        if quote_currency is not None:
            if amount.currency != quote_currency:
                continue
        elif not is_fiat_currency(amount.currency):
            continue
        total += amount.number
    return total


def calculate_trade_profit(tx: Transaction) -> Optional[TradeProfit]:
    """Compute the trade's profit, or None when it is no trade or a sold lot is unresolved."""
    has_non_fiat = False
    has_sell = False
    unresolved_sell = False
    quote_currency: Optional[str] = None
    gross_pnl = _ZERO

    for posting in tx.postings:
        amount = posting.amount
        if amount is None or is_fiat_currency(amount.currency):
            continue
        has_non_fiat = True
        if not amount.number.is_signed():
            continue
        has_sell = True
        if posting.cost is None or posting.price is None:
            unresolved_sell = True
            continue
        gross_pnl += abs(amount.number) * (posting.price.number - posting.cost.number)
        if quote_currency is None:
            quote_currency = posting.price.currency

    if not has_non_fiat or (has_sell and unresolved_sell):
        return None

    explicit_fee = (_read_numeric_metadata(tx.metadata, "fee") or _ZERO) + (
        _read_numeric_metadata(tx.metadata, "tax") or _ZERO
    )
    inferred_fee = _infer_fee_total(tx, quote_currency)
    if not has_sell and gross_pnl.is_zero() and explicit_fee.is_zero() and inferred_fee.is_zero():
        return None

    fee_total = inferred_fee if explicit_fee.is_zero() else explicit_fee
    return TradeProfit(gross_pnl=gross_pnl, fee_total=fee_total, net_pnl=gross_pnl - fee_total)


def annotate_trade_profit_metadata(transactions: Iterable[Transaction]) -> None:
    """Write grossPnl, feeTotal and netPnl metadata onto every resolvable trade."""
    for tx in transactions:
        profit = calculate_trade_profit(tx)
        if profit is None:
            continue
        tx.metadata["grossPnl"] = profit.gross_pnl
        tx.metadata["feeTotal"] = profit.fee_total
        tx.metadata["netPnl"] = profit.net_pnl