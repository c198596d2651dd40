"""Classification and naming rules shared by securities statement importers."""

from __future__ import annotations

import enum
from decimal import Decimal
from typing import Optional

_COMMODITY_EXTRA_CHARS = frozenset("_-.")

_CURRENCY_ALIASES = {
    "人民币": "CNY",
    "人民币元": "CNY",
    "RMB": "CNY",
    "CNY": "CNY",
    "美元": "USD",
    "USD": "USD",
    "港币": "HKD",
    "港元": "HKD",
    "HKD": "HKD",
    "欧元": "EUR",
    "EUR": "EUR",
    "英镑": "GBP",
    "GBP": "GBP",
    "日元": "JPY",
    "JPY": "JPY",
}

_CASH_TRANSFER_KEYWORDS = ("银行转证券", "证券转银行", "银证转账", "银证转入", "银证转出")
_REPO_SYMBOLS = frozenset({"204001", "131810"})
_REPO_KEYWORDS = ("逆回购", "融券回购", "融券购回")


class TransactionKind(enum.Enum):
    """Whether a record moves cash only or trades a security."""

    CASH_TRANSFER = "cash_transfer"
    SECURITY_TRADE = "security_trade"


class Direction(enum.Enum):
    """Flow of money relative to the broker cash account."""

    IN = "in"
    OUT = "out"


class TradeDirection(enum.Enum):
    """Side of a security trade."""

    BUY = "buy"
    SELL = "sell"


def _ascii_lower(text: str) -> str:
    return "".join(ch.lower() if ch.isascii() else ch for ch in text)


def _ascii_upper(text: str) -> str:
    return "".join(ch.upper() if ch.isascii() else ch for ch in text)


def _is_commodity_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch in _COMMODITY_EXTRA_CHARS)


def _starts_with_ascii_letter(value: str) -> bool:
    return bool(value) and value[0].isascii() and value[0].isalpha()


def derive_rounding_account(fee_account: str) -> str:
    """Replace the last segment of the fee account with `Rounding`."""
    prefix, sep, _ = fee_account.rpartition(":")
    if sep:
        return f"{prefix}:Rounding"
    return "Expenses:Investing:Rounding"


def _is_cash_transfer_keyword(transaction_type: Optional[str]) -> bool:
    if transaction_type is None:
        return False
    return any(keyword in transaction_type for keyword in _CASH_TRANSFER_KEYWORDS)


def classify_transaction_kind(
    transaction_type: Optional[str], symbol: Optional[str]
) -> TransactionKind:
    """A symbol means a trade; otherwise bank/broker transfer keywords mean a cash transfer."""
    if symbol is not None and symbol.strip():
        return TransactionKind.SECURITY_TRADE
    if _is_cash_transfer_keyword(transaction_type):
        return TransactionKind.CASH_TRANSFER
    return TransactionKind.SECURITY_TRADE


def infer_transfer_direction(
    transaction_type: Optional[str], amount: Decimal
) -> Direction:
    """Infer a cash transfer's direction from keywords, else from the amount's sign."""
    if transaction_type is not None:
        normalized = _ascii_lower(transaction_type)
        if (
            "银行转证券" in transaction_type
            or "银证转入" in transaction_type
            or "in" in normalized
        ):
            return Direction.IN
        if (
            "证券转银行" in transaction_type
            or "银证转出" in transaction_type
            or "out" in normalized
        ):
            return Direction.OUT
    return Direction.OUT if amount.is_signed() else Direction.IN


def derive_cash_account(default_asset_account: Optional[str]) -> str:
    """Derive the broker cash account from the holdings account."""
    if default_asset_account is not None:
        account = default_asset_account.strip()
        if account.endswith(":Cash"):
            return account
        if account.endswith(":Securities"):
            return account[: -len(":Securities")] + ":Cash"
    return "Assets:Broker:Cash"


def infer_trade_direction(
    transaction_type: Optional[str], amount: Optional[Decimal]
) -> TradeDirection:
    """Infer buy or sell from keywords; otherwise a negative or missing amount is a buy."""
    if transaction_type is not None:
        normalized = _ascii_lower(transaction_type)
        if (
            "sell" in normalized
            or "卖" in transaction_type
            or "赎回" in transaction_type
            or "购回" in transaction_type
        ):
            return TradeDirection.SELL
        if (
            "buy" in normalized
            or "买" in transaction_type
            or "申购" in transaction_type
            or "回购" in transaction_type
        ):
            return TradeDirection.BUY
    if amount is None or amount.is_signed():
        return TradeDirection.BUY
    return TradeDirection.SELL


def is_repo_trade(symbol: str, transaction_type: Optional[str]) -> bool:
    """Recognise reverse-repo trades by well-known codes or type keywords."""
    if symbol in _REPO_SYMBOLS:
        return True
    if transaction_type is None:
        return False
    return any(keyword in transaction_type for keyword in _REPO_KEYWORDS)


def normalize_cash_currency(raw: str) -> str:
    """Map a currency label to an uppercase code, falling back to CNY."""
    trimmed = raw.strip()
    if not trimmed:
        return "CNY"
    alias = _CURRENCY_ALIASES.get(trimmed)
    if alias is not None:
        return alias
    upper = _ascii_upper(trimmed)
    if _starts_with_ascii_letter(upper) and all(_is_commodity_char(ch) for ch in upper):
        return upper
    return "CNY"


def _sanitize_token(raw: str) -> str:
    token = "".join(ch for ch in raw.strip() if _is_commodity_char(ch))
    return token or "UNKNOWN"


def normalize_security_commodity(raw_symbol: str) -> str:
    """Turn a security symbol into a valid commodity; numeric codes get a `SEC_` prefix."""
    token = _ascii_upper(_sanitize_token(raw_symbol))
    if _starts_with_ascii_letter(token):
        return token
    return f"SEC_{token}"