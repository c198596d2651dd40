from decimal import Decimal

import pytest

from beanimport.securities_logic import (
    Direction,
    TradeDirection,
    TransactionKind,
    classify_transaction_kind,
    derive_cash_account,
    derive_rounding_account,
    infer_trade_direction,
    infer_transfer_direction,
    is_repo_trade,
    normalize_cash_currency,
    normalize_security_commodity,
)


def test_derives_rounding_account_from_fee_account_prefix():
    assert derive_rounding_account("Expenses:Investing:Fees") == "Expenses:Investing:Rounding"


def test_rounding_account_without_hierarchy_falls_back():
    assert derive_rounding_account("Fees") == "Expenses:Investing:Rounding"


def test_detects_cash_transfer_without_symbol():
    assert classify_transaction_kind("银行转证券", None) is TransactionKind.CASH_TRANSFER
    assert classify_transaction_kind("证券转银行", "") is TransactionKind.CASH_TRANSFER
    assert classify_transaction_kind("证券买入", None) is TransactionKind.SECURITY_TRADE
    assert classify_transaction_kind("证券卖出", "159915") is TransactionKind.SECURITY_TRADE


def test_symbol_forces_security_trade_even_with_transfer_keyword():
    assert classify_transaction_kind("银证转账", "131810") is TransactionKind.SECURITY_TRADE
    assert classify_transaction_kind("银证转账", "   ") is TransactionKind.CASH_TRANSFER


def test_infers_transfer_direction_from_type_or_amount():
    assert infer_transfer_direction("银行转证券", Decimal(5000)) is Direction.IN
    assert infer_transfer_direction("证券转银行", Decimal(-5000)) is Direction.OUT
    assert infer_transfer_direction(None, Decimal(1)) is Direction.IN
    assert infer_transfer_direction(None, Decimal(-1)) is Direction.OUT


def test_transfer_keyword_overrides_amount_sign():
    assert infer_transfer_direction("in", Decimal(-1)) is Direction.IN
    assert infer_transfer_direction("OUT", Decimal(1)) is Direction.OUT


def test_derives_cash_account_from_securities_account():
    assert (
        derive_cash_account("Assets:Broker:Galaxy:Securities")
        == "Assets:Broker:Galaxy:Cash"
    )
    assert derive_cash_account("Assets:Broker:Futu:Cash") == "Assets:Broker:Futu:Cash"


def test_cash_account_fallback():
    assert derive_cash_account(None) == "Assets:Broker:Cash"
    assert derive_cash_account("Assets:Other") == "Assets:Broker:Cash"


def test_infers_trade_direction_from_type_or_amount():
    assert infer_trade_direction("证券买入", Decimal(-100)) is TradeDirection.BUY
    assert infer_trade_direction("证券卖出", Decimal(100)) is TradeDirection.SELL
    assert infer_trade_direction(None, Decimal(-1)) is TradeDirection.BUY
    assert infer_trade_direction(None, Decimal(1)) is TradeDirection.SELL


def test_missing_amount_defaults_to_buy():
    assert infer_trade_direction(None, None) is TradeDirection.BUY


def test_repo_settlement_keyword_is_sell():
    assert infer_trade_direction("融券购回", None) is TradeDirection.SELL
    assert infer_trade_direction("融券回购", Decimal(1)) is TradeDirection.BUY


@pytest.mark.parametrize(
    "symbol, tx_type, expected",
    [
        ("204001", None, True),
        ("131810", None, True),
        ("600000", "逆回购", True),
        ("600000", "证券买入", False),
        ("600000", None, False),
    ],
)
def test_is_repo_trade(symbol, tx_type, expected):
    assert is_repo_trade(symbol, tx_type) is expected


def test_normalizes_chinese_currency_to_iso_code():
    assert normalize_cash_currency("人民币") == "CNY"
    assert normalize_cash_currency("美元") == "USD"


def test_cash_currency_fallbacks():
    assert normalize_cash_currency("  ") == "CNY"
    assert normalize_cash_currency("usd") == "USD"
    assert normalize_cash_currency("1ABC") == "CNY"
    assert normalize_cash_currency("未知") == "CNY"


def test_prefixes_numeric_code_with_uppercase_sec_prefix():
    assert normalize_security_commodity("161226") == "SEC_161226"


def test_keeps_alphabetic_symbol_without_sec_prefix():
    assert normalize_security_commodity("GC001") == "GC001"