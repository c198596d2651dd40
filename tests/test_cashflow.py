import datetime as dt
from decimal import Decimal

import pytest

from beanimport.cashflow import (
    apply_expense_postings,
    apply_income_postings,
    infer_is_expense,
)
from beanimport.ledger import Transaction

ZERO = Decimal(0)


def _tx():
    return Transaction(dt.date(2025, 1, 1), "test")


@pytest.mark.parametrize(
    "direction, expected",
    [("支出", True), ("转出", True), ("收入", False), ("转入", False)],
)
def test_infers_expense_from_direction_keywords(direction, expected):
    assert infer_is_expense(direction, ZERO) is expected


@pytest.mark.parametrize(
    "direction, expected",
    [("expense", True), ("out", True), ("income", False), ("in", False)],
)
def test_infers_expense_from_english_keywords(direction, expected):
    assert infer_is_expense(direction, ZERO) is expected


def test_falls_back_to_amount_sign_when_direction_missing():
    assert infer_is_expense(None, Decimal(10)) is True
    assert infer_is_expense(None, Decimal(-10)) is False


def test_unrecognised_direction_uses_amount_sign():
    assert infer_is_expense("其他", Decimal(5)) is True
    assert infer_is_expense("其他", Decimal(-5)) is False
    assert infer_is_expense("其他", ZERO) is False


def test_chinese_keyword_beats_amount_sign():
    assert infer_is_expense("支出", Decimal(-3)) is True
    assert infer_is_expense("收入", Decimal(3)) is False


def test_expense_postings_balance_and_order():
    tx = apply_expense_postings(
        _tx(), "Expenses:Food", "Assets:Bank", Decimal("-12.50"), "CNY"
    )
    assert [p.account for p in tx.postings] == ["Expenses:Food", "Assets:Bank"]
    assert tx.postings[0].amount.number == Decimal("12.50")
    assert tx.postings[1].amount.number == Decimal("-12.50")
    assert sum(p.amount.number for p in tx.postings) == ZERO
    assert {p.amount.currency for p in tx.postings} == {"CNY"}


def test_income_postings_balance_and_order():
    tx = apply_income_postings(
        _tx(), "Assets:Bank", "Income:Salary", Decimal("100"), "USD"
    )
    assert [p.account for p in tx.postings] == ["Assets:Bank", "Income:Salary"]
    assert tx.postings[0].amount.number == Decimal("100")
    assert tx.postings[1].amount.number == Decimal("-100")
    assert {p.amount.currency for p in tx.postings} == {"USD"}