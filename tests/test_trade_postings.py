import datetime as dt
from decimal import Decimal

from beanimport.ledger import Transaction
from beanimport.trade_postings import (
    REPO_FACE_VALUE,
    append_buy_fee_or_rounding,
    append_fee_delta,
    append_repo_interest_or_loss,
    apply_repo_postings,
    apply_spot_postings,
)

FEE = "Expenses:Investing:Fees"
ROUNDING = "Expenses:Investing:Rounding"
INTEREST = "Income:Investing:Interest"
PNL = "Income:Investing:Capital-Gains"
HOLD = "Assets:Broker:Securities"
CASH = "Assets:Broker:Cash"


def _tx():
    return Transaction(dt.date(2026, 3, 1), "trade")


def _weight_sum(tx, currency="CNY"):
    total = Decimal(0)
    for posting in tx.postings:
        if posting.amount is None:
            continue
        if posting.cost is not None:
            assert posting.cost.currency == currency
            total += posting.amount.number * posting.cost.number
        else:
            assert posting.amount.currency == currency
            total += posting.amount.number
    return total


def _by_account(tx, account):
    return [p for p in tx.postings if p.account == account]


def test_buy_delta_zero_adds_nothing():
    tx = append_buy_fee_or_rounding(_tx(), Decimal(0), "CNY", FEE, ROUNDING)
    assert tx.postings == []


def test_buy_positive_delta_goes_to_fee():
    delta = Decimal("0.3")
    tx = append_buy_fee_or_rounding(_tx(), delta, "CNY", FEE, ROUNDING)
    assert [p.account for p in tx.postings] == [FEE]
    assert tx.postings[0].amount.number == delta


def test_buy_negative_delta_goes_to_rounding():
    delta = Decimal("-0.01")
    tx = append_buy_fee_or_rounding(_tx(), delta, "CNY", FEE, ROUNDING)
    assert [p.account for p in tx.postings] == [ROUNDING]
    assert tx.postings[0].amount.number == delta


def test_fee_delta_books_any_nonzero_sign():
    delta = Decimal("-0.2")
    tx = append_fee_delta(_tx(), delta, "CNY", FEE)
    assert [p.account for p in tx.postings] == [FEE]
    assert tx.postings[0].amount.number == delta
    assert append_fee_delta(_tx(), Decimal(0), "CNY", FEE).postings == []


def test_repo_interest_positive_is_negative_income():
    delta = Decimal("1.5")
    tx = append_repo_interest_or_loss(_tx(), delta, "CNY", INTEREST, FEE)
    assert [p.account for p in tx.postings] == [INTEREST]
    assert tx.postings[0].amount.number == -delta


def test_repo_loss_is_positive_expense():
    delta = Decimal("-2")
    tx = append_repo_interest_or_loss(_tx(), delta, "CNY", INTEREST, FEE)
    assert [p.account for p in tx.postings] == [FEE]
    assert tx.postings[0].amount.number == -delta


def test_repo_buy_balances_with_fee():
    tx = apply_repo_postings(
        _tx(), HOLD, CASH, "SEC_204001", "CNY", Decimal(10), Decimal("1000.5"),
        True, FEE, ROUNDING, INTEREST,
    )
    holding = tx.postings[0]
    assert holding.account == HOLD
    assert holding.amount.number == Decimal(10)
    assert holding.cost.number == REPO_FACE_VALUE
    assert tx.postings[1].amount.number == Decimal("-1000.5")
    assert len(_by_account(tx, FEE)) == 1
    assert _weight_sum(tx) == 0


def test_repo_buy_below_principal_uses_rounding():
    tx = apply_repo_postings(
        _tx(), HOLD, CASH, "SEC_204001", "CNY", Decimal(10), Decimal("999.9"),
        True, FEE, ROUNDING, INTEREST,
    )
    assert len(_by_account(tx, ROUNDING)) == 1
    assert _by_account(tx, FEE) == []
    assert _weight_sum(tx) == 0


def test_repo_exact_principal_has_two_postings():
    tx = apply_repo_postings(
        _tx(), HOLD, CASH, "SEC_131810", "CNY", Decimal(10), Decimal(1000),
        False, FEE, ROUNDING, INTEREST,
    )
    assert len(tx.postings) == 2
    assert _weight_sum(tx) == 0


def test_repo_sell_books_interest_and_balances():
    tx = apply_repo_postings(
        _tx(), HOLD, CASH, "SEC_204001", "CNY", Decimal(10), Decimal(1010),
        False, FEE, ROUNDING, INTEREST,
    )
    assert tx.postings[0].amount.number == Decimal(-10)
    assert tx.postings[1].amount.number == Decimal(1010)
    assert len(_by_account(tx, INTEREST)) == 1
    assert _weight_sum(tx) == 0


def test_repo_sell_shortfall_goes_to_fee_account():
    tx = apply_repo_postings(
        _tx(), HOLD, CASH, "SEC_204001", "CNY", Decimal(10), Decimal(999),
        False, FEE, ROUNDING, INTEREST,
    )
    assert len(_by_account(tx, FEE)) == 1
    assert _by_account(tx, INTEREST) == []
    assert _weight_sum(tx) == 0


def test_spot_buy_holds_lot_at_price_and_balances():
    price = Decimal(10)
    tx = apply_spot_postings(
        _tx(), HOLD, CASH, "SEC_159915", "CNY", Decimal(100), Decimal("1000.3"),
        True, price, FEE, ROUNDING, PNL,
    )
    holding = tx.postings[0]
    assert holding.cost.number == price
    assert holding.inferred_cost is False
    assert holding.price is None
    assert len(_by_account(tx, FEE)) == 1
    assert _by_account(tx, PNL) == []
    assert _weight_sum(tx) == 0


def test_spot_buy_under_gross_uses_rounding():
    tx = apply_spot_postings(
        _tx(), HOLD, CASH, "SEC_159915", "CNY", Decimal(100), Decimal("999.99"),
        True, Decimal(10), FEE, ROUNDING, PNL,
    )
    assert len(_by_account(tx, ROUNDING)) == 1
    assert _weight_sum(tx) == 0


def test_spot_sell_uses_inferred_cost_and_open_pnl():
    price = Decimal("3.07")
    quantity = Decimal(100)
    cash = Decimal("306.9")
    tx = apply_spot_postings(
        _tx(), HOLD, CASH, "SEC_159915", "CNY", quantity, cash,
        False, price, FEE, ROUNDING, PNL,
    )
    holding = tx.postings[0]
    assert holding.amount.number == -quantity
    assert holding.inferred_cost is True
    assert holding.cost is None
    assert holding.price.number == price
    assert tx.postings[1].amount.number == cash
    fee = _by_account(tx, FEE)
    assert len(fee) == 1
    assert fee[0].amount.number + cash == quantity * price
    assert tx.postings[-1].account == PNL
    assert tx.postings[-1].amount is None


def test_spot_sell_without_fee_ends_with_pnl():
    tx = apply_spot_postings(
        _tx(), HOLD, CASH, "SEC_159915", "CNY", Decimal(100), Decimal(300),
        False, Decimal(3), FEE, ROUNDING, PNL,
    )
    assert [p.account for p in tx.postings] == [HOLD, CASH, PNL]