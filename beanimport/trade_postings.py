"""Holding, cash and fee postings for spot and reverse-repo securities trades."""

from __future__ import annotations

from decimal import Decimal

from .ledger import Amount, Cost, Posting, Price, Transaction

REPO_FACE_VALUE = Decimal(100)
"""Reverse repos are modelled at a face value of 100 per unit."""

DEFAULT_TRANSFER_ASSET_ACCOUNT = "Assets:Transfer:Broker"
"""Counterpart asset account for bank/broker cash transfers."""


def append_buy_fee_or_rounding(
    tx: Transaction,
    delta: Decimal,
    currency: str,
    fee_account: str,
    rounding_account: str,
) -> Transaction:
    """Book a buy-side difference: positive to fees, negative to rounding."""
    if delta.is_zero():
        return tx
    account = rounding_account if delta.is_signed() else fee_account
    return tx.with_posting(Posting(account).with_amount(Amount(delta, currency)))


def append_fee_delta(
    tx: Transaction, delta: Decimal, currency: str, fee_account: str
) -> Transaction:
    """Book a sell-side difference to the fee account."""
    if delta.is_zero():
        return tx
    return tx.with_posting(Posting(fee_account).with_amount(Amount(delta, currency)))


def append_repo_interest_or_loss(
    tx: Transaction,
    delta: Decimal,
    currency: str,
    income_account: str,
    expense_account: str,
) -> Transaction:
    """Book a repo maturity difference: a gain as interest income, a shortfall as expense."""
    if delta.is_zero():
        return tx
    if delta.is_signed():
        posting = Posting(expense_account).with_amount(Amount(abs(delta), currency))
    else:
        posting = Posting(income_account).with_amount(Amount(-delta, currency))
    return tx.with_posting(posting)


def _signed(quantity: Decimal, cash_amount: Decimal, is_buy: bool) -> tuple:
    held = abs(quantity)
    if is_buy:
        return held, -cash_amount
    return -held, cash_amount


def apply_repo_postings(
    tx: Transaction,
    holdings_account: str,
    cash_account: str,
    commodity: str,
    cash_currency: str,
    quantity: Decimal,
    cash_amount: Decimal,
    is_buy: bool,
    fee_account: str,
    rounding_account: str,
    interest_account: str,
) -> Transaction:
    """Add reverse-repo holding and cash postings, costed at face value.

    The gap between cash and principal goes to fees or rounding on a buy and
    to interest or expense on a sell.
    """
    signed_quantity, signed_cash = _signed(quantity, cash_amount, is_buy)
    tx.with_posting(
        Posting(holdings_account)
        .with_amount(Amount(signed_quantity, commodity))
        .with_cost(Cost(REPO_FACE_VALUE, cash_currency))
    )
    tx.with_posting(Posting(cash_account).with_amount(Amount(signed_cash, cash_currency)))

    delta = cash_amount - abs(quantity) * REPO_FACE_VALUE
    if is_buy:
        return append_buy_fee_or_rounding(
            tx, delta, cash_currency, fee_account, rounding_account
        )
    return append_repo_interest_or_loss(
        tx, delta, cash_currency, interest_account, fee_account
    )


def apply_spot_postings(
    tx: Transaction,
    holdings_account: str,
    cash_account: str,
    commodity: str,
    cash_currency: str,
    quantity: Decimal,
    cash_amount: Decimal,
    is_buy: bool,
    effective_price: Decimal,
    fee_account: str,
    rounding_account: str,
    pnl_account: str,
) -> Transaction:
    """Add spot trade postings.

    A buy holds the lot at `{price}`; a sell uses `{}` with `@ price` so the
    lot is matched later, and ends with an open PnL posting.
    """
    signed_quantity, signed_cash = _signed(quantity, cash_amount, is_buy)
    holding = Posting(holdings_account).with_amount(Amount(signed_quantity, commodity))
    if is_buy:
        holding.with_cost(Cost(effective_price, cash_currency))
    else:
        holding.with_inferred_cost().with_price(Price(effective_price, cash_currency))

    tx.with_posting(holding)
    tx.with_posting(Posting(cash_account).with_amount(Amount(signed_cash, cash_currency)))

    gross = abs(quantity) * effective_price
    if is_buy:
        return append_buy_fee_or_rounding(
            tx, cash_amount - gross, cash_currency, fee_account, rounding_account
        )
    append_fee_delta(tx, gross - cash_amount, cash_currency, fee_account)
    return tx.with_posting(Posting(pnl_account))