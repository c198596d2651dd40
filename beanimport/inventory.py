"""Lot inventory: FIFO matching of sells against held lots and cost resolution."""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from .ledger import Cost, Posting, Transaction, is_fiat_currency

_ZERO = Decimal(0)


@dataclass
class InventoryLot:
    """A held lot: how much of it is left and what it cost."""

    remaining: Decimal
    cost: Cost


@dataclass(frozen=True)
class MatchedLot:
    """The part of a lot consumed by one sell."""

    quantity: Decimal
    cost: Cost


@dataclass
class InventoryState:
    """Held lots, keyed by (account, commodity), in purchase order."""

    lots: Dict[Tuple[str, str], List[InventoryLot]] = field(default_factory=dict)

    def lots_for(self, account: str, commodity: str) -> List[InventoryLot]:
        """Return the live lot list for an account and commodity, creating it if absent."""
        return self.lots.setdefault((account, commodity), [])


def cost_matches(lot_cost: Cost, target_cost: Cost) -> bool:
    """True when number, currency and label agree, and the date too if the target has one."""
    return (
        lot_cost.number == target_cost.number
        and lot_cost.currency == target_cost.currency
        and lot_cost.label == target_cost.label
        and (target_cost.date is None or lot_cost.date == target_cost.date)
    )


def consume_lots(
    lots: List[InventoryLot], quantity: Decimal, target_cost: Optional[Cost]
) -> Tuple[List[MatchedLot], Decimal]:
    """Consume a positive quantity from the lots in FIFO order.

    With a target cost only matching lots are used. Exhausted lots are removed
    from the list. Returns the matched pieces and the quantity left unmatched.
    """
    remaining = quantity
    matched: List[MatchedLot] = []

    for lot in lots:
        if remaining.is_zero():
            break
        if lot.remaining.is_zero():
            continue
        if target_cost is not None and not cost_matches(lot.cost, target_cost):
            continue

        taken = lot.remaining if lot.remaining <= remaining else remaining
        if taken.is_zero():
            continue

        lot.remaining -= taken
        remaining -= taken
        matched.append(MatchedLot(quantity=taken, cost=lot.cost))

    lots[:] = [lot for lot in lots if not lot.remaining.is_zero()]
    return matched, remaining


def _register_buy_lot(
    inventory: InventoryState, posting: Posting, tx_date: _dt.date
) -> None:
    if posting.amount is None or posting.cost is None:
        return
    cost = posting.cost
    if cost.date is None:
        cost = replace(cost, date=tx_date)
    inventory.lots_for(posting.account, posting.amount.currency).append(
        InventoryLot(remaining=posting.amount.number, cost=cost)
    )


def _should_split_sell(posting: Posting) -> bool:
    if posting.amount is None or not posting.amount.number.is_signed():
        return False
    if posting.inferred_cost:
        return True
    return posting.cost is not None and posting.cost.date is None


def _with_quantity(template: Posting, quantity: Decimal) -> Posting:
    assert template.amount is not None
    return replace(template, amount=replace(template.amount, number=-quantity))


def _resolve_posting(
    posting: Posting, tx_date: _dt.date, inventory: InventoryState
) -> List[Posting]:
    amount = posting.amount
    if amount is None or is_fiat_currency(amount.currency):
        return [posting]

    if not amount.number.is_signed():
        _register_buy_lot(inventory, posting, tx_date)
        return [posting]

    if not _should_split_sell(posting):
        return [posting]

    target_cost = None if posting.inferred_cost else posting.cost
    lots = inventory.lots_for(posting.account, amount.currency)
    matched, remaining = consume_lots(lots, abs(amount.number), target_cost)
    if not matched:
        return [posting]

    resolved = [
        replace(
            _with_quantity(posting, piece.quantity),
            cost=piece.cost,
            inferred_cost=False,
        )
        for piece in matched
    ]
    if not remaining.is_zero():
        resolved.append(_with_quantity(posting, remaining))
    return resolved


def resolve_inferred_cost_postings(
    transactions: Iterable[Transaction], inventory: Optional[InventoryState] = None
) -> InventoryState:
    """Split sells with an empty (`{}`) or undated cost into explicit FIFO lots.

    Buys met along the way are added to the inventory; sells that cannot be
    fully matched keep their unmatched rest with the original cost semantics.
    Returns the inventory as it stands afterwards.
    """
    if inventory is None:
        inventory = InventoryState()
    for tx in transactions:
        rewritten: List[Posting] = []
        for posting in tx.postings:
            rewritten.extend(_resolve_posting(posting, tx.date, inventory))
        tx.postings = rewritten
    return inventory