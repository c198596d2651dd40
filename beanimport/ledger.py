"""Core ledger data types: amounts, costs, prices, postings and transactions."""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Union

MetaValue = Union[str, Decimal, _dt.date]

_FIAT_CURRENCIES = frozenset(
    {"CNY", "USD", "HKD", "EUR", "JPY", "GBP", "SGD", "CHF", "AUD", "CAD"}
)


def is_fiat_currency(currency: str) -> bool:
    """Return True when the currency code denotes fiat cash rather than a security."""
    return currency in _FIAT_CURRENCIES


@dataclass(frozen=True)
class Amount:
    """A number of units of a commodity."""

    number: Decimal
    currency: str


@dataclass(frozen=True)
class Cost:
    """The per-unit cost of a lot, optionally dated and labelled."""

    number: Decimal
    currency: str
    date: Optional[_dt.date] = None
    label: Optional[str] = None


@dataclass(frozen=True)
class Price:
    """The per-unit price a posting was traded at."""

    number: Decimal
    currency: str


@dataclass
class Posting:
    """One leg of a transaction."""

    account: str
    amount: Optional[Amount] = None
    cost: Optional[Cost] = None
    price: Optional[Price] = None
    inferred_cost: bool = False

    def with_amount(self, amount: Amount) -> "Posting":
        self.amount = amount
        return self

    def with_cost(self, cost: Cost) -> "Posting":
        self.cost = cost
        self.inferred_cost = False
        return self

    def with_inferred_cost(self) -> "Posting":
        """Mark the cost as empty (`{}`), to be matched against held lots."""
        self.cost = None
        self.inferred_cost = True
        return self

    def with_price(self, price: Price) -> "Posting":
        self.price = price
        return self


@dataclass
class Transaction:
    """A dated, balanced set of postings with metadata."""

    date: _dt.date
    narration: str
    payee: Optional[str] = None
    flag: str = "*"
    tags: List[str] = field(default_factory=list)
    links: List[str] = field(default_factory=list)
    metadata: Dict[str, MetaValue] = field(default_factory=dict)
    postings: List[Posting] = field(default_factory=list)

    def with_posting(self, posting: Posting) -> "Transaction":
        self.postings.append(posting)
        return self

    def with_meta(self, key: str, value: MetaValue) -> "Transaction":
        self.metadata[key] = value
        return self