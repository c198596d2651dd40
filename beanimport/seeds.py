"""Reading opening lot inventory from existing Beancount files."""

from __future__ import annotations

import datetime as _dt
import logging
import os
import re
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, Optional, Union

from .inventory import InventoryLot, InventoryState, consume_lots
from .ledger import Cost, is_fiat_currency

logger = logging.getLogger(__name__)

_TX_DATE_RE = re.compile(r"^(?P<date>\d{4}-\d{2}-\d{2})\s+[*!]")
_POSTING_RE = re.compile(
    r"^\s{2}(?:[*!]\s+)?(?P<account>\S+)\s+(?P<number>[+-]?\d+(?:\.\d+)?)"
    r"\s+(?P<commodity>[A-Za-z0-9_.-]+)(?:\s+\{(?P<cost>[^}]*)\})?"
)
_COST_RE = re.compile(
    r"\s*(?P<number>[+-]?\d+(?:\.\d+)?)\s+(?P<currency>[A-Za-z0-9_.-]+)"
    r"(?:,\s*(?P<date>\d{4}-\d{2}-\d{2}))?(?:,\s*\"(?P<label>[^\"]*)\")?\s*"
)


@dataclass(frozen=True)
class SeedPosting:
    """A posting line read from a seed file."""

    account: str
    quantity: Decimal
    commodity: str
    cost: Optional[Cost] = None


def _parse_iso_date(text: str) -> Optional[_dt.date]:
    try:
        return _dt.datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        return None


def _parse_number(text: str) -> Optional[Decimal]:
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def parse_seed_transaction_date(line: str) -> Optional[_dt.date]:
    """Return the date of a transaction header (`YYYY-MM-DD *` or `!`), else None."""
    match = _TX_DATE_RE.match(line.strip())
    if match is None:
        return None
    return _parse_iso_date(match.group("date"))


def parse_seed_cost(raw: str, fallback_date: Optional[_dt.date]) -> Optional[Cost]:
    """Parse `number currency[, date][, "label"]`; an absent date takes the fallback."""
    match = _COST_RE.fullmatch(raw.strip())
    if match is None:
        return None
    number = _parse_number(match.group("number"))
    if number is None:
        return None

    date_text = match.group("date")
    date = _parse_iso_date(date_text) if date_text is not None else fallback_date
    return Cost(
        number=number,
        currency=match.group("currency"),
        date=date,
        label=match.group("label"),
    )


def parse_seed_posting_line(
    line: str, fallback_date: Optional[_dt.date]
) -> Optional[SeedPosting]:
    """Parse an indented posting line with an optional `{cost}`; None if it is not one."""
    match = _POSTING_RE.match(line)
    if match is None:
        return None
    quantity = _parse_number(match.group("number"))
    if quantity is None:
        return None
    raw_cost = match.group("cost")
    cost = parse_seed_cost(raw_cost, fallback_date) if raw_cost is not None else None
    return SeedPosting(
        account=match.group("account"),
        quantity=quantity,
        commodity=match.group("commodity"),
        cost=cost,
    )


def _ingest_seed_file(path: Path, inventory: InventoryState) -> None:
    content = path.read_text(encoding="utf-8")
    current_date: Optional[_dt.date] = None

    for line in content.split("\n"):
        line = line.removesuffix("\r")
        tx_date = parse_seed_transaction_date(line)
        if tx_date is not None:
            current_date = tx_date
            continue

        parsed = parse_seed_posting_line(line, current_date)
        if parsed is None or is_fiat_currency(parsed.commodity):
            continue

        lots = inventory.lots_for(parsed.account, parsed.commodity)
        if parsed.cost is None:
            continue

        if not parsed.quantity.is_signed():
            cost = parsed.cost
            if cost.date is None:
                cost = replace(cost, date=current_date)
            lots.append(InventoryLot(remaining=parsed.quantity, cost=cost))
            continue

        # Seed sells only replay consumption; nothing unmatched is recorded.
        consume_lots(lots, abs(parsed.quantity), parsed.cost)


def load_seed_inventory(
    paths: Iterable[Union[str, os.PathLike]],
) -> InventoryState:
    """Build an inventory from seed files; unreadable files are logged and skipped."""
    inventory = InventoryState()
    for raw_path in paths:
        path = Path(raw_path)
        try:
            _ingest_seed_file(path, inventory)
        except (OSError, UnicodeDecodeError) as error:
            logger.warning("Failed to load inventory seed file '%s': %s", path, error)
        else:
            logger.debug("Loaded inventory seed file: %s", path)
    return inventory