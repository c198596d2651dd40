# beanimport

Building blocks for turning bank, payment-app and brokerage statements into
Beancount-style double-entry transactions. The package uses only the
standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

| Module | Purpose |
| --- | --- |
| `beanimport.ledger` | `Amount`, `Cost`, `Price`, `Posting` and `Transaction` dataclasses with chainable `with_*` builders, plus `is_fiat_currency`. |
| `beanimport.dates` | `parse_datetime` and `parse_date` for strings such as `2023/12/31 3:44:00` or `2023-12-31`; they return `None` for an unreadable date. |
| `beanimport.decimals` | `parse_decimal` drops currency symbols and thousands separators; `parse_decimal_with_transform` also applies `"negate"` or `"abs"`. |
| `beanimport.encoding` | `decode_file` and `decode_bytes`: UTF-8 with BOM removal, `AUTO` detection (UTF-8, then GBK, GB18030, Big5), or a named encoding such as GBK, GB2312, GB18030, BIG5 or SHIFT_JIS. |
| `beanimport.logging_setup` | `init_logger(level)` installs a `ColorFormatter` handler on the root logger; `level` is a number or a name (`off`, `error`, `warn`, `info`, `debug`, `trace`). |
| `beanimport.metadata_keys` | `normalize_metadata_key` maps Chinese and English column names to keys like `orderId` or `payTime`; `ensure_beancount_metadata_key` produces a lowerCamel ASCII key or a stable `meta_xxxxxxxx` hash. |
| `beanimport.sorting` | `sort_transactions_for_output` sorts in place by date, commission date and order id; `parse_flexible_date` reads the date shapes it looks at. |
| `beanimport.pnl` | `calculate_trade_profit` returns a `TradeProfit`; `annotate_trade_profit_metadata` writes `grossPnl`, `feeTotal` and `netPnl` metadata. |
| `beanimport.enrichment` | `resolve_provider_source` (e.g. `wechat` → `微信`), `append_order_id` and `append_extra_metadata`. |
| `beanimport.inventory` | FIFO lot tracking: `InventoryLot`, `MatchedLot`, `InventoryState`, `consume_lots`, `cost_matches` and `resolve_inferred_cost_postings`. |
| `beanimport.seeds` | `load_seed_inventory` reads earlier Beancount files so that sells can match lots bought in past periods; the line parsers are public too. |
| `beanimport.cashflow` | `infer_is_expense`, `apply_expense_postings` and `apply_income_postings`. |
| `beanimport.securities_logic` | `TransactionKind`, `Direction`, `TradeDirection`; classification of transfers and trades, trade and transfer direction, cash and rounding account derivation, repo detection, currency and commodity normalisation. |
| `beanimport.trade_postings` | `apply_spot_postings` and `apply_repo_postings`, plus the fee, rounding, interest and loss helpers they use. |

## Example

```python
from datetime import date
from decimal import Decimal

from beanimport.ledger import Amount, Cost, Posting, Price, Transaction
from beanimport.inventory import InventoryState, resolve_inferred_cost_postings
from beanimport.pnl import annotate_trade_profit_metadata

buy = Transaction(date(2025, 12, 2), "buy").with_posting(
    Posting("Assets:Broker:Securities")
    .with_amount(Amount(Decimal("100"), "SEC_159915"))
    .with_cost(Cost(Decimal("3.06"), "CNY"))
)
sell = Transaction(date(2025, 12, 5), "sell").with_posting(
    Posting("Assets:Broker:Securities")
    .with_amount(Amount(Decimal("-100"), "SEC_159915"))
    .with_inferred_cost()
    .with_price(Price(Decimal("3.07"), "CNY"))
)

transactions = [buy, sell]
resolve_inferred_cost_postings(transactions, InventoryState())
annotate_trade_profit_metadata(transactions)
print(sell.metadata["grossPnl"])  # 1.00
```

A sell posting with an inferred cost (`{}`), or with a cost that has no date,
is split into one posting for each FIFO lot it consumes, and each split
carries the lot's dated cost. If the inventory holds too little, the unmatched
rest is kept as a further posting with its original cost.

## What the package does not do

This is a library of building blocks, not a complete importer. It has no
command-line program, does not read statement CSV or spreadsheet files into
records, loads no configuration or mapping files, has no rule engine for
choosing accounts, and does not write Beancount text. Callers build
`Transaction` objects with these modules and render them themselves.