"""Building blocks for importing financial statements as Beancount-style transactions: ledger models, parsing helpers, lot inventory, PnL and trade postings."""

__version__ = "0.1.0"