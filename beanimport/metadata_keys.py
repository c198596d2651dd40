"""Normalisation of provider metadata keys into Beancount-safe identifiers."""

from __future__ import annotations

import zlib
from typing import Optional

_EXACT_KEYS = {
    "交易状态": "status",
    "状态": "status",
    "来源": "source",
    "交易来源": "source",
    "收/支": "type",
    "收支": "type",
    "交易时间": "payTime",
    "支付时间": "payTime",
    "付款时间": "payTime",
    "收/付款方式": "method",
    "支付方式": "method",
    "付款方式": "method",
    "收款方式": "method",
    "交易订单号": "orderId",
    "订单号": "orderId",
    "交易流水号": "orderId",
    "流水号": "orderId",
    "商家订单号": "merchantId",
    "交易对方": "peer",
    "交易对手": "peer",
    "对方": "peer",
    "对方账号": "peerAccount",
    "对手账户": "peerAccount",
    "商品说明": "item",
    "备注": "note",
    "金额": "amount",
    "金额(元)": "amount",
    "金额（元）": "amount",
    "币种": "currency",
}

_CATEGORY_KEYS = {"交易分类", "分类"}

_LOWER_CATEGORY_KEYS = {
    "txtype",
    "tx_type",
    "transactiontype",
    "transaction_type",
    "transactioncategory",
    "transaction_category",
    "category",
}

_LOWER_KEYS = {
    **dict.fromkeys(
        ("status", "transactionstatus", "transaction_status", "trade_status"), "status"
    ),
    **dict.fromkeys(("source", "tradesource", "trade_source"), "source"),
    **dict.fromkeys(
        ("type", "inout", "in_out", "incomeexpense", "income_expense", "direction"),
        "type",
    ),
    **dict.fromkeys(
        (
            "paytime",
            "pay_time",
            "transactiontime",
            "transaction_time",
            "tradetime",
            "trade_time",
            "paymenttime",
            "payment_time",
        ),
        "payTime",
    ),
    **dict.fromkeys(
        ("method", "paymethod", "pay_method", "paymentmethod", "payment_method"),
        "method",
    ),
    **dict.fromkeys(
        (
            "orderid",
            "order_id",
            "transactionorderid",
            "transaction_order_id",
            "reference",
            "transactionid",
            "transaction_id",
        ),
        "orderId",
    ),
    **dict.fromkeys(
        (
            "merchantid",
            "merchant_id",
            "merchantorderid",
            "merchant_order_id",
            "merchantorderno",
            "merchant_order_no",
        ),
        "merchantId",
    ),
    **dict.fromkeys(("peer", "payee"), "peer"),
    **dict.fromkeys(
        ("peeraccount", "peer_account", "payeeaccount", "payee_account"), "peerAccount"
    ),
    **dict.fromkeys(("remark", "memo", "comment", "note"), "note"),
    "amount": "amount",
    "currency": "currency",
}


def _ascii_lower(text: str) -> str:
    return "".join(ch.lower() if ch.isascii() else ch for ch in text)


def normalize_metadata_key(provider: str, raw_key: str) -> str:
    """Map a provider column or metadata name onto a stable English key."""
    key = raw_key.strip()
    if not key:
        return "meta"
    mapped = _map_key(provider, key)
    if mapped is not None:
        return mapped
    return ensure_beancount_metadata_key(key)


def ensure_beancount_metadata_key(raw_key: str) -> str:
    """Turn a key into a lowerCamel ASCII identifier, or a stable `meta_xxxxxxxx` hash."""
    raw = raw_key.strip()
    if not raw:
        return "meta"
    converted = _to_lower_camel_ascii(raw)
    if converted is not None:
        return converted
    return f"meta_{zlib.crc32(raw.encode('utf-8')):08x}"


def _map_key(provider: str, raw_key: str) -> Optional[str]:
    category = "category" if _ascii_lower(provider) == "alipay" else "txType"

    if raw_key in _CATEGORY_KEYS:
        return category
    if raw_key in _EXACT_KEYS:
        return _EXACT_KEYS[raw_key]

    lower = _ascii_lower(raw_key)
    if lower in _LOWER_CATEGORY_KEYS:
        return category
    return _LOWER_KEYS.get(lower)


def _to_lower_camel_ascii(raw: str) -> Optional[str]:
    if not raw.isascii():
        return None

    chars = []
    make_upper = False
    for ch in raw:
        if ch.isalnum():
            if not chars:
                ch = ch.lower()
            elif make_upper:
                make_upper = False
                ch = ch.upper()
            chars.append(ch)
        elif chars:
            make_upper = True

    if not chars:
        return None
    output = "".join(chars)
    return "_" + output if output[0].isdigit() else output