"""Attaching order ids, extra fields and source labels to transactions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Iterable, Optional, Tuple, Union

from .ledger import Transaction
from .metadata_keys import normalize_metadata_key

_SOURCE_LABELS = {
    "wechat": "微信",
    "weixin": "微信",
    "alipay": "支付宝",
    "icbc": "工商银行",
    "ccb": "建设银行",
    "jd": "京东",
    "jingdong": "京东",
    "mt": "美团",
    "meituan": "美团",
    "yinhe": "银河证券",
    "galaxy": "银河证券",
    "futu": "富途",
}


def _map_provider_source(raw: str) -> Optional[str]:
    lowered = "".join(ch.lower() if ch.isascii() else ch for ch in raw.strip())
    return _SOURCE_LABELS.get(lowered)


def resolve_provider_source(provider_name: str, display_name: Optional[str]) -> str:
    """Resolve the `source` label, preferring the configured display name."""
    hinted = display_name.strip() if display_name is not None else ""
    if not hinted:
        hinted = provider_name
    return (
        _map_provider_source(hinted)
        or _map_provider_source(provider_name)
        or hinted
    )


def append_order_id(
    tx: Transaction, provider_name: str, order_id: Optional[str]
) -> Transaction:
    """Add the order id under its normalised key when one is given."""
    if order_id is not None:
        tx.with_meta(normalize_metadata_key(provider_name, "orderId"), order_id)
    return tx


def append_extra_metadata(
    tx: Transaction,
    provider_name: str,
    extra_fields: Union[Mapping, Iterable[Tuple[str, str]]],
) -> Transaction:
    """Add each extra field as string metadata under a normalised key."""
    items = extra_fields.items() if isinstance(extra_fields, Mapping) else extra_fields
    for key, value in items:
        tx.with_meta(normalize_metadata_key(provider_name, key), value)
    return tx