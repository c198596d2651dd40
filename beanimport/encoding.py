"""Decoding of statement files in UTF-8 and common Chinese encodings."""

from __future__ import annotations

import codecs
import logging
import os
from typing import Union

logger = logging.getLogger(__name__)

_AUTO_CANDIDATES = (("GBK", "gbk"), ("GB18030", "gb18030"), ("BIG5", "big5"))

_NAMED_CODECS = {
    "GBK": "gb18030",
    "GB2312": "gb18030",
    "GB18030": "gb18030",
    "BIG5": "big5",
    "SHIFT_JIS": "shift_jis",
    "SHIFT-JIS": "shift_jis",
    "SJIS": "shift_jis",
}

_BOMS = (
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


def decode_file(path: Union[str, os.PathLike], encoding_name: str) -> str:
    """Read a file and decode it with the named encoding (or `AUTO`)."""
    with open(path, "rb") as handle:
        data = handle.read()
    return decode_bytes(data, encoding_name)


def decode_bytes(data: bytes, encoding_name: str) -> str:
    """Decode bytes with the named encoding; `AUTO` and `UTF-8` fall back to detection."""
    name = encoding_name.upper()
    logger.debug("Decoding file with encoding: %s", name)
    if name in ("AUTO", "UTF-8", "UTF8"):
        return _decode_utf8_or_detect(data)
    return _decode_with_encoding(data, name)


def _decode_utf8_or_detect(data: bytes) -> str:
    try:
        content = data.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning("UTF-8 decoding failed, detecting encoding")
        return _detect(data)
    logger.info("Detected encoding: UTF-8")
    return content.removeprefix("\ufeff")


def _decode_with_encoding(data: bytes, name: str) -> str:
    codec = _NAMED_CODECS.get(name)
    if codec is None:
        try:
            codec = codecs.lookup(name).name
        except LookupError:
            codec = "gb18030"
    logger.info("Using encoding: %s", codec)
    for bom, bom_codec in _BOMS:
        if data.startswith(bom):
            return data[len(bom):].decode(bom_codec, errors="replace")
    return data.decode(codec, errors="replace")


def _detect(data: bytes) -> str:
    for label, codec in _AUTO_CANDIDATES:
        try:
            content = data.decode(codec)
        except UnicodeDecodeError:
            logger.debug("%s decoding had errors, trying next", label)
            continue
        logger.info("Detected encoding: %s", label)
        return content
    logger.warning("Could not determine encoding, forcing GBK")
    return data.decode("gbk", errors="replace")