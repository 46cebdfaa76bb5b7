"""Conversion of byte strings between text encodings."""

from __future__ import annotations

import codecs
from enum import Enum

__all__ = ["Charset", "CharsetError", "convert", "to_utf8", "utf8_to"]


class CharsetError(ValueError):
    """Raised when an encoding is unknown or a conversion fails."""


class Charset(str, Enum):
    """Names of the encodings used by game resources."""

    GBK = "GBK"
    GB18030 = "GB18030"
    GB2312 = "GB2312"
    BIG5 = "Big5"
    EUCJP = "EUCJP"
    ISO2022JP = "ISO2022JP"
    SHIFT_JIS = "Shift_JIS"
    EUCKR = "EUCKR"
    UTF_8 = "UTF-8"
    UTF_16 = "UTF-16"
    UTF_16BE = "UTF-16BE"
    UTF_16LE = "UTF-16LE"
    UNICODE = "UTF-16LE"
    MACINTOSH = "macintosh"


_ALIASES = {
    "hzgb2312": "HZ-GB-2312",
    "gb2312": "HZ-GB-2312",
}

_CODECS = {
    "gbk": "gbk",
    "gb18030": "gb18030",
    "hz-gb-2312": "hz",
    "big5": "big5",
    "eucjp": "euc_jp",
    "iso2022jp": "iso2022_jp",
    "shift_jis": "shift_jis",
    "euckr": "euc_kr",
    "utf-8": "utf-8",
    "utf-16": "utf-16",
    "utf-16be": "utf-16-be",
    "utf-16le": "utf-16-le",
    "macintosh": "mac_roman",
}


def _name(charset: Charset | str) -> str:
    return charset.value if isinstance(charset, Charset) else str(charset)


def _codec(charset: Charset | str) -> str | None:
    name = _name(charset)
    name = _ALIASES.get(name.lower(), name)
    key = name.lower()
    if key in _CODECS:
        return _CODECS[key]
    try:
        return codecs.lookup(name).name
    except LookupError:
        return None


def convert(dst_charset: Charset | str, src_charset: Charset | str, src: bytes) -> bytes:
    """Re-encode ``src`` from ``src_charset`` into ``dst_charset``."""
    src = bytes(src)
    if _name(dst_charset) == _name(src_charset):
        return src
    if _name(src_charset) != "UTF-8":
        codec = _codec(src_charset)
        if codec is None:
            raise CharsetError(f"unsupported source charset: {_name(src_charset)}")
        try:
            text = src.decode(codec)
        except UnicodeError as exc:
            raise CharsetError(f"{_name(src_charset)} to utf8 failed. {exc}") from exc
    else:
        try:
            text = src.decode("utf-8")
        except UnicodeError as exc:
            raise CharsetError(f"invalid utf8 input. {exc}") from exc
    if _name(dst_charset) == "UTF-8":
        return text.encode("utf-8")
    codec = _codec(dst_charset)
    if codec is None:
        raise CharsetError(f"unsupported destination charset: {_name(dst_charset)}")
    try:
        return text.encode(codec)
    except UnicodeError as exc:
        raise CharsetError(f"utf8 to {_name(dst_charset)} failed. {exc}") from exc


def to_utf8(src_charset: Charset | str, src: bytes) -> str:
    """Decode ``src`` from ``src_charset`` into text."""
    return convert(Charset.UTF_8, src_charset, src).decode("utf-8")


def utf8_to(dst_charset: Charset | str, src: bytes | str) -> bytes:
    """Encode UTF-8 ``src`` into ``dst_charset``."""
    if isinstance(src, str):
        src = src.encode("utf-8")
    return convert(dst_charset, Charset.UTF_8, src)