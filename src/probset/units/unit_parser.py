"""Phân tích chuỗi nhập có hậu tố đơn vị thành ràng buộc số.

Ô trống trả về None (không ràng buộc); chuỗi sai định dạng, FPR ngoài (0,1)
hoặc tràn số 64-bit ném ``UnitParseError`` để giao diện phân biệt được ô
bỏ trống và ô nhập sai.
"""
from __future__ import annotations

import re
from typing import Optional

U64_MAX = 2**64 - 1

_ERROR_RE = re.compile(r" *([\d.]+) *(%)? *")
_ELEMENTS_RE = re.compile(r" *(\d+) *([KMGT])? *")
_STORAGE_RE = re.compile(r" *(\d+) *(KiB|MiB|GiB|TiB|KB|MB|GB|TB|Kb|Mb|Gb|Tb|K|M|G|T)? *")

SI = {"K": 1_000, "M": 1_000_000, "G": 1_000_000_000, "T": 1_000_000_000_000}

STORAGE_UNITS = {
    # SI bit
    "K": SI["K"], "Kb": SI["K"],
    "M": SI["M"], "Mb": SI["M"],
    "G": SI["G"], "Gb": SI["G"],
    "T": SI["T"], "Tb": SI["T"],
    # SI byte
    "KB": 8 * SI["K"],
    "MB": 8 * SI["M"],
    "GB": 8 * SI["G"],
    "TB": 8 * SI["T"],
    # bội số 2^10 byte
    "KiB": 8 * 1024,
    "MiB": 8 * 1024**2,
    "GiB": 8 * 1024**3,
    "TiB": 8 * 1024**4,
}


class UnitParseError(ValueError):
    """Chuỗi nhập không hợp lệ (khác với ô bỏ trống)."""


def is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


def parse_error(text: Optional[str]) -> Optional[float]:
    """Đọc FPR dạng ``0.01`` hoặc ``1%``; phải nằm trong khoảng mở (0,1)."""
    if is_blank(text):
        return None
    match = _ERROR_RE.fullmatch(text)
    if match is None:
        raise UnitParseError(f"invalid false positive rate: {text!r}")
    try:
        value = float(match.group(1))
    except ValueError as exc:
        raise UnitParseError(f"invalid false positive rate: {text!r}") from exc
    if match.group(2):
        value /= 100.0
    if value <= 0 or value >= 1:
        raise UnitParseError(f"false positive rate must be in (0,1): {text!r}")
    return value


def parse_elements(text: Optional[str]) -> Optional[int]:
    """Đọc số phần tử với hậu tố SI tùy chọn: K, M, G, T."""
    if is_blank(text):
        return None
    match = _ELEMENTS_RE.fullmatch(text)
    if match is None:
        raise UnitParseError(f"invalid element count: {text!r}")
    multiplier = SI[match.group(2)] if match.group(2) else 1
    return _checked_mul(_to_int(match.group(1), text), multiplier, text)


def parse_storage(text: Optional[str]) -> Optional[int]:
    """Đọc dung lượng (bit). Hỗ trợ K/Kb (bit), KB (byte SI), KiB (byte 2^10)..."""
    if is_blank(text):
        return None
    match = _STORAGE_RE.fullmatch(text)
    if match is None:
        raise UnitParseError(f"invalid storage size: {text!r}")
    multiplier = STORAGE_UNITS[match.group(2)] if match.group(2) else 1
    return _checked_mul(_to_int(match.group(1), text), multiplier, text)


def _to_int(digits: str, text: str) -> int:
    """Đổi chuỗi chữ số sang int; quá 20 chữ số có nghĩa là chắc chắn tràn u64."""
    significant = digits.lstrip("0")
    if len(significant) > len(str(U64_MAX)):
        raise UnitParseError(f"value out of range: {text!r}")
    return int(significant or "0")


def _checked_mul(value: int, multiplier: int, text: str) -> int:
    """Nhân có kiểm tra tràn trong miền u64."""
    result = value * multiplier
    if value > U64_MAX or result > U64_MAX:
        raise UnitParseError(f"value out of range: {text!r}")
    return result
