"""Kiểu dữ liệu chung cho các bộ giải tham số filter.

Mỗi engine (lý thuyết, Bloom, Cuckoo) lưu một nhóm nhỏ trường số tùy chọn:
giá trị ``None`` nghĩa là chưa biết. Module này cung cấp lớp nền với cổng
ràng buộc (đúng 2 trong 3 ràng buộc chính) và các phép tính an toàn trả
``None`` thay vì ném lỗi khi công thức không xác định.
"""
from __future__ import annotations

import math
from enum import Enum, auto
from typing import Optional

# Số thực tùy chọn; None = Unknown.
Known = Optional[float]


class Resolution(Enum):
    UNDERCONSTRAINED = auto()
    RESOLVED = auto()
    OVERCONSTRAINED = auto()


def count_constraints(error: Known, elements: Known, storage: Known) -> int:
    """Đếm số ràng buộc chính được cung cấp."""
    return sum(value is not None for value in (error, elements, storage))


def classify(error: Known, elements: Known, storage: Known) -> Resolution:
    """Phân loại bộ ràng buộc: thiếu, đủ (đúng 2) hoặc thừa."""
    supplied = count_constraints(error, elements, storage)
    if supplied == 2:
        return Resolution.RESOLVED
    if supplied > 2:
        return Resolution.OVERCONSTRAINED
    return Resolution.UNDERCONSTRAINED


def finite(value: float) -> Known:
    """Trả về value nếu hữu hạn, ngược lại None."""
    if math.isnan(value) or math.isinf(value):
        return None
    return value


# số double dương nhỏ nhất; FPR tràn dưới (vd 2^-f với f > 1074) được giữ ở đây
MIN_ERROR = 5e-324


def positive_error(error: float) -> float:
    """FPR đạt được luôn dương, kể cả khi công thức tràn dưới về 0."""
    return max(error, MIN_ERROR)

def safe_div(num: float, den: float) -> Known:
    """Phép chia trả None khi mẫu bằng 0."""
    if den == 0:
        return None
    return finite(num / den)


class FilterParams:
    """Lớp nền: lưu error/elements/storage và kiểm tra tiền điều kiện.

    Lớp con gọi ``super().__init__`` rồi chạy ``_infer()`` nếu
    ``self._resolution is Resolution.RESOLVED``. Sau khi khởi tạo, đối tượng
    chỉ đọc.
    """

    def __init__(self, error: Known, elements: Known, storage: Known) -> None:
        if error is not None and not (0 < error < 1):
            raise ValueError("error must be in (0,1)")
        if elements is not None and elements < 0:
            raise ValueError("elements must be non-negative")
        if storage is not None and storage < 0:
            raise ValueError("storage must be non-negative")

        self._error: Known = None if error is None else float(error)
        self._elements: Known = None if elements is None else float(elements)
        self._storage: Known = None if storage is None else float(storage)
        self._target_error: Known = self._error
        self._resolution = classify(error, elements, storage)

    def error(self) -> Known:
        """FPR đạt được (hoặc FPR do người dùng cung cấp nếu không bị tính lại)."""
        return self._error

    def target_error(self) -> Known:
        """FPR người dùng yêu cầu ban đầu, không bao giờ bị xóa."""
        return self._target_error

    def elements(self) -> Optional[int]:
        return as_int(self._elements)

    def storage(self) -> Optional[int]:
        return as_int(self._storage)

    def bits_per_element(self) -> Known:
        """Số bit trên mỗi phần tử (storage/elements), chỉ khi đã giải."""
        if not self.is_resolved():
            return None
        if self._storage is None or self._elements is None:
            return None
        return safe_div(self._storage, self._elements)

    def resolution(self) -> Resolution:
        return self._resolution

    def is_resolved(self) -> bool:
        return self._resolution is Resolution.RESOLVED

    def _fields(self) -> dict[str, object]:
        return {
            "error": self.error(),
            "elements": self.elements(),
            "storage": self.storage(),
        }

    def __repr__(self) -> str:
        body = ", ".join(f"{name}={value!r}" for name, value in self._fields().items())
        return f"{type(self).__name__}({body}, resolution={self._resolution.name})"


def as_int(value: Known) -> Optional[int]:
    """Cắt về int (giá trị đã được làm tròn có hướng từ trước)."""
    if value is None:
        return None
    return int(value)
