"""Tiện ích tham số Bloom filter: suy ra m, n, FPR và k tối ưu."""
from __future__ import annotations

import math
from typing import Optional

from probset.types.param_types import FilterParams, Known, as_int, finite, positive_error, safe_div

RESOLVE_PASSES = 4
LN2 = math.log(2)
LN2_SQ = LN2 * LN2


class BloomParams(FilterParams):
    """Tham số Bloom filter cổ điển.

    Cho 2 trong 3 ràng buộc (error, elements, storage), suy ra giá trị còn lại,
    số hàm băm k tối ưu và FPR thực sự đạt được. ``hashes`` cho phép ép k cố
    định thay vì suy ra.
    """

    def __init__(
        self,
        error: Optional[float] = None,
        elements: Optional[int] = None,
        storage: Optional[int] = None,
        hashes: Optional[int] = None,
    ) -> None:
        if hashes is not None and hashes <= 0:
            raise ValueError("hashes must be positive")
        super().__init__(error, elements, storage)
        self._hashes: Known = None if hashes is None else float(hashes)
        if self.is_resolved():
            self._infer()

    def hashes(self) -> Optional[int]:
        return as_int(self._hashes)

    def _complete(self) -> bool:
        return None not in (self._error, self._elements, self._storage, self._hashes)

    def _infer(self) -> None:
        for _ in range(RESOLVE_PASSES):
            if self._complete():
                break

            # n = floor(-m (ln2)^2 / ln p): không hứa sức chứa vượt quá FPR yêu cầu
            if self._storage is not None and self._error is not None and self._elements is None:
                n = safe_div(-self._storage * LN2_SQ, math.log(self._error))
                if n is not None:
                    self._elements = float(math.floor(n))

            # m = ceil(-n ln p / (ln2)^2): không cấp thiếu bit
            if self._elements is not None and self._error is not None and self._storage is None:
                m = finite(-self._elements * math.log(self._error) / LN2_SQ)
                if m is not None:
                    self._storage = float(math.ceil(m))

            if self._storage is None or self._elements is None:
                continue

            if self._hashes is None:
                k = safe_div(self._storage, self._elements)
                if k is not None:
                    self._hashes = float(math.floor(k * LN2 + 0.5))
                    # k mới thay đổi FPR đạt được
                    self._error = None

            if self._error is None:
                ratio = safe_div(self._storage * LN2_SQ, self._elements)
                if ratio is not None:
                    self._error = positive_error(math.exp(-ratio))

    def _fields(self) -> dict[str, object]:
        fields = super()._fields()
        fields["hashes"] = self.hashes()
        return fields
