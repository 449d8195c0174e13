"""Tham số Cuckoo filter: kích thước fingerprint, số bucket, FPR đạt được."""
from __future__ import annotations

import math
from typing import Optional

from probset.types.param_types import FilterParams, Known, as_int, positive_error, safe_div

RESOLVE_PASSES = 8

DEFAULT_HASHES = 2  # số bucket ứng viên cho mỗi phần tử
DEFAULT_SLOTS = 4  # paper (Fan et al., 2014) chọn 4 slot/bucket cho load ~95%
DEFAULT_UTIL = 0.95


def sort_saving(slots: int) -> float:
    """Số bit tiết kiệm trung bình mỗi ô khi giữ bucket đã sắp xếp (partial-sort)."""
    return sum(math.log2(i) for i in range(1, slots + 1)) / slots


class CuckooParams(FilterParams):
    """Tham số Cuckoo filter.

    Siêu tham số cố định khi khởi tạo:

    - hashes: số bucket ứng viên cho mỗi phần tử (thường 2)
    - slots: số slot mỗi bucket (vd 4)
    - util: hệ số tải mục tiêu, util thuộc (0, 1]
    - compress: bật partial-sort; khi đó ``save()`` trả về số bit tiết kiệm
      mỗi ô (chưa được dùng trong công thức kích thước nào)

    Quy tắc làm tròn: floor cho đại lượng kiểu sức chứa (elements, buckets
    từ storage), ceil cho đại lượng kiểu yêu cầu (fingerprint từ error,
    buckets từ elements).
    """

    def __init__(
        self,
        error: Optional[float] = None,
        elements: Optional[int] = None,
        storage: Optional[int] = None,
        hashes: int = DEFAULT_HASHES,
        slots: int = DEFAULT_SLOTS,
        util: float = DEFAULT_UTIL,
        compress: bool = False,
    ) -> None:
        if hashes <= 0:
            raise ValueError("hashes must be positive")
        if slots <= 0:
            raise ValueError("slots must be positive")
        if not (0 < util <= 1):
            raise ValueError("util must be in (0,1]")
        super().__init__(error, elements, storage)

        self._hashes = float(hashes)
        self._slots = float(slots)
        self._util = float(util)
        self._compress = compress
        self._save: Known = sort_saving(int(slots)) if compress else None

        self._fingerprint: Known = None
        self._buckets: Known = None
        if self.is_resolved():
            self._infer()

    def fingerprint(self) -> Optional[int]:
        """Kích thước fingerprint (bit)."""
        return as_int(self._fingerprint)

    def buckets(self) -> Optional[int]:
        return as_int(self._buckets)

    def hashes(self) -> int:
        return int(self._hashes)

    def slots(self) -> int:
        return int(self._slots)

    def util(self) -> float:
        return self._util

    def compress(self) -> bool:
        return self._compress

    def save(self) -> Known:
        return self._save

    def _incomplete(self) -> bool:
        return None in (self._buckets, self._error, self._fingerprint, self._storage, self._elements)

    def _infer(self) -> None:
        for _ in range(RESOLVE_PASSES):
            if not self._incomplete():
                break

            # fingerprint từ storage, elements, util
            if self._fingerprint is None and self._storage is not None and self._elements is not None:
                fp = safe_div(self._storage * self._util, self._elements)
                if fp is not None:
                    self._fingerprint = float(math.floor(fp))

            # fingerprint từ error, util, slots, hashes
            if self._fingerprint is None and self._error is not None:
                fp = math.ceil(math.log2(self._util * self._slots * self._hashes / self._error))
                self._fingerprint = float(max(1, fp))
                # fingerprint nguyên làm FPR thay đổi (có thể giảm)
                self._error = None

            if self._fingerprint is not None:
                self._infer_from_fingerprint(self._fingerprint)

            # elements từ buckets, util
            if self._elements is None and self._buckets is not None:
                cells = self._buckets * self._slots
                self._elements = float(math.floor(cells * self._util))

    def _infer_from_fingerprint(self, fingerprint: float) -> None:
        """Suy ra error, buckets, storage khi đã biết fingerprint."""
        if self._error is None:
            # 1 - (1 - 2^-f)^(s*h*u), viết bằng log1p/expm1 để không tròn về 0 khi f lớn
            probes = self._slots * self._hashes * self._util
            error = -math.expm1(probes * math.log1p(-(2.0 ** -fingerprint)))
            self._error = positive_error(error)

        if self._buckets is None and self._elements is not None:
            cells = math.ceil(self._elements / self._util)
            self._buckets = float(math.ceil(cells / self._slots))

        if self._buckets is None and self._storage is not None:
            cells = safe_div(self._storage, fingerprint)
            if cells is not None:
                self._buckets = float(math.floor(math.floor(cells) / self._slots))

        if self._storage is None and self._buckets is not None:
            self._storage = self._buckets * self._slots * fingerprint

    def _fields(self) -> dict[str, object]:
        fields = super()._fields()
        fields.update(
            fingerprint=self.fingerprint(),
            buckets=self.buckets(),
            hashes=self.hashes(),
            slots=self.slots(),
            util=self._util,
        )
        return fields
