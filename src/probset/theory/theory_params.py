"""Cận dưới lý thuyết thông tin giữa FPR, số phần tử và dung lượng."""
from __future__ import annotations

import math
from typing import Optional

from probset.types.param_types import FilterParams, Known, positive_error, safe_div

RESOLVE_PASSES = 2


class TheoryParams(FilterParams):
    """Mốc so sánh liên tục (không làm tròn): bits = log2(1/error)."""

    def __init__(
        self,
        error: Optional[float] = None,
        elements: Optional[float] = None,
        storage: Optional[float] = None,
    ) -> None:
        super().__init__(error, elements, storage)
        self._bits: Known = None
        if self.is_resolved():
            self._infer()

    def elements(self) -> Known:
        return self._elements

    def storage(self) -> Known:
        return self._storage

    def bits_per_element(self) -> Known:
        return self._bits

    def _infer(self) -> None:
        for _ in range(RESOLVE_PASSES):
            if self._bits is None and self._error is not None:
                self._bits = math.log2(1.0 / self._error)

            if self._bits is None and self._storage is not None and self._elements is not None:
                self._bits = safe_div(self._storage, self._elements)

            if self._bits is None:
                continue

            if self._storage is None and self._elements is not None:
                self._storage = self._bits * self._elements
            if self._elements is None and self._storage is not None:
                self._elements = safe_div(self._storage, self._bits)
            if self._error is None:
                self._error = positive_error(2.0 ** -self._bits)

    def _fields(self) -> dict[str, object]:
        fields = super()._fields()
        fields["bits_per_element"] = self._bits
        return fields
