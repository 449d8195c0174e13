"""Planner điều phối 3 engine (lý thuyết, Bloom, Cuckoo) với cùng một đầu vào."""
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Callable, Optional

from tabulate import tabulate

from probset.bloom.bloom_params import BloomParams
from probset.cuckoo.cuckoo_params import DEFAULT_HASHES, DEFAULT_SLOTS, DEFAULT_UTIL, CuckooParams
from probset.metrics.metrics import PlannerMetrics
from probset.theory.theory_params import TheoryParams
from probset.types.param_types import count_constraints
from probset.units.unit_parser import UnitParseError, is_blank, parse_elements, parse_error, parse_storage


class FieldStatus(Enum):
    BLANK = auto()
    OK = auto()
    INVALID = auto()


@dataclass(frozen=True)
class PlanReport:
    theory: TheoryParams
    bloom: BloomParams
    cuckoo: CuckooParams
    error: Optional[float] = None
    elements: Optional[int] = None
    storage: Optional[int] = None
    statuses: dict[str, FieldStatus] = field(default_factory=dict)

    def constraints(self) -> int:
        """Số ràng buộc hợp lệ đã nhập (bỏ qua ô lỗi)."""
        return count_constraints(self.error, self.elements, self.storage)

    def too_many(self) -> bool:
        return self.constraints() > 2

    def has_parse_error(self) -> bool:
        return any(status is FieldStatus.INVALID for status in self.statuses.values())

    def invalid_fields(self) -> list[str]:
        return [name for name, status in self.statuses.items() if status is FieldStatus.INVALID]


class FilterPlanner:
    def __init__(
        self,
        hashes: int = DEFAULT_HASHES,
        slots: int = DEFAULT_SLOTS,
        util: float = DEFAULT_UTIL,
        compress: bool = False,
        bloom_hashes: Optional[int] = None,
        metrics: Optional[PlannerMetrics] = None,
        verbose: bool = False,
    ) -> None:
        """Khởi tạo planner với siêu tham số Cuckoo và (tùy chọn) k Bloom cố định."""
        self.hashes = hashes
        self.slots = slots
        self.util = util
        self.compress = compress
        self.bloom_hashes = bloom_hashes
        self.metrics = metrics or PlannerMetrics()
        self.verbose = verbose
        self.events: list[str] = []

    def plan(
        self,
        error_text: Optional[str],
        elements_text: Optional[str],
        storage_text: Optional[str],
    ) -> PlanReport:
        """Phân tích 3 ô nhập rồi giải cả 3 engine.

        Nếu có ô sai định dạng, mọi engine nhận đầu vào rỗng (không suy luận
        từ một form lỗi một phần).
        """
        statuses: dict[str, FieldStatus] = {}
        error = self._parse_field("error", error_text, parse_error, statuses)
        elements = self._parse_field("elements", elements_text, parse_elements, statuses)
        storage = self._parse_field("storage", storage_text, parse_storage, statuses)

        if any(status is FieldStatus.INVALID for status in statuses.values()):
            self.metrics.record_parse_failure()
            report = self._solve(None, None, None, statuses)
            # giữ lại giá trị hợp lệ để giao diện tô màu ô thừa ràng buộc
            return replace(report, error=error, elements=elements, storage=storage)
        return self._solve(error, elements, storage, statuses)

    def plan_values(
        self,
        error: Optional[float] = None,
        elements: Optional[int] = None,
        storage: Optional[int] = None,
    ) -> PlanReport:
        """Giải trực tiếp từ giá trị đã phân tích."""
        statuses = {
            name: FieldStatus.BLANK if value is None else FieldStatus.OK
            for name, value in (("error", error), ("elements", elements), ("storage", storage))
        }
        return self._solve(error, elements, storage, statuses)

    # Hàm nội bộ
    def _solve(
        self,
        error: Optional[float],
        elements: Optional[int],
        storage: Optional[int],
        statuses: dict[str, FieldStatus],
    ) -> PlanReport:
        theory = TheoryParams(error, elements, storage)
        bloom = BloomParams(error, elements, storage, hashes=self.bloom_hashes)
        cuckoo = CuckooParams(
            error,
            elements,
            storage,
            hashes=self.hashes,
            slots=self.slots,
            util=self.util,
            compress=self.compress,
        )
        self.metrics.record_plan(theory.resolution())

        report = PlanReport(
            theory=theory,
            bloom=bloom,
            cuckoo=cuckoo,
            error=error,
            elements=elements,
            storage=storage,
            statuses=statuses,
        )
        if report.too_many():
            self._log(
                f"[Planner] Quá nhiều ràng buộc ({report.constraints()} > 2): "
                f"error={error} elements={elements} storage={storage}, không suy luận."
            )
        elif theory.is_resolved():
            self._log(
                f"[Planner] Đã giải: bloom_m={bloom.storage()} bloom_k={bloom.hashes()} "
                f"cuckoo_fp={cuckoo.fingerprint()} cuckoo_buckets={cuckoo.buckets()}"
            )
        return report

    def _parse_field(
        self,
        name: str,
        text: Optional[str],
        parser: Callable[[Optional[str]], object],
        statuses: dict[str, FieldStatus],
    ) -> Optional[float]:
        if is_blank(text):
            statuses[name] = FieldStatus.BLANK
            return None
        try:
            value = parser(text)
        except UnitParseError as exc:
            statuses[name] = FieldStatus.INVALID
            self._log(f"[Planner] Ô '{name}' không hợp lệ: {exc}")
            return None
        statuses[name] = FieldStatus.OK
        return value

    def _log(self, message: str) -> None:
        self.events.append(message)
        if self.verbose:
            print(message)


def format_error(error: Optional[float]) -> str:
    """Hiển thị FPR kèm dạng '1 in N'; ô chưa biết để trống."""
    if error is None:
        return ""
    if error <= 0:
        return f"{error}"
    inverse = 1.0 / error
    if math.isinf(inverse):
        return f"{error} (1 in {inverse})"
    return f"{error} (1 in {round(inverse)})"


def _blank(value, fmt: str = "{}") -> str:
    return "" if value is None else fmt.format(value)


def render_report(report: PlanReport, tablefmt: str = "github") -> str:
    """Dựng bảng kết quả cho cả 3 filter; trường Unknown hiển thị trống."""
    sections: list[str] = []

    if report.too_many():
        sections.append("Cảnh báo: nhập nhiều hơn 2 ràng buộc, hệ bị thừa ràng buộc.")
    for name in report.invalid_fields():
        sections.append(f"Lỗi: ô '{name}' không hợp lệ.")

    cuckoo = report.cuckoo
    cuckoo_rows = [
        ["Fingerprint size", _blank(cuckoo.fingerprint(), "{} bits")],
        ["Number of buckets", _blank(cuckoo.buckets())],
        ["Number of items in filter", _blank(cuckoo.elements())],
        ["Size of filter", _blank(cuckoo.storage(), "{} bits")],
        ["False positive rate", format_error(cuckoo.error())],
        ["Bits per item", _blank(cuckoo.bits_per_element(), "{:.4f} bits/item")],
    ]
    sections.append(_section(
        f"Cuckoo Filter (hashes={cuckoo.hashes()}, slots={cuckoo.slots()}, util={cuckoo.util()})",
        cuckoo_rows,
        tablefmt,
    ))

    bloom = report.bloom
    bloom_rows = [
        ["Hash functions", _blank(bloom.hashes())],
        ["Number of items in filter", _blank(bloom.elements())],
        ["Size of filter", _blank(bloom.storage(), "{} bits")],
        ["False positive rate", format_error(bloom.error())],
        ["Bits per item", _blank(bloom.bits_per_element(), "{:.4f} bits/item")],
    ]
    sections.append(_section("Bloom Filter", bloom_rows, tablefmt))

    theory = report.theory
    theory_rows = [
        ["Number of items", _blank(theory.elements(), "{:.2f}")],
        ["Size", _blank(theory.storage(), "{:.2f} bits")],
        ["False positive rate", format_error(theory.error())],
        ["Bits per item", _blank(theory.bits_per_element(), "{:.4f} bits/item")],
    ]
    sections.append(_section("Lower bound (theory)", theory_rows, tablefmt))
    return "\n\n".join(sections)


def _section(title: str, rows: list[list[str]], tablefmt: str) -> str:
    return f"== {title} ==\n" + tabulate(rows, headers=["Parameter", "Value"], tablefmt=tablefmt)
