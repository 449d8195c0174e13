"""CLI demo: chọn tham số Bloom / Cuckoo và so với cận dưới lý thuyết.

- Nhập 2 trong 3 ràng buộc: FPR, số phần tử, dung lượng (hỗ trợ đơn vị K, KiB, KB...).
- Engine suy ra giá trị còn lại cùng k (Bloom), fingerprint và số bucket (Cuckoo).
- Menu console cho phép đổi siêu tham số Cuckoo và xem thống kê planner.
"""

from __future__ import annotations

from typing import Optional

from probset.cuckoo.cuckoo_params import DEFAULT_HASHES, DEFAULT_SLOTS, DEFAULT_UTIL
from probset.manager.planner import FilterPlanner, PlanReport, render_report

# Giá trị mặc định của form: 1% FPR, 1G phần tử
DEFAULT_ERROR_TEXT = "0.01"
DEFAULT_ELEMENTS_TEXT = "1G"
DEFAULT_STORAGE_TEXT = ""


def run_once(
    planner: FilterPlanner,
    error_text: Optional[str],
    elements_text: Optional[str],
    storage_text: Optional[str],
) -> PlanReport:
    """Giải một bộ ràng buộc và in bảng kết quả."""
    report = planner.plan(error_text, elements_text, storage_text)
    print()
    print(render_report(report))
    return report


def prompt_constraints() -> tuple[str, str, str]:
    print("\nNhập ràng buộc (bỏ trống = không ràng buộc, Enter giữ mặc định):")
    error_text = input(f"  False positive rate (vd 0.01 hoặc 1%) [{DEFAULT_ERROR_TEXT}]: ")
    elements_text = input(f"  Số phần tử (K, M, G, T) [{DEFAULT_ELEMENTS_TEXT}]: ")
    storage_text = input("  Dung lượng (vd 100MiB, 8Gb, 1KB) []: ")
    if not error_text and not elements_text and not storage_text:
        return DEFAULT_ERROR_TEXT, DEFAULT_ELEMENTS_TEXT, DEFAULT_STORAGE_TEXT
    return error_text, elements_text, storage_text


def prompt_hyperparameters(planner: FilterPlanner) -> FilterPlanner:
    """Hỏi siêu tham số Cuckoo mới; giữ nguyên nếu nhập sai."""
    print("\nSiêu tham số Cuckoo hiện tại: "
          f"hashes={planner.hashes} slots={planner.slots} util={planner.util} compress={planner.compress}")
    try:
        hashes = int(input(f"  hashes [{planner.hashes}]: ").strip() or planner.hashes)
        slots = int(input(f"  slots [{planner.slots}]: ").strip() or planner.slots)
        util = float(input(f"  util (0,1] [{planner.util}]: ").strip() or planner.util)
        compress = input("  partial-sort compression? [y/N]: ").strip().lower() == "y"
        if hashes <= 0 or slots <= 0 or not (0 < util <= 1):
            raise ValueError("hashes/slots phải dương và util trong (0,1]")
    except ValueError as exc:
        print(f"Giá trị không hợp lệ ({exc}), giữ nguyên cấu hình cũ.")
        return planner

    return FilterPlanner(
        hashes=hashes,
        slots=slots,
        util=util,
        compress=compress,
        bloom_hashes=planner.bloom_hashes,
        metrics=planner.metrics,
        verbose=planner.verbose,
    )


def print_metrics(planner: FilterPlanner) -> None:
    m = planner.metrics
    print("\n=== Thống kê planner ===")
    print(f"Tổng số lần giải: {m.plans}")
    print(f" ├─ Đủ ràng buộc (đã giải): {m.resolved}")
    print(f" ├─ Thiếu ràng buộc: {m.underconstrained}")
    print(f" └─ Thừa ràng buộc: {m.overconstrained}")
    print(f"Ô nhập lỗi: {m.parse_failures}")
    if m.plans > 0:
        print(f"- Tỉ lệ giải được ≈ {m.resolved}/{m.plans} ≈ {m.resolved_ratio():.2%}")


def main() -> None:
    print("=== Demo chọn tham số Bloom / Cuckoo filter ===")
    planner = FilterPlanner(hashes=DEFAULT_HASHES, slots=DEFAULT_SLOTS, util=DEFAULT_UTIL, verbose=True)

    while True:
        print("\nMenu:")
        print(" 1. Nhập ràng buộc và tính tham số")
        print(" 2. Đổi siêu tham số Cuckoo")
        print(" 3. Xem thống kê")
        print(" 4. Thoát")
        choice = input("Chọn [1/2/3/4]: ").strip()

        if choice == "1" or choice == "":
            run_once(planner, *prompt_constraints())
        elif choice == "2":
            planner = prompt_hyperparameters(planner)
        elif choice == "3":
            print_metrics(planner)
        elif choice == "4":
            print("Thoát.")
            break
        else:
            print("Lựa chọn không hợp lệ.")


if __name__ == "__main__":
    main()
