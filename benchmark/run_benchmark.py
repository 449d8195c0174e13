# benchmark/run_benchmark.py
"""
So sánh bits/phần tử giữa cận dưới lý thuyết, Bloom và Cuckoo filter.

- Quét FPR theo thang log (numpy.logspace) với số phần tử cố định
- Mỗi FPR: giải TheoryParams, BloomParams, CuckooParams (nhiều cấu hình slots/util)
- Gom kết quả vào pandas DataFrame, in bảng (tabulate), vẽ biểu đồ (matplotlib)
- Tính overhead so với cận dưới: bits_filter / bits_theory
"""

import os
from typing import Iterable, List, Tuple

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from probset.bloom.bloom_params import BloomParams
from probset.cuckoo.cuckoo_params import CuckooParams
from probset.theory.theory_params import TheoryParams

# (hashes, slots, util)
CUCKOO_CONFIGS: List[Tuple[int, int, float]] = [
    (2, 2, 0.84),
    (2, 4, 0.95),
    (2, 8, 0.98),
]


def cuckoo_label(hashes: int, slots: int, util: float) -> str:
    return f"Cuckoo h={hashes} b={slots} u={util:.2f}"


def build_comparison(
    elements: int,
    error_rates: Iterable[float],
    cuckoo_configs: Iterable[Tuple[int, int, float]] = CUCKOO_CONFIGS,
) -> pd.DataFrame:
    """Tính bits/phần tử cho từng filter trên mỗi FPR, trả về DataFrame."""
    configs = list(cuckoo_configs)
    rows = []
    for error in error_rates:
        error = float(error)
        theory = TheoryParams(error=error, elements=elements)
        bloom = BloomParams(error=error, elements=elements)

        row = {
            "error": error,
            "Theory": theory.bits_per_element(),
            "Bloom": bloom.bits_per_element(),
            "Bloom k": bloom.hashes(),
            "Bloom achieved error": bloom.error(),
        }
        for hashes, slots, util in configs:
            cuckoo = CuckooParams(error=error, elements=elements, hashes=hashes, slots=slots, util=util)
            label = cuckoo_label(hashes, slots, util)
            row[label] = cuckoo.bits_per_element()
            row[f"{label} fp"] = cuckoo.fingerprint()
        rows.append(row)

    df = pd.DataFrame(rows)
    df["Bloom overhead"] = df["Bloom"] / df["Theory"]
    for hashes, slots, util in configs:
        label = cuckoo_label(hashes, slots, util)
        df[f"{label} overhead"] = df[label] / df["Theory"]
    return df


def print_results(df: pd.DataFrame, cuckoo_configs: Iterable[Tuple[int, int, float]] = CUCKOO_CONFIGS) -> None:
    """In bảng kết quả đẹp"""
    from tabulate import tabulate

    labels = [cuckoo_label(*config) for config in cuckoo_configs]
    table = []
    for _, r in df.iterrows():
        line = [
            f"{r['error']:.2e}",
            f"{r['Theory']:.3f}",
            f"{r['Bloom']:.3f} (k={int(r['Bloom k'])})",
        ]
        line.extend(f"{r[label]:.3f} (fp={int(r[label + ' fp'])})" for label in labels)
        table.append(line)

    print("\n=== BITS / PHẦN TỬ THEO FPR ===")
    print(tabulate(table, headers=["FPR", "Theory", "Bloom"] + labels, tablefmt="github"))


def plot_results(df: pd.DataFrame, cuckoo_configs: Iterable[Tuple[int, int, float]] = CUCKOO_CONFIGS) -> str:
    """Vẽ bits/phần tử và overhead so với cận dưới."""
    labels = [cuckoo_label(*config) for config in cuckoo_configs]
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(16, 6))

    ax1.plot(df["error"], df["Theory"], label="Theory", color="black", linestyle="--")
    ax1.plot(df["error"], df["Bloom"], label="Bloom", color="orange")
    for label in labels:
        ax1.step(df["error"], df[label], label=label, where="mid")
    ax1.set_xscale("log")
    ax1.invert_xaxis()
    ax1.set_xlabel("False Positive Rate")
    ax1.set_ylabel("Bits per element")
    ax1.set_title("Bits per element")
    ax1.legend()

    ax2.plot(df["error"], df["Bloom overhead"], label="Bloom", color="orange")
    for label in labels:
        ax2.step(df["error"], df[f"{label} overhead"], label=label, where="mid")
    ax2.axhline(1.0, color="black", linestyle="--")
    ax2.set_xscale("log")
    ax2.invert_xaxis()
    ax2.set_xlabel("False Positive Rate")
    ax2.set_ylabel("Overhead vs lower bound (x)")
    ax2.set_title("Overhead")
    ax2.legend()

    plt.suptitle("Bloom vs Cuckoo vs cận dưới lý thuyết")
    plt.tight_layout()

    os.makedirs("plots", exist_ok=True)
    plot_path = "plots/bits_per_element_comparison.png"
    plt.savefig(plot_path, dpi=200)
    plt.close(fig)
    print(f"\nBiểu đồ đã lưu tại: {plot_path}")
    return plot_path


if __name__ == "__main__":
    error_rates = np.logspace(-1, -9, num=33)
    print(f"[Benchmark] Quét {len(error_rates)} giá trị FPR với elements=1G...")
    df = build_comparison(elements=1_000_000_000, error_rates=error_rates)
    print_results(df)
    plot_results(df)
