# -*- coding: utf-8 -*-
"""
Test cho bảng so sánh bits/phần tử của benchmark.
"""

import os
import sys

import numpy as np

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.append(os.path.join(ROOT, 'src'))
sys.path.append(os.path.join(ROOT, 'benchmark'))
from run_benchmark import CUCKOO_CONFIGS, build_comparison, cuckoo_label


def test_filters_never_beat_lower_bound():
    """Bloom và Cuckoo luôn tốn ít nhất bằng cận dưới lý thuyết."""
    df = build_comparison(elements=1_000_000, error_rates=np.logspace(-1, -6, num=11))

    assert len(df) == 11
    assert (df["Bloom overhead"] >= 1.0).all()
    for config in CUCKOO_CONFIGS:
        label = cuckoo_label(*config)
        assert (df[f"{label} overhead"] >= 1.0).all()
        assert (df[f"{label} fp"] >= 1).all()


def test_bloom_overhead_is_about_44_percent():
    df = build_comparison(elements=10_000_000, error_rates=[1e-3], cuckoo_configs=[])

    assert abs(df["Bloom overhead"].iloc[0] - 1.0 / np.log(2)) < 1e-3
