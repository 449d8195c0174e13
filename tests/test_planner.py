# -*- coding: utf-8 -*-
"""
Test cho FilterPlanner và bảng hiển thị.
"""

import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))
from probset.manager.planner import FieldStatus, FilterPlanner, format_error, render_report
from probset.metrics.metrics import PlannerMetrics
from probset.types.param_types import Resolution


def test_plan_feeds_same_input_to_all_engines():
    planner = FilterPlanner()
    report = planner.plan("1%", "1M", "")

    assert report.error == 0.01
    assert report.elements == 1_000_000
    assert report.storage is None
    assert report.theory.is_resolved()
    assert report.bloom.storage() == 9_585_059
    assert report.bloom.hashes() == 7
    assert report.cuckoo.fingerprint() is not None
    assert report.statuses == {
        "error": FieldStatus.OK,
        "elements": FieldStatus.OK,
        "storage": FieldStatus.BLANK,
    }
    assert not report.too_many()
    assert planner.metrics.resolved == 1


def test_over_constrained_is_flagged_not_raised():
    planner = FilterPlanner()
    report = planner.plan("0.01", "1K", "8KiB")

    assert report.too_many()
    assert report.bloom.resolution() is Resolution.OVERCONSTRAINED
    assert report.bloom.hashes() is None
    assert report.cuckoo.fingerprint() is None
    assert planner.metrics.overconstrained == 1
    assert any("Quá nhiều ràng buộc" in event for event in planner.events)
    assert "thừa ràng buộc" in render_report(report)


def test_invalid_field_blanks_every_engine():
    """Một ô sai định dạng -> không suy luận gì, ô đó được đánh dấu INVALID."""
    metrics = PlannerMetrics()
    planner = FilterPlanner(metrics=metrics)
    report = planner.plan("2%", "lots", "")

    assert report.statuses["elements"] is FieldStatus.INVALID
    assert report.has_parse_error()
    assert report.invalid_fields() == ["elements"]
    assert report.error == 0.02
    assert report.theory.error() is None
    assert report.bloom.storage() is None
    assert report.cuckoo.fingerprint() is None
    assert metrics.parse_failures == 1
    assert metrics.underconstrained == 1
    assert "Lỗi: ô 'elements'" in render_report(report)


def test_plan_values_uses_hyperparameters():
    planner = FilterPlanner(hashes=2, slots=8, util=0.98, compress=True, bloom_hashes=3)
    report = planner.plan_values(error=0.001, elements=1000)

    assert report.cuckoo.slots() == 8
    assert report.cuckoo.util() == 0.98
    assert report.cuckoo.save() is not None
    assert report.bloom.hashes() == 3
    assert report.bloom.error() == 0.001


def test_render_report_leaves_unknown_blank():
    planner = FilterPlanner()
    text = render_report(planner.plan("", "1G", ""))

    assert "Cuckoo Filter" in text
    assert "Bloom Filter" in text
    assert "Lower bound" in text
    assert "bits/item" not in text
    assert "1 in" not in text


def test_render_report_resolved():
    planner = FilterPlanner()
    text = render_report(planner.plan("0.1%", "1000", ""))

    assert "13 bits" in text
    assert "bits/item" in text
    assert "(1 in " in text


def test_format_error():
    assert format_error(None) == ""
    assert format_error(0.01) == "0.01 (1 in 100)"
    assert format_error(0.0) == "0.0"


def test_verbose_prints_events(capsys):
    planner = FilterPlanner(verbose=True)
    planner.plan("0.01", "1000", "")

    out = capsys.readouterr().out
    assert "[Planner] Đã giải" in out


def test_metrics_ratio():
    planner = FilterPlanner()
    planner.plan("0.01", "1000", "")
    planner.plan("0.01", "", "")

    assert planner.metrics.plans == 2
    assert planner.metrics.resolved_ratio() == 0.5


def test_demo_run_once_prints_tables(capsys):
    from demo_planner import run_once

    report = run_once(FilterPlanner(), "0.01", "1G", "")

    out = capsys.readouterr().out
    assert report.bloom.is_resolved()
    assert "Bloom Filter" in out
    assert "Fingerprint size" in out


def test_huge_digit_string_marks_field_invalid():
    planner = FilterPlanner()
    report = planner.plan("0.01", "9" * 5000, "")

    assert report.statuses["elements"] is FieldStatus.INVALID
    assert report.bloom.storage() is None
    assert planner.metrics.parse_failures == 1


def test_tiny_error_renders_as_one_in_n():
    report = FilterPlanner().plan("0.00000000000000001", "1000", "")

    assert report.cuckoo.fingerprint() == 60
    assert 0 < report.cuckoo.error() < 1
    assert "(1 in " in render_report(report)


def test_underflowing_error_still_renders():
    """1 phần tử trong 10^19 bit: FPR tràn dưới nhưng vẫn dương và hiển thị được."""
    report = FilterPlanner().plan("", "1", "10000000000000000000")

    for engine in (report.theory, report.bloom, report.cuckoo):
        assert 0 < engine.error() < 1
    assert "(1 in inf)" in render_report(report)
