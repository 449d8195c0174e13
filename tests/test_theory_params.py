# -*- coding: utf-8 -*-
"""
Test cho engine cận dưới lý thuyết.
"""

import math
import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))
from probset.theory.theory_params import TheoryParams
from probset.types.param_types import Resolution


def test_one_percent_thousand_elements():
    """error=1%, n=1000 -> log2(100) bit/phần tử."""
    t = TheoryParams(error=0.01, elements=1000)

    assert t.resolution() is Resolution.RESOLVED
    assert t.bits_per_element() == pytest.approx(6.643856, abs=1e-6)
    assert t.storage() == pytest.approx(6643.856, abs=1e-3)
    assert t.error() == pytest.approx(0.01, rel=1e-12)
    assert t.elements() == 1000


@pytest.mark.parametrize("error", [0.5, 0.1, 1e-3, 1e-9])
@pytest.mark.parametrize("elements", [1, 1000, 10**9])
def test_storage_round_trips_to_error(error, elements):
    """Suy storage rồi suy ngược error từ (storage, elements) phải ra error ban đầu."""
    forward = TheoryParams(error=error, elements=elements)
    back = TheoryParams(elements=elements, storage=forward.storage())

    assert back.error() == pytest.approx(error, rel=1e-9)
    assert back.bits_per_element() == pytest.approx(forward.bits_per_element(), rel=1e-12)


def test_elements_from_storage_and_error():
    t = TheoryParams(error=0.125, storage=3000)

    assert t.bits_per_element() == pytest.approx(3.0)
    assert t.elements() == pytest.approx(1000.0)
    # không làm tròn
    t = TheoryParams(error=0.01, storage=1000)
    assert t.elements() == pytest.approx(1000 / math.log2(100))
    assert t.elements() != int(t.elements())


@pytest.mark.parametrize("kwargs, expected", [
    ({}, Resolution.UNDERCONSTRAINED),
    ({"error": 0.01}, Resolution.UNDERCONSTRAINED),
    ({"elements": 1000}, Resolution.UNDERCONSTRAINED),
    ({"storage": 8000}, Resolution.UNDERCONSTRAINED),
    ({"error": 0.01, "elements": 1000, "storage": 8000}, Resolution.OVERCONSTRAINED),
])
def test_constraint_gate(kwargs, expected):
    """0, 1 hoặc 3 ràng buộc: trả lại đầu vào, trường suy ra để trống."""
    t = TheoryParams(**kwargs)

    assert t.resolution() is expected
    assert not t.is_resolved()
    assert t.bits_per_element() is None
    assert t.error() == kwargs.get("error")
    assert t.elements() == kwargs.get("elements")
    assert t.storage() == kwargs.get("storage")


def test_zero_elements_does_not_crash():
    t = TheoryParams(elements=0, storage=100)

    assert t.is_resolved()
    assert t.bits_per_element() is None
    assert t.error() is None


@pytest.mark.parametrize("error", [0.0, 1.0, -0.5, 2.0])
def test_error_outside_open_interval_is_rejected(error):
    with pytest.raises(ValueError):
        TheoryParams(error=error, elements=10)


def test_underflowing_error_stays_positive():
    tp = TheoryParams(elements=1, storage=10_000)

    assert tp.bits_per_element() == 10_000
    assert tp.error() > 0
