"""
Unit tests for the output-size policy.
"""

import pytest

from models.bounds import TargetSize
from services.dimension_service import DimensionService


@pytest.mark.parametrize("orig, requested, expected", [
    ((200, 100), (100, 0), (100, 50)),
    ((200, 100), (0, 0), (200, 100)),
    ((200, 100), (0, 50), (100, 50)),
    ((200, 100), (30, 40), (30, 40)),
    ((3, 7), (2, 0), (2, 4)),      # 4.67 truncates to 4
    ((7, 3), (0, 2), (4, 2)),      # 4.67 truncates to 4
    ((1000, 1), (10, 0), (10, 1)),  # 0.01 would be 0, floored at 1
    ((50, 50), (200, 0), (200, 200)),
])
def test_resolve_target_size(orig, requested, expected):
    assert DimensionService.resolve_target_size(*orig, *requested) == TargetSize(*expected)


def test_defaults_keep_original_size():
    assert DimensionService.resolve_target_size(640, 480) == (640, 480)


def test_negative_requests_count_as_unset():
    assert DimensionService.resolve_target_size(200, 100, -5, 0) == (200, 100)
    assert DimensionService.resolve_target_size(200, 100, 100, -1) == (100, 50)


def test_none_requests_count_as_unset():
    assert DimensionService.resolve_target_size(200, 100, None, None) == (200, 100)


@pytest.mark.parametrize("orig", [(0, 100), (100, 0), (-1, 5)])
def test_rejects_degenerate_original(orig):
    with pytest.raises(ValueError):
        DimensionService.resolve_target_size(*orig, 10, 0)
