from __future__ import annotations

import pytest

from comfort_map.domain.trail import Trail


def test_starts_empty() -> None:
    trail = Trail(5)
    assert len(trail) == 0
    assert trail.to_array().shape == (0, 2)


def test_rejects_zero_capacity() -> None:
    with pytest.raises(ValueError):
        Trail(0)


def test_keeps_insertion_order() -> None:
    trail = Trail(5)
    for k in range(3):
        trail.append(float(k), float(-k))
    assert list(trail) == [(0.0, 0.0), (1.0, -1.0), (2.0, -2.0)]
    assert trail.to_array()[-1].tolist() == [2.0, -2.0]


def test_evicts_oldest_after_capacity() -> None:
    trail = Trail(80)
    for k in range(81):
        trail.append(float(k), 0.0)
    assert len(trail) == 80
    points = list(trail)
    assert points[0] == (1.0, 0.0)
    assert points[-1] == (80.0, 0.0)


def test_never_exceeds_capacity() -> None:
    trail = Trail(7)
    for k in range(100):
        trail.append(float(k), float(k))
        assert len(trail) <= 7
    assert [x for x, _ in trail] == [float(k) for k in range(93, 100)]


def test_to_array_is_ordered_copy() -> None:
    trail = Trail(3)
    for k in range(5):
        trail.append(float(k), 10.0 + k)
    array = trail.to_array()
    assert array.tolist() == [[2.0, 12.0], [3.0, 13.0], [4.0, 14.0]]
    array[0, 0] = -1.0
    assert next(iter(trail)) == (2.0, 12.0)


def test_clear() -> None:
    trail = Trail(3)
    trail.append(1.0, 1.0)
    trail.clear()
    assert len(trail) == 0
    trail.append(2.0, 2.0)
    assert list(trail) == [(2.0, 2.0)]
