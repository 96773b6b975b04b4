"""Tests for fractional execution order keys."""

import warnings

import pytest

from spectra.core import allocate, allocate_order, append_key, duplicate_key
from spectra.errors import OrderingWarning


@pytest.mark.parametrize('prev_key, next_key, count, expected', (
    pytest.param(1.0, 2.0, 1, [1.5], id='single between'),
    pytest.param(1.0, 2.0, 3, [1.25, 1.5, 1.75], id='block between'),
    pytest.param(3.0, None, 2, [4.0, 5.0], id='after last'),
    pytest.param(None, 3.0, 2, [1.0, 2.0], id='before first'),
    pytest.param(None, 1.0, 3, [-2.0, -1.0, 0.0], id='before first below zero'),
    pytest.param(None, None, 3, [1.0, 2.0, 3.0], id='no anchors'),
    pytest.param(5.0, 5.0, 2, [6.0, 7.0], id='equal anchors'),
    pytest.param(5.0, 2.0, 1, [6.0], id='anchors out of order'),
    pytest.param(1.0, 2.0, 0, [], id='empty block'),
))
def test_allocate(prev_key: float | None, next_key: float | None,
                  count: int, expected: list[float]) -> None:
    """Keys follow the anchor rules."""
    assert allocate(prev_key, next_key, count) == pytest.approx(expected)


def test_allocate_keys_strictly_inside_gap() -> None:
    """Keys between anchors increase strictly inside the gap."""
    keys = allocate(10.0, 10.5, 7)

    assert all(10.0 < key < 10.5 for key in keys)
    assert keys == sorted(set(keys))


def test_allocate_negative_count() -> None:
    """Negative block sizes are rejected."""
    with pytest.raises(ValueError, match=r'^Can not allocate -1 keys'):
        allocate(None, None, -1)


def test_allocate_warns_on_collapsed_keys() -> None:
    """Exhausted precision is reported but keys are still returned."""
    prev_key = 1.0
    next_key = 1.0 + 2.220446049250313e-16

    with pytest.warns(OrderingWarning, match=r'rebalance is required'):
        keys = allocate(prev_key, next_key, 3)

    assert len(keys) == 3


def test_allocate_does_not_warn_on_wide_gap() -> None:
    """Ordinary subdivisions emit no warning."""
    with warnings.catch_warnings():
        warnings.simplefilter('error', OrderingWarning)
        allocate(1.0, 2.0, 100)


def test_allocate_order_keeps_relative_order() -> None:
    """Block members keep their current relative order."""
    keys = allocate_order(1.0, 2.0, {'TC-0009': 9.0, 'TC-0003': 3.0, 'TC-0005': 5.0})

    assert keys == pytest.approx({'TC-0003': 1.25, 'TC-0005': 1.5, 'TC-0009': 1.75})


def test_allocate_order_breaks_ties_by_identifier() -> None:
    """Members with equal keys are ranked by identifier."""
    keys = allocate_order(None, None, {'b': 1.0, 'a': 1.0, 'c': 0.5})

    assert keys == {'c': 1.0, 'a': 2.0, 'b': 3.0}


def test_allocate_order_empty_block() -> None:
    """Moving nothing allocates nothing."""
    assert allocate_order(1.0, 2.0, {}) == {}


@pytest.mark.parametrize('original, next_key, expected', (
    pytest.param(2.0, 3.0, 2.5, id='midpoint'),
    pytest.param(2.0, None, 3.0, id='last item'),
))
def test_duplicate_key(original: float, next_key: float | None, expected: float) -> None:
    """Duplicates are placed right after the original."""
    assert duplicate_key(original, next_key) == expected


@pytest.mark.parametrize('current_max, expected', (
    pytest.param(None, 1.0, id='empty list'),
    pytest.param(4.5, 5.5, id='after last'),
))
def test_append_key(current_max: float | None, expected: float) -> None:
    """Appended items go after the largest key."""
    assert append_key(current_max) == expected


def test_repeated_insertions_stay_ordered() -> None:
    """Repeatedly inserting before the same item keeps a strict order."""
    order = [1.0, 2.0]

    for _ in range(30):
        key = allocate(order[0], order[1], 1)[0]
        order.insert(1, key)

    assert order == sorted(order)
    assert len(set(order)) == len(order)
