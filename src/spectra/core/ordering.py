"""Fractional execution order keys.

Test cases are ordered by a float key. Moving a block of cases between
two neighbours only rewrites the keys of the moved cases: they receive
evenly spaced keys strictly inside the gap between the anchors.

Keys only carry relative order. Repeated subdivision of the same gap
eventually runs out of float precision; when neighbouring keys
collapse an `OrderingWarning` is emitted and the keys are still
returned, leaving it to the rebalancer to restore spacing.
"""

from collections.abc import Hashable, Mapping
from warnings import warn

from spectra.errors import OrderingWarning


def _is_valid_gap(prev_key: float | None, next_key: float | None) -> bool:
    """Check whether both anchors exist and delimit a non-empty gap."""
    return prev_key is not None and next_key is not None and next_key > prev_key


def allocate(prev_key: float | None, next_key: float | None,
             count: int) -> list[float]:
    """Allocate increasing keys for a block inserted between anchors.

    Args:
        prev_key: Key of the item right before the insertion point.
        next_key: Key of the item right after the insertion point.
        count: Number of keys to allocate.

    Returns:
        `count` keys in increasing order:

        - both anchors with `next_key > prev_key`: evenly spaced keys
          strictly between the anchors;
        - only `prev_key` (or anchors out of order): `prev_key + i`;
        - only `next_key`: keys ending at `next_key - 1`;
        - no anchors: `1.0 .. count`.

    Raises:
        ValueError: If `count` is negative.
    """
    if count < 0:
        raise ValueError(f'Can not allocate {count} keys')

    if _is_valid_gap(prev_key, next_key):
        step = (next_key - prev_key) / (count + 1)
        keys = [prev_key + step * num for num in range(1, count + 1)]

        if not _is_strictly_inside(keys, prev_key, next_key):
            warn(
                f'Execution order keys collapsed between {prev_key!r} and '
                f'{next_key!r}; rebalance is required',
                category=OrderingWarning,
                stacklevel=2,
            )

        return keys

    if prev_key is not None:
        return [prev_key + num for num in range(1, count + 1)]

    if next_key is not None:
        return [next_key - (count - num) for num in range(count)]

    return [float(num) for num in range(1, count + 1)]


def _is_strictly_inside(keys: list[float], low: float, high: float) -> bool:
    """Check that keys strictly increase inside the open interval."""
    bounds = [low, *keys, high]
    return all(left < right for left, right in zip(bounds, bounds[1:], strict=False))


def allocate_order[K: Hashable](prev_key: float | None,
                                next_key: float | None,
                                moved: Mapping[K, float]) -> dict[K, float]:
    """Allocate keys for a moved block of items.

    Members keep their relative order: they are ranked by their current
    key, ties broken by identifier.

    Args:
        prev_key: Key of the item right before the destination.
        next_key: Key of the item right after the destination.
        moved: Current keys of the moved items by identifier.

    Returns:
        New absolute keys by identifier.
    """
    ranked = sorted(moved, key=lambda item: (moved[item], str(item)))
    keys = allocate(prev_key, next_key, len(ranked))

    return dict(zip(ranked, keys, strict=True))


def duplicate_key(original: float, next_key: float | None) -> float:
    """Allocate a key right after an item being duplicated.

    Args:
        original: Key of the item being duplicated.
        next_key: Key of the item following it, if any.

    Returns:
        The midpoint between both keys, or `original + 1` when the item
        is the last one.
    """
    return allocate(original, next_key, 1)[0]


def append_key(current_max: float | None) -> float:
    """Allocate a key after every existing item.

    Args:
        current_max: Largest existing key, or `None` for an empty list.

    Returns:
        `current_max + 1`, or `1.0` for an empty list.
    """
    if current_max is None:
        return 1.0

    return current_max + 1
