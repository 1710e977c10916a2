"""
Split, merge and reset operations on a ShardSet.

Each operation validates its arguments first and returns a new ShardSet;
the input is never modified.
"""
import logging
from typing import Any

from sharding.errors import IndexOutOfRangeError, InvalidSplitPointError
from sharding.key_range import KeyRange
from sharding.keys import is_sentinel
from sharding.shard_set import ShardSet

logger = logging.getLogger(__name__)


def _check_index(index: Any, upper: int, size: int):
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < upper:
        raise IndexOutOfRangeError(index, size)


def split(shard_set: ShardSet, index: int, point: Any) -> ShardSet:
    """
    Split one shard in two at ``point``.

    No shard-count cap is applied here: splitting a set that is already at
    MAX_SHARD_COUNT fails in ShardSet validation with an
    InvariantViolationError rather than being silently refused.

    Args:
        shard_set: Current partitioning
        index: Shard to split
        point: Concrete key strictly inside the shard

    Returns:
        ShardSet with one more range

    Raises:
        IndexOutOfRangeError: index not in 0..len-1
        InvalidSplitPointError: point not strictly inside the shard
        KeyTypeError: point not comparable with the shard bounds
    """
    _check_index(index, len(shard_set), len(shard_set))

    target = shard_set[index]
    if is_sentinel(point) or not target.strictly_inside(point):
        raise InvalidSplitPointError(index, point)

    result = shard_set.replace(index, 1, [
        KeyRange(target.start, point),
        KeyRange(point, target.end),
    ])

    logger.debug(f"Split shard {index} {target!r} at {point!r}")
    return result


def merge(shard_set: ShardSet, index: int) -> ShardSet:
    """
    Merge a shard with its right-hand neighbour.

    Args:
        shard_set: Current partitioning
        index: Left shard of the pair, 0..len-2

    Returns:
        ShardSet with one less range

    Raises:
        IndexOutOfRangeError: no right-hand neighbour at index
    """
    _check_index(index, len(shard_set) - 1, len(shard_set))

    left, right = shard_set[index], shard_set[index + 1]
    result = shard_set.replace(index, 2, [KeyRange(left.start, right.end)])

    logger.debug(f"Merged shards {index} and {index + 1} into [{left.start!r}, {right.end!r})")
    return result


def reset(baseline: ShardSet) -> ShardSet:
    """Discard pending edits by returning the baseline itself."""
    return baseline
