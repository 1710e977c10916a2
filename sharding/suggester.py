"""
Split-point suggestion from a key-density sample.

Walks the sample once in key order, accumulating approximate row counts,
and closes a shard each time the running total reaches the per-shard
target. The last shard is open-ended and absorbs whatever remains.
"""
import logging
from typing import Any, List

from config import MAX_SHARD_COUNT
from sharding.distribution import DistributionSample
from sharding.errors import (
    InsufficientSampleError,
    InvalidDesiredCountError,
    PartialSuggestionError,
)
from sharding.keys import compare
from sharding.shard_set import ShardSet

logger = logging.getLogger(__name__)

MIN_SAMPLE_SIZE = 2


def check_desired_count(desired_count: int):
    """Raise InvalidDesiredCountError unless desired_count is an int in 1..MAX_SHARD_COUNT."""
    if (
        isinstance(desired_count, bool)
        or not isinstance(desired_count, int)
        or not 1 <= desired_count <= MAX_SHARD_COUNT
    ):
        raise InvalidDesiredCountError(desired_count, MAX_SHARD_COUNT)


def suggest(sample, desired_count: int) -> ShardSet:
    """
    Suggest a partitioning of roughly equal row counts.

    Args:
        sample: DistributionSample or iterable of (key, approx_count) pairs
        desired_count: Number of shards wanted (1..MAX_SHARD_COUNT)

    Returns:
        ShardSet with exactly desired_count ranges

    Raises:
        InvalidDesiredCountError: desired_count outside 1..MAX_SHARD_COUNT
        InsufficientSampleError: fewer than two sample entries
        PartialSuggestionError: the sample only supports fewer shards; the
            achieved ShardSet is attached to the error
    """
    check_desired_count(desired_count)

    # One shard needs no split points, so the sample is never consulted
    if desired_count == 1:
        return ShardSet.full_range()

    sample = DistributionSample.coerce(sample)
    if len(sample) < MIN_SAMPLE_SIZE:
        raise InsufficientSampleError(len(sample))

    target = sample.total / desired_count
    max_splits = desired_count - 1

    split_keys: List[Any] = []
    running = 0

    for key, count in sample:
        running += count
        if running >= target and len(split_keys) < max_splits:
            split_keys.append(key)
            running = 0

    shard_set = ShardSet.from_split_points(split_keys)

    logger.debug(
        f"Suggested {len(shard_set)}/{desired_count} shards "
        f"(target {target:.1f} rows per shard, {len(sample)} sample keys)"
    )

    if len(shard_set) < desired_count:
        raise PartialSuggestionError(len(shard_set), desired_count, shard_set)

    return shard_set


def estimate_shard_loads(sample, shard_set: ShardSet) -> List[int]:
    """
    Approximate row count covered by each range of a shard set.

    A sample entry (k, c) stands for the c rows between the previous sample
    key and k inclusive, the same reading ``suggest`` uses when it closes a
    shard at k. Its rows are therefore charged to the range that ends at or
    after k.

    Args:
        sample: DistributionSample or iterable of (key, approx_count) pairs
        shard_set: Partitioning to evaluate

    Returns:
        One count per range, in range order
    """
    sample = DistributionSample.coerce(sample)
    loads = [0] * len(shard_set)

    index = 0
    for key, count in sample:
        while compare(key, shard_set[index].end) > 0:
            index += 1
        loads[index] += count

    return loads
