"""
Error taxonomy for the sharding core.

Every error carries the structured fields a caller needs to report it
(index, invariant, counts) alongside a readable message.
"""
from enum import Enum
from typing import Any, Optional


class Invariant(str, Enum):
    """Structural rules a KeyRange or ShardSet must satisfy."""
    NON_EMPTY_RANGE = "non_empty_range"
    STARTS_AT_NEG_INF = "starts_at_neg_inf"
    ENDS_AT_POS_INF = "ends_at_pos_inf"
    CONTIGUOUS = "contiguous"
    SHARD_COUNT = "shard_count"


class ShardingError(Exception):
    """Base class for all shard planning errors."""


class KeyTypeError(ShardingError, TypeError):
    """Two keys cannot be ordered against each other."""

    def __init__(self, left: Any, right: Any):
        self.left = left
        self.right = right
        super().__init__(
            f"keys {left!r} ({type(left).__name__}) and {right!r} "
            f"({type(right).__name__}) are not comparable"
        )


class InvariantViolationError(ShardingError):
    """A range or shard set breaks one of its structural invariants."""

    def __init__(self, invariant: Invariant, index: Optional[int] = None, detail: str = ""):
        self.invariant = invariant
        self.index = index
        message = f"invariant {invariant.value} violated"
        if index is not None:
            message += f" at index {index}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class InvalidDesiredCountError(ShardingError):
    """Requested shard count is outside 1..bound."""

    def __init__(self, desired_count: Any, bound: int):
        self.desired_count = desired_count
        self.bound = bound
        super().__init__(
            f"desired shard count must be between 1 and {bound}, got {desired_count!r}"
        )


class InsufficientSampleError(ShardingError):
    """The distribution sample is too small to place split points."""

    def __init__(self, sample_size: int = 0):
        self.sample_size = sample_size
        super().__init__("not enough data to suggest shards")


class PartialSuggestionError(ShardingError):
    """
    The suggester produced fewer shards than requested.

    Not fatal: ``shard_set`` holds the valid, smaller result so the caller
    can still adopt it after showing the shortfall.
    """

    def __init__(self, achieved_count: int, desired_count: int, shard_set=None):
        self.achieved_count = achieved_count
        self.desired_count = desired_count
        self.shard_set = shard_set
        super().__init__(
            f"only {achieved_count} of {desired_count} shards could be suggested "
            f"from the sample"
        )


class InvalidSplitPointError(ShardingError):
    """Split point does not fall strictly inside the target range."""

    def __init__(self, index: int, point: Any):
        self.index = index
        self.point = point
        super().__init__(f"{point!r} is not strictly inside shard {index}")


class IndexOutOfRangeError(ShardingError, IndexError):
    """Shard index is not valid for the requested operation."""

    def __init__(self, index: Any, size: int):
        self.index = index
        self.size = size
        super().__init__(f"shard index {index!r} out of range for {size} shards")


class MalformedSampleError(ShardingError):
    """Distribution sample entry is out of order or has a bad count."""

    def __init__(self, index: int, detail: str):
        self.index = index
        super().__init__(f"malformed sample entry at index {index}: {detail}")


class WireFormatError(ShardingError):
    """A catalog payload could not be decoded."""


class CatalogError(ShardingError):
    """The catalog service or sampler rejected or failed a request."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)
