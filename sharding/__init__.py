"""
Range sharding core.

Key ordering, shard-range data model, split/merge mutations and
split-point suggestion from a key-density sample.
"""
from sharding.keys import NEG_INF, POS_INF, compare, is_sentinel
from sharding.key_range import KeyRange, contains
from sharding.shard_set import ShardSet
from sharding.distribution import DistributionSample
from sharding.suggester import check_desired_count, suggest, estimate_shard_loads
from sharding.mutator import split, merge, reset
from sharding.errors import (
    ShardingError,
    Invariant,
    InvariantViolationError,
    InvalidDesiredCountError,
    InsufficientSampleError,
    PartialSuggestionError,
    InvalidSplitPointError,
    IndexOutOfRangeError,
    KeyTypeError,
    MalformedSampleError,
    WireFormatError,
    CatalogError,
)

__all__ = [
    "NEG_INF",
    "POS_INF",
    "compare",
    "is_sentinel",
    "KeyRange",
    "contains",
    "ShardSet",
    "DistributionSample",
    "check_desired_count",
    "suggest",
    "estimate_shard_loads",
    "split",
    "merge",
    "reset",
    "ShardingError",
    "Invariant",
    "InvariantViolationError",
    "InvalidDesiredCountError",
    "InsufficientSampleError",
    "PartialSuggestionError",
    "InvalidSplitPointError",
    "IndexOutOfRangeError",
    "KeyTypeError",
    "MalformedSampleError",
    "WireFormatError",
    "CatalogError",
]
