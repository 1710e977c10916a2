"""
Half-open key range, the boundary of a single shard.
"""
from dataclasses import dataclass
from typing import Any

from sharding.errors import Invariant, InvariantViolationError
from sharding.keys import NEG_INF, POS_INF, compare


@dataclass(frozen=True)
class KeyRange:
    """
    Range [start, end) over the keyspace.

    ``start`` may be NEG_INF and ``end`` may be POS_INF. A range is never
    empty: construction fails unless start < end.
    """
    start: Any
    end: Any

    def __post_init__(self):
        if compare(self.start, self.end) >= 0:
            raise InvariantViolationError(
                Invariant.NON_EMPTY_RANGE,
                detail=f"start {self.start!r} must be below end {self.end!r}"
            )

    @property
    def is_bounded_below(self) -> bool:
        return self.start is not NEG_INF

    @property
    def is_bounded_above(self) -> bool:
        return self.end is not POS_INF

    def contains(self, key: Any) -> bool:
        """True iff start <= key < end."""
        return compare(self.start, key) <= 0 and compare(key, self.end) < 0

    def strictly_inside(self, key: Any) -> bool:
        """True iff start < key < end, i.e. key is a valid split point."""
        return compare(self.start, key) < 0 and compare(key, self.end) < 0

    def __repr__(self) -> str:
        start = "-inf" if self.start is NEG_INF else repr(self.start)
        end = "+inf" if self.end is POS_INF else repr(self.end)
        return f"[{start}, {end})"


def contains(key_range: KeyRange, key: Any) -> bool:
    """Function form of KeyRange.contains."""
    return key_range.contains(key)
