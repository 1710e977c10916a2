"""
ShardSet: one complete partitioning of a table's keyspace.
"""
from typing import Any, Dict, Iterable, Iterator, List, Sequence, Tuple

from config import MAX_SHARD_COUNT
from sharding.errors import Invariant, InvariantViolationError
from sharding.key_range import KeyRange
from sharding.keys import NEG_INF, POS_INF, compare


class ShardSet:
    """
    Ordered, immutable sequence of contiguous KeyRanges.

    Invariants, checked on construction:
    - the first range starts at NEG_INF
    - the last range ends at POS_INF
    - each range ends where the next one starts
    - 1 <= number of ranges <= MAX_SHARD_COUNT

    Operations that change a partitioning build a new ShardSet, so a
    failed validation never leaves a half-edited instance behind.
    """

    __slots__ = ("_ranges",)

    def __init__(self, ranges: Iterable[KeyRange]):
        ranges = tuple(ranges)
        self._validate(ranges)
        self._ranges: Tuple[KeyRange, ...] = ranges

    @staticmethod
    def _validate(ranges: Sequence[KeyRange]):
        if not 1 <= len(ranges) <= MAX_SHARD_COUNT:
            raise InvariantViolationError(
                Invariant.SHARD_COUNT,
                index=len(ranges),
                detail=f"a shard set holds 1 to {MAX_SHARD_COUNT} ranges, got {len(ranges)}"
            )

        for i, key_range in enumerate(ranges):
            if not isinstance(key_range, KeyRange):
                raise InvariantViolationError(
                    Invariant.NON_EMPTY_RANGE,
                    index=i,
                    detail=f"expected KeyRange, got {type(key_range).__name__}"
                )

        if ranges[0].start is not NEG_INF:
            raise InvariantViolationError(Invariant.STARTS_AT_NEG_INF, index=0)

        if ranges[-1].end is not POS_INF:
            raise InvariantViolationError(Invariant.ENDS_AT_POS_INF, index=len(ranges) - 1)

        for i in range(len(ranges) - 1):
            left, right = ranges[i], ranges[i + 1]
            if compare(left.end, right.start) != 0:
                raise InvariantViolationError(
                    Invariant.CONTIGUOUS,
                    index=i,
                    detail=f"{left!r} is not followed by a range starting at its end, got {right!r}"
                )

    @classmethod
    def full_range(cls) -> "ShardSet":
        """The single-shard partitioning [(NEG_INF, POS_INF)]."""
        return cls([KeyRange(NEG_INF, POS_INF)])

    @classmethod
    def from_split_points(cls, points: Sequence[Any]) -> "ShardSet":
        """
        Build (NEG_INF, s1), (s1, s2), ..., (sk, POS_INF) from ordered split keys.

        Args:
            points: Strictly increasing concrete keys

        Returns:
            ShardSet with len(points) + 1 ranges
        """
        bounds = [NEG_INF, *points, POS_INF]
        return cls(KeyRange(bounds[i], bounds[i + 1]) for i in range(len(bounds) - 1))

    @property
    def ranges(self) -> Tuple[KeyRange, ...]:
        return self._ranges

    @property
    def split_points(self) -> List[Any]:
        """Interior boundaries, in order."""
        return [key_range.end for key_range in self._ranges[:-1]]

    def locate(self, key: Any) -> int:
        """
        Find the shard that owns a key.

        Args:
            key: Concrete key

        Returns:
            Index of the range containing the key
        """
        lo, hi = 0, len(self._ranges) - 1
        while lo < hi:
            mid = (lo + hi) // 2
            if compare(key, self._ranges[mid].end) < 0:
                hi = mid
            else:
                lo = mid + 1
        return lo

    def equals(self, other: "ShardSet") -> bool:
        return self == other

    def replace(self, index: int, count: int, new_ranges: Sequence[KeyRange]) -> "ShardSet":
        """New ShardSet with ``count`` ranges at ``index`` swapped for ``new_ranges``."""
        ranges = list(self._ranges)
        ranges[index:index + count] = new_ranges
        return ShardSet(ranges)

    def to_dict(self) -> Dict:
        """Summary used for logging and stats."""
        return {
            "shard_count": len(self._ranges),
            "split_points": self.split_points,
            "ranges": [repr(key_range) for key_range in self._ranges],
        }

    def __len__(self) -> int:
        return len(self._ranges)

    def __iter__(self) -> Iterator[KeyRange]:
        return iter(self._ranges)

    def __getitem__(self, index: int) -> KeyRange:
        return self._ranges[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, ShardSet):
            return NotImplemented
        return self._ranges == other._ranges

    def __hash__(self) -> int:
        return hash(self._ranges)

    def __repr__(self) -> str:
        return f"ShardSet({', '.join(repr(r) for r in self._ranges)})"
