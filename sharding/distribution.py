"""
Sampled key-density histogram for a table.
"""
from typing import Any, Iterable, Iterator, List, Tuple

from sharding.errors import MalformedSampleError
from sharding.keys import compare, is_sentinel


class DistributionSample:
    """
    Ordered (key, approx_count) pairs, strictly increasing by key.

    Counts are non-negative integers. Instances are read-only.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[Tuple[Any, int]] = ()):
        validated: List[Tuple[Any, int]] = []

        for i, entry in enumerate(entries):
            try:
                key, count = entry
            except (TypeError, ValueError):
                raise MalformedSampleError(i, f"expected (key, count) pair, got {entry!r}") from None

            if is_sentinel(key):
                raise MalformedSampleError(i, "sample keys must be concrete")
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise MalformedSampleError(i, f"count must be a non-negative integer, got {count!r}")
            if validated and compare(validated[-1][0], key) >= 0:
                raise MalformedSampleError(
                    i, f"key {key!r} does not follow {validated[-1][0]!r}"
                )

            validated.append((key, count))

        self._entries: Tuple[Tuple[Any, int], ...] = tuple(validated)

    @classmethod
    def coerce(cls, sample) -> "DistributionSample":
        """Accept either a DistributionSample or any iterable of pairs."""
        if isinstance(sample, cls):
            return sample
        return cls(sample)

    @property
    def total(self) -> int:
        return sum(count for _, count in self._entries)

    @property
    def keys(self) -> List[Any]:
        return [key for key, _ in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[Any, int]]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> Tuple[Any, int]:
        return self._entries[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, DistributionSample):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"DistributionSample({list(self._entries)!r})"
