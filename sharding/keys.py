"""
Key ordering with open-ended sentinels.

Concrete keys are any values with a natural total order among themselves
(str, bytes, int, ...). NEG_INF and POS_INF sort below and above every
concrete key and are only equal to themselves.
"""
from typing import Any

from sharding.errors import KeyTypeError


class _Sentinel:
    """Unique infinite bound. Compared by identity."""

    __slots__ = ("_name", "_sign")

    def __init__(self, name: str, sign: int):
        self._name = name
        self._sign = sign

    def __repr__(self) -> str:
        return self._name

    def __reduce__(self):
        return self._name

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


NEG_INF = _Sentinel("NEG_INF", -1)
POS_INF = _Sentinel("POS_INF", 1)


def is_sentinel(key: Any) -> bool:
    """True for NEG_INF or POS_INF."""
    return key is NEG_INF or key is POS_INF


def compare(a: Any, b: Any) -> int:
    """
    Three-way comparison of two keys.

    Args:
        a: Key or sentinel
        b: Key or sentinel

    Returns:
        -1, 0 or 1

    Raises:
        KeyTypeError: if two concrete keys cannot be ordered
    """
    if a is b:
        return 0
    if isinstance(a, _Sentinel):
        return a._sign
    if isinstance(b, _Sentinel):
        return -b._sign

    try:
        if a < b:
            return -1
        if b < a:
            return 1
    except TypeError:
        raise KeyTypeError(a, b) from None

    if a == b:
        return 0
    # Values such as NaN are neither ordered nor equal
    raise KeyTypeError(a, b)

