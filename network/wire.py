"""
Catalog wire format.

A range travels as ``[start, end]`` where ``null`` stands for the infinite
sentinel on that side; a shard set is the ordered list of such pairs. A
distribution sample travels as a list of ``[key, approx_count]`` pairs.
Concrete keys are JSON scalars (string, integer or float).
"""
from typing import Any, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, NonNegativeInt, StrictFloat, StrictInt, StrictStr, TypeAdapter, ValidationError

from sharding.distribution import DistributionSample
from sharding.errors import WireFormatError
from sharding.key_range import KeyRange
from sharding.keys import NEG_INF, POS_INF
from sharding.shard_set import ShardSet

WireKey = Union[StrictStr, StrictInt, StrictFloat]
WireRange = Tuple[Optional[WireKey], Optional[WireKey]]
WireSampleEntry = Tuple[WireKey, NonNegativeInt]

_RANGES_ADAPTER = TypeAdapter(List[WireRange])
_SAMPLES_ADAPTER = TypeAdapter(List[WireSampleEntry])


def encode_range(key_range: KeyRange) -> List[Any]:
    """Encode a range as [start, end] with null for infinite bounds."""
    return [
        None if key_range.start is NEG_INF else key_range.start,
        None if key_range.end is POS_INF else key_range.end,
    ]


def encode_shard_set(shard_set: ShardSet) -> List[List[Any]]:
    """Encode a shard set as an ordered list of [start, end] pairs."""
    return [encode_range(key_range) for key_range in shard_set]


def decode_shard_set(data: Any) -> ShardSet:
    """
    Decode an ordered list of [start, end] pairs.

    Args:
        data: Parsed JSON value

    Returns:
        Validated ShardSet

    Raises:
        WireFormatError: payload is not a list of key pairs
        InvariantViolationError: pairs do not form a valid shard set
    """
    try:
        pairs = _RANGES_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise WireFormatError(f"invalid shard set payload: {e}") from e

    return ShardSet(
        KeyRange(
            NEG_INF if start is None else start,
            POS_INF if end is None else end,
        )
        for start, end in pairs
    )


def encode_sample(sample: DistributionSample) -> List[List[Any]]:
    return [[key, count] for key, count in sample]


def decode_sample(data: Any) -> DistributionSample:
    """
    Decode an ordered list of [key, approx_count] pairs.

    Raises:
        WireFormatError: payload is not a list of (key, count) pairs
        MalformedSampleError: keys out of order
    """
    try:
        entries = _SAMPLES_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise WireFormatError(f"invalid distribution payload: {e}") from e

    return DistributionSample(entries)


class ShardSetPayload(BaseModel):
    """Body of catalog fetch responses and commit requests/responses."""
    table_id: str
    shards: List[WireRange] = Field(
        default_factory=list,
        description="Ordered [start, end] pairs, null for infinite bounds"
    )

    @classmethod
    def from_shard_set(cls, table_id: str, shard_set: ShardSet) -> "ShardSetPayload":
        return parse_payload(cls, {"table_id": table_id, "shards": encode_shard_set(shard_set)})

    def to_shard_set(self) -> ShardSet:
        return decode_shard_set(self.shards)


class DistributionPayload(BaseModel):
    """Body of sampler responses."""
    table_id: str
    samples: List[WireSampleEntry] = Field(
        default_factory=list,
        description="Ordered [key, approx_count] pairs"
    )

    @classmethod
    def from_sample(cls, table_id: str, sample: DistributionSample) -> "DistributionPayload":
        return parse_payload(cls, {"table_id": table_id, "samples": encode_sample(sample)})

    def to_sample(self) -> DistributionSample:
        return decode_sample(self.samples)


def parse_payload(model, data: Any):
    """Validate a response body against a payload model."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise WireFormatError(f"invalid {model.__name__}: {e}") from e
