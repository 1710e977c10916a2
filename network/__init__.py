"""
Catalog service and sampler collaborators.
Provides abstract interfaces, an HTTP client and an in-memory simulation.
"""
from network.catalog_interface import CatalogService, DistributionSampler
from network.simulated_catalog import SimulatedCatalog
from network.http_catalog import HTTPCatalog
from network.wire import (
    ShardSetPayload,
    DistributionPayload,
    encode_shard_set,
    decode_shard_set,
    encode_sample,
    decode_sample,
)

__all__ = [
    "CatalogService",
    "DistributionSampler",
    "SimulatedCatalog",
    "HTTPCatalog",
    "ShardSetPayload",
    "DistributionPayload",
    "encode_shard_set",
    "decode_shard_set",
    "encode_sample",
    "decode_sample",
]
