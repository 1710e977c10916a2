"""
In-memory catalog for testing and development.
Simulates latency and request failures.
"""
import asyncio
import random
from typing import Dict, List, Optional

from config import get_settings
from network.catalog_interface import CatalogService, DistributionSampler
from network.wire import DistributionPayload, ShardSetPayload
from sharding.distribution import DistributionSample
from sharding.errors import CatalogError
from sharding.shard_set import ShardSet


class SimulatedCatalog(CatalogService, DistributionSampler):
    """
    Catalog and sampler kept in memory.

    State is stored in wire form so every fetch and commit goes through the
    same encoding a remote catalog would use.
    """

    def __init__(
        self,
        latency_ms: float = None,
        failure_rate: float = None,
        seed: Optional[int] = None
    ):
        """
        Initialize the simulated catalog.

        Args:
            latency_ms: Delay added to every request, in milliseconds
            failure_rate: Probability (0.0-1.0) that a request fails
            seed: Seed for the failure generator
        """
        super().__init__(name="simulated")

        settings = get_settings()
        self.latency_ms = settings.simulated_latency_ms if latency_ms is None else latency_ms
        self.failure_rate = settings.simulated_failure_rate if failure_rate is None else failure_rate

        self._random = random.Random(seed)
        self._shards: Dict[str, ShardSetPayload] = {}
        self._samples: Dict[str, DistributionPayload] = {}
        self._rejections: Dict[str, str] = {}
        self.commit_log: List[str] = []
        self._running = False

    async def start(self):
        self._running = True
        self.logger.info("Simulated catalog started")

    async def stop(self):
        self._running = False
        self.logger.info("Simulated catalog stopped")

    def is_running(self) -> bool:
        return self._running

    def create_table(
        self,
        table_id: str,
        shard_set: ShardSet = None,
        sample: DistributionSample = None
    ):
        """
        Register a table.

        Args:
            table_id: Table identifier
            shard_set: Initial partitioning, a single shard by default
            sample: Key-density sample served by the sampler
        """
        self._shards[table_id] = ShardSetPayload.from_shard_set(
            table_id, shard_set or ShardSet.full_range()
        )
        self.set_sample(table_id, sample or DistributionSample())
        self.logger.debug(f"Table {table_id} registered")

    def set_sample(self, table_id: str, sample: DistributionSample):
        self._samples[table_id] = DistributionPayload.from_sample(table_id, sample)

    def reject_commits(self, table_id: str, reason: str = "commit rejected"):
        """Make every commit for a table fail until ``accept_commits``."""
        self._rejections[table_id] = reason

    def accept_commits(self, table_id: str):
        self._rejections.pop(table_id, None)

    def set_failure_rate(self, failure_rate: float):
        self.failure_rate = max(0.0, min(1.0, failure_rate))

    async def _simulate_request(self, operation: str, table_id: str):
        if not self._running:
            raise CatalogError("simulated catalog is not running", status=503)

        if self.latency_ms:
            await asyncio.sleep(self.latency_ms / 1000)

        if self._random.random() < self.failure_rate:
            self.logger.debug(f"{operation} {table_id}: simulated failure")
            raise CatalogError(f"simulated failure during {operation}", status=503)

        if table_id not in self._shards:
            raise CatalogError(f"unknown table {table_id}", status=404)

    async def fetch(self, table_id: str) -> ShardSet:
        await self._simulate_request("fetch", table_id)
        return self._shards[table_id].to_shard_set()

    async def commit(self, table_id: str, shard_set: ShardSet) -> ShardSet:
        await self._simulate_request("commit", table_id)

        if table_id in self._rejections:
            raise CatalogError(self._rejections[table_id], status=409)

        # Last commit wins; no version check against concurrent editors
        payload = ShardSetPayload.from_shard_set(table_id, shard_set)
        self._shards[table_id] = payload
        self.commit_log.append(table_id)

        self.logger.info(f"Table {table_id}: committed {len(shard_set)} shards")
        return payload.to_shard_set()

    async def sample(self, table_id: str) -> DistributionSample:
        await self._simulate_request("sample", table_id)
        return self._samples[table_id].to_sample()
