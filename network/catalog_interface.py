"""
Abstract interfaces for the catalog service and distribution sampler.
"""
from abc import ABC, abstractmethod
import logging

from sharding.distribution import DistributionSample
from sharding.shard_set import ShardSet


class CatalogService(ABC):
    """Source of truth for each table's committed shard set."""

    def __init__(self, name: str = "catalog"):
        self.name = name
        self.logger = logging.getLogger(f"{__name__}.{name}")

    @abstractmethod
    async def fetch(self, table_id: str) -> ShardSet:
        """
        Get the committed shard set of a table.

        Args:
            table_id: Table identifier

        Returns:
            Committed ShardSet

        Raises:
            CatalogError: the service failed or does not know the table
        """
        pass

    @abstractmethod
    async def commit(self, table_id: str, shard_set: ShardSet) -> ShardSet:
        """
        Replace the committed shard set of a table.

        Args:
            table_id: Table identifier
            shard_set: New partitioning

        Returns:
            The shard set as persisted by the service

        Raises:
            CatalogError: the service rejected or failed the commit
        """
        pass

    @abstractmethod
    async def start(self):
        """Open connections."""
        pass

    @abstractmethod
    async def stop(self):
        """Release connections."""
        pass

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()


class DistributionSampler(ABC):
    """Source of approximate key-density samples."""

    @abstractmethod
    async def sample(self, table_id: str) -> DistributionSample:
        """
        Get an ordered key-density sample of a table.

        Raises:
            CatalogError: the sampler failed
        """
        pass
