"""
Catalog service and sampler client over HTTP/REST.
Uses aiohttp for asynchronous requests.
"""
import asyncio
from typing import Any, Dict, Optional

import aiohttp

from config import get_settings
from network.catalog_interface import CatalogService, DistributionSampler
from network.wire import DistributionPayload, ShardSetPayload, parse_payload
from sharding.distribution import DistributionSample
from sharding.errors import CatalogError, WireFormatError
from sharding.shard_set import ShardSet


class HTTPCatalog(CatalogService, DistributionSampler):
    """
    HTTP client for a remote catalog.

    Endpoints:
        GET  /tables/{table_id}/shards        committed shard set
        PUT  /tables/{table_id}/shards        commit a shard set
        GET  /tables/{table_id}/distribution  key-density sample
    """

    def __init__(self, base_url: str = None, timeout: float = None):
        """
        Initialize the client.

        Args:
            base_url: Catalog root URL (e.g. "http://localhost:8080")
            timeout: Total request timeout in seconds
        """
        super().__init__(name="http")

        settings = get_settings()
        self.base_url = (base_url or settings.catalog_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.http_timeout

        self._session: Optional[aiohttp.ClientSession] = None

    async def start(self):
        """Open the HTTP session."""
        if self._session is not None:
            return

        self._session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )
        self.logger.info(f"HTTP catalog client started ({self.base_url})")

    async def stop(self):
        """Close the HTTP session."""
        if self._session is None:
            return

        await self._session.close()
        self._session = None
        self.logger.info("HTTP catalog client stopped")

    def is_running(self) -> bool:
        return self._session is not None

    def _shards_url(self, table_id: str) -> str:
        return f"{self.base_url}/tables/{table_id}/shards"

    def _distribution_url(self, table_id: str) -> str:
        return f"{self.base_url}/tables/{table_id}/distribution"

    async def _request(self, method: str, url: str, body: Dict = None) -> Any:
        """
        Send a request and return the decoded JSON body.

        Raises:
            CatalogError: not started, transport failure, timeout or non-2xx status
            WireFormatError: a 2xx response whose body is not JSON
        """
        if self._session is None:
            raise CatalogError("HTTP catalog client is not started")

        try:
            async with self._session.request(method, url, json=body) as response:
                if response.status >= 400:
                    message = await response.text()
                    self.logger.warning(f"{method} {url} returned status {response.status}")
                    raise CatalogError(
                        message or f"catalog returned status {response.status}",
                        status=response.status
                    )
                try:
                    return await response.json()
                except ValueError as e:
                    self.logger.warning(f"{method} {url} returned a body that is not JSON")
                    raise WireFormatError(f"catalog response is not JSON: {e}") from e

        except asyncio.TimeoutError as e:
            self.logger.warning(f"Timeout on {method} {url}")
            raise CatalogError(f"timeout after {self.timeout}s on {method} {url}") from e

        except aiohttp.ClientError as e:
            self.logger.error(f"HTTP client error on {method} {url}: {e}")
            raise CatalogError(f"request to catalog failed: {e}") from e

    async def fetch(self, table_id: str) -> ShardSet:
        data = await self._request("GET", self._shards_url(table_id))
        payload = parse_payload(ShardSetPayload, data)
        shard_set = payload.to_shard_set()

        self.logger.debug(f"Fetched {len(shard_set)} shards for table {table_id}")
        return shard_set

    async def commit(self, table_id: str, shard_set: ShardSet) -> ShardSet:
        body = ShardSetPayload.from_shard_set(table_id, shard_set)
        data = await self._request("PUT", self._shards_url(table_id), body.model_dump(mode="json"))
        persisted = parse_payload(ShardSetPayload, data).to_shard_set()

        self.logger.info(f"Committed {len(persisted)} shards for table {table_id}")
        return persisted

    async def sample(self, table_id: str) -> DistributionSample:
        data = await self._request("GET", self._distribution_url(table_id))
        sample = parse_payload(DistributionPayload, data).to_sample()

        self.logger.debug(f"Sampled {len(sample)} keys for table {table_id}")
        return sample
