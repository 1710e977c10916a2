"""
Shard editing session.

Holds the committed baseline of one table and the operator's working copy,
applies suggestions and hand edits to the working copy, and commits it to
the catalog service.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from network.catalog_interface import CatalogService, DistributionSampler
from sharding import mutator
from sharding.distribution import DistributionSample
from sharding.errors import CatalogError, PartialSuggestionError, ShardingError
from sharding.shard_set import ShardSet
from sharding.suggester import check_desired_count, estimate_shard_loads, suggest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitResult:
    """Outcome of a commit: the persisted shard set or the catalog's error."""
    shard_set: Optional[ShardSet] = None
    error: Optional[ShardingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Session:
    """
    Editing session for one table's partitioning.

    ``baseline`` is the last shard set fetched from or committed to the
    catalog and only changes on a successful load or commit. ``working`` is
    replaced by every suggestion, split and merge. Failed operations leave
    both untouched.
    """

    def __init__(
        self,
        table_id: str,
        catalog: CatalogService = None,
        sampler: DistributionSampler = None
    ):
        """
        Initialize the session.

        Args:
            table_id: Table being repartitioned
            catalog: Catalog service used by refresh() and commit()
            sampler: Distribution sampler used by suggest_from_sampler()
        """
        self.table_id = table_id
        self.catalog = catalog
        self.sampler = sampler

        self.baseline: ShardSet = ShardSet.full_range()
        self.working: ShardSet = self.baseline
        self.last_sample: Optional[DistributionSample] = None

    def load(self, fetched: ShardSet):
        """Adopt a fetched shard set as both baseline and working copy."""
        self.baseline = fetched
        self.working = fetched
        logger.info(f"Session {self.table_id}: loaded {len(fetched)} shards")

    async def refresh(self) -> ShardSet:
        """
        Fetch the committed shard set from the catalog and load it.

        Pending edits are discarded. On failure the session is unchanged.

        Raises:
            CatalogError: no catalog configured or the fetch failed
        """
        if self.catalog is None:
            raise CatalogError("no catalog service configured")

        fetched = await self.catalog.fetch(self.table_id)
        self.load(fetched)
        return fetched

    def apply_suggestion(self, sample, desired_count: int) -> ShardSet:
        """
        Replace the working copy with a suggested partitioning.

        Args:
            sample: DistributionSample or iterable of (key, approx_count)
            desired_count: Number of shards wanted

        Returns:
            The new working ShardSet

        Raises:
            PartialSuggestionError: fewer shards than requested; the smaller
                set has already been adopted as the working copy
            InvalidDesiredCountError, InsufficientSampleError,
                MalformedSampleError: nothing changed; the count is checked first
        """
        check_desired_count(desired_count)
        # One shard never reads the sample, so it is neither validated nor kept
        sample = DistributionSample.coerce(sample) if desired_count > 1 else None

        try:
            candidate = suggest(sample, desired_count)
        except PartialSuggestionError as e:
            self.working = e.shard_set
            self.last_sample = sample
            logger.warning(
                f"Session {self.table_id}: suggestion reached "
                f"{e.achieved_count}/{e.desired_count} shards"
            )
            raise

        self.working = candidate
        self.last_sample = sample
        logger.info(f"Session {self.table_id}: applied suggestion of {len(candidate)} shards")
        return candidate

    async def suggest_from_sampler(self, desired_count: int) -> ShardSet:
        """
        Sample the table and apply a suggestion for ``desired_count`` shards.

        Raises:
            CatalogError: no sampler configured or sampling failed
        """
        if self.sampler is None:
            raise CatalogError("no distribution sampler configured")

        sample = await self.sampler.sample(self.table_id)
        return self.apply_suggestion(sample, desired_count)

    def apply_split(self, index: int, point: Any) -> ShardSet:
        self.working = mutator.split(self.working, index, point)
        return self.working

    def apply_merge(self, index: int) -> ShardSet:
        self.working = mutator.merge(self.working, index)
        return self.working

    def reset_to_baseline(self) -> ShardSet:
        self.working = mutator.reset(self.baseline)
        return self.working

    def has_unsaved_changes(self) -> bool:
        return self.working != self.baseline

    def working_loads(self) -> Optional[List[int]]:
        """Estimated rows per working shard, from the last applied sample."""
        if self.last_sample is None:
            return None
        return estimate_shard_loads(self.last_sample, self.working)

    async def commit(self) -> CommitResult:
        """
        Send the working copy to the catalog.

        On success the confirmed shard set becomes the baseline. On failure
        the error is returned as-is and the session keeps its edits so the
        commit can be retried or the edits reset.

        Returns:
            CommitResult with the persisted ShardSet or the error
        """
        if self.catalog is None:
            return CommitResult(error=CatalogError("no catalog service configured"))

        submitted = self.working

        try:
            persisted = await self.catalog.commit(self.table_id, submitted)
        except ShardingError as e:
            logger.error(f"Session {self.table_id}: commit failed: {e}")
            return CommitResult(error=e)

        self.baseline = persisted
        # Edits made while the commit was in flight stay pending
        if self.working is submitted:
            self.working = persisted

        logger.info(f"Session {self.table_id}: committed {len(persisted)} shards")
        return CommitResult(shard_set=persisted)

    def get_stats(self) -> Dict:
        """Summary of the session state."""
        return {
            "table_id": self.table_id,
            "baseline": self.baseline.to_dict(),
            "working": self.working.to_dict(),
            "has_unsaved_changes": self.has_unsaved_changes(),
            "working_loads": self.working_loads(),
        }
