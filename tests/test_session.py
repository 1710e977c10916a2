"""
Tests for the shard editing session against the simulated catalog.
"""
import pytest

from network.simulated_catalog import SimulatedCatalog
from planner import CommitResult, Session
from sharding import (
    CatalogError,
    DistributionSample,
    IndexOutOfRangeError,
    InsufficientSampleError,
    InvalidDesiredCountError,
    InvalidSplitPointError,
    MalformedSampleError,
    PartialSuggestionError,
    ShardSet,
)

TABLE = "orders"


@pytest.fixture
def catalog(balanced_sample) -> SimulatedCatalog:
    """In-memory catalog with one table on a single shard"""
    catalog = SimulatedCatalog(latency_ms=0, failure_rate=0.0)
    catalog.create_table(TABLE, sample=balanced_sample)
    return catalog


@pytest.fixture
def session(catalog: SimulatedCatalog) -> Session:
    return Session(TABLE, catalog=catalog, sampler=catalog)


class TestLocalEdits:
    """Operations that never reach the catalog"""

    def test_new_session_starts_on_full_range(self):
        session = Session(TABLE)

        assert session.baseline == ShardSet.full_range()
        assert session.working == ShardSet.full_range()
        assert not session.has_unsaved_changes()

    def test_load_sets_baseline_and_working(self, four_shards):
        session = Session(TABLE)

        session.load(four_shards)

        assert session.baseline is four_shards
        assert session.working is four_shards
        assert not session.has_unsaved_changes()

    def test_apply_suggestion(self, balanced_sample):
        session = Session(TABLE)

        result = session.apply_suggestion(balanced_sample, 2)

        assert session.working is result
        assert result.split_points == ["b"]
        assert session.baseline == ShardSet.full_range()
        assert session.has_unsaved_changes()
        assert session.working_loads() == [20, 20]

    def test_partial_suggestion_still_adopted(self):
        session = Session(TABLE)

        with pytest.raises(PartialSuggestionError) as exc_info:
            session.apply_suggestion([("a", 100), ("b", 1)], 4)

        assert exc_info.value.achieved_count == 2
        assert session.working == exc_info.value.shard_set
        assert session.has_unsaved_changes()

    @pytest.mark.parametrize("sample,desired_count,error", [
        ([("a", 1), ("b", 1)], 0, InvalidDesiredCountError),
        ([("a", 1)], 3, InsufficientSampleError),
    ])
    def test_failed_suggestion_leaves_working(self, four_shards, sample, desired_count, error):
        session = Session(TABLE)
        session.load(four_shards)

        with pytest.raises(error):
            session.apply_suggestion(sample, desired_count)

        assert session.working is four_shards
        assert session.working_loads() is None

    @pytest.mark.parametrize("sample", [
        [("b", 1), ("a", 1)],
        None,
        [],
    ])
    def test_single_shard_suggestion_ignores_sample(self, four_shards, sample):
        session = Session(TABLE)
        session.load(four_shards)

        result = session.apply_suggestion(sample, 1)

        assert result == ShardSet.full_range()
        assert session.working is result
        assert session.working_loads() is None

    @pytest.mark.parametrize("sample", [
        [("b", 1), ("a", 1)],
        None,
    ])
    def test_desired_count_checked_before_sample(self, four_shards, sample):
        session = Session(TABLE)
        session.load(four_shards)

        with pytest.raises(InvalidDesiredCountError):
            session.apply_suggestion(sample, 0)

        assert session.working is four_shards

    def test_suggestion_from_one_shot_iterator(self, balanced_sample):
        session = Session(TABLE)

        session.apply_suggestion((entry for entry in balanced_sample), 2)

        assert session.working.split_points == ["b"]
        assert session.working_loads() == [20, 20]

    def test_malformed_sample_leaves_working(self, four_shards):
        session = Session(TABLE)
        session.load(four_shards)

        with pytest.raises(MalformedSampleError):
            session.apply_suggestion([("b", 1), ("a", 1)], 2)

        assert session.working is four_shards
        assert session.working_loads() is None

    def test_split_and_merge(self):
        session = Session(TABLE)

        session.apply_split(0, "m")
        assert session.working.split_points == ["m"]
        assert session.has_unsaved_changes()

        session.apply_merge(0)
        assert session.working == ShardSet.full_range()
        # Structural equality, not identity
        assert not session.has_unsaved_changes()

    def test_failed_edits_leave_working(self, four_shards):
        session = Session(TABLE)
        session.load(four_shards)
        session.apply_split(0, "b")
        edited = session.working

        with pytest.raises(InvalidSplitPointError):
            session.apply_split(0, "z")
        with pytest.raises(IndexOutOfRangeError):
            session.apply_merge(len(edited) - 1)

        assert session.working is edited

    def test_reset_to_baseline(self, four_shards):
        session = Session(TABLE)
        session.load(four_shards)
        session.apply_merge(0)

        session.reset_to_baseline()

        assert session.working is four_shards
        assert not session.has_unsaved_changes()

    def test_stats(self, balanced_sample):
        session = Session(TABLE)
        session.apply_suggestion(balanced_sample, 2)

        stats = session.get_stats()

        assert stats["table_id"] == TABLE
        assert stats["baseline"]["shard_count"] == 1
        assert stats["working"]["split_points"] == ["b"]
        assert stats["has_unsaved_changes"] is True
        assert stats["working_loads"] == [20, 20]


@pytest.mark.integration
class TestCatalogExchange:
    """Fetch, sample and commit through the simulated catalog"""

    @pytest.mark.asyncio
    async def test_refresh_loads_committed_set(self, catalog, session):
        await catalog.start()

        await session.refresh()

        assert session.baseline == ShardSet.full_range()
        assert not session.has_unsaved_changes()

    @pytest.mark.asyncio
    async def test_refresh_discards_edits(self, catalog, session):
        await catalog.start()
        session.apply_split(0, "m")

        await session.refresh()

        assert not session.has_unsaved_changes()

    @pytest.mark.asyncio
    async def test_suggest_from_sampler(self, catalog, session):
        await catalog.start()

        result = await session.suggest_from_sampler(2)

        assert result.split_points == ["b"]
        assert session.working is result

    @pytest.mark.asyncio
    async def test_commit_success(self, catalog, session):
        await catalog.start()
        await session.refresh()
        session.apply_suggestion(await catalog.sample(TABLE), 4)

        result = await session.commit()

        assert isinstance(result, CommitResult)
        assert result.ok
        assert result.shard_set == ShardSet.from_split_points(["a", "b", "c"])
        assert session.baseline == result.shard_set
        assert not session.has_unsaved_changes()
        assert await catalog.fetch(TABLE) == result.shard_set

    @pytest.mark.asyncio
    async def test_commit_failure_keeps_edits(self, catalog, session):
        await catalog.start()
        await session.refresh()
        session.apply_split(0, "m")
        edited = session.working
        catalog.reject_commits(TABLE, "table is locked")

        result = await session.commit()

        assert not result.ok
        assert isinstance(result.error, CatalogError)
        assert result.error.status == 409
        assert str(result.error) == "table is locked"
        assert session.working is edited
        assert session.baseline == ShardSet.full_range()
        assert session.has_unsaved_changes()
        assert await catalog.fetch(TABLE) == ShardSet.full_range()

        # Retry after the catalog recovers
        catalog.accept_commits(TABLE)
        retry = await session.commit()

        assert retry.ok
        assert session.baseline == edited
        assert not session.has_unsaved_changes()

    @pytest.mark.asyncio
    async def test_commit_to_stopped_catalog(self, catalog, session):
        session.apply_split(0, "m")

        result = await session.commit()

        assert result.error.status == 503
        assert session.has_unsaved_changes()

    @pytest.mark.asyncio
    async def test_commit_unknown_table(self, catalog):
        await catalog.start()
        session = Session("missing", catalog=catalog)

        result = await session.commit()

        assert result.error.status == 404

    @pytest.mark.asyncio
    async def test_without_collaborators(self):
        session = Session(TABLE)

        result = await session.commit()
        assert isinstance(result.error, CatalogError)

        with pytest.raises(CatalogError):
            await session.refresh()
        with pytest.raises(CatalogError):
            await session.suggest_from_sampler(2)

    @pytest.mark.asyncio
    async def test_last_commit_wins(self, catalog):
        await catalog.start()
        first = Session(TABLE, catalog=catalog)
        second = Session(TABLE, catalog=catalog)
        await first.refresh()
        await second.refresh()

        first.apply_split(0, "f")
        second.apply_split(0, "s")
        await first.commit()
        await second.commit()

        assert await catalog.fetch(TABLE) == ShardSet.from_split_points(["s"])
        assert catalog.commit_log == [TABLE, TABLE]

    @pytest.mark.asyncio
    async def test_simulated_failures(self, balanced_sample):
        catalog = SimulatedCatalog(latency_ms=0, failure_rate=1.0)
        catalog.create_table(TABLE, sample=balanced_sample)
        await catalog.start()

        with pytest.raises(CatalogError):
            await catalog.fetch(TABLE)

        catalog.set_failure_rate(0.0)
        assert await catalog.sample(TABLE) == DistributionSample(balanced_sample)
