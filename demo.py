"""
Quick demo: repartition a table against an in-memory or HTTP catalog.
"""
import asyncio
import random
import sys

from config import get_settings, setup_logging
from network import HTTPCatalog, SimulatedCatalog
from planner import Session
from sharding import DistributionSample, PartialSuggestionError, ShardingError


def build_sample(num_keys: int = 200, seed: int = 7) -> DistributionSample:
    """Skewed sample over user ids: a few hot ranges, a long cold tail."""
    rng = random.Random(seed)
    entries = []
    for i in range(num_keys):
        hot = 40 <= i < 60 or 150 <= i < 160
        entries.append((f"user{i:05d}", rng.randint(500, 900) if hot else rng.randint(10, 60)))
    return DistributionSample(entries)


def print_shards(session: Session):
    loads = session.working_loads()
    for i, key_range in enumerate(session.working):
        load = f"~{loads[i]} rows" if loads else ""
        print(f"     {i:2d}. {key_range!r:40s} {load}")


async def quick_demo(table_id: str = "users", desired_count: int = 6):
    """Run a full fetch / suggest / edit / commit cycle."""
    settings = get_settings()

    print("=" * 70)
    print(" Shard Planner - range repartitioning")
    print("=" * 70)

    if settings.is_simulated:
        catalog = SimulatedCatalog()
        catalog.create_table(table_id, sample=build_sample())
    else:
        catalog = HTTPCatalog()

    async with catalog:
        session = Session(table_id, catalog=catalog, sampler=catalog)

        print(f"\n[1/5] Fetching committed shards for '{table_id}'...")
        await session.refresh()
        print(f"  OK {len(session.baseline)} shard(s) committed")

        print(f"\n[2/5] Suggesting {desired_count} balanced shards from the sampler...")
        try:
            await session.suggest_from_sampler(desired_count)
        except PartialSuggestionError as e:
            print(f"  Warning: {e}")
        print_shards(session)

        print("\n[3/5] Hand edits: split the last shard, merge the first two...")
        last = len(session.working) - 1
        try:
            session.apply_split(last, "user00180")
            session.apply_merge(0)
        except ShardingError as e:
            print(f"  Edit rejected: {e}")
        print_shards(session)
        print(f"  Unsaved changes: {session.has_unsaved_changes()}")

        print("\n[4/5] Committing...")
        result = await session.commit()
        if result.ok:
            print(f"  OK {len(result.shard_set)} shards persisted")
        else:
            print(f"  Commit failed, edits kept: {result.error}")

        print("\n[5/5] Session state:")
        stats = session.get_stats()
        print(f"  Baseline shards: {stats['baseline']['shard_count']}")
        print(f"  Split points: {stats['baseline']['split_points']}")
        print(f"  Unsaved changes: {stats['has_unsaved_changes']}")

    print("=" * 70)


if __name__ == "__main__":
    setup_logging()
    try:
        asyncio.run(quick_demo())
    except KeyboardInterrupt:
        print("\n\nWarning: demo interrupted by user")
        sys.exit(0)
