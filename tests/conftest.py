"""
Shared pytest configuration and fixtures.
"""
import os
import sys

import pytest

# Add project root to the path
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from sharding import DistributionSample, ShardSet  # noqa: E402


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "integration: tests that exercise the catalog collaborators")


@pytest.fixture
def balanced_sample() -> DistributionSample:
    """Four keys with equal weight"""
    return DistributionSample([("a", 10), ("b", 10), ("c", 10), ("d", 10)])


@pytest.fixture
def four_shards() -> ShardSet:
    """[-inf, d), [d, k), [k, r), [r, +inf)"""
    return ShardSet.from_split_points(["d", "k", "r"])
