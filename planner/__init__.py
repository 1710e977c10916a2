"""
Shard planning session.
Tracks a table's committed baseline and the operator's working copy.
"""
from planner.session import Session, CommitResult

__all__ = [
    "Session",
    "CommitResult",
]
