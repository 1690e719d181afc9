"""
Snapshot store

Records rendered content keyed by (suite, test, ordinal) and compares
later runs against it structurally.

Usage:
    from rendertest.snapshot import SnapshotCache, SnapshotComparer

    cache = SnapshotCache.for_suite_file("tests/deployment_test.yaml", is_updating=False)
    cache.restore()
    comparer = SnapshotComparer(cache, "test deployment", "should render")
    result = comparer.compare(manifest.tree)
    cache.store_to_file_if_needed()
"""

from .cache import (
    CompareResult,
    SnapshotCache,
    SnapshotComparer,
    SnapshotError,
    SnapshotKey,
    SnapshotStats,
)

__all__ = [
    "CompareResult",
    "SnapshotCache",
    "SnapshotComparer",
    "SnapshotError",
    "SnapshotKey",
    "SnapshotStats",
]
