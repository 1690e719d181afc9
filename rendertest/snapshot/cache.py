"""
Snapshot store.

Snapshots are kept in one YAML file per test-suite file, under a
__snapshot__ directory next to it:

    tests/__snapshot__/deployment_test.yaml.snap

    test deployment:              # suite
      should render defaults:     # test
        1:                        # ordinal of the comparison inside the test
          apiVersion: apps/v1
          kind: Deployment
          ...

Comparison is structural, so key order in the file does not matter.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ..compare import deep_equal

logger = logging.getLogger(__name__)

SNAPSHOT_DIR = "__snapshot__"
SNAPSHOT_SUFFIX = ".snap"


class SnapshotError(RuntimeError):
    """The snapshot file is unreadable, or the store was misused."""


@dataclass(frozen=True)
class SnapshotKey:
    """Identity of one recorded snapshot."""
    suite: str
    test: str
    ordinal: int


@dataclass(frozen=True)
class CompareResult:
    """
    Outcome of comparing content against the store.

    Attributes:
        key: The snapshot compared against
        passed: Content matched, or was recorded/updated in update mode
        cached: The previously recorded content (None when there was none)
        missing: Nothing was recorded and update mode is off
        new: Content was recorded for the first time
        updated: A mismatching snapshot was overwritten
    """
    key: SnapshotKey
    passed: bool
    cached: Any = None
    missing: bool = False
    new: bool = False
    updated: bool = False


@dataclass
class SnapshotStats:
    """Per-file counters reported in the run summary."""
    matched: int = 0
    inserted: int = 0
    updated: int = 0
    failed: int = 0
    vanished: int = 0

    @property
    def total(self) -> int:
        return self.matched + self.inserted + self.updated + self.failed

    def add(self, other: SnapshotStats) -> None:
        self.matched += other.matched
        self.inserted += other.inserted
        self.updated += other.updated
        self.failed += other.failed
        self.vanished += other.vanished


class SnapshotCache:
    """
    Keyed snapshot store backed by one file.

    Example:
        cache = SnapshotCache.for_suite_file(Path("tests/deployment_test.yaml"), is_updating=False)
        cache.restore()
        result = cache.compare(SnapshotKey("suite", "test", 1), manifest.tree)
        ...
        cache.store_to_file_if_needed()
    """

    def __init__(self, path: str | Path, is_updating: bool = False):
        self.path = Path(path)
        self.is_updating = is_updating
        self.stats = SnapshotStats()
        self._entries: dict[str, dict[str, dict[int, Any]]] = {}
        self._visited: set[SnapshotKey] = set()
        self._kept: set[tuple[str, str]] = set()
        self._changed = False
        self._lock = threading.Lock()

    @classmethod
    def for_suite_file(cls, suite_path: str | Path, is_updating: bool = False) -> SnapshotCache:
        """Create the cache that belongs to a test-suite file."""
        suite_path = Path(suite_path)
        return cls(suite_path.parent / SNAPSHOT_DIR / f"{suite_path.name}{SNAPSHOT_SUFFIX}", is_updating)

    def restore(self) -> None:
        """
        Load recorded snapshots from disk. A missing file is an empty store.

        Raises:
            SnapshotError: If the file cannot be read or is not a snapshot mapping
        """
        if not self.path.exists():
            return
        try:
            with open(self.path) as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise SnapshotError(f"cannot read snapshot file {self.path}: {e.strerror or e}") from e
        except yaml.YAMLError as e:
            raise SnapshotError(f"invalid YAML in snapshot file {self.path}: {e}") from e

        if not isinstance(data, dict) or not all(
            isinstance(tests, dict) and all(isinstance(entries, dict) for entries in tests.values())
            for tests in data.values()
        ):
            raise SnapshotError(f"snapshot file {self.path} is not a suite/test/ordinal mapping")

        with self._lock:
            self._entries = {
                str(suite): {
                    str(test): {int(ordinal): content for ordinal, content in entries.items()}
                    for test, entries in tests.items()
                }
                for suite, tests in data.items()
            }
        logger.debug(f"Restored snapshots from {self.path}")

    def has(self, key: SnapshotKey) -> bool:
        with self._lock:
            return self._has(key)

    def load(self, key: SnapshotKey) -> Any:
        """Return the recorded content, or None when nothing is recorded."""
        with self._lock:
            return self._entries.get(key.suite, {}).get(key.test, {}).get(key.ordinal)

    def compare(self, key: SnapshotKey, content: Any, update: bool = True) -> CompareResult:
        """
        Compare content with the recorded snapshot.

        Absent snapshots are recorded in update mode and fail otherwise.
        Mismatches are overwritten in update mode and fail otherwise.
        With update=False the store is never written, even in update mode.
        """
        writable = self.is_updating and update
        with self._lock:
            self._visited.add(key)

            if not self._has(key):
                if writable:
                    self._put(key, content)
                    self.stats.inserted += 1
                    logger.info(f"New snapshot {key.test} #{key.ordinal} in {self.path}")
                    return CompareResult(key=key, passed=True, new=True)
                self.stats.failed += 1
                return CompareResult(key=key, passed=False, missing=True)

            cached = self._entries[key.suite][key.test][key.ordinal]
            if deep_equal(cached, content):
                self.stats.matched += 1
                return CompareResult(key=key, passed=True, cached=cached)

            if writable:
                self._put(key, content)
                self.stats.updated += 1
                logger.info(f"Updated snapshot {key.test} #{key.ordinal} in {self.path}")
                return CompareResult(key=key, passed=True, cached=cached, updated=True)

            self.stats.failed += 1
            return CompareResult(key=key, passed=False, cached=cached)

    def record(self, key: SnapshotKey, content: Any) -> None:
        """
        Record content unconditionally.

        Raises:
            SnapshotError: If the store is not in update mode
        """
        if not self.is_updating:
            raise SnapshotError("snapshots can only be recorded in update mode")
        with self._lock:
            self._visited.add(key)
            self._put(key, content)

    def keep_test(self, suite: str, test: str) -> None:
        """Protect every snapshot of a test that did not run to completion from pruning."""
        with self._lock:
            self._kept.add((suite, test))

    def store_to_file_if_needed(self) -> bool:
        """
        Write the store when something changed.

        In update mode, snapshots not visited during the run are dropped,
        except those of tests passed to keep_test().
        The file is replaced atomically.

        Returns:
            True if the file was written
        """
        with self._lock:
            vanished = [
                key for key in self._all_keys()
                if key not in self._visited and (key.suite, key.test) not in self._kept
            ]
            self.stats.vanished = len(vanished)
            if vanished and self.is_updating:
                for key in vanished:
                    self._remove(key)
            elif vanished:
                logger.warning(f"{len(vanished)} obsolete snapshot(s) in {self.path}")

            if not self._changed:
                return False

            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w") as f:
                    yaml.safe_dump(self._entries, f, sort_keys=True, allow_unicode=True, default_flow_style=False)
                os.replace(tmp_name, self.path)
            except Exception:
                Path(tmp_name).unlink(missing_ok=True)
                raise

            self._changed = False
            logger.debug(f"Wrote snapshots to {self.path}")
            return True

    def _has(self, key: SnapshotKey) -> bool:
        return key.ordinal in self._entries.get(key.suite, {}).get(key.test, {})

    def _put(self, key: SnapshotKey, content: Any) -> None:
        self._entries.setdefault(key.suite, {}).setdefault(key.test, {})[key.ordinal] = content
        self._changed = True

    def _remove(self, key: SnapshotKey) -> None:
        tests = self._entries[key.suite]
        del tests[key.test][key.ordinal]
        if not tests[key.test]:
            del tests[key.test]
        if not tests:
            del self._entries[key.suite]
        self._changed = True

    def _all_keys(self) -> list[SnapshotKey]:
        return [
            SnapshotKey(suite, test, ordinal)
            for suite, tests in self._entries.items()
            for test, entries in tests.items()
            for ordinal in entries
        ]


class SnapshotComparer:
    """Hands out snapshot ordinals for one test, in comparison order."""

    def __init__(self, cache: SnapshotCache, suite: str, test: str):
        self.cache = cache
        self.suite = suite
        self.test = test
        self._ordinal = 0

    def compare(self, content: Any, update: bool = True) -> CompareResult:
        self._ordinal += 1
        return self.cache.compare(SnapshotKey(self.suite, self.test, self._ordinal), content, update)
