"""
Tests for the snapshot store and the matchSnapshot validators.
"""

import pytest
import yaml

from rendertest.snapshot import SnapshotCache, SnapshotComparer, SnapshotError, SnapshotKey
from rendertest.validators import MatchSnapshotRawValidator, MatchSnapshotValidator, ValidateContext

KEY = SnapshotKey("suite", "test", 1)


@pytest.fixture
def snap_path(tmp_path):
    return tmp_path / "__snapshot__" / "deployment_test.yaml.snap"


class TestRoundTrip:
    """record then compare."""

    def test_record_then_compare_matches(self, snap_path):
        cache = SnapshotCache(snap_path, is_updating=True)
        cache.record(KEY, {"kind": "Deployment", "spec": {"replicas": 1}})
        result = cache.compare(KEY, {"spec": {"replicas": 1}, "kind": "Deployment"})
        assert result.passed

    def test_structural_difference_fails(self, snap_path):
        cache = SnapshotCache(snap_path)
        cache._entries = {"suite": {"test": {1: {"replicas": 1}}}}
        result = cache.compare(KEY, {"replicas": 2})
        assert not result.passed
        assert result.cached == {"replicas": 1}
        assert cache.stats.failed == 1

    def test_update_mode_rewrites_then_matches(self, snap_path):
        cache = SnapshotCache(snap_path, is_updating=True)
        cache.record(KEY, {"replicas": 1})
        updated = cache.compare(KEY, {"replicas": 2})
        assert updated.passed and updated.updated
        assert cache.compare(KEY, {"replicas": 2}).passed
        assert cache.stats.updated == 1
        assert cache.stats.matched == 1

    def test_compare_without_update_leaves_store(self, snap_path):
        cache = SnapshotCache(snap_path, is_updating=True)
        cache.record(KEY, {"replicas": 1})
        result = cache.compare(KEY, {"replicas": 2}, update=False)
        assert not result.passed
        assert cache.load(KEY) == {"replicas": 1}
        assert cache.stats.updated == 0

    def test_record_requires_update_mode(self, snap_path):
        with pytest.raises(SnapshotError):
            SnapshotCache(snap_path).record(KEY, {})


class TestMissingSnapshot:
    def test_missing_fails_without_update(self, snap_path):
        cache = SnapshotCache(snap_path)
        result = cache.compare(KEY, {"a": 1})
        assert not result.passed
        assert result.missing

    def test_missing_is_recorded_in_update_mode(self, snap_path):
        cache = SnapshotCache(snap_path, is_updating=True)
        result = cache.compare(KEY, {"a": 1})
        assert result.passed and result.new
        assert cache.load(KEY) == {"a": 1}
        assert cache.stats.inserted == 1


class TestPersistence:
    """Files on disk."""

    def test_store_and_restore(self, snap_path):
        cache = SnapshotCache(snap_path, is_updating=True)
        cache.compare(KEY, {"kind": "Service"})
        assert cache.store_to_file_if_needed()
        assert yaml.safe_load(snap_path.read_text()) == {"suite": {"test": {1: {"kind": "Service"}}}}

        restored = SnapshotCache(snap_path)
        restored.restore()
        assert restored.has(KEY)
        assert restored.compare(KEY, {"kind": "Service"}).passed

    def test_nothing_written_when_unchanged(self, snap_path):
        cache = SnapshotCache(snap_path)
        assert not cache.store_to_file_if_needed()
        assert not snap_path.exists()

    def test_missing_file_is_empty_store(self, snap_path):
        cache = SnapshotCache(snap_path)
        cache.restore()
        assert not cache.has(KEY)

    def test_invalid_file_raises(self, snap_path):
        snap_path.parent.mkdir(parents=True)
        snap_path.write_text("- just\n- a list\n")
        with pytest.raises(SnapshotError):
            SnapshotCache(snap_path).restore()

    def test_vanished_snapshots_dropped_in_update_mode(self, snap_path):
        cache = SnapshotCache(snap_path, is_updating=True)
        cache.record(KEY, {"a": 1})
        cache.record(SnapshotKey("suite", "gone", 1), {"b": 2})
        cache.store_to_file_if_needed()

        rerun = SnapshotCache(snap_path, is_updating=True)
        rerun.restore()
        rerun.compare(KEY, {"a": 1})
        assert rerun.store_to_file_if_needed()
        assert rerun.stats.vanished == 1
        assert yaml.safe_load(snap_path.read_text()) == {"suite": {"test": {1: {"a": 1}}}}

    def test_kept_tests_survive_pruning(self, snap_path):
        cache = SnapshotCache(snap_path, is_updating=True)
        cache.record(KEY, {"a": 1})
        cache.record(SnapshotKey("suite", "skipped", 1), {"b": 2})
        cache.record(SnapshotKey("suite", "gone", 1), {"c": 3})
        cache.store_to_file_if_needed()

        rerun = SnapshotCache(snap_path, is_updating=True)
        rerun.restore()
        rerun.compare(KEY, {"a": 1})
        rerun.keep_test("suite", "skipped")
        rerun.store_to_file_if_needed()
        assert rerun.stats.vanished == 1
        assert set(yaml.safe_load(snap_path.read_text())["suite"]) == {"test", "skipped"}

    def test_vanished_snapshots_kept_without_update(self, snap_path):
        cache = SnapshotCache(snap_path, is_updating=True)
        cache.record(KEY, {"a": 1})
        cache.store_to_file_if_needed()

        rerun = SnapshotCache(snap_path)
        rerun.restore()
        assert not rerun.store_to_file_if_needed()
        assert rerun.stats.vanished == 1
        assert SnapshotCache.for_suite_file(snap_path.parent.parent / "deployment_test.yaml").path == snap_path


class TestValidators:
    """matchSnapshot through a comparer."""

    def test_ordinals_follow_comparison_order(self, snap_path, make_manifest):
        cache = SnapshotCache(snap_path, is_updating=True)
        manifests = (make_manifest({"a": 1}, index=0), make_manifest({"b": 2}, index=1))
        context = ValidateContext(manifests=manifests, snapshot=SnapshotComparer(cache, "suite", "test"))
        assert MatchSnapshotValidator().validate(context) == (True, [])
        assert cache.load(SnapshotKey("suite", "test", 1)) == {"a": 1}
        assert cache.load(SnapshotKey("suite", "test", 2)) == {"b": 2}

    def test_missing_snapshot_diagnostic(self, snap_path, make_manifest):
        cache = SnapshotCache(snap_path)
        context = ValidateContext(
            manifests=(make_manifest({"a": 1}),),
            snapshot=SnapshotComparer(cache, "suite", "test"),
        )
        passed, errors = MatchSnapshotValidator().validate(context)
        assert not passed
        assert errors[-1] == "\tno snapshot recorded for snapshot 1, run with --update-snapshot to record it"

    def test_mismatch_shows_diff(self, snap_path, make_manifest):
        cache = SnapshotCache(snap_path, is_updating=True)
        cache.record(KEY, {"replicas": 1})
        cache.is_updating = False
        context = ValidateContext(
            manifests=(make_manifest({"replicas": 3}),),
            snapshot=SnapshotComparer(cache, "suite", "test"),
        )
        passed, errors = MatchSnapshotValidator().validate(context)
        assert not passed
        assert "Expected to match snapshot 1:" in errors
        assert "\t-replicas: 1" in errors
        assert "\t+replicas: 3" in errors

    def test_path_snapshot(self, snap_path, deployment):
        cache = SnapshotCache(snap_path, is_updating=True)
        context = ValidateContext(manifests=(deployment,), snapshot=SnapshotComparer(cache, "suite", "test"))
        assert MatchSnapshotValidator(path="metadata.labels").validate(context)[0]
        assert cache.load(KEY) == {"app": "web", "tier": "frontend"}

    def test_negated_match_fails(self, snap_path, make_manifest):
        cache = SnapshotCache(snap_path, is_updating=True)
        cache.record(KEY, {"a": 1})
        cache.is_updating = False
        context = ValidateContext(
            manifests=(make_manifest({"a": 1}),),
            negative=True,
            snapshot=SnapshotComparer(cache, "suite", "test"),
        )
        passed, errors = MatchSnapshotValidator().validate(context)
        assert not passed
        assert "Expected NOT to match snapshot 1:" in errors

    def test_negated_match_never_rewrites_in_update_mode(self, snap_path, make_manifest):
        cache = SnapshotCache(snap_path, is_updating=True)
        cache.record(KEY, {"a": 1})
        context = ValidateContext(
            manifests=(make_manifest({"a": 2}),),
            negative=True,
            snapshot=SnapshotComparer(cache, "suite", "test"),
        )
        assert MatchSnapshotValidator().validate(context) == (True, [])
        assert cache.load(KEY) == {"a": 1}
        assert cache.stats.updated == 0

    def test_raw_snapshot(self, snap_path, make_manifest):
        cache = SnapshotCache(snap_path, is_updating=True)
        notes = make_manifest(source="templates/NOTES.txt", raw="hello")
        context = ValidateContext(manifests=(notes,), snapshot=SnapshotComparer(cache, "suite", "test"))
        assert MatchSnapshotRawValidator().validate(context)[0]
        assert cache.load(KEY) == "hello"

    def test_no_store_attached(self, make_manifest):
        passed, errors = MatchSnapshotValidator().validate(ValidateContext(manifests=(make_manifest({}),)))
        assert not passed
        assert errors == ["Error:", "\tno snapshot store attached to this run"]
