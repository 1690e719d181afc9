"""
Tests for job, suite and chart execution.
"""

import yaml

from rendertest.config import RunnerConfig
from rendertest.reporting import ResultStatus
from rendertest.runner import TestRunner, discover_test_files


PASS_FAIL_PASS = """\
suite: deployment
templates:
  - deployment.yaml
tests:
  - it: runs three assertions
    asserts:
      - isKind:
          of: Deployment
      - equal:
          path: spec.replicas
          value: 5
      - exists:
          path: metadata.labels.app
"""

SNAPSHOT_JOBS = """\
suite: deployment
templates:
  - deployment.yaml
tests:
  - it: checks kind
    asserts:
      - isKind:
          of: Deployment
  - it: snap
    asserts:
      - matchSnapshot: {}
"""


def snapshot_file(chart_dir):
    return chart_dir / "tests" / "__snapshot__" / "deployment_test.yaml.snap"


def run(chart_dir, **options):
    return TestRunner(RunnerConfig(**options)).run([chart_dir])


class TestJobs:
    """One render per job, assertions in declared order."""

    def test_passing_suite(self, chart_dir, write_suite):
        write_suite("deployment_test.yaml", """\
            suite: deployment
            templates:
              - deployment.yaml
            tests:
              - it: renders defaults
                asserts:
                  - isKind:
                      of: Deployment
                  - equal:
                      path: spec.replicas
                      value: 1
              - it: honours set values
                set:
                  replicaCount: 4
                  image.tag: v2
                release:
                  name: rel
                asserts:
                  - equal:
                      path: spec.replicas
                      value: 4
                  - equal:
                      path: metadata.name
                      value: rel-web
                  - matchRegex:
                      path: spec.template.spec.containers[0].image
                      pattern: ":v2$"
        """)
        report = run(chart_dir)
        assert report.passed
        (suite,) = report.suites
        assert suite.status == ResultStatus.PASSED
        assert [job.status for job in suite.jobs] == [ResultStatus.PASSED, ResultStatus.PASSED]

    def test_without_fail_fast_all_assertions_run(self, chart_dir, write_suite):
        write_suite("deployment_test.yaml", PASS_FAIL_PASS)
        report = run(chart_dir)
        job = report.suites[0].jobs[0]
        assert job.status == ResultStatus.FAILED
        assert [a.status for a in job.assertions] == [
            ResultStatus.PASSED,
            ResultStatus.FAILED,
            ResultStatus.PASSED,
        ]

    def test_fail_fast_stops_at_first_failure(self, chart_dir, write_suite):
        write_suite("deployment_test.yaml", PASS_FAIL_PASS)
        report = run(chart_dir, failfast=True)
        job = report.suites[0].jobs[0]
        assert job.status == ResultStatus.FAILED
        assert [a.index for a in job.failed_assertions] == [1]
        assert job.assertions[2].status == ResultStatus.SKIPPED
        assert job.assertions[2].diagnostics == []

    def test_render_error_fails_other_assertions(self, chart_dir, write_suite):
        write_suite("deployment_test.yaml", """\
            suite: deployment
            templates:
              - deployment.yaml
            tests:
              - it: fails without repository
                set:
                  image.repository: ""
                asserts:
                  - failedTemplate:
                      errorPattern: "image.repository is required"
                  - isKind:
                      of: Deployment
        """)
        job = run(chart_dir).suites[0].jobs[0]
        failed_template, is_kind = job.assertions
        assert failed_template.passed
        assert not is_kind.passed
        assert is_kind.diagnostics[0] == "Error:"
        assert "image.repository is required" in is_kind.diagnostics[1]

    def test_template_and_document_index_selection(self, chart_dir, write_suite):
        write_suite("service_test.yaml", """\
            suite: service
            tests:
              - it: selects the second document
                template: service.yaml
                asserts:
                  - hasDocuments:
                      count: 2
                  - isKind:
                      of: ConfigMap
                    documentIndex: 1
                  - isKind:
                      of: Deployment
                    template: deployment.yaml
              - it: reports an unknown index
                template: service.yaml
                documentIndex: 7
                asserts:
                  - isKind:
                      of: Service
        """)
        selects, unknown = run(chart_dir).suites[0].jobs
        assert selects.passed
        assert not unknown.passed
        assert "documentIndex 7 out of range" in unknown.assertions[0].diagnostics[1]

    def test_no_manifest_found(self, chart_dir, write_suite):
        write_suite("deployment_test.yaml", """\
            suite: deployment
            tests:
              - it: targets nothing
                template: nothing-*.yaml
                asserts:
                  - isKind:
                      of: Deployment
        """)
        job = run(chart_dir).suites[0].jobs[0]
        assert job.assertions[0].diagnostics == ["Error:", "\tno manifest found for template nothing-*.yaml"]

    def test_missing_values_file_is_job_error(self, chart_dir, write_suite):
        write_suite("deployment_test.yaml", """\
            suite: deployment
            tests:
              - it: reads a values file
                values:
                  - missing.yaml
                asserts:
                  - hasDocuments:
                      count: 1
        """)
        job = run(chart_dir).suites[0].jobs[0]
        assert job.status == ResultStatus.ERROR
        assert "cannot read values file" in job.error_message

    def test_values_precedence(self, chart_dir, write_suite):
        (chart_dir / "tests" / "suite-values.yaml").write_text("replicaCount: 2\n")
        (chart_dir / "tests" / "job-values.yaml").write_text("replicaCount: 4\n")
        write_suite("deployment_test.yaml", """\
            suite: deployment
            templates: [deployment.yaml]
            values: [suite-values.yaml]
            tests:
              - it: suite values beat chart values
                asserts:
                  - equal: {path: spec.replicas, value: 2}
              - it: empty job set changes nothing
                set: {}
                asserts:
                  - equal: {path: spec.replicas, value: 2}
              - it: job values beat suite values
                values: [job-values.yaml]
                asserts:
                  - equal: {path: spec.replicas, value: 4}
              - it: job set beats everything
                values: [job-values.yaml]
                set: {replicaCount: 9}
                asserts:
                  - equal: {path: spec.replicas, value: 9}
        """)
        report = run(chart_dir)
        assert report.passed, [j.failure_text() for j in report.jobs]


class TestSuites:
    """Suite-level errors, fail-fast and snapshots."""

    def test_invalid_suite_is_error(self, chart_dir, write_suite):
        write_suite("broken_test.yaml", "suite: broken\n")
        report = run(chart_dir)
        (suite,) = report.suites
        assert suite.status == ResultStatus.ERROR
        assert "tests" in suite.error_message
        assert not report.passed

    def test_fail_fast_records_remaining_suites_as_skipped(self, chart_dir, write_suite):
        write_suite("a_test.yaml", PASS_FAIL_PASS.replace("runs three", "first") + """\
  - it: second
    asserts:
      - isKind:
          of: Deployment
""")
        write_suite("b_test.yaml", PASS_FAIL_PASS.replace("suite: deployment", "suite: other"))
        report = run(chart_dir, failfast=True)
        assert [s.name for s in report.suites] == ["deployment", "other"]
        first, second = report.suites[0].jobs
        assert first.status == ResultStatus.FAILED
        assert second.status == ResultStatus.SKIPPED

        other = report.suites[1]
        assert other.status == ResultStatus.SKIPPED
        assert [(j.name, j.status) for j in other.jobs] == [("runs three assertions", ResultStatus.SKIPPED)]
        assert not report.passed

    def test_fail_fast_records_later_charts_as_skipped(self, tmp_path):
        from conftest import write_chart

        web = write_chart(tmp_path / "a")
        db = write_chart(tmp_path / "b", name="db")
        (web / "tests" / "web_test.yaml").write_text(PASS_FAIL_PASS)
        (db / "tests" / "db_test.yaml").write_text(PASS_FAIL_PASS.replace("suite: deployment", "suite: db"))

        report = TestRunner(RunnerConfig(failfast=True)).run([web, db])
        assert [(s.chart, s.name, s.status) for s in report.suites] == [
            ("web", "deployment", ResultStatus.FAILED),
            ("db", "db", ResultStatus.SKIPPED),
        ]
        assert [j.status for j in report.suites[1].jobs] == [ResultStatus.SKIPPED]

    def test_snapshot_recorded_then_matched(self, chart_dir, write_suite):
        write_suite("deployment_test.yaml", """\
            suite: deployment
            templates: [deployment.yaml]
            tests:
              - it: matches snapshot
                asserts:
                  - matchSnapshot: {}
        """)
        first = run(chart_dir)
        assert not first.passed
        assert "no snapshot recorded" in first.jobs[0].failure_text()

        updated = run(chart_dir, update_snapshot=True)
        assert updated.passed
        assert updated.snapshot.inserted == 1
        snap = chart_dir / "tests" / "__snapshot__" / "deployment_test.yaml.snap"
        recorded = yaml.safe_load(snap.read_text())
        assert recorded["deployment"]["matches snapshot"][1]["kind"] == "Deployment"

        again = run(chart_dir)
        assert again.passed
        assert again.snapshot.matched == 1

    def test_corrupt_snapshot_file_is_error(self, chart_dir, write_suite):
        write_suite("deployment_test.yaml", PASS_FAIL_PASS)
        snap_dir = chart_dir / "tests" / "__snapshot__"
        snap_dir.mkdir()
        (snap_dir / "deployment_test.yaml.snap").write_text("[not, a, mapping]\n")
        (suite,) = run(chart_dir).suites
        assert suite.status == ResultStatus.ERROR

    def test_fail_fast_update_keeps_snapshots_of_skipped_jobs(self, chart_dir, write_suite):
        write_suite("deployment_test.yaml", SNAPSHOT_JOBS)
        assert run(chart_dir, update_snapshot=True).passed

        write_suite("deployment_test.yaml", SNAPSHOT_JOBS.replace("of: Deployment", "of: Service"))
        report = run(chart_dir, update_snapshot=True, failfast=True)
        assert report.suites[0].jobs[1].status == ResultStatus.SKIPPED
        assert "snap" in yaml.safe_load(snapshot_file(chart_dir).read_text())["deployment"]
        assert report.snapshot.vanished == 0

    def test_update_keeps_snapshots_of_render_failures(self, chart_dir, write_suite):
        write_suite("deployment_test.yaml", SNAPSHOT_JOBS)
        assert run(chart_dir, update_snapshot=True).passed

        write_suite("deployment_test.yaml", SNAPSHOT_JOBS.replace(
            "  - it: snap\n", '  - it: snap\n    set:\n      image.repository: ""\n'
        ))
        report = run(chart_dir, update_snapshot=True)
        assert report.suites[0].jobs[1].status == ResultStatus.FAILED
        assert "snap" in yaml.safe_load(snapshot_file(chart_dir).read_text())["deployment"]

    def test_update_drops_snapshots_of_removed_jobs(self, chart_dir, write_suite):
        write_suite("deployment_test.yaml", SNAPSHOT_JOBS)
        assert run(chart_dir, update_snapshot=True).passed

        write_suite("deployment_test.yaml", SNAPSHOT_JOBS.replace("- it: snap", "- it: renamed"))
        report = run(chart_dir, update_snapshot=True)
        assert report.snapshot.vanished == 1
        assert set(yaml.safe_load(snapshot_file(chart_dir).read_text())["deployment"]) == {"renamed"}


class TestCharts:
    def test_missing_chart_is_error_suite(self, tmp_path):
        report = run(tmp_path / "nope")
        (suite,) = report.suites
        assert suite.status == ResultStatus.ERROR
        assert "Chart.yaml not found" in suite.error_message

    def test_subchart_suites(self, chart_dir, write_suite):
        from conftest import write_chart

        sub = write_chart(chart_dir / "charts", name="db")
        (sub / "tests" / "db_test.yaml").write_text(
            "suite: db\ntests:\n  - it: renders\n    template: deployment.yaml\n"
            "    asserts:\n      - isKind: {of: Deployment}\n"
        )
        write_suite("deployment_test.yaml", PASS_FAIL_PASS.replace("value: 5", "value: 1"))

        with_sub = run(chart_dir)
        assert [s.chart for s in with_sub.suites] == ["web", "db"]
        assert with_sub.passed

        without_sub = run(chart_dir, with_subchart=False)
        assert [s.chart for s in without_sub.suites] == ["web"]

    def test_discover_test_files(self, chart_dir, write_suite):
        b = write_suite("b_test.yaml", PASS_FAIL_PASS)
        a = write_suite("a_test.yaml", PASS_FAIL_PASS)
        write_suite("notes.yaml", PASS_FAIL_PASS)
        found = discover_test_files(chart_dir, ["tests/*_test.yaml", "tests/a_*.yaml"])
        assert found == [a, b]

    def test_chart_tests_path(self, chart_dir, write_suite):
        path = write_suite("x_test.yaml", PASS_FAIL_PASS)
        assert discover_test_files(chart_dir, ["*_test.yaml"], chart_tests_path="tests") == [path]
