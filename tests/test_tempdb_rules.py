"""
Tests for the tempdb rule evaluator.

Covers rule order, each rule's computation, violation detection, and
error propagation.
"""

import pytest

from tempdbaudit.application.collectors.tempdb import (
    TempdbRuleEvaluator,
    evaluate,
    recommended_file_count,
)
from tempdbaudit.application.common.constants import (
    NOTES_TF1118,
    NOTES_TF1118_DEFAULT,
    RULE_FILE_COUNT,
    RULE_FILE_GROWTH,
    RULE_FILE_LOCATION,
    RULE_FILE_MAXSIZE,
    RULE_ORDER,
    RULE_TF1118,
)
from tempdbaudit.domain.errors import QueryError, ServerConnectionError

from fakes import FakeConnector, file_row, make_context


def _by_rule(report):
    return {r.rule: r for r in report.results}


class TestRuleOrder:
    """Five rules, always in the same order."""

    def test_rules_in_fixed_order(self, healthy_files):
        conn = FakeConnector({"tempdb_files": healthy_files})
        report = TempdbRuleEvaluator(make_context(conn)).evaluate()

        assert tuple(r.rule for r in report.results) == RULE_ORDER

    def test_repeated_runs_are_identical(self, healthy_files):
        conn = FakeConnector({"tempdb_files": healthy_files})
        ctx = make_context(conn)

        first = TempdbRuleEvaluator(ctx).evaluate()
        second = TempdbRuleEvaluator(ctx).evaluate()

        assert first.results == second.results

    def test_healthy_server_has_no_violations(self, healthy_files):
        conn = FakeConnector({"tempdb_files": healthy_files})
        results, has_violations = evaluate(make_context(conn, processor_count=4))

        assert len(results) == 5
        assert has_violations is False


class TestTraceFlagRule:
    """TF 1118 rule."""

    @pytest.mark.parametrize("version", [13, 14, 15, 16, 17])
    def test_modern_versions_skip_query(self, version, healthy_files):
        conn = FakeConnector({"tempdb_files": healthy_files})
        report = TempdbRuleEvaluator(make_context(conn, version_major=version)).evaluate()

        tf = _by_rule(report)[RULE_TF1118]
        assert tf.recommended is True
        assert tf.current_setting is True
        assert tf.notes == NOTES_TF1118_DEFAULT
        assert "trace_status" not in conn.executed

    def test_legacy_version_with_flag_enabled(self, healthy_files):
        conn = FakeConnector({
            "tempdb_files": healthy_files,
            "trace_status": [
                {"TraceFlag": 1117, "Status": 1, "Global": 1, "Session": 0},
                {"TraceFlag": 1118, "Status": 1, "Global": 1, "Session": 0},
            ],
        })
        report = TempdbRuleEvaluator(make_context(conn, version_major=12)).evaluate()

        tf = _by_rule(report)[RULE_TF1118]
        assert tf.current_setting is True
        assert tf.notes == NOTES_TF1118
        assert "trace_status" in conn.executed
        assert not report.has_violations

    def test_legacy_version_without_flag(self, healthy_files):
        conn = FakeConnector({
            "tempdb_files": healthy_files,
            "trace_status": [{"TraceFlag": 3226, "Status": 1, "Global": 1, "Session": 0}],
        })
        report = TempdbRuleEvaluator(make_context(conn, version_major=11)).evaluate()

        tf = _by_rule(report)[RULE_TF1118]
        assert tf.recommended is True
        assert tf.current_setting is False
        assert report.has_violations
        assert report.violations == [tf]

    def test_legacy_version_no_trace_flags_at_all(self, healthy_files):
        # DBCC TRACESTATUS returns no result set when nothing is enabled
        conn = FakeConnector({"tempdb_files": healthy_files})
        report = TempdbRuleEvaluator(make_context(conn, version_major=10)).evaluate()

        assert _by_rule(report)[RULE_TF1118].current_setting is False

    def test_flag_must_match_whole_token(self, healthy_files):
        conn = FakeConnector({
            "tempdb_files": healthy_files,
            "trace_status": [{"TraceFlag": 11180}, {"TraceFlag": 21118}],
        })
        report = TempdbRuleEvaluator(make_context(conn, version_major=12)).evaluate()

        assert _by_rule(report)[RULE_TF1118].current_setting is False

    def test_flag_reported_as_string(self, healthy_files):
        conn = FakeConnector({
            "tempdb_files": healthy_files,
            "trace_status": [{"TraceFlag": "1118"}],
        })
        report = TempdbRuleEvaluator(make_context(conn, version_major=12)).evaluate()

        assert _by_rule(report)[RULE_TF1118].current_setting is True


class TestFileCountRule:
    """Data file count vs. logical cores capped at 8."""

    @pytest.mark.parametrize("cores,expected", [
        (0, 0), (1, 1), (4, 4), (8, 8), (16, 8), (64, 8),
    ])
    def test_recommended_file_count(self, cores, expected):
        assert recommended_file_count(cores) == expected

    def test_counts_only_data_files(self):
        rows = [
            file_row("T:\\t1.mdf"),
            file_row("T:\\t2.mdf"),
            file_row("T:\\templog.ldf", file_type="LOG"),
        ]
        conn = FakeConnector({"tempdb_files": rows})
        report = TempdbRuleEvaluator(make_context(conn, processor_count=16)).evaluate()

        count = _by_rule(report)[RULE_FILE_COUNT]
        assert count.recommended == 8
        assert count.current_setting == 2
        assert count.is_violation

    def test_fewer_cores_than_files(self):
        rows = [file_row(f"T:\\t{i}.mdf") for i in range(4)]
        conn = FakeConnector({"tempdb_files": rows})
        report = TempdbRuleEvaluator(make_context(conn, processor_count=2)).evaluate()

        count = _by_rule(report)[RULE_FILE_COUNT]
        assert count.recommended == 2
        assert count.current_setting == 4
        assert report.has_violations


class TestFileGrowthRule:
    """Percentage growth across data and log files."""

    def test_counts_percentage_growth_in_data_and_log(self):
        rows = [
            file_row("T:\\t1.mdf"),
            file_row("T:\\t2.mdf"),
            file_row("T:\\t3.mdf", percent=True),
            file_row("T:\\templog.ldf", file_type="LOG", percent=True),
        ]
        conn = FakeConnector({"tempdb_files": rows})
        report = TempdbRuleEvaluator(make_context(conn, processor_count=3)).evaluate()

        growth = _by_rule(report)[RULE_FILE_GROWTH]
        assert growth.recommended == 0
        assert growth.current_setting == 2
        assert growth.is_violation


class TestFileLocationRule:
    """Files on the system drive."""

    def test_counts_system_drive_files(self):
        rows = [
            file_row("C:\\tempdb.mdf"),
            file_row("D:\\tempdb2.mdf"),
            file_row("C:\\templog.ldf", file_type="LOG"),
        ]
        conn = FakeConnector({"tempdb_files": rows})
        report = TempdbRuleEvaluator(make_context(conn, processor_count=2)).evaluate()

        location = _by_rule(report)[RULE_FILE_LOCATION]
        assert location.recommended == 0
        assert location.current_setting == 2

    def test_prefix_is_case_insensitive(self):
        rows = [file_row("c:\\Program Files\\tempdb.mdf")]
        conn = FakeConnector({"tempdb_files": rows})
        report = TempdbRuleEvaluator(make_context(conn, processor_count=1)).evaluate()

        assert _by_rule(report)[RULE_FILE_LOCATION].current_setting == 1

    def test_c_elsewhere_in_path_does_not_count(self):
        rows = [file_row("D:\\C:\\tempdb.mdf"), file_row("/var/opt/mssql/data/tempdb.mdf")]
        conn = FakeConnector({"tempdb_files": rows})
        report = TempdbRuleEvaluator(make_context(conn, processor_count=2)).evaluate()

        assert _by_rule(report)[RULE_FILE_LOCATION].current_setting == 0


class TestMaxSizeRule:
    """Capped file sizes are informational only."""

    def test_counts_only_positive_max_size(self):
        rows = [
            file_row("T:\\t1.mdf", max_size=0),
            file_row("T:\\t2.mdf", max_size=100),
            file_row("T:\\templog.ldf", file_type="LOG", max_size=-1),
        ]
        conn = FakeConnector({"tempdb_files": rows})
        report = TempdbRuleEvaluator(make_context(conn, processor_count=2)).evaluate()

        max_size = _by_rule(report)[RULE_FILE_MAXSIZE]
        assert max_size.recommended is None
        assert max_size.current_setting == 1

    def test_never_causes_violation(self, healthy_files):
        rows = [dict(r, MaxSize=2048) for r in healthy_files]
        conn = FakeConnector({"tempdb_files": rows})
        report = TempdbRuleEvaluator(make_context(conn, processor_count=4)).evaluate()

        max_size = _by_rule(report)[RULE_FILE_MAXSIZE]
        assert max_size.current_setting == 5
        assert max_size.is_best_practice
        assert not report.has_violations


class TestEmptyCatalog:
    """No tempdb files returned is not an error."""

    def test_all_file_rules_report_zero(self):
        conn = FakeConnector({"tempdb_files": []})
        report = TempdbRuleEvaluator(make_context(conn, processor_count=4)).evaluate()
        rules = _by_rule(report)

        assert rules[RULE_FILE_COUNT].current_setting == 0
        assert rules[RULE_FILE_GROWTH].current_setting == 0
        assert rules[RULE_FILE_LOCATION].current_setting == 0
        assert rules[RULE_FILE_MAXSIZE].current_setting == 0
        # 0 data files vs. 4 recommended
        assert report.violations == [rules[RULE_FILE_COUNT]]

    def test_filestream_rows_are_ignored(self, healthy_files):
        rows = healthy_files + [file_row("C:\\fs", file_type="FILESTREAM", max_size=10)]
        conn = FakeConnector({"tempdb_files": rows})
        report = TempdbRuleEvaluator(make_context(conn, processor_count=4)).evaluate()

        assert _by_rule(report)[RULE_FILE_LOCATION].current_setting == 0
        assert not report.has_violations


class TestErrorPropagation:
    """Failures surface to the caller with no partial report."""

    def test_catalog_query_error_propagates(self):
        conn = FakeConnector(errors={
            "tempdb_files": QueryError("SQL01", "tempdb_files", "permission denied"),
        })
        with pytest.raises(QueryError, match="permission denied"):
            TempdbRuleEvaluator(make_context(conn)).evaluate()

    def test_trace_status_error_propagates(self, healthy_files):
        conn = FakeConnector(
            {"tempdb_files": healthy_files},
            errors={"trace_status": QueryError("SQL01", "trace_status", "VIEW SERVER STATE")},
        )
        with pytest.raises(QueryError):
            evaluate(make_context(conn, version_major=12))

    def test_connection_error_propagates(self):
        conn = FakeConnector(errors={
            "tempdb_files": ServerConnectionError("SQL01", "communication link failure"),
        })
        with pytest.raises(ServerConnectionError):
            evaluate(make_context(conn))

    def test_malformed_row_becomes_query_error(self):
        conn = FakeConnector({"tempdb_files": [{"LogicalName": "tempdev"}]})
        with pytest.raises(QueryError, match="tempdb_files"):
            TempdbRuleEvaluator(make_context(conn)).evaluate()
