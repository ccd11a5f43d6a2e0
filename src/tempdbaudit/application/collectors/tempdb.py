"""
tempdb best-practice rule evaluator.

Runs five checks, in a fixed order, against one instance:

1. TF 1118 Enabled          - uniform extent allocation
2. File Count               - data files = logical cores, capped at 8
3. File Growth in Percent   - no percentage autogrowth
4. File Location            - nothing on the system drive
5. File MaxSize Set         - informational only
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from tempdbaudit.application.collectors.base import ServerContext
from tempdbaudit.application.common.constants import (
    MAX_RECOMMENDED_DATA_FILES,
    NOTES_FILE_COUNT,
    NOTES_FILE_GROWTH,
    NOTES_FILE_LOCATION,
    NOTES_FILE_MAXSIZE,
    NOTES_TF1118,
    NOTES_TF1118_DEFAULT,
    RULE_FILE_COUNT,
    RULE_FILE_GROWTH,
    RULE_FILE_LOCATION,
    RULE_FILE_MAXSIZE,
    RULE_TF1118,
    SYSTEM_DRIVE_PREFIX,
    TF1118_DEFAULT_VERSION,
    TRACE_FLAG_1118,
)
from tempdbaudit.domain.errors import QueryError
from tempdbaudit.domain.models import FileCatalogEntry, GrowthType, RuleResult, TempdbReport
from tempdbaudit.infrastructure.sql.result_mapper import map_file_catalog

logger = logging.getLogger(__name__)


class TempdbRuleEvaluator:
    """
    Evaluates the tempdb rules for one ServerContext.

    Query failures are not caught here; a failed query aborts the whole
    evaluation and no partial report is produced.
    """

    def __init__(self, context: ServerContext) -> None:
        self.ctx = context
        self.conn = context.connector
        self.prov = context.query_provider

    def evaluate(self) -> TempdbReport:
        """Run all rules and return the ordered report."""
        label = self.ctx.server_name or "server"
        logger.info("Checking tempdb configuration on %s", label)

        # Catalog is loaded before any rule runs
        files = self._load_file_catalog()
        data_files = [f for f in files if f.is_data]

        results = (
            self._check_trace_flag(),
            self._check_file_count(data_files),
            self._check_file_growth(files),
            self._check_file_location(files),
            self._check_max_size(files),
        )

        report = TempdbReport(
            server_name=self.ctx.server_name,
            instance_name=self.ctx.instance_name,
            version_major=self.ctx.version_major,
            results=results,
        )
        for result in report.violations:
            logger.warning(
                "%s: %s is %s (recommended %s)",
                label, result.rule, result.current_setting, result.recommended,
            )
        logger.info(
            "tempdb check on %s finished: %d rules, %d violations",
            label, len(results), len(report.violations),
        )
        return report

    # ------------------------------------------------------------------
    # Data loading
    # ------------------------------------------------------------------

    def _load_file_catalog(self) -> list[FileCatalogEntry]:
        query = self.prov.get_tempdb_files()
        rows = self.conn.execute_query(query)
        try:
            files = map_file_catalog(rows)
        except ValidationError as e:
            raise QueryError(self.ctx.server_name, query.name, f"unexpected row shape: {e}") from e
        logger.debug("tempdb has %d files (%d data)", len(files), sum(f.is_data for f in files))
        return files

    def _enabled_trace_flags(self) -> list[str]:
        rows = self.conn.execute_query(self.prov.get_trace_status())
        joined = ",".join(str(r.get("TraceFlag", "")) for r in rows)
        return [flag.strip() for flag in joined.split(",") if flag.strip()]

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _check_trace_flag(self) -> RuleResult:
        if self.ctx.version_major >= TF1118_DEFAULT_VERSION:
            return RuleResult(
                rule=RULE_TF1118,
                recommended=True,
                current_setting=True,
                notes=NOTES_TF1118_DEFAULT,
            )

        flags = self._enabled_trace_flags()
        logger.debug("Global trace flags: %s", flags or "none")
        return RuleResult(
            rule=RULE_TF1118,
            recommended=True,
            current_setting=str(TRACE_FLAG_1118) in flags,
            notes=NOTES_TF1118,
        )

    def _check_file_count(self, data_files: list[FileCatalogEntry]) -> RuleResult:
        return RuleResult(
            rule=RULE_FILE_COUNT,
            recommended=recommended_file_count(self.ctx.processor_count),
            current_setting=len(data_files),
            notes=NOTES_FILE_COUNT,
        )

    def _check_file_growth(self, files: list[FileCatalogEntry]) -> RuleResult:
        return RuleResult(
            rule=RULE_FILE_GROWTH,
            recommended=0,
            current_setting=sum(1 for f in files if f.growth_type is GrowthType.PERCENTAGE),
            notes=NOTES_FILE_GROWTH,
        )

    def _check_file_location(self, files: list[FileCatalogEntry]) -> RuleResult:
        prefix = SYSTEM_DRIVE_PREFIX.lower()
        return RuleResult(
            rule=RULE_FILE_LOCATION,
            recommended=0,
            current_setting=sum(1 for f in files if f.file_name.lower().startswith(prefix)),
            notes=NOTES_FILE_LOCATION,
        )

    def _check_max_size(self, files: list[FileCatalogEntry]) -> RuleResult:
        return RuleResult(
            rule=RULE_FILE_MAXSIZE,
            recommended=None,
            current_setting=sum(1 for f in files if f.has_max_size),
            notes=NOTES_FILE_MAXSIZE,
        )


def recommended_file_count(processor_count: int) -> int:
    """One data file per logical core, capped at 8."""
    return max(0, min(processor_count, MAX_RECOMMENDED_DATA_FILES))


def evaluate(context: ServerContext) -> tuple[list[RuleResult], bool]:
    """Evaluate tempdb rules and return (results, has_violations)."""
    report = TempdbRuleEvaluator(context).evaluate()
    return list(report.results), report.has_violations
