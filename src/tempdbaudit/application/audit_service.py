"""
tempdb audit service - owns connections and runs the rule evaluator.

For each target:
connect → detect version and processor count → evaluate rules → close.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, List

from tempdbaudit.application.collectors.base import ServerContext
from tempdbaudit.application.collectors.tempdb import TempdbRuleEvaluator
from tempdbaudit.domain.config import SqlTarget
from tempdbaudit.domain.errors import TempdbAuditError
from tempdbaudit.domain.models import TempdbReport
from tempdbaudit.infrastructure.sql.query_provider import get_query_provider

if TYPE_CHECKING:
    from tempdbaudit.infrastructure.sql_server import SqlConnector

logger = logging.getLogger(__name__)

ConnectorFactory = Callable[[SqlTarget], "SqlConnector"]


def connector_for(target: SqlTarget) -> SqlConnector:
    """Build an (unopened) SqlConnector for a target."""
    # Importing pyodbc requires the ODBC driver manager
    from tempdbaudit.infrastructure.sql_server import SqlConnector

    return SqlConnector(
        server_instance=target.server_instance,
        auth=target.auth_type.value,
        username=target.username,
        password=target.password,
        connect_timeout=target.connect_timeout,
    )


@dataclass
class TargetOutcome:
    """Result of checking one target: a report or the error that stopped it."""
    target: SqlTarget
    report: TempdbReport | None = None
    error: TempdbAuditError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def has_violations(self) -> bool:
        return self.report is not None and self.report.has_violations


class TempdbAuditService:
    """
    Runs tempdb checks against SQL Server targets.

    Usage:
        service = TempdbAuditService()
        report = service.check_target(target)
        for result in report.results:
            print(result.rule, result.current_setting)
    """

    def __init__(self, connector_factory: ConnectorFactory = connector_for) -> None:
        self.connector_factory = connector_factory

    def check_target(self, target: SqlTarget) -> TempdbReport:
        """
        Check one target.

        Raises:
            ServerConnectionError: If the server cannot be reached
            QueryError: If any query fails (no partial report)
        """
        logger.info("Checking target: %s", target.display_name)

        with self.connector_factory(target) as connector:
            info = connector.detect_server_info()
            context = ServerContext(
                connector=connector,
                version_major=info.version_major,
                processor_count=info.cpu_count,
                server_name=info.server_name or target.display_name,
                instance_name=info.instance_name or target.instance or "",
                query_provider=get_query_provider(info.version_major),
            )
            return TempdbRuleEvaluator(context).evaluate()

    def check_targets(self, targets: Iterable[SqlTarget]) -> List[TargetOutcome]:
        """
        Check several targets sequentially.

        A failing target is recorded with its error and the next target
        is still checked.
        """
        outcomes = []
        for target in targets:
            try:
                outcomes.append(TargetOutcome(target=target, report=self.check_target(target)))
            except TempdbAuditError as e:
                logger.error("Check failed for %s: %s", target.display_name, e)
                outcomes.append(TargetOutcome(target=target, error=e))
        return outcomes
