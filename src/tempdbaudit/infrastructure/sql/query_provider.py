"""
SQL Query Provider - version-aware query text for the tempdb checks.

Every query is read-only and parameterless. Queries are returned as
SqlQuery objects so failures can be reported by name.

Usage:
    provider = get_query_provider(version_major=12)  # SQL 2014
    rows = connector.execute_query(provider.get_tempdb_files())
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class SqlQuery:
    """A named, read-only T-SQL query."""
    name: str
    sql: str
    description: str = ""

    def __str__(self) -> str:
        return self.sql


# Version detection must work before the version is known, so it is shared.
# PARSENAME is used because ProductMajorVersion only exists from SQL 2012.
SERVER_INFO_QUERY = SqlQuery(
    name="server_info",
    description="Server name, version and logical processor count",
    sql="""
        SELECT
            CAST(SERVERPROPERTY('ServerName') AS NVARCHAR(256)) AS ServerName,
            CAST(SERVERPROPERTY('InstanceName') AS NVARCHAR(256)) AS InstanceName,
            CAST(SERVERPROPERTY('ProductVersion') AS NVARCHAR(128)) AS Version,
            CAST(PARSENAME(CAST(SERVERPROPERTY('ProductVersion') AS NVARCHAR(128)), 4) AS INT) AS VersionMajor,
            CAST(SERVERPROPERTY('Edition') AS NVARCHAR(256)) AS Edition,
            (SELECT cpu_count FROM sys.dm_os_sys_info) AS CPUCount
    """,
)


class QueryProvider:
    """
    tempdb queries for SQL Server 2016 and later.

    The trace flag query is still available, but the checker does not
    need it on these versions.
    """

    MIN_VERSION: ClassVar[int] = 13
    MAX_VERSION: ClassVar[int] = 99

    def __init__(self, version_major: int):
        self.version_major = version_major

    def get_tempdb_files(self) -> SqlQuery:
        """tempdb file catalog: one row per data/log file."""
        # CAST bit to INT to avoid ODBC type surprises on older drivers
        return SqlQuery(
            name="tempdb_files",
            description="tempdb data and log files",
            sql="""
                SELECT
                    name AS LogicalName,
                    physical_name AS FileName,
                    type_desc AS FileType,
                    max_size AS MaxSize,
                    CAST(is_percent_growth AS INT) AS IsPercentGrowth
                FROM tempdb.sys.database_files
                ORDER BY file_id
            """,
        )

    def get_trace_status(self) -> SqlQuery:
        """Globally enabled trace flags (TraceFlag, Status, Global, Session)."""
        return SqlQuery(
            name="trace_status",
            description="Globally enabled trace flags",
            sql="DBCC TRACESTATUS(-1) WITH NO_INFOMSGS",
        )


class Sql2008Provider(QueryProvider):
    """
    Query provider for SQL Server 2008 through 2014.

    tempdb.sys.database_files is used rather than sys.master_files so the
    catalog reflects the running files, not the startup definition.
    """

    MIN_VERSION = 10
    MAX_VERSION = 12

    def get_tempdb_files(self) -> SqlQuery:
        # FILESTREAM/FULLTEXT rows cannot appear in tempdb before 2016, filter anyway
        return SqlQuery(
            name="tempdb_files",
            description="tempdb data and log files",
            sql="""
                SELECT
                    name AS LogicalName,
                    physical_name AS FileName,
                    type_desc AS FileType,
                    max_size AS MaxSize,
                    CAST(is_percent_growth AS INT) AS IsPercentGrowth
                FROM tempdb.sys.database_files
                WHERE type IN (0, 1)
                ORDER BY file_id
            """,
        )


_PROVIDERS = (Sql2008Provider, QueryProvider)


def get_query_provider(version_major: int) -> QueryProvider:
    """
    Factory function to get the query provider for a SQL Server version.

    Args:
        version_major: Major version number (10 = 2008 ... 17 = 2025)

    Returns:
        QueryProvider instance appropriate for the version
    """
    for provider_class in _PROVIDERS:
        if provider_class.MIN_VERSION <= version_major <= provider_class.MAX_VERSION:
            return provider_class(version_major)
    # Unknown or pre-2008 versions get the oldest provider, future ones the newest
    if version_major < Sql2008Provider.MIN_VERSION:
        return Sql2008Provider(version_major)
    return QueryProvider(version_major)
