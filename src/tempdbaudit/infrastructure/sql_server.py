"""
SQL Server connection and query execution module.

Handles:
- Connection string building
- ODBC driver detection and fallback
- SQL Server version and processor count detection
- Query execution and result parsing
- Translation of pyodbc errors into tempdbaudit errors
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import pyodbc

from tempdbaudit.domain.errors import QueryError, ServerConnectionError
from tempdbaudit.domain.models import SqlServerInfo
from tempdbaudit.infrastructure.sql.query_provider import SERVER_INFO_QUERY, SqlQuery


logger = logging.getLogger(__name__)

# Preferred drivers (newest first)
PREFERRED_DRIVERS = [
    "ODBC Driver 18 for SQL Server",
    "ODBC Driver 17 for SQL Server",
    "ODBC Driver 13 for SQL Server",
    "ODBC Driver 11 for SQL Server",
]

FALLBACK_DRIVERS = [
    "SQL Server Native Client 11.0",
    "SQL Server Native Client 10.0",
    "SQL Server",
]

# pyodbc errors that mean the link itself is gone, not that the query was bad
_CONNECTION_ERRORS = (pyodbc.OperationalError, pyodbc.InterfaceError)


def _odbc_value(value: str) -> str:
    """Brace-quote a connection string value so `;` and `}` stay literal."""
    return "{" + value.replace("}", "}}") + "}"


class SqlConnector:
    """
    Single read-only SQL Server connection.

    Use as a context manager; the connection is opened on enter and
    closed on exit:

        with SqlConnector("SQL01\\PROD") as conn:
            rows = conn.execute_query("SELECT 1 AS One")
    """

    def __init__(self, server_instance: str, auth: str = "windows",
                 username: str | None = None, password: str | None = None,
                 connect_timeout: int = 30):
        """
        Initialize SQL connector.

        Args:
            server_instance: Server instance string (e.g., "SERVER\\INSTANCE" or "SERVER,PORT")
            auth: Authentication mode ('windows' or 'sql')
            username: SQL login (required if auth='sql')
            password: SQL password (required if auth='sql')
            connect_timeout: Login timeout in seconds
        """
        self.server_instance = server_instance
        self.auth = auth.lower()
        self.username = username
        self.password = password
        self.connect_timeout = connect_timeout
        self._connection_string: str | None = None
        self._connection: pyodbc.Connection | None = None

        logger.debug("SqlConnector initialized for %s (auth=%s)", server_instance, self.auth)

    def _detect_odbc_driver(self) -> str:
        """
        Detect best available ODBC driver.

        Raises:
            ServerConnectionError: If no suitable driver found
        """
        drivers = pyodbc.drivers()
        logger.debug("Available ODBC drivers: %s", drivers)

        for driver in PREFERRED_DRIVERS:
            if driver in drivers:
                logger.debug("Using ODBC driver: %s", driver)
                return driver

        for driver in FALLBACK_DRIVERS:
            if driver in drivers:
                logger.warning("Using fallback ODBC driver: %s", driver)
                return driver

        raise ServerConnectionError(
            self.server_instance,
            "No SQL Server ODBC driver found. Please install ODBC Driver 17 or 18.",
        )

    def build_connection_string(self) -> str:
        """Build ODBC connection string."""
        if self._connection_string:
            return self._connection_string

        driver = self._detect_odbc_driver()

        parts = [
            f"DRIVER={{{driver}}}",
            f"SERVER={self.server_instance}",
            "DATABASE=master",
            "ApplicationIntent=ReadOnly",
            "Encrypt=no",
            "TrustServerCertificate=yes",
        ]

        if self.auth == "sql":
            if not self.username or not self.password:
                raise ServerConnectionError(
                    self.server_instance,
                    "Username and password required for SQL authentication",
                )
            parts.append(f"UID={_odbc_value(self.username)}")
            parts.append(f"PWD={_odbc_value(self.password)}")
        else:
            parts.append("Trusted_Connection=yes")

        self._connection_string = ";".join(parts)
        logger.debug("Connection string built (credentials masked)")
        return self._connection_string

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    def connect(self) -> "SqlConnector":
        """
        Open the connection.

        Raises:
            ServerConnectionError: If the server cannot be reached or login fails
        """
        if self._connection is not None:
            return self

        conn_str = self.build_connection_string()
        try:
            self._connection = pyodbc.connect(
                conn_str, timeout=self.connect_timeout, autocommit=True, readonly=True
            )
        except pyodbc.Error as e:
            logger.error("Connection failed for %s: %s", self.server_instance, e)
            raise ServerConnectionError(self.server_instance, str(e)) from e

        logger.info("Connected to %s", self.server_instance)
        return self

    def close(self) -> None:
        if self._connection is None:
            return
        try:
            self._connection.close()
        except pyodbc.Error as e:
            logger.debug("Ignoring error while closing %s: %s", self.server_instance, e)
        finally:
            self._connection = None
        logger.debug("Connection to %s closed", self.server_instance)

    def __enter__(self) -> "SqlConnector":
        return self.connect()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def detect_server_info(self) -> SqlServerInfo:
        """
        Detect SQL Server version and logical processor count.

        Raises:
            ServerConnectionError, QueryError: If the query fails
        """
        rows = self.execute_query(SERVER_INFO_QUERY)
        if not rows:
            raise QueryError(self.server_instance, SERVER_INFO_QUERY.name, "no rows returned")
        row = rows[0]

        info = SqlServerInfo(
            server_name=row.get("ServerName") or self.server_instance,
            instance_name=row.get("InstanceName"),
            version=row.get("Version") or "",
            version_major=int(row.get("VersionMajor") or 0),
            edition=row.get("Edition") or "",
            cpu_count=int(row.get("CPUCount") or 0),
        )
        logger.info(
            "Detected SQL Server %s (%s), %d logical processors",
            info.version, info.edition, info.cpu_count,
        )
        return info

    def execute_query(self, query: SqlQuery | str) -> List[Dict[str, Any]]:
        """
        Execute SQL query and return results as list of dictionaries.

        Args:
            query: SqlQuery or raw SQL string

        Returns:
            List of dictionaries (column name -> value). Statements that
            produce no result set (e.g. DBCC with nothing to report)
            return an empty list.

        Raises:
            ServerConnectionError: If not connected or the link drops
            QueryError: If the server rejects the query
        """
        name = query.name if isinstance(query, SqlQuery) else "query"
        sql = str(query)

        if self._connection is None:
            raise ServerConnectionError(self.server_instance, "not connected")

        try:
            cursor = self._connection.cursor()
            try:
                cursor.execute(sql)
                if not cursor.description:
                    logger.debug("%s returned no result set", name)
                    return []
                columns = [column[0] for column in cursor.description]
                rows = cursor.fetchall()
            finally:
                cursor.close()
        except _CONNECTION_ERRORS as e:
            logger.error("Connection lost during %s on %s: %s", name, self.server_instance, e)
            raise ServerConnectionError(self.server_instance, str(e)) from e
        except pyodbc.Error as e:
            logger.error("Query %s failed on %s: %s", name, self.server_instance, e)
            raise QueryError(self.server_instance, name, str(e)) from e

        results = []
        for row in rows:
            row_dict = {}
            for i, column in enumerate(columns):
                value = row[i]
                if value is None or isinstance(value, (str, int, float, bool)):
                    row_dict[column] = value
                else:
                    row_dict[column] = str(value)
            results.append(row_dict)

        logger.debug("%s returned %d rows, %d columns", name, len(results), len(columns))
        return results
