"""
Error types raised by tempdbaudit.

All failures surface to the caller; nothing here is retried.
"""

from __future__ import annotations


class TempdbAuditError(Exception):
    """Base class for all tempdbaudit errors."""


class ServerConnectionError(TempdbAuditError):
    """
    The SQL Server connection could not be established or was lost.

    Covers missing ODBC drivers, login failures, unreachable servers and
    links dropped mid-query. Aborts the check for that target.
    """

    def __init__(self, server_instance: str, message: str):
        self.server_instance = server_instance
        super().__init__(f"[{server_instance}] {message}")


class QueryError(TempdbAuditError):
    """A diagnostic or catalog query failed on the server."""

    def __init__(self, server_instance: str, query_name: str, message: str):
        self.server_instance = server_instance
        self.query_name = query_name
        super().__init__(f"[{server_instance}] {query_name} failed: {message}")


class ConfigurationError(TempdbAuditError):
    """The targets file or a target definition is invalid."""
