"""
Domain layer for tempdbaudit.

Pure data structures and error types. No I/O dependencies.
"""

from tempdbaudit.domain.errors import (
    ConfigurationError,
    QueryError,
    ServerConnectionError,
    TempdbAuditError,
)
from tempdbaudit.domain.models import (
    FileCatalogEntry,
    FileCategory,
    GrowthType,
    RuleResult,
    SqlServerInfo,
    TempdbReport,
)

__all__ = [
    "ConfigurationError",
    "FileCatalogEntry",
    "FileCategory",
    "GrowthType",
    "QueryError",
    "RuleResult",
    "ServerConnectionError",
    "SqlServerInfo",
    "TempdbAuditError",
    "TempdbReport",
]
