"""
Context shared with rule evaluators.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Protocol

from tempdbaudit.infrastructure.sql.query_provider import QueryProvider, get_query_provider


class QueryExecutor(Protocol):
    """Anything that can run a read-only query and return rows as dicts."""

    def execute_query(self, query: Any) -> List[Dict[str, Any]]:
        ...


@dataclass
class ServerContext:
    """
    Read-only view of one connected SQL Server instance.

    Owned by the caller. Evaluators read from it and run queries through
    `connector`, but never open, close or modify it.
    """

    connector: QueryExecutor
    version_major: int
    processor_count: int
    server_name: str = ""
    instance_name: str = ""
    query_provider: QueryProvider | None = None

    def __post_init__(self) -> None:
        if self.query_provider is None:
            self.query_provider = get_query_provider(self.version_major)
