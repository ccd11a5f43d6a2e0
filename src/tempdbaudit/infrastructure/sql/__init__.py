"""
SQL infrastructure package.

Version-specific query text and row-to-model mapping.
"""

from .query_provider import QueryProvider, get_query_provider
from .result_mapper import map_file_catalog

__all__ = ["QueryProvider", "get_query_provider", "map_file_catalog"]
