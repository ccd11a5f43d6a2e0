"""
Collectors package.

Rule evaluators that read from a live SQL Server through a ServerContext.
"""

from .base import QueryExecutor, ServerContext
from .tempdb import TempdbRuleEvaluator, evaluate

__all__ = ["QueryExecutor", "ServerContext", "TempdbRuleEvaluator", "evaluate"]
