"""
Output formatters for tempdb reports.
"""

from .result_formatters import ReportFormatter

__all__ = ["ReportFormatter"]
