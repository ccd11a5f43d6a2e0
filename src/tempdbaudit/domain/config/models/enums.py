"""
Domain enums for configuration system.
"""

from enum import Enum


class AuthType(Enum):
    """Authentication types for SQL Server connections."""

    WINDOWS = "windows"
    SQL = "sql"
