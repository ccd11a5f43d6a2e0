"""
Configuration domain package.

This package contains the domain models describing which SQL Server
instances to check and how to authenticate to them.
"""

from .models import AuthType, SqlTarget

__all__ = [
    "AuthType",
    "SqlTarget",
]
