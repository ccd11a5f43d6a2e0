"""
Configuration domain models package.
"""

from .enums import AuthType
from .sql_target import SqlTarget

__all__ = [
    "AuthType",
    "SqlTarget",
]
