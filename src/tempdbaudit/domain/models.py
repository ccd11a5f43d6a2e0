"""
Domain models for tempdbaudit.

This module contains the entities produced by a tempdb check:
- RuleResult: outcome of one best-practice rule
- FileCatalogEntry: one tempdb file as reported by the server
- TempdbReport: the ordered rule results for one instance
- SqlServerInfo: version and processor facts detected on connect

These models are pure data structures with no I/O dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


# ============================================================================
# Enumerations
# ============================================================================

class FileCategory(Enum):
    """tempdb file category (sys.database_files.type_desc)."""
    DATA = "ROWS"
    LOG = "LOG"


class GrowthType(Enum):
    """Autogrowth mode of a database file."""
    FIXED_SIZE = "fixed_size"
    PERCENTAGE = "percentage"


# ============================================================================
# Core Domain Models
# ============================================================================

@dataclass
class SqlServerInfo:
    """SQL Server instance information."""
    server_name: str
    instance_name: str | None
    version: str
    version_major: int
    edition: str
    cpu_count: int


@dataclass(frozen=True)
class FileCatalogEntry:
    """
    A single tempdb file.

    Attributes:
        name: Logical file name
        file_name: Physical path on the server (e.g. "T:\\tempdb.mdf")
        category: Data (ROWS) or log file
        max_size: Configured maximum size in 8 KB pages; -1 or 0 mean unlimited
        growth_type: Fixed-size or percentage autogrowth
    """
    name: str
    file_name: str
    category: FileCategory
    max_size: int
    growth_type: GrowthType

    @property
    def is_data(self) -> bool:
        return self.category is FileCategory.DATA

    @property
    def has_max_size(self) -> bool:
        """True when growth is capped rather than unlimited."""
        # Unlimited log files report 268435456 pages (2 TB) and count as capped
        return self.max_size > 0


@dataclass(frozen=True)
class RuleResult:
    """
    Outcome of one tempdb best-practice rule.

    Attributes:
        rule: Rule name
        recommended: Recommended value, or None when the rule is informational
        current_setting: Value observed on the server
        notes: Explanation of the rule
    """
    rule: str
    recommended: bool | int | None
    current_setting: bool | int
    notes: str

    @property
    def is_best_practice(self) -> bool:
        if self.recommended is None:
            return True
        return self.recommended == self.current_setting

    @property
    def is_violation(self) -> bool:
        return not self.is_best_practice

    def to_dict(self) -> dict:
        return {
            "rule": self.rule,
            "recommended": self.recommended,
            "current_setting": self.current_setting,
            "is_best_practice": self.is_best_practice,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class TempdbReport:
    """
    Ordered rule results for one SQL Server instance.

    Order of `results` is the evaluation order and is stable across runs.
    """
    server_name: str
    instance_name: str
    version_major: int
    results: tuple[RuleResult, ...] = field(default_factory=tuple)

    @property
    def has_violations(self) -> bool:
        return any(r.is_violation for r in self.results)

    @property
    def violations(self) -> list[RuleResult]:
        return [r for r in self.results if r.is_violation]

    def to_dict(self) -> dict:
        return {
            "server": self.server_name,
            "instance": self.instance_name,
            "version_major": self.version_major,
            "has_violations": self.has_violations,
            "results": [r.to_dict() for r in self.results],
        }
