"""
SQL Result Mapper - type-safe mapping of catalog rows to domain objects.

Rows come from SqlConnector.execute_query() as dicts keyed by column alias.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from tempdbaudit.domain.models import FileCatalogEntry, FileCategory, GrowthType

logger = logging.getLogger(__name__)


class TempdbFileModel(BaseModel):
    """Type-safe model for one tempdb.sys.database_files row."""

    model_config = ConfigDict(populate_by_name=True)

    logical_name: str = Field("", alias="LogicalName")
    file_name: str = Field(..., alias="FileName")
    file_type: str = Field(..., alias="FileType")
    max_size: int = Field(-1, alias="MaxSize")
    is_percent_growth: bool = Field(False, alias="IsPercentGrowth")

    def to_entry(self) -> FileCatalogEntry:
        return FileCatalogEntry(
            name=self.logical_name,
            file_name=self.file_name,
            category=FileCategory(self.file_type.upper()),
            max_size=self.max_size,
            growth_type=(
                GrowthType.PERCENTAGE if self.is_percent_growth else GrowthType.FIXED_SIZE
            ),
        )


_KNOWN_TYPES = {c.value for c in FileCategory}


def map_file_catalog(rows: List[Dict[str, Any]]) -> List[FileCatalogEntry]:
    """
    Map tempdb file rows to FileCatalogEntry objects.

    Rows that are neither data (ROWS) nor log files are skipped.

    Raises:
        pydantic.ValidationError: If a row is missing FileName/FileType
            or carries a non-numeric MaxSize
    """
    entries = []
    for row in rows:
        model = TempdbFileModel.model_validate(row)
        if model.file_type.upper() not in _KNOWN_TYPES:
            logger.debug("Skipping tempdb file %s (type %s)", model.logical_name, model.file_type)
            continue
        entries.append(model.to_entry())
    return entries
