"""
Shared test configuration.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

# Add src and tests to path for imports
sys.path.insert(0, str(Path(__file__).parents[1] / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from fakes import file_row  # noqa: E402


@pytest.fixture
def healthy_files() -> list[dict[str, Any]]:
    """Four fixed-growth, uncapped data files and one log file on T:."""
    rows = [file_row(f"T:\\tempdb\\tempdb{i}.mdf", name=f"temp{i}") for i in range(1, 5)]
    rows.append(file_row("T:\\tempdb\\templog.ldf", file_type="LOG", name="templog"))
    return rows
