"""
Configuration loader module.

Loads and validates sql_targets.json:

    {
        "targets": [
            {"id": "prod", "server": "SQL01", "instance": "PROD", "auth": "windows"},
            {"id": "dev", "server": "10.0.0.5", "port": 1433, "auth": "sql",
             "username": "checker"}
        ]
    }
"""

import json
import logging
import os
from pathlib import Path
from typing import List

from pydantic import ValidationError

from tempdbaudit.domain.config import AuthType, SqlTarget
from tempdbaudit.domain.errors import ConfigurationError


logger = logging.getLogger(__name__)

# Fallback password for SQL-auth targets that carry none
PASSWORD_ENV_VAR = "TEMPDBAUDIT_PASSWORD"


class ConfigLoader:
    """Load and validate target configuration files."""

    def __init__(self, config_dir: str | Path = "."):
        self.config_dir = Path(config_dir)
        logger.debug("ConfigLoader initialized with directory: %s", self.config_dir)

    def _resolve(self, filename: str | Path) -> Path:
        path = Path(filename)
        if path.is_absolute():
            return path
        return self.config_dir / path

    def _load_json_file(self, filepath: Path) -> dict:
        """
        Load and parse a JSON file with clear error messages.

        Raises:
            ConfigurationError: If the file is missing, unreadable, empty or malformed
        """
        if not filepath.exists():
            raise ConfigurationError(
                f"Configuration file not found: {filepath}\n"
                f"Hint: Copy config/sql_targets.example.json and customize it."
            )

        try:
            content = filepath.read_text(encoding="utf-8")
        except PermissionError as e:
            raise ConfigurationError(
                f"Cannot read config file (permission denied): {filepath}"
            ) from e

        if not content.strip():
            raise ConfigurationError(f"Configuration file is empty: {filepath}")

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {filepath}\n"
                f"Error at line {e.lineno}, column {e.colno}: {e.msg}"
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a JSON object at top level: {filepath}")
        return data

    def load_sql_targets(self, filename: str | Path = "sql_targets.json") -> List[SqlTarget]:
        """
        Load enabled SQL Server targets.

        Raises:
            ConfigurationError: If the file or any target definition is invalid
        """
        filepath = self._resolve(filename)
        logger.info("Loading SQL targets from: %s", filepath)

        data = self._load_json_file(filepath)
        items = data.get("targets", [])
        if not isinstance(items, list):
            raise ConfigurationError(f"'targets' must be a list in {filepath}")

        targets = []
        for index, item in enumerate(items):
            try:
                target = SqlTarget.model_validate(item)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid target #{index + 1} in {filepath}:\n{e}") from e

            if not target.enabled:
                logger.info("Skipping disabled target: %s", target.display_name)
                continue

            targets.append(apply_password_env(target))
            logger.debug("Loaded target: %s", target.display_name)

        if not targets:
            logger.warning("No enabled targets in %s", filepath)
        logger.info("Loaded %d SQL Server targets", len(targets))
        return targets


def apply_password_env(target: SqlTarget) -> SqlTarget:
    """Fill a missing SQL-auth password from TEMPDBAUDIT_PASSWORD."""
    if target.auth_type is AuthType.SQL and not target.password:
        password = os.environ.get(PASSWORD_ENV_VAR)
        if password:
            return target.model_copy(update={"password": password})
    return target
