from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional

from schedgraph.core.errors import ConfigurationError
from schedgraph.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ITEM_TABLE_NAME = "schedgraph_schedule_items"
DEFAULT_DEPENDENCY_TABLE_NAME = "schedgraph_dependencies"
DEFAULT_REVISION_TABLE_NAME = "schedgraph_schedule_revisions"


def _default_database_url() -> str:
    data_dir = Path.home() / ".schedgraph" / "data"
    return f"sqlite:///{data_dir / 'schedgraph.db'}"


@dataclass
class ConfigManager:
    """
    Typed configuration for schedgraph.

    Values come from explicit overrides first, then environment variables,
    then defaults. Tests call clear() to drop overrides.

    Usage examples
    --------------
        from schedgraph.core.config_manager import get_config_manager

        cm = get_config_manager()
        cm.load_env_files([Path.cwd() / ".env"], override=False)
        cm.set_max_lag_days(30)
        url = cm.get_database_url()
    """

    _overrides: Dict[str, object] = field(default_factory=dict)

    def load_env_files(self, paths: Iterable[Path], override: bool = False) -> None:
        """Load the first existing .env file from the provided paths."""
        from dotenv import load_dotenv

        for env_path in paths:
            if env_path.exists():
                load_dotenv(env_path, override=override)
                logger.debug("Loaded .env file from %s", env_path)
                return

    def set_database_url(self, url: Optional[str]) -> None:
        self._set("database_url", url)

    def get_database_url(self) -> str:
        if "database_url" in self._overrides:
            return str(self._overrides["database_url"])
        return (
            os.getenv("SCHEDGRAPH_DATABASE_URL")
            or os.getenv("DATABASE_URL")
            or _default_database_url()
        )

    def set_max_lag_days(self, max_lag_days: Optional[int]) -> None:
        """
        Override the lag bound; None means unbounded, even if
        SCHEDGRAPH_MAX_LAG_DAYS is set. clear() drops the override.
        """
        if max_lag_days is not None and (
            not isinstance(max_lag_days, int) or isinstance(max_lag_days, bool) or max_lag_days < 0
        ):
            raise ConfigurationError(
                f"max_lag_days must be a non-negative integer, got {max_lag_days!r}"
            )
        self._overrides["max_lag_days"] = max_lag_days

    def get_max_lag_days(self) -> Optional[int]:
        """Upper bound for lag in days; None means unbounded"""
        if "max_lag_days" in self._overrides:
            return self._overrides["max_lag_days"]  # type: ignore[return-value]
        raw = os.getenv("SCHEDGRAPH_MAX_LAG_DAYS")
        if raw is None or raw.strip() == "":
            return None
        try:
            value = int(raw)
        except ValueError as e:
            raise ConfigurationError(
                "Invalid SCHEDGRAPH_MAX_LAG_DAYS",
                what="Invalid SCHEDGRAPH_MAX_LAG_DAYS",
                why=f"'{raw}' is not an integer",
                how_to_fix="Set SCHEDGRAPH_MAX_LAG_DAYS to a non-negative integer or unset it",
            ) from e
        if value < 0:
            raise ConfigurationError(f"SCHEDGRAPH_MAX_LAG_DAYS must be >= 0, got {value}")
        return value

    def get_item_table_name(self) -> str:
        return os.getenv("SCHEDGRAPH_ITEM_TABLE_NAME", DEFAULT_ITEM_TABLE_NAME)

    def get_dependency_table_name(self) -> str:
        return os.getenv("SCHEDGRAPH_DEPENDENCY_TABLE_NAME", DEFAULT_DEPENDENCY_TABLE_NAME)

    def get_revision_table_name(self) -> str:
        return os.getenv("SCHEDGRAPH_REVISION_TABLE_NAME", DEFAULT_REVISION_TABLE_NAME)

    def clear(self) -> None:
        self._overrides.clear()

    def _set(self, key: str, value: object) -> None:
        if value is None:
            self._overrides.pop(key, None)
        else:
            self._overrides[key] = value


_config_manager = ConfigManager()


def get_config_manager() -> ConfigManager:
    return _config_manager


__all__ = ["ConfigManager", "get_config_manager"]
