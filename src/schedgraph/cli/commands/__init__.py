"""
CLI sub-commands, loaded lazily by schedgraph.cli.main.LazyGroup
"""

from functools import lru_cache

from schedgraph.core.dependency.repository import DependencyRepository


@lru_cache(maxsize=None)
def _repository_for(database_url: str) -> DependencyRepository:
    from schedgraph.core.storage.factory import create_sql_repository

    return create_sql_repository(database_url)


def get_repository() -> DependencyRepository:
    """SQL-backed repository for the configured database URL"""
    from schedgraph.core.config_manager import get_config_manager

    return _repository_for(get_config_manager().get_database_url())


def reset_repository_cache() -> None:
    _repository_for.cache_clear()
