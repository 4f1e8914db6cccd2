"""
Database session factory for the SQL-backed stores
"""

from pathlib import Path
from typing import Any, Dict, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from schedgraph.core.config_manager import get_config_manager
from schedgraph.core.errors import ConfigurationError
from schedgraph.core.storage.sqlalchemy.models import Base
from schedgraph.logger import get_logger

logger = get_logger(__name__)


def is_postgresql_url(url: str) -> bool:
    """
    Check if connection string is PostgreSQL

    Args:
        url: Database connection string

    Returns:
        True if the URL is PostgreSQL, False otherwise
    """
    return url.startswith("postgresql://") or url.startswith("postgresql+")


def normalize_postgresql_url(url: str) -> str:
    """
    Normalize a PostgreSQL connection string to the sync psycopg2 driver

    URLs that already name a driver are returned unchanged.
    """
    if "+" in url.split("://")[0]:
        return url
    rest = url.split("://", 1)[1]
    return f"postgresql+psycopg2://{rest}"


def create_session_factory(
    connection_string: Optional[str] = None, **kwargs: Any
) -> sessionmaker:
    """
    Create a sync session factory and make sure all tables exist

    Args:
        connection_string: Database URL. Defaults to the configured
            database URL (SCHEDGRAPH_DATABASE_URL / DATABASE_URL / local sqlite file).
            Supported: "sqlite:///path.db", "sqlite:///:memory:", "postgresql://..."
        **kwargs: Additional engine parameters (e.g., pool_size, pool_pre_ping)

    Returns:
        sessionmaker bound to the new engine

    Examples:
        factory = create_session_factory("sqlite:///:memory:")
        store = SqlDependencyStore(factory)
    """
    url = connection_string or get_config_manager().get_database_url()
    engine_kwargs: Dict[str, Any] = {}

    if is_postgresql_url(url):
        url = normalize_postgresql_url(url)
        dialect = "postgresql"
    elif url.startswith("sqlite"):
        dialect = "sqlite"
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        database = make_url(url).database
        if not database or database == ":memory:":
            # One shared connection so every session sees the same in-memory db
            engine_kwargs["poolclass"] = StaticPool
        else:
            Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)
    else:
        raise ConfigurationError(
            f"Unsupported connection string format: {url}",
            what="Unsupported database URL",
            why=f"'{url}' is neither sqlite nor postgresql",
            how_to_fix="Set SCHEDGRAPH_DATABASE_URL to sqlite:///path.db or postgresql://...",
        )

    engine_kwargs.update(kwargs)
    engine = create_engine(url, **engine_kwargs)
    Base.metadata.create_all(engine)
    logger.info(f"Created {dialect} session factory")
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False)


def create_sql_repository(connection_string: Optional[str] = None, **kwargs: Any):
    """
    Build a DependencyRepository backed by the SQL item and dependency tables

    The repository's items_provider is a SqlScheduleItemsProvider, so callers
    that own the schedule can add items through repository.items_provider.
    """
    from schedgraph.core.dependency.repository import DependencyRepository
    from schedgraph.core.storage.sqlalchemy.dependency_store import SqlDependencyStore
    from schedgraph.core.storage.sqlalchemy.item_provider import SqlScheduleItemsProvider

    session_factory = create_session_factory(connection_string, **kwargs)
    return DependencyRepository(
        SqlScheduleItemsProvider(session_factory),
        SqlDependencyStore(session_factory),
    )


__all__ = [
    "create_session_factory",
    "create_sql_repository",
    "is_postgresql_url",
    "normalize_postgresql_url",
]
