"""
Shared fixtures for schedgraph tests.

In-memory providers/stores for the core, and a SQLite in-memory engine with
StaticPool for the SQLAlchemy-backed stores.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from schedgraph.core.config_manager import get_config_manager
from schedgraph.core.dependency.repository import DependencyRepository
from schedgraph.core.storage.memory import InMemoryDependencyStore, InMemoryScheduleItemsProvider
from schedgraph.core.storage.sqlalchemy.models import Base
from schedgraph.core.types import ScheduleItem
from schedgraph.examples.data import (
    EXAMPLE_SCHEDULE_ID,
    get_example_dependencies,
    get_example_items,
)

SCHEDULE_ID = EXAMPLE_SCHEDULE_ID


@pytest.fixture(autouse=True)
def _reset_config(monkeypatch):
    """Isolate tests from the developer's environment and from each other."""
    monkeypatch.delenv("SCHEDGRAPH_MAX_LAG_DAYS", raising=False)
    monkeypatch.delenv("SCHEDGRAPH_DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    get_config_manager().clear()
    yield
    get_config_manager().clear()


@pytest.fixture
def example_items():
    return [ScheduleItem.from_dict(data) for data in get_example_items()]


@pytest.fixture
def items_provider(example_items):
    return InMemoryScheduleItemsProvider({SCHEDULE_ID: example_items})


@pytest.fixture
def store():
    return InMemoryDependencyStore()


@pytest.fixture
def repository(items_provider, store):
    """Repository over the example items, no dependencies yet."""
    return DependencyRepository(items_provider, store, max_lag_days=None)


@pytest.fixture
def seeded_repository(repository):
    """Repository holding the six example dependencies dep1..dep6."""
    for data in get_example_dependencies():
        repository.create(
            SCHEDULE_ID,
            data["predecessorId"],
            data["successorId"],
            type=data["type"],
            lag=data["lag"],
            dependency_id=data["id"],
        )
    return repository


@pytest.fixture
def engine():
    """SQLite in-memory engine with all tables."""
    eng = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    """Provide a SQLAlchemy session factory."""
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False)
